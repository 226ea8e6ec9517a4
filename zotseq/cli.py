"""
Command-line interface for zotseq.

Uses Typer to provide a CLI with options for the main configuration
settings. Supports loading .env files for the Logseq API token.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from .config import AppConfig, load_config
from .core.types import ImportStatus
from .errors import ConfigError
from .runner import run_import_key, run_search_and_import

try:
    from dotenv import load_dotenv
except Exception:  # noqa: BLE001
    load_dotenv = None

app = typer.Typer(add_completion=False, help="Search Zotero and import items into Logseq.")
console = Console()


def _load(
    config: Path | None,
    log_level: str | None,
    log_file: bool | None,
    notices: str | None,
    logseq_token: str | None,
) -> AppConfig:
    # Load environment variables from .env if available
    if load_dotenv is not None:
        load_dotenv()

    cfg = load_config(str(config) if config else None)

    if logseq_token:
        cfg.logseq.token = logseq_token
    if log_level:
        cfg.logging.level = log_level
    if log_file is not None:
        cfg.logging.file = log_file
    if notices:
        cfg.importing.notices = notices
    return cfg


@app.command()
def search(
    query: str = typer.Argument(..., help="Zotero quick-search string."),
    select: list[int] | None = typer.Option(
        None, "--import", "-n", help="Import result number N (repeatable)."
    ),
    auto: bool = typer.Option(False, "--auto", help="Import the first result not yet in the graph."),
    interactive: bool = typer.Option(
        False, "--interactive", "-I", help="Prompt for result numbers to import."
    ),
    link_block: str | None = typer.Option(
        None, "--link-block", help="Block uuid to insert a [[page]] link after."
    ),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
    notices: str | None = typer.Option(
        None, "--notices", help="Notice output: console, logseq, or both."
    ),
    logseq_token: str | None = typer.Option(
        None,
        "--logseq-token",
        envvar="LOGSEQ_API_TOKEN",
        help="Logseq API server token (or set LOGSEQ_API_TOKEN / .env).",
    ),
):
    """Search Zotero, show which results are already in the graph, and import.

    Without --import, --auto or --interactive only the result table is shown.
    """
    cfg = _load(config, log_level, log_file, notices, logseq_token)
    try:
        run_search_and_import(
            query,
            cfg,
            select=select or [],
            auto_first_new=auto,
            interactive=interactive,
            link_target=link_block,
            console=console,
        )
    except ConfigError as exc:
        console.print(str(exc), style="red", markup=False)
        raise typer.Exit(code=2) from exc


@app.command("import")
def import_item(
    key: str = typer.Argument(..., help="Zotero item key."),
    link_block: str | None = typer.Option(
        None, "--link-block", help="Block uuid to insert a [[page]] link after."
    ),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
    notices: str | None = typer.Option(
        None, "--notices", help="Notice output: console, logseq, or both."
    ),
    logseq_token: str | None = typer.Option(
        None,
        "--logseq-token",
        envvar="LOGSEQ_API_TOKEN",
        help="Logseq API server token (or set LOGSEQ_API_TOKEN / .env).",
    ),
):
    """Import a single Zotero item by key."""
    cfg = _load(config, log_level, log_file, notices, logseq_token)
    try:
        outcome = run_import_key(key, cfg, link_target=link_block, console=console)
    except ConfigError as exc:
        console.print(str(exc), style="red", markup=False)
        raise typer.Exit(code=2) from exc
    if outcome is None or outcome.status == ImportStatus.FAILED:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
