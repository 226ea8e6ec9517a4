"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- ZoteroConfig: Zotero local API settings
- LogseqConfig: Logseq HTTP API settings
- ImportConfig: Notice routing and import behavior
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Any

import yaml


@dataclass
class ZoteroConfig:
    """Configuration for the Zotero local API.

    Attributes:
        base_url: Base URL of the local API exposed by the Zotero desktop app
        library: Library path segment ("users/0" is the local user library)
        qmode: Zotero quick-search mode ("everything" searches all fields)
        sort: Sort field requested from Zotero
        direction: Sort direction ("desc" for most recent first)
        limit: Optional maximum number of results
        timeout_seconds: Request timeout, or None to wait indefinitely
        trust_env: Whether to respect system proxy settings
    """

    base_url: str = "http://localhost:23119/api"
    library: str = "users/0"
    qmode: str = "everything"
    sort: str = "dateAdded"
    direction: str = "desc"
    limit: int | None = None
    timeout_seconds: float | None = None
    trust_env: bool = False


@dataclass
class LogseqConfig:
    """Configuration for the Logseq HTTP API server.

    Attributes:
        api_url: Endpoint of the Logseq API server
        token: Authorization token (overrides the environment variable)
        token_env: Environment variable name containing the token
        timeout_seconds: Request timeout, or None to wait indefinitely
        trust_env: Whether to respect system proxy settings
    """

    api_url: str = "http://127.0.0.1:12315/api"
    token: str | None = None
    token_env: str = "LOGSEQ_API_TOKEN"
    timeout_seconds: float | None = None
    trust_env: bool = False


@dataclass
class ImportConfig:
    """Configuration for import behavior.

    Attributes:
        notices: Where user-facing notices go ("console", "logseq", or "both")
        render_results: Whether to print the result table after a search
    """

    notices: str = "console"
    render_results: bool = True


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        directory: Directory for the log file
        filename: Name of the log file
    """

    level: str = "WARNING"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    directory: str = ".zotseq"
    filename: str = "zotseq.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    zotero: ZoteroConfig = field(default_factory=ZoteroConfig)
    logseq: LogseqConfig = field(default_factory=LogseqConfig)
    importing: ImportConfig = field(default_factory=ImportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig.

    Unknown sections and unknown keys are ignored.
    """
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update({k: v for k, v in value.items() if k in data[key]})
    return _fromdict(data)


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    return {
        "zotero": {
            "base_url": cfg.zotero.base_url,
            "library": cfg.zotero.library,
            "qmode": cfg.zotero.qmode,
            "sort": cfg.zotero.sort,
            "direction": cfg.zotero.direction,
            "limit": cfg.zotero.limit,
            "timeout_seconds": cfg.zotero.timeout_seconds,
            "trust_env": cfg.zotero.trust_env,
        },
        "logseq": {
            "api_url": cfg.logseq.api_url,
            "token": cfg.logseq.token,
            "token_env": cfg.logseq.token_env,
            "timeout_seconds": cfg.logseq.timeout_seconds,
            "trust_env": cfg.logseq.trust_env,
        },
        "importing": {
            "notices": cfg.importing.notices,
            "render_results": cfg.importing.render_results,
        },
        "logging": {
            "level": cfg.logging.level,
            "console": cfg.logging.console,
            "file": cfg.logging.file,
            "format": cfg.logging.format,
            "directory": cfg.logging.directory,
            "filename": cfg.logging.filename,
        },
    }


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        zotero=ZoteroConfig(**data["zotero"]),
        logseq=LogseqConfig(**data["logseq"]),
        importing=ImportConfig(**data["importing"]),
        logging=LoggingConfig(**data["logging"]),
    )


def get_logseq_token(cfg: LogseqConfig) -> str | None:
    """Get the Logseq API token from inline config or environment variable."""
    if cfg.token:
        return cfg.token
    return os.getenv(cfg.token_env)
