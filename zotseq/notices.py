"""
User-facing notices.

Four kinds of notice exist: info, success, warning and error. Each carries
a human-readable message only. Notifiers never raise: a notice that cannot
be delivered is logged and dropped, so a broken feedback channel cannot
change the outcome of an import.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
import logging

from rich.console import Console

from .errors import ConfigError
from .logging_utils import log_event
from .store.base import PageStore

logger = logging.getLogger(__name__)


class NoticeKind(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    kind: NoticeKind
    message: str


class Notifier(ABC):
    """Delivers notices to the user."""

    @abstractmethod
    async def notify(self, notice: Notice) -> None:
        raise NotImplementedError

    async def info(self, message: str) -> None:
        await self.notify(Notice(NoticeKind.INFO, message))

    async def success(self, message: str) -> None:
        await self.notify(Notice(NoticeKind.SUCCESS, message))

    async def warning(self, message: str) -> None:
        await self.notify(Notice(NoticeKind.WARNING, message))

    async def error(self, message: str) -> None:
        await self.notify(Notice(NoticeKind.ERROR, message))


_CONSOLE_STYLES = {
    NoticeKind.INFO: ("cyan", "…"),
    NoticeKind.SUCCESS: ("green", "✓"),
    NoticeKind.WARNING: ("yellow", "⚠"),
    NoticeKind.ERROR: ("red", "✗"),
}


class ConsoleNotifier(Notifier):
    """Prints notices to a rich console."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    async def notify(self, notice: Notice) -> None:
        style, marker = _CONSOLE_STYLES[notice.kind]
        try:
            self.console.print(f"{marker} {notice.message}", style=style, markup=False)
        except Exception as exc:  # noqa: BLE001
            _delivery_failed(notice, exc)


class LogseqNotifier(Notifier):
    """Shows notices as toasts inside Logseq."""

    def __init__(self, store: PageStore):
        self._store = store

    async def notify(self, notice: Notice) -> None:
        try:
            await self._store.show_message(notice.message, notice.kind.value)
        except Exception as exc:  # noqa: BLE001
            _delivery_failed(notice, exc)


class CompositeNotifier(Notifier):
    """Fans each notice out to several notifiers."""

    def __init__(self, notifiers: list[Notifier]):
        self.notifiers = notifiers

    async def notify(self, notice: Notice) -> None:
        for notifier in self.notifiers:
            try:
                await notifier.notify(notice)
            except Exception as exc:  # noqa: BLE001
                _delivery_failed(notice, exc)


def _delivery_failed(notice: Notice, exc: Exception) -> None:
    log_event(
        logger,
        "Notice delivery failed",
        level=logging.WARNING,
        event="notice_failed",
        kind=notice.kind.value,
        notice=notice.message,
        error=f"{type(exc).__name__}: {exc}",
    )


def build_notifier(mode: str, store: PageStore, console: Console | None = None) -> Notifier:
    """Build the notifier for a config mode: "console", "logseq" or "both"."""
    mode = mode.lower().strip()
    if mode == "console":
        return ConsoleNotifier(console)
    if mode == "logseq":
        return LogseqNotifier(store)
    if mode == "both":
        return CompositeNotifier([ConsoleNotifier(console), LogseqNotifier(store)])
    raise ConfigError(f"Unsupported notice mode: {mode}. Supported: both, console, logseq")
