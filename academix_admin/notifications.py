"""
Transient user notifications.

Controllers report outcomes (created, partial upload, delete failed, ...)
through a Notifier instead of raising. The console entry point uses
ConsoleNotifier; embedding UIs and tests use MemoryNotifier.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from rich.console import Console

from academix_admin.logging_config import get_logger


logger = get_logger("notifications")


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Notification:
    level: NotificationLevel
    title: str
    message: str
    created_at: datetime = field(default_factory=datetime.now)


class Notifier:
    """Base notifier; subclasses override `notify`"""

    def notify(self, level: NotificationLevel, title: str, message: str) -> None:
        log_level = {
            NotificationLevel.ERROR: "error",
            NotificationLevel.WARNING: "warning",
        }.get(level, "info")
        getattr(logger, log_level)(f"{title}: {message}")

    def success(self, title: str, message: str) -> None:
        self.notify(NotificationLevel.SUCCESS, title, message)

    def info(self, title: str, message: str) -> None:
        self.notify(NotificationLevel.INFO, title, message)

    def warning(self, title: str, message: str) -> None:
        self.notify(NotificationLevel.WARNING, title, message)

    def error(self, title: str, message: str) -> None:
        self.notify(NotificationLevel.ERROR, title, message)


class ConsoleNotifier(Notifier):
    """Prints notifications with rich markup"""

    STYLES = {
        NotificationLevel.SUCCESS: ("green", "✓"),
        NotificationLevel.INFO: ("cyan", "ℹ"),
        NotificationLevel.WARNING: ("yellow", "!"),
        NotificationLevel.ERROR: ("red", "✗"),
    }

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def notify(self, level: NotificationLevel, title: str, message: str) -> None:
        style, icon = self.STYLES[level]
        self.console.print(f"[{style}]{icon} {title}:[/{style}] {message}")


class MemoryNotifier(Notifier):
    """Keeps every notification in order"""

    def __init__(self):
        self.notifications: List[Notification] = []

    def notify(self, level: NotificationLevel, title: str, message: str) -> None:
        super().notify(level, title, message)
        self.notifications.append(Notification(level=level, title=title, message=message))

    def of_level(self, level: NotificationLevel) -> List[Notification]:
        return [n for n in self.notifications if n.level == level]

    @property
    def last(self) -> Optional[Notification]:
        return self.notifications[-1] if self.notifications else None

    def clear(self) -> None:
        self.notifications.clear()
