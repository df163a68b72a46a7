"""Single-slot transient notifications (the toast shown after an action)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal, Slot

from ..config import NOTIFICATION_TIMEOUT_MS


class NotificationSeverity(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    message: str
    severity: NotificationSeverity


class NotificationCenter(QObject):
    """Hold at most one notification and clear it after a fixed delay.

    A new notification replaces the current one and restarts the timer; there
    is no queue.  ``notificationChanged`` carries ``("", "")`` when the slot
    empties, either by timeout or by :meth:`dismiss`.
    """

    notificationChanged = Signal(str, str)

    def __init__(self, timeout_ms: int = NOTIFICATION_TIMEOUT_MS, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._current: Optional[Notification] = None
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(max(0, int(timeout_ms)))
        self._timer.timeout.connect(self.dismiss)

    def current(self) -> Optional[Notification]:
        return self._current

    def timeout_ms(self) -> int:
        return self._timer.interval()

    def is_active(self) -> bool:
        return self._current is not None

    def emit(self, message: str, severity: NotificationSeverity | str = NotificationSeverity.INFO) -> Notification:
        """Show *message*, superseding whatever is displayed."""

        notification = Notification(message=message, severity=NotificationSeverity(severity))
        self._current = notification
        # ``start`` on a running single-shot timer restarts it, so the new
        # message always gets the full display time.
        self._timer.start()
        self.notificationChanged.emit(notification.message, notification.severity.value)
        return notification

    @Slot()
    def dismiss(self) -> None:
        self._timer.stop()
        if self._current is None:
            return
        self._current = None
        self.notificationChanged.emit("", "")


__all__ = ["Notification", "NotificationCenter", "NotificationSeverity"]
