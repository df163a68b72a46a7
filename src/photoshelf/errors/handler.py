import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from ..events.bus import EventBus
from ..events.domain_events import DomainEvent


class ErrorSeverity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(frozen=True)
class ErrorOccurredEvent(DomainEvent):
    error: Optional[Exception] = None
    severity: ErrorSeverity = ErrorSeverity.ERROR
    context: dict = field(default_factory=dict)


class ErrorHandler:
    """Log an error, publish it on the bus and forward it to the UI when relevant."""

    def __init__(self, logger: logging.Logger, event_bus: EventBus, notify_warnings: bool = False):
        self._logger = logger
        self._events = event_bus
        self._notify_warnings = notify_warnings
        self._ui_callback: Optional[Callable[[str, ErrorSeverity], None]] = None

    def register_ui_callback(self, callback: Callable[[str, ErrorSeverity], None]):
        self._ui_callback = callback

    def handle(self, error: Exception, severity: ErrorSeverity = ErrorSeverity.ERROR, context: dict = None):
        log_method = getattr(self._logger, severity.value, self._logger.error)
        log_method(f"{error.__class__.__name__}: {error}", extra={"context": context or {}})

        self._events.publish(ErrorOccurredEvent(
            error=error,
            severity=severity,
            context=context or {},
        ))

        notify = severity in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL)
        if self._notify_warnings and severity is ErrorSeverity.WARNING:
            notify = True
        if self._ui_callback and notify:
            self._ui_callback(str(error), severity)
