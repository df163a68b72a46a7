import logging
import threading
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Type

from .domain_events import DomainEvent


@dataclass
class Subscription:
    """Handle returned by subscribe(); can be used to unsubscribe."""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    event_type: Type = DomainEvent
    handler: Callable = field(default=lambda e: None)
    active: bool = True

    def cancel(self):
        self.active = False


class EventBus:
    """Type-keyed publish/subscribe hub shared by the store and the GUI layer.

    Handlers run inline on the publishing thread, in subscription order.  A
    failing handler is logged and never propagates back to the publisher.
    """

    def __init__(self, logger: logging.Logger = None):
        self._logger = logger or logging.getLogger(__name__)
        self._handlers: Dict[Type[DomainEvent], List[Subscription]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event_type: Type[DomainEvent], handler: Callable) -> Subscription:
        sub = Subscription(event_type=event_type, handler=handler)
        with self._lock:
            self._handlers[event_type].append(sub)
        return sub

    def unsubscribe(self, subscription: Subscription):
        subscription.active = False
        with self._lock:
            for subs in self._handlers.values():
                try:
                    subs.remove(subscription)
                except ValueError:
                    pass

    def publish(self, event: DomainEvent):
        event_type = type(event)

        with self._lock:
            subs = list(self._handlers[event_type])

        for sub in subs:
            if not sub.active:
                continue
            try:
                sub.handler(event)
            except Exception as e:
                self._logger.error(f"Handler failed for {event.name} from {event.source or '?'}: {e}")
