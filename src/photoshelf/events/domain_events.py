from dataclasses import dataclass, field
from datetime import datetime
from uuid import uuid4


@dataclass(frozen=True)
class DomainEvent:
    """Base of everything published on the gallery's event bus.

    ``source`` names the component that published the event.
    """

    event_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=datetime.now)
    source: str = ""

    @property
    def name(self) -> str:
        return type(self).__name__
