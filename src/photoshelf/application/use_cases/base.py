from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class UseCaseRequest:
    """Input of a gallery operation."""


@dataclass(frozen=True)
class UseCaseResponse:
    """Outcome of a gallery operation.

    ``error`` explains a refusal; ``message`` is the text a front end shows
    after the operation took effect.  A successful response may still carry
    an ``error`` (an admission that dropped invalid files, for instance).
    """

    success: bool = True
    error: Optional[str] = None
    message: Optional[str] = None


class UseCase(ABC):
    """One user-level operation on the gallery."""

    @abstractmethod
    def execute(self, request: UseCaseRequest) -> UseCaseResponse:
        ...
