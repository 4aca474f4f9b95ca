from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from .enums import OutcomeKind
from .exceptions import ConflictError, DomainError, NotFoundError, ValidationError

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Tagged result returned by services for expected business outcomes.

    ``value`` is set only when ``kind`` is OK; ``message`` carries the
    human readable reason otherwise.
    """

    kind: OutcomeKind
    value: Optional[T] = None
    message: Optional[str] = None

    @property
    def is_ok(self) -> bool:
        return self.kind == OutcomeKind.OK

    @classmethod
    def ok(cls, value: T) -> "Outcome[T]":
        return cls(OutcomeKind.OK, value=value)

    @classmethod
    def not_found(cls, message: str) -> "Outcome[T]":
        return cls(OutcomeKind.NOT_FOUND, message=message)

    @classmethod
    def conflict(cls, message: str) -> "Outcome[T]":
        return cls(OutcomeKind.CONFLICT, message=message)

    @classmethod
    def bad_request(cls, message: str) -> "Outcome[T]":
        return cls(OutcomeKind.BAD_REQUEST, message=message)

    @classmethod
    def from_error(cls, error: DomainError) -> "Outcome[T]":
        if isinstance(error, NotFoundError):
            return cls.not_found(str(error))
        if isinstance(error, ConflictError):
            return cls.conflict(str(error))
        if isinstance(error, ValidationError):
            return cls.bad_request(str(error))
        raise TypeError(f"Unsupported domain error: {type(error)!r}")
