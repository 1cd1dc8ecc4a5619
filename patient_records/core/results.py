"""
Explicit operation outcomes.

Service operations return either ``Ok`` wrapping a value or ``Failure``
describing why the operation could not complete. Callers branch on the
variant instead of catching exceptions.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    """Failure categories shared by every operation."""

    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    INVALID_CREDENTIAL = "invalid_credential"
    INVALID_TOKEN = "invalid_token"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    INTERNAL = "internal"


STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.CONFLICT: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_CREDENTIAL: 401,
    ErrorKind.INVALID_TOKEN: 403,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.INTERNAL: 500,
}


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str
    detail: Optional[str] = None

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]


Result = Union[Ok[T], Failure]


__all__ = ["ErrorKind", "Failure", "Ok", "Result", "STATUS_CODES"]
