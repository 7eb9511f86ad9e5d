"""Closed set of failure kinds shared by the store adapters, the service and the API."""

from dataclasses import dataclass, field
from enum import Enum


class ErrorKind(Enum):
    VALIDATION = "validation"
    MALFORMED_IDENTIFIER = "malformed_identifier"
    DUPLICATE_EMAIL = "duplicate_email"
    NOT_FOUND = "not_found"
    STORE_FAILURE = "store_failure"


class StoreError(Exception):
    """Raised by repositories. kind says what went wrong; callers never parse the message."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message


@dataclass(frozen=True)
class Failure:
    """An expected, terminal outcome of a use case (bad input, missing record, duplicate)."""

    kind: ErrorKind
    message: str
    details: tuple[str, ...] = field(default=())
