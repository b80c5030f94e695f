"""
Type definitions for mongo-legacy.

Provides the result types returned by collection commands, the
exception hierarchy raised by the transport, and the type aliases
shared across the package.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Mapping, MutableMapping, Sequence, TypeVar

V = TypeVar("V")


@dataclass(frozen=True)
class Ok(Generic[V]):
    """
    Successful command result.

    Always truthy, so a count of zero is never mistaken for a failure.

    Attributes:
        value: The interpreted result (a count, a validation report, ...).
    """

    value: V

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class Failed:
    """
    Command result the server did not acknowledge.

    Always falsy.

    Attributes:
        reason: The server error message, if one was returned.
    """

    reason: str = "command was not acknowledged"

    def __bool__(self) -> bool:
        return False


Result = Ok[V] | Failed

# Type aliases for clarity
Document = MutableMapping[str, Any]
Filter = Mapping[str, Any]
Projection = Mapping[str, Any] | Sequence[str] | None
Sort = list[tuple[str, int]] | None
WriteOptions = Mapping[str, Any]


class IndexSpecWarning(UserWarning):
    """Issued when an index key specification cannot be encoded."""


class MongoError(Exception):
    """Base exception for MongoDB operations."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class ConnectionError(MongoError):
    """Error raised when connection to MongoDB fails."""

    pass


class QueryError(MongoError):
    """Error raised when a query fails."""

    def __init__(
        self,
        message: str,
        code: int | None = None,
        suggestion: str | None = None,
    ) -> None:
        super().__init__(message, code)
        self.suggestion = suggestion


class WriteError(MongoError):
    """Error raised when a write operation fails."""

    pass


class DuplicateKeyError(WriteError):
    """Error raised when inserting a document with a duplicate key."""

    pass


class OperationFailure(MongoError):
    """Error raised when an operation fails on the server."""

    pass
