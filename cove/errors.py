"""Exception types raised by COVE."""

from __future__ import annotations


class CoveError(Exception):
    """Base class for COVE errors."""


class BuildError(CoveError):
    """The index could not be built (malformed count, duplicate key under FAIL policy)."""


class QueryError(CoveError, ValueError):
    """A query was rejected before touching the index. Maps to a client error."""


class InvalidDateFormat(QueryError):
    def __init__(self, pattern: str) -> None:
        super().__init__(f"Invalid date format. Must be in {pattern} format")
        self.pattern = pattern


class InvalidRegionConstraint(QueryError):
    def __init__(self) -> None:
        super().__init__(
            "The `country` request parameter may not equal 'total' "
            "if a specific `region` is provided."
        )
