"""Error definitions for the synchronisation core."""

from __future__ import annotations

from typing import TYPE_CHECKING

from crissync.domain.ports.profile import CommunicationError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from crissync.domain.model import InvalidField


class ArgumentError(ValueError):
    """Raised when a required input to a local operation is missing."""


class InvalidActivityError(ValueError):
    """Raised when an activity fails the minimal quality criteria."""

    def __init__(self, invalid_fields: Iterable[InvalidField]) -> None:
        self.invalid_fields = frozenset(invalid_fields)
        super().__init__(
            "Activity fails quality criteria: "
            + ", ".join(sorted(str(field) for field in self.invalid_fields))
        )


class FetchTimeoutError(CommunicationError):
    """Raised for keys whose fetch did not complete before the pool deadline."""
