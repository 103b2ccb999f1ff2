"""Domain port definitions for adapters."""

from __future__ import annotations

from .profile import BulkFetchUnsupportedError, CommunicationError, ProfileClient

__all__ = [
    "BulkFetchUnsupportedError",
    "CommunicationError",
    "ProfileClient",
]
