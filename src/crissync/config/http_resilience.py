"""HTTP behaviour settings for talking to the ORCID API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final, Literal

if TYPE_CHECKING:
    from collections.abc import Mapping

# 409 (duplicate put) and other 4xx answers are final
RETRYABLE_STATUSES: Final = frozenset({429, 500, 502, 503, 504})


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Backoff for reads, updates and deletes. Adds are sent exactly once."""

    total: int = 4
    backoff_factor: float = 0.5
    backoff_jitter: float = 1.0
    max_backoff_wait: float = 60.0
    statuses: frozenset[int] = RETRYABLE_STATUSES


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


type CacheBackend = Literal["sqlite", "memory"]


@dataclass(slots=True, frozen=True)
class CacheConfig:
    backend: CacheBackend = "memory"
    sqlite_path: str | None = None
    ttl_seconds: float | None = None


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = None
    headers: Mapping[str, str] | None = None
