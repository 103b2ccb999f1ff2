"""Reconciliation defaults: fetch pool sizing and duplicate grouping."""

from __future__ import annotations

from dataclasses import dataclass

from .env import float_env_var, int_env_var

DEFAULT_FETCH_WORKERS = 10
DEFAULT_FETCH_TIMEOUT_SECONDS = 100.0
DEFAULT_WORK_BULK_SIZE = 50
# largest put-code list one ORCID bulk read accepts
MAX_WORK_BULK_SIZE = 100


@dataclass(frozen=True, slots=True)
class SyncConfig:
    fetch_workers: int = DEFAULT_FETCH_WORKERS
    fetch_timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS
    work_bulk_size: int = DEFAULT_WORK_BULK_SIZE
    # None keeps identifier-based grouping; a value switches works to weighted matching
    grouping_threshold: float | None = None


def get_sync_config() -> SyncConfig:
    timeout = float_env_var("CRISSYNC_FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT_SECONDS)
    return SyncConfig(
        fetch_workers=int_env_var("CRISSYNC_FETCH_WORKERS", DEFAULT_FETCH_WORKERS, minimum=1),
        fetch_timeout_seconds=(
            timeout if timeout is not None else DEFAULT_FETCH_TIMEOUT_SECONDS
        ),
        work_bulk_size=int_env_var(
            "CRISSYNC_WORK_BULK_SIZE",
            DEFAULT_WORK_BULK_SIZE,
            minimum=1,
            maximum=MAX_WORK_BULK_SIZE,
        ),
        grouping_threshold=float_env_var("CRISSYNC_GROUPING_THRESHOLD", None),
    )
