"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import closing
from logging import getLogger
from typing import TYPE_CHECKING

from crissync.adapters.orcid import OrcidClient
from crissync.config import get_orcid_config, get_sync_config
from crissync.domain.sync import (
    ArgumentError,
    FetchPool,
    FundingKind,
    IdentifierComparator,
    ReconciliationEngine,
    WeightedWorkComparator,
    WorkKind,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from crissync.config import SyncConfig
    from crissync.domain.model import ActivitySummary
    from crissync.domain.ports import ProfileClient
    from crissync.domain.sync import (
        ActivityComparator,
        ActivityKind,
        ExportReport,
        InvalidImport,
        ProgressHandler,
    )

ClientFactory = Callable[[], "ProfileClient"]

KIND_NAMES = ("works", "fundings")


log = getLogger(__name__)


def _default_client() -> ProfileClient:
    return OrcidClient(config=get_orcid_config())


def resolve_kind(
    name: str, sync_config: SyncConfig
) -> ActivityKind[ActivitySummary, ActivitySummary]:
    if name == "works":
        return WorkKind(bulk_size=sync_config.work_bulk_size)
    if name == "fundings":
        return FundingKind()
    raise ArgumentError(f"Unknown activity kind: {name!r}")


def resolve_comparator(
    name: str, sync_config: SyncConfig
) -> ActivityComparator[ActivitySummary]:
    if name == "works" and sync_config.grouping_threshold is not None:
        return WeightedWorkComparator(sync_config.grouping_threshold)
    return IdentifierComparator()


def build_engine(
    kind: str,
    *,
    client: ProfileClient | None = None,
    pool: FetchPool | None = None,
    sync_config: SyncConfig | None = None,
    progress: ProgressHandler | None = None,
    types: Iterable[str] | None = None,
) -> ReconciliationEngine[ActivitySummary, ActivitySummary]:
    """Wire an engine for one activity kind from configuration."""

    config = sync_config or get_sync_config()
    return ReconciliationEngine(
        resolve_kind(kind, config),
        client or _default_client(),
        pool=pool or FetchPool(config.fetch_workers, config.fetch_timeout_seconds),
        comparator=resolve_comparator(kind, config),
        progress=progress,
        types=types,
    )


def export_activities(
    kind: str,
    local: Sequence[ActivitySummary],
    *,
    force: bool = False,
    types: Iterable[str] | None = None,
    client_factory: ClientFactory | None = None,
    sync_config: SyncConfig | None = None,
) -> ExportReport:
    """Push local activities of one kind to the remote profile."""

    config = sync_config or get_sync_config()
    with (
        closing((client_factory or _default_client)()) as client,
        FetchPool(config.fetch_workers, config.fetch_timeout_seconds) as pool,
    ):
        engine = build_engine(kind, client=client, pool=pool, sync_config=config, types=types)
        log.info("Starting %s export: local=%d, force=%s", kind, len(local), force)
        report = engine.export(local, force=force)
    log.info(
        "Finished %s export: outcomes=%d, deletions=%d", kind, len(report), len(report.deletions)
    )
    return report


def import_activities(
    kind: str,
    local: Sequence[ActivitySummary],
    *,
    types: Iterable[str] | None = None,
    client_factory: ClientFactory | None = None,
    sync_config: SyncConfig | None = None,
) -> list[ActivitySummary]:
    """Remote activities of one kind the local side does not know yet."""

    config = sync_config or get_sync_config()
    with (
        closing((client_factory or _default_client)()) as client,
        FetchPool(config.fetch_workers, config.fetch_timeout_seconds) as pool,
    ):
        engine = build_engine(kind, client=client, pool=pool, sync_config=config, types=types)
        candidates = engine.import_activities(local)
    log.info("Finished %s import: candidates=%d", kind, len(candidates))
    return candidates


def import_updates(
    kind: str,
    local: Sequence[ActivitySummary],
    *,
    types: Iterable[str] | None = None,
    client_factory: ClientFactory | None = None,
    sync_config: SyncConfig | None = None,
) -> list[ActivitySummary]:
    """Remote records that add identifiers to local activities, keyed locally."""

    config = sync_config or get_sync_config()
    with (
        closing((client_factory or _default_client)()) as client,
        FetchPool(config.fetch_workers, config.fetch_timeout_seconds) as pool,
    ):
        engine = build_engine(kind, client=client, pool=pool, sync_config=config, types=types)
        updates = engine.import_updates(local)
    log.info("Finished %s update import: updates=%d", kind, len(updates))
    return updates


def count_imports(
    kind: str,
    local: Sequence[ActivitySummary],
    *,
    types: Iterable[str] | None = None,
    client_factory: ClientFactory | None = None,
    sync_config: SyncConfig | None = None,
) -> int:
    config = sync_config or get_sync_config()
    with (
        closing((client_factory or _default_client)()) as client,
        FetchPool(config.fetch_workers, config.fetch_timeout_seconds) as pool,
    ):
        engine = build_engine(kind, client=client, pool=pool, sync_config=config, types=types)
        return engine.import_counter(local)


def invalid_imports(
    kind: str,
    local: Sequence[ActivitySummary],
    *,
    types: Iterable[str] | None = None,
    client_factory: ClientFactory | None = None,
    sync_config: SyncConfig | None = None,
) -> list[InvalidImport[ActivitySummary]]:
    config = sync_config or get_sync_config()
    with (
        closing((client_factory or _default_client)()) as client,
        FetchPool(config.fetch_workers, config.fetch_timeout_seconds) as pool,
    ):
        engine = build_engine(kind, client=client, pool=pool, sync_config=config, types=types)
        return engine.import_invalid(local)
