"""Activity kinds: the per-kind capabilities the reconciliation engine relies on.

A kind bundles what differs between works and fundings (which listing slice to
read, which identifier types are recognised, which extra fields are mandatory,
how a duplicate group collapses, and which remote calls read and write records)
so that the engine algorithm is written once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final, Protocol, runtime_checkable

from crissync.domain.model import (
    ActivitySummary,
    FundingIdType,
    InvalidField,
    WorkIdType,
    WorkType,
)

from .diff import equivalent

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from crissync.domain.model import (
        ActivitiesSummary,
        ExternalIdentifier,
        Funding,
        FundingSummary,
        PutCode,
        Work,
        WorkSummary,
    )
    from crissync.domain.ports import ProfileClient

    from .grouping import ActivityGroup


type Metadata = tuple[object, ...]


@runtime_checkable
class ActivityKind[S: ActivitySummary, A: ActivitySummary](Protocol):
    """Capabilities for one kind of activity (``S`` summaries, ``A`` full records)."""

    @property
    def name(self) -> str: ...

    @property
    def bulk_size(self) -> int: ...

    def summaries(self, listing: ActivitiesSummary) -> tuple[S, ...]: ...

    def recognises_id_type(self, id_type: str) -> bool: ...

    def missing_fields(self, summary: S) -> set[InvalidField]: ...

    def metadata(self, summary: S) -> Metadata: ...

    def merge(self, group: ActivityGroup[S]) -> S: ...

    def fetch(self, client: ProfileClient, key: PutCode) -> A: ...

    def fetch_many(self, client: ProfileClient, keys: Sequence[PutCode]) -> dict[PutCode, A]: ...

    def add(self, client: ProfileClient, activity: A) -> PutCode: ...

    def update(self, client: ProfileClient, key: PutCode, activity: A) -> None: ...

    def delete(self, client: ProfileClient, key: PutCode) -> None: ...


def _id_type_token(id_type: str) -> str:
    return id_type.replace("-", "_").upper()


def merged_identifiers(group: Iterable[ActivitySummary]) -> tuple[ExternalIdentifier, ...]:
    """SELF identifiers of every member, deduplicated under equivalence."""

    merged: list[ExternalIdentifier] = []
    for member in group:
        for eid in member.self_ids:
            if not any(equivalent(eid, existing) for existing in merged):
                merged.append(eid)
    return tuple(merged)


def merge_group[S: ActivitySummary](group: ActivityGroup[S]) -> S:
    """Preferred member's metadata and PART_OF ids, plus the group's SELF ids."""

    preferred = group.preferred
    return preferred.with_external_ids(merged_identifiers(group) + preferred.part_of_ids)


def summary_metadata(summary: ActivitySummary) -> Metadata:
    return (summary.title, summary.year, summary.type)


DATE_EXEMPT_WORK_TYPES: Final = frozenset({WorkType.DATA_SET, WorkType.RESEARCH_TECHNIQUE})
DEFAULT_WORK_BULK_SIZE: Final = 50


@dataclass(frozen=True, slots=True)
class WorkKind:
    """Works: publications, datasets and other research outputs."""

    bulk_size: int = DEFAULT_WORK_BULK_SIZE
    date_exempt_types: frozenset[str] = DATE_EXEMPT_WORK_TYPES
    id_types: frozenset[str] = field(
        default_factory=lambda: frozenset(_id_type_token(t) for t in WorkIdType)
    )

    @property
    def name(self) -> str:
        return "works"

    def summaries(self, listing: ActivitiesSummary) -> tuple[WorkSummary, ...]:
        return listing.works

    def recognises_id_type(self, id_type: str) -> bool:
        return _id_type_token(id_type) in self.id_types

    def missing_fields(self, summary: WorkSummary) -> set[InvalidField]:
        if summary.type is not None and summary.type in self.date_exempt_types:
            return set()
        if summary.publication_date is None:
            return {InvalidField.PUBLICATION_DATE}
        if summary.publication_date.year is None:
            return {InvalidField.YEAR}
        return set()

    def metadata(self, summary: WorkSummary) -> Metadata:
        return summary_metadata(summary)

    def merge(self, group: ActivityGroup[WorkSummary]) -> WorkSummary:
        return merge_group(group)

    def fetch(self, client: ProfileClient, key: PutCode) -> Work:
        return client.get_work(key)

    def fetch_many(self, client: ProfileClient, keys: Sequence[PutCode]) -> dict[PutCode, Work]:
        return client.get_works(keys)

    def add(self, client: ProfileClient, activity: Work) -> PutCode:
        return client.add_work(activity)

    def update(self, client: ProfileClient, key: PutCode, activity: Work) -> None:
        client.update_work(key, activity)

    def delete(self, client: ProfileClient, key: PutCode) -> None:
        client.delete_work(key)


@dataclass(frozen=True, slots=True)
class FundingKind:
    """Fundings: grants, contracts and awards. The remote offers no bulk read."""

    bulk_size: int = 0
    id_types: frozenset[str] = field(
        default_factory=lambda: frozenset(_id_type_token(t) for t in FundingIdType)
    )

    @property
    def name(self) -> str:
        return "fundings"

    def summaries(self, listing: ActivitiesSummary) -> tuple[FundingSummary, ...]:
        return listing.fundings

    def recognises_id_type(self, id_type: str) -> bool:
        return _id_type_token(id_type) in self.id_types

    def missing_fields(self, summary: FundingSummary) -> set[InvalidField]:
        missing: set[InvalidField] = set()
        if not summary.organization:
            missing.add(InvalidField.ORGANIZATION)
        if summary.start_date is None:
            missing.add(InvalidField.PUBLICATION_DATE)
        elif summary.start_date.year is None:
            missing.add(InvalidField.YEAR)
        return missing

    def metadata(self, summary: FundingSummary) -> Metadata:
        return summary_metadata(summary)

    def merge(self, group: ActivityGroup[FundingSummary]) -> FundingSummary:
        return merge_group(group)

    def fetch(self, client: ProfileClient, key: PutCode) -> Funding:
        return client.get_funding(key)

    def fetch_many(
        self, client: ProfileClient, keys: Sequence[PutCode]
    ) -> dict[PutCode, Funding]:
        return client.get_fundings(keys)

    def add(self, client: ProfileClient, activity: Funding) -> PutCode:
        return client.add_funding(activity)

    def update(self, client: ProfileClient, key: PutCode, activity: Funding) -> None:
        client.update_funding(key, activity)

    def delete(self, client: ProfileClient, key: PutCode) -> None:
        client.delete_funding(key)


WORKS: Final = WorkKind()
FUNDINGS: Final = FundingKind()
