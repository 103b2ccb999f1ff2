"""Activity records exchanged between the local system and the remote profile.

Summaries are what the remote listing returns; full records extend them, so a full
record can be used anywhere a summary is expected. All records are immutable: the
engine derives modified copies (new key, new identifier set) with ``dataclasses.replace``.

``key`` is overloaded on purpose: it carries the local key on the local side and the
remote put-code on records fetched from, or sent to, the remote service.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Self

from crissync.domain.model.external_ids import (
    IdentifierSet,
    part_of_identifiers,
    self_identifiers,
)

if TYPE_CHECKING:
    from crissync.domain.model.primitives import (
        ClientId,
        Contributor,
        CountryCode,
        PartialDate,
        PutCode,
    )


@dataclass(frozen=True, slots=True, kw_only=True)
class ActivitySummary:
    key: PutCode | None = None
    title: str | None = None
    type: str | None = None
    external_ids: IdentifierSet = ()
    source: ClientId | None = None

    @property
    def year(self) -> int | None:
        return None

    @property
    def self_ids(self) -> IdentifierSet:
        return self_identifiers(self.external_ids)

    @property
    def part_of_ids(self) -> IdentifierSet:
        return part_of_identifiers(self.external_ids)

    def with_key(self, key: PutCode | None) -> Self:
        return replace(self, key=key)

    def with_external_ids(self, external_ids: IdentifierSet) -> Self:
        return replace(self, external_ids=tuple(external_ids))


@dataclass(frozen=True, slots=True, kw_only=True)
class WorkSummary(ActivitySummary):
    publication_date: PartialDate | None = None
    journal_title: str | None = None

    @property
    def year(self) -> int | None:
        return self.publication_date.year if self.publication_date else None


@dataclass(frozen=True, slots=True, kw_only=True)
class Work(WorkSummary):
    short_description: str | None = None
    citation: str | None = None
    url: str | None = None
    language_code: str | None = None
    country: CountryCode | None = None
    contributors: tuple[Contributor, ...] = ()

    def to_summary(self) -> WorkSummary:
        return WorkSummary(
            key=self.key,
            title=self.title,
            type=self.type,
            external_ids=self.external_ids,
            source=self.source,
            publication_date=self.publication_date,
            journal_title=self.journal_title,
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class FundingSummary(ActivitySummary):
    organization: str | None = None
    start_date: PartialDate | None = None
    end_date: PartialDate | None = None

    @property
    def year(self) -> int | None:
        return self.start_date.year if self.start_date else None


@dataclass(frozen=True, slots=True, kw_only=True)
class Funding(FundingSummary):
    amount: str | None = None
    currency: str | None = None
    short_description: str | None = None
    url: str | None = None
    organization_defined_type: str | None = None
    contributors: tuple[Contributor, ...] = ()

    def to_summary(self) -> FundingSummary:
        return FundingSummary(
            key=self.key,
            title=self.title,
            type=self.type,
            external_ids=self.external_ids,
            source=self.source,
            organization=self.organization,
            start_date=self.start_date,
            end_date=self.end_date,
        )


@dataclass(frozen=True, slots=True)
class ActivitiesSummary:
    """Remote listing of every activity on a profile, flattened per kind."""

    works: tuple[WorkSummary, ...] = ()
    fundings: tuple[FundingSummary, ...] = ()
