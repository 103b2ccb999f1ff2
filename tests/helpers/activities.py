"""Builders for activity records used across the test suite."""

from __future__ import annotations

from crissync.domain.model import (
    ExternalIdentifier,
    Funding,
    FundingSummary,
    PartialDate,
    Relationship,
    Work,
    WorkSummary,
)


def doi(value: str) -> ExternalIdentifier:
    return ExternalIdentifier("doi", value)


def eid(value: str) -> ExternalIdentifier:
    return ExternalIdentifier("eid", value)


def handle(value: str) -> ExternalIdentifier:
    return ExternalIdentifier("handle", value)


def issn(value: str) -> ExternalIdentifier:
    """A journal ISSN as carried by an article: a container identifier."""

    return ExternalIdentifier("issn", value, Relationship.PART_OF)


def grant(value: str) -> ExternalIdentifier:
    return ExternalIdentifier("grant_number", value)


def make_work(
    *ids: ExternalIdentifier,
    key: int | None = None,
    title: str | None = "Example Work",
    type: str | None = "journal-article",  # noqa: A002
    year: int | None = 2020,
    journal: str | None = "Journal of Examples",
    source: str | None = None,
) -> Work:
    return Work(
        key=key,
        title=title,
        type=type,
        external_ids=ids,
        source=source,
        publication_date=PartialDate(year) if year is not None else None,
        journal_title=journal,
    )


def make_work_summary(
    *ids: ExternalIdentifier,
    key: int | None = None,
    title: str | None = "Example Work",
    type: str | None = "journal-article",  # noqa: A002
    year: int | None = 2020,
    journal: str | None = "Journal of Examples",
    source: str | None = None,
) -> WorkSummary:
    return make_work(
        *ids, key=key, title=title, type=type, year=year, journal=journal, source=source
    ).to_summary()


def make_funding(
    *ids: ExternalIdentifier,
    key: int | None = None,
    title: str | None = "Example Grant",
    type: str | None = "grant",  # noqa: A002
    year: int | None = 2021,
    organization: str | None = "Example Foundation",
    source: str | None = None,
) -> Funding:
    return Funding(
        key=key,
        title=title,
        type=type,
        external_ids=ids,
        source=source,
        organization=organization,
        start_date=PartialDate(year) if year is not None else None,
    )


def make_funding_summary(
    *ids: ExternalIdentifier,
    key: int | None = None,
    title: str | None = "Example Grant",
    type: str | None = "grant",  # noqa: A002
    year: int | None = 2021,
    organization: str | None = "Example Foundation",
    source: str | None = None,
) -> FundingSummary:
    return make_funding(
        *ids,
        key=key,
        title=title,
        type=type,
        year=year,
        organization=organization,
        source=source,
    ).to_summary()
