"""Translate between ORCID payloads and domain activities, both directions."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from crissync.domain.model import (
    ActivitiesSummary,
    Contributor,
    ExternalIdentifier,
    Funding,
    FundingSummary,
    PartialDate,
    Relationship,
    Work,
    WorkSummary,
)

from .schema import (
    OrcidAmount,
    OrcidCitation,
    OrcidClientIdPath,
    OrcidContributor,
    OrcidContributorAttributes,
    OrcidContributors,
    OrcidExternalId,
    OrcidExternalIds,
    OrcidFunding,
    OrcidFundingSummary,
    OrcidFuzzyDate,
    OrcidOrganization,
    OrcidTitle,
    OrcidValue,
    OrcidWork,
    OrcidWorkSummary,
)

if TYPE_CHECKING:
    from crissync.domain.model import IdentifierSet

    from .schema import OrcidActivitiesSummary, OrcidSource

log = getLogger(__name__)

_RELATIONSHIPS: dict[str, Relationship] = {item.value: item for item in Relationship}


# --- ORCID -> domain -----------------------------------------------------------


def translate_activities(payload: OrcidActivitiesSummary) -> ActivitiesSummary:
    works = tuple(
        translate_work_summary(summary)
        for group in (payload.works.group if payload.works else [])
        for summary in group.work_summary
    )
    fundings = tuple(
        translate_funding_summary(summary)
        for group in (payload.fundings.group if payload.fundings else [])
        for summary in group.funding_summary
    )
    return ActivitiesSummary(works=works, fundings=fundings)


def translate_work_summary(payload: OrcidWorkSummary) -> WorkSummary:
    return WorkSummary(
        key=payload.put_code,
        title=_title(payload.title),
        type=payload.type,
        external_ids=_external_ids(payload.external_ids),
        source=_source_client_id(payload.source),
        publication_date=_partial_date(payload.publication_date),
        journal_title=_value(payload.journal_title),
    )


def translate_work(payload: OrcidWork) -> Work:
    return Work(
        key=payload.put_code,
        title=_title(payload.title),
        type=payload.type,
        external_ids=_external_ids(payload.external_ids),
        source=_source_client_id(payload.source),
        publication_date=_partial_date(payload.publication_date),
        journal_title=_value(payload.journal_title),
        short_description=payload.short_description,
        citation=payload.citation.citation_value if payload.citation else None,
        url=_value(payload.url),
        language_code=payload.language_code,
        country=_value(payload.country),
        contributors=_contributors(payload.contributors),
    )


def translate_funding_summary(payload: OrcidFundingSummary) -> FundingSummary:
    return FundingSummary(
        key=payload.put_code,
        title=_title(payload.title),
        type=payload.type,
        external_ids=_external_ids(payload.external_ids),
        source=_source_client_id(payload.source),
        organization=payload.organization.name if payload.organization else None,
        start_date=_partial_date(payload.start_date),
        end_date=_partial_date(payload.end_date),
    )


def translate_funding(payload: OrcidFunding) -> Funding:
    return Funding(
        key=payload.put_code,
        title=_title(payload.title),
        type=payload.type,
        external_ids=_external_ids(payload.external_ids),
        source=_source_client_id(payload.source),
        organization=payload.organization.name if payload.organization else None,
        start_date=_partial_date(payload.start_date),
        end_date=_partial_date(payload.end_date),
        amount=payload.amount.value if payload.amount else None,
        currency=payload.amount.currency_code if payload.amount else None,
        short_description=payload.short_description,
        url=_value(payload.url),
        organization_defined_type=_value(payload.organization_defined_type),
        contributors=_contributors(payload.contributors),
    )


def _value(payload: OrcidValue | None) -> str | None:
    return payload.value if payload else None


def _title(payload: OrcidTitle | None) -> str | None:
    return _value(payload.title) if payload else None


def _source_client_id(payload: OrcidSource | None) -> str | None:
    if payload is None or payload.source_client_id is None:
        return None
    return payload.source_client_id.path


def _relationship(raw: str | None) -> Relationship | None:
    if raw is None:
        return None
    relationship = _RELATIONSHIPS.get(raw.strip().lower().replace("_", "-"))
    if relationship is None:
        log.debug("Unknown external id relationship %r", raw)
    return relationship


def _external_ids(payload: OrcidExternalIds | None) -> IdentifierSet:
    if payload is None:
        return ()
    return tuple(
        ExternalIdentifier(
            type=eid.external_id_type,
            value=eid.external_id_value,
            relationship=_relationship(eid.external_id_relationship),
            url=_value(eid.external_id_url),
        )
        for eid in payload.external_id
    )


def _date_part(payload: OrcidValue | None) -> int | None:
    raw = _value(payload)
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def _partial_date(payload: OrcidFuzzyDate | None) -> PartialDate | None:
    if payload is None:
        return None
    return PartialDate(
        year=_date_part(payload.year),
        month=_date_part(payload.month),
        day=_date_part(payload.day),
    )


def _contributors(payload: OrcidContributors | None) -> tuple[Contributor, ...]:
    if payload is None:
        return ()
    contributors: list[Contributor] = []
    for contributor in payload.contributor:
        name = _value(contributor.credit_name)
        if name is None:
            continue
        attributes = contributor.contributor_attributes
        contributors.append(
            Contributor(
                name=name,
                role=attributes.contributor_role if attributes else None,
                orcid=(
                    contributor.contributor_orcid.path if contributor.contributor_orcid else None
                ),
            )
        )
    return tuple(contributors)


# --- domain -> ORCID -----------------------------------------------------------


def work_payload(work: Work) -> OrcidWork:
    return OrcidWork(
        put_code=work.key,
        title=_title_payload(work.title),
        type=work.type,
        external_ids=_external_ids_payload(work.external_ids),
        publication_date=_date_payload(work.publication_date),
        journal_title=OrcidValue(value=work.journal_title) if work.journal_title else None,
        short_description=work.short_description,
        citation=(
            OrcidCitation(citation_type="formatted-unspecified", citation_value=work.citation)
            if work.citation
            else None
        ),
        url=OrcidValue(value=work.url) if work.url else None,
        language_code=work.language_code,
        country=OrcidValue(value=work.country) if work.country else None,
        contributors=_contributors_payload(work.contributors),
    )


def funding_payload(funding: Funding) -> OrcidFunding:
    amount = (
        OrcidAmount(value=funding.amount, currency_code=funding.currency)
        if funding.amount
        else None
    )
    return OrcidFunding(
        put_code=funding.key,
        title=_title_payload(funding.title),
        type=funding.type,
        external_ids=_external_ids_payload(funding.external_ids),
        start_date=_date_payload(funding.start_date),
        end_date=_date_payload(funding.end_date),
        organization=(
            OrcidOrganization(name=funding.organization) if funding.organization else None
        ),
        organization_defined_type=(
            OrcidValue(value=funding.organization_defined_type)
            if funding.organization_defined_type
            else None
        ),
        short_description=funding.short_description,
        amount=amount,
        url=OrcidValue(value=funding.url) if funding.url else None,
        contributors=_contributors_payload(funding.contributors),
    )


def _title_payload(title: str | None) -> OrcidTitle | None:
    return OrcidTitle(title=OrcidValue(value=title)) if title else None


def _external_ids_payload(external_ids: IdentifierSet) -> OrcidExternalIds:
    return OrcidExternalIds(
        external_id=[
            OrcidExternalId(
                external_id_type=eid.type,
                external_id_value=eid.value,
                external_id_url=OrcidValue(value=eid.url) if eid.url else None,
                external_id_relationship=eid.relationship.value if eid.relationship else None,
            )
            for eid in external_ids
        ]
    )


def _date_payload(date: PartialDate | None) -> OrcidFuzzyDate | None:
    if date is None or date.year is None:
        return None
    return OrcidFuzzyDate(
        year=OrcidValue(value=f"{date.year:04d}"),
        month=OrcidValue(value=f"{date.month:02d}") if date.month else None,
        day=OrcidValue(value=f"{date.day:02d}") if date.day else None,
    )


def _contributors_payload(contributors: tuple[Contributor, ...]) -> OrcidContributors | None:
    if not contributors:
        return None
    return OrcidContributors(
        contributor=[
            OrcidContributor(
                credit_name=OrcidValue(value=contributor.name),
                contributor_orcid=(
                    OrcidClientIdPath(path=contributor.orcid) if contributor.orcid else None
                ),
                contributor_attributes=(
                    OrcidContributorAttributes(contributor_role=contributor.role)
                    if contributor.role
                    else None
                ),
            )
            for contributor in contributors
        ]
    )


def work_summary_payload(summary: WorkSummary) -> OrcidWorkSummary:
    return OrcidWorkSummary(
        put_code=summary.key,
        title=_title_payload(summary.title),
        type=summary.type,
        external_ids=_external_ids_payload(summary.external_ids),
        publication_date=_date_payload(summary.publication_date),
        journal_title=OrcidValue(value=summary.journal_title) if summary.journal_title else None,
    )


def funding_summary_payload(summary: FundingSummary) -> OrcidFundingSummary:
    return OrcidFundingSummary(
        put_code=summary.key,
        title=_title_payload(summary.title),
        type=summary.type,
        external_ids=_external_ids_payload(summary.external_ids),
        start_date=_date_payload(summary.start_date),
        end_date=_date_payload(summary.end_date),
        organization=OrcidOrganization(name=summary.organization) if summary.organization else None,
    )
