"""ORCID v3.0 member API payload schemas (JSON, ``application/vnd.orcid+json``)."""

from __future__ import annotations

import logging
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

log = logging.getLogger(__name__)

type OrcidPutCode = int
type OrcidIdPath = str  # Format: 0000-0000-0000-0000


def _kebab(name: str) -> str:
    return name.replace("_", "-")


class OrcidBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", alias_generator=_kebab, populate_by_name=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.debug(
            "ORCID %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )

    def to_payload(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class OrcidValue(OrcidBaseModel):
    value: str | None = None


class OrcidFuzzyDate(OrcidBaseModel):
    year: OrcidValue | None = None
    month: OrcidValue | None = None
    day: OrcidValue | None = None


class OrcidClientIdPath(OrcidBaseModel):
    path: str | None = None
    uri: str | None = None
    host: str | None = None


class OrcidSource(OrcidBaseModel):
    source_client_id: OrcidClientIdPath | None = None
    source_orcid: OrcidClientIdPath | None = None
    source_name: OrcidValue | None = None


class OrcidExternalId(OrcidBaseModel):
    external_id_type: str
    external_id_value: str
    external_id_url: OrcidValue | None = None
    external_id_relationship: str | None = None


class OrcidExternalIds(OrcidBaseModel):
    external_id: list[OrcidExternalId] = Field(default_factory=list)


class OrcidTitle(OrcidBaseModel):
    title: OrcidValue | None = None
    subtitle: OrcidValue | None = None


class OrcidCitation(OrcidBaseModel):
    citation_type: str | None = None
    citation_value: str | None = None


class OrcidContributorAttributes(OrcidBaseModel):
    contributor_sequence: str | None = None
    contributor_role: str | None = None


class OrcidContributor(OrcidBaseModel):
    contributor_orcid: OrcidClientIdPath | None = None
    credit_name: OrcidValue | None = None
    contributor_attributes: OrcidContributorAttributes | None = None


class OrcidContributors(OrcidBaseModel):
    contributor: list[OrcidContributor] = Field(default_factory=list)


class OrcidWorkSummary(OrcidBaseModel):
    put_code: OrcidPutCode | None = None
    title: OrcidTitle | None = None
    external_ids: OrcidExternalIds | None = None
    type: str | None = None
    publication_date: OrcidFuzzyDate | None = None
    journal_title: OrcidValue | None = None
    source: OrcidSource | None = None


class OrcidWork(OrcidWorkSummary):
    short_description: str | None = None
    citation: OrcidCitation | None = None
    url: OrcidValue | None = None
    language_code: str | None = None
    country: OrcidValue | None = None
    contributors: OrcidContributors | None = None


class OrcidOrganizationAddress(OrcidBaseModel):
    city: str | None = None
    region: str | None = None
    country: str | None = None


class OrcidOrganization(OrcidBaseModel):
    name: str | None = None
    address: OrcidOrganizationAddress | None = None


class OrcidAmount(OrcidBaseModel):
    value: str | None = None
    currency_code: str | None = None


class OrcidFundingSummary(OrcidBaseModel):
    put_code: OrcidPutCode | None = None
    title: OrcidTitle | None = None
    external_ids: OrcidExternalIds | None = None
    type: str | None = None
    start_date: OrcidFuzzyDate | None = None
    end_date: OrcidFuzzyDate | None = None
    organization: OrcidOrganization | None = None
    source: OrcidSource | None = None


class OrcidFunding(OrcidFundingSummary):
    organization_defined_type: OrcidValue | None = None
    short_description: str | None = None
    amount: OrcidAmount | None = None
    url: OrcidValue | None = None
    contributors: OrcidContributors | None = None


class OrcidWorkGroup(OrcidBaseModel):
    external_ids: OrcidExternalIds | None = None
    work_summary: list[OrcidWorkSummary] = Field(default_factory=list)


class OrcidFundingGroup(OrcidBaseModel):
    external_ids: OrcidExternalIds | None = None
    funding_summary: list[OrcidFundingSummary] = Field(default_factory=list)


class OrcidWorks(OrcidBaseModel):
    group: list[OrcidWorkGroup] = Field(default_factory=list)


class OrcidFundings(OrcidBaseModel):
    group: list[OrcidFundingGroup] = Field(default_factory=list)


class OrcidActivitiesSummary(OrcidBaseModel):
    works: OrcidWorks | None = None
    fundings: OrcidFundings | None = None


class OrcidError(OrcidBaseModel):
    response_code: int | None = None
    developer_message: str | None = None
    user_message: str | None = None
    error_code: int | None = None


class OrcidBulkItem(OrcidBaseModel):
    work: OrcidWork | None = None
    error: OrcidError | None = None


class OrcidWorkBulk(OrcidBaseModel):
    bulk: list[OrcidBulkItem] = Field(default_factory=list)
