"""Public domain model surface."""

from __future__ import annotations

from crissync.domain.model.activities import (
    ActivitiesSummary,
    ActivitySummary,
    Funding,
    FundingSummary,
    Work,
    WorkSummary,
)
from crissync.domain.model.enums import (
    FundingIdType,
    FundingType,
    InvalidField,
    Relationship,
    SyncStatus,
    WorkIdType,
    WorkType,
)
from crissync.domain.model.external_ids import (
    ExternalIdentifier,
    IdentifierSet,
    identical_identifiers,
    normalise_value,
    part_of_identifiers,
    self_identifiers,
)
from crissync.domain.model.primitives import (
    ClientId,
    Contributor,
    CountryCode,
    PartialDate,
    PutCode,
)

__all__ = [  # noqa: RUF022
    # activities
    "ActivitiesSummary",
    "ActivitySummary",
    "Funding",
    "FundingSummary",
    "Work",
    "WorkSummary",
    # external ids
    "ExternalIdentifier",
    "IdentifierSet",
    "identical_identifiers",
    "normalise_value",
    "part_of_identifiers",
    "self_identifiers",
    # enums
    "FundingIdType",
    "FundingType",
    "InvalidField",
    "Relationship",
    "SyncStatus",
    "WorkIdType",
    "WorkType",
    # primitives
    "ClientId",
    "Contributor",
    "CountryCode",
    "PartialDate",
    "PutCode",
]
