"""JSON documents exchanged with the local side, in ORCID record shape.

Local activities are read from (and import candidates written to) lists of
ORCID work or funding objects, so that a CRIS export can be fed in unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from crissync.domain.model import Funding, FundingSummary, Work, WorkSummary

from .schema import OrcidFunding, OrcidWork
from .translator import (
    funding_payload,
    funding_summary_payload,
    translate_funding,
    translate_work,
    work_payload,
    work_summary_payload,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from crissync.domain.model import ActivitySummary
    from crissync.domain.sync import ExportReport, InvalidImport, SyncOutcome


def load_activities(kind: str, document: Any) -> list[ActivitySummary]:
    """Translate a list of ORCID-shaped records of ``kind`` into domain activities."""

    if not isinstance(document, list):
        raise ValueError(f"Expected a JSON list of {kind}, got {type(document).__name__}")
    activities: list[ActivitySummary] = []
    for position, item in enumerate(document):
        try:
            if kind == "works":
                activities.append(translate_work(OrcidWork.model_validate(item)))
            elif kind == "fundings":
                activities.append(translate_funding(OrcidFunding.model_validate(item)))
            else:
                raise ValueError(f"Unknown activity kind: {kind!r}")
        except ValidationError as exc:
            raise ValueError(f"Invalid {kind} record at position {position}: {exc}") from exc
    return activities


def activity_document(activity: ActivitySummary) -> dict[str, object]:
    if isinstance(activity, Work):
        return work_payload(activity).to_payload()
    if isinstance(activity, WorkSummary):
        return work_summary_payload(activity).to_payload()
    if isinstance(activity, Funding):
        return funding_payload(activity).to_payload()
    if isinstance(activity, FundingSummary):
        return funding_summary_payload(activity).to_payload()
    raise TypeError(f"Unsupported activity type: {type(activity).__name__}")


def activities_document(activities: Iterable[ActivitySummary]) -> list[dict[str, object]]:
    return [activity_document(activity) for activity in activities]


def invalid_imports_document(
    invalid: Iterable[InvalidImport[ActivitySummary]],
) -> list[dict[str, object]]:
    return [
        {
            "activity": activity_document(item.activity),
            "invalid-fields": sorted(field.value for field in item.invalid_fields),
        }
        for item in invalid
    ]


def _outcome_document(outcome: SyncOutcome) -> dict[str, object]:
    document: dict[str, object] = {"status": outcome.status.value}
    if outcome.remote_key is not None:
        document["put-code"] = outcome.remote_key
    if outcome.invalid_fields:
        document["invalid-fields"] = sorted(field.value for field in outcome.invalid_fields)
    if outcome.error is not None:
        document["error"] = outcome.error
    return document


def export_report_document(report: ExportReport) -> dict[str, object]:
    return {
        "outcomes": {str(key): _outcome_document(outcome) for key, outcome in report.items()},
        "deletions": {
            str(key): _outcome_document(outcome) for key, outcome in report.deletions.items()
        },
    }
