"""ORCID member API adapter."""

from __future__ import annotations

from .client import OrcidClient
from .documents import (
    activities_document,
    export_report_document,
    invalid_imports_document,
    load_activities,
)
from .translator import (
    funding_payload,
    funding_summary_payload,
    translate_funding,
    translate_work,
    work_payload,
    work_summary_payload,
)

__all__ = [
    "OrcidClient",
    "activities_document",
    "export_report_document",
    "funding_payload",
    "funding_summary_payload",
    "invalid_imports_document",
    "load_activities",
    "translate_funding",
    "translate_work",
    "work_payload",
    "work_summary_payload",
]
