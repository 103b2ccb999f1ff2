"""Synchronisation core between local activities and the remote profile.

Layered flow of one run:
1) list remote summaries for one activity kind
2) cluster duplicate remote entries (``grouping``) and collapse each group
3) diff identifier sets of remote and local activities (``diff``)
4) gate candidates on minimal quality (``quality``)
5) read full records concurrently (``fetching``)
6) return import candidates, or add/update/delete remotely (``engine``)
"""

from __future__ import annotations

from .comparators import ActivityComparator, IdentifierComparator, WeightedWorkComparator
from .contracts import ExportReport, FetchResult, InputPosition, InvalidImport, SyncOutcome
from .diff import IdentifierDiff, diff_identifiers, equivalent
from .engine import ReconciliationEngine
from .errors import ArgumentError, FetchTimeoutError, InvalidActivityError
from .fetching import FetchBatch, FetchPool
from .grouping import ActivityGroup, GroupGenerator, group_activities
from .kinds import FUNDINGS, WORKS, ActivityKind, FundingKind, WorkKind
from .progress import (
    LoggingProgressHandler,
    NullProgressHandler,
    ProgressHandler,
    ProgressStatus,
)
from .quality import QualityValidator

__all__ = [  # noqa: RUF022
    # identifiers
    "IdentifierDiff",
    "diff_identifiers",
    "equivalent",
    # grouping
    "ActivityComparator",
    "ActivityGroup",
    "GroupGenerator",
    "IdentifierComparator",
    "WeightedWorkComparator",
    "group_activities",
    # validation
    "QualityValidator",
    # kinds
    "ActivityKind",
    "FundingKind",
    "WorkKind",
    "FUNDINGS",
    "WORKS",
    # fetching
    "FetchBatch",
    "FetchPool",
    "FetchResult",
    # engine
    "ExportReport",
    "InputPosition",
    "InvalidImport",
    "ReconciliationEngine",
    "SyncOutcome",
    # progress
    "LoggingProgressHandler",
    "NullProgressHandler",
    "ProgressHandler",
    "ProgressStatus",
    # errors
    "ArgumentError",
    "FetchTimeoutError",
    "InvalidActivityError",
]
