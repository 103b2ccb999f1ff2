"""Minimal quality criteria an activity must meet to be synchronised."""

from __future__ import annotations

from typing import TYPE_CHECKING

from crissync.domain.model import InvalidField

from .diff import any_equivalent
from .errors import ArgumentError, InvalidActivityError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from crissync.domain.model import ActivitySummary

    from .kinds import ActivityKind


class QualityValidator[S: ActivitySummary]:
    def __init__(self, kind: ActivityKind[S, S]) -> None:
        self.kind = kind

    def validate(self, summary: S | None, others: Iterable[S] = ()) -> frozenset[InvalidField]:
        """Return the fields ``summary`` fails on; empty when it is synchronisable.

        ``others`` are coexisting activities. Sharing a SELF identifier with a
        distinct one of them is reported as ``OVERLAPPING_IDENTIFIERS``.
        """

        if summary is None:
            raise ArgumentError("Cannot validate a missing activity")

        invalid: set[InvalidField] = set()
        self_ids = summary.self_ids
        if not self_ids or not all(self.kind.recognises_id_type(eid.type) for eid in self_ids):
            invalid.add(InvalidField.EXTERNAL_IDENTIFIERS)
        if not summary.title:
            invalid.add(InvalidField.TITLE)
        if not summary.type:
            invalid.add(InvalidField.TYPE)
        invalid |= self.kind.missing_fields(summary)

        if self_ids and any(
            any_equivalent(self_ids, other.self_ids)
            for other in others
            if _distinct(summary, other)
        ):
            invalid.add(InvalidField.OVERLAPPING_IDENTIFIERS)

        return frozenset(invalid)

    def is_valid(self, summary: S, others: Iterable[S] = ()) -> bool:
        return not self.validate(summary, others)

    def require_valid(self, summary: S, others: Iterable[S] = ()) -> None:
        invalid = self.validate(summary, others)
        if invalid:
            raise InvalidActivityError(invalid)


def _distinct(summary: ActivitySummary, other: ActivitySummary) -> bool:
    if other is summary:
        return False
    return summary.key is None or other.key is None or summary.key != other.key
