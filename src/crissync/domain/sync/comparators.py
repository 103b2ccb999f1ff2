"""Similarity predicates used to cluster duplicate activities."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Final

import jellyfish

from .diff import diff_identifiers
from .errors import ArgumentError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from crissync.domain.model import ActivitySummary, WorkSummary


class ActivityComparator[T: ActivitySummary](ABC):
    """Pairwise similarity score plus the threshold above which two items match."""

    @property
    @abstractmethod
    def threshold(self) -> float: ...

    @abstractmethod
    def similarity(self, first: T, second: T) -> float: ...

    def matches(self, first: T, second: T) -> bool:
        return self.similarity(first, second) > self.threshold

    def belongs(self, item: T, members: Iterable[T]) -> bool:
        """Whether ``item`` matches any of ``members``."""

        return any(self.matches(item, member) for member in members)


class IdentifierComparator(ActivityComparator["ActivitySummary"]):
    """Matches activities that share at least one SELF identifier."""

    @property
    def threshold(self) -> float:
        return 0

    def similarity(self, first: ActivitySummary, second: ActivitySummary) -> float:
        return len(diff_identifiers(first.self_ids, second.self_ids).same)


def string_similarity(first: str | None, second: str | None) -> float:
    """Normalised Levenshtein similarity in ``[0, 1]``; ``0`` when either is missing."""

    if first is None or second is None:
        return 0.0
    longest = max(len(first), len(second))
    if longest == 0:
        return 1.0
    return 1.0 - jellyfish.levenshtein_distance(first, second) / longest


def year_closeness(first: int | None, second: int | None) -> float:
    if first is None or second is None:
        return 0.0
    return 1.0 / (abs(first - second) + 1)


_TOTAL_WEIGHT: Final = 100


class WeightedWorkComparator(ActivityComparator["WorkSummary"]):
    """Metadata-based comparator for works lacking shared identifiers.

    Scores are percentages: each component similarity in ``[0, 1]`` is scaled by its
    weight, and the weights must add up to 100.
    """

    def __init__(
        self,
        threshold: float = 75,
        *,
        weight_title: float = 50,
        weight_container: float = 20,
        weight_year: float = 20,
        weight_type: float = 10,
    ) -> None:
        total = weight_title + weight_container + weight_year + weight_type
        if total != _TOTAL_WEIGHT:
            raise ArgumentError(f"Comparator weights must add up to 100, got {total}")
        self._threshold = threshold
        self.weight_title = weight_title
        self.weight_container = weight_container
        self.weight_year = weight_year
        self.weight_type = weight_type

    @property
    def threshold(self) -> float:
        return self._threshold

    def similarity(self, first: WorkSummary, second: WorkSummary) -> float:
        score = string_similarity(first.title, second.title) * self.weight_title
        score += (
            string_similarity(first.journal_title, second.journal_title) * self.weight_container
        )
        score += year_closeness(first.year, second.year) * self.weight_year
        score += string_similarity(first.type, second.type) * self.weight_type
        return score
