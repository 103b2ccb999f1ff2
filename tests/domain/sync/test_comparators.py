from __future__ import annotations

import pytest

from crissync.domain.sync import ArgumentError, IdentifierComparator, WeightedWorkComparator
from crissync.domain.sync.comparators import string_similarity, year_closeness
from tests.helpers.activities import doi, eid, issn, make_work_summary


def test_identifier_comparator_counts_shared_self_ids() -> None:
    comparator = IdentifierComparator()
    first = make_work_summary(doi("10.1/x"), eid("e1"))
    second = make_work_summary(doi("10.1/x"), eid("e1"), eid("e2"))

    assert comparator.similarity(first, second) == 2
    assert comparator.matches(first, second)


def test_identifier_comparator_ignores_part_of_ids() -> None:
    comparator = IdentifierComparator()
    first = make_work_summary(doi("10.1/x"), issn("1234-5678"))
    second = make_work_summary(doi("10.1/y"), issn("1234-5678"))

    assert comparator.similarity(first, second) == 0
    assert not comparator.matches(first, second)


def test_belongs_checks_any_member() -> None:
    comparator = IdentifierComparator()
    item = make_work_summary(doi("10.1/x"))
    members = [make_work_summary(eid("e1")), make_work_summary(doi("10.1/x"))]

    assert comparator.belongs(item, members)
    assert not comparator.belongs(item, members[:1])


def test_string_similarity() -> None:
    assert string_similarity("abc", "abc") == 1.0
    assert string_similarity("", "") == 1.0
    assert string_similarity(None, "abc") == 0.0
    assert string_similarity("abcd", "abcx") == pytest.approx(0.75)


def test_year_closeness() -> None:
    assert year_closeness(2020, 2020) == 1.0
    assert year_closeness(2020, 2021) == 0.5
    assert year_closeness(None, 2020) == 0.0


def test_weighted_comparator_scores_metadata() -> None:
    comparator = WeightedWorkComparator()
    first = make_work_summary(title="Deep Learning", year=2020)
    second = make_work_summary(title="Deep Learning", year=2020)

    assert comparator.similarity(first, second) == pytest.approx(100)
    assert comparator.matches(first, second)


def test_weighted_comparator_threshold_is_exclusive() -> None:
    comparator = WeightedWorkComparator(threshold=80)
    first = make_work_summary(title="Deep Learning", year=2020)
    # title, container and type agree, year two apart: 50 + 20 + 20/3 + 10
    second = make_work_summary(title="Deep Learning", year=2022)

    assert comparator.similarity(first, second) == pytest.approx(86.666, abs=1e-2)
    assert comparator.matches(first, second)
    assert not WeightedWorkComparator(threshold=90).matches(first, second)


def test_weighted_comparator_missing_year_contributes_nothing() -> None:
    comparator = WeightedWorkComparator()
    first = make_work_summary(title="Deep Learning", year=None)
    second = make_work_summary(title="Deep Learning", year=2020)

    assert comparator.similarity(first, second) == pytest.approx(80)


def test_weighted_comparator_rejects_bad_weights() -> None:
    with pytest.raises(ArgumentError):
        WeightedWorkComparator(weight_title=60)
