from __future__ import annotations

import pytest

from crissync.domain.model import ExternalIdentifier, Relationship
from crissync.domain.sync import ArgumentError, diff_identifiers, equivalent
from tests.helpers.activities import doi, eid, handle, issn

A = (doi("10.1/x"), eid("e1"), handle("h1"))
B = (doi("10.1/x"), handle("h1"), ExternalIdentifier("pmid", "42"))


def test_diff_partitions_both_operands() -> None:
    diff = diff_identifiers(A, B)

    assert diff.less == {eid("e1")}
    assert diff.same == {doi("10.1/x"), handle("h1")}
    assert diff.more == {ExternalIdentifier("pmid", "42")}
    assert diff.overlapping
    assert not diff.identical


def test_diff_is_symmetric() -> None:
    forward = diff_identifiers(A, B)
    backward = diff_identifiers(B, A)

    assert forward.same == backward.same
    assert forward.less == backward.more
    assert forward.more == backward.less


def test_diff_less_and_same_cover_first_operand() -> None:
    diff = diff_identifiers(A, B)

    assert len(diff.less | diff.same) == len(set(A))


def test_diff_is_symmetric_across_spellings() -> None:
    local = (doi("10.1/x"), eid("e1"))
    remote = (doi("https://doi.org/10.1/x"), handle("h1"))

    forward = diff_identifiers(local, remote)
    backward = diff_identifiers(remote, local)

    assert forward.same == backward.same == {doi("10.1/x")}
    assert forward.less == backward.more == {eid("e1")}
    assert forward.more == backward.less == {handle("h1")}


def test_diff_counts_spellings_of_one_identifier_once() -> None:
    local = (doi("10.1/x"),)
    remote = (doi("10.1/x"), doi("https://doi.org/10.1/x"))

    diff = diff_identifiers(local, remote)

    assert len(diff.less | diff.same) == len(set(local)) == 1
    assert len(diff.more | diff.same) == len(set(remote)) == 1
    assert diff.identical


def test_diff_of_set_with_itself_is_identical() -> None:
    diff = diff_identifiers(A, A)

    assert diff.less == frozenset()
    assert diff.more == frozenset()
    assert diff.same == set(A)
    assert diff.identical


def test_diff_with_empty_operand() -> None:
    assert diff_identifiers((), A).more == set(A)
    assert diff_identifiers(A, ()).less == set(A)
    assert diff_identifiers((), ()).identical
    assert not diff_identifiers((), A).overlapping


def test_diff_rejects_missing_operand() -> None:
    with pytest.raises(ArgumentError):
        diff_identifiers(None, A)
    with pytest.raises(ArgumentError):
        diff_identifiers(A, None)


def test_same_holds_second_operand_instances() -> None:
    local = (doi("10.1/x"),)
    remote = (doi("https://doi.org/10.1/x"),)

    diff = diff_identifiers(local, remote)

    (matched,) = diff.same
    assert matched.value == "https://doi.org/10.1/x"
    assert diff.less == frozenset()


def test_part_of_identifiers_never_match() -> None:
    diff = diff_identifiers((issn("1234-5678"),), (issn("1234-5678"),))

    assert diff.same == frozenset()
    assert not equivalent(issn("1234-5678"), issn("1234-5678"))


@pytest.mark.parametrize(
    ("first", "second", "expected"),
    [
        (Relationship.SELF, Relationship.SELF, True),
        (None, None, True),
        (Relationship.SELF, None, False),
        (Relationship.SELF, Relationship.VERSION_OF, False),
        (Relationship.VERSION_OF, Relationship.VERSION_OF, True),
        (Relationship.PART_OF, Relationship.PART_OF, False),
    ],
)
def test_relationship_compatibility(
    first: Relationship | None, second: Relationship | None, expected: bool
) -> None:
    left = ExternalIdentifier("doi", "10.1/x", first)
    right = ExternalIdentifier("doi", "10.1/x", second)

    assert equivalent(left, right) is expected


def test_equivalence_requires_same_type() -> None:
    assert not equivalent(ExternalIdentifier("doi", "1"), ExternalIdentifier("eid", "1"))
