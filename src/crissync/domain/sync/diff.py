"""Relationship-aware difference between two identifier sets.

Two identifiers are equivalent when their types match, their normalised values
match and their relationships are compatible (both absent, or equal and not
``part-of``). ``part-of`` identifiers describe a container (a journal ISSN on an
article, say) and never count toward matching.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from crissync.domain.model import ExternalIdentifier, Relationship

from .errors import ArgumentError

if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass(frozen=True, slots=True)
class IdentifierDiff:
    """Partition of two identifier sets.

    ``less`` holds identifiers only found in the first operand, ``more`` those only
    found in the second, ``same`` the second operand's instances that matched.
    """

    less: frozenset[ExternalIdentifier] = frozenset()
    same: frozenset[ExternalIdentifier] = frozenset()
    more: frozenset[ExternalIdentifier] = frozenset()

    @property
    def identical(self) -> bool:
        return not self.less and not self.more

    @property
    def overlapping(self) -> bool:
        return bool(self.same)


def compatible_relationships(first: Relationship | None, second: Relationship | None) -> bool:
    if first is None and second is None:
        return True
    return first == second and first != Relationship.PART_OF


def equivalent(first: ExternalIdentifier, second: ExternalIdentifier) -> bool:
    if first.type != second.type:
        return False
    if not compatible_relationships(first.relationship, second.relationship):
        return False
    return first.normalised_value == second.normalised_value


def diff_identifiers(
    first: Iterable[ExternalIdentifier] | None,
    second: Iterable[ExternalIdentifier] | None,
) -> IdentifierDiff:
    """Compare ``first`` against ``second``; either may be empty but not ``None``."""

    if first is None or second is None:
        raise ArgumentError("Both identifier sets are required to compute a diff")

    first_ids = tuple(first)
    second_ids = tuple(second)
    less = set(first_ids)
    more = set(second_ids)
    same: set[ExternalIdentifier] = set()

    for candidate in second_ids:
        for existing in first_ids:
            if equivalent(existing, candidate):
                same.add(candidate)
                more.discard(candidate)
                less.discard(existing)

    return IdentifierDiff(less=frozenset(less), same=frozenset(same), more=frozenset(more))


def any_equivalent(
    first: Iterable[ExternalIdentifier],
    second: Iterable[ExternalIdentifier],
) -> bool:
    """Cheaper form of ``diff_identifiers(first, second).overlapping``."""

    second_ids = tuple(second)
    return any(equivalent(left, right) for left in first for right in second_ids)
