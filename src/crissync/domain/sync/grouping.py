"""Transitive clustering of activity summaries.

The generator is a single greedy pass: each item joins every existing group it
matches, and groups bridged by the item are merged into the first of them. The
resulting partition depends on input order whenever matching is not transitive.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .errors import ArgumentError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

    from crissync.domain.model import ActivitySummary

    from .comparators import ActivityComparator


log = getLogger(__name__)


class ActivityGroup[T: ActivitySummary]:
    """Ordered set of matching activities; the first member is the preferred one."""

    __slots__ = ("_members",)

    def __init__(self, members: Iterable[T] = ()) -> None:
        self._members: list[T] = []
        for member in members:
            self.add(member)

    def add(self, member: T) -> None:
        if member not in self._members:
            self._members.append(member)

    def absorb(self, other: ActivityGroup[T]) -> None:
        for member in other:
            self.add(member)

    @property
    def members(self) -> tuple[T, ...]:
        return tuple(self._members)

    @property
    def preferred(self) -> T:
        return self._members[0]

    def __iter__(self) -> Iterator[T]:
        return iter(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def __contains__(self, item: object) -> bool:
        return item in self._members

    def __repr__(self) -> str:
        return f"ActivityGroup({self._members!r})"


class GroupGenerator[T: ActivitySummary]:
    """Online clusterer fed one item at a time."""

    def __init__(self, comparator: ActivityComparator[T]) -> None:
        if comparator is None:
            raise ArgumentError("A comparator is required to group activities")
        self.comparator = comparator
        self._groups: list[ActivityGroup[T]] = []

    @property
    def groups(self) -> list[ActivityGroup[T]]:
        return list(self._groups)

    def group(self, item: T) -> None:
        matched = [
            group for group in self._groups if self.comparator.belongs(item, group)
        ]
        if not matched:
            self._groups.append(ActivityGroup((item,)))
            return

        target, *absorbed = matched
        for group in absorbed:
            target.absorb(group)
        target.add(item)
        if absorbed:
            log.debug("Item %r bridged %d groups", item.key, len(absorbed) + 1)
            self._groups = [
                group for group in self._groups if not any(group is gone for gone in absorbed)
            ]

    def group_all(self, items: Iterable[T]) -> list[ActivityGroup[T]]:
        for item in items:
            self.group(item)
        return self.groups


def group_activities[T: ActivitySummary](
    items: Sequence[T] | None,
    comparator: ActivityComparator[T] | None,
) -> list[ActivityGroup[T]]:
    """Cluster ``items`` into groups closed under ``comparator.matches``."""

    if items is None:
        raise ArgumentError("A sequence of activities is required for grouping")
    if comparator is None:
        raise ArgumentError("A comparator is required to group activities")
    return GroupGenerator(comparator).group_all(items)
