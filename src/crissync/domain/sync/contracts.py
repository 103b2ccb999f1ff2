"""Result types returned by the reconciliation engine and the fetch pool."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from crissync.domain.model import InvalidField, SyncStatus

if TYPE_CHECKING:
    from collections.abc import Hashable, Iterable, Iterator

    from crissync.domain.model import ActivitySummary, PutCode


@dataclass(frozen=True, slots=True)
class InputPosition:
    """Report key of a local activity that has no key of its own."""

    index: int

    def __str__(self) -> str:
        return f"#{self.index}"


@dataclass(frozen=True, slots=True, kw_only=True)
class SyncOutcome:
    """Per-activity result of an export step."""

    status: SyncStatus
    remote_key: PutCode | None = None
    invalid_fields: frozenset[InvalidField] = frozenset()
    error: str | None = None

    @classmethod
    def added(cls, remote_key: PutCode) -> SyncOutcome:
        return cls(status=SyncStatus.ADD_OK, remote_key=remote_key)

    @classmethod
    def updated(cls, remote_key: PutCode) -> SyncOutcome:
        return cls(status=SyncStatus.UPDATE_OK, remote_key=remote_key)

    @classmethod
    def up_to_date(cls, remote_key: PutCode) -> SyncOutcome:
        return cls(status=SyncStatus.UP_TO_DATE, remote_key=remote_key)

    @classmethod
    def deleted(cls, remote_key: PutCode) -> SyncOutcome:
        return cls(status=SyncStatus.DELETE_OK, remote_key=remote_key)

    @classmethod
    def invalid(cls, invalid_fields: Iterable[InvalidField]) -> SyncOutcome:
        return cls(status=SyncStatus.INVALID, invalid_fields=frozenset(invalid_fields))

    @classmethod
    def failed(cls, error: BaseException | str, remote_key: PutCode | None = None) -> SyncOutcome:
        return cls(status=SyncStatus.ERROR, remote_key=remote_key, error=str(error))

    @property
    def ok(self) -> bool:
        return self.status not in (SyncStatus.INVALID, SyncStatus.ERROR)


class ExportReport(Mapping["Hashable", SyncOutcome]):
    """Read-only map from local key to outcome, plus remote deletions."""

    __slots__ = ("_deletions", "_outcomes")

    def __init__(
        self,
        outcomes: Mapping[Hashable, SyncOutcome],
        deletions: Mapping[PutCode, SyncOutcome] | None = None,
    ) -> None:
        self._outcomes = MappingProxyType(dict(outcomes))
        self._deletions = MappingProxyType(dict(deletions or {}))

    @property
    def deletions(self) -> Mapping[PutCode, SyncOutcome]:
        return self._deletions

    def __getitem__(self, key: Hashable) -> SyncOutcome:
        return self._outcomes[key]

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._outcomes)

    def __len__(self) -> int:
        return len(self._outcomes)

    def by_status(self, status: SyncStatus) -> dict[Hashable, SyncOutcome]:
        return {key: outcome for key, outcome in self._outcomes.items() if outcome.status == status}

    def __repr__(self) -> str:
        return f"ExportReport({dict(self._outcomes)!r}, deletions={dict(self._deletions)!r})"


@dataclass(frozen=True, slots=True)
class InvalidImport[S: ActivitySummary]:
    """A remote activity new to the local side that fails quality validation."""

    activity: S
    invalid_fields: frozenset[InvalidField] = field(default_factory=frozenset[InvalidField])


@dataclass(frozen=True, slots=True)
class FetchResult[K, A]:
    """Outcome of reading one key; exactly one of ``activity``/``error`` is set."""

    key: K
    activity: A | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.activity is not None
