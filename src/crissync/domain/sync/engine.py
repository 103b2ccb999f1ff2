"""Reconciliation of local activities against the remote profile.

One engine instance serves one activity kind and one remote client. Every run
recomputes everything from a fresh remote listing; nothing is kept between runs.

Import side: remote summaries are clustered into duplicate groups, each group is
collapsed into a merged summary, and merged summaries are compared with the local
activities to find what is new (``import_activities``), what is new but unusable
(``import_invalid``), and what adds identifiers to known activities
(``import_updates``).

Export side: remote entries written by this client are matched against the local
activities; unmatched remote entries are deleted, matched ones updated when stale,
and unmatched local activities added.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING

from crissync.domain.model import identical_identifiers
from crissync.domain.ports import CommunicationError

from .comparators import IdentifierComparator
from .contracts import ExportReport, FetchResult, InputPosition, InvalidImport, SyncOutcome
from .diff import IdentifierDiff, any_equivalent, diff_identifiers
from .errors import ArgumentError, FetchTimeoutError
from .fetching import FetchPool
from .grouping import GroupGenerator
from .progress import LoggingProgressHandler, ProgressStatus, percentage
from .quality import QualityValidator

if TYPE_CHECKING:
    from collections.abc import Collection, Hashable, Iterable, Sequence

    from crissync.domain.model import ActivitySummary, ExternalIdentifier, PutCode
    from crissync.domain.ports import ProfileClient

    from .comparators import ActivityComparator
    from .kinds import ActivityKind
    from .progress import ProgressHandler


log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _Claim[A: ActivitySummary]:
    local_key: Hashable
    local: A
    remote_key: PutCode


@dataclass(frozen=True, slots=True)
class _PendingUpdate[A: ActivitySummary]:
    local_key: Hashable
    local: A
    remote: A
    remote_key: PutCode
    diff: IdentifierDiff


def local_key(activity: ActivitySummary, position: int) -> Hashable:
    """Key an outcome is reported under: the activity's key, else its input position."""

    return activity.key if activity.key is not None else InputPosition(position)


def _in_order(
    selected: Collection[ExternalIdentifier],
    reference: Iterable[ExternalIdentifier],
) -> tuple[ExternalIdentifier, ...]:
    return tuple(eid for eid in dict.fromkeys(reference) if eid in selected)


class ReconciliationEngine[S: ActivitySummary, A: ActivitySummary]:
    def __init__(
        self,
        kind: ActivityKind[S, A],
        client: ProfileClient,
        *,
        pool: FetchPool | None = None,
        comparator: ActivityComparator[S] | None = None,
        progress: ProgressHandler | None = None,
        types: Iterable[str] | None = None,
    ) -> None:
        if kind is None or client is None:
            raise ArgumentError("An activity kind and a remote client are required")
        self.kind = kind
        self.client = client
        self.pool = pool if pool is not None else FetchPool()
        self.comparator: ActivityComparator[S] = (
            comparator if comparator is not None else IdentifierComparator()
        )
        self.progress: ProgressHandler = (
            progress if progress is not None else LoggingProgressHandler()
        )
        self.types = frozenset(types) if types is not None else None
        self.validator: QualityValidator[S] = QualityValidator(kind)

    # --- comparisons ------------------------------------------------------------------

    def is_up_to_date(self, first: S, second: S) -> bool:
        """Same SELF identifiers, same PART_OF identifiers and same metadata."""

        if not diff_identifiers(first.self_ids, second.self_ids).identical:
            return False
        if self.kind.metadata(first) != self.kind.metadata(second):
            return False
        return identical_identifiers(first.part_of_ids, second.part_of_ids)

    def has_new_ids(self, first: S, second: S) -> bool:
        """Whether ``second`` carries SELF identifiers ``first`` lacks."""

        return bool(diff_identifiers(first.self_ids, second.self_ids).more)

    # --- import -----------------------------------------------------------------------

    def import_activities(self, local: Sequence[S]) -> list[A]:
        """Full records of valid remote activities unknown to ``local``, without keys."""

        self._require(local)
        self.progress.set_progress(0)
        unknown = self._new_merged(local)
        self.progress.set_status(ProgressStatus.VALIDATING)
        new = [merged for merged in unknown if self.validator.is_valid(merged)]

        self.progress.set_status(ProgressStatus.FETCHING)
        fetched = self._fetch_full([merged.key for merged in new if merged.key is not None])
        candidates: list[A] = []
        for merged in new:
            result = fetched.get(merged.key) if merged.key is not None else None
            activity = self._fetched_activity(merged.key, result)
            if activity is None:
                continue
            candidates.append(activity.with_key(None).with_external_ids(merged.external_ids))

        log.debug("Import found %d new %s", len(candidates), self.kind.name)
        self.progress.done()
        return candidates

    def import_invalid(self, local: Sequence[S]) -> list[InvalidImport[S]]:
        """Remote activities unknown to ``local`` that fail quality validation."""

        self._require(local)
        self.progress.set_progress(0)
        unknown = self._new_merged(local)
        self.progress.set_status(ProgressStatus.VALIDATING)
        invalid: list[InvalidImport[S]] = []
        for merged in unknown:
            fields = self.validator.validate(merged)
            if fields:
                invalid.append(InvalidImport(merged.with_key(None), fields))
        self.progress.done()
        return invalid

    def import_counter(self, local: Sequence[S]) -> int:
        """How many activities ``import_activities`` would return, from summaries alone."""

        self._require(local)
        self.progress.set_progress(0)
        unknown = self._new_merged(local)
        self.progress.set_status(ProgressStatus.VALIDATING)
        count = sum(1 for merged in unknown if self.validator.is_valid(merged))
        self.progress.done()
        return count

    def import_updates(self, local: Sequence[S]) -> list[A]:
        """Remote records adding identifiers to known local activities.

        Each result is keyed with the local activity's key and carries only the
        identifiers the local activity lacks.
        """

        self._require(local)
        self.progress.set_progress(0)
        merged_summaries = self._merged_remote()

        self.progress.set_status(ProgressStatus.DIFFING)
        pending: list[tuple[S, S, IdentifierDiff]] = []
        for index, merged in enumerate(merged_summaries):
            self.progress.set_progress(percentage(index, len(merged_summaries)))
            for activity in local:
                diff = diff_identifiers(activity.self_ids, merged.self_ids)
                if diff.same and diff.more:
                    pending.append((activity, merged, diff))

        self.progress.set_status(ProgressStatus.FETCHING)
        remote_keys = [merged.key for _, merged, _ in pending if merged.key is not None]
        fetched = self._fetch_full(remote_keys)
        updates: list[A] = []
        for activity, merged, diff in pending:
            result = fetched.get(merged.key) if merged.key is not None else None
            remote = self._fetched_activity(merged.key, result)
            if remote is None:
                continue
            new_ids = _in_order(diff.more, merged.self_ids)
            updates.append(remote.with_key(activity.key).with_external_ids(new_ids))

        log.debug("Import found %d updated %s", len(updates), self.kind.name)
        self.progress.done()
        return updates

    # --- export -----------------------------------------------------------------------

    def export(self, local: Sequence[A], *, force: bool = False) -> ExportReport:
        """Make the remote entries written by this client mirror ``local``."""

        self._require(local)
        self.progress.set_progress(0)
        self.progress.set_status(ProgressStatus.LISTING)
        client_id = self.client.client_id
        sourced: list[tuple[PutCode, S]] = [
            (summary.key, summary)
            for summary in self.kind.summaries(self.client.get_activities_summary())
            if summary.source == client_id and summary.key is not None and self._accepts(summary)
        ]
        log.debug(
            "Export: %d local, %d sourced remote %s", len(local), len(sourced), self.kind.name
        )

        outcomes: dict[Hashable, SyncOutcome] = {}
        deletions: dict[PutCode, SyncOutcome] = {}

        self.progress.set_status(ProgressStatus.VALIDATING)
        unclaimed: list[tuple[Hashable, A]] = []
        for position, activity in enumerate(local):
            self.progress.set_progress(percentage(position, len(local)))
            if not self._accepts(activity):
                continue
            key = local_key(activity, position)
            invalid = self.validator.validate(activity, local)
            if invalid:
                outcomes[key] = SyncOutcome.invalid(invalid)
                continue
            unclaimed.append((key, activity))

        self.progress.set_status(ProgressStatus.DELETING)
        claims: list[_Claim[A]] = []
        for position, (remote_key, remote) in enumerate(sourced):
            self.progress.set_progress(percentage(position, len(sourced)))
            match = next(
                (
                    (key, activity)
                    for key, activity in unclaimed
                    if any_equivalent(activity.self_ids, remote.self_ids)
                ),
                None,
            )
            if match is None:
                deletions[remote_key] = self._delete(remote_key)
                continue
            unclaimed.remove(match)
            claims.append(_Claim(match[0], match[1], remote_key))

        self.progress.set_status(ProgressStatus.FETCHING)
        fetched = self._fetch_full([claim.remote_key for claim in claims])
        pending: list[_PendingUpdate[A]] = []
        for claim in claims:
            result = fetched[claim.remote_key]
            if result.activity is None:
                outcomes[claim.local_key] = SyncOutcome.failed(
                    result.error or "missing record", claim.remote_key
                )
                self.progress.send_error(f"Could not read remote entry {claim.remote_key}")
                continue
            if not force and self.is_up_to_date(claim.local, result.activity):
                outcomes[claim.local_key] = SyncOutcome.up_to_date(claim.remote_key)
                continue
            diff = diff_identifiers(claim.local.self_ids, result.activity.self_ids)
            pending.append(
                _PendingUpdate(
                    claim.local_key, claim.local, result.activity, claim.remote_key, diff
                )
            )

        self.progress.set_status(ProgressStatus.UPDATING)
        # phase 1 drops identifiers only the remote entry has
        for position, update in enumerate(pending):
            self.progress.set_progress(percentage(position, len(pending)))
            if update.diff.more:
                ids = _in_order(update.diff.same, update.remote.self_ids)
                outcomes[update.local_key] = self._update(update, ids)
        # phase 2 adds identifiers only the local activity has
        for position, update in enumerate(pending):
            self.progress.set_progress(percentage(position, len(pending)))
            previous = outcomes.get(update.local_key)
            if previous is not None and not previous.ok:
                continue
            if update.diff.less or not update.diff.more:
                ids = _in_order(update.diff.same, update.remote.self_ids) + _in_order(
                    update.diff.less, update.local.self_ids
                )
                outcomes[update.local_key] = self._update(update, ids)

        self.progress.set_status(ProgressStatus.ADDING)
        for position, (key, activity) in enumerate(unclaimed):
            self.progress.set_progress(percentage(position, len(unclaimed)))
            outcomes[key] = self._add(activity)

        self.progress.done()
        return ExportReport(outcomes, deletions)

    # --- helpers ----------------------------------------------------------------------

    def _require(self, local: Sequence[S] | None) -> None:
        if local is None:
            raise ArgumentError("A sequence of local activities is required")

    def _accepts(self, activity: S) -> bool:
        return self.types is None or activity.type in self.types

    def _remote_summaries(self) -> list[S]:
        self.progress.set_status(ProgressStatus.LISTING)
        listing = self.client.get_activities_summary()
        return [summary for summary in self.kind.summaries(listing) if self._accepts(summary)]

    def _merged_remote(self) -> list[S]:
        summaries = self._remote_summaries()
        self.progress.set_status(ProgressStatus.GROUPING)
        generator = GroupGenerator(self.comparator)
        for position, summary in enumerate(summaries):
            self.progress.set_progress(percentage(position, len(summaries)))
            generator.group(summary)
        groups = generator.groups
        log.debug(
            "Grouped %d remote %s into %d groups", len(summaries), self.kind.name, len(groups)
        )
        return [self.kind.merge(group) for group in groups]

    def _new_merged(self, local: Sequence[S]) -> list[S]:
        merged_summaries = self._merged_remote()
        self.progress.set_status(ProgressStatus.DIFFING)
        return [
            merged
            for merged in merged_summaries
            if not any(any_equivalent(merged.self_ids, activity.self_ids) for activity in local)
        ]

    def _fetch_full(self, keys: Sequence[PutCode]) -> dict[PutCode, FetchResult[PutCode, A]]:
        if not keys:
            return {}
        fetch_bulk = (
            partial(self.kind.fetch_many, self.client) if self.kind.bulk_size > 1 else None
        )
        results = self.pool.fetch_many(
            keys,
            partial(self.kind.fetch, self.client),
            fetch_bulk,
            self.kind.bulk_size,
        )
        for key in keys:
            if key not in results:
                timeout = FetchTimeoutError(f"Fetching {key} timed out")
                results[key] = FetchResult(key, error=timeout)
        return results

    def _fetched_activity(
        self, key: PutCode | None, result: FetchResult[PutCode, A] | None
    ) -> A | None:
        if result is not None and result.activity is not None:
            return result.activity
        error = result.error if result is not None else None
        log.warning("Skipping remote %s entry %s: %s", self.kind.name, key, error)
        self.progress.send_error(f"Could not read remote entry {key}: {error}")
        return None

    def _update(
        self, update: _PendingUpdate[A], ids: tuple[ExternalIdentifier, ...]
    ) -> SyncOutcome:
        payload = update.local.with_key(update.remote_key).with_external_ids(
            ids + update.local.part_of_ids
        )
        try:
            self.kind.update(self.client, update.remote_key, payload)
        except CommunicationError as exc:
            log.warning("Updating remote entry %s failed: %s", update.remote_key, exc)
            self.progress.send_error(f"Could not update remote entry {update.remote_key}: {exc}")
            return SyncOutcome.failed(exc, update.remote_key)
        return SyncOutcome.updated(update.remote_key)

    def _add(self, activity: A) -> SyncOutcome:
        try:
            remote_key = self.kind.add(self.client, activity.with_key(None))
        except CommunicationError as exc:
            log.warning("Adding %r failed: %s", activity.title, exc)
            self.progress.send_error(f"Could not add {activity.title!r}: {exc}")
            return SyncOutcome.failed(exc)
        return SyncOutcome.added(remote_key)

    def _delete(self, remote_key: PutCode) -> SyncOutcome:
        try:
            self.kind.delete(self.client, remote_key)
        except CommunicationError as exc:
            log.warning("Deleting remote entry %s failed: %s", remote_key, exc)
            self.progress.send_error(f"Could not delete remote entry {remote_key}: {exc}")
            return SyncOutcome.failed(exc, remote_key)
        return SyncOutcome.deleted(remote_key)
