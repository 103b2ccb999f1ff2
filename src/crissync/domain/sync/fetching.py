"""Bounded concurrent reads of full activity records.

Only reads go through the pool. Each submitted task owns one key (or one chunk
of keys for bulk readers) and returns its results through its own future, so
callers see nothing until ``FetchBatch.await_all`` has returned. A batch that
misses its deadline gets its executor discarded and replaced; in-flight tasks are
abandoned and their keys left out of the results.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from logging import getLogger
from typing import TYPE_CHECKING, Self

from crissync.domain.ports import BulkFetchUnsupportedError, CommunicationError

from .contracts import FetchResult
from .errors import ArgumentError, FetchTimeoutError

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Iterable, Mapping, Sequence
    from types import TracebackType


log = getLogger(__name__)

DEFAULT_MAX_WORKERS = 10
DEFAULT_TIMEOUT = 100.0

type FetchOne[K, A] = Callable[[K], A]
type FetchBulk[K, A] = Callable[[Sequence[K]], Mapping[K, A]]
type ResultsByKey[K, A] = dict[K, FetchResult[K, A]]


def _fetch_single[K, A](key: K, fetch: FetchOne[K, A]) -> ResultsByKey[K, A]:
    try:
        activity = fetch(key)
    except CommunicationError as exc:
        log.warning("Fetching %r failed: %s", key, exc)
        return {key: FetchResult(key, error=exc)}
    except Exception as exc:
        log.exception("Unexpected error while fetching %r", key)
        return {key: FetchResult(key, error=exc)}
    return {key: FetchResult(key, activity)}


def _fetch_chunk[K, A](
    keys: Sequence[K],
    fetch: FetchOne[K, A],
    fetch_bulk: FetchBulk[K, A],
) -> ResultsByKey[K, A]:
    try:
        activities = fetch_bulk(keys)
    except BulkFetchUnsupportedError:
        log.debug("Bulk read unsupported, fetching %d keys one by one", len(keys))
        results: ResultsByKey[K, A] = {}
        for key in keys:
            results.update(_fetch_single(key, fetch))
        return results
    except CommunicationError as exc:
        log.warning("Bulk fetch of %d keys failed: %s", len(keys), exc)
        return {key: FetchResult(key, error=exc) for key in keys}
    except Exception as exc:
        log.exception("Unexpected error during bulk fetch of %d keys", len(keys))
        return {key: FetchResult(key, error=exc) for key in keys}

    results = {}
    for key in keys:
        activity = activities.get(key)
        if activity is None:
            missing = CommunicationError(f"No record returned for {key!r}")
            results[key] = FetchResult(key, error=missing)
        else:
            results[key] = FetchResult(key, activity)
    return results


def _chunks[K](keys: Sequence[K], size: int) -> Iterable[Sequence[K]]:
    for start in range(0, len(keys), size):
        yield keys[start : start + size]


class FetchBatch[K, A]:
    """Futures for one dispatched batch; results are readable once awaited."""

    def __init__(self, pool: FetchPool, futures: Sequence[Future[ResultsByKey[K, A]]]) -> None:
        self._pool = pool
        self._futures = tuple(futures)
        self._done: tuple[Future[ResultsByKey[K, A]], ...] | None = None
        self.completed = False

    def await_all(self, timeout: float | None = None) -> bool:
        """Block until every task finished or ``timeout`` (default: the pool's) elapsed.

        Returns whether everything completed. On timeout the pool is recycled.
        """

        deadline = self._pool.timeout if timeout is None else timeout
        done, pending = wait(self._futures, timeout=deadline)
        self._done = tuple(future for future in self._futures if future in done)
        self.completed = not pending
        if pending:
            log.warning(
                "Fetch batch timed out after %.1fs with %d of %d tasks pending",
                deadline,
                len(pending),
                len(self._futures),
            )
            self._pool.recycle()
        return self.completed

    def results(self) -> ResultsByKey[K, A]:
        """Results by key for every finished task; timed-out keys are absent."""

        if self._done is None:
            raise RuntimeError("FetchBatch.results() called before await_all()")
        results: ResultsByKey[K, A] = {}
        for future in self._done:
            if future.cancelled():
                continue
            results.update(future.result())
        return results


class FetchPool:
    def __init__(
        self,
        max_workers: int = DEFAULT_MAX_WORKERS,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if max_workers < 1:
            raise ArgumentError("A fetch pool needs at least one worker")
        self.max_workers = max_workers
        self.timeout = timeout
        self._lock = threading.Lock()
        self._executor = self._new_executor()

    def _new_executor(self) -> ThreadPoolExecutor:
        return ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="crissync-fetch")

    def recycle(self) -> None:
        """Abandon running tasks and start over with a fresh executor."""

        with self._lock:
            stale = self._executor
            self._executor = self._new_executor()
        stale.shutdown(wait=False, cancel_futures=True)

    def dispatch[K: Hashable, A](
        self,
        keys: Iterable[K],
        fetch: FetchOne[K, A],
        fetch_bulk: FetchBulk[K, A] | None = None,
        bulk_size: int = 0,
    ) -> FetchBatch[K, A]:
        """Submit one task per key, or per ``bulk_size`` chunk when a bulk reader is given."""

        unique_keys = list(dict.fromkeys(keys))
        with self._lock:
            executor = self._executor
            if fetch_bulk is not None and bulk_size > 1:
                futures = [
                    executor.submit(_fetch_chunk, chunk, fetch, fetch_bulk)
                    for chunk in _chunks(unique_keys, bulk_size)
                ]
            else:
                futures = [executor.submit(_fetch_single, key, fetch) for key in unique_keys]
        log.debug("Dispatched %d fetch tasks for %d keys", len(futures), len(unique_keys))
        return FetchBatch(self, futures)

    def fetch_many[K: Hashable, A](
        self,
        keys: Iterable[K],
        fetch: FetchOne[K, A],
        fetch_bulk: FetchBulk[K, A] | None = None,
        bulk_size: int = 0,
        *,
        timeout: float | None = None,
    ) -> ResultsByKey[K, A]:
        batch = self.dispatch(keys, fetch, fetch_bulk, bulk_size)
        batch.await_all(timeout)
        return batch.results()

    def fetch_one[K: Hashable, A](
        self,
        key: K,
        fetch: FetchOne[K, A],
        *,
        timeout: float | None = None,
    ) -> FetchResult[K, A]:
        results = self.fetch_many([key], fetch, timeout=timeout)
        if key not in results:
            return FetchResult(key, error=FetchTimeoutError(f"Fetching {key!r} timed out"))
        return results[key]

    def close(self) -> None:
        with self._lock:
            self._executor.shutdown(wait=True)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()
