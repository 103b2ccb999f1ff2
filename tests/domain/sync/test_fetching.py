from __future__ import annotations

import threading
from typing import TYPE_CHECKING

import pytest

from crissync.domain.ports import BulkFetchUnsupportedError, CommunicationError
from crissync.domain.sync import ArgumentError, FetchPool, FetchTimeoutError

if TYPE_CHECKING:
    from collections.abc import Sequence


def _echo(key: int) -> str:
    return f"record-{key}"


def _failing(key: int) -> str:
    raise CommunicationError(f"boom {key}", status_code=503)


def test_fetch_many_returns_one_result_per_key(fetch_pool: FetchPool) -> None:
    results = fetch_pool.fetch_many([1, 2, 3, 2], _echo)

    assert set(results) == {1, 2, 3}
    assert all(result.ok for result in results.values())
    assert results[2].activity == "record-2"


def test_communication_errors_are_folded_into_results(fetch_pool: FetchPool) -> None:
    results = fetch_pool.fetch_many([7], _failing)

    assert not results[7].ok
    assert isinstance(results[7].error, CommunicationError)


def test_bulk_reader_is_called_per_chunk(fetch_pool: FetchPool) -> None:
    chunks: list[tuple[int, ...]] = []
    lock = threading.Lock()

    def bulk(keys: Sequence[int]) -> dict[int, str]:
        with lock:
            chunks.append(tuple(keys))
        return {key: _echo(key) for key in keys if key != 4}

    results = fetch_pool.fetch_many(range(1, 6), _echo, bulk, bulk_size=2)

    assert sorted(chunks) == [(1, 2), (3, 4), (5,)]
    assert results[1].activity == "record-1"
    assert isinstance(results[4].error, CommunicationError)


def test_unsupported_bulk_reader_falls_back_to_single_reads(fetch_pool: FetchPool) -> None:
    def bulk(keys: Sequence[int]) -> dict[int, str]:
        raise BulkFetchUnsupportedError

    results = fetch_pool.fetch_many([1, 2, 3], _echo, bulk, bulk_size=10)

    assert {key: result.activity for key, result in results.items()} == {
        1: "record-1",
        2: "record-2",
        3: "record-3",
    }


def test_unexpected_error_stays_with_its_key(fetch_pool: FetchPool) -> None:
    def fetch(key: int) -> str:
        if key == 2:
            raise ValueError("malformed record")
        return _echo(key)

    results = fetch_pool.fetch_many([1, 2, 3], fetch)

    assert set(results) == {1, 2, 3}
    assert isinstance(results[2].error, ValueError)
    assert results[1].activity == "record-1"
    assert results[3].activity == "record-3"


def test_unexpected_bulk_error_spares_other_chunks(fetch_pool: FetchPool) -> None:
    def bulk(keys: Sequence[int]) -> dict[int, str]:
        if 3 in keys:
            raise KeyError(3)
        return {key: _echo(key) for key in keys}

    results = fetch_pool.fetch_many(range(1, 6), _echo, bulk, bulk_size=2)

    assert set(results) == {1, 2, 3, 4, 5}
    assert isinstance(results[3].error, KeyError)
    assert isinstance(results[4].error, KeyError)
    assert results[1].ok
    assert results[5].activity == "record-5"


def test_results_require_await(fetch_pool: FetchPool) -> None:
    batch = fetch_pool.dispatch([1], _echo)

    with pytest.raises(RuntimeError):
        batch.results()

    assert batch.await_all()
    assert batch.results()[1].activity == "record-1"


def test_timeout_recycles_pool_and_drops_pending_keys() -> None:
    release = threading.Event()

    def slow(key: int) -> str:
        if key == 2:
            release.wait(5)
        return _echo(key)

    with FetchPool(max_workers=2, timeout=0.2) as pool:
        batch = pool.dispatch([1, 2], slow)
        completed = batch.await_all()
        release.set()

        assert not completed
        assert set(batch.results()) == {1}
        assert pool.fetch_one(3, _echo).activity == "record-3"


def test_fetch_one_reports_timeout() -> None:
    release = threading.Event()

    def slow(key: int) -> str:
        release.wait(5)
        return _echo(key)

    with FetchPool(max_workers=1, timeout=0.1) as pool:
        result = pool.fetch_one(1, slow)
        release.set()

    assert isinstance(result.error, FetchTimeoutError)


def test_pool_needs_a_worker() -> None:
    with pytest.raises(ArgumentError):
        FetchPool(max_workers=0)
