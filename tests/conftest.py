from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from crissync.domain.sync import FetchPool, NullProgressHandler

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def fetch_pool() -> Iterator[FetchPool]:
    pool = FetchPool(max_workers=4, timeout=5.0)
    try:
        yield pool
    finally:
        pool.close()


@pytest.fixture
def quiet_progress() -> NullProgressHandler:
    return NullProgressHandler()
