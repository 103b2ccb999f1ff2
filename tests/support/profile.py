"""In-memory implementation of the remote profile port for testing."""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import TYPE_CHECKING

from crissync.domain.model import ActivitiesSummary, Funding, Work
from crissync.domain.ports import BulkFetchUnsupportedError, CommunicationError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from crissync.domain.model import PutCode

CLIENT_ID = "APP-CRISSYNC-TEST"


class InMemoryProfileClient:
    """Profile with put-code keyed works and fundings.

    Every call is appended to ``calls`` as ``(operation, put_code)``. ``fail`` makes an
    operation raise ``CommunicationError``, for one put-code or for all of them.
    ``stall`` blocks an operation until the returned event is set.
    """

    def __init__(
        self,
        *,
        works: Iterable[Work] = (),
        fundings: Iterable[Funding] = (),
        client_id: str = CLIENT_ID,
        bulk_fundings: bool = False,
    ) -> None:
        self._client_id = client_id
        self.works: dict[PutCode, Work] = {}
        self.fundings: dict[PutCode, Funding] = {}
        self.calls: list[tuple[str, PutCode | None]] = []
        self._failures: set[tuple[str, PutCode | None]] = set()
        self._stalls: dict[tuple[str, PutCode | None], threading.Event] = {}
        self.closed = False
        self._bulk_fundings = bulk_fundings
        self._next_put_code = 1000
        for work in works:
            put_code = self._key_for(work.key)
            self.works[put_code] = work.with_key(put_code)
        for funding in fundings:
            put_code = self._key_for(funding.key)
            self.fundings[put_code] = funding.with_key(put_code)

    def _key_for(self, key: PutCode | None) -> PutCode:
        if key is not None:
            return key
        self._next_put_code += 1
        return self._next_put_code

    @property
    def client_id(self) -> str:
        return self._client_id

    def fail(self, operation: str, put_code: PutCode | None = None) -> None:
        self._failures.add((operation, put_code))

    def stall(self, operation: str, put_code: PutCode | None = None) -> threading.Event:
        gate = threading.Event()
        self._stalls[(operation, put_code)] = gate
        return gate

    def close(self) -> None:
        self.closed = True

    def _record(self, operation: str, put_code: PutCode | None = None) -> None:
        self.calls.append((operation, put_code))
        gate = self._stalls.get((operation, put_code)) or self._stalls.get((operation, None))
        if gate is not None:
            gate.wait(timeout=10.0)
        if (operation, None) in self._failures or (operation, put_code) in self._failures:
            raise CommunicationError(f"{operation} failed for {put_code}", status_code=500)

    def operations(self, operation: str) -> list[PutCode | None]:
        return [key for name, key in self.calls if name == operation]

    # --- listing ------------------------------------------------------------------

    def get_activities_summary(self) -> ActivitiesSummary:
        self._record("get_activities_summary")
        return ActivitiesSummary(
            works=tuple(work.to_summary() for work in self.works.values()),
            fundings=tuple(funding.to_summary() for funding in self.fundings.values()),
        )

    # --- works --------------------------------------------------------------------

    def get_work(self, put_code: PutCode) -> Work:
        self._record("get_work", put_code)
        if put_code not in self.works:
            raise CommunicationError(f"No work {put_code}", status_code=404)
        return self.works[put_code]

    def get_works(self, put_codes: Sequence[PutCode]) -> dict[PutCode, Work]:
        self._record("get_works")
        return {code: self.works[code] for code in put_codes if code in self.works}

    def add_work(self, work: Work) -> PutCode:
        self._record("add_work", work.key)
        put_code = self._key_for(None)
        self.works[put_code] = replace(work, key=put_code, source=self._client_id)
        return put_code

    def update_work(self, put_code: PutCode, work: Work) -> None:
        self._record("update_work", put_code)
        if put_code not in self.works:
            raise CommunicationError(f"No work {put_code}", status_code=404)
        self.works[put_code] = replace(work, key=put_code, source=self.works[put_code].source)

    def delete_work(self, put_code: PutCode) -> None:
        self._record("delete_work", put_code)
        self.works.pop(put_code, None)

    # --- fundings -----------------------------------------------------------------

    def get_funding(self, put_code: PutCode) -> Funding:
        self._record("get_funding", put_code)
        if put_code not in self.fundings:
            raise CommunicationError(f"No funding {put_code}", status_code=404)
        return self.fundings[put_code]

    def get_fundings(self, put_codes: Sequence[PutCode]) -> dict[PutCode, Funding]:
        self._record("get_fundings")
        if not self._bulk_fundings:
            raise BulkFetchUnsupportedError("No bulk read for fundings")
        return {code: self.fundings[code] for code in put_codes if code in self.fundings}

    def add_funding(self, funding: Funding) -> PutCode:
        self._record("add_funding", funding.key)
        put_code = self._key_for(None)
        self.fundings[put_code] = replace(funding, key=put_code, source=self._client_id)
        return put_code

    def update_funding(self, put_code: PutCode, funding: Funding) -> None:
        self._record("update_funding", put_code)
        if put_code not in self.fundings:
            raise CommunicationError(f"No funding {put_code}", status_code=404)
        self.fundings[put_code] = replace(
            funding, key=put_code, source=self.fundings[put_code].source
        )

    def delete_funding(self, put_code: PutCode) -> None:
        self._record("delete_funding", put_code)
        self.fundings.pop(put_code, None)
