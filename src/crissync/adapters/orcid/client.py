"""ORCID v3.0 member API client implementing the profile port."""

from __future__ import annotations

import asyncio
import threading
from logging import getLogger
from typing import TYPE_CHECKING, Any, Self

import httpx
from pydantic import BaseModel, ValidationError

from crissync.adapters.http_resilience import ResilientClient
from crissync.domain.ports import BulkFetchUnsupportedError, CommunicationError

from .schema import OrcidActivitiesSummary, OrcidFunding, OrcidWork, OrcidWorkBulk
from .translator import (
    funding_payload,
    translate_activities,
    translate_funding,
    translate_work,
    work_payload,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine, Sequence
    from types import TracebackType

    from crissync.config.http_resilience import ResilienceConfig
    from crissync.config.orcid import OrcidConfig
    from crissync.domain.model import ActivitiesSummary, Funding, PutCode, Work

log = getLogger(__name__)

MAX_BULK_READ = 100


class OrcidClient:
    """Synchronous facade over the async ORCID member API for one ORCID record.

    Calls from any thread run on one private event loop and share one
    ``ResilientClient``, so the call budget and the response cache cover every
    request of the client. ``close`` stops the loop; use the client as a context
    manager or close it explicitly.
    """

    def __init__(
        self,
        *,
        config: OrcidConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient
        self._lock = threading.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._http: ResilientClient | None = None
        self._closed = False

    @property
    def client_id(self) -> str:
        return self._config.client_id

    @property
    def orcid_id(self) -> str:
        return self._config.orcid_id

    def get_activities_summary(self) -> ActivitiesSummary:
        payload = self._run(self._get_async("activities", OrcidActivitiesSummary))
        return translate_activities(payload)

    # --- works --------------------------------------------------------------------

    def get_work(self, put_code: PutCode) -> Work:
        return translate_work(self._run(self._get_async(f"work/{put_code}", OrcidWork)))

    def get_works(self, put_codes: Sequence[PutCode]) -> dict[PutCode, Work]:
        if not put_codes:
            return {}
        if len(put_codes) > MAX_BULK_READ:
            raise CommunicationError(f"ORCID bulk reads take at most {MAX_BULK_READ} put-codes")
        path = "works/" + ",".join(str(put_code) for put_code in put_codes)
        bulk = self._run(self._get_async(path, OrcidWorkBulk))
        works: dict[PutCode, Work] = {}
        for item in bulk.bulk:
            if item.error is not None:
                log.warning(
                    "ORCID bulk read error %s: %s",
                    item.error.response_code,
                    item.error.developer_message,
                )
                continue
            if item.work is not None and item.work.put_code is not None:
                works[item.work.put_code] = translate_work(item.work)
        return works

    def add_work(self, work: Work) -> PutCode:
        payload = work_payload(work.with_key(None)).to_payload()
        return self._run(self._add_async("work", payload))

    def update_work(self, put_code: PutCode, work: Work) -> None:
        payload = work_payload(work.with_key(put_code)).to_payload()
        self._run(self._send_async("PUT", f"work/{put_code}", payload))

    def delete_work(self, put_code: PutCode) -> None:
        self._run(self._send_async("DELETE", f"work/{put_code}"))

    # --- fundings -----------------------------------------------------------------

    def get_funding(self, put_code: PutCode) -> Funding:
        payload = self._run(self._get_async(f"funding/{put_code}", OrcidFunding))
        return translate_funding(payload)

    def get_fundings(
        self,
        put_codes: Sequence[PutCode],  # noqa: ARG002
    ) -> dict[PutCode, Funding]:
        raise BulkFetchUnsupportedError("ORCID offers no bulk read for fundings")

    def add_funding(self, funding: Funding) -> PutCode:
        payload = funding_payload(funding.with_key(None)).to_payload()
        return self._run(self._add_async("funding", payload))

    def update_funding(self, put_code: PutCode, funding: Funding) -> None:
        payload = funding_payload(funding.with_key(put_code)).to_payload()
        self._run(self._send_async("PUT", f"funding/{put_code}", payload))

    def delete_funding(self, put_code: PutCode) -> None:
        self._run(self._send_async("DELETE", f"funding/{put_code}"))

    # --- lifecycle ----------------------------------------------------------------

    def close(self) -> None:
        """Close the HTTP client and stop the event loop thread."""

        with self._lock:
            if self._closed:
                return
            self._closed = True
            loop, thread = self._loop, self._thread
            self._loop = self._thread = None
        if loop is None or thread is None:
            return
        try:
            asyncio.run_coroutine_threadsafe(self._shutdown(), loop).result()
        finally:
            loop.call_soon_threadsafe(loop.stop)
            thread.join()
            loop.close()
        log.debug("Closed ORCID client for %s", self._config.orcid_id)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def _event_loop(self) -> asyncio.AbstractEventLoop:
        with self._lock:
            if self._closed:
                raise RuntimeError("ORCID client is closed")
            if self._loop is None:
                loop = asyncio.new_event_loop()
                thread = threading.Thread(
                    target=loop.run_forever, name="crissync-orcid", daemon=True
                )
                thread.start()
                self._loop, self._thread = loop, thread
            return self._loop

    def _run[T](self, call: Coroutine[Any, Any, T]) -> T:
        try:
            loop = self._event_loop()
        except RuntimeError:
            call.close()
            raise
        return asyncio.run_coroutine_threadsafe(call, loop).result()

    # --- transport ----------------------------------------------------------------

    def _client(self) -> ResilientClient:
        # only touched from the loop thread
        if self._http is None:
            self._http = self._client_factory(self._resilience)
        return self._http

    async def _shutdown(self) -> None:
        # requests of timed-out fetches are still pending
        current = asyncio.current_task()
        pending = [task for task in asyncio.all_tasks() if task is not current]
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    def _path(self, section: str) -> str:
        return f"/{self._config.orcid_id}/{section}"

    async def _get_async[M: BaseModel](self, section: str, model: type[M]) -> M:
        response = await self._send_async("GET", section)
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise CommunicationError(
                f"Unexpected ORCID payload for {section}: {exc}",
                status_code=response.status_code,
            ) from exc

    async def _add_async(self, section: str, payload: dict[str, object]) -> PutCode:
        response = await self._send_async("POST", section, payload)
        location = response.headers.get("Location")
        if not location:
            raise CommunicationError(
                f"ORCID created a {section} without a Location header",
                status_code=response.status_code,
            )
        try:
            return int(location.rstrip("/").rsplit("/", 1)[-1])
        except ValueError as exc:
            raise CommunicationError(
                f"Unexpected ORCID Location header {location!r}",
                status_code=response.status_code,
            ) from exc

    async def _send_async(
        self,
        method: str,
        section: str,
        payload: dict[str, object] | None = None,
    ) -> httpx.Response:
        path = self._path(section)
        try:
            response = await self._client().request(method, path, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise CommunicationError(
                f"ORCID {method} {path} failed with status {status}", status_code=status
            ) from exc
        except httpx.HTTPError as exc:
            raise CommunicationError(f"ORCID {method} {path} failed: {exc}") from exc
        return response
