"""Async HTTP client for the ORCID API: retries, a call budget and an optional cache."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage
from hishel.httpx import AsyncCacheClient
from httpx_retries import Retry, RetryTransport

from crissync.config.storage import get_storage_config

if TYPE_CHECKING:
    from types import TracebackType

    from crissync.config.http_resilience import CacheConfig, ResilienceConfig, RetryPolicy

log = getLogger(__name__)

# POST creates a new put-code on every call and is never repeated
IDEMPOTENT_METHODS: Final = ("GET", "PUT", "DELETE")
TRANSIENT_ERRORS: Final = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
)


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        backoff_jitter=policy.backoff_jitter,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=True,
        allowed_methods=IDEMPOTENT_METHODS,
        status_forcelist=tuple(sorted(policy.statuses)),
        retry_on_exceptions=TRANSIENT_ERRORS,
    )


class ResilientClient:
    """Async HTTP client whose call budget and cache last as long as the instance.

    Share one instance between all calls to an API; it must stay on the event loop
    it was first used on.

    ``transport`` replaces the network layer below the retry logic, which is how
    tests talk to a mocked API.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._limiter = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit is not None
            else None
        )
        options: dict[str, Any] = {
            "timeout": config.timeout_seconds,
            "headers": dict(config.headers or {}),
            "transport": RetryTransport(transport=transport, retry=build_retry(config.retry)),
        }
        if config.base_url is not None:
            options["base_url"] = config.base_url

        storage = _build_cache_storage(config.cache)
        self._client: httpx.AsyncClient = (
            AsyncCacheClient(**options, storage=storage)
            if storage is not None
            else httpx.AsyncClient(**options)
        )

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: object | None = None,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        log.debug("%s %s via %s", method, url, self.config.name)
        if self._limiter is None:
            response = await self._client.request(method, url, json=json, params=params)
        else:
            async with self._limiter:
                response = await self._client.request(method, url, json=json, params=params)
        if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
            log.warning("%s throttled %s %s after retries", self.config.name, method, url)
        return response


def _build_cache_storage(config: CacheConfig | None) -> AsyncSqliteStorage | None:
    if config is None:
        return None
    if config.backend == "sqlite":
        database_path = config.sqlite_path or str(get_storage_config().http_cache_path())
    elif config.backend == "memory":
        database_path = ":memory:"
    else:
        msg = f"Unsupported cache backend: {config.backend}"
        raise ValueError(msg)
    return AsyncSqliteStorage(database_path=database_path, default_ttl=config.ttl_seconds)
