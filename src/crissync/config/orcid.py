"""ORCID member API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .storage import StorageConfig, get_storage_config

DEFAULT_ORCID_API_BASE_URL = "https://api.orcid.org/v3.0"
ORCID_MEDIA_TYPE = "application/vnd.orcid+json"
ORCID_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class OrcidConfig:
    """Credentials for one ORCID record plus HTTP behaviour."""

    client_id: str
    access_token: str
    orcid_id: str
    resilience: ResilienceConfig


def _cache_config(storage: StorageConfig | None) -> CacheConfig | None:
    backend = optional_env_var("CRISSYNC_HTTP_CACHE")
    if backend is None or backend == "off":
        return None
    if backend == "memory":
        return CacheConfig(backend="memory")
    if backend != "sqlite":
        raise ConfigurationError(
            f"CRISSYNC_HTTP_CACHE must be one of off, memory, sqlite; got {backend!r}"
        )
    storage_config = storage or get_storage_config()
    return CacheConfig(backend="sqlite", sqlite_path=str(storage_config.http_cache_path()))


def get_orcid_config(
    *,
    resilience: ResilienceConfig | None = None,
    storage: StorageConfig | None = None,
) -> OrcidConfig:
    values = require_env_vars(("ORCID_CLIENT_ID", "ORCID_ACCESS_TOKEN", "ORCID_ID"))
    base_url = optional_env_var("ORCID_API_BASE_URL") or DEFAULT_ORCID_API_BASE_URL
    access_token = values["ORCID_ACCESS_TOKEN"]
    return OrcidConfig(
        client_id=values["ORCID_CLIENT_ID"],
        access_token=access_token,
        orcid_id=values["ORCID_ID"],
        resilience=resilience
        or ResilienceConfig(
            name="orcid",
            base_url=base_url.rstrip("/"),
            timeout_seconds=ORCID_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=4),
            ratelimit=RateLimit(max_calls=8, per_seconds=1.0),
            cache=_cache_config(storage),
            headers={
                "Accept": ORCID_MEDIA_TYPE,
                "Content-Type": ORCID_MEDIA_TYPE,
                "Authorization": f"Bearer {access_token}",
            },
        ),
    )
