"""Shared fixtures for ORCID adapter tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from crissync.config import OrcidConfig, ResilienceConfig, RetryPolicy

OrcidPayload = dict[str, Any]
FIXTURES = Path(__file__).resolve().parents[2] / "data" / "orcid"
ORCID_ID = "0000-0002-1825-0097"
BASE_URL = "https://api.sandbox.orcid.org/v3.0"


def load_fixture(name: str) -> OrcidPayload:
    return json.loads((FIXTURES / name).read_text())


@pytest.fixture
def activities_json() -> OrcidPayload:
    return load_fixture("activities.json")


@pytest.fixture
def work_json() -> OrcidPayload:
    return load_fixture("work.json")


@pytest.fixture
def works_bulk_json() -> OrcidPayload:
    return load_fixture("works_bulk.json")


@pytest.fixture
def funding_json() -> OrcidPayload:
    return load_fixture("funding.json")


@pytest.fixture
def orcid_config() -> OrcidConfig:
    return OrcidConfig(
        client_id="APP-CRISSYNC-TEST",
        access_token="token-123",
        orcid_id=ORCID_ID,
        resilience=ResilienceConfig(
            name="orcid-test",
            base_url=BASE_URL,
            retry=RetryPolicy(total=0),
            headers={
                "Accept": "application/vnd.orcid+json",
                "Authorization": "Bearer token-123",
            },
        ),
    )
