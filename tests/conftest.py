"""Pytest fixtures shared by dashboard tests."""

import os

# Settings are read at import time; keep tests offline.
os.environ.setdefault("TRACING_ENABLED", "false")
os.environ.setdefault("METRICS_PORT", "0")
os.environ.setdefault("UPSTREAM_BASE_URL", "https://bananominer.com")

import httpx
import pytest
from fastapi.testclient import TestClient

from bananodash.services.dashboard.main import app, get_stats_client
from bananodash.services.dashboard.service import MinerStatsClient


SAMPLE_PAYLOAD = {
    "user": {"name": "ban_1abc", "created_at": "2024-01-01T00:00:00Z"},
    "payments": [
        {
            "amount": 1.5,
            "created_at": "2024-06-01T00:00:00Z",
            "score": 100,
            "work_units": 50,
            "block_hash": "DEADBEEF",
        }
    ],
}


class FakeUpstream:
    """Scripted BananoMiner stand-in recording every outbound request."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responder = lambda request: httpx.Response(200, json=SAMPLE_PAYLOAD)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    def client(self) -> MinerStatsClient:
        return MinerStatsClient(
            base_url="https://bananominer.com",
            user_agent="BananoMinerDashboard/1.0",
            transport=httpx.MockTransport(self),
        )


@pytest.fixture
def sample_payload():
    return SAMPLE_PAYLOAD


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def client(upstream):
    """TestClient whose `/api` route talks to `upstream` instead of the network."""

    app.dependency_overrides[get_stats_client] = upstream.client
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
