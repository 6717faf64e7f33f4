import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from prospector.main import app
from prospector.models.icp import CompanySizeRange, StructuredICP
from tests.helpers.completion_stub import StubCompletionClient


class _SyncASGIClient:
    """Minimal synchronous wrapper around httpx.AsyncClient for ASGI apps."""

    def __init__(self, app):
        transport = httpx.ASGITransport(app=app)
        self._client = httpx.AsyncClient(transport=transport, base_url="http://testserver")

    def request(self, method: str, url: str, **kwargs):
        return asyncio.run(self._client.request(method, url, **kwargs))

    def get(self, url: str, **kwargs):
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs):
        return self.request("POST", url, **kwargs)

    def close(self) -> None:
        asyncio.run(self._client.aclose())


@pytest.fixture
def client():
    """Create test client compatible with older/newer httpx releases."""
    try:
        test_client = TestClient(app)
        yield test_client
    except TypeError:
        fallback_client = _SyncASGIClient(app)
        try:
            yield fallback_client
        finally:
            fallback_client.close()


@pytest.fixture
def engineering_icp() -> StructuredICP:
    """US engineering leaders at mid-size SaaS companies running Kubernetes."""
    return StructuredICP(
        roles=["VP of Engineering", "Head of Engineering"],
        industries=["SaaS"],
        company_size_range=CompanySizeRange(min=100, max=1000),
        locations=["US"],
        signals=["hiring engineers", "kubernetes", "series b"],
    )


@pytest.fixture
def completion_stub() -> StubCompletionClient:
    return StubCompletionClient()
