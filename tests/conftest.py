"""
Pytest configuration and shared fixtures.
"""

import json
import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import httpx
from fastapi.testclient import TestClient

from fincalc.main import app
from fincalc.services.fx import FXService, get_fx_service


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")


@pytest.fixture(scope="session")
def anyio_backend():
    """Backend for async tests."""
    return "asyncio"


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


class FakeRateProvider:
    """In-memory stand-in for the exchange rate provider."""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.payloads = {
            "/latest": {
                "success": True,
                "base": "USD",
                "rates": {"EUR": 0.92, "GBP": 0.79, "JPY": 149.5},
            },
            "/convert": {
                "success": True,
                "query": {"from": "USD", "to": "EUR", "amount": 100},
                "info": {"rate": 0.92},
                "result": 92.0,
            },
            "/timeseries": {
                "success": True,
                "rates": {
                    "2025-01-03T00:00:00.000Z": {"EUR": 0.97},
                    "2025-01-01T00:00:00.000Z": {"EUR": 0.96},
                    "2025-01-02T00:00:00.000Z": {"EUR": 0.965},
                },
            },
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": "upstream"})
        payload = self.payloads.get(request.url.path)
        if payload is None:
            return httpx.Response(404, json={"error": "not found"})
        return httpx.Response(200, content=json.dumps(payload))


@pytest.fixture
def rate_provider():
    return FakeRateProvider()


@pytest.fixture
def fx_service(rate_provider):
    """FX service wired to the fake provider."""
    return FXService(
        base_url="https://fx.test",
        api_key="test-key",
        transport=httpx.MockTransport(rate_provider.handler),
    )


@pytest.fixture
def fx_client(client, fx_service):
    """Test client whose FX endpoints use the fake provider."""
    app.dependency_overrides[get_fx_service] = lambda: fx_service
    yield client
    app.dependency_overrides.pop(get_fx_service, None)
