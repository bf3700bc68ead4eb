import httpx
import pytest

from freshdesk_api import http_client
from freshdesk_api.client import FreshdeskClient
from freshdesk_api.config import FreshdeskConfiguration
from freshdesk_api.http_client import FreshdeskHttpClient

BASE_URL = "https://acme.freshdesk.com"
API_KEY = "secret-key"


@pytest.fixture
def config():
    return FreshdeskConfiguration(freshdesk_domain="acme.freshdesk.com", api_key=API_KEY)


@pytest.fixture
def make_http_client(config):
    """Build a FreshdeskHttpClient whose requests go to ``handler``."""
    def _make(handler, **kwargs):
        client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
        return FreshdeskHttpClient(config, client=client, **kwargs)
    return _make


@pytest.fixture
def make_client(make_http_client):
    def _make(handler, **kwargs):
        return FreshdeskClient(make_http_client(handler, **kwargs))
    return _make


@pytest.fixture
def sleeps(monkeypatch):
    """Record rate-limit waits instead of sleeping."""
    recorded = []

    async def fake_sleep(seconds):
        recorded.append(seconds)

    monkeypatch.setattr(http_client, "_async_sleep", fake_sleep)
    return recorded
