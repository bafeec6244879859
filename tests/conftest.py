import json

import httpx
import pytest
from httpx import ASGITransport, Response


@pytest.fixture
def mock_env(monkeypatch):
    monkeypatch.setenv("FIRECRAWL_API_KEY", "fc-test-key")
    monkeypatch.setenv("PARTITIONS", '["a"]')
    monkeypatch.setenv("ITEM_DELAY", "0")
    monkeypatch.setenv("PAGE_DELAY", "0")
    monkeypatch.setenv("PARTITION_DELAY", "0")


@pytest.fixture
async def client(mock_env):
    from app.main import app, lifespan

    async with lifespan(app):
        async with httpx.AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as c:
            yield c


@pytest.fixture
async def unconfigured_client(mock_env, monkeypatch):
    monkeypatch.setenv("FIRECRAWL_API_KEY", "")
    from app.main import app, lifespan

    async with lifespan(app):
        async with httpx.AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as c:
            yield c


@pytest.fixture
def firecrawl_pages():
    """Factory for respx side effects serving Firecrawl scrapes by URL.

    Page values are {"markdown": ..., "html": ...} dicts, or an HTTP status
    code to fail with. Unknown URLs get an empty successful scrape.
    """

    def _build(pages: dict):
        def _side_effect(request: httpx.Request) -> Response:
            url = json.loads(request.content)["url"]
            page = pages.get(url, {})
            if isinstance(page, int):
                return Response(page, text="upstream error")
            return Response(200, json={"success": True, "data": {"metadata": {}, **page}})

        return _side_effect

    return _build
