"""Tests for FirecrawlService."""

import json

import httpx
import pytest
import respx
from httpx import Response

from app.exceptions.custom import FirecrawlError, RateLimitError
from app.schemas.crawl import PageContent
from app.schemas.firecrawl import LISTING_PAGE_OPTIONS
from app.services.firecrawl import SCRAPE_URL, FirecrawlService


@pytest.fixture
def service():
    client = httpx.AsyncClient()
    return FirecrawlService(client, "fc-test-key")


@respx.mock
async def test_scrape_success(service):
    route = respx.post(SCRAPE_URL).mock(
        return_value=Response(
            200,
            json={
                "success": True,
                "data": {
                    "markdown": "# Chess Club",
                    "html": "<h1>Chess Club</h1>",
                    "metadata": {"title": "Chess Club"},
                },
            },
        )
    )

    page = await service.scrape("https://amsclubs.ca/chess/")

    assert page.markdown == "# Chess Club"
    assert page.html == "<h1>Chess Club</h1>"
    assert page.metadata == {"title": "Chess Club"}

    req = route.calls.last.request
    assert req.headers["Authorization"] == "Bearer fc-test-key"
    body = json.loads(req.content)
    assert body["url"] == "https://amsclubs.ca/chess/"
    assert body["formats"] == ["markdown", "html"]
    assert "img" in body["includeTags"]
    assert body["excludeTags"] == ["script", "style", "nav", "footer"]


@respx.mock
async def test_scrape_listing_options(service):
    route = respx.post(SCRAPE_URL).mock(
        return_value=Response(200, json={"success": True, "data": {"markdown": "x"}})
    )

    await service.scrape("https://amsclubs.ca/all-clubs/letter/a/", LISTING_PAGE_OPTIONS)

    body = json.loads(route.calls.last.request.content)
    assert "div" in body["includeTags"]
    assert "meta" not in body["includeTags"]


@respx.mock
async def test_scrape_missing_data_is_empty_page(service):
    respx.post(SCRAPE_URL).mock(return_value=Response(200, json={"success": True}))

    page = await service.scrape("https://amsclubs.ca/chess/")

    assert page == PageContent()
    assert page.is_empty


@respx.mock
async def test_scrape_unsuccessful_body_raises(service):
    respx.post(SCRAPE_URL).mock(
        return_value=Response(200, json={"success": False, "error": "blocked"})
    )

    with pytest.raises(FirecrawlError) as exc_info:
        await service.scrape("https://amsclubs.ca/chess/")

    assert exc_info.value.message == "blocked"


@respx.mock
async def test_scrape_http_error_raises(service):
    respx.post(SCRAPE_URL).mock(return_value=Response(500, text="boom"))

    with pytest.raises(FirecrawlError) as exc_info:
        await service.scrape("https://amsclubs.ca/chess/")

    assert exc_info.value.status_code == 500


@respx.mock
async def test_scrape_rate_limited(service):
    respx.post(SCRAPE_URL).mock(return_value=Response(429))

    with pytest.raises(RateLimitError):
        await service.scrape("https://amsclubs.ca/chess/")


@respx.mock
async def test_custom_base_url():
    route = respx.post("https://firecrawl.internal/v1/scrape").mock(
        return_value=Response(200, json={"success": True, "data": {"markdown": "ok"}})
    )
    service = FirecrawlService(
        httpx.AsyncClient(), "key", base_url="https://firecrawl.internal/"
    )

    page = await service.scrape("https://amsclubs.ca/chess/")

    assert route.called
    assert page.markdown == "ok"
