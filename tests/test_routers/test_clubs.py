import asyncio

import respx
from httpx import AsyncClient

from app.jobs import CRAWL_TASK
from app.main import app
from app.schemas.responses import CrawlResponse
from app.services.firecrawl import SCRAPE_URL

CHESS_URL = "https://amsclubs.ca/chess/"
ROWING_URL = "https://amsclubs.ca/rowing/"
LETTER_A = "https://amsclubs.ca/all-clubs/letter/a/"

CHESS_PAGE = {
    "markdown": "# Chess Club\n\nWe play chess every Friday.\n\nWebsite: https://chess.example.com",
    "html": "<h1>Chess Club</h1>",
}
ROWING_PAGE = {
    "markdown": "# Rowing Club\n\nA competitive sport team on the water.",
    "html": "",
}
LISTING_PAGE = {
    "markdown": (
        "[Chess Club](https://amsclubs.ca/chess/)\n"
        "[Rowing Club](https://amsclubs.ca/rowing/)"
    ),
    "html": "",
}


async def submit_and_wait(client: AsyncClient, timeout: float = 5.0) -> dict:
    """POST /clubs/scrape → 202, then poll GET /jobs/{job_id} until terminal state."""
    resp = await client.post("/clubs/scrape")
    assert resp.status_code == 202

    data = resp.json()
    job_id = data["job_id"]
    assert data["status"] == "pending"

    deadline = asyncio.get_event_loop().time() + timeout
    while asyncio.get_event_loop().time() < deadline:
        await asyncio.sleep(0.05)
        status_resp = await client.get(f"/jobs/{job_id}")
        assert status_resp.status_code == 200
        job = status_resp.json()
        if job["status"] in ("completed", "failed"):
            return job

    raise TimeoutError(f"Job {job_id} did not complete within {timeout}s")


@respx.mock
async def test_scrape_single_club(client, firecrawl_pages):
    respx.post(SCRAPE_URL).mock(side_effect=firecrawl_pages({CHESS_URL: CHESS_PAGE}))

    resp = await client.post("/clubs/scrape-single", json={"club_url": CHESS_URL})

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["club"]["name"] == "Chess Club"
    assert body["club"]["website_url"] == "https://chess.example.com"
    assert body["club"]["categories"] == ["General"]


@respx.mock
async def test_scrape_single_twice_lists_one_club(client, firecrawl_pages):
    route = respx.post(SCRAPE_URL)
    route.mock(side_effect=firecrawl_pages({CHESS_URL: CHESS_PAGE}))
    await client.post("/clubs/scrape-single", json={"club_url": CHESS_URL})

    route.mock(side_effect=firecrawl_pages({
        CHESS_URL: {"markdown": "# UBC Chess\n\nUpdated.", "html": ""},
    }))
    await client.post("/clubs/scrape-single", json={"club_url": CHESS_URL})

    resp = await client.get("/clubs")
    body = resp.json()
    assert body["count"] == 1
    assert body["clubs"][0]["name"] == "UBC Chess"
    assert body["clubs"][0]["description"] == "Updated."


@respx.mock
async def test_scrape_single_failure_is_reported(client, firecrawl_pages):
    respx.post(SCRAPE_URL).mock(side_effect=firecrawl_pages({CHESS_URL: 500}))

    resp = await client.post("/clubs/scrape-single", json={"club_url": CHESS_URL})

    assert resp.status_code == 200
    assert resp.json()["success"] is False
    assert resp.json()["error"] == "upstream error"


@respx.mock
async def test_scrape_single_rate_limit_is_reported(client, firecrawl_pages):
    respx.post(SCRAPE_URL).mock(side_effect=firecrawl_pages({CHESS_URL: 429}))

    resp = await client.post("/clubs/scrape-single", json={"club_url": CHESS_URL})

    assert resp.status_code == 200
    assert resp.json()["success"] is False
    assert resp.json()["error"] == "Rate limit exceeded for Firecrawl"


async def test_scrape_single_requires_url(client):
    resp = await client.post("/clubs/scrape-single", json={})
    assert resp.status_code == 422


@respx.mock
async def test_sync_crawl(client, firecrawl_pages):
    respx.post(SCRAPE_URL).mock(side_effect=firecrawl_pages({
        LETTER_A: LISTING_PAGE,
        CHESS_URL: CHESS_PAGE,
        ROWING_URL: ROWING_PAGE,
    }))

    resp = await client.post("/clubs/scrape/sync")

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["total_links"] == 2
    assert body["success_count"] == 2
    assert body["error_count"] == 0
    assert body["partitions"][0]["stop_reason"] == "no_more_pages"

    sports = (await client.get("/clubs", params={"category": "Sports"})).json()
    assert [c["name"] for c in sports["clubs"]] == ["Rowing Club"]
    found = (await client.get("/clubs", params={"search": "chess"})).json()
    assert found["count"] == 1


@respx.mock
async def test_background_crawl_job(client, firecrawl_pages):
    respx.post(SCRAPE_URL).mock(side_effect=firecrawl_pages({
        LETTER_A: LISTING_PAGE,
        CHESS_URL: CHESS_PAGE,
        ROWING_URL: 502,
    }))

    job = await submit_and_wait(client)

    assert job["status"] == "completed"
    assert job["task_type"] == "crawl"
    assert job["result"]["success_count"] == 1
    assert job["result"]["error_count"] == 1
    assert job["result"]["total_links"] == 2


async def test_unknown_job_returns_404(client):
    resp = await client.get("/jobs/does-not-exist")
    assert resp.status_code == 404


async def test_list_clubs_empty(client):
    resp = await client.get("/clubs")
    assert resp.json() == {"success": True, "count": 0, "clubs": []}


@respx.mock(assert_all_called=False)
async def test_missing_credentials_return_503_without_fetching(unconfigured_client):
    route = respx.post(SCRAPE_URL)

    single = await unconfigured_client.post(
        "/clubs/scrape-single", json={"club_url": CHESS_URL}
    )
    crawl = await unconfigured_client.post("/clubs/scrape")
    sync = await unconfigured_client.post("/clubs/scrape/sync")

    assert single.status_code == 503
    assert crawl.status_code == 503
    assert sync.status_code == 503
    assert "FIRECRAWL_API_KEY" in single.json()["detail"]
    assert not route.called


async def test_second_crawl_while_active_returns_409(client):
    existing = app.state.job_store.create_job(task_type=CRAWL_TASK)

    resp = await client.post("/clubs/scrape")

    assert resp.status_code == 409
    assert existing.job_id in resp.json()["detail"]


async def test_background_crawl_task_is_held_until_done(client, monkeypatch):
    release = asyncio.Event()

    async def blocked_crawl(partitions=None):
        await release.wait()
        return CrawlResponse(
            success=True, message="done", total_links=0,
            success_count=0, error_count=0, results=[],
        )

    monkeypatch.setattr(app.state.club_scraper, "crawl_directory", blocked_crawl)

    resp = await client.post("/clubs/scrape")
    assert resp.status_code == 202

    tasks = list(app.state.crawl_tasks)
    assert len(tasks) == 1
    release.set()
    await asyncio.gather(*tasks)

    assert app.state.crawl_tasks == set()
