import logging

import httpx

from app.exceptions.custom import FirecrawlError, RateLimitError
from app.schemas.crawl import PageContent
from app.schemas.firecrawl import CLUB_PAGE_OPTIONS, ScrapeOptions, ScrapeResponse

logger = logging.getLogger(__name__)

BASE_URL = "https://api.firecrawl.dev"
SCRAPE_PATH = "/v1/scrape"
SCRAPE_URL = f"{BASE_URL}{SCRAPE_PATH}"


class FirecrawlService:
    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        base_url: str = BASE_URL,
    ):
        self._client = client
        self._scrape_url = f"{base_url.rstrip('/')}{SCRAPE_PATH}"
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    async def scrape(
        self, url: str, options: ScrapeOptions = CLUB_PAGE_OPTIONS
    ) -> PageContent:
        """Fetch one page as markdown and html.

        Raises FirecrawlError on HTTP errors or an unsuccessful scrape, and
        RateLimitError on 429.
        """
        payload = {"url": url, **options.model_dump(by_alias=True)}
        resp = await self._client.post(
            self._scrape_url, json=payload, headers=self._headers
        )

        if resp.status_code == 429:
            raise RateLimitError("Firecrawl")
        if resp.status_code >= 400:
            raise FirecrawlError(resp.text, status_code=resp.status_code)

        body = ScrapeResponse(**resp.json())
        if not body.success:
            raise FirecrawlError(
                body.error or f"Scrape of {url} was not successful",
                status_code=resp.status_code,
            )

        data = body.data
        if data is None:
            logger.debug("Firecrawl returned no data for %s", url)
            return PageContent()

        logger.debug(
            "Scraped %s (markdown=%d chars, html=%d chars)",
            url, len(data.markdown or ""), len(data.html or ""),
        )
        return PageContent(
            markdown=data.markdown or "",
            html=data.html or "",
            metadata=data.metadata,
        )
