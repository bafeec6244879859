import logging
import sys
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from app.config import Settings
from app.exceptions.custom import ConfigurationError
from app.exceptions.handlers import configuration_error_handler
from app.jobs import JobStore
from app.routers.clubs import router as clubs_router
from app.services.club_scraper import ClubScraperService
from app.services.club_store import ClubStore
from app.services.firecrawl import FirecrawlService
from app.services.pacing import PolitenessPolicy

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    async with httpx.AsyncClient(timeout=settings.request_timeout) as client:
        firecrawl: FirecrawlService | None = None
        if settings.firecrawl_api_key:
            firecrawl = FirecrawlService(
                client, settings.firecrawl_api_key, base_url=settings.firecrawl_base_url
            )
        else:
            logger.warning(
                "FIRECRAWL_API_KEY not set; scraping endpoints will return 503"
            )

        store = ClubStore()
        app.state.club_store = store
        app.state.club_scraper = ClubScraperService(
            firecrawl,
            store,
            partitions=settings.partitions,
            policy=PolitenessPolicy(
                item_delay=settings.item_delay,
                page_delay=settings.page_delay,
                partition_delay=settings.partition_delay,
            ),
            root=settings.directory_root,
            batch_size=settings.batch_size,
            max_pages=settings.max_pages,
        )
        app.state.job_store = JobStore()
        app.state.crawl_tasks = set()

        yield


app = FastAPI(title="Club Directory Crawler", lifespan=lifespan)

app.add_exception_handler(ConfigurationError, configuration_error_handler)

app.include_router(clubs_router)
