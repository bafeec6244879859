import logging

from app.exceptions.custom import ConfigurationError
from app.mappers.category_classifier import determine_categories
from app.mappers.field_extractor import extract_club_info
from app.mappers.link_discoverer import DIRECTORY_ROOT, canonical_url
from app.schemas.club import ClubUpsert, RawContent
from app.schemas.crawl import DiscoveredLink
from app.schemas.firecrawl import CLUB_PAGE_OPTIONS
from app.schemas.responses import (
    CrawlResponse,
    ItemResult,
    PartitionSummary,
    ScrapeResult,
)
from app.services.batch_runner import BATCH_SIZE, BatchRunner, dedupe_links
from app.services.club_store import ClubStore
from app.services.firecrawl import FirecrawlService
from app.services.pacing import PolitenessPolicy
from app.services.pagination import MAX_PAGES, PaginationWalker

logger = logging.getLogger(__name__)

UNKNOWN_CLUB_NAME = "Unknown Club"


class ClubScraperService:
    def __init__(
        self,
        firecrawl: FirecrawlService | None,
        store: ClubStore,
        partitions: list[str],
        policy: PolitenessPolicy | None = None,
        root: str = DIRECTORY_ROOT,
        batch_size: int = BATCH_SIZE,
        max_pages: int = MAX_PAGES,
    ):
        self._firecrawl = firecrawl
        self._store = store
        self._partitions = partitions
        self._policy = policy or PolitenessPolicy()
        self._root = root
        self._batch_size = batch_size
        self._max_pages = max_pages

    def ensure_configured(self) -> FirecrawlService:
        if self._firecrawl is None:
            raise ConfigurationError("FIRECRAWL_API_KEY is not set")
        return self._firecrawl

    async def scrape_club(self, url: str, name: str | None = None) -> ScrapeResult:
        """Fetch, extract, classify and store a single club page."""
        firecrawl = self.ensure_configured()
        try:
            page = await firecrawl.scrape(url, CLUB_PAGE_OPTIONS)
            extracted = extract_club_info(page)
            club = await self._store.upsert(
                ClubUpsert(
                    **extracted.model_dump(exclude={"name"}),
                    name=extracted.name or name or UNKNOWN_CLUB_NAME,
                    source_url=canonical_url(url),
                    categories=determine_categories(extracted.name, extracted.description),
                    raw_content=RawContent(
                        html=page.html or None,
                        extracted_text=page.markdown or None,
                    ),
                )
            )
        except Exception as exc:
            logger.exception("Error scraping club page %s", url)
            return ScrapeResult(success=False, error=str(exc) or type(exc).__name__)

        return ScrapeResult(success=True, club=club, data=extracted)

    async def _scrape_item(self, link: DiscoveredLink) -> ItemResult:
        result = await self.scrape_club(link.url, link.name)
        if result.success and result.club is not None:
            return ItemResult(
                status="success", name=link.name, url=link.url, club_id=result.club.id
            )
        return ItemResult(status="error", name=link.name, url=link.url, error=result.error)

    async def crawl_directory(self, partitions: list[str] | None = None) -> CrawlResponse:
        """Walk every partition, then scrape each discovered club in batches."""
        firecrawl = self.ensure_configured()
        keys = self._partitions if partitions is None else partitions

        walker = PaginationWalker(
            firecrawl, self._policy, root=self._root, max_pages=self._max_pages
        )
        partition_results = await walker.walk_all(keys)

        links = dedupe_links([link for r in partition_results for link in r.links])
        runner = BatchRunner(self._scrape_item, self._policy, batch_size=self._batch_size)
        summary = await runner.run(links)

        logger.info(
            "Crawl finished: %d links, %d succeeded, %d failed",
            summary.total_count, summary.success_count, summary.error_count,
        )
        return CrawlResponse(
            success=True,
            message=(
                f"Scraping completed. {summary.success_count} clubs scraped "
                f"successfully, {summary.error_count} errors."
            ),
            total_links=summary.total_count,
            success_count=summary.success_count,
            error_count=summary.error_count,
            results=summary.results,
            partitions=[
                PartitionSummary(
                    partition_key=r.partition_key,
                    links_found=len(r.links),
                    pages_fetched=r.pages_fetched,
                    stop_reason=r.stop_reason,
                )
                for r in partition_results
            ],
        )
