import logging
from collections.abc import Callable

from app.mappers.link_discoverer import DIRECTORY_ROOT, extract_listing_links
from app.mappers.next_page import has_next_page
from app.schemas.crawl import (
    CrawlPosition,
    DiscoveredLink,
    PageContent,
    PartitionResult,
    StopReason,
)
from app.schemas.firecrawl import LISTING_PAGE_OPTIONS
from app.services.firecrawl import FirecrawlService
from app.services.pacing import PolitenessPolicy

logger = logging.getLogger(__name__)

Discover = Callable[[PageContent, str], list[DiscoveredLink]]

MAX_PAGES = 50


class PaginationWalker:
    """Walks the paginated listing of each directory partition.

    A partition is fetched page by page until its content stops advertising
    a further page, a page comes back empty, or a fetch fails. Partitions are
    walked one at a time.
    """

    def __init__(
        self,
        firecrawl: FirecrawlService,
        policy: PolitenessPolicy,
        root: str = DIRECTORY_ROOT,
        discover: Discover = extract_listing_links,
        max_pages: int = MAX_PAGES,
    ):
        self._firecrawl = firecrawl
        self._policy = policy
        self._root = root
        self._discover = discover
        self._max_pages = max_pages

    async def walk(self, partition_key: str) -> PartitionResult:
        position = CrawlPosition(partition_key=partition_key)
        links: list[DiscoveredLink] = []
        pages_fetched = 0

        while True:
            url = position.listing_url(self._root)
            logger.info("Scraping listing page %s", url)

            try:
                page = await self._firecrawl.scrape(url, LISTING_PAGE_OPTIONS)
            except Exception as exc:
                # Ends the partition; not counted as an item error
                logger.exception("Error scraping %s, ending partition %s", url, partition_key)
                return PartitionResult(
                    partition_key=partition_key,
                    links=links,
                    pages_fetched=pages_fetched,
                    stop_reason=StopReason.fetch_failed,
                    error=str(exc),
                )

            pages_fetched += 1
            if page.is_empty:
                logger.info("No data returned for %s, ending partition %s", url, partition_key)
                return PartitionResult(
                    partition_key=partition_key,
                    links=links,
                    pages_fetched=pages_fetched,
                    stop_reason=StopReason.empty_page,
                )

            found = self._discover(page, self._root)
            links.extend(found)
            logger.info(
                "Found %d clubs on page %d for partition %s",
                len(found), position.page_number, partition_key,
            )

            if not has_next_page(page, position.page_number):
                return PartitionResult(
                    partition_key=partition_key,
                    links=links,
                    pages_fetched=pages_fetched,
                    stop_reason=StopReason.no_more_pages,
                )
            if position.page_number >= self._max_pages:
                logger.warning(
                    "Partition %s reached the %d page limit", partition_key, self._max_pages
                )
                return PartitionResult(
                    partition_key=partition_key,
                    links=links,
                    pages_fetched=pages_fetched,
                    stop_reason=StopReason.page_limit,
                )

            position = position.advance()
            await self._policy.between_pages()

    async def walk_all(self, partition_keys: list[str]) -> list[PartitionResult]:
        results: list[PartitionResult] = []
        for index, key in enumerate(partition_keys):
            if index:
                await self._policy.between_partitions()
            logger.info("Scraping clubs for partition: %s", key)
            results.append(await self.walk(key))

        total = sum(len(r.links) for r in results)
        logger.info("Total clubs found across %d partitions: %d", len(results), total)
        return results
