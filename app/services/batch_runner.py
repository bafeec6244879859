import asyncio
import logging
from collections.abc import Awaitable, Callable

from app.mappers.link_discoverer import canonical_url
from app.schemas.crawl import DiscoveredLink
from app.schemas.responses import BatchSummary, ItemResult
from app.services.pacing import PolitenessPolicy

logger = logging.getLogger(__name__)

ItemHandler = Callable[[DiscoveredLink], Awaitable[ItemResult]]

BATCH_SIZE = 5


def dedupe_links(links: list[DiscoveredLink]) -> list[DiscoveredLink]:
    """Drop links whose canonical URL was already seen. First one wins."""
    seen: set[str] = set()
    unique: list[DiscoveredLink] = []
    for link in links:
        key = canonical_url(link.url)
        if key in seen:
            continue
        seen.add(key)
        unique.append(link)
    if len(unique) < len(links):
        logger.info("Removed %d duplicate club links", len(links) - len(unique))
    return unique


class BatchRunner:
    """Runs an item handler over links in fixed-size concurrent batches.

    Batches run one after another; items within a batch run concurrently.
    A failing item becomes an error result and never stops the run.
    """

    def __init__(
        self,
        handler: ItemHandler,
        policy: PolitenessPolicy,
        batch_size: int = BATCH_SIZE,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self._handler = handler
        self._policy = policy
        self._batch_size = batch_size

    async def _run_item(self, link: DiscoveredLink) -> ItemResult:
        try:
            await self._policy.before_item()
            result = await self._handler(link)
        except Exception as exc:
            logger.exception("Error scraping %s", link.name)
            return ItemResult(status="error", name=link.name, url=link.url, error=str(exc))

        if result.ok:
            logger.info("Successfully scraped: %s", link.name)
        else:
            logger.error("Failed to scrape %s: %s", link.name, result.error)
        return result

    async def run(self, links: list[DiscoveredLink]) -> BatchSummary:
        results: list[ItemResult] = []
        total_batches = (len(links) + self._batch_size - 1) // self._batch_size

        for start in range(0, len(links), self._batch_size):
            batch = links[start:start + self._batch_size]
            results.extend(await asyncio.gather(*(self._run_item(link) for link in batch)))
            logger.info(
                "Processed batch %d/%d", start // self._batch_size + 1, total_batches
            )

        success_count = sum(1 for r in results if r.ok)
        return BatchSummary(
            success_count=success_count,
            error_count=len(results) - success_count,
            total_count=len(results),
            results=results,
        )
