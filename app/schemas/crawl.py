from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class PageContent(BaseModel):
    markdown: str = ""  # text rendering
    html: str = ""  # original markup
    metadata: dict = {}

    @property
    def is_empty(self) -> bool:
        return not self.markdown.strip() and not self.html.strip()


class DiscoveredLink(BaseModel):
    name: str
    url: str


class CrawlPosition(BaseModel):
    partition_key: str
    page_number: int = Field(default=1, ge=1)

    def listing_url(self, root: str) -> str:
        base = f"{root.rstrip('/')}/all-clubs/letter/{self.partition_key}/"
        if self.page_number == 1:
            return base
        return f"{base}{self.page_number}/"

    def advance(self) -> CrawlPosition:
        return CrawlPosition(
            partition_key=self.partition_key, page_number=self.page_number + 1
        )


class StopReason(StrEnum):
    no_more_pages = "no_more_pages"
    empty_page = "empty_page"
    fetch_failed = "fetch_failed"
    page_limit = "page_limit"


class PartitionResult(BaseModel):
    partition_key: str
    links: list[DiscoveredLink] = []
    pages_fetched: int = 0
    stop_reason: StopReason
    error: str | None = None
