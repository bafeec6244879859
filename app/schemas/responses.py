from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from app.schemas.club import Club, ExtractedClub
from app.schemas.crawl import StopReason


class ItemResult(BaseModel):
    status: str  # "success" | "error"
    name: str
    url: str
    club_id: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "success"


class BatchSummary(BaseModel):
    success_count: int
    error_count: int
    total_count: int
    results: list[ItemResult]


class PartitionSummary(BaseModel):
    partition_key: str
    links_found: int
    pages_fetched: int
    stop_reason: StopReason


class CrawlResponse(BaseModel):
    success: bool
    message: str
    total_links: int
    success_count: int
    error_count: int
    results: list[ItemResult]
    partitions: list[PartitionSummary] = []


class ScrapeResult(BaseModel):
    success: bool
    club: Club | None = None
    data: ExtractedClub | None = None
    error: str | None = None


class ClubListResponse(BaseModel):
    success: bool = True
    count: int
    clubs: list[Club]


class JobSubmittedResponse(BaseModel):
    job_id: str
    status: str
    message: str


class JobStatusResponse(BaseModel):
    job_id: str
    status: str
    task_type: str
    created_at: datetime
    finished_at: datetime | None = None
    result: CrawlResponse | None = None
    error: str | None = None
