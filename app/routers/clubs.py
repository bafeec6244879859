import asyncio
import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from app.dependencies import ClubScraperDep, ClubStoreDep, CrawlTasksDep, JobStoreDep
from app.jobs import CRAWL_TASK, JobStore
from app.schemas.responses import (
    ClubListResponse,
    CrawlResponse,
    JobStatusResponse,
    JobSubmittedResponse,
    ScrapeResult,
)
from app.services.club_scraper import ClubScraperService

logger = logging.getLogger(__name__)

router = APIRouter()


class CrawlRequest(BaseModel):
    partitions: list[str] | None = None


class ScrapeSingleRequest(BaseModel):
    club_url: str
    club_name: str | None = None


async def _run_crawl(
    job_id: str,
    service: ClubScraperService,
    store: JobStore,
    partitions: list[str] | None,
) -> None:
    store.mark_running(job_id)
    try:
        result = await service.crawl_directory(partitions)
        store.mark_completed(job_id, result)
    except Exception as exc:
        logger.exception("Crawl job %s failed", job_id)
        store.mark_failed(job_id, str(exc))


@router.post("/clubs/scrape", response_model=JobSubmittedResponse, status_code=202)
async def scrape_all_clubs(
    service: ClubScraperDep,
    store: JobStoreDep,
    tasks: CrawlTasksDep,
    request: CrawlRequest | None = None,
) -> JobSubmittedResponse:
    service.ensure_configured()

    existing = store.has_active_job(CRAWL_TASK)
    if existing:
        raise HTTPException(
            status_code=409,
            detail=f"A crawl is already running (job_id={existing.job_id})",
        )

    partitions = request.partitions if request else None
    job = store.create_job(task_type=CRAWL_TASK)
    task = asyncio.create_task(_run_crawl(job.job_id, service, store, partitions))
    tasks.add(task)
    task.add_done_callback(tasks.discard)
    return JobSubmittedResponse(
        job_id=job.job_id,
        status=job.status,
        message="Crawl job submitted",
    )


@router.post("/clubs/scrape/sync", response_model=CrawlResponse)
async def scrape_all_clubs_sync(
    service: ClubScraperDep,
    request: CrawlRequest | None = None,
) -> CrawlResponse:
    return await service.crawl_directory(request.partitions if request else None)


@router.post("/clubs/scrape-single", response_model=ScrapeResult)
async def scrape_single_club(
    service: ClubScraperDep,
    request: ScrapeSingleRequest,
) -> ScrapeResult:
    return await service.scrape_club(request.club_url, request.club_name)


@router.get("/clubs", response_model=ClubListResponse)
async def list_clubs(
    store: ClubStoreDep,
    category: str | None = None,
    search: str | None = None,
) -> ClubListResponse:
    if search:
        clubs = await store.search(search)
    elif category:
        clubs = await store.list_by_category(category)
    else:
        clubs = await store.list_all()
    if search and category:
        clubs = [c for c in clubs if category in c.categories]
    return ClubListResponse(count=len(clubs), clubs=clubs)


@router.get("/jobs/{job_id}", response_model=JobStatusResponse)
async def get_job_status(job_id: str, store: JobStoreDep) -> JobStatusResponse:
    job = store.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return JobStatusResponse(**job.model_dump())
