import asyncio
from typing import Annotated

from fastapi import Depends, Request

from app.jobs import JobStore
from app.services.club_scraper import ClubScraperService
from app.services.club_store import ClubStore


def get_club_scraper(request: Request) -> ClubScraperService:
    return request.app.state.club_scraper


def get_club_store(request: Request) -> ClubStore:
    return request.app.state.club_store


def get_job_store(request: Request) -> JobStore:
    return request.app.state.job_store


def get_crawl_tasks(request: Request) -> set[asyncio.Task]:
    return request.app.state.crawl_tasks


ClubScraperDep = Annotated[ClubScraperService, Depends(get_club_scraper)]
ClubStoreDep = Annotated[ClubStore, Depends(get_club_store)]
JobStoreDep = Annotated[JobStore, Depends(get_job_store)]
CrawlTasksDep = Annotated[set[asyncio.Task], Depends(get_crawl_tasks)]
