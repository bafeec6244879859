from pydantic import BaseModel, Field

CLUB_PAGE_TAGS = ["title", "meta", "h1", "h2", "h3", "p", "a", "img"]
LISTING_PAGE_TAGS = ["a", "img", "h1", "h2", "h3", "p", "div"]
EXCLUDED_TAGS = ["script", "style", "nav", "footer"]


class ScrapeOptions(BaseModel):
    model_config = {"populate_by_name": True}

    formats: list[str] = ["markdown", "html"]
    include_tags: list[str] = Field(default=CLUB_PAGE_TAGS, alias="includeTags")
    exclude_tags: list[str] = Field(default=EXCLUDED_TAGS, alias="excludeTags")
    only_main_content: bool = Field(default=False, alias="onlyMainContent")


CLUB_PAGE_OPTIONS = ScrapeOptions()
LISTING_PAGE_OPTIONS = ScrapeOptions(include_tags=LISTING_PAGE_TAGS)


class ScrapeData(BaseModel):
    markdown: str | None = None
    html: str | None = None
    metadata: dict = {}


class ScrapeResponse(BaseModel):
    success: bool = False
    data: ScrapeData | None = None
    error: str | None = None
