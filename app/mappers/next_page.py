import re

from app.schemas.crawl import PageContent

_NEXT_WORD_RE = re.compile(r"\bnext\b", re.IGNORECASE)
_NEXT_MARKERS = (
    "page-numbers-next",
    "pagination-next",
    'rel="next"',
    "»",
    "&raquo;",
)


def _has_page_token(page: PageContent, next_page: int) -> bool:
    if re.search(rf"(?<!\d){next_page}(?!\d)", page.markdown):
        return True
    if f">{next_page}<" in page.html:
        return True
    return re.search(rf"href=\"[^\"]*/{next_page}/\"", page.html) is not None


def _has_next_affordance(page: PageContent) -> bool:
    if _NEXT_WORD_RE.search(page.markdown):
        return True
    return any(marker in page.html for marker in _NEXT_MARKERS)


def _has_sequential_pages(page: PageContent, current_page: int) -> bool:
    pattern = re.compile(rf"\b{current_page}\s+{current_page + 1}\b")
    return bool(pattern.search(page.markdown) or pattern.search(page.html))


def has_next_page(page: PageContent, current_page: int) -> bool:
    """Decide whether a listing page advertises a page after ``current_page``.

    Any one signal is enough: the next page number appearing on the page, a
    "next" pagination control, or the two page numbers side by side.
    """
    return (
        _has_page_token(page, current_page + 1)
        or _has_next_affordance(page)
        or _has_sequential_pages(page, current_page)
    )
