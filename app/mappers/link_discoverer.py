"""Find links to individual club pages on directory and listing pages.

Strategies are tried in order of reliability and the first one that yields
any link wins. Results are de-duplicated by URL, keeping the first
occurrence, because one club is often linked several times on a page.
"""

import logging
import re
from collections.abc import Callable, Iterable
from urllib.parse import urlsplit, urlunsplit

from bs4 import BeautifulSoup

from app.schemas.crawl import DiscoveredLink, PageContent

logger = logging.getLogger(__name__)

DIRECTORY_ROOT = "https://amsclubs.ca"

Strategy = Callable[[PageContent, str], list[DiscoveredLink]]

_STOP_TEXT = ("discover", "ubc clubs", "all clubs", "right-arrow", "login")
_STOP_PATHS = ("/wp-content/", "/all-clubs/")
_STOP_SLUGS = frozenset({
    "all-clubs", "all-events", "wp-content", "wp-admin", "login", "my-account",
})
# The slug fallback skips only call-to-action and account anchors
_SLUG_STOP_TEXT = ("discover", "all clubs", "login")
# Anchor text containing one of these is treated as a real club name
_DESCRIPTIVE_MARKERS = ("UBC", "AMS")

_MD_LINK_TMPL = r"\[([^\]]+)\]\(({root}/[^/)\s]+/)\)"
_HEADING_LINE_RE = re.compile(r"^#{1,6}[ \t]+(.+?)[ \t]*$", re.MULTILINE)
_CLUB_TITLE_RE = re.compile(r"^(AMS .+ at UBC|[A-Z][^\n]*\bClub\b[^\n]*)$", re.MULTILINE)


def canonical_url(url: str) -> str:
    """Normalize a club page address for use as an identity key."""
    parts = urlsplit(url.strip())
    path = parts.path.rstrip("/") + "/"
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, "", ""))


def _club_url_re(root: str) -> re.Pattern:
    return re.compile(rf"^{re.escape(root.rstrip('/'))}/([^/\"?#]+)/$")


def _slug(url: str, root: str) -> str | None:
    match = _club_url_re(root).match(url)
    return match.group(1) if match else None


def _is_stopped(name: str, url: str, root: str) -> bool:
    lowered = name.lower()
    if any(word in lowered for word in _STOP_TEXT):
        return True
    if any(path in url for path in _STOP_PATHS):
        return True
    if url.rstrip("/") == root.rstrip("/"):
        return True
    return _slug(url, root) in _STOP_SLUGS


def _unique(links: Iterable[DiscoveredLink]) -> list[DiscoveredLink]:
    seen: set[str] = set()
    unique: list[DiscoveredLink] = []
    for link in links:
        if link.url in seen:
            continue
        seen.add(link.url)
        unique.append(link)
    return unique


def _club_anchors(html: str, root: str) -> list[tuple[str, str]]:
    """Return (text, href) for every anchor pointing at a club page."""
    if not html:
        return []
    soup = BeautifulSoup(html, "html.parser")
    pattern = _club_url_re(root)
    anchors: list[tuple[str, str]] = []
    for a in soup.find_all("a", href=True):
        href = a["href"].strip()
        if pattern.match(href):
            anchors.append((a.get_text(" ", strip=True), href))
    return anchors


def _from_markdown(page: PageContent, root: str) -> list[DiscoveredLink]:
    pattern = re.compile(_MD_LINK_TMPL.format(root=re.escape(root.rstrip("/"))))
    links: list[DiscoveredLink] = []
    for match in pattern.finditer(page.markdown):
        name, url = match.group(1).strip(), match.group(2)
        if name and not _is_stopped(name, url, root):
            links.append(DiscoveredLink(name=name, url=url))
    return links


def _from_html_anchors(page: PageContent, root: str) -> list[DiscoveredLink]:
    return [
        DiscoveredLink(name=text, url=href)
        for text, href in _club_anchors(page.html, root)
        if text and not _is_stopped(text, href, root)
    ]


def _heading_like_lines(markdown: str) -> list[str]:
    found: list[tuple[int, str]] = []
    for pattern in (_HEADING_LINE_RE, _CLUB_TITLE_RE):
        for match in pattern.finditer(markdown):
            found.append((match.start(), match.group(1).strip()))
    found.sort()
    lines: list[str] = []
    for _, text in found:
        if text and "discover" not in text.lower() and text not in lines:
            lines.append(text)
    return lines


def _from_discover_buttons(page: PageContent, root: str) -> list[DiscoveredLink]:
    """Pair "Discover" call-to-action links with nearby titles by position."""
    urls = [
        href
        for text, href in _club_anchors(page.html, root)
        if "discover" in text.lower() and not any(p in href for p in _STOP_PATHS)
    ]
    if not urls:
        return []
    titles = _heading_like_lines(page.markdown)
    return [DiscoveredLink(name=title, url=url) for title, url in zip(titles, urls)]


def _name_from_slug(slug: str) -> str:
    return slug.replace("-", " ").title()


def _is_slug_stopped(text: str, url: str, slug: str) -> bool:
    lowered = text.lower()
    if any(word in lowered for word in _SLUG_STOP_TEXT):
        return True
    return "/wp-content/" in url or slug in _STOP_SLUGS


def _from_slugs(page: PageContent, root: str) -> list[DiscoveredLink]:
    links: list[DiscoveredLink] = []
    for text, href in _club_anchors(page.html, root):
        slug = _slug(href, root)
        if not slug or len(slug) <= 2 or _is_slug_stopped(text, href, slug):
            continue
        if text and any(marker in text for marker in _DESCRIPTIVE_MARKERS):
            name = text
        else:
            name = _name_from_slug(slug)
        links.append(DiscoveredLink(name=name, url=href))
    return links


DIRECTORY_STRATEGIES: tuple[Strategy, ...] = (_from_markdown, _from_html_anchors)
LISTING_STRATEGIES: tuple[Strategy, ...] = (
    _from_markdown,
    _from_html_anchors,
    _from_discover_buttons,
    _from_slugs,
)


def _discover(
    page: PageContent, root: str, strategies: tuple[Strategy, ...]
) -> list[DiscoveredLink]:
    for strategy in strategies:
        links = strategy(page, root)
        if links:
            logger.debug("%s found %d club links", strategy.__name__, len(links))
            return _unique(links)
    return []


def extract_club_links(page: PageContent, root: str = DIRECTORY_ROOT) -> list[DiscoveredLink]:
    """Club links from a general directory page."""
    return _discover(page, root, DIRECTORY_STRATEGIES)


def extract_listing_links(page: PageContent, root: str = DIRECTORY_ROOT) -> list[DiscoveredLink]:
    """Club links from one page of a letter listing, with extra fallbacks."""
    return _discover(page, root, LISTING_STRATEGIES)
