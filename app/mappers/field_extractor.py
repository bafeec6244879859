"""Heuristic field extraction for a single club page.

Each field has an ordered tuple of independent rules. A rule takes the page
content and returns a value or None; the first non-empty value wins. A rule
that does not match never prevents the others from running.
"""

import re
from collections.abc import Callable

from app.schemas.club import Contact, ExtractedClub, Location, SocialMedia
from app.schemas.crawl import PageContent

Rule = Callable[[PageContent], str | None]

_HEADING_RE = re.compile(r"^#[ \t]+(.+?)[ \t]*$", re.MULTILINE)
_TITLE_RE = re.compile(r"title:[ \t]*(.+)", re.IGNORECASE)

# First paragraph after the top-level heading; stops at a blank line or heading
_DESCRIPTION_RE = re.compile(
    r"^#[ \t]+[^\n]+\n[ \t]*\n(.+?)(?=\n[ \t]*\n|\n#|\Z)",
    re.MULTILINE | re.DOTALL,
)

_WEBSITE_LINK_RE = re.compile(
    r"\[[^\]]*Website[^\]]*\]\((https?://[^)\s]+)\)", re.IGNORECASE
)
_WEBSITE_LABEL_RE = re.compile(r"Website:?[ \t]*(https?://\S+)", re.IGNORECASE)

# The @handle form must not be part of an e-mail address
_HANDLE = r"(?<![\w.])@"
_SOCIAL_PATTERNS = {
    "instagram": re.compile(
        rf"(?:instagram\.com/|{_HANDLE})([a-zA-Z0-9_.]+)", re.IGNORECASE
    ),
    "facebook": re.compile(r"facebook\.com/([a-zA-Z0-9_.]+)", re.IGNORECASE),
    "linkedin": re.compile(
        r"linkedin\.com/(?:company/|in/)([a-zA-Z0-9_.\-]+)", re.IGNORECASE
    ),
    "twitter": re.compile(
        rf"(?:twitter\.com/|(?<![\w\-])x\.com/|{_HANDLE})([a-zA-Z0-9_]+)",
        re.IGNORECASE,
    ),
}

_EMAIL_RE = re.compile(r"[\w.\-]+@[\w.\-]+\.\w+")
_PHONE_RE = re.compile(r"(?<!\d)\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}(?!\d)")

_LOCATION_RES = (
    re.compile(
        r"^[ \t*_#>-]*Location\b[*_]*[ \t]*:?[*_]*[ \t]*\n?(.+?)(?=\n[ \t]*\n|\n#|\Z)",
        re.IGNORECASE | re.MULTILINE | re.DOTALL,
    ),
    re.compile(
        r"^[ \t*_#>-]*Address\b[*_]*[ \t]*:?[*_]*[ \t]*\n?(.+?)(?=\n[ \t]*\n|\n#|\Z)",
        re.IGNORECASE | re.MULTILINE | re.DOTALL,
    ),
)
_ROOM_RE = re.compile(r"\b(?:room|rm\.?)\s*(\w+\d+|\d+\w*)", re.IGNORECASE)
_BUILDING_RE = re.compile(r"\b([A-Z]{2,}(?:\s+[A-Z]{2,})*)\b")

_IMAGE_RE = re.compile(r"!\[[^\]]*\]\((https?://[^)\s]+)\)")


def _search(pattern: re.Pattern, text: str, group: int = 1) -> str | None:
    match = pattern.search(text)
    if not match:
        return None
    value = match.group(group).strip()
    return value or None


def _first(rules: tuple[Rule, ...], page: PageContent) -> str | None:
    for rule in rules:
        value = rule(page)
        if value:
            return value
    return None


def _heading_name(page: PageContent) -> str | None:
    return _search(_HEADING_RE, page.markdown)


def _title_label_name(page: PageContent) -> str | None:
    return _search(_TITLE_RE, page.markdown)


def _description_after_heading(page: PageContent) -> str | None:
    return _search(_DESCRIPTION_RE, page.markdown)


def _website_link(page: PageContent) -> str | None:
    return _search(_WEBSITE_LINK_RE, page.markdown)


def _website_label(page: PageContent) -> str | None:
    return _search(_WEBSITE_LABEL_RE, page.markdown)


def _email(page: PageContent) -> str | None:
    return _search(_EMAIL_RE, page.markdown, group=0)


def _phone(page: PageContent) -> str | None:
    return _search(_PHONE_RE, page.markdown, group=0)


def _image(page: PageContent) -> str | None:
    return _search(_IMAGE_RE, page.markdown)


NAME_RULES: tuple[Rule, ...] = (_heading_name, _title_label_name)
DESCRIPTION_RULES: tuple[Rule, ...] = (_description_after_heading,)
WEBSITE_RULES: tuple[Rule, ...] = (_website_link, _website_label)
EMAIL_RULES: tuple[Rule, ...] = (_email,)
PHONE_RULES: tuple[Rule, ...] = (_phone,)
IMAGE_RULES: tuple[Rule, ...] = (_image,)


def extract_social_link(text: str, platform: str) -> str | None:
    """Return the full matched URL or @handle for a platform, if any."""
    pattern = _SOCIAL_PATTERNS.get(platform)
    if pattern is None:
        return None
    return _search(pattern, text, group=0)


def extract_room(location_text: str) -> str | None:
    return _search(_ROOM_RE, location_text)


def extract_building(location_text: str) -> str | None:
    return _search(_BUILDING_RE, location_text)


def extract_location(text: str) -> Location | None:
    for pattern in _LOCATION_RES:
        block = _search(pattern, text)
        if not block:
            continue
        lines = [line.strip() for line in block.split("\n") if line.strip()]
        if not lines:
            continue
        return Location(
            address=", ".join(lines),
            room=extract_room(block),
            building=extract_building(block),
        )
    return None


def extract_club_info(page: PageContent) -> ExtractedClub:
    """Extract every known field from a club page. Never raises on missing data."""
    text = page.markdown
    return ExtractedClub(
        name=_first(NAME_RULES, page) or "",
        description=_first(DESCRIPTION_RULES, page) or "",
        website_url=_first(WEBSITE_RULES, page),
        social_media=SocialMedia(
            **{platform: extract_social_link(text, platform) for platform in _SOCIAL_PATTERNS}
        ),
        contact=Contact(
            email=_first(EMAIL_RULES, page),
            phone=_first(PHONE_RULES, page),
        ),
        location=extract_location(text),
        image=_first(IMAGE_RULES, page),
    )
