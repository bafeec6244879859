import logging
import uuid
from datetime import datetime, timezone

from app.mappers.link_discoverer import canonical_url
from app.schemas.club import Club, ClubUpsert

logger = logging.getLogger(__name__)


class ClubStore:
    """In-memory club records keyed by canonical source URL."""

    def __init__(self) -> None:
        self._clubs: dict[str, Club] = {}

    async def upsert(self, data: ClubUpsert) -> Club:
        """Create or overwrite the club for ``data.source_url``.

        Repeated calls for the same URL leave one record holding the latest
        call's values.
        """
        key = canonical_url(data.source_url)
        existing = self._clubs.get(key)
        club = Club(
            **data.model_dump(exclude={"source_url"}),
            source_url=key,
            id=existing.id if existing else uuid.uuid4().hex[:12],
            is_active=True,
            last_scraped_at=datetime.now(timezone.utc),
        )
        self._clubs[key] = club
        if existing:
            logger.info("Updated club %s (%s)", club.id, key)
        else:
            logger.info("Created club %s (%s)", club.id, key)
        return club

    async def get_by_source_url(self, url: str) -> Club | None:
        return self._clubs.get(canonical_url(url))

    async def list_all(self) -> list[Club]:
        return list(self._clubs.values())

    async def list_by_category(self, category: str) -> list[Club]:
        return [c for c in self._clubs.values() if category in c.categories]

    async def search(self, term: str) -> list[Club]:
        needle = term.casefold()
        return [c for c in self._clubs.values() if needle in c.name.casefold()]

    def __len__(self) -> int:
        return len(self._clubs)
