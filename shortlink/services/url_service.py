"""
URL Service

This service is the entry point for everything the HTTP layer does with
short links:
- Creating entries under fresh, collision-checked short codes
- Looking up, listing and deleting entries
- Resolving redirects and counting visits

Unknown short codes are reported through return values (None / False),
never exceptions. Admin credentials are checked by the caller before any
of the management operations are reached.
"""

import logging
from typing import Optional

from shortlink.db.models import UrlEntry
from shortlink.db.registry import Registry
from shortlink.services.short_code_generator import ShortCodeGenerator

logger = logging.getLogger(__name__)


class URLService:
    """
    Orchestrates the registry and the short code generator.
    """

    def __init__(self, registry: Registry, generator: ShortCodeGenerator):
        """
        Initialize the URL service.

        Args:
            registry: Registry shared by every request of the application
            generator: Source of new short codes
        """
        self.registry = registry
        self.generator = generator

    async def create(self, long_url: str, note: str = "") -> UrlEntry:
        """
        Shorten ``long_url``.

        The URL is stored as given; no format validation is applied.

        Returns:
            The new entry with visit_count 0 and no last_visit

        Raises:
            GenerationExhaustedError: If no free short code could be found
        """
        entry = await self.registry.insert_new(long_url, note, self.generator)
        logger.info(f"Created short code {entry.short_code}")
        return entry

    async def get(self, short_code: str) -> Optional[UrlEntry]:
        return await self.registry.get(short_code)

    async def list_entries(self) -> list[UrlEntry]:
        return await self.registry.list()

    async def count(self) -> int:
        return await self.registry.count()

    async def delete(self, short_code: str) -> bool:
        """
        Delete the entry for ``short_code``.

        Returns:
            True if it existed, False if the code is unknown
        """
        removed = await self.registry.remove(short_code)
        if removed:
            logger.info(f"Deleted short code {short_code}")
        return removed

    async def redirect(self, short_code: str) -> Optional[str]:
        """
        Resolve ``short_code`` for a redirect and count the visit.

        The long URL comes from the lookup, so a redirect already decided on
        still goes out if the entry is deleted before the visit is recorded.

        Returns:
            The long URL, or None if the code is unknown
        """
        entry = await self.registry.get(short_code)
        if entry is None:
            return None

        if not await self.registry.record_visit(short_code):
            logger.info(f"Short code {short_code} was deleted before its visit was recorded")
        return entry.long_url
