"""
URL Registry

The registry is the authoritative in-memory mapping of short code to
UrlEntry. It is built once per application from a RegistryStore and handed
to the services that need it; there is no module-level instance.

Design Decisions:
- One ReadWriteLock guards the mapping: lookups share it, mutations take
  it exclusively
- Every mutation writes the full mapping back to the store before the
  write lock is released, so the file never lags behind what a reader
  could have observed
- The file write runs in a worker thread to keep the event loop free for
  requests that do not touch the registry
- A failed write is logged and the mutation still counts; memory stays
  authoritative until the next successful save
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Mapping, Optional, TYPE_CHECKING

from shortlink.core.exceptions import StoreWriteError
from shortlink.core.rwlock import ReadWriteLock
from shortlink.db.interface import RegistryStore
from shortlink.db.models import UrlEntry

if TYPE_CHECKING:
    from shortlink.services.short_code_generator import ShortCodeGenerator

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Registry:
    """
    Concurrency-safe short code registry with write-through persistence.
    """

    def __init__(
        self,
        store: RegistryStore,
        entries: Optional[Mapping[str, UrlEntry]] = None,
        clock: Optional[Clock] = None
    ):
        """
        Initialize the registry.

        Args:
            store: Store that receives the full mapping after each mutation
            entries: Initial contents, keyed by short code
            clock: Source of visit timestamps (default: current UTC time)
        """
        self.store = store
        self.clock = clock or utc_now
        self._entries: dict[str, UrlEntry] = {
            entry.short_code: entry for entry in (entries or {}).values()
        }
        self._lock = ReadWriteLock()

    @classmethod
    def load(cls, store: RegistryStore, clock: Optional[Clock] = None) -> "Registry":
        """Build a registry from whatever the store currently holds."""
        return cls(store, store.load(), clock=clock)

    async def get(self, short_code: str) -> Optional[UrlEntry]:
        async with self._lock.read():
            return self._entries.get(short_code)

    async def count(self) -> int:
        async with self._lock.read():
            return len(self._entries)

    async def list(self) -> list[UrlEntry]:
        async with self._lock.read():
            return list(self._entries.values())

    async def insert(self, entry: UrlEntry) -> None:
        """Add ``entry``, replacing any entry with the same short code."""
        async with self._lock.write():
            self._entries[entry.short_code] = entry
            await self._persist()

    async def insert_new(
        self,
        long_url: str,
        note: str,
        generator: "ShortCodeGenerator"
    ) -> UrlEntry:
        """
        Create an entry under a short code nobody holds yet.

        The free code is picked and claimed inside one write critical
        section, so concurrent creates can never end up with the same code.

        Raises:
            GenerationExhaustedError: If the generator found no free code
        """
        async with self._lock.write():
            short_code = generator.generate_unused(self._entries)
            entry = UrlEntry(short_code=short_code, long_url=long_url, note=note)
            self._entries[short_code] = entry
            await self._persist()
            return entry

    async def remove(self, short_code: str) -> bool:
        async with self._lock.write():
            if self._entries.pop(short_code, None) is None:
                return False
            await self._persist()
            return True

    async def record_visit(self, short_code: str) -> bool:
        """
        Count one visit for ``short_code`` and stamp it with the clock.

        Returns:
            False if the code is unknown; nothing is created in that case
        """
        async with self._lock.write():
            entry = self._entries.get(short_code)
            if entry is None:
                return False
            self._entries[short_code] = entry.visited(self.clock())
            await self._persist()
            return True

    async def _persist(self) -> None:
        """
        Write the current mapping to the store.

        The caller holds the write lock. If the calling task is cancelled
        mid-write, the lock is still held until the worker thread has
        finished, so no later save can race with this one.
        """
        snapshot = dict(self._entries)
        save = asyncio.ensure_future(asyncio.to_thread(self.store.save, snapshot))

        cancelled = False
        while not save.done():
            try:
                await asyncio.wait([save])
            except asyncio.CancelledError:
                cancelled = True

        try:
            save.result()
        except StoreWriteError as e:
            logger.error(
                f"{e}; keeping {len(snapshot)} entries in memory only",
                exc_info=e.original_error
            )
        if cancelled:
            raise asyncio.CancelledError()
