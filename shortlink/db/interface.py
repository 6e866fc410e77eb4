"""
Registry Store Interface

This module defines the persistence contract the registry depends on.
A store holds the whole registry as one document: it is read once at
startup and overwritten in full after every mutation.

To add a new store backend:
1. Create a new class inheriting from RegistryStore
2. Implement read() and save()
3. Pass an instance to Registry.load()
"""

import logging
from abc import ABC, abstractmethod
from typing import Mapping

from shortlink.core.exceptions import StoreUnreadableError
from shortlink.db.models import UrlEntry

logger = logging.getLogger(__name__)


class RegistryStore(ABC):
    """
    Abstract base class for registry persistence.

    Implementations must make save() atomic: a reader of the backing
    storage sees either the previous complete document or the new one.
    """

    @abstractmethod
    def read(self) -> dict[str, UrlEntry]:
        """
        Read the stored registry.

        Returns:
            Mapping of short code to entry, empty if nothing is stored yet

        Raises:
            StoreUnreadableError: If stored data exists but cannot be decoded
        """
        pass

    @abstractmethod
    def save(self, entries: Mapping[str, UrlEntry]) -> None:
        """
        Replace the stored registry with ``entries``.

        Raises:
            StoreWriteError: If the document could not be written
        """
        pass

    def load(self) -> dict[str, UrlEntry]:
        """
        Read the stored registry, falling back to an empty one.

        Startup must never fail because of a damaged store, so an
        unreadable document is logged and treated as empty.
        """
        try:
            entries = self.read()
        except StoreUnreadableError as e:
            logger.warning(f"{e}; starting with an empty registry", exc_info=e.original_error)
            return {}
        logger.info(f"Loaded {len(entries)} entries from store")
        return entries
