"""
Registry storage module.

This module provides:
- UrlEntry: the stored record
- RegistryStore: abstract persistence interface
- JsonFileStore: JSON file implementation (default)
- Registry: concurrency-safe in-memory registry backed by a store

To add a new store backend, inherit from RegistryStore and pass an
instance to Registry.load(); nothing else changes.
"""

from shortlink.db.interface import RegistryStore
from shortlink.db.json_store import JsonFileStore
from shortlink.db.models import UrlEntry
from shortlink.db.registry import Registry

__all__ = [
    "RegistryStore",
    "JsonFileStore",
    "UrlEntry",
    "Registry",
]
