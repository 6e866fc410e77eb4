"""
JSON File Store

Keeps the registry in a single pretty-printed JSON document:

    {
      "123456": {
        "short_url": "123456",
        "long_url": "https://example.com",
        "note": "demo",
        "visit_count": 3,
        "last_visit": "2025-01-01T12:00:00Z"
      }
    }

Writes go to a temporary file in the same directory which is fsync'ed and
then renamed over the target, so a crash mid-write leaves the previous
document intact.
"""

import contextlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Mapping, Union

from pydantic import TypeAdapter, ValidationError

from shortlink.core.exceptions import StoreUnreadableError, StoreWriteError
from shortlink.db.interface import RegistryStore
from shortlink.db.models import UrlEntry

logger = logging.getLogger(__name__)

_DOCUMENT = TypeAdapter(dict[str, UrlEntry])


class JsonFileStore(RegistryStore):
    """Registry store backed by one JSON file on the local filesystem."""

    def __init__(self, path: Union[str, os.PathLike]):
        self.path = Path(path)

    def read(self) -> dict[str, UrlEntry]:
        try:
            content = self.path.read_bytes()
        except FileNotFoundError:
            logger.info(f"Store file {self.path} does not exist yet")
            return {}
        except OSError as e:
            raise StoreUnreadableError(str(self.path), original_error=e)

        try:
            document = _DOCUMENT.validate_json(content)
        except ValidationError as e:
            raise StoreUnreadableError(str(self.path), original_error=e)

        entries = {}
        for key, entry in document.items():
            if key != entry.short_code:
                logger.warning(
                    f"Store key '{key}' does not match entry code '{entry.short_code}', "
                    f"keeping it under '{entry.short_code}'"
                )
            entries[entry.short_code] = entry
        return entries

    def save(self, entries: Mapping[str, UrlEntry]) -> None:
        content = _DOCUMENT.dump_json(dict(entries), by_alias=True, indent=2)
        directory = self.path.parent

        tmp_name = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=directory
            )
            with os.fdopen(fd, "wb") as tmp_file:
                tmp_file.write(content)
                tmp_file.flush()
                os.fsync(tmp_file.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
            raise StoreWriteError(str(self.path), original_error=e)
