"""Identity cache mapping collection names to remote uids."""

import json
import logging
import os
import tempfile
from pathlib import Path

from ..models.config import CacheEntry

logger = logging.getLogger(__name__)


class IdentityCache:
    """Persistent name -> uid mapping stored as a single JSON file.

    The cache only accelerates lookups; it is never authoritative. A missing
    or corrupt file reads as empty and a failed write is logged and ignored.
    """

    def __init__(self, cache_file: Path) -> None:
        """Initialize cache.

        Args:
            cache_file: Path to the JSON cache file
        """
        self.cache_file = Path(cache_file)
        self._entries: dict[str, CacheEntry] = {}

    def load(self) -> dict[str, CacheEntry]:
        """Load the cache from disk, replacing in-memory entries."""
        self._entries = self._read()
        return dict(self._entries)

    def _read(self) -> dict[str, CacheEntry]:
        if not self.cache_file.exists():
            return {}

        try:
            with open(self.cache_file, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError, RecursionError) as e:
            logger.warning("Ignoring unreadable cache %s: %s", self.cache_file, e)
            return {}

        if not isinstance(data, dict):
            logger.warning("Ignoring malformed cache %s: not a JSON object", self.cache_file)
            return {}

        entries = {}
        for name, entry_data in data.items():
            if not isinstance(entry_data, dict) or not entry_data.get("uid"):
                continue
            entries[name] = CacheEntry.from_dict(name, entry_data)
        return entries

    def lookup(self, name: str) -> CacheEntry | None:
        """Get the entry cached under exactly ``name``."""
        return self._entries.get(name)

    def put(self, name: str, uid: str) -> None:
        """Insert or refresh an entry after a successful create/update."""
        self._entries[name] = CacheEntry(name=name, uid=uid)

    def remove(self, name: str) -> None:
        """Drop an entry whose uid the service reported invalid."""
        self._entries.pop(name, None)

    def clear(self) -> None:
        self._entries.clear()

    def entries(self) -> list[CacheEntry]:
        return list(self._entries.values())

    def save(self) -> bool:
        """Rewrite the whole cache file atomically.

        Returns:
            True if the file was written, False if the write failed
        """
        data = {name: entry.to_dict() for name, entry in self._entries.items()}
        tmp_path = None
        try:
            directory = self.cache_file.parent
            directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=directory,
                prefix=f".{self.cache_file.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_path = f.name
                json.dump(data, f, indent=2)
                f.write("\n")
            os.replace(tmp_path, self.cache_file)
        except OSError as e:
            logger.warning("Could not write cache %s: %s", self.cache_file, e)
            if tmp_path is not None:
                Path(tmp_path).unlink(missing_ok=True)
            return False
        return True
