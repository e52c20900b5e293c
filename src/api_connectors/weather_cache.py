"""
Weather Lookup Cache

Bounded, expiring cache for weather API responses keyed by coordinate
string (e.g. "28.7041-77.1025").
"""

import time
from collections import OrderedDict
from typing import Callable, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class WeatherCache:
    """LRU cache with a per-entry time-to-live"""

    def __init__(
        self,
        ttl_seconds: float = 600,
        max_entries: int = 256,
        clock: Callable[[], float] = time.time
    ):
        """
        Args:
            ttl_seconds: How long an entry stays valid
            max_entries: Capacity; least recently used entries are evicted beyond it
            clock: Returns the current time in seconds
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, Dict]" = OrderedDict()

    @staticmethod
    def coordinate_key(latitude: float, longitude: float) -> str:
        return f"{latitude}-{longitude}"

    def _is_expired(self, entry: Dict) -> bool:
        return self._clock() - entry["timestamp"] >= self.ttl_seconds

    def get(self, key: str) -> Optional[Dict]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._is_expired(entry):
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return entry["data"]

    def set(self, key: str, data: Dict) -> None:
        self._entries[key] = {"data": data, "timestamp": self._clock()}
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Evicted weather cache entry {evicted}")

    def purge_expired(self) -> int:
        """Drop expired entries, returning how many were removed"""
        expired = [k for k, entry in self._entries.items() if self._is_expired(entry)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def snapshot(self) -> Dict[str, Dict]:
        """Live entries as {key: {"data": ..., "timestamp": ...}}"""
        self.purge_expired()
        return {k: dict(entry) for k, entry in self._entries.items()}

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        self.purge_expired()
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
