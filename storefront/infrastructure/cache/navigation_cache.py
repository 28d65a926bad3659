"""In-process TTL cache for the navigation tree"""

import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

from ...core.config import settings

logger = logging.getLogger(__name__)


class NavigationCache:
    """Key/value cache with a per-entry expiry.

    One instance per process; entries are dropped on read once expired and
    all at once by ``revalidate``.
    """

    def __init__(self, ttl_seconds: Optional[int] = None, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.NAVIGATION_CACHE_TTL_SECONDS
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        self._entries[key] = (value, self._clock() + ttl)

    def get_or_load(self, key: str, loader: Callable[[], Any]) -> Any:
        value = self.get(key)
        if value is None:
            value = loader()
            self.set(key, value)
        return value

    def revalidate(self) -> None:
        """Drop every entry so the next read rebuilds from the database"""
        self._entries.clear()
        logger.info("Navigation cache revalidated")

    def __len__(self) -> int:
        return len(self._entries)


navigation_cache = NavigationCache()
