import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Iterable

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    value: Any
    tags: frozenset[str] = field(default_factory=frozenset)
    stored_at: float = field(default_factory=time.monotonic)


class PageCache:
    """
    In-process cache of rendered page payloads.

    Entries are keyed by request path and carry tags, so a single
    ``revalidate_tag("products")`` drops every page built from product data.
    """

    def __init__(self, ttl_seconds: float | None = 180, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def _expired(self, entry: CacheEntry) -> bool:
        if not self.ttl_seconds:
            return False
        return self._clock() - entry.stored_at >= self.ttl_seconds

    def get(self, path: str) -> Any | None:
        entry = self._entries.get(path)
        if entry is None:
            return None
        if self._expired(entry):
            del self._entries[path]
            return None
        return entry.value

    def set(self, path: str, value: Any, tags: Iterable[str] = ()) -> None:
        self._entries[path] = CacheEntry(value=value, tags=frozenset(tags), stored_at=self._clock())

    def revalidate_path(self, path: str) -> bool:
        removed = self._entries.pop(path, None) is not None
        logger.debug("Revalidated path %s (cached=%s)", path, removed)
        return removed

    def revalidate_tag(self, tag: str) -> int:
        stale = [path for path, entry in self._entries.items() if tag in entry.tags]
        for path in stale:
            del self._entries[path]
        logger.debug("Revalidated tag %s (%d entries)", tag, len(stale))
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, path: str) -> bool:
        return self.get(path) is not None

    def __len__(self) -> int:
        return len(self._entries)

    async def get_or_render(self, path: str, tags: Iterable[str], render: Callable[[], Awaitable[Any]]) -> Any:
        cached = self.get(path)
        if cached is not None:
            return cached
        value = await render()
        if value is not None:
            self.set(path, value, tags)
        return value
