"""
Cache of parsed fonts keyed by font asset identity.

The cache is the only shared mutable state in textmesh. Insertions, evictions
and sweeps are serialised by one lock. Cached FontInstance objects are
immutable and may be used by any number of readers, also after they have been
swept from the cache.
"""

import logging
import threading
from typing import Callable, Hashable, Iterable

from textmesh.errors import FontParseError
from textmesh.fonttools_provider import parse_font
from textmesh.provider import FontInstance

log = logging.getLogger(__name__)


class FontInstanceCache:
    """Memoizes parsed fonts by asset id.

    The id, not the content, is the key: once an id is cached the bytes passed
    with later calls are ignored. A failed parse caches nothing.
    """

    def __init__(self, parser: Callable[[bytes], FontInstance] = parse_font):
        self._parser = parser
        self._instances: dict[Hashable, FontInstance] = {}
        self._failures: dict[Hashable, tuple[bytes, FontParseError]] = {}
        self._lock = threading.RLock()

    def get_or_parse(self, font_id: Hashable, raw_bytes: bytes) -> FontInstance:
        """Returns the cached font for font_id, parsing raw_bytes on first use.

        Raises:
            FontParseError: The bytes could not be parsed. Logged once per id;
                repeated calls with the same bytes re-raise without reparsing.
        """
        with self._lock:
            instance = self._instances.get(font_id)
            if instance is not None:
                return instance

            failure = self._failures.get(font_id)
            if failure is not None and failure[0] == raw_bytes:
                raise failure[1]

            try:
                instance = self._parser(raw_bytes)
            except FontParseError as e:
                error = e.with_font_id(font_id)
                if font_id not in self._failures:
                    log.warning(str(error))
                self._failures[font_id] = (raw_bytes, error)
                raise error from e

            self._failures.pop(font_id, None)
            self._instances[font_id] = instance
            log.info(f"Cached parsed font {font_id!r}")
            return instance

    def get(self, font_id: Hashable) -> FontInstance | None:
        with self._lock:
            return self._instances.get(font_id)

    def failure(self, font_id: Hashable) -> FontParseError | None:
        """The remembered parse error for font_id, if its last parse failed."""
        with self._lock:
            failure = self._failures.get(font_id)
            return failure[1] if failure else None

    def evict(self, font_id: Hashable) -> bool:
        """Forgets font_id. Returns True if an instance was cached for it."""
        with self._lock:
            self._failures.pop(font_id, None)
            return self._instances.pop(font_id, None) is not None

    def sweep(self, live_ids: Iterable[Hashable]) -> list[Hashable]:
        """Drops every entry whose id is not in live_ids.

        Returns:
            The ids of the dropped instances.
        """
        live = set(live_ids)
        with self._lock:
            removed = [font_id for font_id in self._instances if font_id not in live]
            for font_id in removed:
                del self._instances[font_id]
            for font_id in [f for f in self._failures if f not in live]:
                del self._failures[font_id]
        if removed:
            log.info(f"Swept {len(removed)} font(s) from cache: {removed}")
        return removed

    def ids(self) -> list[Hashable]:
        with self._lock:
            return list(self._instances)

    def __contains__(self, font_id: Hashable) -> bool:
        with self._lock:
            return font_id in self._instances

    def __len__(self) -> int:
        with self._lock:
            return len(self._instances)
