"""Content-addressed cache of parse results.

Entries are keyed by the SHA-256 of the raw text, so two songs with identical
text share one slot.  Eviction is by insertion time only; reads never refresh
an entry.  Whenever an insert leaves the cache over capacity, or any entry is
older than ``max_age``, the cache keeps the most recently inserted
``max_size * 0.8`` entries and drops the rest.

Create one :class:`ParseCache` when the application starts and hand it to the
code that needs it::

    cache = ParseCache(max_size=200)
    song, metadata = cache.get_or_parse(text)
"""

import copy
import hashlib
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable

from .keys import detect_key
from .metadata import extract
from .models import ChordSheetMetadata, ParsedSong, ValidationReport
from .parser import ChordProParser
from .validator import validate

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 100
DEFAULT_MAX_AGE = 5 * 60.0  # seconds
RETAIN_RATIO = 0.8

# Content longer than this is worth parsing off the UI thread.
LARGE_CONTENT_THRESHOLD = 10_000


def is_large_content(raw: str) -> bool:
    return len(raw) > LARGE_CONTENT_THRESHOLD


def cache_key(raw: str) -> str:
    """Stable hash of the exact text."""
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


@dataclass
class CacheEntry:
    parsed: ParsedSong
    metadata: ChordSheetMetadata
    key: str | None
    report: ValidationReport
    inserted_at: float


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    parses: int = 0
    evictions: int = 0


class ParseCache:
    """Thread-safe cache around validate → parse → extract → detect_key."""

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        max_age: float = DEFAULT_MAX_AGE,
        clock: Callable[[], float] = time.monotonic,
        parser: ChordProParser | None = None,
    ):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self.max_age = max_age
        self._clock = clock
        self._parser = parser or ChordProParser()
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self.stats = CacheStats()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, raw: str) -> bool:
        with self._lock:
            return cache_key(raw) in self._entries

    def get_or_parse(self, raw: str) -> tuple[ParsedSong, ChordSheetMetadata]:
        """Return ``(song, metadata)`` for *raw*, parsing only on a miss.

        Parse failures propagate as :class:`~chordsheet.exceptions.ParseError`
        and are not cached.
        """
        entry = self.load(raw)
        return entry.parsed, entry.metadata

    def load(self, raw: str) -> CacheEntry:
        """Return a private copy of the full cache entry for *raw*."""
        key = cache_key(raw)
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                self.stats.hits += 1
                logger.debug("Cache hit %s", key[:12])
            else:
                self.stats.misses += 1
                logger.debug("Cache miss %s", key[:12])
                entry = self._build(raw)
                self._entries[key] = entry
                self._cleanup()
            return copy.deepcopy(entry)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    # -- internals, called with the lock held --------------------------------

    def _build(self, raw: str) -> CacheEntry:
        if is_large_content(raw):
            logger.debug("Parsing large content (%d chars)", len(raw))
        report = validate(raw)
        for warning in report.warnings:
            logger.debug("Validation warning: %s", warning)
        started = time.perf_counter()
        parsed = self._parser.parse(raw)
        self.stats.parses += 1
        logger.debug("Parse took %.2f ms", (time.perf_counter() - started) * 1000)

        started = time.perf_counter()
        metadata = extract(parsed)
        logger.debug("Metadata extraction took %.2f ms", (time.perf_counter() - started) * 1000)
        return CacheEntry(
            parsed=parsed,
            metadata=metadata,
            key=detect_key(parsed, metadata),
            report=report,
            inserted_at=self._clock(),
        )

    def _cleanup(self) -> None:
        now = self._clock()
        too_big = len(self._entries) > self.max_size
        stale = any(now - e.inserted_at > self.max_age for e in self._entries.values())
        if not (too_big or stale):
            return

        keep = int(self.max_size * RETAIN_RATIO)
        # dict order is insertion order, oldest first
        survivors = list(self._entries.items())[-keep:] if keep else []
        evicted = len(self._entries) - len(survivors)
        self._entries = dict(survivors)
        self.stats.evictions += evicted
        logger.debug("Cache cleanup evicted %d entries, kept %d", evicted, len(survivors))
