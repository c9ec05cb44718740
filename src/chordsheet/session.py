import dataclasses
import logging
from typing import Callable

from .cache import ParseCache
from .exceptions import ChordSheetError
from .models import ChordSheetMetadata, ParsedSong, ValidationReport
from .renderers.base import SongRenderer
from .transposer import TranspositionState, transpose

logger = logging.getLogger(__name__)


class ChordSheetSession:
    """One open chord sheet: its parse result, detected key and transposition level.

    Created when a sheet is opened and dropped when it is closed.  Parsing
    goes through the injected *cache*; transposed songs are computed on demand
    and remembered per level.  *on_change* is passed on to the
    :class:`~chordsheet.transposer.TranspositionState`.
    """

    def __init__(
        self,
        raw: str,
        cache: ParseCache,
        prefer_flats: bool = False,
        on_change: Callable[[int, str | None], None] | None = None,
    ):
        entry = cache.load(raw)
        self.raw = raw
        self.prefer_flats = prefer_flats
        self._original = entry.parsed
        self._metadata = entry.metadata
        self.report: ValidationReport = entry.report
        self.state = TranspositionState(
            original_key=entry.key, prefer_flats=prefer_flats, on_change=on_change
        )
        self._by_level: dict[int, ParsedSong] = {0: entry.parsed}
        logger.debug("Opened sheet %r in key %s", entry.metadata.title, entry.key)

    @property
    def original(self) -> ParsedSong:
        return self._original

    @property
    def song(self) -> ParsedSong:
        """The song at the current transposition level."""
        level = self.state.level
        if level not in self._by_level:
            self._by_level[level] = transpose(self._original, level, self.prefer_flats)
        return self._by_level[level]

    @property
    def metadata(self) -> ChordSheetMetadata:
        """Metadata with ``key`` following the current transposition."""
        if self.state.level == 0:
            return self._metadata
        return dataclasses.replace(
            self._metadata,
            key=self.song.directive("key") or self._metadata.key,
            extra=dict(self._metadata.extra),
        )

    @property
    def current_key(self) -> str | None:
        return self.state.current_key

    def transpose(self, semitones: int) -> ParsedSong:
        return self._apply(self.state.transpose, semitones)

    def transpose_up(self) -> ParsedSong:
        return self._apply(self.state.transpose_up)

    def transpose_down(self) -> ParsedSong:
        return self._apply(self.state.transpose_down)

    def set_level(self, level: int) -> ParsedSong:
        return self._apply(self.state.set_level, level)

    def transpose_to(self, target_key: str) -> ParsedSong:
        return self._apply(self.state.transpose_to, target_key)

    def reset(self) -> ParsedSong:
        return self._apply(self.state.reset)

    def render(self, renderer: SongRenderer) -> str:
        return renderer.render(self.song, self.metadata)

    def _apply(self, move, *args) -> ParsedSong:
        # A move that cannot produce its song leaves the previous level in place.
        previous = self.state.level
        move(*args)
        try:
            return self.song
        except ChordSheetError:
            self.state.set_level(previous)
            raise
