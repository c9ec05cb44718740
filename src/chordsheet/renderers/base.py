from abc import ABC, abstractmethod

from ..models import ChordSheetMetadata, ParsedSong


class SongRenderer(ABC):
    """Abstract base class for everything that turns a parsed song into text."""

    #: Name the renderer is registered under, e.g. ``"chordpro"``.
    name: str = ""

    @abstractmethod
    def render(self, song: ParsedSong, metadata: ChordSheetMetadata | None = None) -> str:
        """Return the rendered song.

        *metadata* overrides what would be extracted from *song*; pass it when
        the caller holds a view that differs from the song's own directives.
        """
