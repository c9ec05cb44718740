"""Render a :class:`~chordsheet.models.ParsedSong` back to ChordPro text.

Output layout
-------------

Metadata directives first, in a fixed order, then any other directives in
the order they were first seen, then a blank line and the song lines with
chords inline::

    {title: Amazing Grace}
    {artist: John Newton}
    {key: G}

    [G]Amazing [C]grace

Directive positions inside the body (``{comment: Chorus}`` between stanzas)
are not tracked by the parser, so they are all emitted in the header.
"""

from ..metadata import extract
from ..models import ChordSheetMetadata, Line, ParsedSong
from .base import SongRenderer

# (directive name, metadata attribute) in output order.
_HEADER = (
    ("title", "title"),
    ("artist", "artist"),
    ("key", "key"),
    ("tempo", "tempo"),
    ("time", "time_signature"),
    ("capo", "capo"),
)

_RECOGNISED = {name for name, _ in _HEADER} | {"subtitle"}


class ChordProRenderer(SongRenderer):
    """Render a :class:`~chordsheet.models.ParsedSong` to ChordPro text."""

    name = "chordpro"

    def render(self, song: ParsedSong, metadata: ChordSheetMetadata | None = None) -> str:
        """Return ChordPro text for *song*.

        The returned string ends with a single newline and uses Unix line
        endings (``\\n``) throughout.
        """
        metadata = metadata or extract(song)
        parts: list[str] = []

        # --- Metadata block ---
        # An artist taken from {subtitle} is written back as the subtitle.
        from_subtitle = (
            "artist" not in song.directives
            and metadata.artist is not None
            and metadata.artist == song.directive("subtitle")
        )
        for directive, attr in _HEADER:
            value = getattr(metadata, attr)
            if directive == "artist" and from_subtitle:
                continue
            if value:
                parts.append(f"{{{directive}: {value}}}")
        parts.extend(_directive("subtitle", v) for v in song.directives.get("subtitle", []))
        for name, values in song.directives.items():
            if name in _RECOGNISED:
                continue
            parts.extend(_directive(name, value) for value in values)

        # --- Body ---
        if song.lines:
            if parts:
                parts.append("")
            parts.extend(render_line(line) for line in song.lines)

        return "\n".join(parts) + "\n"


def render_line(line: Line) -> str:
    """Return *line* with its chords written inline as ``[Chord]``."""
    return "".join(
        (f"[{seg.chord}]" if seg.chord is not None else "") + seg.lyric
        for seg in line.segments
    )


def _directive(name: str, value: str) -> str:
    return f"{{{name}: {value}}}" if value else f"{{{name}}}"
