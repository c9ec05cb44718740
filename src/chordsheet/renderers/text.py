"""Plain-text renderer with chords on their own line above the lyrics.

The inverse of the usual chord-above-lyric merge: each chord is written at
the column of the lyric fragment it belongs to::

    G       C
    Amazing grace

When two chords would overlap (``[G][C]`` on the same syllable) the later
one is pushed right, keeping one space between chord names.
"""

from ..metadata import extract
from ..models import ChordSheetMetadata, Line, ParsedSong
from .base import SongRenderer


class ChordsOverLyricsRenderer(SongRenderer):
    name = "text"

    def render(self, song: ParsedSong, metadata: ChordSheetMetadata | None = None) -> str:
        metadata = metadata or extract(song)
        parts: list[str] = []

        if metadata.title:
            parts.append(metadata.title)
        if metadata.artist:
            parts.append(metadata.artist)
        details = [
            f"{label}: {value}"
            for label, value in (
                ("Key", metadata.key),
                ("Capo", metadata.capo),
                ("Tempo", metadata.tempo),
                ("Time", metadata.time_signature),
            )
            if value
        ]
        if details:
            parts.append("  ".join(details))

        if song.lines:
            if parts:
                parts.append("")
            for line in song.lines:
                parts.extend(render_line(line))

        return "\n".join(parts) + "\n"


def render_line(line: Line) -> list[str]:
    """Return one or two output rows for *line*: an optional chord row, then the lyric row."""
    chords = line.chords()
    if not chords:
        return [line.lyrics]

    chord_row = ""
    column = 0
    for seg in line.segments:
        if seg.chord is not None:
            name = str(seg.chord)
            start = column
            if chord_row:
                start = max(start, len(chord_row) + 1)
            chord_row = chord_row.ljust(start) + name
        column += len(seg.lyric)

    lyric_row = line.lyrics
    if not lyric_row.strip():
        return [chord_row]
    return [chord_row, lyric_row]
