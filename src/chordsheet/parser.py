"""ChordPro text → :class:`~chordsheet.models.ParsedSong`.

Parsing is line-oriented: chords (``[G]``) and directives (``{key: G}``)
never span a line break.  Each line is scanned left to right:

  1. ``{name: value}`` / ``{name}`` spans are collected into
     ``ParsedSong.directives`` and removed from the lyric text.
  2. ``[Chord]`` spans start a new :class:`~chordsheet.models.Segment`.
  3. ``[Anything else]`` is kept literally in the lyric, with a warning.
  4. Everything else is lyric text for the current segment.

Lines holding nothing but directives produce no :class:`Line`.  Lines whose
first non-blank character is ``#`` are ChordPro comments and are skipped.
"""

import logging

from .exceptions import EmptyContentError, MalformedContentError
from .models import Line, ParsedSong, Segment
from .vocabulary import parse_chord

logger = logging.getLogger(__name__)


class ChordProParser:
    """Stateless ChordPro parser; one instance can be shared freely."""

    def parse(self, raw: str) -> ParsedSong:
        """Return the :class:`ParsedSong` for *raw*.

        Raises :class:`~chordsheet.exceptions.EmptyContentError` for blank
        input and :class:`~chordsheet.exceptions.MalformedContentError` when a
        ``[`` or ``{`` is not closed on its own line.
        """
        if not raw or not raw.strip():
            raise EmptyContentError()

        song = ParsedSong()
        for number, text in enumerate(raw.splitlines(), start=1):
            if text.lstrip().startswith("#"):
                continue
            line, had_directive = _scan_line(text, number, song)
            if had_directive and not line.chords() and not line.lyrics.strip():
                continue
            song.lines.append(line)

        logger.debug(
            "Parsed %d lines, %d directives, %d warnings",
            len(song.lines), len(song.directives), len(song.warnings),
        )
        return song


_default_parser = ChordProParser()


def parse(raw: str) -> ParsedSong:
    """Parse *raw* with a shared :class:`ChordProParser`."""
    return _default_parser.parse(raw)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _scan_line(text: str, number: int, song: ParsedSong) -> tuple[Line, bool]:
    """Split one source line into segments, recording directives on *song*.

    Returns the line and whether any directive was found on it.
    """
    segments: list[Segment] = []
    current = Segment(chord=None)
    had_directive = False
    pos = 0

    while pos < len(text):
        char = text[pos]

        if char == "{":
            end = text.find("}", pos + 1)
            if end == -1:
                raise MalformedContentError(number, pos + 1, "unclosed directive brace")
            _add_directive(text[pos + 1:end], number, song)
            had_directive = True
            pos = end + 1
            continue

        if char == "[":
            end = text.find("]", pos + 1)
            if end == -1:
                raise MalformedContentError(number, pos + 1, "unclosed chord bracket")
            inner = text[pos + 1:end]
            chord = parse_chord(inner)
            if chord is None:
                # Not a chord: keep the annotation verbatim in the lyric.
                current.lyric += text[pos:end + 1]
                song.warnings.append(f"Line {number}: not a chord: [{inner}]")
            else:
                if current.chord is not None or current.lyric:
                    segments.append(current)
                current = Segment(chord=chord)
            pos = end + 1
            continue

        stop = _next_special(text, pos)
        current.lyric += text[pos:stop]
        pos = stop

    segments.append(current)
    return Line(segments=segments), had_directive


def _next_special(text: str, start: int) -> int:
    """Index of the next ``[`` or ``{`` at or after *start*, else ``len(text)``."""
    positions = [i for i in (text.find("[", start), text.find("{", start)) if i != -1]
    return min(positions) if positions else len(text)


def _add_directive(body: str, number: int, song: ParsedSong) -> None:
    name, _, value = body.partition(":")
    name = name.strip().lower()
    if not name:
        song.warnings.append(f"Line {number}: directive without a name: {{{body}}}")
        return
    song.directives.setdefault(name, []).append(value.strip())
