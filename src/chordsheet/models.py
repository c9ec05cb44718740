import re
from dataclasses import dataclass, field
from typing import Iterator

SLASH_BASS_RE = re.compile(r"/([A-G][#b]?)")


@dataclass(frozen=True)
class ChordToken:
    """A chord as written inside ``[...]``.

    *root* is the pitch class with its accidental exactly as supplied
    (``"Bb"``, ``"F#"``).  *suffix* is everything after it, kept opaque:
    ``"m7"``, ``"sus4"``, ``"/G"``, ``"maj7/F#"``.
    """

    root: str
    suffix: str = ""

    def __str__(self) -> str:
        return f"{self.root}{self.suffix}"

    @property
    def bass(self) -> str | None:
        """Slash-bass note, e.g. ``"B"`` for ``G/B``; ``None`` when absent."""
        notes = SLASH_BASS_RE.findall(self.suffix)
        return notes[-1] if notes else None


@dataclass
class Segment:
    """A chord (or none) followed by the lyric fragment it applies to."""

    chord: ChordToken | None
    lyric: str = ""


@dataclass
class Line:
    """A single lyric line split into chord/lyric segments.

    Example: ``"[G]Amazing [C]grace"`` becomes
    ``[Segment(G, "Amazing "), Segment(C, "grace")]``.
    """

    segments: list[Segment] = field(default_factory=list)

    @property
    def lyrics(self) -> str:
        return "".join(segment.lyric for segment in self.segments)

    def chords(self) -> list[ChordToken]:
        return [segment.chord for segment in self.segments if segment.chord is not None]


@dataclass
class ParsedSong:
    """Structured result of parsing a chord sheet.

    Directive names are stored lower-cased; every value is kept in source
    order, so repeated ``{comment: ...}`` lines all survive.
    """

    directives: dict[str, list[str]] = field(default_factory=dict)
    lines: list[Line] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def directive(self, name: str) -> str | None:
        """Return the first value of directive *name*, or ``None``."""
        values = self.directives.get(name.strip().lower())
        return values[0] if values else None

    def chords(self) -> Iterator[ChordToken]:
        """Yield every chord in the song, in order of appearance."""
        for line in self.lines:
            yield from line.chords()

    @property
    def lyrics(self) -> str:
        return "\n".join(line.lyrics for line in self.lines)


@dataclass
class ChordSheetMetadata:
    """Read-only view of the well-known directives of a song."""

    title: str | None = None
    artist: str | None = None
    key: str | None = None
    tempo: str | None = None
    time_signature: str | None = None
    capo: str | None = None
    extra: dict[str, str] = field(default_factory=dict)


@dataclass
class ValidationReport:
    """Advisory result of :func:`chordsheet.validator.validate`."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors
