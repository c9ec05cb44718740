"""Semitone transposition of parsed songs, and the per-sheet transposition state.

:func:`transpose` is a pure function over a :class:`ParsedSong`: it moves
every chord root and slash-bass by the same number of semitones and returns a
new song.  It either transposes everything or raises; the input is never
touched.

The ``{key}`` directive is transposed along with the chords so that the
directives and the chords of the result agree.
"""

import copy
import logging
from typing import Callable

from .exceptions import InvalidChordError, InvalidKeyError, OutOfBoundsError
from .models import ChordToken, Line, ParsedSong, Segment
from .vocabulary import (
    MAX_TRANSPOSE,
    MIN_TRANSPOSE,
    SLASH_BASS_RE,
    available_keys,
    is_valid_key,
    parse_chord,
    semitones_between,
    transpose_key,
    transpose_note,
)

logger = logging.getLogger(__name__)


def _require_int(semitones) -> int:
    if isinstance(semitones, bool) or not isinstance(semitones, int):
        raise OutOfBoundsError(semitones, MIN_TRANSPOSE, MAX_TRANSPOSE)
    return semitones


def check_bounds(semitones) -> int:
    """Return *semitones* if it is an int in ``[-11, 11]``; raise OutOfBoundsError otherwise."""
    _require_int(semitones)
    if not MIN_TRANSPOSE <= semitones <= MAX_TRANSPOSE:
        raise OutOfBoundsError(semitones, MIN_TRANSPOSE, MAX_TRANSPOSE)
    return semitones


def transpose_chord(chord: ChordToken, semitones: int, prefer_flats: bool = False) -> ChordToken:
    """Move the root and any slash-bass of *chord* by *semitones*.

    Raises :class:`~chordsheet.exceptions.InvalidChordError` if the token does
    not hold a recognisable root.
    """
    try:
        root = transpose_note(chord.root, semitones, prefer_flats)
        suffix = SLASH_BASS_RE.sub(
            lambda m: "/" + transpose_note(m.group(1), semitones, prefer_flats),
            chord.suffix,
        )
    except InvalidKeyError as exc:
        raise InvalidChordError(str(chord)) from exc
    return ChordToken(root=root, suffix=suffix)


def transpose(song: ParsedSong, semitones: int, prefer_flats: bool = False) -> ParsedSong:
    """Return a copy of *song* with every chord shifted by *semitones*.

    Raises :class:`~chordsheet.exceptions.OutOfBoundsError` unless
    ``-11 <= semitones <= 11``, and
    :class:`~chordsheet.exceptions.InvalidChordError` if any chord cannot be
    rebuilt.  A zero shift returns an identical deep copy.
    """
    check_bounds(semitones)
    if semitones == 0:
        return copy.deepcopy(song)

    lines = [
        Line(segments=[
            Segment(
                chord=None if seg.chord is None else transpose_chord(seg.chord, semitones, prefer_flats),
                lyric=seg.lyric,
            )
            for seg in line.segments
        ])
        for line in song.lines
    ]

    directives = {name: list(values) for name, values in song.directives.items()}
    if "key" in directives:
        directives["key"] = [_transpose_key_value(v, semitones, prefer_flats) for v in directives["key"]]

    logger.debug("Transposed %d lines by %+d semitones", len(lines), semitones)
    return ParsedSong(directives=directives, lines=lines, warnings=list(song.warnings))


def _transpose_key_value(value: str, semitones: int, prefer_flats: bool) -> str:
    # "G" -> "A", "Em" -> "F#m"; anything unrecognisable is left alone.
    chord = parse_chord(value.strip())
    if chord is None:
        logger.debug("Leaving unrecognised key directive %r untransposed", value)
        return value
    return str(transpose_chord(chord, semitones, prefer_flats))


# ---------------------------------------------------------------------------
# Transposition state
# ---------------------------------------------------------------------------


class TranspositionState:
    """Transposition level and key for one open chord sheet.

    The level stays within ``[-11, 11]``: relative moves are clamped, absolute
    moves out of range raise :class:`~chordsheet.exceptions.OutOfBoundsError`.

    *on_change*, if given, is called as ``on_change(level, current_key)``
    after every move that actually changes the level.
    """

    def __init__(
        self,
        original_key: str | None = None,
        level: int = 0,
        prefer_flats: bool = False,
        on_change: Callable[[int, str | None], None] | None = None,
    ):
        if original_key is not None and not is_valid_key(original_key):
            raise InvalidKeyError(original_key)
        self.original_key = original_key.strip() if original_key else None
        self.level = check_bounds(level)
        self.prefer_flats = prefer_flats
        self.on_change = on_change

    def __repr__(self) -> str:
        return f"TranspositionState(original_key={self.original_key!r}, level={self.level})"

    @property
    def current_key(self) -> str | None:
        if self.original_key is None:
            return None
        return transpose_key(self.original_key, self.level, self.prefer_flats)

    @property
    def can_transpose_up(self) -> bool:
        return self.level < MAX_TRANSPOSE

    @property
    def can_transpose_down(self) -> bool:
        return self.level > MIN_TRANSPOSE

    def transpose(self, semitones: int) -> int:
        """Move the level by *semitones*, clamped to the bounds. Returns the new level."""
        _require_int(semitones)
        return self._move_to(max(MIN_TRANSPOSE, min(MAX_TRANSPOSE, self.level + semitones)))

    def transpose_up(self) -> int:
        return self.transpose(1)

    def transpose_down(self) -> int:
        return self.transpose(-1)

    def set_level(self, level: int) -> int:
        return self._move_to(check_bounds(level))

    def transpose_to(self, target_key: str) -> int:
        """Set the level that takes the original key to *target_key*."""
        if self.original_key is None:
            raise InvalidKeyError(None)
        return self.set_level(semitones_between(self.original_key, target_key))

    def reset(self) -> None:
        self._move_to(0)

    def available_keys(self) -> list[str]:
        return available_keys()

    def _move_to(self, level: int) -> int:
        if level != self.level:
            self.level = level
            logger.debug("Transposition level now %+d (key %s)", level, self.current_key)
            if self.on_change is not None:
                self.on_change(self.level, self.current_key)
        return self.level
