"""Pitch classes, key names and the chord grammar.

Every "is this a chord?" or "is this a key?" question in the package goes
through this module.

Spelling
--------
Arithmetic happens on indices into the sharp-spelled chromatic table
(:data:`PITCH_CLASSES`).  Flat spellings are accepted on input and mapped
onto the same indices (``Db`` and ``C#`` are both 1).  A key supplied by the
user keeps its spelling for display; any key or chord *computed* by
transposition is spelled with sharps unless ``prefer_flats=True`` is passed.
"""

import re

from .exceptions import InvalidKeyError
from .models import SLASH_BASS_RE, ChordToken

# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

PITCH_CLASSES: tuple[str, ...] = (
    "C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B",
)

FLAT_PITCH_CLASSES: tuple[str, ...] = (
    "C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B",
)

# Key names accepted from directives and callers, in chromatic order.
KEY_NAMES: tuple[str, ...] = (
    "C", "C#", "Db", "D", "D#", "Eb", "E", "F", "F#",
    "Gb", "G", "G#", "Ab", "A", "A#", "Bb", "B",
)

MIN_TRANSPOSE = -11
MAX_TRANSPOSE = 11

_NATURALS = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}
_ACCIDENTALS = {"": 0, "#": 1, "b": -1}

# ---------------------------------------------------------------------------
# Regexes
# ---------------------------------------------------------------------------

NOTE_RE = re.compile(r"^([A-G])([#b]?)$")

# Root, then any run of quality keywords, extensions and slash-bass notes:
#   C, Am, Am7, Cmaj7, Dsus4, Gadd9, G/B, F#m7/C#, Bbdim
CHORD_NAME_RE = re.compile(
    r"^([A-G][#b]?)"
    r"((?:maj|min|m|dim|aug|sus[24]?|add\d+|\d+|/[A-G][#b]?)*)\Z"
)


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def is_valid_key(value) -> bool:
    """Return True if *value* is one of :data:`KEY_NAMES`."""
    return isinstance(value, str) and value.strip() in KEY_NAMES


def is_valid_chord(text: str) -> bool:
    """Return True if *text* (without brackets) matches the chord grammar."""
    return CHORD_NAME_RE.match(text) is not None


def parse_chord(text: str) -> ChordToken | None:
    """Split *text* into a :class:`ChordToken`, or return ``None`` if it is not a chord."""
    m = CHORD_NAME_RE.match(text)
    if not m:
        return None
    return ChordToken(root=m.group(1), suffix=m.group(2))


# ---------------------------------------------------------------------------
# Pitch arithmetic
# ---------------------------------------------------------------------------


def pitch_index(note: str) -> int:
    """Return the chromatic index (0 = C … 11 = B) of a note name.

    Any natural with an optional ``#`` or ``b`` is accepted, including
    enharmonic oddities such as ``Cb`` (11) and ``E#`` (5).

    Raises :class:`~chordsheet.exceptions.InvalidKeyError` otherwise.
    """
    m = NOTE_RE.match(note.strip()) if isinstance(note, str) else None
    if not m:
        raise InvalidKeyError(note)
    return (_NATURALS[m.group(1)] + _ACCIDENTALS[m.group(2)]) % 12


def note_name(index: int, prefer_flats: bool = False) -> str:
    table = FLAT_PITCH_CLASSES if prefer_flats else PITCH_CLASSES
    return table[index % 12]


def transpose_note(note: str, semitones: int, prefer_flats: bool = False) -> str:
    """Shift a single note name by *semitones* and return the computed spelling."""
    return note_name(pitch_index(note) + semitones, prefer_flats)


def transpose_key(key: str, semitones: int, prefer_flats: bool = False) -> str:
    """Return *key* moved by *semitones*.

    A zero shift returns the key exactly as supplied, so an original ``Bb``
    stays ``Bb``.  Any other shift yields the computed spelling.
    """
    if not is_valid_key(key):
        raise InvalidKeyError(key)
    key = key.strip()
    if semitones == 0:
        return key
    return transpose_note(key, semitones, prefer_flats)


def semitones_between(from_key: str, to_key: str) -> int:
    """Return the shortest signed shift from *from_key* to *to_key*, in ``[-6, 6]``.

    >>> semitones_between("C", "G")
    -5
    >>> semitones_between("G", "A")
    2
    """
    for key in (from_key, to_key):
        if not is_valid_key(key):
            raise InvalidKeyError(key)
    semitones = pitch_index(to_key) - pitch_index(from_key)
    if semitones > 6:
        semitones -= 12
    elif semitones < -6:
        semitones += 12
    return semitones


def available_keys() -> list[str]:
    """All twelve keys a song can be transposed to."""
    return list(PITCH_CLASSES)
