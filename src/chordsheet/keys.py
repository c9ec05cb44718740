"""Original-key detection.

The first source that yields a valid key wins:

  1. ``metadata.key``
  2. a ``{key: X}`` directive in the raw text (or in the parsed song)
  3. the most frequent chord root, ties going to the root heard first
  4. nothing: ``None``

Step 3 is a frequency count of chord roots, not real key analysis; a song
that sits on its IV chord will report the IV.
"""

import re
from collections import Counter

from .models import ChordSheetMetadata, ChordToken, ParsedSong
from .vocabulary import PITCH_CLASSES, is_valid_key, parse_chord, pitch_index

_KEY_DIRECTIVE_RE = re.compile(r"\{\s*key\s*:\s*([^}]+)\}", re.IGNORECASE)
_BRACKET_RE = re.compile(r"\[([^\[\]]+)\]")


def detect_key(
    source: str | ParsedSong,
    metadata: ChordSheetMetadata | None = None,
) -> str | None:
    """Return the original key of *source* (raw text or parsed song), or ``None``."""
    if metadata is not None and is_valid_key(metadata.key):
        return metadata.key.strip()

    declared = _declared_key(source)
    if declared is not None:
        return declared

    if isinstance(source, ParsedSong):
        chords = list(source.chords())
    else:
        chords = chords_in_text(source)
    return guess_key_from_chords(chords)


def chords_in_text(raw: str) -> list[ChordToken]:
    """Every valid ``[Chord]`` in *raw*, in order, without parsing the song."""
    chords = []
    for m in _BRACKET_RE.finditer(raw or ""):
        chord = parse_chord(m.group(1))
        if chord is not None:
            chords.append(chord)
    return chords


def guess_key_from_chords(chords: list[ChordToken]) -> str | None:
    """Most frequent root pitch class among *chords*; earliest root wins ties.

    Roots are counted by pitch class, so ``A#`` and ``Bb`` add up.  The result
    is spelled the way the winning root first appeared.
    """
    if not chords:
        return None

    counts: Counter[int] = Counter()
    first_spelling: dict[int, str] = {}
    for chord in chords:
        index = pitch_index(chord.root)
        counts[index] += 1
        first_spelling.setdefault(index, chord.root)

    best = max(counts.values())
    # dict order is first-occurrence order
    winner = next(index for index in first_spelling if counts[index] == best)
    spelling = first_spelling[winner]
    return spelling if is_valid_key(spelling) else PITCH_CLASSES[winner]


def _declared_key(source: str | ParsedSong) -> str | None:
    if isinstance(source, ParsedSong):
        value = source.directive("key")
    else:
        m = _KEY_DIRECTIVE_RE.search(source or "")
        value = m.group(1) if m else None
    if value is not None and is_valid_key(value):
        return value.strip()
    return None
