"""Advisory structural checks on raw chord-sheet text.

Nothing here raises or blocks parsing; the caller decides what to do with
the :class:`~chordsheet.models.ValidationReport`.
"""

import re

from .models import ValidationReport
from .vocabulary import is_valid_chord

_DIRECTIVE_SPAN_RE = re.compile(r"\{([^}]*)\}")
_BRACKET_SPAN_RE = re.compile(r"\[([^\[\]]*)\]")

# Directives that are legitimately written without a value.
BARE_DIRECTIVES = frozenset({"chorus", "verse", "bridge", "tag", "comment", "c"})


def validate(raw: str) -> ValidationReport:
    """Check *raw* for empty content, unbalanced brackets, odd directives and bad chords."""
    report = ValidationReport()

    if not raw or not raw.strip():
        report.errors.append("Content cannot be empty")
        return report

    opening = raw.count("[")
    closing = raw.count("]")
    if opening != closing:
        report.errors.append(
            f"Unmatched chord brackets: {opening} opening, {closing} closing"
        )

    for m in _DIRECTIVE_SPAN_RE.finditer(raw):
        body = m.group(1)
        if ":" not in body and body.strip().lower() not in BARE_DIRECTIVES:
            report.warnings.append(f"Possibly malformed directive: {m.group(0)}")

    seen: set[str] = set()
    for m in _BRACKET_SPAN_RE.finditer(raw):
        chord = m.group(1)
        if chord in seen:
            continue
        seen.add(chord)
        if not is_valid_chord(chord):
            report.warnings.append(f"Possibly invalid chord: {chord}")

    return report
