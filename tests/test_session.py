from unittest.mock import patch

import pytest

from chordsheet.cache import ParseCache
from chordsheet.exceptions import EmptyContentError, InvalidChordError, OutOfBoundsError
from chordsheet.renderers.chordpro import ChordProRenderer
from chordsheet.session import ChordSheetSession

SONG = "{title: Amazing Grace}\n{key: G}\n[G]Amazing [C]grace"


def _names(song):
    return [str(c) for c in song.chords()]


def _session(raw=SONG, **kwargs):
    return ChordSheetSession(raw, ParseCache(), **kwargs)


def test_opens_at_level_zero_in_detected_key():
    session = _session()
    assert session.state.level == 0
    assert session.current_key == "G"
    assert _names(session.song) == ["G", "C"]
    assert session.metadata.key == "G"


def test_transpose_up_updates_song_and_metadata():
    session = _session()
    session.transpose_up()
    session.transpose_up()
    assert session.current_key == "A"
    assert _names(session.song) == ["A", "D"]
    assert session.metadata.key == "A"
    assert session.metadata.title == "Amazing Grace"


def test_original_untouched_by_transposition():
    session = _session()
    session.transpose(5)
    assert _names(session.original) == ["G", "C"]


def test_reset_returns_to_original():
    session = _session()
    session.transpose(-3)
    song = session.reset()
    assert _names(song) == ["G", "C"]
    assert session.current_key == "G"


def test_relative_moves_clamped():
    session = _session()
    session.transpose(40)
    assert session.state.level == 11
    session.transpose_down()
    assert session.state.level == 10


def test_set_level_out_of_bounds_raises():
    with pytest.raises(OutOfBoundsError):
        _session().set_level(12)


def test_transpose_to_key():
    session = _session()
    song = session.transpose_to("D")
    assert session.state.level == -5
    assert _names(song) == ["D", "G"]


def test_inferred_key_without_directive():
    session = _session("[D]one [A]two [D]three")
    assert session.current_key == "D"
    assert session.metadata.key is None
    session.transpose_up()
    assert session.current_key == "D#"


def test_no_chords_no_key():
    session = _session("words only")
    assert session.current_key is None
    session.transpose_up()
    assert session.current_key is None


def test_transposed_song_memoised_per_level():
    session = _session()
    first = session.set_level(3)
    assert session.song is first


def test_prefer_flats():
    session = _session(prefer_flats=True)
    assert _names(session.set_level(3)) == ["Bb", "Eb"]


def test_report_available_for_editor():
    session = _session("{bogus}\n[G]la")
    assert session.report.is_valid
    assert session.report.warnings


def test_parse_error_propagates():
    with pytest.raises(EmptyContentError):
        _session("")


def test_sessions_share_the_cache():
    cache = ParseCache()
    ChordSheetSession(SONG, cache)
    ChordSheetSession(SONG, cache)
    assert cache.stats.parses == 1


def test_render_uses_current_level():
    session = _session()
    session.set_level(2)
    out = session.render(ChordProRenderer())
    assert "{key: A}" in out
    assert "[A]Amazing [D]grace" in out


@pytest.mark.parametrize("delta", [1.5, "1", None])
def test_rejected_relative_move_leaves_session_usable(delta):
    session = _session()
    session.set_level(2)
    with pytest.raises(OutOfBoundsError):
        session.transpose(delta)
    assert session.state.level == 2
    assert session.current_key == "A"
    assert _names(session.song) == ["A", "D"]


def test_failed_transposition_restores_previous_level():
    session = _session()
    session.set_level(2)
    with patch("chordsheet.session.transpose", side_effect=InvalidChordError("H7")):
        with pytest.raises(InvalidChordError):
            session.set_level(5)
    assert session.state.level == 2
    assert session.current_key == "A"
    assert _names(session.song) == ["A", "D"]


def test_on_change_reports_each_move():
    calls = []
    session = _session(on_change=lambda level, key: calls.append((level, key)))
    session.transpose_up()
    session.transpose_to("D")
    session.reset()
    assert calls == [(1, "G#"), (-5, "D"), (0, "G")]
