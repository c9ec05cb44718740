import pytest

from chordsheet.exceptions import InvalidChordError, InvalidKeyError, OutOfBoundsError, TransposeError
from chordsheet.models import ChordToken, Line, ParsedSong, Segment
from chordsheet.parser import parse
from chordsheet.transposer import TranspositionState, transpose, transpose_chord

SONG = "{title: Amazing Grace}\n{key: G}\n[G]Amazing [C]grace, how [D7]sweet the [G/B]sound"


def _roots(song):
    return [c.root for c in song.chords()]


def _names(song):
    return [str(c) for c in song.chords()]


# ---------------------------------------------------------------------------
# Bounds
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("semitones", [12, -12, 100, -100])
def test_out_of_bounds(semitones):
    with pytest.raises(OutOfBoundsError):
        transpose(parse(SONG), semitones)


@pytest.mark.parametrize("semitones", [11, -11])
def test_extreme_bounds_succeed(semitones):
    transpose(parse(SONG), semitones)


@pytest.mark.parametrize("semitones", [1.5, "2", None, True])
def test_non_integer_shift_rejected(semitones):
    with pytest.raises(OutOfBoundsError):
        transpose(parse(SONG), semitones)


def test_out_of_bounds_is_a_transpose_error():
    assert issubclass(OutOfBoundsError, TransposeError)


# ---------------------------------------------------------------------------
# Zero shift
# ---------------------------------------------------------------------------


def test_zero_shift_is_equal_but_fresh():
    song = parse(SONG)
    result = transpose(song, 0)
    assert result == song
    assert result is not song
    assert result.lines is not song.lines


def test_zero_shift_keeps_original_spelling():
    song = parse("[Bb]one [Eb/G]two")
    assert _names(transpose(song, 0)) == ["Bb", "Eb/G"]


# ---------------------------------------------------------------------------
# Chords
# ---------------------------------------------------------------------------


def test_transpose_up_two():
    assert _names(transpose(parse(SONG), 2)) == ["A", "D", "E7", "A/C#"]


def test_transpose_wraps_downward():
    assert _names(transpose(parse("[C]one [Am]two"), -1)) == ["B", "G#m"]


def test_flats_normalised_to_sharps():
    assert _names(transpose(parse("[Bb]one [Eb]two"), 1)) == ["B", "E"]


def test_prefer_flats():
    assert _names(transpose(parse("[C]one [F]two"), 1, prefer_flats=True)) == ["Db", "Gb"]


def test_quality_suffix_preserved():
    song = parse("[Cmaj7]a [Dsus4]b [Em7]c [Gadd9]d [Bdim]e")
    assert _names(transpose(song, 5)) == ["Fmaj7", "Gsus4", "Am7", "Cadd9", "Edim"]


def test_slash_bass_transposed_independently():
    assert str(transpose_chord(ChordToken("D", "/F#"), 3)) == "F/A"
    assert str(transpose_chord(ChordToken("F", "maj7/C"), -2)) == "D#maj7/A#"


def test_lyrics_untouched():
    song = parse(SONG)
    result = transpose(song, 4)
    assert [l.lyrics for l in result.lines] == [l.lyrics for l in song.lines]


def test_annotations_untouched():
    result = transpose(parse("[Verse 1] [G]go"), 2)
    assert result.lines[0].lyrics == "[Verse 1] go"
    assert _names(result) == ["A"]


def test_input_song_not_modified():
    song = parse(SONG)
    transpose(song, 3)
    assert _names(song) == ["G", "C", "D7", "G/B"]
    assert song.directive("key") == "G"


# ---------------------------------------------------------------------------
# Key directive
# ---------------------------------------------------------------------------


def test_key_directive_recomputed():
    assert transpose(parse(SONG), 2).directive("key") == "A"


def test_minor_key_directive_keeps_suffix():
    assert transpose(parse("{key: Em}\n[Em]la"), 2).directive("key") == "F#m"


def test_unrecognised_key_directive_left_alone():
    assert transpose(parse("{key: dorian}\n[D]la"), 2).directive("key") == "dorian"


def test_other_directives_untouched():
    result = transpose(parse(SONG), 2)
    assert result.directive("title") == "Amazing Grace"


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("a,b", [(1, 2), (-3, 5), (7, -7), (11, -11), (-5, -6), (4, 4)])
def test_transposition_composes(a, b):
    song = parse("[C]a [F#m]b [A#/D]c [G#dim]d")
    twice = transpose(transpose(song, a), b)
    once = transpose(song, a + b)
    assert _roots(twice) == _roots(once)
    assert _names(twice) == _names(once)


def test_twelve_semitones_round_trip_through_two_steps():
    song = parse("[C]a [E]b")
    assert _names(transpose(transpose(song, 6), 6)) == ["C", "E"]


# ---------------------------------------------------------------------------
# All-or-nothing
# ---------------------------------------------------------------------------


def test_invalid_stored_chord_aborts_whole_transposition():
    song = ParsedSong(lines=[
        Line([Segment(ChordToken("G"), "fine ")]),
        Line([Segment(ChordToken("H", "7"), "broken")]),
    ])
    with pytest.raises(InvalidChordError) as excinfo:
        transpose(song, 2)
    assert excinfo.value.token == "H7"
    assert _names(song) == ["G", "H7"]


# ---------------------------------------------------------------------------
# TranspositionState
# ---------------------------------------------------------------------------


def test_state_defaults():
    state = TranspositionState()
    assert state.level == 0
    assert state.original_key is None
    assert state.current_key is None


def test_state_current_key_follows_level():
    state = TranspositionState("G")
    assert state.current_key == "G"
    state.transpose_up()
    state.transpose_up()
    assert state.level == 2
    assert state.current_key == "A"


def test_state_keeps_original_spelling_at_zero():
    state = TranspositionState("Bb")
    assert state.current_key == "Bb"
    state.transpose(1)
    assert state.current_key == "B"


def test_state_clamps_relative_moves():
    state = TranspositionState("C", level=10)
    assert state.transpose(5) == 11
    assert not state.can_transpose_up
    assert state.transpose_up() == 11
    assert state.transpose(-30) == -11
    assert not state.can_transpose_down
    assert state.can_transpose_up


def test_state_set_level_rejects_out_of_bounds():
    state = TranspositionState("C")
    with pytest.raises(OutOfBoundsError):
        state.set_level(12)
    assert state.level == 0
    assert state.set_level(-11) == -11


def test_state_invalid_initial_level():
    with pytest.raises(OutOfBoundsError):
        TranspositionState("C", level=13)


def test_state_invalid_key():
    with pytest.raises(InvalidKeyError):
        TranspositionState("H")


def test_state_reset():
    state = TranspositionState("D", level=4)
    state.reset()
    assert state.level == 0
    assert state.current_key == "D"


def test_state_transpose_to():
    state = TranspositionState("G")
    assert state.transpose_to("A") == 2
    assert state.transpose_to("C") == 5
    assert state.transpose_to("E") == -3
    assert state.current_key == "E"


def test_state_transpose_to_without_original_key():
    with pytest.raises(InvalidKeyError):
        TranspositionState().transpose_to("A")


def test_state_available_keys():
    assert len(TranspositionState("C").available_keys()) == 12


@pytest.mark.parametrize("delta", [1.5, "2", None, True])
def test_state_relative_move_rejects_non_integer(delta):
    state = TranspositionState("G", level=3)
    with pytest.raises(OutOfBoundsError):
        state.transpose(delta)
    assert state.level == 3
    assert state.current_key == "A#"


# ---------------------------------------------------------------------------
# Change notification
# ---------------------------------------------------------------------------


def test_state_on_change_called_with_level_and_key():
    calls = []
    state = TranspositionState("G", on_change=lambda level, key: calls.append((level, key)))
    state.transpose_up()
    state.set_level(-5)
    state.transpose_to("A")
    state.reset()
    assert calls == [(1, "G#"), (-5, "D"), (2, "A"), (0, "G")]


def test_state_on_change_not_called_when_level_unchanged():
    calls = []
    state = TranspositionState("C", level=11, on_change=lambda *args: calls.append(args))
    state.transpose_up()
    state.set_level(11)
    state.transpose(0)
    assert calls == []
    state.reset()
    state.reset()
    assert calls == [(0, "C")]


def test_state_on_change_not_called_on_rejected_move():
    calls = []
    state = TranspositionState("C", on_change=lambda *args: calls.append(args))
    with pytest.raises(OutOfBoundsError):
        state.set_level(12)
    with pytest.raises(InvalidKeyError):
        state.transpose_to("H")
    assert calls == []


def test_state_on_change_without_key():
    calls = []
    state = TranspositionState(on_change=lambda *args: calls.append(args))
    state.transpose_down()
    assert calls == [(-1, None)]
