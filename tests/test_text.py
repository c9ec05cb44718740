from chordsheet.parser import parse
from chordsheet.renderers.text import ChordsOverLyricsRenderer, render_line


def _rows(raw: str) -> list[str]:
    return render_line(parse(raw).lines[0])


def test_chords_placed_above_their_syllable():
    assert _rows("[G]Amazing [C]grace") == [
        "G       C",
        "Amazing grace",
    ]


def test_leading_lyric_offsets_first_chord():
    assert _rows("Oh [C]yes") == ["   C", "Oh yes"]


def test_colliding_chords_pushed_right():
    assert _rows("[G][D/F#]Grace") == ["G D/F#", "Grace"]


def test_chord_only_line_has_no_lyric_row():
    assert _rows("[G] [C]") == ["G C"]


def test_plain_line_is_just_lyrics():
    assert _rows("no chords here") == ["no chords here"]


def test_header_and_body():
    out = ChordsOverLyricsRenderer().render(
        parse("{title: Amazing Grace}\n{artist: John Newton}\n{key: G}\n{capo: 2}\n[G]Amazing [C]grace")
    )
    assert out == (
        "Amazing Grace\n"
        "John Newton\n"
        "Key: G  Capo: 2\n"
        "\n"
        "G       C\n"
        "Amazing grace\n"
    )


def test_no_header_without_metadata():
    assert ChordsOverLyricsRenderer().render(parse("[G]la")) == "G\nla\n"
