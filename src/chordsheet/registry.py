from .exceptions import UnsupportedFormatError
from .renderers.base import SongRenderer
from .renderers.chordpro import ChordProRenderer
from .renderers.text import ChordsOverLyricsRenderer

_RENDERERS: list[type[SongRenderer]] = [
    ChordProRenderer,
    ChordsOverLyricsRenderer,
]


def renderer_names() -> list[str]:
    return [cls.name for cls in _RENDERERS]


def get_renderer(name: str) -> SongRenderer:
    """Return an instantiated renderer registered under *name*.

    Raises UnsupportedFormatError if no renderer matches.
    """
    for cls in _RENDERERS:
        if cls.name == name.strip().lower():
            return cls()
    raise UnsupportedFormatError(name)
