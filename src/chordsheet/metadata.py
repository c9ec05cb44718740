from .models import ChordSheetMetadata, ParsedSong

# Directive name -> ChordSheetMetadata field.
_FIELDS = {
    "title": "title",
    "artist": "artist",
    "key": "key",
    "tempo": "tempo",
    "time": "time_signature",
    "capo": "capo",
}

# Recognised, but only as a fallback for ``artist``.
_ARTIST_FALLBACK = "subtitle"


def extract(song: ParsedSong) -> ChordSheetMetadata:
    """Build the metadata view of *song*.

    The first value of each directive wins.  ``{subtitle}`` stands in for the
    artist only when there is no ``{artist}`` directive.  Every directive that
    is not recognised lands in ``extra`` under its normalised name.
    """
    metadata = ChordSheetMetadata()

    for name, values in song.directives.items():
        if not values:
            continue
        if name in _FIELDS:
            setattr(metadata, _FIELDS[name], values[0])
        elif name != _ARTIST_FALLBACK:
            metadata.extra[name] = values[0]

    if metadata.artist is None:
        metadata.artist = song.directive(_ARTIST_FALLBACK)

    return metadata
