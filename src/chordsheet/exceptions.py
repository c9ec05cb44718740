class ChordSheetError(Exception):
    """Base exception for chordsheet."""


class ParseError(ChordSheetError):
    """Raised when raw chord-sheet text cannot be parsed."""


class EmptyContentError(ParseError):
    """Raised when the raw content is empty or whitespace only."""

    def __init__(self):
        super().__init__("Content cannot be empty")


class MalformedContentError(ParseError):
    """Raised when a chord bracket or directive brace is left open on a line."""

    def __init__(self, line: int, column: int, reason: str):
        self.line = line
        self.column = column
        self.reason = reason
        super().__init__(f"Line {line}, column {column}: {reason}")


class TransposeError(ChordSheetError):
    """Base for transposition failures."""


class OutOfBoundsError(TransposeError):
    """Raised when a transposition shift falls outside [-11, 11]."""

    def __init__(self, semitones, minimum: int = -11, maximum: int = 11):
        self.semitones = semitones
        super().__init__(
            f"Transposition must be between {minimum} and {maximum} semitones, got {semitones!r}"
        )


class InvalidChordError(TransposeError):
    """Raised when a chord token cannot be rebuilt during transposition."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Cannot transpose chord: {token!r}")


class InvalidKeyError(ChordSheetError):
    """Raised when a string is not a recognised musical key or note."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid musical key: {value!r}")


class UnsupportedFormatError(ChordSheetError):
    """Raised when no renderer is registered under the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No renderer found for format: {name}")
