"""Fatal errors for a whole collection run. Per-track problems are outcomes, not errors."""


class AutocueError(Exception):
    """Base class for errors that abort a collection run."""


class ParseError(AutocueError):
    """Input is not well-formed XML."""


class FormatError(AutocueError):
    """Well-formed XML without the expected DJ_PLAYLISTS/COLLECTION structure."""
