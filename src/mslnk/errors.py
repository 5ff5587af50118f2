"""Exception hierarchy for mslnk.

Every error carries a short ``kind`` tag and a human-readable message.
Callers distinguish failures by class (or by ``kind``), never by parsing the
message.
"""


class MSLinkError(Exception):
    """Base class for all mslnk errors."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind}:{self.message}"


class LinkIOError(MSLinkError):
    """Raised when a source path or output destination cannot be accessed."""

    kind = "io"


class ParseError(MSLinkError):
    """Raised when data does not conform to the MS-SHLLINK format."""

    kind = "parse"


class TruncatedDataError(ParseError):
    """Raised when a field or record runs past the end of the data."""


class InvalidTargetError(MSLinkError, ValueError):
    """Raised for input that cannot be encoded (bad path, oversized field)."""

    kind = "input"


class InvariantError(MSLinkError):
    """A computed size or flag disagrees with what was actually serialized.

    This is a programming defect, not a user error: it must never be raised
    for well-formed input.
    """

    kind = "invariant"
