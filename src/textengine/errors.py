"""Errors raised while parsing plot scripts and walking their trees."""

from enum import Enum


class ErrorKind(str, Enum):
    ERROR = "error"
    DUPLICATE_ID = "duplicate_id"
    NOT_FOUND = "not_found"
    MALFORMED_MARKER = "malformed_marker"
    MALFORMED_SCRIPT = "malformed_script"
    IO_FAILURE = "io_failure"
    DISABLED = "disabled"


class TextEngineError(Exception):
    """Base class for fatal engine errors."""

    kind = ErrorKind.ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DuplicateIdError(TextEngineError):
    """Raised when a dialog, decision or script id is inserted twice."""

    kind = ErrorKind.DUPLICATE_ID


class NotFoundError(TextEngineError):
    """Raised when an id lookup or a link target cannot be resolved."""

    kind = ErrorKind.NOT_FOUND


class MalformedMarkerError(TextEngineError):
    """Raised when a line carries a second id or a second link marker."""

    kind = ErrorKind.MALFORMED_MARKER


class MalformedScriptError(TextEngineError):
    """Raised when script lines cannot be grouped into dialogs and decisions."""

    kind = ErrorKind.MALFORMED_SCRIPT


class ScriptIOError(TextEngineError):
    """Raised when a script file cannot be opened."""

    kind = ErrorKind.IO_FAILURE


class DisabledDecisionError(TextEngineError):
    """Raised when a disabled decision is chosen."""

    kind = ErrorKind.DISABLED
