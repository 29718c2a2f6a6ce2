"""
errors.py - Exception types shared by the winquery query engine.

Filter and sort never raise. Grammar parsing raises `ParseError`; window
enumeration raises `ProviderError`. A missing index is not an exception:
`lookup_by_index` returns None.
"""
from __future__ import annotations

from enum import Enum


class ParseErrorReason(str, Enum):
    """Why a selection or sort string was rejected."""
    EMPTY_INPUT = "empty_input"
    INVALID_INDEX = "invalid_index"
    NON_POSITIVE_INDEX = "non_positive_index"
    INVALID_RANGE = "invalid_range"
    UNKNOWN_AXIS = "unknown_axis"
    DUPLICATE_AXIS = "duplicate_axis"
    TOO_MANY_AXES = "too_many_axes"
    INVALID_DIRECTION = "invalid_direction"


_REASON_MESSAGES: dict[ParseErrorReason, str] = {
    ParseErrorReason.EMPTY_INPUT: "Empty input",
    ParseErrorReason.INVALID_INDEX: "Invalid index",
    ParseErrorReason.NON_POSITIVE_INDEX: "Indices are 1-based and must be >= 1",
    ParseErrorReason.INVALID_RANGE: "Invalid range. Use 'a-b' with a <= b",
    ParseErrorReason.UNKNOWN_AXIS: "Unknown position axis. Use 'x' or 'y'",
    ParseErrorReason.DUPLICATE_AXIS: "Position axis given more than once",
    ParseErrorReason.TOO_MANY_AXES: "At most two position axes may be given, e.g. 'x1|y-1'",
    ParseErrorReason.INVALID_DIRECTION: "Sort order must be 1 (ascending) or -1 (descending)",
}


class WinQueryError(Exception):
    """Base class for all winquery errors."""
    pass


class ParseError(WinQueryError, ValueError):
    """Raised when a selection or position-sort string is malformed."""

    def __init__(self, reason: ParseErrorReason, token: str, message: str | None = None):
        self.reason = reason
        self.token = token
        detail = message or _REASON_MESSAGES[reason]
        super().__init__(f"{detail}: '{token}'")

    def to_dict(self) -> dict[str, str]:
        return {
            "error_type": "parse_error",
            "reason": self.reason.value,
            "token": self.token,
            "message": str(self),
        }


class ProviderError(WinQueryError):
    """
    Opaque failure from the window enumeration provider.

    `code` carries the platform status code when the backend exposes one.
    The store propagates this error unchanged and never retries.
    """

    def __init__(self, message: str, code: int | None = None):
        self.code = code
        if code is not None:
            message = f"{message} (code 0x{code:08x})"
        super().__init__(message)
