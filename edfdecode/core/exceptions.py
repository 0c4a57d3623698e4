# edfdecode/core/exceptions.py
from __future__ import annotations


class DecodeError(Exception):
    """Base error for all EDF decoding and query failures."""


# ---- Byte-level / field-level errors ----
class OutOfBounds(DecodeError):
    """Raised when a fixed-length read exceeds the remaining bytes."""


class MalformedNumber(DecodeError, ValueError):
    """Raised when a numeric header field does not parse."""

    def __init__(self, field: str, text: str | None) -> None:
        super().__init__(f"Field '{field}' is not a number: {text!r}")
        self.field = field
        self.text = text


class DegenerateScale(DecodeError):
    """Raised (or recorded) when a signal's digital minimum equals its maximum."""

    def __init__(self, signal_index: int, label: str) -> None:
        super().__init__(
            f"Signal {signal_index} ('{label}') has digital minimum == digital maximum."
        )
        self.signal_index = signal_index
        self.label = label


# ---- Section-level errors ----
class TruncatedHeader(DecodeError):
    """Raised when the buffer ends before the header is complete."""


class TruncatedRecords(DecodeError):
    """Raised when the buffer ends before the declared number of data records."""


# ---- Query / lookup errors ----
class InvalidQuery(DecodeError, ValueError):
    """Raised when a time-range query cannot be mapped to records."""


class SignalNotFound(DecodeError, KeyError):
    """Raised when a requested signal label or index is not present."""
