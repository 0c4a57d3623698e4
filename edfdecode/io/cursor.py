# edfdecode/io/cursor.py
from __future__ import annotations

from typing import Callable
import struct

import numpy as np

from edfdecode.core.exceptions import MalformedNumber, OutOfBounds


SUPPORTED_INT_WIDTHS = (1, 2, 3)

_SIGN_BIT_24 = 0x800000
_WRAP_24 = 0x1000000


def parse_number(text: str | None, kind: Callable[[str], int | float] = float, *, field: str = "") -> int | float:
    """Parse trimmed header text as ``int`` or ``float``.

    Integer fields written with a trailing ".0" (some writers do this) are
    accepted as long as the value is integral.
    """
    if not text:
        raise MalformedNumber(field, text)
    try:
        return kind(text)
    except ValueError:
        pass
    if kind is int:
        try:
            value = float(text)
        except ValueError:
            raise MalformedNumber(field, text) from None
        if value.is_integer():
            return int(value)
    raise MalformedNumber(field, text)


def _check_width(byte_width: int) -> None:
    if byte_width not in SUPPORTED_INT_WIDTHS:
        raise ValueError(f"Unsupported integer width {byte_width}; expected one of {SUPPORTED_INT_WIDTHS}")


class ByteCursor:
    """
    Bounds-checked sequential reader over an in-memory buffer.

    The buffer is wrapped in a memoryview, never copied. Every read either
    succeeds and advances ``offset`` by exactly the requested length, or
    fails without moving: ``offset + remaining == len(buffer)`` always holds.

    ``read_*`` methods signal a short buffer by returning None; ``take`` and
    ``read_number`` raise OutOfBounds instead.
    """

    __slots__ = ("_buf", "_offset")

    def __init__(self, data: bytes | bytearray | memoryview):
        self._buf = memoryview(data).cast("B")
        self._offset = 0

    @property
    def buffer(self) -> memoryview:
        return self._buf

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return len(self._buf) - self._offset

    def tell(self) -> int:
        return self._offset

    def seek(self, pos: int) -> None:
        if not (0 <= pos <= len(self._buf)):
            raise OutOfBounds(f"seek to {pos} outside buffer of {len(self._buf)} bytes")
        self._offset = pos

    def skip(self, n: int) -> None:
        self.seek(self._offset + n)

    # ------------------------------------------------------------------
    # Raw bytes
    # ------------------------------------------------------------------
    def read_bytes(self, n: int) -> bytes | None:
        if n < 0 or n > self.remaining:
            return None
        end = self._offset + n
        out = self._buf[self._offset:end].tobytes()
        self._offset = end
        return out

    def take(self, n: int) -> bytes:
        out = self.read_bytes(n)
        if out is None:
            raise OutOfBounds(f"need {n} bytes at offset {self._offset}, {self.remaining} left")
        return out

    # ------------------------------------------------------------------
    # ASCII text fields
    # ------------------------------------------------------------------
    def read_text(self, n: int) -> str | None:
        raw = self.read_bytes(n)
        if raw is None:
            return None
        return raw.decode("utf-8", errors="replace").strip().strip("\x00").strip()

    def read_number(
        self,
        n: int,
        kind: Callable[[str], int | float] = float,
        *,
        field: str = "",
    ) -> int | float:
        """Read an ``n``-byte text field and parse it as a number.

        Raises OutOfBounds if fewer than ``n`` bytes remain (nothing is
        consumed) and MalformedNumber if the text does not parse (the field
        is consumed).
        """
        text = self.read_text(n)
        if text is None:
            raise OutOfBounds(f"need {n} bytes for '{field}' at offset {self._offset}")
        return parse_number(text, kind, field=field)

    # ------------------------------------------------------------------
    # Little-endian signed integers
    # ------------------------------------------------------------------
    def read_signed_int(self, byte_width: int = 2) -> int | None:
        _check_width(byte_width)
        raw = self.read_bytes(byte_width)
        if raw is None:
            return None
        if byte_width == 1:
            return struct.unpack("<b", raw)[0]
        if byte_width == 2:
            return struct.unpack("<h", raw)[0]
        # 16-bit low word followed by the high byte
        low = struct.unpack_from("<H", raw)[0]
        value = low | (raw[2] << 16)
        if value & _SIGN_BIT_24:
            value -= _WRAP_24
        return value

    def read_signed_ints(self, count: int, byte_width: int = 2) -> np.ndarray | None:
        """Vectorised ``read_signed_int``: ``count`` values as an int32 array."""
        _check_width(byte_width)
        raw = self.read_bytes(count * byte_width)
        if raw is None:
            return None
        if byte_width == 1:
            return np.frombuffer(raw, dtype="<i1").astype(np.int32)
        if byte_width == 2:
            return np.frombuffer(raw, dtype="<i2").astype(np.int32)
        triplets = np.frombuffer(raw, dtype=np.uint8).reshape(-1, 3).astype(np.int32)
        values = triplets[:, 0] | (triplets[:, 1] << 8) | (triplets[:, 2] << 16)
        return np.where(values & _SIGN_BIT_24, values - _WRAP_24, values).astype(np.int32)
