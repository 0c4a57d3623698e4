# edfdecode/core/query.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable
import math

import numpy as np

from .exceptions import InvalidQuery
from .signal import DecodedSignal


@dataclass(frozen=True, slots=True)
class RecordRange:
    """Half-open range of data record indices ``[start, end)``."""
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise InvalidQuery(f"Invalid record range [{self.start}, {self.end}).")

    def __len__(self) -> int:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.start == self.end


def _clamp(value: float, upper: int) -> float:
    return min(max(value, 0.0), float(upper))


def _whole(value: float, rounding: Callable[[float], int]) -> float:
    # infinities pass through; int() rejects them
    return rounding(value) if math.isfinite(value) else value


def compute_range(
    time_offset: float,
    duration: float,
    record_duration: float,
    records_count: int,
) -> RecordRange:
    """Map a (time offset, duration) pair in seconds to the records covering it.

    The start record is the one containing ``time_offset``; the span is the
    number of whole records needed to cover ``duration``. Both bounds are
    computed first and then clamped to ``[0, records_count]``.
    """
    if not (math.isfinite(record_duration) and record_duration > 0):
        raise InvalidQuery(f"Record duration must be positive, got {record_duration!r}.")
    if math.isnan(time_offset) or math.isnan(duration):
        raise InvalidQuery("Time offset and duration must not be NaN.")

    start = _whole(time_offset / record_duration, math.floor)
    end = start + _whole(duration / record_duration, math.ceil)
    if math.isnan(end):
        raise InvalidQuery("Time window is undefined for an infinite offset and duration.")

    first = int(_clamp(start, records_count))
    last = int(_clamp(end, records_count))
    return RecordRange(start=first, end=max(last, first))


def extract(signal: DecodedSignal, rng: RecordRange) -> np.ndarray:
    """Concatenate the sample blocks of ``signal`` for the records in ``rng``."""
    blocks = signal.records[rng.start:rng.end]
    if not blocks:
        return np.array([], dtype=np.float64)
    return np.concatenate(blocks)


def query_all(signals: Iterable[DecodedSignal], rng: RecordRange) -> list[np.ndarray]:
    """Apply ``extract`` to every non-annotation signal, preserving order."""
    return [extract(sig, rng) for sig in signals if not sig.is_annotation_channel]
