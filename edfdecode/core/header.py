# edfdecode/core/header.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import math


# EDF stores two-digit years; 85..99 map to 19xx, 00..84 to 20xx.
_CENTURY_CLIP = 85


def parse_start_datetime(start_date: str, start_time: str) -> datetime | None:
    """Combine the ``dd.mm.yy`` and ``hh.mm.ss`` header fields.

    Returns None when either field does not follow the EDF layout.
    """
    try:
        day, month, year = (int(part) for part in start_date.split("."))
        hour, minute, second = (int(part) for part in start_time.split("."))
    except ValueError:
        return None

    year += 1900 if year >= _CENTURY_CLIP else 2000
    try:
        return datetime(year, month, day, hour, minute, second)
    except ValueError:
        return None


@dataclass(frozen=True, slots=True)
class FileHeader:
    """
    File-level header of an EDF/EDF+ recording.

    Text fields are stored trimmed. Numeric fields that failed best-effort
    parsing are stored as NaN (floats) or None (header_bytes).
    """
    version: str
    patient_id: str
    recording_id: str
    start_date: str
    start_time: str
    header_bytes: int | None
    reserved: str
    data_records_count: int
    data_record_duration: float
    signals_count: int

    @property
    def recording_duration(self) -> float:
        return self.data_record_duration * self.data_records_count

    @property
    def start_datetime(self) -> datetime | None:
        return parse_start_datetime(self.start_date, self.start_time)

    @property
    def is_edf_plus(self) -> bool:
        return self.reserved.startswith("EDF+")

    @property
    def is_discontinuous(self) -> bool:
        # EDF+D: records are not necessarily contiguous in time
        return self.reserved.startswith("EDF+D")

    @property
    def has_valid_duration(self) -> bool:
        d = self.data_record_duration
        return math.isfinite(d) and d > 0
