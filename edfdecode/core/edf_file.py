# edfdecode/core/edf_file.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Sequence

import numpy as np

from .annotation import Annotation
from .exceptions import DecodeError, SignalNotFound
from .header import FileHeader
from .query import RecordRange, compute_range, extract, query_all
from .signal import DecodedSignal


@dataclass(frozen=True, slots=True)
class EDFFile:
    """
    A fully decoded EDF/EDF+ recording.

    Design goals:
    - sequence-like access to ordinary signals: edf[0], len(edf), iter(edf)
    - annotation-bearing channels kept apart in ``annotation_channels``
    - immutable; range queries only read decoded records
    - best-effort problems found while decoding are kept in ``issues``
    """
    header: FileHeader
    signals: tuple[DecodedSignal, ...] = field(default_factory=tuple, repr=False)
    annotation_channels: tuple[DecodedSignal, ...] = field(default_factory=tuple, repr=False)
    issues: tuple[DecodeError, ...] = field(default_factory=tuple, repr=False)

    @classmethod
    def from_decoded(
        cls,
        header: FileHeader,
        decoded: Sequence[DecodedSignal],
        issues: Sequence[DecodeError] = (),
    ) -> "EDFFile":
        """Partition decoded signals (header order) into ordinary and annotation channels."""
        return cls(
            header=header,
            signals=tuple(s for s in decoded if not s.is_annotation_channel),
            annotation_channels=tuple(s for s in decoded if s.is_annotation_channel),
            issues=tuple(issues),
        )

    # ---- sequence-like API over ordinary signals ----
    def __len__(self) -> int:
        return len(self.signals)

    def __iter__(self) -> Iterator[DecodedSignal]:
        return iter(self.signals)

    def __getitem__(self, index: int) -> DecodedSignal:
        try:
            return self.signals[index]
        except IndexError as e:
            raise SignalNotFound(index) from e

    @property
    def labels(self) -> list[str]:
        return [s.label for s in self.signals]

    def signal(self, key: str | int) -> DecodedSignal:
        """Look up an ordinary signal by label or by position."""
        if isinstance(key, int):
            return self[key]
        for s in self.signals:
            if s.label == key:
                return s
        raise SignalNotFound(key)

    # ---- derived values ----
    @property
    def data_record_duration(self) -> float:
        return self.header.data_record_duration

    @property
    def data_records_count(self) -> int:
        return self.header.data_records_count

    @property
    def recording_duration(self) -> float:
        return self.header.recording_duration

    @property
    def sampling_rate(self) -> float:
        """Highest samples-per-record among ordinary signals, per second."""
        if not self.header.has_valid_duration:
            return float("nan")
        max_per_record = max((s.samples_per_record for s in self.signals), default=0)
        return max_per_record / self.header.data_record_duration

    @property
    def annotations(self) -> list[Annotation]:
        """Annotations of every annotation channel, ordered by onset."""
        merged = [a for ch in self.annotation_channels for a in ch.annotations]
        return sorted(merged, key=lambda a: a.onset)

    # ---- range queries ----
    def compute_range(self, time_offset: float, duration: float) -> RecordRange:
        return compute_range(
            time_offset,
            duration,
            self.header.data_record_duration,
            self.header.data_records_count,
        )

    def samples_in_range(
        self,
        signal_index: int,
        time_offset: float,
        duration: float,
    ) -> np.ndarray:
        """Physical samples of one ordinary signal for the records covering the window."""
        sig = self[signal_index]
        return extract(sig, self.compute_range(time_offset, duration))

    def all_signals_in_range(self, time_offset: float, duration: float) -> list[np.ndarray]:
        """One sample array per ordinary signal, in header order."""
        return query_all(self.signals, self.compute_range(time_offset, duration))
