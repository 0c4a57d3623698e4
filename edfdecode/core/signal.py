# edfdecode/core/signal.py
from __future__ import annotations

from dataclasses import dataclass, field
import math

import numpy as np

from .annotation import Annotation
from .exceptions import DegenerateScale


# Matches both "EDF Annotations" and "BDF Annotations".
ANNOTATION_MARKER = "DF Annotations"


def compute_scale(
    index: int,
    label: str,
    physical_minimum: float,
    physical_maximum: float,
    digital_minimum: int | float,
    digital_maximum: int | float,
) -> float:
    """Physical units per digital step.

    Raises DegenerateScale when the digital range is empty.
    """
    digital_range = digital_maximum - digital_minimum
    if digital_range == 0:
        raise DegenerateScale(index, label)
    return (physical_maximum - physical_minimum) / digital_range


@dataclass(frozen=True, slots=True)
class SignalDescriptor:
    """
    Per-signal header attributes.

    ``scale`` is computed once by the header decoder (0.0 for a degenerate
    digital range). ``offset`` is the additive term of the full affine
    digital-to-physical transform; it is only applied when the decoder is
    configured to do so.
    """
    index: int
    label: str
    transducer: str
    physical_dimension: str
    physical_minimum: float
    physical_maximum: float
    digital_minimum: int | float
    digital_maximum: int | float
    prefilter: str
    samples_per_record: int
    reserved: bytes = field(default=b"", repr=False)
    scale: float = 0.0
    offset: float = 0.0
    annotation_marker: str = field(default=ANNOTATION_MARKER, repr=False)

    @property
    def is_annotation_channel(self) -> bool:
        return self.annotation_marker in self.label

    def sampling_rate(self, record_duration: float) -> float:
        if record_duration == 0:
            return math.nan
        return self.samples_per_record / record_duration

    def to_physical(self, raw: np.ndarray, *, apply_offset: bool = False) -> np.ndarray:
        values = raw.astype(np.float64) * self.scale
        if apply_offset:
            values += self.offset
        return values


@dataclass(frozen=True, slots=True)
class DecodedSignal:
    """A signal descriptor plus everything decoded for it.

    Ordinary channels fill ``records`` (one float64 block per data record);
    annotation channels fill ``annotations``.
    """
    descriptor: SignalDescriptor
    record_duration: float
    records: tuple[np.ndarray, ...] = field(default_factory=tuple, repr=False)
    annotations: tuple[Annotation, ...] = field(default_factory=tuple, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.records, tuple):
            object.__setattr__(self, "records", tuple(self.records))
        if not isinstance(self.annotations, tuple):
            object.__setattr__(self, "annotations", tuple(self.annotations))

    # Convenience accessors
    @property
    def index(self) -> int:
        return self.descriptor.index

    @property
    def label(self) -> str:
        return self.descriptor.label

    @property
    def unit(self) -> str:
        return self.descriptor.physical_dimension

    @property
    def samples_per_record(self) -> int:
        return self.descriptor.samples_per_record

    @property
    def is_annotation_channel(self) -> bool:
        return self.descriptor.is_annotation_channel

    @property
    def sampling_rate(self) -> float:
        return self.descriptor.sampling_rate(self.record_duration)

    @property
    def n_records(self) -> int:
        return len(self.records)

    @property
    def n_samples(self) -> int:
        return sum(int(block.size) for block in self.records)

    def samples(self) -> np.ndarray:
        """All records flattened in order."""
        if not self.records:
            return np.array([], dtype=np.float64)
        return np.concatenate(self.records)
