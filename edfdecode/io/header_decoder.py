# edfdecode/io/header_decoder.py
"""
Fixed-layout EDF/EDF+ header decoder.

The file-level fields come first, then every per-signal attribute is stored
attribute-major: all N labels, then all N transducers, and so on. The
decoder reads one column per attribute and only then builds each
SignalDescriptor as a completed value.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NamedTuple
import logging
import math

from edfdecode.core.exceptions import (
    DecodeError,
    DegenerateScale,
    MalformedNumber,
    OutOfBounds,
    TruncatedHeader,
)
from edfdecode.core.header import FileHeader
from edfdecode.core.signal import SignalDescriptor, compute_scale
from edfdecode.io.config import DecoderConfig
from edfdecode.io.cursor import ByteCursor

logger = logging.getLogger(__name__)


# Record count written by EDF+ recorders that have not finished yet.
UNKNOWN_RECORDS_COUNT = -1


class _Field(NamedTuple):
    name: str
    width: int
    kind: str  # "text" | "bytes" | "float" | "int" | "count" | "signed_count"


# Per-signal attributes, in file order.
SIGNAL_FIELDS: tuple[_Field, ...] = (
    _Field("label", 16, "text"),
    _Field("transducer", 80, "text"),
    _Field("physical_dimension", 8, "text"),
    _Field("physical_minimum", 8, "float"),
    _Field("physical_maximum", 8, "float"),
    _Field("digital_minimum", 8, "int"),
    _Field("digital_maximum", 8, "int"),
    _Field("prefilter", 80, "text"),
    _Field("samples_per_record", 8, "count"),
    _Field("reserved", 32, "bytes"),
)


@dataclass(frozen=True, slots=True)
class DecodedHeader:
    header: FileHeader
    descriptors: tuple[SignalDescriptor, ...]
    issues: tuple[DecodeError, ...] = field(default_factory=tuple, repr=False)


class HeaderDecoder:
    """Decode the header at the cursor's position.

    Short reads raise TruncatedHeader. Numbers that drive the record layout
    (record count, signal count, samples per record) must parse; other
    numbers fall back to NaN and are reported through ``issues``.
    """

    def __init__(self, config: DecoderConfig | None = None):
        self.config = config or DecoderConfig()
        self._issues: list[DecodeError] = []

    # ------------------------------------------------------------------
    # Field readers
    # ------------------------------------------------------------------
    def _read(self, cursor: ByteCursor, width: int, kind: str, name: str) -> Any:
        if kind == "bytes":
            raw = cursor.read_bytes(width)
            if raw is None:
                raise TruncatedHeader(f"header ends inside '{name}' at offset {cursor.offset}")
            return raw

        if kind == "text":
            text = cursor.read_text(width)
            if text is None:
                raise TruncatedHeader(f"header ends inside '{name}' at offset {cursor.offset}")
            return text

        parse = float if kind == "float" else int
        try:
            value = cursor.read_number(width, parse, field=name)
        except OutOfBounds as e:
            raise TruncatedHeader(f"header ends inside '{name}' at offset {cursor.offset}") from e
        except MalformedNumber as e:
            if kind in ("count", "signed_count"):
                raise
            logger.warning("Best-effort header parsing: %s", e)
            self._issues.append(e)
            return math.nan

        if kind == "count" and value < 0:
            raise MalformedNumber(name, str(value))
        return value

    # ------------------------------------------------------------------
    # Decode
    # ------------------------------------------------------------------
    def decode(self, cursor: ByteCursor) -> DecodedHeader:
        self._issues = []

        version = self._read(cursor, 8, "text", "version")
        patient_id = self._read(cursor, 80, "text", "patient_id")
        recording_id = self._read(cursor, 80, "text", "recording_id")
        start_date = self._read(cursor, 8, "text", "start_date")
        start_time = self._read(cursor, 8, "text", "start_time")
        header_bytes = self._read(cursor, 8, "int", "header_bytes")
        reserved = self._read(cursor, self.config.reserved_width, "text", "reserved")
        records_count = self._read(cursor, 8, "signed_count", "data_records_count")
        record_duration = self._read(cursor, 8, "float", "data_record_duration")
        signals_count = self._read(cursor, 4, "count", "signals_count")

        columns: dict[str, list[Any]] = {}
        for f in SIGNAL_FIELDS:
            columns[f.name] = [
                self._read(cursor, f.width, f.kind, f"{f.name}[{i}]")
                for i in range(signals_count)
            ]

        descriptors = tuple(
            self._build_descriptor(i, {name: col[i] for name, col in columns.items()})
            for i in range(signals_count)
        )

        if records_count == UNKNOWN_RECORDS_COUNT and self.config.infer_records_count:
            records_count = self._infer_records_count(cursor, descriptors)
        elif records_count < 0:
            raise MalformedNumber("data_records_count", str(records_count))

        if isinstance(header_bytes, int) and header_bytes != cursor.offset:
            logger.warning(
                "Header declares %d bytes but %d were read; decoding continues from %d",
                header_bytes, cursor.offset, cursor.offset,
            )

        header = FileHeader(
            version=version,
            patient_id=patient_id,
            recording_id=recording_id,
            start_date=start_date,
            start_time=start_time,
            header_bytes=header_bytes if isinstance(header_bytes, int) else None,
            reserved=reserved,
            data_records_count=int(records_count),
            data_record_duration=float(record_duration),
            signals_count=signals_count,
        )
        logger.debug(
            "Decoded EDF header: %d signals, %d records of %.3fs",
            signals_count, header.data_records_count, header.data_record_duration,
        )
        return DecodedHeader(header=header, descriptors=descriptors, issues=tuple(self._issues))

    def _build_descriptor(self, index: int, values: dict[str, Any]) -> SignalDescriptor:
        try:
            scale = compute_scale(
                index,
                values["label"],
                values["physical_minimum"],
                values["physical_maximum"],
                values["digital_minimum"],
                values["digital_maximum"],
            )
        except DegenerateScale as e:
            logger.warning("%s Samples of this signal decode as 0.0.", e)
            self._issues.append(e)
            scale = 0.0

        offset = values["physical_minimum"] - values["digital_minimum"] * scale
        return SignalDescriptor(
            index=index,
            scale=scale,
            offset=offset,
            annotation_marker=self.config.annotation_marker,
            **values,
        )

    def _infer_records_count(
        self,
        cursor: ByteCursor,
        descriptors: tuple[SignalDescriptor, ...],
    ) -> int:
        record_bytes = sum(d.samples_per_record for d in descriptors) * self.config.sample_width
        if record_bytes == 0:
            return 0
        inferred = cursor.remaining // record_bytes
        logger.info("Record count is -1; inferred %d records from buffer size", inferred)
        return inferred
