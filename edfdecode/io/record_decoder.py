# edfdecode/io/record_decoder.py
from __future__ import annotations

import logging

import numpy as np

from edfdecode.core.annotation import Annotation
from edfdecode.core.exceptions import TruncatedRecords
from edfdecode.core.signal import DecodedSignal, SignalDescriptor
from edfdecode.io.annotation_decoder import AnnotationDecoder
from edfdecode.io.config import DecoderConfig
from edfdecode.io.cursor import ByteCursor
from edfdecode.io.header_decoder import DecodedHeader

logger = logging.getLogger(__name__)


class RecordDecoder:
    """
    Decodes the data-record section that follows the header.

    Records are interleaved: record 0 holds one block per signal in header
    order, then record 1, and so on. Ordinary blocks become float64 arrays of
    physical values; annotation blocks go through the TAL decoder. A buffer
    that ends before the declared record count is an error, not a partial
    result.
    """

    def __init__(self, config: DecoderConfig | None = None):
        self.config = config or DecoderConfig()
        self._annotation_decoder = AnnotationDecoder(self.config.sample_width)

    def decode(self, cursor: ByteCursor, decoded: DecodedHeader) -> tuple[DecodedSignal, ...]:
        header = decoded.header
        descriptors = decoded.descriptors
        records: list[list[np.ndarray]] = [[] for _ in descriptors]
        annotations: list[list[Annotation]] = [[] for _ in descriptors]

        for record_index in range(header.data_records_count):
            for desc in descriptors:
                if desc.is_annotation_channel:
                    found = self._annotation_decoder.read(cursor, desc.samples_per_record)
                    if found is None:
                        raise self._truncated(record_index, desc, cursor, header.data_records_count)
                    annotations[desc.index].extend(found)
                else:
                    raw = cursor.read_signed_ints(desc.samples_per_record, self.config.sample_width)
                    if raw is None:
                        raise self._truncated(record_index, desc, cursor, header.data_records_count)
                    records[desc.index].append(
                        desc.to_physical(raw, apply_offset=self.config.apply_offset)
                    )

        if cursor.remaining:
            logger.debug("%d trailing bytes after the last data record", cursor.remaining)

        return tuple(
            DecodedSignal(
                descriptor=desc,
                record_duration=header.data_record_duration,
                records=tuple(records[desc.index]),
                annotations=tuple(annotations[desc.index]),
            )
            for desc in descriptors
        )

    @staticmethod
    def _truncated(
        record_index: int,
        desc: SignalDescriptor,
        cursor: ByteCursor,
        records_count: int,
    ) -> TruncatedRecords:
        return TruncatedRecords(
            f"Buffer ends in record {record_index} of {records_count}, "
            f"signal {desc.index} ('{desc.label}'), with {cursor.remaining} bytes left."
        )
