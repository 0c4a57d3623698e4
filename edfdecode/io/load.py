# edfdecode/io/load.py
from __future__ import annotations

from pathlib import Path
import logging

from edfdecode.core import EDFFile
from edfdecode.io.config import DecoderConfig
from edfdecode.io.cursor import ByteCursor
from edfdecode.io.header_decoder import HeaderDecoder
from edfdecode.io.record_decoder import RecordDecoder

logger = logging.getLogger(__name__)


def decode(buffer: bytes | bytearray | memoryview, config: DecoderConfig | None = None) -> EDFFile:
    """Decode a complete EDF/EDF+ file held in memory.

    Raises TruncatedHeader, TruncatedRecords or MalformedNumber when the file
    cannot be decoded. Problems that do not prevent decoding (unparseable
    range fields, degenerate scales) are listed in ``EDFFile.issues``.
    """
    config = config or DecoderConfig()
    cursor = ByteCursor(buffer)

    decoded_header = HeaderDecoder(config).decode(cursor)
    signals = RecordDecoder(config).decode(cursor, decoded_header)

    edf = EDFFile.from_decoded(decoded_header.header, signals, decoded_header.issues)
    if edf.issues:
        logger.info("Decoded with %d issue(s)", len(edf.issues))
    return edf


def load_edf(path: str | Path, config: DecoderConfig | None = None) -> EDFFile:
    return decode(Path(path).read_bytes(), config)
