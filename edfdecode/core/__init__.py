# edfdecode/core/__init__.py
"""
Core domain objects for edfdecode.

This module defines the decoded, in-memory model of an EDF/EDF+ recording:
- FileHeader: file-level header fields
- SignalDescriptor: per-signal header attributes and scale
- Annotation: one TAL entry (onset, duration, notes)
- DecodedSignal: descriptor + decoded records or annotations
- EDFFile: header + decoded signals, with time-range queries

The core layer is independent from the binary decoder in ``edfdecode.io``.
"""

from .header import FileHeader
from .annotation import Annotation
from .signal import SignalDescriptor, DecodedSignal, ANNOTATION_MARKER
from .query import RecordRange, compute_range, extract, query_all
from .edf_file import EDFFile
from .exceptions import (
    DecodeError,
    OutOfBounds,
    MalformedNumber,
    DegenerateScale,
    TruncatedHeader,
    TruncatedRecords,
    InvalidQuery,
    SignalNotFound,
)


__all__ = [
    # model
    "FileHeader",
    "Annotation",
    "SignalDescriptor",
    "DecodedSignal",
    "EDFFile",
    "ANNOTATION_MARKER",

    # range queries
    "RecordRange",
    "compute_range",
    "extract",
    "query_all",

    # exceptions
    "DecodeError",
    "OutOfBounds",
    "MalformedNumber",
    "DegenerateScale",
    "TruncatedHeader",
    "TruncatedRecords",
    "InvalidQuery",
    "SignalNotFound",
]
