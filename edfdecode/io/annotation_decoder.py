# edfdecode/io/annotation_decoder.py
"""
Decoder for EDF+ Time-stamped Annotations Lists (TALs).

One annotation-channel record holds zero or more TALs followed by NUL
padding. Each TAL follows the grammar::

    onset [0x15 duration] 0x14 [note 0x14]* 0x00

The scan is an explicit state machine: ``step`` is a pure function of the
current ``TalState``, the block and a position, returning the next state and
the annotation completed at that byte, if any.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
import logging
import math

from edfdecode.core.annotation import Annotation
from edfdecode.io.cursor import ByteCursor

logger = logging.getLogger(__name__)


MARKER_TAL_END = 0x00
MARKER_FIELD_END = 0x14
MARKER_ONSET_END = 0x15


class Mode(Enum):
    ONSET = "onset"
    DURATION = "duration"
    NOTES = "notes"
    DONE = "done"
    END = "end"


@dataclass(frozen=True, slots=True)
class TalState:
    """Scanner state between two bytes of a TAL block."""
    mode: Mode = Mode.ONSET
    segment_start: int = 0
    pending: bool = False
    onset: float = 0.0
    duration: float = 0.0
    notes: tuple[str, ...] = field(default_factory=tuple)

    def completed(self) -> Annotation | None:
        if not self.pending:
            return None
        return Annotation(onset=self.onset, duration=self.duration, notes=self.notes)


def _segment_text(block: bytes, start: int, end: int) -> str:
    return block[start:end].decode("utf-8", errors="replace").strip()


def _parse_seconds(text: str, default: float) -> float:
    if not text:
        return default
    try:
        return float(text)
    except ValueError:
        logger.warning("Unparseable TAL time %r", text)
        return math.nan


def step(state: TalState, block: bytes, position: int) -> tuple[TalState, Annotation | None]:
    """Advance the scanner over ``block[position]``."""
    byte = block[position]
    mode = state.mode

    if byte == MARKER_TAL_END:
        if mode is Mode.DONE:
            # second NUL in a row: only padding follows
            return replace(state, mode=Mode.END), None
        mode = Mode.DONE
    elif mode is Mode.DONE:
        mode = Mode.ONSET

    if mode is Mode.ONSET:
        if byte in (MARKER_FIELD_END, MARKER_ONSET_END):
            text = _segment_text(block, state.segment_start, position)
            if not text:
                logger.warning("TAL without onset at byte %d; onset set to 0.0", position)
            return TalState(
                mode=Mode.DURATION if byte == MARKER_ONSET_END else Mode.NOTES,
                segment_start=position + 1,
                pending=True,
                onset=_parse_seconds(text, 0.0),
            ), None

    elif mode is Mode.DURATION:
        if byte == MARKER_FIELD_END:
            text = _segment_text(block, state.segment_start, position)
            return replace(
                state,
                mode=Mode.NOTES,
                segment_start=position + 1,
                duration=_parse_seconds(text, 0.0),
            ), None

    elif mode is Mode.NOTES:
        if byte == MARKER_FIELD_END:
            text = _segment_text(block, state.segment_start, position)
            notes = state.notes + (text,) if text else state.notes
            return replace(state, segment_start=position + 1, notes=notes), None

    elif mode is Mode.DONE:
        return TalState(mode=Mode.DONE, segment_start=position + 1), state.completed()

    if mode is not state.mode:
        return replace(state, mode=mode), None
    return state, None


def decode_tal_block(block: bytes) -> tuple[Annotation, ...]:
    """Decode every TAL in one annotation-channel record."""
    state = TalState()
    out: list[Annotation] = []
    for position in range(len(block)):
        state, emitted = step(state, block, position)
        if emitted is not None:
            out.append(emitted)
        if state.mode is Mode.END:
            break

    if state.pending and state.mode is not Mode.END:
        logger.warning(
            "TAL block of %d bytes ends without a NUL terminator; incomplete annotation dropped",
            len(block),
        )
    return tuple(out)


class AnnotationDecoder:
    """Reads one record's worth of annotation bytes and decodes its TALs."""

    def __init__(self, sample_width: int = 2):
        self.sample_width = sample_width

    def block_size(self, samples_per_record: int) -> int:
        return samples_per_record * self.sample_width

    def read(self, cursor: ByteCursor, samples_per_record: int) -> tuple[Annotation, ...] | None:
        """Returns None when the cursor holds less than one block."""
        block = cursor.read_bytes(self.block_size(samples_per_record))
        if block is None:
            return None
        return decode_tal_block(block)
