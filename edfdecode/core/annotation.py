# edfdecode/core/annotation.py
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Annotation:
    """
    One Time-stamped Annotations List entry.

    A single TAL may carry several texts that share one onset/duration,
    hence ``notes`` is a tuple. ``duration`` is 0.0 when the TAL has none.
    """
    onset: float
    duration: float = 0.0
    notes: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.notes, tuple):
            object.__setattr__(self, "notes", tuple(self.notes))

    @property
    def end(self) -> float:
        return self.onset + self.duration

    @property
    def is_timekeeping(self) -> bool:
        """EDF+ opens every annotation record with a TAL that has no text."""
        return not self.notes
