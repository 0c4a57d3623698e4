# edfdecode/io/config.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import configparser

from edfdecode.core.signal import ANNOTATION_MARKER


RESERVED_WIDTH_EDF = 44
RESERVED_WIDTH_LEGACY = 32
RESERVED_WIDTHS = (RESERVED_WIDTH_EDF, RESERVED_WIDTH_LEGACY)

SAMPLE_WIDTH_EDF = 2
SAMPLE_WIDTH_BDF = 3
SAMPLE_WIDTHS = (SAMPLE_WIDTH_EDF, SAMPLE_WIDTH_BDF)


@dataclass(frozen=True, slots=True)
class DecoderConfig:
    """
    Layout choices the decoder does not sniff from the file.

    - reserved_width: width of the file-level reserved header field
    - sample_width: bytes per sample in the data records (2 = EDF, 3 = BDF)
    - annotation_marker: label substring identifying annotation channels
    - apply_offset: add the affine offset to scaled samples
    - infer_records_count: resolve a "-1" record count from the buffer size
    """
    reserved_width: int = RESERVED_WIDTH_EDF
    sample_width: int = SAMPLE_WIDTH_EDF
    annotation_marker: str = ANNOTATION_MARKER
    apply_offset: bool = False
    infer_records_count: bool = True

    def __post_init__(self) -> None:
        if self.reserved_width not in RESERVED_WIDTHS:
            raise ValueError(
                f"reserved_width must be one of {RESERVED_WIDTHS}, got {self.reserved_width}"
            )
        if self.sample_width not in SAMPLE_WIDTHS:
            raise ValueError(
                f"sample_width must be one of {SAMPLE_WIDTHS}, got {self.sample_width}"
            )
        if not self.annotation_marker:
            raise ValueError("annotation_marker must be a non-empty string")

    @classmethod
    def edf(cls) -> "DecoderConfig":
        return cls()

    @classmethod
    def bdf(cls) -> "DecoderConfig":
        return cls(sample_width=SAMPLE_WIDTH_BDF)

    @classmethod
    def load(cls, ini_path: str | Path | None = None) -> "DecoderConfig":
        """Read the optional ``[decoder]`` section of an INI file.

        A missing file or section gives the defaults.
        """
        defaults = cls()
        path = Path(ini_path or "edfdecode.ini")
        if not path.exists():
            return defaults

        parser = configparser.ConfigParser()
        parser.read(path)
        section = parser["decoder"] if "decoder" in parser else None
        if section is None:
            return defaults

        return cls(
            reserved_width=section.getint("reserved_width", fallback=defaults.reserved_width),
            sample_width=section.getint("sample_width", fallback=defaults.sample_width),
            annotation_marker=section.get("annotation_marker", fallback=defaults.annotation_marker),
            apply_offset=section.getboolean("apply_offset", fallback=defaults.apply_offset),
            infer_records_count=section.getboolean(
                "infer_records_count", fallback=defaults.infer_records_count
            ),
        )
