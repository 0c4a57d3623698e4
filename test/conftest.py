# test/conftest.py
"""Builders for small synthetic EDF/EDF+ buffers."""
from __future__ import annotations

import numpy as np
import pytest


def _ascii(value, width: int) -> bytes:
    raw = str(value).ljust(width).encode("ascii")
    assert len(raw) == width, f"{value!r} does not fit in {width} bytes"
    return raw


def int16_block(values) -> bytes:
    return np.asarray(values, dtype="<i2").tobytes()


def int24_block(values) -> bytes:
    out = bytearray()
    for v in values:
        out += int(v & 0xFFFFFF).to_bytes(3, "little")
    return bytes(out)


def tal_block(payload: bytes, samples_per_record: int, sample_width: int = 2) -> bytes:
    size = samples_per_record * sample_width
    assert len(payload) <= size
    return payload + b"\x00" * (size - len(payload))


def signal_fields(
    label: str,
    samples_per_record: int,
    *,
    physical=(-100.0, 100.0),
    digital=(-32768, 32767),
    unit: str = "uV",
    transducer: str = "AgAgCl electrode",
    prefilter: str = "HP:0.1Hz",
) -> dict:
    return {
        "label": label,
        "transducer": transducer,
        "unit": unit,
        "physical_min": physical[0],
        "physical_max": physical[1],
        "digital_min": digital[0],
        "digital_max": digital[1],
        "prefilter": prefilter,
        "samples_per_record": samples_per_record,
    }


def build_edf(
    signals: list[dict],
    records: list[list[bytes]],
    *,
    records_count: int | str | None = None,
    record_duration: float | str = 1.0,
    reserved: str = "EDF+C",
    reserved_width: int = 44,
    start_date: str = "02.03.21",
    start_time: str = "13.45.10",
) -> bytes:
    """Assemble header + records. ``records[i][j]`` is the payload of signal j in record i."""
    ns = len(signals)
    header_size = 8 + 80 + 80 + 8 + 8 + 8 + reserved_width + 8 + 8 + 4 + ns * 256
    head = b"".join([
        _ascii("0", 8),
        _ascii("X M 01-JAN-1980 Patient", 80),
        _ascii("Startdate 02-MAR-2021 X X X", 80),
        _ascii(start_date, 8),
        _ascii(start_time, 8),
        _ascii(header_size, 8),
        _ascii(reserved, reserved_width),
        _ascii(len(records) if records_count is None else records_count, 8),
        _ascii(record_duration, 8),
        _ascii(ns, 4),
    ])
    columns = [
        ("label", 16), ("transducer", 80), ("unit", 8),
        ("physical_min", 8), ("physical_max", 8),
        ("digital_min", 8), ("digital_max", 8),
        ("prefilter", 80), ("samples_per_record", 8),
    ]
    for key, width in columns:
        head += b"".join(_ascii(s[key], width) for s in signals)
    head += b"".join(_ascii("", 32) for _ in signals)

    body = b"".join(b"".join(rec) for rec in records)
    return head + body


@pytest.fixture
def make_edf():
    return build_edf


@pytest.fixture
def blocks():
    """Payload encoders: blocks.int16, blocks.int24, blocks.tal, blocks.signal."""
    class _Blocks:
        int16 = staticmethod(int16_block)
        int24 = staticmethod(int24_block)
        tal = staticmethod(tal_block)
        signal = staticmethod(signal_fields)
    return _Blocks


@pytest.fixture
def sample_edf_bytes():
    """
    Three records of 0.5 s: EEG (4 samples/record), EMG (2 samples/record)
    and an EDF Annotations channel (16 samples = 32 bytes per record).
    """
    signals = [
        signal_fields("EEG Fpz-Cz", 4, physical=(-3276.8, 3276.7), digital=(-32768, 32767)),
        signal_fields("EMG submental", 2, physical=(-10.0, 10.0), digital=(-1000, 1000), unit="mV"),
        signal_fields("EDF Annotations", 16, physical=(-1, 1), unit="", transducer="", prefilter=""),
    ]
    tals = [
        b"+0\x14\x14\x00+0.25\x14Lights off\x14\x00",
        b"+0.5\x14\x14\x00",
        b"+1\x14\x14\x00+1.2\x1530\x14Sleep stage W\x14\x00",
    ]
    records = []
    for r in range(3):
        eeg = [r * 10 + k for k in range(4)]
        emg = [100 * (r + 1), -100 * (r + 1)]
        records.append([int16_block(eeg), int16_block(emg), tal_block(tals[r], 16)])
    return build_edf(signals, records, record_duration=0.5)
