# test/test_query.py
import math

import numpy as np
import pytest

from edfdecode.core import (
    DecodedSignal,
    InvalidQuery,
    RecordRange,
    SignalDescriptor,
    compute_range,
    extract,
    query_all,
)


def _signal(label: str, n_records: int, per_record: int = 3) -> DecodedSignal:
    desc = SignalDescriptor(
        index=0,
        label=label,
        transducer="",
        physical_dimension="uV",
        physical_minimum=-1.0,
        physical_maximum=1.0,
        digital_minimum=-1,
        digital_maximum=1,
        prefilter="",
        samples_per_record=per_record,
        scale=1.0,
    )
    records = [np.arange(per_record, dtype=np.float64) + 10 * r for r in range(n_records)]
    return DecodedSignal(descriptor=desc, record_duration=2.0, records=records)


class TestComputeRange:
    """Mapping seconds to record indices."""

    def test_basic(self):
        rng = compute_range(3.0, 4.0, record_duration=2.0, records_count=10)
        assert rng == RecordRange(1, 3)
        assert len(rng) == 2

    def test_partial_duration_rounds_up(self):
        assert compute_range(0.0, 0.1, 2.0, 10) == RecordRange(0, 1)

    def test_zero_duration_is_empty(self):
        rng = compute_range(5.0, 0.0, 2.0, 10)
        assert rng.is_empty
        assert rng.start == 2

    def test_clamped_to_records_count(self):
        assert compute_range(15.0, 100.0, 2.0, 10) == RecordRange(7, 10)
        assert compute_range(50.0, 1.0, 2.0, 10) == RecordRange(10, 10)

    def test_negative_inputs_clamp_to_zero(self):
        assert compute_range(-5.0, 3.0, 2.0, 10) == RecordRange(0, 0)
        assert compute_range(4.0, -3.0, 2.0, 10) == RecordRange(2, 2)

    def test_negative_offset_bounds_are_clamped_after_span(self):
        # end = floor(offset / 2) + ceil(duration / 2), clamped afterwards
        assert compute_range(-5.0, 3.0, 2.0, 10).is_empty
        assert compute_range(-1.0, 4.0, 2.0, 10) == RecordRange(0, 1)
        assert compute_range(-2.0, 6.0, 2.0, 10) == RecordRange(0, 2)

    def test_infinite_offset_and_duration(self):
        assert compute_range(math.inf, 1.0, 2.0, 10) == RecordRange(10, 10)
        assert compute_range(-math.inf, 1.0, 2.0, 10) == RecordRange(0, 0)
        with pytest.raises(InvalidQuery):
            compute_range(-math.inf, math.inf, 2.0, 10)

    def test_infinite_duration(self):
        assert compute_range(0.0, math.inf, 2.0, 10) == RecordRange(0, 10)

    def test_monotonic_in_offset_and_duration(self):
        offsets = np.linspace(-3.0, 25.0, 57)
        durations = np.linspace(0.0, 25.0, 51)
        prev_start = -1
        for off in offsets:
            rng = compute_range(float(off), 1.0, 2.0, 10)
            assert rng.start >= prev_start
            assert 0 <= rng.start <= rng.end <= 10
            prev_start = rng.start
        prev_end = -1
        for dur in durations:
            rng = compute_range(3.0, float(dur), 2.0, 10)
            assert rng.end >= prev_end
            assert 0 <= rng.start <= rng.end <= 10
            prev_end = rng.end

    @pytest.mark.parametrize("duration", [0.0, -1.0, math.nan, math.inf])
    def test_invalid_record_duration(self, duration):
        with pytest.raises(InvalidQuery):
            compute_range(0.0, 1.0, duration, 10)

    def test_nan_window(self):
        with pytest.raises(InvalidQuery):
            compute_range(math.nan, 1.0, 2.0, 10)

    def test_record_range_validation(self):
        with pytest.raises(InvalidQuery):
            RecordRange(3, 2)
        with pytest.raises(ValueError):
            RecordRange(-1, 2)


class TestExtract:
    """Concatenation of record blocks."""

    def test_full_span_reproduces_records(self):
        sig = _signal("A", 4)
        out = extract(sig, RecordRange(0, 4))
        np.testing.assert_array_equal(out, np.concatenate(sig.records))
        np.testing.assert_array_equal(out, sig.samples())

    def test_sub_range(self):
        out = extract(_signal("A", 4), RecordRange(1, 3))
        assert out.tolist() == [10.0, 11.0, 12.0, 20.0, 21.0, 22.0]

    def test_empty_range(self):
        out = extract(_signal("A", 4), RecordRange(2, 2))
        assert out.size == 0
        assert out.dtype == np.float64

    def test_query_all_skips_annotation_channels(self):
        a = _signal("A", 3)
        ann = _signal("EDF Annotations", 0)
        b = _signal("B", 3, per_record=1)
        out = query_all([a, ann, b], RecordRange(0, 2))
        assert len(out) == 2
        assert out[0].size == 6
        assert out[1].tolist() == [0.0, 10.0]
