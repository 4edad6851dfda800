"""Tests for the overflow/underflow demonstration harness."""

from __future__ import annotations

import numpy as np

from bounds import FLOAT64, INT8, PERCENT, UINT8
from harness import (
    END_BANNER,
    START_BANNER,
    format_value,
    overflow_section,
    per_step,
    render_demo,
    render_run,
    run_demo,
    underflow_section,
)
from models import HarnessSettings


class TestPerStep:

    def test_integral_uses_floor_division(self):
        assert per_step(INT8, 5) == 25
        assert isinstance(per_step(INT8, 5), np.int8)
        assert per_step(UINT8, 5) == 51
        assert per_step(PERCENT, 3) == 33

    def test_float_uses_true_division(self):
        assert per_step(FLOAT64, 4) == FLOAT64.max / 4


class TestSections:

    def test_int8_overflow(self):
        section = overflow_section(INT8, 5)
        assert section.title == "Overflow Test of Type = int8"
        fits, exhausted = section.runs
        assert fits.result.completed and fits.result.value == 125
        assert exhausted.exhausted and exhausted.result.value == 125
        assert exhausted.count == 6

    def test_int8_underflow_does_not_reach_min(self):
        # 127 - 6 * 25 = -23 is still representable
        section = underflow_section(INT8, 5)
        fits, longer = section.runs
        assert fits.result.value == 2
        assert longer.result.completed
        assert longer.result.value == -23

    def test_uint8_underflow(self):
        fits, exhausted = underflow_section(UINT8, 5).runs
        assert fits.result.completed and fits.result.value == 0
        assert exhausted.exhausted and exhausted.result.value == 0

    def test_float_sections_stay_finite(self):
        for section in (overflow_section(FLOAT64, 5), underflow_section(FLOAT64, 5)):
            for run in section.runs:
                assert np.isfinite(run.result.value)


class TestRendering:

    def test_render_run(self):
        run = overflow_section(INT8, 5).runs[1]
        assert render_run(run) == (
            "\tAdding Numbers With Overflow (0, 25, 6) = Overflow: true Result: 125"
        )

    def test_values_render_as_numbers(self):
        # char-sized values print as numbers, never as characters
        assert format_value(INT8.cast(65)) == "65"
        assert format_value(UINT8.max) == "255"

    def test_full_report(self, small_settings):
        lines = list(render_demo(small_settings))
        stars = "*" * 10
        assert lines == [
            START_BANNER,
            "",
            stars,
            "*** Running Overflow Tests ***",
            stars,
            "Overflow Test of Type = int8",
            "\tAdding Numbers Without Overflow (0, 25, 5) = Overflow: false Result: 125",
            "\tAdding Numbers With Overflow (0, 25, 6) = Overflow: true Result: 125",
            "Overflow Test of Type = unsigned char",
            "\tAdding Numbers Without Overflow (0, 51, 5) = Overflow: false Result: 255",
            "\tAdding Numbers With Overflow (0, 51, 6) = Overflow: true Result: 255",
            "",
            stars,
            "*** Running Underflow Tests ***",
            stars,
            "Underflow Test of Type = int8",
            "\tSubtracting Numbers Without Underflow (127, 25, 5) = Underflow: false Result: 2",
            "\tSubtracting Numbers With Underflow (127, 25, 6) = Underflow: false Result: -23",
            "Underflow Test of Type = unsigned char",
            "\tSubtracting Numbers Without Underflow (255, 51, 5) = Underflow: false Result: 0",
            "\tSubtracting Numbers With Underflow (255, 51, 6) = Underflow: true Result: 0",
            "",
            END_BANNER,
        ]

    def test_default_run_covers_every_c_type(self):
        overflow, underflow = run_demo()
        assert len(overflow) == len(underflow) == len(HarnessSettings().domains)
        for section in overflow:
            assert not section.runs[0].exhausted or not section.domain.is_integral
