"""Tests for feature areas and the construction pass.

Validates:
  - Pin area is π·r²
  - Straight traces subtract the pin radius or half the trace width
  - Straight traces without a previous feature contribute nothing
  - True 45° diagonals register |dw|·|dh|, malformed ones register 0
  - Detector counts and closed-form comb area
  - Area can only be registered once per feature
"""

from __future__ import annotations

import math
import unittest

from sensorgen.config import DEVICE_RULES
from sensorgen.features import (
    Detector, FeatureError, FeatureKind, PhysicalAccumulator, Pin, Trace, TraceKind,
    derive_end, detector_area, pin_area, register_area, register_detector_area,
    straight_trace_area,
)
from sensorgen.layout import build_layout, LayoutSpec
from tests.device_fixture import detector, make_sample_device, pin, trace


def _lookup(*features):
    by_id = {f.id: f for f in features}
    return lambda fid: by_id.get(fid) if fid is not None else None


class TestTraceEndpoints(unittest.TestCase):
    """Endpoint derivation per orientation."""

    def test_vertical_end(self):
        t = Trace("t", 4950, 5000, 0, 8000, TraceKind.VERTICAL, 100)
        self.assertEqual(t.end, (5050, 8000))
        self.assertEqual(t.center, (5000, 6500))
        self.assertAlmostEqual(t.span, 3000)

    def test_horizontal_end(self):
        t = Trace("t", 1000, 2000, 4000, 0, TraceKind.HORIZONTAL, 100)
        self.assertEqual(t.end, (4000, 2000))
        self.assertAlmostEqual(t.span, 3000)

    def test_horizontal_height_is_offset(self):
        t = Trace("t", 1000, 2000, 4000, 30, TraceKind.HORIZONTAL, 100)
        self.assertEqual(t.end, (4000, 2030))

    def test_diagonal_end_is_far_corner(self):
        """Diagonals derive their end before the center is read."""
        t = Trace("t", 6000, 6000, 7000, 5000, TraceKind.DIAGONAL_UP, 100)
        self.assertEqual(t.end, (7000, 5000))
        self.assertEqual(t.center, (6500, 5500))
        self.assertEqual((t.dw, t.dh), (1000, -1000))

    def test_derive_end_function(self):
        self.assertEqual(derive_end(TraceKind.VERTICAL, 0, 100, 0, 600, 50), (50, 600))


class TestPinArea(unittest.TestCase):

    def test_pin_area_formula(self):
        p = Pin("p", 5000, 5000, 400)
        self.assertAlmostEqual(pin_area(p), math.pi * 200 ** 2)
        self.assertAlmostEqual(pin_area(p), 125663.706, places=2)

    def test_pin_registers_on_construction(self):
        acc = PhysicalAccumulator()
        p = Pin("p", 0, 0, 1000)
        added = register_area(p, _lookup(p), acc, DEVICE_RULES)
        self.assertAlmostEqual(added, math.pi * 500 ** 2)
        self.assertAlmostEqual(acc.total_area, added)
        self.assertTrue(p.area_registered)

    def test_double_registration_rejected(self):
        acc = PhysicalAccumulator()
        p = Pin("p", 0, 0, 400)
        register_area(p, _lookup(p), acc, DEVICE_RULES)
        with self.assertRaises(FeatureError):
            register_area(p, _lookup(p), acc, DEVICE_RULES)
        self.assertAlmostEqual(acc.total_area, pin_area(p))


class TestStraightTraceArea(unittest.TestCase):

    def test_after_pin_subtracts_radius(self):
        p = Pin("p", 5000, 5000, 400)
        t = Trace("t", 4950, 5000, 0, 8000, TraceKind.VERTICAL, 100, previous="p")
        self.assertAlmostEqual(straight_trace_area(t, p), 100 * 3000 - 200)

    def test_horizontal_after_pin(self):
        p = Pin("p", 1000, 1000, 600)
        t = Trace("t", 1000, 950, 3000, 0, TraceKind.HORIZONTAL, 100, previous="p")
        self.assertAlmostEqual(straight_trace_area(t, p), 100 * 2000 - 300)

    def test_after_trace_subtracts_half_width(self):
        """Two collinear verticals: the second loses exactly 50 (half of 100)."""
        acc = PhysicalAccumulator()
        first = Trace("t1", 0, 0, 0, 1000, TraceKind.VERTICAL, 100)
        second = Trace("t2", 0, 1000, 0, 2500, TraceKind.VERTICAL, 100, previous="t1")
        added = register_area(second, _lookup(first, second), acc, DEVICE_RULES)
        self.assertAlmostEqual(100 * 1500 - added, 50)
        self.assertAlmostEqual(acc.total_area, 149950)

    def test_after_detector_treated_like_trace(self):
        d = Detector("d", 0, 0, 1000, 1000, 100, 100)
        t = Trace("t", 0, 0, 500, 0, TraceKind.HORIZONTAL, 100, previous="d")
        self.assertAlmostEqual(straight_trace_area(t, d), 100 * 500 - 50)

    def test_no_previous_contributes_nothing(self):
        acc = PhysicalAccumulator()
        t = Trace("t", 0, 0, 0, 1000, TraceKind.VERTICAL, 100)
        added = register_area(t, _lookup(t), acc, DEVICE_RULES)
        self.assertEqual(added, 0.0)
        self.assertEqual(t.area, 0.0)
        self.assertEqual(acc.total_area, 0.0)
        self.assertFalse(t.area_registered)

    def test_reversed_direction_uses_absolute_span(self):
        prev = Trace("t0", 0, 0, 0, 100, TraceKind.VERTICAL, 100)
        t = Trace("t", 0, 2000, 0, 500, TraceKind.VERTICAL, 100, previous="t0")
        self.assertAlmostEqual(straight_trace_area(t, prev), 100 * 1500 - 50)

    def test_area_never_negative(self):
        p = Pin("p", 0, 0, 4000)
        t = Trace("t", 0, 0, 0, 1, TraceKind.VERTICAL, 1, previous="p")
        self.assertEqual(straight_trace_area(t, p), 0.0)


class TestDiagonalTraceArea(unittest.TestCase):

    def test_true_diagonal_area(self):
        acc = PhysicalAccumulator()
        t = Trace("d", 6000, 6000, 7000, 7000, TraceKind.DIAGONAL_DOWN, 100)
        added = register_area(t, _lookup(t), acc, DEVICE_RULES)
        self.assertAlmostEqual(added, 1000 * 1000)
        self.assertFalse(acc.diagnostics)

    def test_true_diagonal_negative_spans(self):
        acc = PhysicalAccumulator()
        t = Trace("d", 6000, 6000, 5500, 5500, TraceKind.DIAGONAL_UP, 100)
        self.assertAlmostEqual(register_area(t, _lookup(t), acc, DEVICE_RULES), 250000)

    def test_malformed_diagonal_registers_zero(self):
        acc = PhysicalAccumulator()
        acc.add_area(1234.0)
        t = Trace("bad", 0, 0, 1000, 500, TraceKind.DIAGONAL_UP, 100)
        with self.assertLogs("sensorgen.features.area", level="WARNING"):
            added = register_area(t, _lookup(t), acc, DEVICE_RULES)
        self.assertEqual(added, 0.0)
        self.assertEqual(acc.total_area, 1234.0)
        self.assertEqual(len(acc.diagnostics), 1)
        diag = acc.diagnostics[0]
        self.assertEqual(diag.feature_id, "bad")
        self.assertEqual((diag.dw, diag.dh), (1000, 500))


class TestDetectorArea(unittest.TestCase):

    def _default(self) -> Detector:
        return Detector("comb", 1350, 1350, 7300, 7300, 100, 100)

    def test_vertical_count(self):
        self.assertEqual(self._default().vertical_count, 37)

    def test_horizontal_pair_count_is_whole(self):
        d = self._default()
        self.assertEqual(d.horizontal_pair_count, 18)
        self.assertIsInstance(d.horizontal_pair_count, int)
        d.pair_divisor = 50.0
        self.assertEqual(d.horizontal_pair_count, 36)

    def test_closed_form_area(self):
        # 37·(100·7300) + 36·(100·100) − 37·200
        self.assertAlmostEqual(detector_area(self._default()), 27362600.0)

    def test_register_counts_toward_both_totals(self):
        acc = PhysicalAccumulator()
        d = self._default()
        register_detector_area(d, acc)
        self.assertAlmostEqual(acc.detector_trace_area, 27362600.0)
        self.assertAlmostEqual(acc.total_area, 27362600.0)
        with self.assertRaises(FeatureError):
            register_detector_area(d, acc)
        self.assertAlmostEqual(acc.total_area, 27362600.0)

    def test_construction_pass_defers_detector(self):
        acc = PhysicalAccumulator()
        d = self._default()
        self.assertEqual(register_area(d, _lookup(d), acc, DEVICE_RULES), 0.0)
        self.assertEqual(acc.total_area, 0.0)
        self.assertEqual(d.kind, FeatureKind.DETECTOR)


class TestConstructionPass(unittest.TestCase):
    """Construction pass over the sample device."""

    def test_sample_totals(self):
        acc = PhysicalAccumulator()
        layout = build_layout(make_sample_device(), acc)
        expected = {
            "pin_c": math.pi * 200 ** 2,
            "t_up": 100 * 3000 - 200,
            "t_up2": 100 * 1000 - 50,
            "t_h": 100 * 2050 - 50,
            "t_diag": 1000 * 1000,
            "comb": 0.0,
        }
        for fid, area in expected.items():
            self.assertAlmostEqual(layout[fid].area, area, places=6, msg=fid)
        self.assertAlmostEqual(acc.total_area, sum(expected.values()), places=6)

    def test_forward_reference_links(self):
        """A trace may name a pin that appears later in the specification."""
        spec = LayoutSpec(records=[
            trace("t", "vertical", 0, 0, 0, 1000, previous="p"),
            pin("p", 50, 0, diameter=200),
        ])
        acc = PhysicalAccumulator()
        layout = build_layout(spec, acc)
        self.assertAlmostEqual(layout["t"].area, 100 * 1000 - 100)
        self.assertIs(layout.previous_of(layout["t"]), layout["p"])

    def test_detector_overrides(self):
        spec = LayoutSpec(records=[detector(width=1000, height=500, spacing=50, trace_width=25)])
        layout = build_layout(spec, PhysicalAccumulator())
        d = layout["comb"]
        self.assertEqual((d.width, d.height, d.spacing, d.trace_width), (1000, 500, 50, 25))
        self.assertEqual(d.vertical_count, 10)


if __name__ == "__main__":
    unittest.main()
