"""Tests for reporting and the command-line entry point."""

from __future__ import annotations

import contextlib
import io
import json
import tempfile
import unittest
from pathlib import Path

from sensorgen.__main__ import main
from sensorgen.features import PhysicalAccumulator
from sensorgen.generate import run_generation
from sensorgen.layout import LayoutSpec
from sensorgen.reporting import detector_area_mm2, summary_lines, write_report
from tests.device_fixture import make_sample_device, make_sample_dict, trace


class TestReporting(unittest.TestCase):

    def test_detector_probe_mm2(self):
        acc = PhysicalAccumulator()
        acc.add_detector_area(27362600.0)
        self.assertAlmostEqual(detector_area_mm2(acc), 27.3626)

    def test_summary_lines(self):
        lines = summary_lines(run_generation(make_sample_device()))
        text = "\n".join(lines)
        self.assertIn("Total occupied area:", text)
        self.assertIn("Detector trace area:   27.3626 mm²", text)
        self.assertIn("Device bounding area:  1.000000e-04 m²", text)
        self.assertNotIn("undefined", text)

    def test_summary_without_mass(self):
        spec = LayoutSpec(records=[trace("t", "vertical", 0, 0, 0, 100)])
        text = "\n".join(summary_lines(run_generation(spec)))
        self.assertIn("Center offset:         undefined", text)
        self.assertIn("Center offset X/Y/Z:   undefined", text)

    def test_write_report_lists_diagnostics(self):
        spec = LayoutSpec(records=[trace("bad", "diagonal_up", 0, 0, 1000, 300)])
        result = run_generation(spec)
        with tempfile.TemporaryDirectory() as tmp:
            path = write_report(Path(tmp), result)
            text = path.read_text(encoding="utf-8")
        self.assertIn("diagonal_up trace bad", text)
        self.assertIn("bad: diagonal spans differ in magnitude", text)


class TestCli(unittest.TestCase):

    def test_generate_writes_artifacts(self):
        with tempfile.TemporaryDirectory() as tmp:
            tmp = Path(tmp)
            layout = tmp / "layout.json"
            layout.write_text(json.dumps(make_sample_dict()), encoding="utf-8")
            out = io.StringIO()
            with contextlib.redirect_stdout(out):
                code = main([
                    "generate", str(layout),
                    "--svg", str(tmp / "out" / "device.svg"),
                    "--png", str(tmp / "out" / "device.png"),
                    "--scale", "0.01",
                    "--report-dir", str(tmp / "out"),
                    "--highlight-detector",
                ])
            self.assertEqual(code, 0)
            self.assertTrue((tmp / "out" / "device.svg").exists())
            self.assertTrue((tmp / "out" / "device.png").exists())
            self.assertTrue((tmp / "out" / "report.md").exists())
            self.assertIn("Overall mass:", out.getvalue())

    def test_bad_layout_exit_code(self):
        with tempfile.TemporaryDirectory() as tmp:
            layout = Path(tmp) / "layout.json"
            layout.write_text(json.dumps({"features": [
                {"id": "t", "kind": "trace", "orientation": "vertical",
                 "x": 0, "y": 0, "height": 10, "previous": "nope"},
            ]}), encoding="utf-8")
            err = io.StringIO()
            with contextlib.redirect_stderr(err):
                code = main(["generate", str(layout)])
        self.assertEqual(code, 2)
        self.assertIn("unknown previous feature 'nope'", err.getvalue())


if __name__ == "__main__":
    unittest.main()
