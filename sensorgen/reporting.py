"""End-of-run summary and markdown report."""

from __future__ import annotations

from pathlib import Path

from sensorgen.features.accumulator import PhysicalAccumulator
from sensorgen.features.physics import area_to_m2
from sensorgen.features.render import area_report
from sensorgen.generate import GenerationResult


def detector_area_mm2(acc: PhysicalAccumulator) -> float:
    """Detector comb area in mm² (what the interactive probe shows)."""
    return acc.detector_trace_area * 1e-6


def _fmt_optional(value: float | None, fmt: str = "{:.6e}") -> str:
    return "undefined" if value is None else fmt.format(value)


def summary_lines(result: GenerationResult) -> list[str]:
    acc = result.totals
    rules = result.rules
    per_axis = acc.center_offset_per_axis()
    if per_axis is None:
        per_axis_text = "undefined"
    else:
        per_axis_text = ", ".join(f"{v:.6e}" for v in per_axis)

    return [
        f"Total occupied area:   {area_to_m2(acc.total_area):.6e} m²",
        f"Drawn conductor area:  {area_to_m2(result.drawn_area):.6e} m² (union)",
        f"Device bounding area:  {rules.device_area_m2:.6e} m²",
        f"Detector trace area:   {detector_area_mm2(acc):.4f} mm²",
        f"Moment X:              {acc.moment_x:.6e} g·m",
        f"Moment Y:              {acc.moment_y:.6e} g·m",
        f"Moment Z:              {acc.moment_z:.6e} g·m",
        f"Moment sum:            {acc.moment_sum:.6e} g·m",
        f"Overall mass:          {acc.overall_mass:.6e} g",
        f"Center offset:         {_fmt_optional(acc.center_offset())} m (combined, legacy)",
        f"Center offset X/Y/Z:   {per_axis_text} m",
    ]


def write_report(out_dir: Path, result: GenerationResult) -> Path:
    """Write ``report.md`` with per-feature areas, totals and diagnostics."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    lines = []
    lines.append(f"# Device report: {result.layout.name}")
    lines.append("")
    lines.append("## Features")
    for feature in result.layout:
        lines.append(f"- {area_report(feature)}")
    lines.append("")
    lines.append("## Totals")
    lines.append("```")
    lines.extend(summary_lines(result))
    lines.append("```")
    lines.append("")
    lines.append("## Diagnostics")
    if result.totals.diagnostics:
        for d in result.totals.diagnostics:
            lines.append(f"- {d.feature_id}: {d.message} (dw={d.dw}, dh={d.dh})")
    else:
        lines.append("- No issues detected.")
    lines.append("")

    path = out_dir / "report.md"
    path.write_text("\n".join(lines), encoding="utf-8")
    return path
