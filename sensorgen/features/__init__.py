"""Features: pins, traces and the detector comb with their physical totals.

Submodules:
  models        Feature dataclasses and kind tags.
  accumulator   Running area / mass / moment totals and diagnostics.
  geometry      Endpoint handling, drawing primitives, comb synthesis, footprints.
  area          Area formulas and construction-pass registration.
  physics       Unit conversion, mass and moment contributions.
  render        Canvas protocol and the render pass.
  svg           SVG fragments and document.
"""

from .models import (
    FeatureKind, TraceKind, FeatureError, Pin, Trace, Detector, Feature, derive_end,
)
from .accumulator import PhysicalAccumulator, Diagnostic
from .geometry import (
    Disk, Rect, RotatedRect, Text, Primitive,
    feature_primitives, synthesize_comb, is_true_diagonal, drawn_conductor_area,
)
from .area import (
    pin_area, straight_trace_area, diagonal_trace_area, detector_area,
    register_area, register_detector_area,
)
from .physics import mass_from_area, moment_contribution
from .render import Canvas, render_feature, paint, area_report
from .svg import feature_to_svg, fragment, svg_document

__all__ = [
    # Models
    "FeatureKind", "TraceKind", "FeatureError", "Pin", "Trace", "Detector",
    "Feature", "derive_end",
    # Accumulator
    "PhysicalAccumulator", "Diagnostic",
    # Geometry
    "Disk", "Rect", "RotatedRect", "Text", "Primitive",
    "feature_primitives", "synthesize_comb", "is_true_diagonal", "drawn_conductor_area",
    # Area
    "pin_area", "straight_trace_area", "diagonal_trace_area", "detector_area",
    "register_area", "register_detector_area",
    # Physics
    "mass_from_area", "moment_contribution",
    # Render
    "Canvas", "render_feature", "paint", "area_report",
    # SVG
    "feature_to_svg", "fragment", "svg_document",
]
