"""Drawing primitives for every feature kind.

A feature is turned into a short list of primitives once; the canvas,
the SVG writer and the shapely footprint all consume the same list.
Coordinates are in µm with Y growing downward (screen / SVG convention),
so an ascending diagonal runs toward smaller Y.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from shapely.affinity import rotate
from shapely.geometry import Point, box as shapely_box
from shapely.ops import unary_union

from sensorgen.config import DeviceRules, RenderOptions

from .models import Detector, Feature, FeatureKind, Pin, Trace, TraceKind


# Primitive styles
CONDUCTOR = "conductor"
PAD = "pad"
LABEL = "label"
ERROR = "error"
HIGHLIGHT = "highlight"

CONDUCTIVE_STYLES = (CONDUCTOR, PAD)


# ── Primitive dataclasses ──────────────────────────────────────────


@dataclass(frozen=True)
class Disk:
    cx: float
    cy: float
    diameter: float
    style: str = CONDUCTOR


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle from its top-left corner."""

    x: float
    y: float
    width: float
    height: float
    style: str = CONDUCTOR


@dataclass(frozen=True)
class RotatedRect:
    """Rectangle of ``length`` × ``thickness`` centered on (cx, cy), rotated about it."""

    cx: float
    cy: float
    length: float
    thickness: float
    angle_deg: float
    style: str = CONDUCTOR


@dataclass(frozen=True)
class Text:
    x: float
    y: float
    label: str
    style: str = LABEL


Primitive = Union[Disk, Rect, RotatedRect, Text]


# ── Pins ───────────────────────────────────────────────────────────


def pin_primitives(pin: Pin, options: RenderOptions) -> list[Primitive]:
    prims: list[Primitive] = [Disk(pin.x, pin.y, pin.diameter, PAD)]
    if options.labels and pin.label:
        prims.append(Text(pin.x, pin.y, pin.label))
    return prims


# ── Traces ─────────────────────────────────────────────────────────


def is_true_diagonal(trace: Trace, tolerance: float = 1e-9) -> bool:
    """True when |dw| == |dh|, i.e. the segment runs at 45°."""
    return math.isclose(abs(trace.dw), abs(trace.dh), rel_tol=0.0, abs_tol=tolerance)


def diagonal_angle(trace: Trace) -> float:
    return -45.0 if trace.trace_kind is TraceKind.DIAGONAL_UP else 45.0


def trace_primitives(trace: Trace, rules: DeviceRules, end_caps: bool) -> list[Primitive]:
    if trace.trace_kind.is_diagonal:
        return _diagonal_primitives(trace, rules)
    return _straight_primitives(trace, end_caps)


def _straight_primitives(trace: Trace, end_caps: bool) -> list[Primitive]:
    w = trace.trace_width
    vertical = trace.trace_kind is TraceKind.VERTICAL
    if vertical:
        a0, a1 = trace.y, trace.end_y
    else:
        a0, a1 = trace.x, trace.end_x
    span = abs(a1 - a0)

    if end_caps:
        # Shorten by half a width so the cap is tangent to the rectangle.
        length = max(span - w / 2, 0.0)
        lo = a0 if a1 >= a0 else a1 + w / 2
    else:
        length = span
        lo = min(a0, a1)

    prims: list[Primitive]
    if vertical:
        prims = [Rect(trace.x, lo, w, length)]
        if end_caps:
            prims.append(Disk(trace.x + w / 2, a1, w))
    else:
        prims = [Rect(lo, trace.y, length, w)]
        if end_caps:
            prims.append(Disk(a1, trace.y + w / 2, w))
    return prims


def _diagonal_primitives(trace: Trace, rules: DeviceRules) -> list[Primitive]:
    if not is_true_diagonal(trace, rules.diagonal_tolerance_um):
        m = rules.error_marker_um
        return [Rect(trace.x - m / 2, trace.y - m / 2, m, m, ERROR)]

    mx, my = trace.center
    length = abs(trace.dh) * math.sqrt(2)
    angle = diagonal_angle(trace)
    rad = math.radians(angle)
    cap_x = mx + (length / 2) * math.cos(rad)
    cap_y = my + (length / 2) * math.sin(rad)
    return [
        RotatedRect(mx, my, length, trace.trace_width, angle),
        Disk(cap_x, cap_y, trace.trace_width),
    ]


# ── Detector comb ──────────────────────────────────────────────────


def link_iterations(detector: Detector) -> int:
    """Number of link pairs drawn."""
    return max(detector.horizontal_pair_count, 0)


def synthesize_comb(detector: Detector) -> list[Trace]:
    """Build the comb's internal traces: link pairs first, then the verticals.

    These traces belong to the detector only.  They never enter the layout
    and never register area individually.
    """
    tw = detector.trace_width
    step = detector.step
    bottom = detector.y
    top = detector.y + detector.height
    traces: list[Trace] = []

    cursor = detector.x
    for i in range(link_iterations(detector)):
        traces.append(Trace(
            id=f"{detector.id}/link{i}b",
            x=cursor, y=bottom,
            width=cursor + step, height=0.0,
            trace_kind=TraceKind.HORIZONTAL, trace_width=tw,
        ))
        cursor += step
        traces.append(Trace(
            id=f"{detector.id}/link{i}t",
            x=cursor, y=top - tw,
            width=cursor + step, height=0.0,
            trace_kind=TraceKind.HORIZONTAL, trace_width=tw,
        ))
        cursor += step

    cursor = detector.x
    for k in range(detector.vertical_count):
        if k % 2 == 0:
            y0, y1 = bottom, top
        else:
            y0, y1 = top, bottom
        traces.append(Trace(
            id=f"{detector.id}/v{k}",
            x=cursor, y=y0,
            width=0.0, height=y1,
            trace_kind=TraceKind.VERTICAL, trace_width=tw,
        ))
        cursor += step
    return traces


def detector_primitives(
    detector: Detector, rules: DeviceRules, options: RenderOptions,
) -> list[Primitive]:
    prims: list[Primitive] = []
    if options.highlight_detector:
        prims.append(Rect(detector.x, detector.y, detector.width, detector.height, HIGHLIGHT))
    for trace in synthesize_comb(detector):
        prims.extend(trace_primitives(trace, rules, end_caps=False))
    return prims


# ── Dispatch ───────────────────────────────────────────────────────


def feature_primitives(
    feature: Feature, rules: DeviceRules, options: RenderOptions,
) -> list[Primitive]:
    if feature.kind is FeatureKind.PIN:
        return pin_primitives(feature, options)
    if feature.kind is FeatureKind.TRACE:
        return trace_primitives(feature, rules, options.end_caps)
    if feature.kind is FeatureKind.DETECTOR:
        return detector_primitives(feature, rules, options)
    raise ValueError(f"Unknown feature kind: {feature.kind!r}")


# ── Shapely footprints ─────────────────────────────────────────────


def primitive_shape(prim: Primitive):
    """Shapely polygon covered by a primitive (None for text)."""
    if isinstance(prim, Disk):
        return Point(prim.cx, prim.cy).buffer(prim.diameter / 2)
    if isinstance(prim, Rect):
        return shapely_box(prim.x, prim.y, prim.x + prim.width, prim.y + prim.height)
    if isinstance(prim, RotatedRect):
        flat = shapely_box(
            prim.cx - prim.length / 2, prim.cy - prim.thickness / 2,
            prim.cx + prim.length / 2, prim.cy + prim.thickness / 2,
        )
        return rotate(flat, prim.angle_deg, origin=(prim.cx, prim.cy))
    return None


def drawn_conductor_area(primitives: list[Primitive]) -> float:
    """Area (µm²) of the union of all conductive primitives.

    Overlaps are counted once, so this is a cross-check for the
    formula-based totals rather than a replacement for them.
    """
    shapes = [
        primitive_shape(p) for p in primitives
        if p.style in CONDUCTIVE_STYLES and not isinstance(p, Text)
    ]
    shapes = [s for s in shapes if s is not None and not s.is_empty]
    if not shapes:
        return 0.0
    return unary_union(shapes).area


def primitive_bounds(primitives: list[Primitive]) -> tuple[float, float, float, float] | None:
    """(min_x, min_y, max_x, max_y) over all drawable primitives."""
    shapes = [primitive_shape(p) for p in primitives]
    shapes = [s for s in shapes if s is not None and not s.is_empty]
    if not shapes:
        return None
    return unary_union(shapes).bounds
