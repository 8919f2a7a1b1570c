"""Render pass: draw each feature once and add its mass and moments.

The canvas is any object with the four drawing calls of ``Canvas``.
Rendering a feature a second time raises ``FeatureError`` so mass and
detector area can never be counted twice.
"""

from __future__ import annotations

import logging
from typing import Protocol

from sensorgen.config import DeviceRules, RenderOptions

from .accumulator import PhysicalAccumulator
from .area import register_detector_area
from .geometry import Disk, Primitive, Rect, RotatedRect, Text, feature_primitives
from .models import Detector, Feature, FeatureError, FeatureKind
from .physics import area_to_m2, mass_from_area, moment_contribution

log = logging.getLogger("sensorgen.features.render")


class Canvas(Protocol):
    def disk(self, cx: float, cy: float, diameter: float, style: str) -> None: ...

    def rect(self, x: float, y: float, width: float, height: float, style: str) -> None: ...

    def rotated_rect(
        self, cx: float, cy: float, length: float, thickness: float,
        angle_deg: float, style: str,
    ) -> None: ...

    def text(self, x: float, y: float, label: str, style: str) -> None: ...


def paint(primitives: list[Primitive], canvas: Canvas) -> None:
    """Send primitives to a canvas in order."""
    for p in primitives:
        if isinstance(p, Disk):
            canvas.disk(p.cx, p.cy, p.diameter, p.style)
        elif isinstance(p, Rect):
            canvas.rect(p.x, p.y, p.width, p.height, p.style)
        elif isinstance(p, RotatedRect):
            canvas.rotated_rect(p.cx, p.cy, p.length, p.thickness, p.angle_deg, p.style)
        elif isinstance(p, Text):
            canvas.text(p.x, p.y, p.label, p.style)
        else:
            raise TypeError(f"Unknown primitive: {p!r}")


def area_report(feature: Feature) -> str:
    """One console line describing a feature's registered area."""
    area_m2 = area_to_m2(feature.area)
    if feature.kind is FeatureKind.PIN:
        name = feature.label or feature.id
        return f"pin {name}: {area_m2:.6e} m²"
    if feature.kind is FeatureKind.TRACE:
        return f"{feature.trace_kind.value} trace {feature.id}: {area_m2:.6e} m²"
    return f"detector {feature.id}: {area_m2:.6e} m²"


def _add_physics(feature: Feature, acc: PhysicalAccumulator, rules: DeviceRules) -> None:
    feature.mass = mass_from_area(feature.area, rules)
    acc.add_mass(feature.mass, moment_contribution(feature.mass, feature.center, rules))


def render_feature(
    feature: Feature,
    canvas: Canvas,
    acc: PhysicalAccumulator,
    rules: DeviceRules,
    options: RenderOptions = RenderOptions(),
) -> list[Primitive]:
    """Draw one feature, add its physical contribution, return its primitives."""
    if feature.rendered:
        raise FeatureError(feature.id, "already rendered")

    primitives = feature_primitives(feature, rules, options)
    paint(primitives, canvas)

    if feature.kind is FeatureKind.DETECTOR:
        _finish_detector(feature, acc)

    _add_physics(feature, acc, rules)
    feature.rendered = True
    log.info("%s", area_report(feature))
    return primitives


def _finish_detector(detector: Detector, acc: PhysicalAccumulator) -> None:
    register_detector_area(detector, acc)
    log.debug(
        "Detector %s: %d verticals, %d link pairs, step %.1f",
        detector.id, detector.vertical_count,
        detector.horizontal_pair_count, detector.step,
    )
