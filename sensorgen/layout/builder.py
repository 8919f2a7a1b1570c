"""Two-phase layout build followed by the construction pass.

  1. construct: every record becomes a feature carrying its previous-id key
  2. link: every key is checked against the finished collection, so
     forward references to later features are fine
  3. register: pins and traces add their areas in specification order
"""

from __future__ import annotations

import logging

from sensorgen.config import DEVICE_RULES, DeviceRules
from sensorgen.features.accumulator import PhysicalAccumulator
from sensorgen.features.area import register_area
from sensorgen.features.models import Detector, Feature, FeatureKind, Pin, Trace, TraceKind

from .models import FeatureRecord, Layout, LayoutError, LayoutSpec

log = logging.getLogger("sensorgen.layout.builder")

_TRACE_KINDS = {k.value: k for k in TraceKind}


def _number(rec: FeatureRecord, key: str, errors: list[str], default: float | None = None) -> float:
    raw = rec.params.get(key, default)
    if raw is None:
        errors.append(f"Feature '{rec.id}': missing '{key}'")
        return 0.0
    try:
        return float(raw)
    except (TypeError, ValueError):
        errors.append(f"Feature '{rec.id}': '{key}' must be a number, got {raw!r}")
        return 0.0


def _make_pin(rec: FeatureRecord, rules: DeviceRules, errors: list[str]) -> Pin:
    diameter = _number(rec, "diameter", errors, rules.pin_diameter_um)
    if diameter <= 0:
        errors.append(f"Feature '{rec.id}': diameter must be > 0")
    return Pin(
        id=rec.id,
        x=_number(rec, "x", errors),
        y=_number(rec, "y", errors),
        diameter=diameter,
        labels=list(rec.labels),
        previous=rec.previous,
    )


def _make_trace(rec: FeatureRecord, rules: DeviceRules, errors: list[str]) -> Trace | None:
    orientation = rec.params.get("orientation", rec.params.get("trace_kind"))
    trace_kind = _TRACE_KINDS.get(str(orientation).lower()) if orientation else None
    if trace_kind is None:
        errors.append(
            f"Feature '{rec.id}': unknown trace orientation {orientation!r} "
            f"(expected one of {sorted(_TRACE_KINDS)})"
        )
        return None
    trace_width = _number(rec, "trace_width", errors, rules.trace_width_um)
    if trace_width <= 0:
        errors.append(f"Feature '{rec.id}': trace_width must be > 0")
    return Trace(
        id=rec.id,
        x=_number(rec, "x", errors),
        y=_number(rec, "y", errors),
        width=_number(rec, "width", errors, 0.0),
        height=_number(rec, "height", errors, 0.0),
        trace_kind=trace_kind,
        trace_width=trace_width,
        previous=rec.previous,
    )


def _make_detector(rec: FeatureRecord, rules: DeviceRules, errors: list[str]) -> Detector:
    spacing = _number(rec, "spacing", errors, rules.detector_spacing_um)
    divisor = _number(rec, "pair_divisor", errors, rules.horizontal_pair_divisor)
    width = _number(rec, "width", errors, rules.detector_width_um)
    height = _number(rec, "height", errors, rules.detector_height_um)
    trace_width = _number(rec, "trace_width", errors, rules.comb_trace_width_um)
    if spacing <= 0:
        errors.append(f"Feature '{rec.id}': spacing must be > 0")
        spacing = rules.detector_spacing_um
    if divisor <= 0:
        errors.append(f"Feature '{rec.id}': pair_divisor must be > 0")
        divisor = rules.horizontal_pair_divisor
    for key, value in (("width", width), ("height", height), ("trace_width", trace_width)):
        if value <= 0:
            errors.append(f"Feature '{rec.id}': {key} must be > 0")
    return Detector(
        id=rec.id,
        x=_number(rec, "x", errors),
        y=_number(rec, "y", errors),
        width=width,
        height=height,
        spacing=spacing,
        trace_width=trace_width,
        pair_divisor=divisor,
        previous=rec.previous,
    )


_MAKERS = {
    FeatureKind.PIN.value: _make_pin,
    FeatureKind.TRACE.value: _make_trace,
    FeatureKind.DETECTOR.value: _make_detector,
}


def construct_features(spec: LayoutSpec, rules: DeviceRules = DEVICE_RULES) -> list[Feature]:
    """Phase 1: build every feature. Raises LayoutError listing all problems."""
    errors: list[str] = []
    features: list[Feature] = []
    seen: set[str] = set()

    for rec in spec.records:
        if rec.id in seen:
            errors.append(f"Duplicate feature id '{rec.id}'")
            continue
        seen.add(rec.id)

        maker = _MAKERS.get(rec.kind)
        if maker is None:
            errors.append(f"Feature '{rec.id}': unknown kind '{rec.kind}'")
            continue
        feature = maker(rec, rules, errors)
        if feature is not None:
            features.append(feature)

    if errors:
        raise LayoutError(errors)
    return features


def link_features(features: list[Feature], name: str = "device") -> Layout:
    """Phase 2: check every previous-feature key against the full collection."""
    layout = Layout(features, name=name)
    errors: list[str] = []
    for f in layout:
        if f.previous is None:
            continue
        if f.previous == f.id:
            errors.append(f"Feature '{f.id}': cannot reference itself as previous")
        elif f.previous not in layout:
            errors.append(f"Feature '{f.id}': unknown previous feature '{f.previous}'")
    if errors:
        raise LayoutError(errors)
    return layout


def build_layout(
    spec: LayoutSpec,
    acc: PhysicalAccumulator,
    rules: DeviceRules = DEVICE_RULES,
) -> Layout:
    """Construct, link and run the construction pass into ``acc``."""
    layout = link_features(construct_features(spec, rules), name=spec.name)
    for feature in layout:
        register_area(feature, layout.get, acc, rules)
    log.info(
        "Built layout '%s': %d features, construction area %.1f µm²",
        layout.name, len(layout), acc.total_area,
    )
    return layout
