"""Feature areas and the construction-pass registration.

Pins and traces register their area once, in specification order, right
after the layout is built.  The detector registers a single closed-form
aggregate during the render pass instead (see ``render.py``).
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Optional

from sensorgen.config import DeviceRules

from .accumulator import Diagnostic, PhysicalAccumulator
from .geometry import is_true_diagonal
from .models import Detector, Feature, FeatureError, FeatureKind, Pin, Trace

log = logging.getLogger("sensorgen.features.area")

Lookup = Callable[[Optional[str]], Optional[Feature]]


# ── Formulas ───────────────────────────────────────────────────────


def pin_area(pin: Pin) -> float:
    return math.pi * pin.radius ** 2


def overlap_term(trace: Trace, previous: Feature) -> float:
    """Amount subtracted from a straight trace for its joint with ``previous``."""
    if previous.kind is FeatureKind.PIN:
        return previous.radius
    return trace.trace_width / 2


def straight_trace_area(trace: Trace, previous: Feature | None) -> float:
    """Area of a vertical/horizontal trace; 0 when it has no previous feature."""
    if previous is None:
        return 0.0
    raw = trace.trace_width * trace.span
    return max(raw - overlap_term(trace, previous), 0.0)


def diagonal_trace_area(trace: Trace) -> float:
    return abs(trace.dw) * abs(trace.dh)


def detector_area(detector: Detector) -> float:
    """Closed-form comb area.

    vertical traces + linking pairs - the width doubled at each vertical's joints.
    """
    vc = detector.vertical_count
    pairs = detector.horizontal_pair_count
    tw = detector.trace_width
    return (
        vc * (tw * detector.height)
        + (pairs * 2) * (detector.spacing * tw)
        - vc * (tw * 2)
    )


# ── Construction-pass registration ─────────────────────────────────


def _mark_registered(feature: Feature, value: float, acc: PhysicalAccumulator) -> None:
    if feature.area_registered:
        raise FeatureError(feature.id, "area already registered")
    feature.area = value
    feature.area_registered = True
    acc.add_area(value)


def _register_pin(pin: Pin, lookup: Lookup, acc: PhysicalAccumulator, rules: DeviceRules) -> float:
    _mark_registered(pin, pin_area(pin), acc)
    return pin.area


def _register_trace(trace: Trace, lookup: Lookup, acc: PhysicalAccumulator, rules: DeviceRules) -> float:
    if trace.trace_kind.is_diagonal:
        if not is_true_diagonal(trace, rules.diagonal_tolerance_um):
            log.warning(
                "Diagonal trace %s is not at 45 degrees (dw=%.3f, dh=%.3f); excluded from area",
                trace.id, trace.dw, trace.dh,
            )
            acc.report(Diagnostic(
                feature_id=trace.id,
                message="diagonal spans differ in magnitude",
                dw=trace.dw, dh=trace.dh,
            ))
            return 0.0
        _mark_registered(trace, diagonal_trace_area(trace), acc)
        return trace.area

    previous = lookup(trace.previous)
    if previous is None:
        log.debug("Trace %s has no previous feature; no area registered", trace.id)
        return 0.0
    _mark_registered(trace, straight_trace_area(trace, previous), acc)
    return trace.area


def _register_deferred(feature: Feature, lookup: Lookup, acc: PhysicalAccumulator, rules: DeviceRules) -> float:
    # Detector area is an aggregate registered while rendering.
    return 0.0


_CONSTRUCTION_HANDLERS = {
    FeatureKind.PIN: _register_pin,
    FeatureKind.TRACE: _register_trace,
    FeatureKind.DETECTOR: _register_deferred,
}


def register_area(
    feature: Feature,
    lookup: Lookup,
    acc: PhysicalAccumulator,
    rules: DeviceRules,
) -> float:
    """Register a feature's construction-time area; returns the amount added.

    ``lookup`` resolves a previous-feature id to the feature (or None).
    Raises FeatureError when the feature was already registered.
    """
    return _CONSTRUCTION_HANDLERS[feature.kind](feature, lookup, acc, rules)


def register_detector_area(detector: Detector, acc: PhysicalAccumulator) -> float:
    """Add the comb aggregate to the detector and global totals, once."""
    if detector.area_registered:
        raise FeatureError(detector.id, "detector area already registered")
    value = detector_area(detector)
    detector.area = value
    detector.area_registered = True
    acc.add_detector_area(value)
    return value
