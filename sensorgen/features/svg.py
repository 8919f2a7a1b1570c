"""SVG output: one fragment per feature plus the wrapping document.

Coordinates are converted from µm to mm and written with 3 decimals.
"""

from __future__ import annotations

from xml.sax.saxutils import escape, quoteattr

from sensorgen.config import DeviceRules, RenderOptions, UM_TO_MM

from .geometry import Disk, Primitive, Rect, RotatedRect, Text, feature_primitives
from .models import Feature, FeatureKind

SVG_STYLE = (
    ".conductor{fill:#c89632}"
    ".pad{fill:#ffd700}"
    ".error{fill:#ef4444}"
    ".highlight{fill:#fbbf24;fill-opacity:0.25}"
    ".label{font-size:0.3px;font-family:sans-serif;fill:#0b1120}"
)


def _mm(value: float) -> str:
    return f"{value * UM_TO_MM:.3f}"


def primitive_to_svg(p: Primitive) -> str:
    if isinstance(p, Disk):
        return (f'<circle cx="{_mm(p.cx)}" cy="{_mm(p.cy)}" '
                f'r="{_mm(p.diameter / 2)}" class="{p.style}"/>')
    if isinstance(p, Rect):
        return (f'<rect x="{_mm(p.x)}" y="{_mm(p.y)}" '
                f'width="{_mm(p.width)}" height="{_mm(p.height)}" class="{p.style}"/>')
    if isinstance(p, RotatedRect):
        return (f'<rect x="{_mm(p.cx - p.length / 2)}" y="{_mm(p.cy - p.thickness / 2)}" '
                f'width="{_mm(p.length)}" height="{_mm(p.thickness)}" '
                f'transform="rotate({p.angle_deg:.3f} {_mm(p.cx)} {_mm(p.cy)})" '
                f'class="{p.style}"/>')
    if isinstance(p, Text):
        return (f'<text x="{_mm(p.x)}" y="{_mm(p.y)}" text-anchor="middle" '
                f'dominant-baseline="central" class="{p.style}">{escape(p.label)}</text>')
    raise TypeError(f"Unknown primitive: {p!r}")


def fragment(feature: Feature, primitives: list[Primitive]) -> str:
    """Markup for one feature from its already computed primitives."""
    body = "\n".join(primitive_to_svg(p) for p in primitives)
    if feature.kind is FeatureKind.DETECTOR:
        return f"<g id={quoteattr(feature.id)} class=\"detector\">\n{body}\n</g>"
    return body


def feature_to_svg(
    feature: Feature, rules: DeviceRules, options: RenderOptions = RenderOptions(),
) -> str:
    return fragment(feature, feature_primitives(feature, rules, options))


def svg_document(fragments: list[str], rules: DeviceRules) -> str:
    """Wrap fragments with a header sized to the device in millimetres."""
    w = _mm(rules.device_width_um)
    h = _mm(rules.device_height_um)
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{w}mm" height="{h}mm" '
        f'viewBox="0 0 {w} {h}">',
        f"<style>{SVG_STYLE}</style>",
    ]
    lines.extend(f for f in fragments if f)
    lines.append("</svg>")
    return "\n".join(lines) + "\n"
