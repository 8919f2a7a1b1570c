"""One generation run: build the layout, render every feature once.

Both passes share a fresh ``PhysicalAccumulator``; running the same
specification twice therefore gives the same totals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sensorgen.canvas import RecordingCanvas
from sensorgen.config import DEVICE_RULES, DeviceRules, RenderOptions
from sensorgen.features.accumulator import PhysicalAccumulator
from sensorgen.features.geometry import Primitive, drawn_conductor_area
from sensorgen.features.render import Canvas, render_feature
from sensorgen.features.svg import fragment, svg_document
from sensorgen.layout.builder import build_layout
from sensorgen.layout.models import Layout, LayoutSpec

log = logging.getLogger("sensorgen.generate")


@dataclass
class GenerationResult:
    """Everything one run produced."""

    layout: Layout
    totals: PhysicalAccumulator
    rules: DeviceRules
    fragments: list[str] = field(default_factory=list)
    primitives: list[Primitive] = field(default_factory=list)

    @property
    def svg(self) -> str:
        return svg_document(self.fragments, self.rules)

    @property
    def drawn_area(self) -> float:
        """Union area (µm²) of everything actually drawn as conductor."""
        return drawn_conductor_area(self.primitives)


def render_layout(
    layout: Layout,
    canvas: Canvas,
    acc: PhysicalAccumulator,
    rules: DeviceRules = DEVICE_RULES,
    options: RenderOptions = RenderOptions(),
) -> tuple[list[str], list[Primitive]]:
    """Render pass in specification order. Returns (fragments, primitives)."""
    fragments: list[str] = []
    primitives: list[Primitive] = []
    for feature in layout:
        prims = render_feature(feature, canvas, acc, rules, options)
        fragments.append(fragment(feature, prims))
        primitives.extend(prims)
    return fragments, primitives


def run_generation(
    spec: LayoutSpec,
    rules: DeviceRules = DEVICE_RULES,
    canvas: Canvas | None = None,
    options: RenderOptions = RenderOptions(),
) -> GenerationResult:
    """Run both passes for ``spec`` and return the result."""
    acc = PhysicalAccumulator()
    canvas = canvas if canvas is not None else RecordingCanvas()

    layout = build_layout(spec, acc, rules)
    fragments, primitives = render_layout(layout, canvas, acc, rules, options)

    if acc.diagnostics:
        log.warning("%d feature(s) reported problems", len(acc.diagnostics))
    log.info(
        "Generated '%s': area %.1f µm², mass %.6e g",
        layout.name, acc.total_area, acc.overall_mass,
    )
    return GenerationResult(
        layout=layout,
        totals=acc,
        rules=rules,
        fragments=fragments,
        primitives=primitives,
    )
