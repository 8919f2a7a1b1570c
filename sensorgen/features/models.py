"""Feature dataclasses: the pins, traces and detector of a device.

Every feature carries an explicit ``kind`` tag; area, render and SVG
operations dispatch on that tag instead of on a class hierarchy.
``previous`` is the id of a geometrically adjacent feature in the same
layout.  It only drives overlap correction and never implies ownership.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class FeatureKind(str, Enum):
    PIN = "pin"
    TRACE = "trace"
    DETECTOR = "detector"


class TraceKind(str, Enum):
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"
    DIAGONAL_UP = "diagonal_up"
    DIAGONAL_DOWN = "diagonal_down"

    @property
    def is_diagonal(self) -> bool:
        return self in (TraceKind.DIAGONAL_UP, TraceKind.DIAGONAL_DOWN)


class FeatureError(Exception):
    """Raised when a single-shot feature operation is repeated."""

    def __init__(self, feature_id: str, reason: str) -> None:
        self.feature_id = feature_id
        self.reason = reason
        super().__init__(f"Feature '{feature_id}': {reason}")


@dataclass
class Pin:
    """Circular conductive pad."""

    id: str
    x: float
    y: float
    diameter: float
    labels: list[str] = field(default_factory=list)
    previous: str | None = None

    area: float = 0.0       # µm², set by the construction pass
    mass: float = 0.0       # g, set by the render pass
    area_registered: bool = field(default=False, repr=False)
    rendered: bool = field(default=False, repr=False)

    kind = FeatureKind.PIN

    @property
    def radius(self) -> float:
        return self.diameter / 2

    @property
    def center(self) -> tuple[float, float]:
        return self.x, self.y

    @property
    def label(self) -> str:
        """First label, or an empty string."""
        return self.labels[0] if self.labels else ""


@dataclass
class Trace:
    """Finite-width conductive segment.

    ``width`` and ``height`` are read according to ``trace_kind``:
    a vertical trace runs to y = ``height`` and ignores ``width``; a
    horizontal trace runs to x = ``width`` with ``height`` as a Y offset;
    diagonals treat (``width``, ``height``) as the absolute far corner.
    """

    id: str
    x: float
    y: float
    width: float
    height: float
    trace_kind: TraceKind
    trace_width: float
    previous: str | None = None

    end_x: float = field(init=False, default=0.0)
    end_y: float = field(init=False, default=0.0)

    area: float = 0.0
    mass: float = 0.0
    area_registered: bool = field(default=False, repr=False)
    rendered: bool = field(default=False, repr=False)

    kind = FeatureKind.TRACE

    def __post_init__(self) -> None:
        self.end_x, self.end_y = derive_end(
            self.trace_kind, self.x, self.y, self.width, self.height, self.trace_width,
        )

    @property
    def start(self) -> tuple[float, float]:
        return self.x, self.y

    @property
    def end(self) -> tuple[float, float]:
        return self.end_x, self.end_y

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.end_x) / 2, (self.y + self.end_y) / 2

    @property
    def dw(self) -> float:
        """Horizontal span of a diagonal."""
        return self.width - self.x

    @property
    def dh(self) -> float:
        """Vertical span of a diagonal."""
        return self.height - self.y

    @property
    def span(self) -> float:
        """Length along the trace (|dh|·√2 for diagonals)."""
        if self.trace_kind is TraceKind.VERTICAL:
            return abs(self.end_y - self.y)
        if self.trace_kind is TraceKind.HORIZONTAL:
            return abs(self.end_x - self.x)
        return abs(self.dh) * math.sqrt(2)


@dataclass
class Detector:
    """Periodic comb of vertical traces joined by horizontal links."""

    id: str
    x: float
    y: float
    width: float
    height: float
    spacing: float
    trace_width: float
    pair_divisor: float = 100.0
    previous: str | None = None

    area: float = 0.0
    mass: float = 0.0
    area_registered: bool = field(default=False, repr=False)
    rendered: bool = field(default=False, repr=False)

    kind = FeatureKind.DETECTOR

    @property
    def vertical_count(self) -> int:
        return math.ceil((self.width / self.spacing) / 2)

    @property
    def horizontal_pair_count(self) -> int:
        """Whole link pairs; drawing and the aggregate area share this count."""
        return int(math.floor((self.width / 2) / 2) // self.pair_divisor)

    @property
    def step(self) -> float:
        """X advance between neighbouring comb traces."""
        return self.spacing + self.trace_width

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2


Feature = Union[Pin, Trace, Detector]


def derive_end(
    trace_kind: TraceKind,
    x: float, y: float,
    width: float, height: float,
    trace_width: float,
) -> tuple[float, float]:
    """Far endpoint of a trace, fully derived before any center is read."""
    if trace_kind is TraceKind.VERTICAL:
        return x + trace_width, y + (height - y)
    if trace_kind is TraceKind.HORIZONTAL:
        return x + (width - x), y + height
    # Diagonals: (width, height) is the far corner.
    return width, height
