"""
Render sinks for the render pass.

- RecordingCanvas: keeps every drawing call in memory (headless runs, tests)
- ImageCanvas: rasterises the device onto a Pillow image (PNG export)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from sensorgen.config import DeviceRules


@dataclass(frozen=True)
class CanvasOp:
    """One recorded drawing call."""

    name: str           # "disk" | "rect" | "rotated_rect" | "text"
    args: tuple
    style: str


class RecordingCanvas:
    """Canvas that only records what was drawn."""

    def __init__(self) -> None:
        self.ops: list[CanvasOp] = []

    def disk(self, cx: float, cy: float, diameter: float, style: str) -> None:
        self.ops.append(CanvasOp("disk", (cx, cy, diameter), style))

    def rect(self, x: float, y: float, width: float, height: float, style: str) -> None:
        self.ops.append(CanvasOp("rect", (x, y, width, height), style))

    def rotated_rect(
        self, cx: float, cy: float, length: float, thickness: float,
        angle_deg: float, style: str,
    ) -> None:
        self.ops.append(CanvasOp("rotated_rect", (cx, cy, length, thickness, angle_deg), style))

    def text(self, x: float, y: float, label: str, style: str) -> None:
        self.ops.append(CanvasOp("text", (x, y, label), style))

    def by_name(self, name: str) -> list[CanvasOp]:
        return [op for op in self.ops if op.name == name]

    def by_style(self, style: str) -> list[CanvasOp]:
        return [op for op in self.ops if op.style == style]


class ImageCanvas:
    """Raster canvas backed by a Pillow RGBA image."""

    # Color palette
    COLORS = {
        'background': (11, 17, 32),         # Dark blue
        'conductor': (200, 150, 50),        # Copper trace color
        'pad': (255, 215, 0),               # Gold pad color
        'error': (239, 68, 68),             # Red marker
        'highlight': (251, 191, 36, 60),    # Amber with alpha
        'label': (248, 250, 252),           # White text
    }

    def __init__(self, rules: DeviceRules, px_per_um: float = 0.1, margin_px: int = 10):
        self.px_per_um = px_per_um
        self.margin_px = margin_px
        width_px = int(math.ceil(rules.device_width_um * px_per_um)) + 2 * margin_px
        height_px = int(math.ceil(rules.device_height_um * px_per_um)) + 2 * margin_px
        self.image = Image.new('RGBA', (width_px, height_px), self.COLORS['background'])
        self.draw = ImageDraw.Draw(self.image, 'RGBA')
        self.font = ImageFont.load_default()

    def _px(self, x: float, y: float) -> tuple[float, float]:
        return (
            self.margin_px + x * self.px_per_um,
            self.margin_px + y * self.px_per_um,
        )

    def _color(self, style: str) -> tuple:
        return self.COLORS.get(style, self.COLORS['conductor'])

    def disk(self, cx: float, cy: float, diameter: float, style: str) -> None:
        r = diameter / 2
        x1, y1 = self._px(cx - r, cy - r)
        x2, y2 = self._px(cx + r, cy + r)
        self.draw.ellipse([(x1, y1), (x2, y2)], fill=self._color(style))

    def rect(self, x: float, y: float, width: float, height: float, style: str) -> None:
        x1, y1 = self._px(min(x, x + width), min(y, y + height))
        x2, y2 = self._px(max(x, x + width), max(y, y + height))
        self.draw.rectangle([(x1, y1), (x2, y2)], fill=self._color(style))

    def rotated_rect(
        self, cx: float, cy: float, length: float, thickness: float,
        angle_deg: float, style: str,
    ) -> None:
        rad = math.radians(angle_deg)
        cos_r, sin_r = math.cos(rad), math.sin(rad)
        hl, ht = length / 2, thickness / 2
        corners = []
        for lx, ly in ((-hl, -ht), (hl, -ht), (hl, ht), (-hl, ht)):
            corners.append(self._px(
                cx + lx * cos_r - ly * sin_r,
                cy + lx * sin_r + ly * cos_r,
            ))
        self.draw.polygon(corners, fill=self._color(style))

    def text(self, x: float, y: float, label: str, style: str) -> None:
        px, py = self._px(x, y)
        # Get text bounding box for centering
        bbox = self.draw.textbbox((0, 0), label, font=self.font)
        text_width = bbox[2] - bbox[0]
        text_height = bbox[3] - bbox[1]
        self.draw.text(
            (px - text_width / 2, py - text_height / 2), label,
            fill=self._color(style), font=self.font,
        )

    def save(self, path: Path | str) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.image.convert('RGB').save(path, 'PNG')
        return path
