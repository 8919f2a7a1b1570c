"""Shared physical constants for device generation.

All lengths are in micrometres (the internal length unit).  SVG output and
reports divide by 1000 to get millimetres.  Both the construction pass
(areas) and the render pass (mass, moments, drawing) read their parameters
from a single ``DeviceRules`` instance so the two stay in sync.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path


UM_TO_M = 1e-6
UM2_TO_M2 = 1e-12
UM_TO_MM = 1e-3

DEFAULT_RULES_PATH = Path(__file__).resolve().parent.parent / "configs" / "device.json"


class ConfigError(ValueError):
    """Raised when a rules file cannot be applied."""


# Rules a file may set to null; every other rule must be a positive number.
_OPTIONAL_RULES = frozenset({"detector_trace_width_um"})
_NON_NEGATIVE_RULES = frozenset({"diagonal_tolerance_um"})


@dataclass(frozen=True)
class DeviceRules:
    """Physical and drawing rules for one device.

    All distances are in micrometres.
    """

    device_width_um: float = 10000.0
    device_height_um: float = 10000.0

    trace_width_um: float = 100.0
    """Default width of a straight or diagonal trace."""

    pin_diameter_um: float = 400.0

    trace_thickness_um: float = 10.0
    """Thickness of the conductive layer."""

    substrate_thickness_um: float = 500.0

    density_g_per_m3: float = 8.96e6
    """Conductor density (copper)."""

    detector_width_um: float = 7300.0
    detector_height_um: float = 7300.0
    detector_spacing_um: float = 100.0
    detector_trace_width_um: float | None = None
    """Falls back to ``trace_width_um`` when unset."""

    horizontal_pair_divisor: float = 100.0
    """Scaling literal of the detector link-pair formula."""

    error_marker_um: float = 200.0
    """Edge length of the marker drawn for a malformed diagonal."""

    diagonal_tolerance_um: float = 1e-9

    # ── Derived helpers ────────────────────────────────────────────

    @property
    def center(self) -> tuple[float, float]:
        """Geometric center of the device outline."""
        return self.device_width_um / 2, self.device_height_um / 2

    @property
    def z_offset_m(self) -> float:
        """Distance from the substrate mid-plane to the trace mid-plane."""
        return (self.substrate_thickness_um / 2 + self.trace_thickness_um / 2) * UM_TO_M

    @property
    def device_area_m2(self) -> float:
        return self.device_width_um * self.device_height_um * UM2_TO_M2

    @property
    def comb_trace_width_um(self) -> float:
        if self.detector_trace_width_um is None:
            return self.trace_width_um
        return self.detector_trace_width_um


@dataclass(frozen=True)
class RenderOptions:
    """Drawing switches for the render pass."""

    end_caps: bool = True
    labels: bool = True
    highlight_detector: bool = False


def load_rules(path: Path | str | None = None, base: DeviceRules | None = None) -> DeviceRules:
    """Return ``base`` (default rules) with the values from a JSON file applied.

    The file holds one object whose keys are ``DeviceRules`` field names.
    """
    path = Path(path) if path is not None else DEFAULT_RULES_PATH
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read rules file '{path}': {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Rules file '{path}' must contain a JSON object")

    known = {f.name for f in fields(DeviceRules)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown rule(s) in '{path}': {', '.join(unknown)}")

    values: dict[str, float | None] = {}
    for key, value in data.items():
        if value is None:
            if key not in _OPTIONAL_RULES:
                raise ConfigError(f"Rule '{key}' cannot be null")
            values[key] = None
            continue
        try:
            number = float(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Rule '{key}' must be a number, got {value!r}") from e
        if key in _NON_NEGATIVE_RULES:
            if number < 0:
                raise ConfigError(f"Rule '{key}' must be >= 0, got {value!r}")
        elif number <= 0:
            raise ConfigError(f"Rule '{key}' must be > 0, got {value!r}")
        values[key] = number

    return replace(base or DEVICE_RULES, **values)


# Module-level singleton, importable everywhere.
DEVICE_RULES = DeviceRules()
