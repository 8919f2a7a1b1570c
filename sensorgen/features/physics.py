"""Mass and moment contributions.

Areas come in as µm²; mass is returned in grams and moments in g·m.
"""

from __future__ import annotations

from sensorgen.config import DeviceRules, UM2_TO_M2, UM_TO_M


def area_to_m2(area_um2: float) -> float:
    return area_um2 * UM2_TO_M2


def mass_from_area(area_um2: float, rules: DeviceRules) -> float:
    """Mass (g) of a conductor patch of the given area."""
    thickness_m = rules.trace_thickness_um * UM_TO_M
    return area_to_m2(area_um2) * thickness_m * rules.density_g_per_m3


def axis_distances(center: tuple[float, float], rules: DeviceRules) -> tuple[float, float, float]:
    """Absolute distance (m) from the device center along X, Y and Z."""
    cx, cy = rules.center
    return (
        abs(center[0] - cx) * UM_TO_M,
        abs(center[1] - cy) * UM_TO_M,
        rules.z_offset_m,
    )


def moment_contribution(
    mass: float, center: tuple[float, float], rules: DeviceRules,
) -> tuple[float, float, float]:
    dx, dy, dz = axis_distances(center, rules)
    return mass * dx, mass * dy, mass * dz
