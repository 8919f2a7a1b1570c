"""Running physical totals for one generation run."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Diagnostic:
    """A non-fatal problem found while processing a feature."""

    feature_id: str
    message: str
    dw: float | None = None
    dh: float | None = None


@dataclass
class PhysicalAccumulator:
    """Area, mass and per-axis moment totals.

    Areas are in µm², mass in grams and moments in g·m.  Totals only ever
    grow during a run; ``reset()`` starts a new one.
    """

    total_area: float = 0.0
    detector_trace_area: float = 0.0
    overall_mass: float = 0.0
    moment_x: float = 0.0
    moment_y: float = 0.0
    moment_z: float = 0.0
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def reset(self) -> None:
        self.total_area = 0.0
        self.detector_trace_area = 0.0
        self.overall_mass = 0.0
        self.moment_x = 0.0
        self.moment_y = 0.0
        self.moment_z = 0.0
        self.diagnostics = []

    def add_area(self, value: float) -> None:
        self.total_area += value

    def add_detector_area(self, value: float) -> None:
        """Detector area counts toward both the detector and global totals."""
        self.detector_trace_area += value
        self.total_area += value

    def add_mass(self, mass: float, moment: tuple[float, float, float]) -> None:
        self.overall_mass += mass
        self.moment_x += moment[0]
        self.moment_y += moment[1]
        self.moment_z += moment[2]

    def report(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    @property
    def moment_sum(self) -> float:
        return self.moment_x + self.moment_y + self.moment_z

    def center_offset(self) -> float | None:
        """Legacy combined offset: summed moments over total mass.

        Not a physical center of mass; see ``center_offset_per_axis``.
        Returns None when no mass has been accumulated.
        """
        if self.overall_mass == 0:
            return None
        return self.moment_sum / self.overall_mass

    def center_offset_per_axis(self) -> tuple[float, float, float] | None:
        """Mass-weighted mean distance from the device center, per axis (m)."""
        if self.overall_mass == 0:
            return None
        m = self.overall_mass
        return self.moment_x / m, self.moment_y / m, self.moment_z / m
