"""Device specification records and the built feature collection."""

from __future__ import annotations

from dataclasses import dataclass, field

from sensorgen.features.models import Feature


@dataclass
class FeatureRecord:
    """One feature construction from the device specification.

    ``params`` holds the kind-specific numbers (x, y, diameter, width, ...)
    exactly as supplied.
    """

    id: str
    kind: str                               # "pin" | "trace" | "detector"
    params: dict = field(default_factory=dict)
    previous: str | None = None             # id of an earlier or later feature
    labels: list[str] = field(default_factory=list)


@dataclass
class LayoutSpec:
    """Ordered list of feature constructions."""

    records: list[FeatureRecord]
    name: str = "device"


class LayoutError(Exception):
    """Raised when a device specification cannot be built."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "invalid layout")


class Layout:
    """Top-level features in specification order, addressable by id."""

    def __init__(self, features: list[Feature], name: str = "device") -> None:
        self.name = name
        self.features = list(features)
        self._by_id = {f.id: f for f in self.features}

    def __iter__(self):
        return iter(self.features)

    def __len__(self) -> int:
        return len(self.features)

    def __contains__(self, feature_id: object) -> bool:
        return feature_id in self._by_id

    def get(self, feature_id: str | None) -> Feature | None:
        if feature_id is None:
            return None
        return self._by_id.get(feature_id)

    def __getitem__(self, feature_id: str) -> Feature:
        return self._by_id[feature_id]

    def previous_of(self, feature: Feature) -> Feature | None:
        return self.get(feature.previous)
