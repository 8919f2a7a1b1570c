"""Layout parsing: convert raw dicts/JSON into a LayoutSpec."""

from __future__ import annotations

import json
from pathlib import Path

from .models import FeatureRecord, LayoutError, LayoutSpec


_RECORD_KEYS = {"id", "kind", "previous", "labels", "label"}


def parse_layout(data: dict) -> LayoutSpec:
    """Parse a raw dict into a LayoutSpec.

    Format:
        {"name": "demo",
         "features": [
            {"id": "p1", "kind": "pin", "x": 5000, "y": 5000, "diameter": 400,
             "labels": ["VCC"]},
            {"id": "t1", "kind": "trace", "orientation": "vertical",
             "x": 5000, "y": 5000, "width": 0, "height": 8000, "previous": "p1"},
            {"id": "det", "kind": "detector", "x": 1350, "y": 1350}
         ]}
    """
    errors: list[str] = []
    if not isinstance(data, dict) or not isinstance(data.get("features"), list):
        raise LayoutError(["layout must be an object with a 'features' list"])

    records: list[FeatureRecord] = []
    for i, raw in enumerate(data["features"]):
        if not isinstance(raw, dict):
            errors.append(f"features[{i}]: expected an object")
            continue
        fid = raw.get("id")
        kind = raw.get("kind")
        if not fid:
            errors.append(f"features[{i}]: missing 'id'")
            continue
        if not kind:
            errors.append(f"Feature '{fid}': missing 'kind'")
            continue

        labels = raw.get("labels")
        if labels is None and raw.get("label"):
            labels = [raw["label"]]
        elif isinstance(labels, str):
            labels = [labels]
        elif labels is not None and not isinstance(labels, list):
            errors.append(f"Feature '{fid}': 'labels' must be a list of strings")
            continue

        records.append(FeatureRecord(
            id=str(fid),
            kind=str(kind),
            params={k: v for k, v in raw.items() if k not in _RECORD_KEYS},
            previous=raw.get("previous"),
            labels=[str(s) for s in labels or []],
        ))

    if errors:
        raise LayoutError(errors)
    return LayoutSpec(records=records, name=str(data.get("name", "device")))


def load_layout(path: Path | str) -> LayoutSpec:
    """Read and parse a layout JSON file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise LayoutError([f"Cannot read layout '{path}': {e}"]) from e
    return parse_layout(data)


def layout_to_dict(spec: LayoutSpec) -> dict:
    """Serialize a LayoutSpec back to a JSON-safe dict."""
    features = []
    for r in spec.records:
        entry = {"id": r.id, "kind": r.kind}
        entry.update(r.params)
        if r.previous is not None:
            entry["previous"] = r.previous
        if r.labels:
            entry["labels"] = list(r.labels)
        features.append(entry)
    return {"name": spec.name, "features": features}
