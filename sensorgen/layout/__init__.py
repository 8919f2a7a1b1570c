"""Layout: the device specification boundary.

Submodules:
  models        FeatureRecord, LayoutSpec, Layout collection, LayoutError.
  parsing       JSON conversion (parse_layout, load_layout, layout_to_dict).
  builder       Construct, link and register areas (build_layout).
"""

from .models import FeatureRecord, LayoutSpec, Layout, LayoutError
from .parsing import parse_layout, load_layout, layout_to_dict
from .builder import construct_features, link_features, build_layout

__all__ = [
    # Models
    "FeatureRecord", "LayoutSpec", "Layout", "LayoutError",
    # Parsing
    "parse_layout", "load_layout", "layout_to_dict",
    # Builder
    "construct_features", "link_features", "build_layout",
]
