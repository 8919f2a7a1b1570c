"""Sensor device generator: trace geometry plus physical properties.

Stages of one generation run:

  layout: parse the device specification and build the feature list
          (construct, link previous-feature keys, register areas)
  features: pin / trace / detector geometry, area, mass and moments
  render: draw every feature once onto a canvas and emit SVG fragments
  reporting: per-feature area lines and the end-of-run summary
"""
