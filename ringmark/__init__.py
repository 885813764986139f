"""Building blocks for detecting concentric-circle fiducial markers."""

__version__ = "0.1.0"

__all__ = [
    "bresenham",
    "cmdline",
    "edgepoint",
    "ellipse_growing",
    "flow_component",
    "markers_bank",
    "simulation",
]