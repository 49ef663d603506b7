"""Grid exports."""

from .flood_fill import flood_fill, reachable_count
from .geometry import GridSpec

__all__ = [
    "GridSpec",
    "flood_fill",
    "reachable_count",
]
