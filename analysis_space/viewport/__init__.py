"""
Viewport Layer

Pan/zoom transform math, culling, hit testing and pointer gestures.
"""

from .engine import CulledView, ViewportEngine, segment_distance
from .gestures import GestureController, WheelEvent

__all__ = [
    'CulledView', 'ViewportEngine', 'segment_distance',
    'GestureController', 'WheelEvent',
]
