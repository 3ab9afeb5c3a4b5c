"""Models package exports.

Each model is defined in its own module to make maintenance easier.
"""

from .region import Region, LatLng, MIN_VERTICES, MAX_VERTICES
from .region_result import QualityMetadata, RegionResult
from .threshold_rule import ThresholdRule, Operator
from .time_window import TimeWindow

__all__ = [
    'Region', 'LatLng', 'MIN_VERTICES', 'MAX_VERTICES',
    'QualityMetadata', 'RegionResult', 'ThresholdRule', 'Operator', 'TimeWindow'
]
