from pydantic import BaseModel, field_validator
from typing import List, Optional, Tuple

from .region_result import QualityMetadata, RegionResult

MIN_VERTICES = 3
MAX_VERTICES = 12

LatLng = Tuple[float, float]


class Region(BaseModel):
    """A user-drawn polygon under management.

    ``points`` are (lat, lng) pairs forming a ring; the ring does not need to
    be closed explicitly. ``value``, ``label`` and ``metadata`` are either all
    set or all unset.
    """
    id: str
    points: List[LatLng]
    data_source: Optional[str] = None
    value: Optional[float] = None
    color: Optional[str] = None
    label: Optional[str] = None
    metadata: Optional[QualityMetadata] = None

    @field_validator('points')
    @classmethod
    def validate_points(cls, v):
        # Drop an explicit closing vertex before counting
        if len(v) > 1 and tuple(v[0]) == tuple(v[-1]):
            v = v[:-1]
        if not MIN_VERTICES <= len(v) <= MAX_VERTICES:
            raise ValueError(f"Region must have between {MIN_VERTICES} and {MAX_VERTICES} vertices (got {len(v)})")
        for lat, lng in v:
            if not -90.0 <= lat <= 90.0 or not -180.0 <= lng <= 180.0:
                raise ValueError(f"Invalid coordinate: ({lat}, {lng})")
        return v

    @property
    def has_value(self) -> bool:
        return self.value is not None

    def with_result(self, result: RegionResult) -> "Region":
        return self.model_copy(update={
            'value': result.value,
            'label': result.label,
            'metadata': result.metadata,
        })

    def invalidated(self) -> "Region":
        return self.model_copy(update={'value': None, 'label': None, 'metadata': None, 'color': None})
