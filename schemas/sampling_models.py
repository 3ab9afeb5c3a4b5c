from pydantic import BaseModel, Field
from typing import List, Optional
from models import LatLng, TimeWindow


class SamplingPreviewRequest(BaseModel):
    points: List[LatLng]
    seed: Optional[int] = None  # fija los offsets aleatorios para resoluciones > 3


class SamplingPreviewResponse(BaseModel):
    area_km2: float
    resolution: int
    candidate_count: int  # resolution * resolution
    points: List[LatLng]


class SeriesRequest(BaseModel):
    """Serie horaria para un punto concreto."""
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    data_source: str
    time_window: Optional[TimeWindow] = None  # por defecto la ventana de la sesión


class SeriesResponse(BaseModel):
    data_source: str
    value: Optional[float] = None  # promedio en la ventana
    hourly_averages: List[float]
    labels: List[str]  # "YYYY-MM-DD HH:00"
