from pydantic import BaseModel, Field
from typing import List, Optional
from models import Region, LatLng, TimeWindow, RegionResult


class RegionCreateRequest(BaseModel):
    """Polígono dibujado en el mapa.

    points: lista de pares [lat, lng]; no hace falta cerrar el anillo.
    """
    id: Optional[str] = None  # se genera un uuid si no se envía
    points: List[LatLng]
    data_source: Optional[str] = None  # ej. "temperature_2m"


class RegionUpdateRequest(BaseModel):
    points: Optional[List[LatLng]] = None  # nueva geometría invalida el valor calculado
    data_source: Optional[str] = None  # "" quita la fuente de datos


class RefreshRequest(BaseModel):
    force: bool = False


class RegionOutcomeModel(BaseModel):
    region_id: str
    success: bool
    reason: Optional[str] = None
    sample_count: int = 0
    result: Optional[RegionResult] = None


class RefreshResponse(BaseModel):
    """Resultado de un ciclo de refresco y el estado resultante de las regiones"""
    generation: int
    skipped: bool  # True si ya había un ciclo en curso
    outcomes: List[RegionOutcomeModel] = Field(default_factory=list)
    regions: List[Region] = Field(default_factory=list)
    time_window: TimeWindow

    @classmethod
    def from_report(cls, report, session):
        return cls(
            generation=report.generation,
            skipped=report.skipped,
            outcomes=[RegionOutcomeModel(**vars(o)) for o in report.outcomes],
            regions=session.store.list(),
            time_window=session.window,
        )
