from fastapi import APIRouter, HTTPException
from schemas.sampling_models import SamplingPreviewRequest, SamplingPreviewResponse
from services.sampling import plan_sampling
import random

router = APIRouter()


@router.post('/sampling/preview', response_model=SamplingPreviewResponse)
def sampling_preview(req: SamplingPreviewRequest):
    """Devuelve la rejilla de muestreo que se usaría para el polígono, sin consultar datos."""
    if len(req.points) < 3:
        raise HTTPException(status_code=400, detail="El polígono necesita al menos 3 vértices")
    rng = random.Random(req.seed) if req.seed is not None else None
    plan = plan_sampling(req.points, rng=rng)
    return SamplingPreviewResponse(
        area_km2=plan.area_km2,
        resolution=plan.resolution,
        candidate_count=plan.candidate_count,
        points=plan.points,
    )
