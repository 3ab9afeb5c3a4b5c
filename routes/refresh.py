from fastapi import APIRouter, Depends, HTTPException
from schemas.region_models import RefreshRequest, RefreshResponse
from services.session import MapSession, get_session
from models import TimeWindow
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get('/time-window', response_model=TimeWindow)
async def get_time_window(session: MapSession = Depends(get_session)):
    return session.window


@router.put('/time-window', response_model=RefreshResponse)
async def set_time_window(req: TimeWindow, session: MapSession = Depends(get_session)):
    """
    Cambia la ventana temporal (horas relativas a ahora).

    Fuerza el refresco de todas las regiones con fuente de datos.
    """
    try:
        report = await session.set_time_window(req)
        return RefreshResponse.from_report(report, session)
    except Exception as e:
        logger.error(str(e))
        raise HTTPException(status_code=500, detail=f"Error al refrescar las regiones: {str(e)}")


@router.post('/refresh', response_model=RefreshResponse)
async def refresh(req: RefreshRequest, session: MapSession = Depends(get_session)):
    try:
        report = await session.refresh(force=req.force)
        return RefreshResponse.from_report(report, session)
    except Exception as e:
        logger.error(str(e))
        raise HTTPException(status_code=500, detail=f"Error al refrescar las regiones: {str(e)}")
