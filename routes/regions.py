from fastapi import APIRouter, Depends, HTTPException
from schemas.region_models import RegionCreateRequest, RegionUpdateRequest, RefreshResponse
from services.session import MapSession, RegionNotFound, get_session
from models import Region
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get('/regions')
async def list_regions(session: MapSession = Depends(get_session)):
    regions = session.store.list()
    return {'count': len(regions), 'regions': regions}


@router.post('/regions', response_model=RefreshResponse, status_code=201)
async def create_region(req: RegionCreateRequest, session: MapSession = Depends(get_session)):
    """
    Registra un polígono dibujado en el mapa.

    Si trae data_source se lanza el ciclo de refresco para las regiones sin valor.
    """
    try:
        report = await session.add_region(req.points, data_source=req.data_source, region_id=req.id)
        return RefreshResponse.from_report(report, session)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(str(e))
        raise HTTPException(status_code=500, detail=f"Error al crear la región: {str(e)}")


@router.get('/regions/{region_id}', response_model=Region)
async def get_region(region_id: str, session: MapSession = Depends(get_session)):
    try:
        return session.store.get(region_id)
    except RegionNotFound:
        raise HTTPException(status_code=404, detail='region not found')


@router.put('/regions/{region_id}', response_model=RefreshResponse)
async def update_region(region_id: str, req: RegionUpdateRequest, session: MapSession = Depends(get_session)):
    """Cambia geometría o fuente de datos. Una geometría nueva invalida el valor."""
    try:
        report = await session.update_region(region_id, points=req.points, data_source=req.data_source)
        return RefreshResponse.from_report(report, session)
    except RegionNotFound:
        raise HTTPException(status_code=404, detail='region not found')
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(str(e))
        raise HTTPException(status_code=500, detail=f"Error al actualizar la región: {str(e)}")


@router.delete('/regions/{region_id}')
async def delete_region(region_id: str, session: MapSession = Depends(get_session)):
    try:
        session.delete_region(region_id)
        return {'deleted': region_id}
    except RegionNotFound:
        raise HTTPException(status_code=404, detail='region not found')
