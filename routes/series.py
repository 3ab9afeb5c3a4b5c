from fastapi import APIRouter, Depends, HTTPException
from schemas.sampling_models import SeriesRequest, SeriesResponse
from services.session import MapSession, get_session
from services.weather import OpenMeteoClient, hourly_averages
from services.weather.open_meteo import average_in_window
import datetime

router = APIRouter()


def get_weather_client() -> OpenMeteoClient:
    return OpenMeteoClient()


@router.post('/series', response_model=SeriesResponse)
async def get_series(req: SeriesRequest, session: MapSession = Depends(get_session),
                     client: OpenMeteoClient = Depends(get_weather_client)):
    """Promedios horarios de un punto dentro de la ventana temporal."""
    window = req.time_window or session.window
    series = await client.fetch_hourly(req.lat, req.lng, req.data_source, window)
    if series is None:
        raise HTTPException(status_code=404, detail=f"No hay datos de {req.data_source} para ({req.lat}, {req.lng})")
    now = datetime.datetime.now(datetime.timezone.utc)
    try:
        averages, labels = hourly_averages(series, window, now)
        value = average_in_window(series, window, now)
    except (ValueError, TypeError) as e:
        raise HTTPException(status_code=502, detail=f"Respuesta inválida del servicio remoto: {str(e)}")
    return SeriesResponse(data_source=req.data_source, value=value, hourly_averages=averages, labels=labels)
