from fastapi import APIRouter
from config import DATA_SOURCES

router = APIRouter()


@router.get("/")
def root():
    return {
        "message": "Regional Weather API - muestreo de polígonos y agregación de Open-Meteo",
        "status": "active",
        "docs": "/docs"
    }


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/data-sources")
def data_sources():
    return {"data_sources": DATA_SOURCES}
