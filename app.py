import logging
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from config import LOG_LEVEL, OPEN_METEO_URL, FETCH_BATCH_SIZE, FETCH_TIMEOUT_S
from routes.root import router as root_router
from routes.regions import router as regions_router
from routes.rules import router as rules_router
from routes.refresh import router as refresh_router
from routes.sampling import router as sampling_router
from routes.series import router as series_router

load_dotenv()

app = FastAPI(title="Regional Weather API")
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])


@app.on_event("startup")
def _startup():
    logging.basicConfig(level=getattr(logging, LOG_LEVEL.upper(), logging.INFO))
    logging.getLogger(__name__).info(
        "Remote source %s (batch %d, timeout %.0fs)", OPEN_METEO_URL, FETCH_BATCH_SIZE, FETCH_TIMEOUT_S
    )


# Registrar routers (las rutas están en /routes)
app.include_router(root_router)
app.include_router(regions_router)
app.include_router(rules_router)
app.include_router(refresh_router)
app.include_router(sampling_router)
app.include_router(series_router)
