import os
from dotenv import load_dotenv

# Load .env so the remote endpoint and fetch limits can be configured there
load_dotenv()

# Central place for simple configuration values used across modules
OPEN_METEO_URL = os.getenv("OPEN_METEO_URL", "https://api.open-meteo.com/v1/forecast")

# Per-point request bound (seconds) and batching toward the remote service
FETCH_TIMEOUT_S = float(os.getenv("FETCH_TIMEOUT_S", "15"))
FETCH_BATCH_SIZE = int(os.getenv("FETCH_BATCH_SIZE", "3"))
FETCH_BATCH_PAUSE_S = float(os.getenv("FETCH_BATCH_PAUSE_S", "0.1"))

# Color used when no threshold rule matches
DEFAULT_COLOR = os.getenv("DEFAULT_COLOR", "#3388ff")

# Hourly fields offered to the map sidebar, comma separated
DATA_SOURCES = [s.strip() for s in os.getenv("DATA_SOURCES", "temperature_2m,relativehumidity_2m").split(",") if s.strip()]

# Initial time window, in hours from now
DEFAULT_WINDOW_START_H = float(os.getenv("DEFAULT_WINDOW_START_H", "0"))
DEFAULT_WINDOW_END_H = float(os.getenv("DEFAULT_WINDOW_END_H", "168"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
