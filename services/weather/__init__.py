from .open_meteo import OpenMeteoClient, HourlySeries, window_to_dates, hourly_averages

__all__ = ["OpenMeteoClient", "HourlySeries", "window_to_dates", "hourly_averages"]
