"""
Open-Meteo point-query client.

One request per (lat, lng): GET /v1/forecast with ``latitude``,
``longitude``, inclusive ``start_date``/``end_date`` and ``hourly=<field>``.
The response carries ``hourly.<field>`` (numbers, nulls allowed) and a
parallel ``hourly.time`` list of ISO-8601 timestamps.

Failures of any kind (HTTP status, network, timeout, malformed body, no data)
surface as ``None`` so one bad point never affects its siblings.
"""
from __future__ import annotations

import asyncio
import datetime
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import requests

from config import FETCH_TIMEOUT_S, OPEN_METEO_URL
from models import TimeWindow
from utils_pkg import format_date, hours_to_datetime, parse_timestamp

logger = logging.getLogger(__name__)

_HEADERS = {
    "User-Agent": "regional-weather-api",
    "Accept": "application/json",
}

# Without a window the client averages the last week
DEFAULT_LOOKBACK_DAYS = 7


@dataclass
class HourlySeries:
    """Raw hourly values for one point and field."""
    data_source: str
    values: List[Optional[float]] = field(default_factory=list)
    times: List[str] = field(default_factory=list)


def window_to_dates(window: Optional[TimeWindow], now: Optional[datetime.datetime] = None) -> Tuple[str, str]:
    """Inclusive (start_date, end_date) strings for the request."""
    if now is None:
        now = datetime.datetime.now(datetime.timezone.utc)
    if window is None:
        return format_date(now - datetime.timedelta(days=DEFAULT_LOOKBACK_DAYS)), format_date(now)
    start, end = window.normalized()
    return format_date(hours_to_datetime(start, now)), format_date(hours_to_datetime(end, now))


def _in_window(series: HourlySeries, window: TimeWindow, now: datetime.datetime):
    start, end = window.normalized()
    start_dt = hours_to_datetime(start, now)
    end_dt = hours_to_datetime(end, now)
    for value, ts in zip(series.values, series.times):
        if value is None:
            continue
        dt = parse_timestamp(ts)
        if start_dt <= dt <= end_dt:
            yield dt, float(value)


def average_in_window(series: HourlySeries, window: Optional[TimeWindow],
                      now: Optional[datetime.datetime] = None) -> Optional[float]:
    """Mean of the non-null values inside the window, rounded to 1 decimal."""
    if now is None:
        now = datetime.datetime.now(datetime.timezone.utc)
    if window is None:
        values = [float(v) for v in series.values if v is not None]
    else:
        values = [v for _, v in _in_window(series, window, now)]
    if not values:
        return None
    return round(sum(values) / len(values), 1)


def hourly_averages(series: HourlySeries, window: TimeWindow,
                    now: Optional[datetime.datetime] = None) -> Tuple[List[float], List[str]]:
    """Group in-window values by hour.

    Returns (averages, labels) sorted by hour, labels formatted
    ``YYYY-MM-DD HH:00``.
    """
    if now is None:
        now = datetime.datetime.now(datetime.timezone.utc)
    buckets = {}
    for dt, value in _in_window(series, window, now):
        key = dt.strftime('%Y-%m-%d %H')
        buckets.setdefault(key, []).append(value)

    averages: List[float] = []
    labels: List[str] = []
    for key in sorted(buckets):
        vals = buckets[key]
        averages.append(round(sum(vals) / len(vals), 1))
        labels.append(f"{key}:00")
    return averages, labels


class OpenMeteoClient:
    """Blocking ``requests`` client exposed through awaitable wrappers."""

    def __init__(self, base_url: str = OPEN_METEO_URL, timeout: float = FETCH_TIMEOUT_S,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def get_hourly(self, lat: float, lng: float, data_source: str,
                   window: Optional[TimeWindow] = None,
                   now: Optional[datetime.datetime] = None) -> Optional[HourlySeries]:
        start_date, end_date = window_to_dates(window, now)
        params = {
            "latitude": lat,
            "longitude": lng,
            "start_date": start_date,
            "end_date": end_date,
            "hourly": data_source,
        }
        try:
            resp = self.session.get(self.base_url, params=params, headers=_HEADERS, timeout=self.timeout)
            if resp.status_code != 200:
                logger.debug("Open-Meteo (%.4f, %.4f): HTTP %d", lat, lng, resp.status_code)
                return None
            data = resp.json()
            hourly = data.get("hourly") or {}
            values = hourly.get(data_source)
            times = hourly.get("time")
            if not values or not times:
                logger.debug("Open-Meteo (%.4f, %.4f): no %s data", lat, lng, data_source)
                return None
            return HourlySeries(data_source=data_source, values=list(values), times=list(times))
        except requests.RequestException as exc:
            logger.warning("Open-Meteo (%.4f, %.4f): network error: %s", lat, lng, exc)
            return None
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("Open-Meteo (%.4f, %.4f): parse error: %s", lat, lng, exc)
            return None

    def get_value(self, lat: float, lng: float, data_source: str,
                  window: Optional[TimeWindow] = None,
                  now: Optional[datetime.datetime] = None) -> Optional[float]:
        if now is None:
            now = datetime.datetime.now(datetime.timezone.utc)
        series = self.get_hourly(lat, lng, data_source, window, now)
        if series is None:
            return None
        try:
            return average_in_window(series, window, now)
        except (ValueError, TypeError) as exc:
            logger.warning("Open-Meteo (%.4f, %.4f): bad timestamps: %s", lat, lng, exc)
            return None

    async def fetch_hourly(self, lat: float, lng: float, data_source: str,
                           window: Optional[TimeWindow] = None) -> Optional[HourlySeries]:
        return await asyncio.to_thread(self.get_hourly, lat, lng, data_source, window)

    async def fetch_value(self, lat: float, lng: float, data_source: str,
                          window: Optional[TimeWindow] = None) -> Optional[float]:
        return await asyncio.to_thread(self.get_value, lat, lng, data_source, window)
