import datetime


def hours_to_datetime(hours, now=None):
    """Convierte un offset en horas (relativo a ``now``) en un datetime UTC."""
    if now is None:
        now = datetime.datetime.now(datetime.timezone.utc)
    return now + datetime.timedelta(hours=hours)


def format_date(dt):
    return dt.strftime('%Y-%m-%d')


def parse_timestamp(s):
    """Parse an ISO-8601 timestamp from the remote API as UTC.

    Open-Meteo returns naive ``YYYY-MM-DDTHH:MM`` strings in GMT.
    """
    dt = datetime.datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    return dt


def utc_now_iso():
    return datetime.datetime.now(datetime.timezone.utc).isoformat()
