"""Tests for the Open-Meteo client using a fake requests session."""

import datetime
import logging

import pytest
import requests

from models import TimeWindow
from services.weather import HourlySeries, OpenMeteoClient, hourly_averages, window_to_dates
from services.weather.open_meteo import average_in_window

NOW = datetime.datetime(2024, 1, 1, 0, 0, tzinfo=datetime.timezone.utc)

PAYLOAD = {
    'hourly': {
        'time': [
            '2023-12-31T20:00', '2023-12-31T21:00', '2023-12-31T22:00',
            '2023-12-31T23:00', '2024-01-01T00:00', '2024-01-01T01:00',
        ],
        'temperature_2m': [100.0, 1.0, None, 2.0, 3.0, 100.0],
    }
}


class FakeResponse:

    def __init__(self, status_code=200, payload=None, bad_json=False):
        self.status_code = status_code
        self._payload = payload
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("Expecting value")
        return self._payload


class FakeSession:

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.requests.append({'url': url, 'params': dict(params), 'timeout': timeout})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def client_factory():
    def make(**kwargs):
        session = FakeSession(**kwargs)
        return OpenMeteoClient(base_url='https://example.test/v1/forecast', timeout=15, session=session), session
    return make


class TestWindowToDates:

    def test_hour_offsets(self):
        assert window_to_dates(TimeWindow(start=-3, end=0), NOW) == ('2023-12-31', '2024-01-01')

    def test_reversed_window_is_normalized(self):
        assert window_to_dates(TimeWindow(start=48, end=-30), NOW) == ('2023-12-30', '2024-01-03')

    def test_default_last_week(self):
        assert window_to_dates(None, NOW) == ('2023-12-25', '2024-01-01')


class TestGetValue:

    def test_average_in_window(self, client_factory):
        client, session = client_factory(response=FakeResponse(payload=PAYLOAD))
        assert client.get_value(40.0, -3.0, 'temperature_2m', TimeWindow(start=-3, end=0), now=NOW) == 2.0
        params = session.requests[0]['params']
        assert params == {
            'latitude': 40.0,
            'longitude': -3.0,
            'start_date': '2023-12-31',
            'end_date': '2024-01-01',
            'hourly': 'temperature_2m',
        }
        assert session.requests[0]['timeout'] == 15

    def test_reversed_window(self, client_factory):
        client, _ = client_factory(response=FakeResponse(payload=PAYLOAD))
        assert client.get_value(40.0, -3.0, 'temperature_2m', TimeWindow(start=0, end=-3), now=NOW) == 2.0

    def test_without_window_averages_everything(self, client_factory):
        client, _ = client_factory(response=FakeResponse(payload=PAYLOAD))
        assert client.get_value(40.0, -3.0, 'temperature_2m', None, now=NOW) == 41.2

    def test_window_without_data(self, client_factory):
        client, _ = client_factory(response=FakeResponse(payload=PAYLOAD))
        assert client.get_value(40.0, -3.0, 'temperature_2m', TimeWindow(start=100, end=200), now=NOW) is None

    @pytest.mark.parametrize("kwargs", [
        {'response': FakeResponse(status_code=500)},
        {'response': FakeResponse(bad_json=True)},
        {'response': FakeResponse(payload={'error': True})},
        {'response': FakeResponse(payload={'hourly': {'time': ['2024-01-01T00:00']}})},
        {'response': FakeResponse(payload={'hourly': {'time': ['nope'], 'temperature_2m': [1.0]}})},
        {'error': requests.ConnectionError("unreachable")},
        {'error': requests.Timeout("slow")},
    ])
    def test_failures_return_none(self, client_factory, kwargs):
        client, _ = client_factory(**kwargs)
        assert client.get_value(40.0, -3.0, 'temperature_2m', TimeWindow(start=-3, end=0), now=NOW) is None

    def test_network_error_is_logged(self, client_factory, caplog):
        client, _ = client_factory(error=requests.ConnectionError("unreachable"))
        with caplog.at_level(logging.WARNING, logger="services.weather.open_meteo"):
            assert client.get_value(40.0, -3.0, 'temperature_2m', None, now=NOW) is None
        assert any("network error" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_async_wrapper(self, client_factory):
        client, _ = client_factory(response=FakeResponse(payload=PAYLOAD))
        assert await client.fetch_value(40.0, -3.0, 'temperature_2m', None) == 41.2
        series = await client.fetch_hourly(40.0, -3.0, 'temperature_2m', None)
        assert series.times == PAYLOAD['hourly']['time']


class TestHourlyAverages:

    def test_groups_by_hour(self):
        series = HourlySeries(
            data_source='temperature_2m',
            values=[1.0, 2.0, 4.0, None, 9.0],
            times=['2023-12-31T22:00', '2023-12-31T22:30', '2023-12-31T23:00', '2023-12-31T23:30', '2024-01-02T00:00'],
        )
        averages, labels = hourly_averages(series, TimeWindow(start=-3, end=0), NOW)
        assert averages == [1.5, 4.0]
        assert labels == ['2023-12-31 22:00', '2023-12-31 23:00']

    def test_average_in_window_rounds(self):
        series = HourlySeries(data_source='t', values=[1.0, 1.26], times=['2024-01-01T00:00'] * 2)
        assert average_in_window(series, TimeWindow(start=-1, end=1), NOW) == 1.1
