"""Tests for provider payload mapping and error handling."""

from datetime import date, timedelta
from unittest.mock import patch

import pytest
import requests

from conftest import mock_response
from flighttracker.models import FlightStatus
from flighttracker.services.providers import (
    AeroDataBoxProvider,
    AirLabsProvider,
    AviationStackProvider,
    ProviderError,
    normalize_flight_number,
)
from flighttracker.services.providers.base import delay_minutes, localize, parse_datetime

GET = 'flighttracker.services.providers.base.requests.get'


AERODATABOX_ROW = {
    'number': 'AA 123',
    'status': 'Expected',
    'airline': {'name': 'American Airlines', 'iata': 'AA'},
    'departure': {
        'airport': {'iata': 'JFK', 'timeZone': 'America/New_York'},
        'scheduledTime': {'utc': '2025-11-21 13:00Z', 'local': '2025-11-21 08:00-05:00'},
        'terminal': '8',
        'gate': 'B32',
    },
    'arrival': {
        'airport': {'iata': 'LHR', 'timeZone': 'Europe/London'},
        'scheduledTime': {'utc': '2025-11-21 20:00Z', 'local': '2025-11-21 20:00+00:00'},
        'terminal': '3',
        'baggageBelt': '5',
    },
}

AIRLABS_ROW = {
    'flight_iata': 'AF1234',
    'airline_iata': 'AF',
    'dep_iata': 'CDG',
    'dep_terminal': '2F',
    'dep_gate': 'F21',
    'dep_time': '2025-11-21 14:00',
    'dep_time_utc': '2025-11-21 13:00',
    'arr_iata': 'ZZZ',
    'arr_time': '2025-11-21 15:10',
    'arr_time_utc': '2025-11-21 14:10',
    'arr_baggage': '12',
    'status': 'en-route',
}

AVIATIONSTACK_ROW = {
    'flight_status': 'landed',
    'flight': {'iata': 'BA456'},
    'airline': {'name': 'British Airways'},
    'departure': {
        'iata': 'LHR', 'timezone': 'Europe/London',
        'scheduled': '2025-11-21T10:00:00+00:00', 'estimated': '2025-11-21T10:20:00+00:00',
        'terminal': '5', 'gate': 'A22', 'delay': 20,
    },
    'arrival': {
        'iata': 'JFK', 'timezone': 'America/New_York',
        'scheduled': '2025-11-21T13:00:00-05:00', 'baggage': '4',
    },
}


class TestHelpers:
    def test_normalize_flight_number(self):
        assert normalize_flight_number(' aa  123 ') == 'AA123'
        assert normalize_flight_number(None) == ''

    def test_parse_datetime_space_separator(self):
        dt = parse_datetime('2025-11-21 08:00-05:00')
        assert dt.isoformat() == '2025-11-21T08:00:00-05:00'

    def test_parse_datetime_zulu(self):
        assert parse_datetime('2025-11-21T13:00:00Z').utcoffset() == timedelta(0)

    def test_parse_datetime_garbage(self):
        assert parse_datetime('soon') is None
        assert parse_datetime(None) is None

    def test_localize_derives_offset(self):
        dt = localize('2025-11-21 08:00', '2025-11-21 13:00')
        assert dt.utcoffset() == timedelta(hours=-5)

    def test_localize_without_utc_stays_naive(self):
        assert localize('2025-11-21 08:00', None).tzinfo is None

    def test_delay_minutes(self):
        scheduled = parse_datetime('2025-11-21T08:00:00-05:00')
        revised = parse_datetime('2025-11-21T08:45:00-05:00')
        assert delay_minutes(scheduled, revised) == 45
        assert delay_minutes(revised, scheduled) == 0
        assert delay_minutes(scheduled, None) == 0


class TestAeroDataBoxProvider:
    def test_maps_row_to_flight(self):
        provider = AeroDataBoxProvider(api_key='k', include_next_day=False)
        with patch(GET, return_value=mock_response([AERODATABOX_ROW])):
            flights = provider.lookup('AA123', date(2025, 11, 21))

        assert len(flights) == 1
        flight = flights[0]
        assert flight.flight_number == 'AA123'
        assert flight.airline == 'American Airlines'
        assert flight.status == FlightStatus.ON_TIME
        assert flight.origin.code == 'JFK'
        assert flight.origin.city == 'New York'
        assert flight.origin.latitude == pytest.approx(40.6413)
        assert flight.origin.timezone == 'America/New_York'
        assert flight.origin.gate == 'B32'
        assert flight.destination.baggage == '5'
        assert flight.origin.time.isoformat() == '2025-11-21T08:00:00-05:00'

    def test_request_url_and_headers(self):
        provider = AeroDataBoxProvider(api_key='secret', host='adb.example', include_next_day=False)
        with patch(GET, return_value=mock_response([])) as mock_get:
            provider.lookup('AA123', date(2025, 11, 21))

        args, kwargs = mock_get.call_args
        assert args[0] == 'https://adb.example/flights/number/AA123/2025-11-21'
        assert kwargs['headers']['X-RapidAPI-Key'] == 'secret'
        assert kwargs['timeout'] == provider.timeout

    def test_revised_time_sets_delay_and_status(self):
        row = dict(AERODATABOX_ROW)
        row['departure'] = dict(row['departure'], revisedTime={'local': '2025-11-21 08:40-05:00'})
        provider = AeroDataBoxProvider(api_key='k', include_next_day=False)
        with patch(GET, return_value=mock_response([row])):
            flight = provider.lookup('AA123', date(2025, 11, 21))[0]

        assert flight.delay == 40
        assert flight.status == FlightStatus.DELAYED
        assert flight.origin.time.minute == 40
        assert flight.id == 'AA123-2025-11-21T08:00:00-05:00'

    def test_legacy_flat_time_fields(self):
        row = {
            'number': 'AA 123',
            'status': 'Arrived',
            'departure': {'airport': {'iata': 'JFK'}, 'scheduledTimeLocal': '2025-11-21 08:00-05:00'},
            'arrival': {'airport': {'iata': 'LHR'}},
        }
        provider = AeroDataBoxProvider(api_key='k', include_next_day=False)
        with patch(GET, return_value=mock_response([row])):
            flight = provider.lookup('AA123', date(2025, 11, 21))[0]

        assert flight.status == FlightStatus.LANDED
        assert flight.origin.time.hour == 8

    def test_unknown_status_maps_to_scheduled(self):
        row = dict(AERODATABOX_ROW, status='Unknown')
        provider = AeroDataBoxProvider(api_key='k', include_next_day=False)
        with patch(GET, return_value=mock_response([row])):
            assert provider.lookup('AA123', date(2025, 11, 21))[0].status == FlightStatus.SCHEDULED

    def test_no_content_is_empty(self):
        provider = AeroDataBoxProvider(api_key='k', include_next_day=False)
        with patch(GET, return_value=mock_response(None, status_code=204)):
            assert provider.lookup('AA123', date(2025, 11, 21)) == []

    def test_error_message_raises(self):
        provider = AeroDataBoxProvider(api_key='k', include_next_day=False)
        with patch(GET, return_value=mock_response({'message': 'You are not subscribed'})):
            with pytest.raises(ProviderError):
                provider.lookup('AA123', date(2025, 11, 21))

    def test_http_error_raises(self):
        provider = AeroDataBoxProvider(api_key='k', include_next_day=False)
        with patch(GET, return_value=mock_response({'message': 'Too many'}, status_code=429)):
            with pytest.raises(ProviderError):
                provider.lookup('AA123', date(2025, 11, 21))

    def test_today_also_fetches_tomorrow(self):
        today = date.today()
        provider = AeroDataBoxProvider(api_key='k')
        with patch(GET, return_value=mock_response([AERODATABOX_ROW])) as mock_get:
            flights = provider.lookup('AA123', today)

        urls = sorted(call.args[0] for call in mock_get.call_args_list)
        assert len(urls) == 2
        assert urls[0].endswith(today.isoformat())
        assert urls[1].endswith((today + timedelta(days=1)).isoformat())
        assert len(flights) == 2

    def test_one_failing_day_keeps_the_other(self):
        today = date.today()
        tomorrow = (today + timedelta(days=1)).isoformat()

        def fake_get(url, **kwargs):
            if url.endswith(tomorrow):
                raise requests.Timeout('slow')
            return mock_response([AERODATABOX_ROW])

        provider = AeroDataBoxProvider(api_key='k')
        with patch(GET, side_effect=fake_get):
            flights = provider.lookup('AA123', today)

        assert len(flights) == 1

    def test_both_days_failing_raises(self):
        provider = AeroDataBoxProvider(api_key='k')
        with patch(GET, side_effect=requests.ConnectionError('down')):
            with pytest.raises(requests.ConnectionError):
                provider.lookup('AA123', date.today())


class TestAirLabsProvider:
    def test_only_serves_today(self):
        provider = AirLabsProvider(api_key='k')
        today = date(2025, 11, 21)
        assert provider.supports_date(today, today)
        assert not provider.supports_date(today + timedelta(days=1), today)

    def test_maps_row_to_flight(self):
        provider = AirLabsProvider(api_key='k')
        with patch(GET, return_value=mock_response({'response': AIRLABS_ROW})):
            flights = provider.lookup('AF1234', date(2025, 11, 21))

        flight = flights[0]
        assert flight.flight_number == 'AF1234'
        assert flight.airline == 'AF'
        assert flight.status == FlightStatus.IN_AIR
        assert flight.origin.city == 'Paris'
        assert flight.origin.time.isoformat() == '2025-11-21T14:00:00+01:00'
        assert flight.origin.timezone == 'UTC+01:00'
        assert flight.origin.terminal == '2F'
        assert flight.destination.baggage == '12'

    def test_unknown_airport_defaults(self):
        provider = AirLabsProvider(api_key='k')
        with patch(GET, return_value=mock_response({'response': AIRLABS_ROW})):
            destination = provider.lookup('AF1234', date(2025, 11, 21))[0].destination

        assert (destination.latitude, destination.longitude) == (0.0, 0.0)
        assert destination.city == 'ZZZ'

    def test_scheduled_with_delay_is_delayed(self):
        row = dict(AIRLABS_ROW, status='scheduled', dep_delayed=25)
        provider = AirLabsProvider(api_key='k')
        with patch(GET, return_value=mock_response({'response': row})):
            flight = provider.lookup('AF1234', date(2025, 11, 21))[0]

        assert flight.delay == 25
        assert flight.status == FlightStatus.DELAYED

    def test_error_payload_raises(self):
        provider = AirLabsProvider(api_key='k')
        payload = {'error': {'message': 'Month limit exceeded', 'code': 'month_limit_exceeded'}}
        with patch(GET, return_value=mock_response(payload)):
            with pytest.raises(ProviderError) as exc:
                provider.lookup('AF1234', date(2025, 11, 21))
        assert exc.value.code == 'month_limit_exceeded'

    def test_schedules_returns_raw_rows(self):
        rows = [{'flight_iata': 'AF1234', 'dep_time': '2025-11-21 14:00'},
                {'flight_iata': 'AF1234', 'dep_time': '2025-11-22 14:00'}]
        provider = AirLabsProvider(api_key='k', base_url='https://airlabs.example')
        with patch(GET, return_value=mock_response({'response': rows})) as mock_get:
            assert provider.schedules('AF1234') == rows

        assert mock_get.call_args.args[0] == 'https://airlabs.example/schedules'
        assert mock_get.call_args.kwargs['params']['flight_iata'] == 'AF1234'

    def test_schedules_single_object_wrapped(self):
        provider = AirLabsProvider(api_key='k')
        with patch(GET, return_value=mock_response({'response': {'flight_iata': 'AF1'}})):
            assert provider.schedules('AF1') == [{'flight_iata': 'AF1'}]


class TestAviationStackProvider:
    def test_maps_row_to_flight(self):
        provider = AviationStackProvider(api_key='k')
        with patch(GET, return_value=mock_response({'data': [AVIATIONSTACK_ROW]})):
            flight = provider.lookup('BA456', date(2025, 11, 21))[0]

        assert flight.flight_number == 'BA456'
        assert flight.airline == 'British Airways'
        assert flight.status == FlightStatus.LANDED
        assert flight.delay == 20
        assert flight.origin.time.minute == 20
        assert flight.origin.timezone == 'Europe/London'
        assert flight.destination.baggage == '4'

    def test_error_payload_raises(self):
        provider = AviationStackProvider(api_key='k')
        payload = {'error': {'code': 'usage_limit_reached', 'message': 'Your monthly usage limit has been reached.'}}
        with patch(GET, return_value=mock_response(payload)):
            with pytest.raises(ProviderError):
                provider.lookup('BA456', date(2025, 11, 21))

    def test_empty_data(self):
        provider = AviationStackProvider(api_key='k')
        with patch(GET, return_value=mock_response({'data': []})):
            assert provider.lookup('BA456', date(2025, 11, 21)) == []

    def test_not_configured_without_key(self):
        with patch('flighttracker.services.providers.aviationstack.config') as mock_config:
            mock_config.aviationstack.api_key = None
            mock_config.aviationstack.base_url = 'http://x'
            assert not AviationStackProvider().is_configured
