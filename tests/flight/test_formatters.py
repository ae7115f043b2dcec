import datetime
import json

from sunside.flight import FlightSunCalculator
from sunside.flight.formatters import format_json, format_text, iso_utc, result_to_wire, to_wire
from sunside.flight.types import FlightDetails

UTC = datetime.timezone.utc


def _result(catalog, departure="JFK", when=datetime.datetime(2024, 3, 15, 8, 0, tzinfo=UTC)):
    details = FlightDetails(departure=departure, arrival="LHR", departure_time_utc=when, duration_min=420)
    return FlightSunCalculator(None, catalog).calculate(details)


def test_iso_utc():
    assert iso_utc(datetime.datetime(2024, 3, 15, 8, 0, tzinfo=UTC)) == "2024-03-15T08:00:00Z"
    assert iso_utc(datetime.datetime(2024, 3, 15, 8, 0)) == "2024-03-15T08:00:00Z"
    tz = datetime.timezone(datetime.timedelta(hours=2))
    assert iso_utc(datetime.datetime(2024, 3, 15, 10, 0, tzinfo=tz)) == "2024-03-15T08:00:00Z"


def test_wire_shape(catalog):
    wire = to_wire(_result(catalog).recommendation)
    assert set(wire) == {"recommendation", "confidence", "description", "events", "globeData"}
    globe = wire["globeData"]
    assert set(globe) == {"departure", "arrival", "flightPath", "totalDistance", "totalDuration", "summary"}
    assert globe["departure"] == {
        "iata": "JFK",
        "name": "John F. Kennedy International Airport",
        "latitude": 40.64,
        "longitude": -73.78,
    }
    assert globe["totalDuration"] == 420
    assert set(globe["summary"]) == {
        "totalSunriseEvents",
        "totalSunsetEvents",
        "averageSunVisibility",
        "bestViewingSide",
    }

    event = wire["events"][0]
    assert event["type"] == "sunrise"
    assert event["time"].endswith("Z")
    assert set(event) == {"type", "time", "location", "sunAzimuth", "aircraftBearing", "viewingSide", "elevation"}
    assert set(event["location"]) == {"lat", "lon"}

    first = globe["flightPath"][0]
    assert first["time"] == "2024-03-15T08:00:00Z"
    assert first["progress"] == 0.0
    assert set(first["sunPosition"]) == {"azimuth", "elevation", "visible"}
    # dark at departure, so no side is reported
    assert "viewingSide" not in first
    assert any("viewingSide" in p for p in globe["flightPath"])


def test_format_json_is_valid_json(catalog):
    data = json.loads(format_json(_result(catalog).recommendation))
    assert data["recommendation"] == "right"


def test_result_to_wire_ok(catalog):
    wire = result_to_wire(_result(catalog))
    assert wire["kind"] == "ok"
    assert wire["error"] is None


def test_result_to_wire_airport_not_found(catalog):
    wire = result_to_wire(_result(catalog, departure="XXX"))
    assert wire["kind"] == "airport_not_found"
    assert wire["error"] == {"code": "XXX", "role": "departure", "message": "Airport not found: XXX"}
    assert wire["data"]["confidence"] == 0.0
    assert wire["data"]["globeData"]["departure"]["name"] == "Unknown"


def test_format_text(catalog):
    text = format_text(_result(catalog).recommendation)
    lines = text.splitlines()
    assert lines[0] == "JFK → LHR"
    assert "Recommendation: RIGHT (" in text
    assert "% confidence)" in text
    assert "Distance: 5,5" in text
    assert "Duration: 7h" in text
    assert "Events" in text
    assert "sunrise" in text
    assert "Flight path" not in text


def test_format_text_verbose_lists_every_sample(catalog):
    rec = _result(catalog).recommendation
    text = format_text(rec, verbose=True)
    assert "Flight path" in text
    assert text.count("az ") == len(rec.globe_data.flight_path)
