import datetime
import json

from sunside.util.format import (
    format_bearing,
    format_duration,
    format_latlon,
    format_utc,
)
from .types import (
    Airport,
    CalculationResult,
    FlightPathPoint,
    FlightRecommendation,
    GeoPoint,
    SunEvent,
)


def iso_utc(dt: datetime.datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    return dt.astimezone(datetime.timezone.utc).isoformat().replace("+00:00", "Z")


def _location(p: GeoPoint) -> dict:
    return {"lat": p.lat_deg, "lon": p.lon_deg}


def _airport(a: Airport) -> dict:
    return {"iata": a.iata, "name": a.name, "latitude": a.latitude_deg, "longitude": a.longitude_deg}


def _event(e: SunEvent) -> dict:
    return {
        "type": e.type,
        "time": iso_utc(e.time_utc),
        "location": _location(e.location),
        "sunAzimuth": e.sun_azimuth_deg,
        "aircraftBearing": e.aircraft_bearing_deg,
        "viewingSide": e.viewing_side,
        "elevation": e.elevation_deg,
    }


def _path_point(p: FlightPathPoint) -> dict:
    data = {
        "time": iso_utc(p.time_utc),
        "location": _location(p.location),
        "progress": p.progress,
        "sunPosition": {
            "azimuth": p.sun.azimuth_deg,
            "elevation": p.sun.elevation_deg,
            "visible": p.sun.visible,
        },
        "aircraftBearing": p.aircraft_bearing_deg,
    }
    if p.viewing_side is not None:
        data["viewingSide"] = p.viewing_side
    return data


def to_wire(rec: FlightRecommendation) -> dict:
    """JSON-ready dict in the published camelCase shape."""
    globe = rec.globe_data
    return {
        "recommendation": rec.recommendation,
        "confidence": rec.confidence,
        "description": rec.description,
        "events": [_event(e) for e in rec.events],
        "globeData": {
            "departure": _airport(globe.departure),
            "arrival": _airport(globe.arrival),
            "flightPath": [_path_point(p) for p in globe.flight_path],
            "totalDistance": globe.total_distance_m,
            "totalDuration": globe.total_duration_min,
            "summary": {
                "totalSunriseEvents": globe.summary.total_sunrise_events,
                "totalSunsetEvents": globe.summary.total_sunset_events,
                "averageSunVisibility": globe.summary.average_sun_visibility,
                "bestViewingSide": globe.summary.best_viewing_side,
            },
        },
    }


def result_to_wire(result: CalculationResult) -> dict:
    error = None
    if result.error is not None:
        error = {"code": result.error.code, "role": result.error.role, "message": result.error.message}
    return {"kind": result.kind, "data": to_wire(result.recommendation), "error": error}


def format_json(rec: FlightRecommendation) -> str:
    return json.dumps(to_wire(rec), indent=2)


def format_text(rec: FlightRecommendation, verbose: bool = False) -> str:
    globe = rec.globe_data
    lines: list[str] = []
    title = f"{globe.departure.iata} → {globe.arrival.iata}"
    lines.append(title)
    lines.append("=" * len(title))
    lines.append(f"Recommendation: {rec.recommendation.upper()} ({rec.confidence:.0f}% confidence)")
    lines.append(rec.description)
    lines.append("")
    lines.append(f"Distance: {globe.total_distance_m / 1000.0:,.0f} km")
    lines.append(f"Duration: {format_duration(globe.total_duration_min)}")
    if globe.flight_path:
        lines.append(f"Heading: {format_bearing(globe.flight_path[0].aircraft_bearing_deg)}")
    summary = globe.summary
    lines.append(f"Sun above horizon: {summary.average_sun_visibility:.1f}% of the flight")
    lines.append(f"Sunrises: {summary.total_sunrise_events}  Sunsets: {summary.total_sunset_events}")

    if rec.events:
        lines.append("")
        lines.append("Events")
        lines.append("------")
        for idx, event in enumerate(rec.events, start=1):
            where = format_latlon(event.location.lat_deg, event.location.lon_deg)
            lines.append(
                f"{idx:>2}. {event.type:<7} {format_utc(event.time_utc, short=True)} UTC  "
                f"{event.viewing_side:<5}  sun {event.elevation_deg:+.1f}°  {where}"
            )

    if verbose and globe.flight_path:
        lines.append("")
        lines.append("Flight path")
        lines.append("-----------")
        for p in globe.flight_path:
            side = p.viewing_side or "-"
            lines.append(
                f"{p.progress * 100:5.1f}%  {format_utc(p.time_utc, short=True)}  "
                f"{format_latlon(p.location.lat_deg, p.location.lon_deg):<24}  "
                f"az {p.sun.azimuth_deg:5.1f}°  el {p.sun.elevation_deg:+5.1f}°  {side}"
            )
    return "\n".join(lines)
