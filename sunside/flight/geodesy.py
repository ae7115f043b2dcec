"""Spherical-Earth geodesy. Bearings are degrees clockwise from true north."""

import math

from .types import GeoPoint

EARTH_RADIUS_M = 6371008.8
# haversine loses precision near pi; ~6 m on the ground
_ANTIPODAL_TOLERANCE_RAD = 1e-6


def _normalize_bearing_deg(bearing: float) -> float:
    return bearing % 360.0


def _normalize_lon_deg(lon: float) -> float:
    return (lon + 540.0) % 360.0 - 180.0


def angular_distance_rad(a: GeoPoint, b: GeoPoint) -> float:
    lat1 = math.radians(a.lat_deg)
    lat2 = math.radians(b.lat_deg)
    dlat = lat2 - lat1
    dlon = math.radians(b.lon_deg - a.lon_deg)
    h = math.sin(dlat / 2.0) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2.0) ** 2
    return 2.0 * math.atan2(math.sqrt(h), math.sqrt(max(0.0, 1.0 - h)))


def distance_m(a: GeoPoint, b: GeoPoint) -> float:
    return EARTH_RADIUS_M * angular_distance_rad(a, b)


def is_antipodal(a: GeoPoint, b: GeoPoint) -> bool:
    return math.pi - angular_distance_rad(a, b) < _ANTIPODAL_TOLERANCE_RAD


def initial_bearing_deg(a: GeoPoint, b: GeoPoint) -> float:
    lat1 = math.radians(a.lat_deg)
    lat2 = math.radians(b.lat_deg)
    dlon = math.radians(b.lon_deg - a.lon_deg)
    y = math.sin(dlon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dlon)
    return _normalize_bearing_deg(math.degrees(math.atan2(y, x)))


def _mercator_lat_diff(lat1: float, lat2: float) -> float:
    return math.log(math.tan(math.pi / 4.0 + lat2 / 2.0) / math.tan(math.pi / 4.0 + lat1 / 2.0))


def _shortest_dlon_rad(lon1_deg: float, lon2_deg: float) -> float:
    dlon = math.radians(lon2_deg - lon1_deg)
    if abs(dlon) > math.pi:
        dlon = -(2.0 * math.pi - dlon) if dlon > 0 else 2.0 * math.pi + dlon
    return dlon


def rhumb_bearing_deg(a: GeoPoint, b: GeoPoint) -> float:
    """Constant compass heading of the rhumb line from ``a`` to ``b``.

    Used as the aircraft heading for the whole flight. Real great-circle
    routes change heading en route; a single heading keeps the left/right
    classification stable along the flight.
    """
    lat1 = math.radians(a.lat_deg)
    lat2 = math.radians(b.lat_deg)
    dpsi = _mercator_lat_diff(lat1, lat2)
    dlon = _shortest_dlon_rad(a.lon_deg, b.lon_deg)
    return _normalize_bearing_deg(math.degrees(math.atan2(dlon, dpsi)))


def rhumb_distance_m(a: GeoPoint, b: GeoPoint) -> float:
    lat1 = math.radians(a.lat_deg)
    lat2 = math.radians(b.lat_deg)
    dlat = lat2 - lat1
    dpsi = _mercator_lat_diff(lat1, lat2)
    # E-W lines have dpsi == 0
    q = dlat / dpsi if abs(dpsi) > 1e-12 else math.cos(lat1)
    dlon = _shortest_dlon_rad(a.lon_deg, b.lon_deg)
    return EARTH_RADIUS_M * math.sqrt(dlat * dlat + q * q * dlon * dlon)


def destination_point(origin: GeoPoint, distance: float, bearing_deg: float) -> GeoPoint:
    """Point reached after ``distance`` metres along a great circle."""
    if distance == 0:
        return origin
    delta = distance / EARTH_RADIUS_M
    theta = math.radians(bearing_deg)
    lat1 = math.radians(origin.lat_deg)
    lon1 = math.radians(origin.lon_deg)
    sin_lat2 = math.sin(lat1) * math.cos(delta) + math.cos(lat1) * math.sin(delta) * math.cos(theta)
    lat2 = math.asin(max(-1.0, min(1.0, sin_lat2)))
    lon2 = lon1 + math.atan2(
        math.sin(theta) * math.sin(delta) * math.cos(lat1),
        math.cos(delta) - math.sin(lat1) * sin_lat2,
    )
    return GeoPoint(math.degrees(lat2), _normalize_lon_deg(math.degrees(lon2)))


def rhumb_destination_point(origin: GeoPoint, distance: float, bearing_deg: float) -> GeoPoint:
    if distance == 0:
        return origin
    delta = distance / EARTH_RADIUS_M
    theta = math.radians(bearing_deg)
    lat1 = math.radians(origin.lat_deg)
    dlat = delta * math.cos(theta)
    lat2 = lat1 + dlat
    # past a pole
    if abs(lat2) > math.pi / 2.0:
        lat2 = math.pi - lat2 if lat2 > 0 else -math.pi - lat2
    dpsi = _mercator_lat_diff(lat1, lat2)
    q = dlat / dpsi if abs(dpsi) > 1e-12 else math.cos(lat1)
    dlon = delta * math.sin(theta) / q
    lon2 = origin.lon_deg + math.degrees(dlon)
    return GeoPoint(math.degrees(lat2), _normalize_lon_deg(lon2))
