from .airports import AirportCatalog, load_airports, resolve_airport_code
from .calculator import FlightSunCalculator, calculate_sun_position_for_flight
from .types import (
    Airport,
    AirportNotFound,
    CalculationResult,
    FlightDetails,
    FlightPathPoint,
    FlightRecommendation,
    GeoPoint,
    SunEvent,
)

__all__ = [
    "AirportCatalog",
    "load_airports",
    "resolve_airport_code",
    "FlightSunCalculator",
    "calculate_sun_position_for_flight",
    "Airport",
    "AirportNotFound",
    "CalculationResult",
    "FlightDetails",
    "FlightPathPoint",
    "FlightRecommendation",
    "GeoPoint",
    "SunEvent",
]
