import logging
from typing import Mapping

from sunside.errors import AirportNotFoundError
from .airports import AirportCatalog
from .events import (
    DEFAULT_DEDUPE_WINDOW_MIN,
    DEFAULT_EVENT_WINDOW_MIN,
    DEFAULT_MIN_ELEVATION_DEG,
    dedupe_events,
    detect_sun_events,
)
from .sampler import DEFAULT_INTERVAL_MIN, sample_flight_path
from .scoring import build_summary, recommend
from .types import (
    Airport,
    AirportNotFound,
    CalculationResult,
    FlightDetails,
    FlightRecommendation,
    FlightSummary,
    GlobeData,
)

logger = logging.getLogger(__name__)


class FlightSunCalculator:
    """Works out which cabin side sees the sunrise/sunset for a flight.

    The airport table is injected and only read, so one calculator can serve
    concurrent requests. ``calculate`` never raises for unknown airports;
    it returns a result whose ``kind`` is ``"airport_not_found"``.
    """

    def __init__(self, config, airports: Mapping[str, Airport]):
        self._config = config
        self._airports = airports if isinstance(airports, AirportCatalog) else AirportCatalog(airports.values())

    @property
    def airports(self) -> AirportCatalog:
        return self._airports

    def calculate(self, details: FlightDetails) -> CalculationResult:
        try:
            departure = self._lookup(details.departure)
        except AirportNotFoundError as e:
            return _airport_not_found(details, AirportNotFound(code=e.code, role="departure"))
        try:
            arrival = self._lookup(details.arrival)
        except AirportNotFoundError as e:
            return _airport_not_found(details, AirportNotFound(code=e.code, role="arrival"))

        trajectory = sample_flight_path(
            departure,
            arrival,
            details.departure_time_utc,
            details.duration_min,
            interval_min=self._setting("sample_interval_min", DEFAULT_INTERVAL_MIN),
        )
        raw_events = detect_sun_events(
            trajectory.points,
            window_min=self._setting("event_window_min", DEFAULT_EVENT_WINDOW_MIN),
            min_elevation_deg=self._setting("event_min_elevation_deg", DEFAULT_MIN_ELEVATION_DEG),
            horizon_deg=self._setting("horizon_deg", 0.0),
        )
        events = dedupe_events(
            raw_events,
            window_min=self._setting("dedupe_window_min", DEFAULT_DEDUPE_WINDOW_MIN),
        )
        choice = recommend(
            events,
            trajectory.sun_visible_count,
            trajectory.left_side_count,
            trajectory.right_side_count,
        )
        logger.debug(
            "%s -> %s: %s (%.0f%%) from %d event(s)",
            departure.iata,
            arrival.iata,
            choice.side,
            choice.confidence,
            len(events),
        )
        return CalculationResult(
            recommendation=FlightRecommendation(
                recommendation=choice.side,
                confidence=choice.confidence,
                description=choice.description,
                events=tuple(events),
                globe_data=GlobeData(
                    departure=departure,
                    arrival=arrival,
                    flight_path=trajectory.points,
                    total_distance_m=trajectory.total_distance_m,
                    total_duration_min=details.duration_min,
                    summary=build_summary(events, trajectory.points, choice.side),
                ),
            )
        )

    def _lookup(self, code: str) -> Airport:
        return self._airports.lookup(code)

    def _setting(self, name: str, default):
        if self._config is None:
            return default
        value = getattr(self._config, name, None)
        return default if value is None else value


def _airport_not_found(details: FlightDetails, error: AirportNotFound) -> CalculationResult:
    logger.warning("%s airport %s not found", error.role.capitalize(), error.code)
    return CalculationResult(
        recommendation=FlightRecommendation(
            recommendation="either",
            confidence=0.0,
            description=f"Unable to calculate sun position: {error.message}",
            events=(),
            globe_data=GlobeData(
                departure=_unknown_airport(details.departure),
                arrival=_unknown_airport(details.arrival),
                flight_path=(),
                total_distance_m=0.0,
                total_duration_min=details.duration_min,
                summary=FlightSummary(
                    total_sunrise_events=0,
                    total_sunset_events=0,
                    average_sun_visibility=0.0,
                    best_viewing_side="either",
                ),
            ),
        ),
        error=error,
    )


def _unknown_airport(code: str) -> Airport:
    return Airport(iata=code, name="Unknown", latitude_deg=0.0, longitude_deg=0.0)


def calculate_sun_position_for_flight(
    details: FlightDetails,
    airports: Mapping[str, Airport],
    config=None,
) -> CalculationResult:
    return FlightSunCalculator(config, airports).calculate(details)
