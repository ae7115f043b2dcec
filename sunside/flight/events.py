import datetime
import logging
from typing import Sequence

from .solar import sun_times
from .types import FlightPathPoint, SunEvent

logger = logging.getLogger(__name__)

DEFAULT_EVENT_WINDOW_MIN = 15.0
DEFAULT_DEDUPE_WINDOW_MIN = 10.0
DEFAULT_MIN_ELEVATION_DEG = -5.0


def _within(a: datetime.datetime | None, b: datetime.datetime, window: datetime.timedelta) -> bool:
    if a is None:
        return False
    return abs(a - b) < window


def detect_sun_events(
    points: Sequence[FlightPathPoint],
    window_min: float = DEFAULT_EVENT_WINDOW_MIN,
    min_elevation_deg: float = DEFAULT_MIN_ELEVATION_DEG,
    horizon_deg: float = 0.0,
) -> list[SunEvent]:
    """Raw sunrise/sunset events: sunlit samples close to the local sunrise or sunset."""
    window = datetime.timedelta(minutes=window_min)
    events: list[SunEvent] = []
    for point in points:
        if not point.sun.visible or point.viewing_side is None:
            continue
        if point.sun.elevation_deg <= min_elevation_deg:
            continue
        times = sun_times(
            point.time_utc,
            point.location.lat_deg,
            point.location.lon_deg,
            horizon_deg=horizon_deg,
        )
        near_sunrise = _within(times.sunrise_utc, point.time_utc, window)
        near_sunset = _within(times.sunset_utc, point.time_utc, window)
        if not (near_sunrise or near_sunset):
            continue
        events.append(
            SunEvent(
                type="sunrise" if near_sunrise else "sunset",
                time_utc=point.time_utc,
                location=point.location,
                sun_azimuth_deg=point.sun.azimuth_deg,
                aircraft_bearing_deg=point.aircraft_bearing_deg,
                viewing_side=point.viewing_side,
                elevation_deg=point.sun.elevation_deg,
            )
        )
    return events


def dedupe_events(
    events: Sequence[SunEvent],
    window_min: float = DEFAULT_DEDUPE_WINDOW_MIN,
) -> list[SunEvent]:
    """Collapse clustered events of one type, keeping the first in scan order.

    An event survives only if no earlier raw event of the same type lies
    strictly within ``window_min`` of it, so a run of samples 5 minutes apart
    reduces to its first member.
    """
    window = datetime.timedelta(minutes=window_min)
    unique: list[SunEvent] = []
    for idx, event in enumerate(events):
        if any(
            prior.type == event.type and abs(prior.time_utc - event.time_utc) < window
            for prior in events[:idx]
        ):
            continue
        unique.append(event)
    if len(unique) != len(events):
        logger.debug("Collapsed %d raw events into %d", len(events), len(unique))
    return unique
