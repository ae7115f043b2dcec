import datetime
import logging
import math

from .geodesy import (
    destination_point,
    distance_m,
    initial_bearing_deg,
    is_antipodal,
    rhumb_bearing_deg,
)
from .solar import sun_position
from .types import Airport, FlightPathPoint, Side, SunPosition, Trajectory

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_MIN = 5


def classify_viewing_side(sun_azimuth_deg: float, bearing_deg: float) -> Side:
    """Cabin side facing the sun for an aircraft flying ``bearing_deg``.

    Azimuths 0-180 degrees clockwise of the nose are on the right; a sun
    dead ahead counts as left.
    """
    diff = (sun_azimuth_deg - bearing_deg) % 360.0
    return "right" if 0.0 < diff < 180.0 else "left"


def sample_flight_path(
    departure: Airport,
    arrival: Airport,
    departure_time_utc: datetime.datetime,
    duration_min: int,
    interval_min: int = DEFAULT_INTERVAL_MIN,
) -> Trajectory:
    if duration_min <= 0:
        raise ValueError("Flight duration must be greater than 0 minutes")
    if interval_min <= 0:
        raise ValueError("Sampling interval must be positive")
    if departure_time_utc.tzinfo is None:
        departure_time_utc = departure_time_utc.replace(tzinfo=datetime.timezone.utc)
    departure_time_utc = departure_time_utc.astimezone(datetime.timezone.utc)

    start = departure.point
    end = arrival.point
    total_distance = distance_m(start, end)
    course_deg = initial_bearing_deg(start, end)
    bearing: float | None = rhumb_bearing_deg(start, end)
    if is_antipodal(start, end):
        logger.warning(
            "%s and %s are antipodal; heading undefined, skipping side classification",
            departure.iata,
            arrival.iata,
        )
        bearing = None

    sample_count = math.ceil(duration_min / interval_min)
    points: list[FlightPathPoint] = []
    visible = left = right = 0
    for i in range(sample_count + 1):
        offset_min = min(i * interval_min, duration_min)
        progress = offset_min / duration_min
        location = destination_point(start, total_distance * progress, course_deg)
        t = departure_time_utc + datetime.timedelta(minutes=offset_min)
        sun: SunPosition = sun_position(t, location.lat_deg, location.lon_deg)

        side: Side | None = None
        if sun.visible:
            visible += 1
            if bearing is not None:
                side = classify_viewing_side(sun.azimuth_deg, bearing)
                if side == "left":
                    left += 1
                else:
                    right += 1

        points.append(
            FlightPathPoint(
                time_utc=t,
                location=location,
                progress=progress,
                sun=sun,
                aircraft_bearing_deg=bearing,
                viewing_side=side,
            )
        )

    logger.debug(
        "Sampled %d points over %.0f km (%d sunlit, %d left, %d right)",
        len(points),
        total_distance / 1000.0,
        visible,
        left,
        right,
    )
    return Trajectory(
        points=tuple(points),
        total_distance_m=total_distance,
        bearing_deg=bearing,
        sun_visible_count=visible,
        left_side_count=left,
        right_side_count=right,
    )
