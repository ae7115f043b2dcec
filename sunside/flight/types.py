from dataclasses import dataclass
import datetime
from typing import Literal, Optional, Sequence

Side = Literal["left", "right"]
SideChoice = Literal["left", "right", "either"]
EventType = Literal["sunrise", "sunset"]


@dataclass(frozen=True)
class GeoPoint:
    lat_deg: float
    lon_deg: float


@dataclass(frozen=True)
class Airport:
    iata: str
    name: str
    latitude_deg: float
    longitude_deg: float
    city: str | None = None
    country: str | None = None

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.latitude_deg, self.longitude_deg)


@dataclass(frozen=True)
class FlightDetails:
    departure: str
    arrival: str
    departure_time_utc: datetime.datetime
    duration_min: int

    def __post_init__(self):
        if self.duration_min <= 0:
            raise ValueError("Flight duration must be greater than 0 minutes")


@dataclass(frozen=True)
class SunPosition:
    azimuth_deg: float  # clockwise from true north
    elevation_deg: float

    @property
    def visible(self) -> bool:
        return self.elevation_deg > 0.0


@dataclass(frozen=True)
class SunTimes:
    sunrise_utc: datetime.datetime | None
    sunset_utc: datetime.datetime | None
    solar_noon_utc: datetime.datetime
    polar: Literal["day", "night"] | None = None


@dataclass(frozen=True)
class FlightPathPoint:
    time_utc: datetime.datetime
    location: GeoPoint
    progress: float
    sun: SunPosition
    aircraft_bearing_deg: float | None
    viewing_side: Side | None = None


@dataclass(frozen=True)
class SunEvent:
    type: EventType
    time_utc: datetime.datetime
    location: GeoPoint
    sun_azimuth_deg: float
    aircraft_bearing_deg: float
    viewing_side: Side
    elevation_deg: float


@dataclass(frozen=True)
class Trajectory:
    points: tuple[FlightPathPoint, ...]
    total_distance_m: float
    bearing_deg: float | None
    sun_visible_count: int
    left_side_count: int
    right_side_count: int


@dataclass(frozen=True)
class FlightSummary:
    total_sunrise_events: int
    total_sunset_events: int
    average_sun_visibility: float  # percent of samples with the sun up
    best_viewing_side: SideChoice


@dataclass(frozen=True)
class GlobeData:
    departure: Airport
    arrival: Airport
    flight_path: Sequence[FlightPathPoint]
    total_distance_m: float
    total_duration_min: int
    summary: FlightSummary


@dataclass(frozen=True)
class FlightRecommendation:
    recommendation: SideChoice
    confidence: float
    description: str
    events: Sequence[SunEvent]
    globe_data: GlobeData


@dataclass(frozen=True)
class AirportNotFound:
    code: str
    role: Literal["departure", "arrival"]

    @property
    def message(self) -> str:
        return f"Airport not found: {self.code}"


@dataclass(frozen=True)
class CalculationResult:
    recommendation: FlightRecommendation
    error: Optional[AirportNotFound] = None

    @property
    def kind(self) -> Literal["ok", "airport_not_found"]:
        return "ok" if self.error is None else "airport_not_found"

    @property
    def ok(self) -> bool:
        return self.error is None
