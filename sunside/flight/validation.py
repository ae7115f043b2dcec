"""Request validation performed before the calculator is invoked.

The calculator assumes well-formed input; these checks turn a loosely typed
request payload (JSON body, CLI arguments) into a ``FlightDetails`` or raise
``ValidationError`` listing every problem found.
"""

import datetime
import re

from sunside.errors import ValidationError
from .types import FlightDetails

MIN_DURATION_MIN = 30
MAX_DURATION_MIN = 20 * 60
MAX_PAST = datetime.timedelta(days=1)
MAX_FUTURE = datetime.timedelta(days=365)

_IATA_RE = re.compile(r"^[A-Z]{3}$")
_MINUTES_RE = re.compile(r"^(\d+)\s*(?:minutes?|mins?|m)?$")
_HOURS_RE = re.compile(r"^(\d+)\s*(?:hours?|hrs?|h)$")
_HOURS_MINUTES_RE = re.compile(r"^(\d+)\s*(?:hours?|hrs?|h)\s*(\d+)\s*(?:minutes?|mins?|m)$")
_COLON_RE = re.compile(r"^(\d+):(\d{1,2})$")


def validate_iata_code(code, field_name: str) -> str | None:
    if not code or not isinstance(code, str):
        return f"{field_name} is required and must be a string"
    trimmed = code.strip().upper()
    if len(trimmed) != 3:
        return f"{field_name} must be exactly 3 characters (e.g., LAX, JFK)"
    if not _IATA_RE.match(trimmed):
        return f"{field_name} must contain only letters (e.g., LAX, JFK)"
    return None


def parse_utc_datetime(value: str) -> datetime.datetime:
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    dt = datetime.datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    return dt.astimezone(datetime.timezone.utc)


def validate_departure_time(
    value,
    now: datetime.datetime | None = None,
    max_past: datetime.timedelta = MAX_PAST,
    max_future: datetime.timedelta = MAX_FUTURE,
) -> tuple[str | None, datetime.datetime | None]:
    example = "(e.g., 2024-01-15T14:30:00Z)"
    if not value or not isinstance(value, str):
        return f"Departure time is required and must be a valid ISO string {example}", None
    try:
        dt = parse_utc_datetime(value)
    except ValueError:
        return f"Departure time must be a valid ISO string {example}", None
    now = now or datetime.datetime.now(datetime.timezone.utc)
    if dt < now - max_past:
        return f"Departure time cannot be more than {max_past.days} day(s) in the past", None
    if dt > now + max_future:
        return f"Departure time cannot be more than {max_future.days} days in the future", None
    return None, dt


def validate_duration(
    duration,
    min_minutes: int = MIN_DURATION_MIN,
    max_minutes: int = MAX_DURATION_MIN,
) -> str | None:
    if duration is None:
        return "Flight duration is required"
    if isinstance(duration, bool) or not isinstance(duration, (int, float)) or duration != duration:
        return "Flight duration must be a valid number (in minutes)"
    if duration <= 0:
        return "Flight duration must be greater than 0 minutes"
    if duration > max_minutes:
        return f"Flight duration cannot exceed {max_minutes} minutes"
    if duration < min_minutes:
        return f"Flight duration must be at least {min_minutes} minutes"
    if duration != int(duration):
        return "Flight duration must be a whole number of minutes"
    return None


def validate_request(payload: dict, now: datetime.datetime | None = None, config=None) -> FlightDetails:
    errors: list[str] = []
    departure = payload.get("departure")
    arrival = payload.get("arrival")

    for code, label in ((departure, "Departure airport"), (arrival, "Arrival airport")):
        message = validate_iata_code(code, label)
        if message:
            errors.append(message)

    if (
        isinstance(departure, str)
        and isinstance(arrival, str)
        and departure.strip()
        and departure.strip().upper() == arrival.strip().upper()
    ):
        errors.append("Departure and arrival airports must be different")

    if config is not None:
        max_past = datetime.timedelta(days=config.max_past_days)
        max_future = datetime.timedelta(days=config.max_future_days)
        min_minutes, max_minutes = config.min_duration_min, config.max_duration_min
    else:
        max_past, max_future = MAX_PAST, MAX_FUTURE
        min_minutes, max_minutes = MIN_DURATION_MIN, MAX_DURATION_MIN

    time_error, departure_time = validate_departure_time(
        payload.get("departureTime"), now=now, max_past=max_past, max_future=max_future
    )
    if time_error:
        errors.append(time_error)

    duration = payload.get("durationMinutes")
    duration_error = validate_duration(duration, min_minutes=min_minutes, max_minutes=max_minutes)
    if duration_error:
        errors.append(duration_error)

    if errors:
        raise ValidationError(errors)

    return FlightDetails(
        departure=departure.strip().upper(),
        arrival=arrival.strip().upper(),
        departure_time_utc=departure_time,
        duration_min=int(duration),
    )


def parse_duration_minutes(text: str) -> int | None:
    """Parse "150", "150m", "150 minutes", "2h", "2h 30m" or "2:30" into minutes."""
    if not text or not isinstance(text, str):
        return None
    value = text.strip().lower()
    m = _MINUTES_RE.match(value)
    if m:
        return int(m.group(1))
    m = _HOURS_RE.match(value)
    if m:
        return int(m.group(1)) * 60
    m = _HOURS_MINUTES_RE.match(value)
    if m:
        return int(m.group(1)) * 60 + int(m.group(2))
    m = _COLON_RE.match(value)
    if m:
        return int(m.group(1)) * 60 + int(m.group(2))
    return None
