import datetime
from typing import Tuple

_COMPASS_POINTS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)


def _split_dms(angle_deg: float, precision: int) -> Tuple[int, int, int, float]:
    sign = -1 if angle_deg < 0 else 1
    a = abs(angle_deg)
    total_seconds = round(a * 3600.0, precision)
    deg = int(total_seconds // 3600)
    rem = total_seconds - deg * 3600
    minutes = int(rem // 60)
    seconds = rem - minutes * 60
    return sign, deg, minutes, seconds


def deg_to_dms(deg: float, precision: int = 0) -> str:
    _, d, m, s = _split_dms(deg, precision)
    width = 2 + (precision + 1 if precision else 0)
    s_fmt = f"{s:0{width}.{precision}f}"
    return f"{d}°{m:02d}'{s_fmt}\""


def format_latlon(lat_deg: float, lon_deg: float, style: str = "deg", precision: int = 2) -> str:
    ns = "N" if lat_deg >= 0 else "S"
    ew = "E" if lon_deg >= 0 else "W"
    if style == "deg":
        return f"{abs(lat_deg):.{precision}f}°{ns}, {abs(lon_deg):.{precision}f}°{ew}"
    if style == "dms":
        return f"{deg_to_dms(abs(lat_deg))}{ns}, {deg_to_dms(abs(lon_deg))}{ew}"
    raise ValueError(f"Unknown coordinate style: {style}")


def compass_point(bearing_deg: float) -> str:
    idx = int(((bearing_deg % 360.0) + 11.25) // 22.5) % 16
    return _COMPASS_POINTS[idx]


def format_bearing(bearing_deg: float | None, precision: int = 0) -> str:
    if bearing_deg is None:
        return "undefined"
    return f"{bearing_deg % 360.0:.{precision}f}° ({compass_point(bearing_deg)})"


def format_utc(dt: datetime.datetime | None, short: bool = False) -> str:
    if dt is None:
        return "--"
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    dt = dt.astimezone(datetime.timezone.utc)
    if short:
        return dt.strftime("%H:%M")
    return dt.strftime("%Y-%m-%d %H:%M") + " UTC"


def format_duration(minutes: float) -> str:
    total = int(round(minutes))
    hours, mins = divmod(total, 60)
    if hours and mins:
        return f"{hours}h {mins:02d}m"
    if hours:
        return f"{hours}h"
    return f"{mins}m"
