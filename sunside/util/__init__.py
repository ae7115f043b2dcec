from .format import (
    compass_point,
    deg_to_dms,
    format_bearing,
    format_duration,
    format_latlon,
    format_utc,
)

__all__ = [
    "compass_point",
    "deg_to_dms",
    "format_bearing",
    "format_duration",
    "format_latlon",
    "format_utc",
]
