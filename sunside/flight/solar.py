import datetime
import math

from .types import SunPosition, SunTimes

J2000_JD = 2451545.0
_J2000_EPOCH = datetime.datetime(2000, 1, 1, 12, 0, tzinfo=datetime.timezone.utc)
# Mean solar noon at lon 0 lags the J2000 epoch by this many days.
_J0 = 0.0009


def _as_utc(dt: datetime.datetime) -> datetime.datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=datetime.timezone.utc)
    return dt.astimezone(datetime.timezone.utc)


def _to_julian_date(dt: datetime.datetime) -> float:
    dt = _as_utc(dt)
    year = dt.year
    month = dt.month
    seconds = dt.second + dt.microsecond / 1e6
    day = dt.day + (dt.hour + (dt.minute + seconds / 60.0) / 60.0) / 24.0
    if month <= 2:
        year -= 1
        month += 12
    a = math.floor(year / 100)
    b = 2 - a + math.floor(a / 4)
    jd = math.floor(365.25 * (year + 4716)) + math.floor(30.6001 * (month + 1)) + day + b - 1524.5
    return jd


def _from_julian_date(jd: float) -> datetime.datetime:
    return _J2000_EPOCH + datetime.timedelta(days=jd - J2000_JD)


def days_since_j2000(dt: datetime.datetime) -> float:
    return _to_julian_date(dt) - J2000_JD


def _normalize_angle_rad(angle: float) -> float:
    return angle % (2.0 * math.pi)


def _gmst_rad(dt: datetime.datetime) -> float:
    d = days_since_j2000(dt)
    gmst_hours = 18.697374558 + 24.06570982441908 * d
    gmst_rad = math.radians((gmst_hours % 24.0) * 15.0)
    return _normalize_angle_rad(gmst_rad)


def local_sidereal_time_rad(dt: datetime.datetime, longitude_deg: float) -> float:
    return _normalize_angle_rad(_gmst_rad(dt) + math.radians(longitude_deg))


def _sun_ecliptic(n: float) -> tuple[float, float, float]:
    """Mean anomaly, ecliptic longitude and obliquity (radians) ``n`` days after J2000."""
    g = math.radians((357.528 + 0.9856003 * n) % 360.0)
    l = math.radians((280.460 + 0.9856474 * n) % 360.0)
    lam = l + math.radians(1.915) * math.sin(g) + math.radians(0.020) * math.sin(2 * g)
    eps = math.radians(23.439 - 0.0000004 * n)
    return g, lam, eps


def sun_ra_dec_rad(dt: datetime.datetime) -> tuple[float, float]:
    _, lam, eps = _sun_ecliptic(days_since_j2000(dt))
    ra = math.atan2(math.cos(eps) * math.sin(lam), math.cos(lam))
    dec = math.asin(math.sin(eps) * math.sin(lam))
    return _normalize_angle_rad(ra), dec


def ra_dec_to_alt_az(
    ra_rad: float,
    dec_rad: float,
    lat_rad: float,
    lon_deg: float,
    dt: datetime.datetime,
) -> tuple[float, float]:
    """Altitude and azimuth in radians; azimuth clockwise from north."""
    lst = local_sidereal_time_rad(dt, lon_deg)
    ha = _normalize_angle_rad(lst - ra_rad)
    sin_alt = math.sin(dec_rad) * math.sin(lat_rad) + math.cos(dec_rad) * math.cos(lat_rad) * math.cos(ha)
    alt = math.asin(max(-1.0, min(1.0, sin_alt)))
    az = math.atan2(
        -math.sin(ha) * math.cos(dec_rad),
        math.sin(dec_rad) * math.cos(lat_rad) - math.sin(lat_rad) * math.cos(dec_rad) * math.cos(ha),
    )
    az = _normalize_angle_rad(az)
    return alt, az


def sun_position(dt: datetime.datetime, lat_deg: float, lon_deg: float) -> SunPosition:
    ra, dec = sun_ra_dec_rad(dt)
    alt, az = ra_dec_to_alt_az(ra, dec, math.radians(lat_deg), lon_deg, dt)
    return SunPosition(azimuth_deg=math.degrees(az), elevation_deg=math.degrees(alt))


def sun_times(
    dt: datetime.datetime,
    lat_deg: float,
    lon_deg: float,
    horizon_deg: float = 0.0,
) -> SunTimes:
    """Sunrise and sunset around the solar transit nearest to ``dt``.

    Sunrise/sunset are the instants the centre of the sun crosses
    ``horizon_deg``. Where it does not cross on that solar day the instants
    are ``None`` and ``polar`` says whether the sun stays up or down.
    """
    n = days_since_j2000(dt)
    cycle = round(n - _J0 + lon_deg / 360.0)
    mean_noon = _J0 - lon_deg / 360.0 + cycle
    g, lam, eps = _sun_ecliptic(mean_noon)
    # equation of time
    transit = mean_noon + 0.0053 * math.sin(g) - 0.0069 * math.sin(2 * lam)
    dec = math.asin(math.sin(eps) * math.sin(lam))
    solar_noon = _from_julian_date(J2000_JD + transit)

    lat_rad = math.radians(lat_deg)
    denom = math.cos(lat_rad) * math.cos(dec)
    if denom == 0.0:
        polar = "day" if lat_deg * dec > 0 else "night"
        return SunTimes(sunrise_utc=None, sunset_utc=None, solar_noon_utc=solar_noon, polar=polar)
    cos_ha = (math.sin(math.radians(horizon_deg)) - math.sin(lat_rad) * math.sin(dec)) / denom
    if cos_ha < -1.0:
        return SunTimes(sunrise_utc=None, sunset_utc=None, solar_noon_utc=solar_noon, polar="day")
    if cos_ha > 1.0:
        return SunTimes(sunrise_utc=None, sunset_utc=None, solar_noon_utc=solar_noon, polar="night")

    half_day = math.acos(cos_ha) / (2.0 * math.pi)
    return SunTimes(
        sunrise_utc=_from_julian_date(J2000_JD + transit - half_day),
        sunset_utc=_from_julian_date(J2000_JD + transit + half_day),
        solar_noon_utc=solar_noon,
    )
