import datetime
import json
import logging
import sys
from pathlib import Path

from sunside.config import load_config
from sunside.errors import AirportNotFoundError, ConfigError, DataError, ValidationError
from sunside.flight import (
    FlightSunCalculator,
    load_airports,
    resolve_airport_code,
)
from sunside.flight.formatters import format_text, iso_utc, result_to_wire
from sunside.flight.geodesy import rhumb_bearing_deg, rhumb_destination_point, rhumb_distance_m
from sunside.flight.solar import sun_position, sun_times
from sunside.flight.validation import parse_duration_minutes, parse_utc_datetime, validate_request
from sunside.util.format import format_bearing, format_latlon, format_utc


def _json_envelope(command: str, ok: bool, data=None, error=None) -> dict:
    return {
        "ok": ok,
        "command": command,
        "timestamp_utc": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "data": data,
        "error": error,
    }


def _print_json(payload: dict) -> None:
    print(json.dumps(payload, indent=2))


def _init_logging(level: str | None) -> None:
    if not level:
        return
    level_map = {
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "warn": logging.WARNING,
        "error": logging.ERROR,
    }
    logging.basicConfig(level=level_map.get(level, logging.INFO))


def _config_path_from_args(args) -> Path | None:
    if args is None:
        return None
    path = getattr(args, "config", None)
    return Path(path) if path else None


def _setup(args):
    config = load_config(_config_path_from_args(args))
    _init_logging(getattr(args, "log_level", None) or config.log_level)
    return config


def _load_catalog(args, config):
    path = getattr(args, "airports", None)
    return load_airports(Path(path) if path else config.airports_path)


def _fail(command: str, args, code: str, message: str, exit_code: int, details=None) -> int:
    if getattr(args, "json", False):
        _print_json(
            _json_envelope(
                command=command,
                ok=False,
                error={"code": code, "message": message, "details": details},
            )
        )
    else:
        print(message, file=sys.stderr)
    return exit_code


def _flight_payload(args) -> dict:
    duration = parse_duration_minutes(args.duration)
    return {
        "departure": resolve_airport_code(args.departure),
        "arrival": resolve_airport_code(args.arrival),
        "departureTime": args.depart,
        # unparseable strings fall through to validation as-is
        "durationMinutes": duration if duration is not None else args.duration,
    }


def _validated_details(args, config):
    now = None
    if getattr(args, "any_time", False):
        try:
            now = parse_utc_datetime(args.depart)
        except (TypeError, ValueError):
            now = None
    return validate_request(_flight_payload(args), now=now, config=config)


def run_recommend(args) -> int:
    try:
        config = _setup(args)
        catalog = _load_catalog(args, config)
        details = _validated_details(args, config)
    except ValidationError as e:
        return _fail("recommend", args, "validation_failed", "Validation failed", 2, details=e.messages)
    except (ConfigError, DataError, FileNotFoundError) as e:
        return _fail("recommend", args, "setup_failed", str(e), 1)

    result = FlightSunCalculator(config, catalog).calculate(details)

    if getattr(args, "json", False):
        wire = result_to_wire(result)
        _print_json(
            _json_envelope(
                command="recommend",
                ok=result.ok,
                data=wire["data"],
                error=None
                if result.ok
                else {"code": "airport_not_found", "message": result.error.message, "details": wire["error"]},
            )
        )
    elif result.ok:
        print(format_text(result.recommendation, verbose=getattr(args, "verbose", False)))
    else:
        print(result.recommendation.description, file=sys.stderr)
    return 0 if result.ok else 1


def run_sun(args) -> int:
    _setup(args)
    try:
        when = parse_utc_datetime(args.time) if args.time else datetime.datetime.now(datetime.timezone.utc)
    except ValueError as e:
        return _fail("sun", args, "validation_failed", f"Invalid time: {e}", 2)
    if not -90.0 <= args.lat <= 90.0 or not -180.0 <= args.lon <= 180.0:
        return _fail("sun", args, "validation_failed", "Latitude/longitude out of range", 2)

    pos = sun_position(when, args.lat, args.lon)
    times = sun_times(when, args.lat, args.lon, horizon_deg=args.horizon)
    if getattr(args, "json", False):
        _print_json(
            _json_envelope(
                command="sun",
                ok=True,
                data={
                    "time": iso_utc(when),
                    "location": {"lat": args.lat, "lon": args.lon},
                    "azimuth": pos.azimuth_deg,
                    "elevation": pos.elevation_deg,
                    "visible": pos.visible,
                    "sunrise": iso_utc(times.sunrise_utc) if times.sunrise_utc else None,
                    "sunset": iso_utc(times.sunset_utc) if times.sunset_utc else None,
                    "solarNoon": iso_utc(times.solar_noon_utc),
                    "polar": times.polar,
                },
            )
        )
        return 0

    print(f"Time:      {format_utc(when)}")
    print(f"Location:  {format_latlon(args.lat, args.lon)}")
    print(f"Azimuth:   {format_bearing(pos.azimuth_deg, precision=1)}")
    print(f"Elevation: {pos.elevation_deg:+.1f}° ({'above' if pos.visible else 'below'} horizon)")
    if times.polar:
        print(f"Polar {times.polar}: no sunrise or sunset")
    else:
        print(f"Sunrise:   {format_utc(times.sunrise_utc)}")
        print(f"Sunset:    {format_utc(times.sunset_utc)}")
    print(f"Solar noon: {format_utc(times.solar_noon_utc)}")
    return 0


def run_airports(args) -> int:
    try:
        config = _setup(args)
        catalog = _load_catalog(args, config)
    except (ConfigError, DataError, FileNotFoundError) as e:
        return _fail("airports", args, "setup_failed", str(e), 1)

    codes = [c.strip().upper() for c in (args.codes or [])]
    try:
        airports = [catalog.lookup(code) for code in codes] if codes else [catalog[c] for c in sorted(catalog)]
    except AirportNotFoundError as e:
        return _fail("airports", args, "airport_not_found", str(e), 1, details={"code": e.code})

    if getattr(args, "json", False):
        data = [
            {
                "iata": a.iata,
                "name": a.name,
                "city": a.city,
                "country": a.country,
                "latitude": a.latitude_deg,
                "longitude": a.longitude_deg,
            }
            for a in airports
        ]
        _print_json(_json_envelope(command="airports", ok=True, data=data))
        return 0
    for a in airports:
        print(f"{a.iata}  {format_latlon(a.latitude_deg, a.longitude_deg):<24}  {a.name}")
    return 0


def run_plot(args) -> int:
    try:
        config = _setup(args)
        catalog = _load_catalog(args, config)
        details = _validated_details(args, config)
    except ValidationError as e:
        return _fail("plot", args, "validation_failed", "; ".join(e.messages), 2)
    except (ConfigError, DataError, FileNotFoundError) as e:
        return _fail("plot", args, "setup_failed", str(e), 1)

    result = FlightSunCalculator(config, catalog).calculate(details)
    if not result.ok:
        return _fail("plot", args, "airport_not_found", result.recommendation.description, 1)

    import matplotlib

    if args.out:
        matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    rec = result.recommendation
    globe = rec.globe_data
    path = globe.flight_path
    fig, (ax_map, ax_sun) = plt.subplots(2, 1, figsize=(10, 8))

    lons = [p.location.lon_deg for p in path]
    lats = [p.location.lat_deg for p in path]
    colors = ["gold" if p.sun.visible else "midnightblue" for p in path]
    ax_map.scatter(lons, lats, c=colors, s=12, zorder=3)
    ax_map.plot(lons, lats, color="grey", linewidth=0.8, label="great circle")

    start, end = globe.departure.point, globe.arrival.point
    heading = rhumb_bearing_deg(start, end)
    rhumb_total = rhumb_distance_m(start, end)
    rhumb = [rhumb_destination_point(start, rhumb_total * i / 50, heading) for i in range(51)]
    ax_map.plot(
        [p.lon_deg for p in rhumb],
        [p.lat_deg for p in rhumb],
        color="grey",
        linestyle="--",
        linewidth=0.8,
        label=f"heading {format_bearing(heading)}",
    )
    for airport in (globe.departure, globe.arrival):
        ax_map.annotate(airport.iata, (airport.longitude_deg, airport.latitude_deg))
    for event in rec.events:
        ax_map.scatter([event.location.lon_deg], [event.location.lat_deg], marker="*", s=120, color="orangered", zorder=4)
    ax_map.set_xlabel("Longitude (°)")
    ax_map.set_ylabel("Latitude (°)")
    ax_map.legend(loc="best")
    ax_map.set_title(f"{globe.departure.iata} → {globe.arrival.iata}: {rec.recommendation.upper()} ({rec.confidence:.0f}%)")

    minutes = [(p.time_utc - path[0].time_utc).total_seconds() / 60.0 for p in path]
    ax_sun.plot(minutes, [p.sun.elevation_deg for p in path], color="darkorange")
    ax_sun.axhline(0.0, color="black", linewidth=0.6)
    for event in rec.events:
        offset = (event.time_utc - path[0].time_utc).total_seconds() / 60.0
        ax_sun.axvline(offset, color="orangered", linestyle=":")
        ax_sun.annotate(f"{event.type} ({event.viewing_side})", (offset, event.elevation_deg))
    ax_sun.set_xlabel("Minutes after departure")
    ax_sun.set_ylabel("Sun elevation (°)")
    fig.tight_layout()

    if args.out:
        fig.savefig(args.out)
        print(f"Wrote {args.out}")
    else:
        plt.show()
    plt.close(fig)
    return 0


def run_doctor(args=None) -> int:
    checks = {}
    config = None
    try:
        config = _setup(args)
        checks["config"] = {"ok": True, "detail": "loaded (defaults applied if missing)"}
    except (ConfigError, FileNotFoundError) as e:
        checks["config"] = {"ok": False, "detail": f"invalid config: {e}"}

    if config is not None:
        try:
            catalog = _load_catalog(args, config)
            checks["airports"] = {"ok": len(catalog) > 0, "detail": f"{len(catalog)} airports"}
        except (DataError, FileNotFoundError) as e:
            checks["airports"] = {"ok": False, "detail": str(e)}
    else:
        checks["airports"] = {"ok": False, "detail": "skipped (no config)"}

    try:
        import matplotlib  # noqa: F401

        checks["matplotlib (plot)"] = {"ok": True, "detail": "available"}
    except ImportError:
        checks["matplotlib (plot)"] = {"ok": False, "detail": "not installed; `plot` unavailable"}

    required = ("config", "airports")
    ok = all(checks[name]["ok"] for name in required)

    if args is not None and getattr(args, "json", False):
        _print_json(
            _json_envelope(
                command="doctor",
                ok=ok,
                data={"checks": checks},
                error=None
                if ok
                else {"code": "doctor_failed", "message": "one or more checks failed", "details": None},
            )
        )
    else:
        print("Sunside Doctor Report")
        print("=====================")
        for name, result in checks.items():
            status = "OK" if result["ok"] else "MISSING"
            print(f"{name:20} : {status} ({result['detail']})")
        print("\nSystem ready." if ok else "\nSome components are missing or not configured.")
    return 0 if ok else 1
