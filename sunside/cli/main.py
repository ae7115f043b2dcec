import argparse
import logging
import sys

from sunside import __version__
from sunside.cli.commands import (
    run_airports,
    run_doctor,
    run_plot,
    run_recommend,
    run_sun,
)

logger = logging.getLogger(__name__)


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", help="Path to config.toml")
    parser.add_argument("--json", action="store_true", help="Output result as JSON")
    parser.add_argument(
        "--log-level",
        choices=("debug", "info", "warn", "error"),
        help="Enable logging at this level",
    )


def _add_flight_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--from", dest="departure", required=True, help="Departure IATA code or city")
    parser.add_argument("--to", dest="arrival", required=True, help="Arrival IATA code or city")
    parser.add_argument("--depart", required=True, help="Departure time, ISO-8601 UTC (e.g. 2024-03-15T08:00:00Z)")
    parser.add_argument("--duration", required=True, help='Flight duration, e.g. "420", "7h", "6h 45m", "6:45"')
    parser.add_argument("--airports", help="Airport dataset CSV (defaults to the bundled one)")
    parser.add_argument(
        "--any-time",
        action="store_true",
        help="Skip the departure time window check (past or far-future flights)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sunside")
    parser.add_argument("--version", action="store_true", help="Show version and exit")

    subparsers = parser.add_subparsers(dest="command")

    doctor_parser = subparsers.add_parser("doctor", help="Check configuration and data")
    _add_common_args(doctor_parser)
    doctor_parser.add_argument("--airports", help="Airport dataset CSV")

    rec_parser = subparsers.add_parser("recommend", help="Recommend a window seat side for a flight")
    _add_common_args(rec_parser)
    _add_flight_args(rec_parser)
    rec_parser.add_argument("--verbose", action="store_true", help="Also list every flight path sample")

    plot_parser = subparsers.add_parser("plot", help="Plot ground track and sun elevation (requires matplotlib)")
    _add_common_args(plot_parser)
    _add_flight_args(plot_parser)
    plot_parser.add_argument("--out", help="Write the figure to this file instead of showing a window")

    sun_parser = subparsers.add_parser("sun", help="Sun position and sunrise/sunset for a place")
    _add_common_args(sun_parser)
    sun_parser.add_argument("--lat", type=float, required=True, help="Latitude (deg, north positive)")
    sun_parser.add_argument("--lon", type=float, required=True, help="Longitude (deg, east positive)")
    sun_parser.add_argument("--time", help="UTC instant (ISO-8601); defaults to now")
    sun_parser.add_argument("--horizon", type=float, default=0.0, help="Horizon altitude for sunrise/sunset (deg)")

    airports_parser = subparsers.add_parser("airports", help="List or look up airports")
    _add_common_args(airports_parser)
    airports_parser.add_argument("codes", nargs="*", help="IATA codes to look up")
    airports_parser.add_argument("--airports", help="Airport dataset CSV")

    return parser


COMMANDS = {
    "doctor": run_doctor,
    "recommend": run_recommend,
    "plot": run_plot,
    "sun": run_sun,
    "airports": run_airports,
}


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"Sunside {__version__}")
        return 0

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 0

    try:
        return handler(args)
    except Exception:
        logger.debug("Unhandled error in %s", args.command, exc_info=True)
        print("An unexpected error occurred while processing your request.", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
