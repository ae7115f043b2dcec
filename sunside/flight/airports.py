import csv
import logging
import re
from pathlib import Path
from typing import Iterable, Iterator, Mapping

from sunside.errors import AirportNotFoundError, DataError
from .types import Airport

logger = logging.getLogger(__name__)

DEFAULT_AIRPORTS_PATH = Path(__file__).resolve().parents[1] / "data" / "airports.csv"

_IATA_RE = re.compile(r"^[A-Za-z]{3}$")

CITY_TO_IATA = {
    "new york": "JFK",
    "nyc": "JFK",
    "los angeles": "LAX",
    "la": "LAX",
    "chicago": "ORD",
    "miami": "MIA",
    "san francisco": "SFO",
    "sf": "SFO",
    "seattle": "SEA",
    "boston": "BOS",
    "denver": "DEN",
    "atlanta": "ATL",
    "dallas": "DFW",
    "houston": "IAH",
    "washington": "DCA",
    "dc": "DCA",
    "london": "LHR",
    "paris": "CDG",
    "tokyo": "NRT",
    "beijing": "PEK",
    "shanghai": "PVG",
    "hong kong": "HKG",
    "singapore": "SIN",
    "dubai": "DXB",
    "amsterdam": "AMS",
    "frankfurt": "FRA",
    "rome": "FCO",
    "madrid": "MAD",
    "zurich": "ZRH",
    "istanbul": "IST",
    "sydney": "SYD",
    "melbourne": "MEL",
    "toronto": "YYZ",
    "vancouver": "YVR",
    "mexico city": "MEX",
    "sao paulo": "GRU",
    "buenos aires": "EZE",
    "mumbai": "BOM",
    "delhi": "DEL",
    "bangalore": "BLR",
    "bangkok": "BKK",
    "seoul": "ICN",
    "johannesburg": "JNB",
    "reykjavik": "KEF",
    "anchorage": "ANC",
}


class AirportCatalog(Mapping[str, Airport]):
    """Read-only IATA code -> Airport table. Lookups are exact and case-sensitive."""

    def __init__(self, airports: Iterable[Airport]):
        self._by_code: dict[str, Airport] = {}
        for airport in airports:
            if airport.iata in self._by_code:
                raise DataError(f"Duplicate airport code: {airport.iata}")
            self._by_code[airport.iata] = airport

    def __getitem__(self, code: str) -> Airport:
        return self._by_code[code]

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_code)

    def __len__(self) -> int:
        return len(self._by_code)

    def lookup(self, code: str) -> Airport:
        airport = self._by_code.get(code)
        if airport is None:
            raise AirportNotFoundError(code)
        return airport


def load_airports(path: Path | None = None) -> AirportCatalog:
    path = path or DEFAULT_AIRPORTS_PATH
    if not path.exists():
        raise FileNotFoundError(f"Airport dataset not found: {path}")
    airports: list[Airport] = []
    with open(path, "r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for line_no, row in enumerate(reader, start=2):
            try:
                airports.append(
                    Airport(
                        iata=row["iata"].strip().upper(),
                        name=row["name"].strip(),
                        latitude_deg=float(row["latitude"]),
                        longitude_deg=float(row["longitude"]),
                        city=_parse_optional(row.get("city")),
                        country=_parse_optional(row.get("country")),
                    )
                )
            except (KeyError, TypeError, ValueError) as e:
                raise DataError(f"{path}:{line_no}: invalid airport row: {e}") from e
    logger.debug("Loaded %d airports from %s", len(airports), path)
    return AirportCatalog(airports)


def resolve_airport_code(text: str) -> str:
    """Best-effort mapping of a city name or code to an IATA code."""
    city = text.strip().lower()
    if city in CITY_TO_IATA:
        return CITY_TO_IATA[city]
    squashed = city.replace(" ", "")
    for name, code in CITY_TO_IATA.items():
        if name.replace(" ", "") == squashed:
            return code
    if _IATA_RE.match(text.strip()):
        return text.strip().upper()
    return re.sub(r"[^A-Za-z]", "", text)[:3].upper()


def _parse_optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None
