#!/usr/bin/env python3
"""Build sunside/data/airports.csv from an airports JSON dump or OpenFlights airports.dat.

JSON input is ``{"airports": [{"iata", "name", "latitude", "longitude", ...}]}``.
"""
import csv
import json
import sys
from pathlib import Path
from urllib.request import Request, urlopen

DEFAULT_SOURCE = "https://raw.githubusercontent.com/jpatokal/openflights/master/data/airports.dat"
FIELDS = ["iata", "name", "city", "country", "latitude", "longitude"]


def main() -> int:
    out_path = Path("sunside/data/airports.csv")
    out_path.parent.mkdir(parents=True, exist_ok=True)
    source = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_SOURCE
    raw = _read_source(source)
    rows = _parse_json(raw) if raw.lstrip().startswith("{") else _parse_openflights(raw)
    if not rows:
        print("No airport rows parsed.", file=sys.stderr)
        return 1
    rows = _dedupe(rows)
    with open(out_path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDS)
        writer.writeheader()
        for row in sorted(rows, key=lambda r: r["iata"]):
            writer.writerow(row)
    print(f"Wrote {len(rows)} rows to {out_path}")
    return 0


def _read_source(source: str) -> str:
    if source.startswith("http://") or source.startswith("https://"):
        req = Request(source, headers={"User-Agent": "sunside/0.1"})
        return urlopen(req).read().decode("utf-8")
    path = Path(source)
    return path.read_text(encoding="utf-8")


def _parse_json(raw: str) -> list[dict]:
    rows = []
    for item in json.loads(raw).get("airports", []):
        code = (item.get("iata") or "").strip().upper()
        if len(code) != 3:
            continue
        rows.append(
            {
                "iata": code,
                "name": item.get("name", "").strip(),
                "city": (item.get("city") or "").strip(),
                "country": (item.get("country") or "").strip(),
                "latitude": float(item["latitude"]),
                "longitude": float(item["longitude"]),
            }
        )
    return rows


def _parse_openflights(raw: str) -> list[dict]:
    # id,name,city,country,IATA,ICAO,lat,lon,...
    rows = []
    for rec in csv.reader(raw.splitlines()):
        if len(rec) < 8:
            continue
        code = rec[4].strip().upper()
        if len(code) != 3 or code == "\\N":
            continue
        try:
            lat, lon = float(rec[6]), float(rec[7])
        except ValueError:
            continue
        rows.append(
            {
                "iata": code,
                "name": rec[1].strip(),
                "city": rec[2].strip(),
                "country": rec[3].strip(),
                "latitude": lat,
                "longitude": lon,
            }
        )
    return rows


def _dedupe(rows: list[dict]) -> list[dict]:
    seen = {}
    for row in rows:
        seen.setdefault(row["iata"], row)
    return list(seen.values())


if __name__ == "__main__":
    sys.exit(main())
