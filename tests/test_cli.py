import json

import pytest

from sunside import __version__
from sunside.cli import main as cli_main
from sunside.cli.main import main

FLIGHT = ["--from", "JFK", "--to", "LHR", "--depart", "2024-03-15T08:00:00Z", "--duration", "7h", "--any-time"]


def _json_out(capsys):
    return json.loads(capsys.readouterr().out)


def test_version(capsys):
    assert main(["--version"]) == 0
    assert capsys.readouterr().out.strip() == f"Sunside {__version__}"


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "usage: sunside" in capsys.readouterr().out


def test_recommend_text(capsys):
    assert main(["recommend", *FLIGHT]) == 0
    out = capsys.readouterr().out
    assert out.startswith("JFK → LHR")
    assert "Recommendation: RIGHT" in out


def test_recommend_json(capsys):
    assert main(["recommend", *FLIGHT, "--json"]) == 0
    payload = _json_out(capsys)
    assert payload["ok"] is True
    assert payload["command"] == "recommend"
    assert payload["error"] is None
    assert payload["data"]["recommendation"] == "right"
    assert len(payload["data"]["globeData"]["flightPath"]) == 85


def test_recommend_accepts_city_names(capsys):
    argv = ["recommend", "--from", "New York", "--to", "london", "--depart", "2024-03-15T08:00:00Z"]
    assert main([*argv, "--duration", "420", "--any-time", "--json"]) == 0
    globe = _json_out(capsys)["data"]["globeData"]
    assert globe["departure"]["iata"] == "JFK"
    assert globe["arrival"]["iata"] == "LHR"


def test_recommend_past_departure_fails_validation(capsys):
    argv = ["recommend", "--from", "JFK", "--to", "LHR", "--depart", "2024-03-15T08:00:00Z", "--duration", "420"]
    assert main([*argv, "--json"]) == 2
    payload = _json_out(capsys)
    assert payload["ok"] is False
    assert payload["error"]["code"] == "validation_failed"
    assert any("in the past" in m for m in payload["error"]["details"])


def test_recommend_bad_duration(capsys):
    argv = ["recommend", "--from", "JFK", "--to", "LHR", "--depart", "2024-03-15T08:00:00Z", "--duration", "soon"]
    assert main([*argv, "--any-time", "--json"]) == 2
    details = _json_out(capsys)["error"]["details"]
    assert details == ["Flight duration must be a valid number (in minutes)"]


def test_recommend_unknown_airport(capsys):
    argv = ["recommend", "--from", "JFK", "--to", "XYZ", "--depart", "2024-03-15T08:00:00Z", "--duration", "420"]
    assert main([*argv, "--any-time", "--json"]) == 1
    payload = _json_out(capsys)
    assert payload["ok"] is False
    assert payload["error"]["code"] == "airport_not_found"
    assert payload["error"]["message"] == "Airport not found: XYZ"
    assert payload["data"]["confidence"] == 0.0


def test_recommend_unknown_airport_text(capsys):
    argv = ["recommend", "--from", "XYZ", "--to", "LHR", "--depart", "2024-03-15T08:00:00Z", "--duration", "420"]
    assert main([*argv, "--any-time"]) == 1
    assert "Airport not found: XYZ" in capsys.readouterr().err


def test_recommend_invalid_config(tmp_path, capsys):
    path = tmp_path / "config.toml"
    path.write_text("[sampling\n", encoding="utf-8")
    assert main(["recommend", *FLIGHT, "--config", str(path), "--json"]) == 1
    assert _json_out(capsys)["error"]["code"] == "setup_failed"


def test_recommend_custom_dataset(tmp_path, capsys):
    path = tmp_path / "airports.csv"
    path.write_text(
        "iata,name,latitude,longitude\nAAA,Alpha,10.0,10.0\nBBB,Bravo,12.0,14.0\n",
        encoding="utf-8",
    )
    argv = ["recommend", "--from", "AAA", "--to", "BBB", "--depart", "2024-03-15T08:00:00Z", "--duration", "60"]
    assert main([*argv, "--airports", str(path), "--any-time", "--json"]) == 0
    assert _json_out(capsys)["data"]["globeData"]["arrival"]["name"] == "Bravo"


def test_sun_json(capsys):
    assert main(["sun", "--lat", "51.48", "--lon", "0", "--time", "2024-03-20T12:08:00Z", "--json"]) == 0
    data = _json_out(capsys)["data"]
    assert data["time"] == "2024-03-20T12:08:00Z"
    assert data["azimuth"] == pytest.approx(180.0, abs=3.0)
    assert data["visible"] is True
    assert data["sunrise"].startswith("2024-03-20T06:")
    assert data["sunset"].startswith("2024-03-20T18:")
    assert data["polar"] is None


def test_sun_polar_day(capsys):
    assert main(["sun", "--lat", "80", "--lon", "0", "--time", "2024-06-21T12:00:00Z", "--json"]) == 0
    data = _json_out(capsys)["data"]
    assert data["polar"] == "day"
    assert data["sunrise"] is None


def test_sun_text(capsys):
    assert main(["sun", "--lat", "-33.94", "--lon", "151.18", "--time", "2024-06-21T02:00:00Z"]) == 0
    out = capsys.readouterr().out
    assert "above horizon" in out
    assert "Sunrise:" in out


@pytest.mark.parametrize(
    "argv",
    [
        ["sun", "--lat", "0", "--lon", "0", "--time", "noon"],
        ["sun", "--lat", "95", "--lon", "0", "--time", "2024-06-21T12:00:00Z"],
    ],
)
def test_sun_invalid_input(argv):
    assert main(argv) == 2


def test_airports_lookup(capsys):
    assert main(["airports", "jfk", "LHR", "--json"]) == 0
    data = _json_out(capsys)["data"]
    assert [a["iata"] for a in data] == ["JFK", "LHR"]
    assert data[0]["city"] == "New York"


def test_airports_list(capsys):
    assert main(["airports"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) >= 40
    assert lines == sorted(lines)


def test_airports_unknown(capsys):
    assert main(["airports", "XYZ", "--json"]) == 1
    error = _json_out(capsys)["error"]
    assert error["code"] == "airport_not_found"
    assert error["details"] == {"code": "XYZ"}


def test_doctor(capsys):
    assert main(["doctor", "--json"]) == 0
    checks = _json_out(capsys)["data"]["checks"]
    assert checks["config"]["ok"] is True
    assert checks["airports"]["ok"] is True


def test_doctor_missing_dataset(tmp_path, capsys):
    assert main(["doctor", "--airports", str(tmp_path / "none.csv")]) == 1
    assert "MISSING" in capsys.readouterr().out


def test_plot_writes_file(tmp_path, capsys):
    pytest.importorskip("matplotlib")
    out = tmp_path / "flight.png"
    assert main(["plot", *FLIGHT, "--out", str(out)]) == 0
    assert out.exists()
    assert out.stat().st_size > 0


def test_unexpected_error_is_reported(monkeypatch, capsys):
    def boom(args):
        raise RuntimeError("boom")

    monkeypatch.setitem(cli_main.COMMANDS, "sun", boom)
    assert main(["sun", "--lat", "0", "--lon", "0"]) == 1
    assert "unexpected error" in capsys.readouterr().err


def test_recommend_zero_interval_config(tmp_path, capsys):
    path = tmp_path / "config.toml"
    path.write_text("[sampling]\ninterval_min = 0\n", encoding="utf-8")
    assert main(["recommend", *FLIGHT, "--config", str(path), "--json"]) == 1
    assert _json_out(capsys)["error"]["code"] == "setup_failed"
