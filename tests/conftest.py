import pytest

from sunside.flight.airports import AirportCatalog
from sunside.flight.types import Airport


def pytest_addoption(parser):
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run tests marked as integration",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--integration"):
        return

    for item in items:
        if "integration" in item.keywords:
            item.add_marker(
                pytest.mark.skip(
                    reason="need --integration option to run integration tests"
                )
            )


@pytest.fixture(autouse=True)
def no_user_config(monkeypatch, tmp_path):
    # A developer's ~/.config/sunside/config.toml must not leak into tests.
    monkeypatch.setattr("sunside.config.DEFAULT_CONFIG_PATH", tmp_path / "missing.toml")


@pytest.fixture
def jfk():
    return Airport(iata="JFK", name="John F. Kennedy International Airport", latitude_deg=40.64, longitude_deg=-73.78)


@pytest.fixture
def lhr():
    return Airport(iata="LHR", name="London Heathrow Airport", latitude_deg=51.47, longitude_deg=-0.45)


@pytest.fixture
def cdg():
    return Airport(iata="CDG", name="Paris Charles de Gaulle Airport", latitude_deg=49.01, longitude_deg=2.55)


@pytest.fixture
def catalog(jfk, lhr, cdg):
    return AirportCatalog([jfk, lhr, cdg])
