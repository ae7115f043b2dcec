from pathlib import Path
from typing import TYPE_CHECKING

from sunside.errors import ConfigError

if TYPE_CHECKING:
    import tomli as tomllib
else:
    try:
        import tomllib
    except ModuleNotFoundError:  # Python < 3.11
        import tomli as tomllib

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "sunside" / "config.toml"


class Config:
    def __init__(self, data: dict):
        self._data = data
        self._validate()

    def _validate(self) -> None:
        for name in ("sample_interval_min", "event_window_min", "dedupe_window_min"):
            try:
                value = getattr(self, name)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Invalid {name}: {e}") from e
            if value <= 0:
                raise ConfigError(f"{name} must be positive, got {value}")

    @property
    def airports_path(self) -> Path | None:
        path = self._data.get("airports", {}).get("path", None)
        if not path:
            return None
        return Path(path).expanduser()

    @property
    def sample_interval_min(self) -> int:
        return int(self._data.get("sampling", {}).get("interval_min", 5))

    @property
    def event_window_min(self) -> float:
        return float(self._data.get("events", {}).get("window_min", 15))

    @property
    def dedupe_window_min(self) -> float:
        return float(self._data.get("events", {}).get("dedupe_window_min", 10))

    @property
    def event_min_elevation_deg(self) -> float:
        return float(self._data.get("events", {}).get("min_elevation_deg", -5.0))

    @property
    def horizon_deg(self) -> float:
        return float(self._data.get("solar", {}).get("horizon_deg", 0.0))

    @property
    def min_duration_min(self) -> int:
        return int(self._data.get("validation", {}).get("min_duration_min", 30))

    @property
    def max_duration_min(self) -> int:
        return int(self._data.get("validation", {}).get("max_duration_min", 1200))

    @property
    def max_past_days(self) -> float:
        return float(self._data.get("validation", {}).get("max_past_days", 1))

    @property
    def max_future_days(self) -> float:
        return float(self._data.get("validation", {}).get("max_future_days", 365))

    @property
    def log_level(self) -> str | None:
        return self._data.get("logging", {}).get("level", None)


def load_config(path: Path | None = None) -> Config:
    explicit_path = path
    path = path or DEFAULT_CONFIG_PATH

    if not path.exists():
        if explicit_path is not None:
            raise FileNotFoundError(f"Config file not found: {path}")
        # Defaults when the user has no config file
        return Config({})

    with open(path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid config file {path}: {e}") from e

    return Config(data)
