"""Configuration helpers for the outfit closet app."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

DEFAULT_DATABASE_PATH = "data/closet.db"
DEFAULT_COLD_THRESHOLD_C = 10.0
DEFAULT_HOT_THRESHOLD_C = 28.0
DEFAULT_RECENCY_WINDOW_DAYS = 2
WEATHER_PROVIDERS = ("static",)


@dataclass
class AppConfig:
    """Configuration values for the closet app.

    The weather thresholds and the recency window are policy knobs for the
    recommendation engine rather than values derived from any standard, so they
    are kept here where deployments can tune them.

    ``weather_provider`` names a built-in provider to construct when none is
    injected. Only ``"static"`` ships here; live forecast clients are passed to
    :class:`closet_app.app.ClosetApp` directly.
    """

    database_path: str = DEFAULT_DATABASE_PATH
    log_level: str = "INFO"
    cold_threshold_c: float = DEFAULT_COLD_THRESHOLD_C
    hot_threshold_c: float = DEFAULT_HOT_THRESHOLD_C
    recency_window_days: int = DEFAULT_RECENCY_WINDOW_DAYS
    default_recommendation_count: int = 4
    max_recommendation_count: int = 20
    default_city: Optional[str] = None
    weather_provider: Optional[str] = None
    environment: str | None = None

    def __post_init__(self) -> None:
        if self.cold_threshold_c > self.hot_threshold_c:
            raise ValueError(
                f"cold_threshold_c ({self.cold_threshold_c}) cannot exceed hot_threshold_c ({self.hot_threshold_c})"
            )
        if self.recency_window_days < 0:
            raise ValueError("recency_window_days must be zero or positive")
        if self.default_recommendation_count < 1:
            raise ValueError("default_recommendation_count must be at least 1")
        if self.max_recommendation_count < self.default_recommendation_count:
            raise ValueError("max_recommendation_count cannot be below default_recommendation_count")
        if self.weather_provider is not None:
            self.weather_provider = self.weather_provider.strip().lower() or None
        if self.weather_provider is not None and self.weather_provider not in WEATHER_PROVIDERS:
            raise ValueError(f"Unsupported weather_provider '{self.weather_provider}'. Allowed: {list(WEATHER_PROVIDERS)}")

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default and is merged with environment variables, which take precedence.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("CLOSET_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, yaml_config.get(key, default))

        return cls(
            database_path=str(get_value("database_path") or DEFAULT_DATABASE_PATH),
            log_level=str(get_value("log_level") or "INFO"),
            cold_threshold_c=_as_float("cold_threshold_c", get_value("cold_threshold_c"), DEFAULT_COLD_THRESHOLD_C),
            hot_threshold_c=_as_float("hot_threshold_c", get_value("hot_threshold_c"), DEFAULT_HOT_THRESHOLD_C),
            recency_window_days=_as_int(
                "recency_window_days", get_value("recency_window_days"), DEFAULT_RECENCY_WINDOW_DAYS
            ),
            default_recommendation_count=_as_int(
                "default_recommendation_count", get_value("default_recommendation_count"), 4
            ),
            max_recommendation_count=_as_int("max_recommendation_count", get_value("max_recommendation_count"), 20),
            default_city=get_value("default_city") or None,
            weather_provider=get_value("weather_provider") or None,
            environment=env_name,
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a minimal YAML/INI-style config without external dependencies."""

        config: dict[str, str] = {}
        for line in path.read_text(encoding="utf-8").splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config


def _as_float(key: str, raw: Optional[str], default: float) -> float:
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid number for {key}: {raw!r}") from exc


def _as_int(key: str, raw: Optional[str], default: int) -> int:
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid integer for {key}: {raw!r}") from exc


__all__ = ["AppConfig"]
