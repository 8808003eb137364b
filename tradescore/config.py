"""Configuration for TradeScore.

Settings live in ~/.config/tradescore/config.toml. A missing file means
defaults; an unreadable or invalid file raises ValueError.
"""

from pathlib import Path
from typing import Optional

import toml
from pydantic import BaseModel, Field, ValidationError, model_validator

from tradescore.models import Direction

CONFIG_DIR = Path.home() / ".config" / "tradescore"
CONFIG_PATH = CONFIG_DIR / "config.toml"
DEFAULT_DB_PATH = CONFIG_DIR / "tradescore.db"


class CadenceProfile(BaseModel):
    """Indicator periods for one bar cadence."""

    name: str = Field(..., description="Cadence name")
    history_bars: int = Field(..., ge=1, description="Bars fetched per symbol")
    min_bars: int = Field(..., ge=1, description="Fewer bars than this skips the symbol")
    sma_short: int = Field(3, ge=1, description="Short SMA period")
    sma_long: int = Field(12, ge=1, description="Long SMA period")
    macd_ladder: list[tuple[int, int, int]] = Field(
        ..., min_length=1, description="(fast, slow, signal) profiles, longest first"
    )
    atr_period: int = Field(14, ge=1, description="ATR period")
    adx_period: int = Field(14, ge=1, description="ADX smoothing period")
    bb_period: int = Field(20, ge=1, description="Bollinger window")
    bb_std_dev: float = Field(2.0, ge=0, description="Bollinger multiplier")
    return_bars: int = Field(1, ge=1, description="Bars back for the relative strength return")
    sr_lookback: int = Field(50, ge=5, description="Bars scanned for support/resistance")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _lookback_fits_history(self) -> "CadenceProfile":
        if self.sr_lookback > self.history_bars:
            raise ValueError(
                f"sr_lookback {self.sr_lookback} exceeds history_bars {self.history_bars}"
            )
        return self


CADENCES = {
    "daily": CadenceProfile(
        name="daily",
        history_bars=60,
        min_bars=26,
        macd_ladder=[(12, 26, 9), (8, 16, 6), (6, 12, 4), (5, 10, 3)],
    ),
    "weekly": CadenceProfile(
        name="weekly",
        history_bars=52,
        min_bars=20,
        macd_ladder=[(8, 16, 6), (6, 12, 4), (5, 10, 3)],
        sr_lookback=40,
    ),
    "monthly": CadenceProfile(
        name="monthly",
        history_bars=36,
        min_bars=15,
        macd_ladder=[(8, 16, 6), (6, 12, 4), (5, 10, 3)],
        atr_period=10,
        adx_period=10,
        bb_period=12,
        sr_lookback=30,
    ),
}


def get_cadence(name: str) -> CadenceProfile:
    """Look up a cadence profile by name."""
    try:
        return CADENCES[name]
    except KeyError:
        raise ValueError(
            f"Unknown cadence '{name}'. Choose from: {', '.join(CADENCES)}"
        ) from None


class Settings(BaseModel):
    """User-tunable analysis settings."""

    min_ratio: float = Field(2.0, gt=0, description="Minimum reward:risk for approval")
    min_score: float = Field(60, ge=1, le=100, description="Minimum composite score")
    benchmark: str = Field("SPY", min_length=1, description="Relative strength benchmark")
    cadence: str = Field("daily", description="Default bar cadence")
    direction: Direction = Field(Direction.LONG, description="Default trade direction")
    sr_lookback: Optional[int] = Field(
        None, ge=5, description="Overrides the cadence support/resistance lookback"
    )
    log_level: str = Field("WARNING", description="Logging level")
    db_path: Path = Field(DEFAULT_DB_PATH, description="SQLite database file")

    model_config = {"frozen": True}

    @property
    def cadence_profile(self) -> CadenceProfile:
        return get_cadence(self.cadence)

    def levels_lookback(self, profile: Optional[CadenceProfile] = None) -> int:
        """Bars scanned for support/resistance under a cadence profile."""
        profile = profile or self.cadence_profile
        return min(self.sr_lookback or profile.sr_lookback, profile.history_bars)


def _flatten(config: dict) -> dict:
    """Map the sectioned TOML layout onto Settings fields."""
    analysis = config.get("analysis", {})
    values = {k: v for k, v in analysis.items() if k in Settings.model_fields}

    if "level" in config.get("logging", {}):
        values["log_level"] = config["logging"]["level"]
    if "path" in config.get("database", {}):
        values["db_path"] = Path(config["database"]["path"]).expanduser()
    return values


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """Load settings from TOML, falling back to defaults.

    Args:
        config_path: Override for the config file location.

    Raises:
        ValueError: If the file exists but cannot be parsed or validated.
    """
    path = config_path or CONFIG_PATH
    if not path.exists():
        return Settings()

    try:
        config = toml.load(path)
    except toml.TomlDecodeError as e:
        raise ValueError(f"Invalid config file {path}: {e}") from e

    try:
        settings = Settings(**_flatten(config))
    except ValidationError as e:
        raise ValueError(f"Invalid settings in {path}: {e}") from e

    get_cadence(settings.cadence)
    return settings


def create_template_config(config_path: Optional[Path] = None) -> Path:
    """Write a template configuration file with the default settings."""
    path = config_path or CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)

    defaults = Settings()
    template = {
        "analysis": {
            "min_ratio": defaults.min_ratio,
            "min_score": defaults.min_score,
            "benchmark": defaults.benchmark,
            "cadence": defaults.cadence,
            "direction": defaults.direction.value,
        },
        "logging": {
            "level": defaults.log_level,
        },
        "database": {
            "path": str(defaults.db_path),
        },
    }

    with open(path, "w") as f:
        toml.dump(template, f)

    return path
