from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DATA_DIR = Path(__file__).resolve().parent.parent.parent / "data"

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    min_hour: int = Field(default=6, validation_alias="WINDSOCK_MIN_HOUR")
    max_hour: int = Field(default=18, validation_alias="WINDSOCK_MAX_HOUR")
    timezone: str = Field(default="America/Los_Angeles", validation_alias="WINDSOCK_TIMEZONE")
    absolute_url: str = Field(
        default="https://bayarea.climberrankings.com/climbs/windsock",
        validation_alias="WINDSOCK_ABSOLUTE_URL",
    )
    title: str = Field(default="Windsock - Bay Area", validation_alias="WINDSOCK_TITLE")
    output_dir: str = Field(default="site", validation_alias="WINDSOCK_OUTPUT_DIR")
    climbs_file: str = Field(default=str(DATA_DIR / "climbs.json"), validation_alias="WINDSOCK_CLIMBS_FILE")
    hidden_file: str = Field(default="", validation_alias="WINDSOCK_HIDDEN_FILE")
    historical_file: str = Field(default="", validation_alias="WINDSOCK_HISTORICAL_FILE")
    historical_default: bool = Field(
        default=False,
        validation_alias="WINDSOCK_HISTORICAL_DEFAULT",
        description="Point each page's index at the historical rendition instead of baseline",
    )
    max_workers: int = Field(default=8, validation_alias="WINDSOCK_MAX_WORKERS")

    open_meteo_forecast_url: str = Field(
        default="https://api.open-meteo.com/v1/forecast",
        validation_alias="OPEN_METEO_FORECAST_URL",
    )
    forecast_max_attempts: int = Field(default=10, validation_alias="FORECAST_MAX_ATTEMPTS")
    forecast_base_backoff: float = Field(default=0.1, validation_alias="FORECAST_BASE_BACKOFF")
    forecast_max_backoff: float = Field(default=5.0, validation_alias="FORECAST_MAX_BACKOFF")
    forecast_timeout: float = Field(default=15.0, validation_alias="FORECAST_TIMEOUT")

    strava_client_id: str = Field(default="", validation_alias="STRAVA_CLIENT_ID")
    strava_client_secret: str = Field(default="", validation_alias="STRAVA_CLIENT_SECRET")
    strava_access_token: str = Field(
        default="",
        validation_alias="STRAVA_ACCESS_TOKEN",
        description="Path of the JSON file holding the Strava OAuth token",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> str:
        level = str(value).strip().upper()
        if level not in LOG_LEVELS:
            logger.warning(f"Unknown LOG_LEVEL {value!r}, falling back to INFO")
            return "INFO"
        return level

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except ZoneInfoNotFoundError as e:
            raise ValueError(f"Unknown time zone: {value}") from e
        return value

    @model_validator(mode="after")
    def validate_hour_window(self) -> "Settings":
        if self.min_hour < 0 or self.max_hour > 23 or self.min_hour >= self.max_hour:
            raise ValueError(
                "min and max must be in the range [0-23] with min < max "
                f"but got min={self.min_hour} max={self.max_hour}"
            )
        return self

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


settings = Settings()
