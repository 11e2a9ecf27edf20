from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    sedentary_threshold_steps_per_hour: float = 30.0
    sedentary_minimum_duration_seconds: float = 30 * 60
    sleep_debt_window_days: int = 7
    default_sleep_need_hours: float = 7.5
    sleep_need_band_hours: float = 0.75
    sleep_need_min_nights: int = 7
    low_confidence_sleep_seconds: float = 3 * 3600  # under 3h → sleep_low_confidence
    low_confidence_steps: float = 500.0

    model_config = SettingsConfigDict(
        env_prefix="PULSEDAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
