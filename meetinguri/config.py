"""Settings for the meetinguri command-line tool, loaded from the environment."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings for the meetinguri CLI."""

    log_level: str = "WARNING"
    log_format: str = "%(asctime)s %(levelname)s %(name)s %(message)s"
    json_indent: int | None = 2

    model_config = SettingsConfigDict(
        env_prefix="MEETINGURI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings so env parsing only happens once."""

    return Settings()
