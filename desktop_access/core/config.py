from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    # App
    app_name: str = "Desktop Access"
    debug: bool = False

    # Role definitions (YAML). Built-in defaults are used when unset.
    roles_file: Optional[str] = None

    # Drop rules with no values when aggregating roles
    skip_empty_rules: bool = True

    # Logging
    log_level: str = "INFO"
    log_dir: str = "/var/log/desktop-access"
    log_to_file: bool = False

    model_config = SettingsConfigDict(
        env_prefix="DESKTOP_ACCESS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"  # Allow extra env vars without raising validation errors
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
