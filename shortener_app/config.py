from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = False
    dev: bool = False  # Serve static files from the working tree

    # Application
    app_name: str = "URL Shortener"
    app_version: str = "1.0.0"

    # Server
    host: str = "0.0.0.0"
    port: int = 4567

    # Storage
    store_path: str = "urls.txt"
    store_fsync: bool = True

    # Static files (overrides the dev/packaged location when set)
    static_dir: Optional[str] = None

    # URL Shortener specific
    short_url_length: int = 5
    max_retries: int = 8  # Attempts per length before the alias grows

    # Logging
    log_level: str = "INFO"

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("dev", mode="before")
    @classmethod
    def _presence_flag(cls, value):
        """`dev` is a presence flag: `dev=` or `dev=1` both switch it on."""
        if isinstance(value, str):
            return value.strip().lower() not in ("0", "false", "no", "off")
        return value

    @field_validator("short_url_length", "max_retries")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be at least 1")
        return value

    def resolve_static_dir(self) -> Path:
        """Directory mounted at `/` for the frontend."""
        if self.static_dir:
            return Path(self.static_dir)
        if self.dev:
            return Path.cwd() / "shortener_app" / "public"
        return PACKAGE_DIR / "public"


# Create settings instance
settings = Settings()
