"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    nas_host: str = "localhost"
    nas_port: int = 5000
    nas_use_https: bool = False
    nas_verify_ssl: bool = False
    nas_account: str = "admin"
    nas_password: str
    booking_api_base_url: str = "http://localhost:3000/api"
    booking_api_user: str = "demo"
    booking_api_password: str
    admin_token: str
    timezone: str = "Europe/Rome"
    destination_folder: str = "/volume1/replay/videos"
    copy_poll_interval_seconds: float = 1.0
    copy_max_attempts: int = 120
    copy_start_timeout_seconds: float = 120
    dispatch_delay_seconds: float = 2.0
    auto_download_timeout_seconds: float = 300
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def nas_base_url(self) -> str:
        scheme = "https" if self.nas_use_https else "http"
        return f"{scheme}://{self.nas_host}:{self.nas_port}"
