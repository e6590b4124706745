"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "careerhub"

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # Frontend origin allowed by CORS
    frontend_url: str = "http://localhost:5173"

    # Realtime transport liveness (seconds), handed to uvicorn
    ws_ping_interval: float = 25.0
    ws_ping_timeout: float = 60.0

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # App
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = True

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
