"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SPLITLEDGER_",
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite:///./splitledger.db"

    # Service
    service_name: str = "splitledger"
    log_level: str = "INFO"

    # Display-name cache
    name_cache_ttl_seconds: float = 300.0


settings = Settings()
