"""
Configuration management using Pydantic Settings.
Loads from environment variables or .env file.
"""
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Engine configuration loaded from environment variables.

    Usage:
        # .env file
        STREAM_LOG_PATH=log_input/stream_log.json
        LOG_LEVEL=DEBUG

        # In code
        from anomaly_engine.config import settings
        print(settings.FLAGGED_PURCHASES_PATH)
    """
    # Input / output locations (CLI arguments override these)
    BATCH_LOG_PATH: str = "log_input/batch_log.json"
    STREAM_LOG_PATH: str = "log_input/stream_log.json"
    FLAGGED_PURCHASES_PATH: str = "log_output/flagged_purchases.json"

    # Anomaly rule
    MIN_PURCHASES_FOR_ANOMALY: int = 2
    SIGMA_MULTIPLIER: int = 3

    # Rename an existing output file instead of overwriting it
    BACKUP_EXISTING_OUTPUT: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Global settings instance
settings = Settings()
