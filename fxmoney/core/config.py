"""Library configuration."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings."""

    # Decimal arithmetic
    DECIMAL_PRECISION: int = 28

    # Conversion
    CROSS_RATE_MODE: Literal["via_base", "legacy_product"] = "via_base"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Monitoring
    ENABLE_METRICS: bool = True

    model_config = SettingsConfigDict(
        env_prefix="FXMONEY_",
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
