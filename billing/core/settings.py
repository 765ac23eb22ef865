"""Application settings and environment loading utilities."""
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_FILE = BASE_DIR / ".env"

load_dotenv(dotenv_path=ENV_FILE)


class Settings(BaseSettings):
    """Central application configuration."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    app_name: str = "Franchise Billing API"
    environment: str = Field(default="development", alias="ENVIRONMENT")
    database_url: str = Field(
        default="sqlite:///./data/dev.db",
        description="SQLAlchemy database URL",
        alias="DATABASE_URL",
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    default_gst_percent: Decimal = Field(
        default=Decimal("18"),
        description="GST percent applied when a request leaves it blank",
        alias="DEFAULT_GST_PERCENT",
    )
    strict_booking_references: bool = Field(
        default=False,
        description="Fail invoice generation when a referenced booking does not exist",
        alias="STRICT_BOOKING_REFERENCES",
    )
    payment_policy: Literal["permissive", "strict"] = Field(
        default="permissive",
        alias="PAYMENT_POLICY",
    )


@lru_cache
def get_settings() -> "Settings":
    """Return cached settings instance."""

    return Settings()
