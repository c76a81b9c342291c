"""
Application configuration loaded from environment variables.
"""
import json
from functools import lru_cache
from typing import Annotated, Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


DEFAULT_COLLECTIONS = [
    "orders",
    "products",
    "customers",
    "custom_orders",
    "reviews",
    "contact_messages",
    "newsletter_subscribers",
]


def _split_names(value: Any) -> Any:
    """Accept a JSON list or a comma-separated string of names."""
    if isinstance(value, str):
        value = value.strip()
        if value.startswith("["):
            return json.loads(value)
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", populate_by_name=True
    )

    app_name: str = "Lunele Gateway"

    # MongoDB
    mongo_uri: str = Field(
        default="mongodb://localhost:27017",
        validation_alias=AliasChoices("MONGO_URI", "MONGODB_URI", "DATABASE_URL"),
    )
    mongo_db_name: str = "lunele_bakes"
    mongo_server_selection_timeout_ms: int = 5000
    exit_on_db_failure: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 5000

    # Basic auth
    basic_auth_username: str = "admin"
    basic_auth_password: str = "changeme"

    # Collections
    collections: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_COLLECTIONS)
    )
    notify_collections: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["orders", "custom_orders", "contact_messages"]
    )

    # Query limits
    default_page_limit: int = 10
    max_page_limit: int = 100
    store_timeout_seconds: float = 10.0

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"

    @field_validator("collections", "notify_collections", mode="before")
    @classmethod
    def split_names(cls, v: Any) -> Any:
        return _split_names(v)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
