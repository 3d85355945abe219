"""Settings for SmartFilter."""

from typing import Dict, List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SmartFilterSettings(BaseSettings):
    """SmartFilter configuration settings.

    Every value can be overridden from the environment with the
    ``SMART_FILTER_`` prefix (e.g. ``SMART_FILTER_ENABLED=false``).
    """

    # Global switch
    ENABLED: bool = True

    # Default filter configuration (lowest precedence after built-in defaults)
    DEFAULT_DEEP: bool = True
    DEFAULT_MAX_RELATION_DEPTH: int = 2
    DEFAULT_CASE_SENSITIVE: bool = False
    DEFAULT_STRICT_MODE: bool = False

    # Fields
    EXCLUDED_FIELDS: List[str] = Field(
        default_factory=lambda: [
            "id",
            "uuid",
            "created_at",
            "updated_at",
            "deleted_at",
            "password",
            "remember_token",
            "email_verified_at",
            "two_factor_secret",
            "two_factor_recovery_codes",
        ]
    )
    DEFAULT_OPERATORS: Dict[str, str] = Field(
        default_factory=lambda: {
            "string": "like",
            "integer": "=",
            "float": "=",
            "boolean": "=",
            "date": "=",
            "array": "in",
        }
    )

    # Relations
    RELATION_AUTO_DISCOVER: bool = True
    RELATION_MAX_DEPTH: int = 3
    EXCLUDED_RELATIONS: List[str] = Field(
        default_factory=lambda: ["password", "secret", "tokens", "oauth_providers"]
    )

    # Limits
    MAX_FILTERS: int = 20

    # Request parsing
    REQUEST_PREFIX: str = ""
    ARRAY_DELIMITER: str = ","
    DATE_FORMAT: str = "%Y-%m-%d"

    # Debug
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="SMART_FILTER_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


settings = SmartFilterSettings()
