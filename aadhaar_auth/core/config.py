"""
aadhaar_auth/core/config.py

Purpose: Application configuration

- Loads environment variables (and .env)
- Centralizes config values (store URI, token secret, port)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal

DEFAULT_SECRET = "change-me-in-production"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # MongoDB
    MONGO_URI: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="aadhaar_auth",
        description="Database name used when the URI does not name one"
    )
    MONGO_CONNECT_RETRIES: int = Field(
        default=3,
        description="Connection attempts on startup before giving up"
    )

    # Tokens
    JWT_SECRET: str = Field(
        default=DEFAULT_SECRET,
        validate_default=True,
        description="Symmetric secret used to sign session tokens"
    )
    JWT_ALGORITHM: str = Field(
        default="HS256",
        description="JWT signing algorithm"
    )
    TOKEN_TTL_SECONDS: int = Field(
        default=3600,
        description="Session token lifetime in seconds"
    )

    # Credentials
    BCRYPT_ROUNDS: int = Field(
        default=10,
        description="bcrypt work factor"
    )

    # Server
    HOST: str = Field(default="0.0.0.0", description="Bind address")
    PORT: int = Field(default=8081, description="Listen port")

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: str, info: ValidationInfo) -> str:
        """Ensure the token secret is changed in production."""
        if info.data.get("ENVIRONMENT") == "production" and v == DEFAULT_SECRET:
            raise ValueError("JWT_SECRET must be changed in production environment")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


def load_settings(**overrides) -> Settings:
    """
    Builds a settings instance from the environment.
    Keyword overrides win over environment values.
    """
    return Settings(**overrides)


def validate_settings(settings: Settings) -> bool:
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []

    if not settings.MONGO_URI:
        errors.append("MONGO_URI is required")

    if not settings.JWT_SECRET:
        errors.append("JWT_SECRET is required")

    if settings.TOKEN_TTL_SECONDS <= 0:
        errors.append("TOKEN_TTL_SECONDS must be positive")

    if not 4 <= settings.BCRYPT_ROUNDS <= 31:
        errors.append("BCRYPT_ROUNDS must be between 4 and 31")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
