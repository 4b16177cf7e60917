# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for the LMS
compliance core. Settings are loaded from environment variables with
sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Business policy values (the expiring-soon window, the exam pass bonus) are
deliberately not settings; they live next to the code that applies them.

Example:
    >>> from src.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """LMS database configuration.

    Attributes:
        user: PostgreSQL username.
        password: PostgreSQL password.
        host: Database host address.
        port: Database port number.
        database: Database name.
        pool_size: Connection pool size.
        max_overflow: Maximum overflow connections.
        create_schema: Create missing tables at startup (development only).
    """

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        extra="ignore",
    )

    user: str = "lms"
    password: SecretStr = SecretStr("lms_password")
    host: str = "localhost"
    port: int = 5432
    database: str = "lms"
    pool_size: int = 10
    max_overflow: int = 20
    create_schema: bool = False

    @property
    def url(self) -> str:
        """Build the async database URL from components."""
        pwd = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{pwd}@{self.host}:{self.port}/{self.database}"


class SMTPSettings(BaseSettings):
    """Outgoing mail configuration for notification emails.

    Email delivery is disabled unless host, username, password and
    from_email are all set.

    Attributes:
        host: SMTP server hostname.
        port: SMTP server port.
        username: SMTP authentication username.
        password: SMTP authentication password.
        use_tls: Use STARTTLS.
        from_email: Sender email address.
        from_name: Sender display name.
    """

    model_config = SettingsConfigDict(
        env_prefix="SMTP_",
        extra="ignore",
    )

    host: str | None = None
    port: int = 587
    username: str | None = None
    password: SecretStr | None = None
    use_tls: bool = True
    from_email: str | None = None
    from_name: str = "The LMS Team"

    @property
    def is_configured(self) -> bool:
        """Check whether every required SMTP field is present."""
        return all([self.host, self.username, self.password, self.from_email])


class JWTSettings(BaseSettings):
    """JWT authentication configuration.

    Tokens are issued by the platform auth service; this service only
    validates them.

    Attributes:
        secret_key: Secret key tokens are signed with.
        algorithm: JWT signing algorithm.
        access_token_expire_minutes: Access token lifetime.
    """

    model_config = SettingsConfigDict(
        env_prefix="JWT_",
        extra="ignore",
    )

    secret_key: SecretStr = SecretStr("change-this-in-production")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = Field(
        default=30,
        validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )


class CORSSettings(BaseSettings):
    """CORS configuration for API.

    Attributes:
        origins: Comma-separated list of allowed origins.
        allow_credentials: Whether to allow credentials.
        allow_methods: Allowed HTTP methods.
        allow_headers: Allowed HTTP headers.
    """

    model_config = SettingsConfigDict(
        env_prefix="CORS_",
        extra="ignore",
    )

    origins: str = "http://localhost:3000,http://localhost:5173"
    allow_credentials: bool = True
    allow_methods: list[str] = ["*"]
    allow_headers: list[str] = ["*"]

    @property
    def origins_list(self) -> list[str]:
        """Parse origins string into a list."""
        return [origin.strip() for origin in self.origins.split(",") if origin.strip()]


class APISettings(BaseSettings):
    """API server configuration.

    Attributes:
        host: Host to bind to.
        port: Port to listen on.
        workers: Number of worker processes.
        reload: Whether to enable auto-reload.
    """

    model_config = SettingsConfigDict(
        env_prefix="API_",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 2
    reload: bool = False


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        db: Database settings.
        smtp: Outgoing mail settings.
        jwt: JWT authentication settings.
        cors: CORS settings.
        api: API server settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"

    # Subsettings - loaded with their own env prefixes
    db: DatabaseSettings = Field(default_factory=DatabaseSettings)
    smtp: SMTPSettings = Field(default_factory=SMTPSettings)
    jwt: JWTSettings = Field(default_factory=JWTSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    api: APISettings = Field(default_factory=APISettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production with insecure defaults.
        """
        if self.environment == "production":
            default_jwt_secret = "change-this-in-production"
            if self.jwt.secret_key.get_secret_value() == default_jwt_secret:
                raise ValueError(
                    "JWT secret key must be changed from default in production. "
                    "Set JWT_SECRET_KEY environment variable."
                )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()
