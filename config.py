# ============================================================================
# CLAUDE CONTEXT - APPLICATION CONFIGURATION
# ============================================================================
# STATUS: Core Infrastructure - Configuration Management
# PURPOSE: Centralized configuration for the parcels PostgreSQL connection
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: get_postgres_connection_string, get_app_config, AppConfig
# DEPENDENCIES: pydantic-settings, azure-identity
# SOURCE: Environment variables, .env file, Azure managed identity
# PATTERNS: Singleton pattern for config, lazy initialization for credentials
# ============================================================================

"""
Application Configuration Module

Provides centralized configuration management for the parcels API including:
- PostgreSQL connection string generation
- DATABASE_URL passthrough (local development, docker-compose)
- Support for both password and managed identity authentication

Authentication Modes:
    1. DATABASE_URL:
       - Requires: DATABASE_URL
       - Used verbatim, takes precedence over everything else

    2. Password-based:
       - Requires: POSTGIS_HOST, POSTGIS_DATABASE, POSTGIS_USER, POSTGIS_PASSWORD
       - Use when: USE_MANAGED_IDENTITY=false or not set

    3. Managed Identity (Azure production):
       - Requires: System-assigned managed identity enabled
       - Use when: USE_MANAGED_IDENTITY=true

Usage:
    from config import get_postgres_connection_string

    conn_string = get_postgres_connection_string()
    conn = psycopg.connect(conn_string)
"""

import logging
from typing import Optional
from functools import lru_cache
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, model_validator

logger = logging.getLogger(__name__)

# ============================================================================
# Application Configuration
# ============================================================================

class AppConfig(BaseSettings):
    """
    Application-wide configuration loaded from environment variables.

    Attributes:
        database_url: Full PostgreSQL URL (overrides the POSTGIS_* fields)
        postgis_host: PostgreSQL server hostname
        postgis_port: PostgreSQL server port
        postgis_database: Database name
        postgis_user: Database username
        postgis_password: Database password (optional with managed identity)
        postgis_sslmode: libpq sslmode for built connection strings
        use_managed_identity: Enable Azure managed identity authentication
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    database_url: Optional[str] = Field(default=None, description="Full PostgreSQL connection URL")

    postgis_host: Optional[str] = Field(default=None, description="PostgreSQL hostname")
    postgis_port: int = Field(default=5432, description="PostgreSQL port")
    postgis_database: Optional[str] = Field(default=None, description="Database name")
    postgis_user: Optional[str] = Field(default=None, description="Database username")
    postgis_password: Optional[str] = Field(default=None, description="Database password")
    postgis_sslmode: str = Field(default="require", description="libpq sslmode")

    use_managed_identity: bool = Field(
        default=False,
        description="Use Azure managed identity for authentication"
    )

    @model_validator(mode="after")
    def validate_connection_settings(self) -> "AppConfig":
        """Ensure enough settings exist to build a connection string."""
        if self.database_url:
            return self

        missing = [
            name.upper() for name in ("postgis_host", "postgis_database", "postgis_user")
            if not getattr(self, name)
        ]
        if missing:
            raise ValueError(
                f"DATABASE_URL is not set and {', '.join(missing)} missing"
            )

        if not self.use_managed_identity and not self.postgis_password:
            raise ValueError(
                "POSTGIS_PASSWORD is required when USE_MANAGED_IDENTITY=false"
            )
        return self

    @property
    def auth_mode(self) -> str:
        """Human-readable authentication mode for logs and health output."""
        if self.database_url:
            return "database_url"
        return "managed_identity" if self.use_managed_identity else "password"


@lru_cache(maxsize=1)
def get_app_config() -> AppConfig:
    """
    Get singleton application configuration instance.

    Returns:
        AppConfig: Validated configuration object

    Raises:
        ValidationError: If required environment variables are missing
    """
    return AppConfig()


# ============================================================================
# PostgreSQL Connection String Generation
# ============================================================================

def get_postgres_connection_string() -> str:
    """
    Generate PostgreSQL connection string based on authentication mode.

    Returns:
        str: PostgreSQL connection string (psycopg format)

    Raises:
        ValueError: If required configuration is missing
        RuntimeError: If managed identity token acquisition fails
    """
    config = get_app_config()

    if config.database_url:
        return config.database_url
    if config.use_managed_identity:
        return _build_managed_identity_connection_string(config)
    return _build_password_connection_string(config)


def _build_password_connection_string(config: AppConfig) -> str:
    """
    Build password-based connection string.

    Note:
        Password is URL-encoded to handle special characters like @ symbols
    """
    logger.info(f"Building password-based connection string for {config.postgis_host}")

    encoded_password = quote_plus(config.postgis_password)

    return (
        f"postgresql://{config.postgis_user}:{encoded_password}"
        f"@{config.postgis_host}:{config.postgis_port}"
        f"/{config.postgis_database}"
        f"?sslmode={config.postgis_sslmode}"
    )


def _build_managed_identity_connection_string(config: AppConfig) -> str:
    """
    Build managed identity connection string with Azure AD token.

    Note:
        Token has limited lifetime (~1 hour); connections are per request so
        a fresh token is fetched whenever the string is rebuilt.
    """
    logger.info(f"Building managed identity connection string for {config.postgis_host}")

    from azure.identity import DefaultAzureCredential

    try:
        credential = DefaultAzureCredential()
        token = credential.get_token("https://ossrdbms-aad.database.windows.net/.default")
    except Exception as e:
        logger.error(f"Failed to acquire managed identity token: {e}")
        raise RuntimeError(
            f"Managed identity authentication failed: {e}. "
            "Ensure system-assigned managed identity is enabled and has database permissions."
        ) from e

    logger.info("Acquired managed identity token")

    return (
        f"postgresql://{config.postgis_user}:{quote_plus(token.token)}"
        f"@{config.postgis_host}:{config.postgis_port}"
        f"/{config.postgis_database}"
        f"?sslmode={config.postgis_sslmode}"
    )


# ============================================================================
# Configuration Validation
# ============================================================================

def validate_configuration() -> bool:
    """
    Validate configuration on application startup.

    Raises:
        Exception: If configuration validation fails
    """
    try:
        config = get_app_config()
        logger.info("Configuration validation:")
        logger.info(f"  Auth mode: {config.auth_mode}")
        if not config.database_url:
            logger.info(f"  PostgreSQL Host: {config.postgis_host}")
            logger.info(f"  PostgreSQL Port: {config.postgis_port}")
            logger.info(f"  Database: {config.postgis_database}")
            logger.info(f"  User: {config.postgis_user}")

        get_postgres_connection_string()
        logger.info("Connection string generated successfully")
        return True

    except Exception as e:
        logger.error(f"Configuration validation failed: {e}")
        raise


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    validate_configuration()
