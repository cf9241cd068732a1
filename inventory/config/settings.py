"""
==============================================================================
Application Settings Module
==============================================================================

Configuration management for the inventory command server using
Pydantic Settings.

A single global configuration instance is shared through the
application lifecycle (see ``get_settings``).

Features:
---------
- Environment variable loading with type validation
- .env file support for local development
- Computed properties for derived values

Configuration Priority (highest to lowest):
------------------------------------------
1. Environment variables
2. .env file
3. Default values

==============================================================================
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Module logger
logger = logging.getLogger(__name__)


# Largest UDP payload over IPv4 (65535 - 8 byte UDP header - 20 byte IP header)
UDP_MAX_PAYLOAD = 65507


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_name: Display name for the application
        app_env: Environment mode (development/staging/production)
        debug: Enable debug mode for verbose logging
        host: Server bind address (client target address for ``remote``)
        port: UDP port number
        products_file: Optional JSON file used to pre-populate the catalog
        max_payload_size: Largest datagram the codec will produce
        receive_timeout: Receive poll interval of the server loop, seconds
        client_timeout: How long a client waits for one reply, seconds
        worker_threads: Worker pool size (0 handles requests inline)

    Example:
        >>> settings = Settings(port=0)
        >>> settings.max_payload_size
        65507
    """

    # =========================================================================
    # PYDANTIC SETTINGS CONFIGURATION
    # =========================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================
    app_name: str = Field(
        default="Inventory Command Server",
        description="Display name for the application"
    )

    app_env: str = Field(
        default="development",
        description="Environment mode: development, staging, production"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode for verbose logging"
    )

    # =========================================================================
    # TRANSPORT SETTINGS
    # =========================================================================
    host: str = Field(
        default="0.0.0.0",
        description="Server bind address"
    )

    port: int = Field(
        default=52333,
        ge=0,
        le=65535,
        description="UDP port number (0 picks a free port)"
    )

    max_payload_size: int = Field(
        default=UDP_MAX_PAYLOAD,
        ge=512,
        le=65536,
        description="Maximum encoded size of a single datagram in bytes"
    )

    receive_timeout: float = Field(
        default=0.5,
        gt=0,
        le=10,
        description="Server receive poll interval in seconds"
    )

    client_timeout: float = Field(
        default=2.0,
        gt=0,
        le=60,
        description="Client reply timeout in seconds"
    )

    worker_threads: int = Field(
        default=0,
        ge=0,
        le=64,
        description="Request worker threads (0 = handle inline)"
    )

    # =========================================================================
    # FILE PATH SETTINGS
    # =========================================================================
    products_file: Optional[str] = Field(
        default=None,
        description="Path to the initial product JSON file"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================
    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, value: str) -> str:
        """
        Validate and normalize application environment.

        Args:
            value: Raw environment value

        Returns:
            Lowercase normalized environment name
        """
        valid_envs = {"development", "staging", "production"}
        normalized = value.lower().strip()

        if normalized not in valid_envs:
            logger.warning(
                f"Unknown environment '{value}', defaulting to 'development'"
            )
            return "development"

        return normalized

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================
    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def log_level(self) -> int:
        """Logging level derived from the debug flag."""
        return logging.DEBUG if self.debug else logging.INFO

    @property
    def products_path(self) -> Optional[Path]:
        """
        Get products file as Path object.

        Returns:
            Path to the products JSON file, or None when not configured
        """
        if not self.products_file:
            return None
        return Path(self.products_file)

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"Settings(app_name={self.app_name!r}, "
            f"app_env={self.app_env!r}, "
            f"host={self.host!r}, port={self.port}, "
            f"debug={self.debug})"
        )


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the global Settings instance (singleton pattern).

    Returns:
        Global Settings instance
    """
    settings = Settings()

    if settings.debug:
        logger.info(f"Configuration loaded: {settings}")

    return settings
