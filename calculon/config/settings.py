"""
Calculon Configuration Settings

This module contains all configuration constants for the Calculon server.
Values can be overridden through environment variables.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Server configuration settings."""

    # Network settings
    HOST: str = os.environ.get("CALCULON_HOST", "127.0.0.1")
    PORT: int = int(os.environ.get("CALCULON_PORT", "4673"))

    # Connection settings
    READ_BUFFER_SIZE: int = 64 * 1024  # StreamReader line limit

    # State settings
    INITIAL_VALUE: float = 0.0

    # Protocol settings
    GREETING: str = "ADD 1.23/SUBTRACT 1.23/POWER 1.23/SHOW"

    # Logging settings
    DEBUG: bool = os.environ.get("CALCULON_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("CALCULON_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
