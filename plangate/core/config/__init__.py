"""Configuration module for plangate.

Provides centralized configuration management with type-safe enums.

Usage:
    from plangate.core.config import settings, Environment

    if settings.ENVIRONMENT == Environment.PRD:
        ...
"""

from plangate.core.config.enums import Environment
from plangate.core.config.settings import Settings

__all__ = [
    "Settings",
    "Environment",
    "settings",
]

# Singleton settings instance
settings = Settings()
