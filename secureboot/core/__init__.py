"""Core: config and application bootstrap (lifespan, exception handlers)."""

from secureboot.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
