"""Configuration module with YAML and environment variable support."""

from .settings import Provider, Settings, get_settings


__all__ = [
    "Provider",
    "Settings",
    "get_settings",
]
