"""Configuration module for the phase scheduler runtime"""

from .settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
