"""Configuration module - exports Settings and load_settings."""

from protege.config.loader import load_settings
from protege.config.settings import Settings

__all__ = ["Settings", "load_settings"]
