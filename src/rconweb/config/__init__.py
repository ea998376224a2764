"""Configuration management for rconweb.

Loads and validates YAML-based configuration with Pydantic models.
Supports environment variable overrides for deployment values like
the RCON host and password.
"""

from rconweb.config.settings import Settings, load_settings

__all__ = ["Settings", "load_settings"]
