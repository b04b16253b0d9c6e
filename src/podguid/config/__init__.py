"""Configuration management for podguid."""

from podguid.config.manager import ConfigManager
from podguid.config.schema import GlobalConfig

__all__ = ["ConfigManager", "GlobalConfig"]
