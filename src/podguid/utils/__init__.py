"""Utility functions and helpers for podguid."""

from podguid.utils.errors import (
    ClipboardError,
    ConfigError,
    InvalidConfigError,
    PodguidError,
)
from podguid.utils.paths import get_config_dir

__all__ = [
    # Errors
    "PodguidError",
    "ConfigError",
    "InvalidConfigError",
    "ClipboardError",
    # Paths
    "get_config_dir",
]
