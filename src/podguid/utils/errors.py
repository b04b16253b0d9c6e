"""Custom exceptions for podguid."""


class PodguidError(Exception):
    """Base exception for all podguid errors."""

    pass


class ConfigError(PodguidError):
    """Configuration-related errors."""

    pass


class InvalidConfigError(ConfigError):
    """Invalid configuration data."""

    pass


class ClipboardError(PodguidError):
    """Writing to the system clipboard failed."""

    pass
