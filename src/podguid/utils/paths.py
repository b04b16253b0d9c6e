"""Filesystem locations for podguid configuration and logs."""

from pathlib import Path

import platformdirs

APP_NAME = "podguid"


def get_config_dir() -> Path:
    """Get the podguid configuration directory.

    Uses the platform convention (``$XDG_CONFIG_HOME/podguid`` on Linux).

    Returns:
        Path to the configuration directory (not created)
    """
    return Path(platformdirs.user_config_dir(APP_NAME))
