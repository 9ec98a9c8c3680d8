# src/procwatch/paths.py: Path resolution helpers.
# Locates the optional configuration file in the platform's user config
# directory and expands user/environment references in configured paths.

import os
from pathlib import Path

import platformdirs

APP_NAME = "procwatch"


def get_config_home() -> Path:
    """Get the per-user configuration directory for procwatch."""
    return Path(platformdirs.user_config_dir(APP_NAME))


def get_default_config_path() -> Path:
    return get_config_home() / "procwatch.yaml"


def expand_path(path: str | Path) -> Path:
    """Expand environment variables and the user's home directory in a path."""
    return Path(os.path.expandvars(os.path.expanduser(str(path))))
