"""
CLI Utilities

Host-side helpers for wslprovision.
"""

import ctypes
import os
from pathlib import Path

from wslprovision.constants import DEFAULT_HOME_DIRNAME, HOME_ENV_VAR


def get_state_dir() -> Path:
    """
    Get wslprovision state directory (logs, config).

    Returns:
        Path from $WSLPROVISION_HOME, falling back to ~/.wslprovision
    """
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / DEFAULT_HOME_DIRNAME


def is_elevated() -> bool:
    """
    Check whether the host process runs with administrator privileges.

    Returns:
        True on Windows when running elevated, True on POSIX when euid is 0
    """
    if os.name == "nt":
        try:
            return bool(ctypes.windll.shell32.IsUserAnAdmin())
        except (AttributeError, OSError):
            return False
    return os.geteuid() == 0


def shell_bool(value: bool) -> str:
    """Render a boolean as a guest positional argument."""
    return "true" if value else "false"
