"""Environment-driven configuration.

Everything is read at call time so tests (and the hook host) can
override paths per invocation.
"""

import os
import sys
from pathlib import Path

APP_NAME = "push-guard"
STATE_FILENAME = "state.json"

_DEFAULT_GIT_TIMEOUT = 5.0
_DEFAULT_REMOTE_TIMEOUT = 10.0
_LOG_LEVELS = ("off", "actions", "all")


def data_dir() -> Path:
    """Per-user data directory for the current platform."""
    if sys.platform == "win32":
        base = os.environ.get("LOCALAPPDATA")
        if base:
            return Path(base)
        return Path.home() / "AppData" / "Local"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg and os.path.isabs(xdg):
        return Path(xdg)
    return Path.home() / ".local" / "share"


def state_path() -> Path:
    override = os.environ.get("PUSH_GUARD_STATE_FILE")
    if override:
        return Path(override)
    return data_dir() / APP_NAME / STATE_FILENAME


def log_path() -> Path:
    override = os.environ.get("PUSH_GUARD_LOG_FILE")
    if override:
        return Path(override)
    return Path.home() / ".claude" / "logs" / f"{APP_NAME}.log"


def log_level() -> str:
    """One of "off", "actions" (default) or "all"."""
    level = os.environ.get("PUSH_GUARD_LOG_LEVEL", "actions").strip().lower()
    return level if level in _LOG_LEVELS else "actions"


def _timeout(var, default):
    raw = os.environ.get(var)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def git_timeout() -> float:
    return _timeout("PUSH_GUARD_GIT_TIMEOUT", _DEFAULT_GIT_TIMEOUT)


def remote_timeout() -> float:
    """Bound on `git remote show`, which goes over the network."""
    return _timeout("PUSH_GUARD_REMOTE_TIMEOUT", _DEFAULT_REMOTE_TIMEOUT)


def color_disabled() -> bool:
    return bool(os.environ.get("NO_COLOR"))
