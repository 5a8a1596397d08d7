"""ANSI styling, only when the target stream is a terminal."""

import sys

from push_guard import config

RED = "\033[91m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
CYAN = "\033[96m"
BOLD = "\033[1m"
RESET = "\033[0m"


def enabled(stream) -> bool:
    if config.color_disabled():
        return False
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:  # closed stream
        return False


def paint(text: str, *codes: str, stream=None) -> str:
    """Wrap *text* in *codes* if *stream* (default stdout) is a TTY."""
    if stream is None:
        stream = sys.stdout
    if not codes or not enabled(stream):
        return text
    return "".join(codes) + text + RESET
