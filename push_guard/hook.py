"""PreToolUse hook driver.

Reads the hook payload from stdin, records branches the command creates,
then checks every push in it. Exit 1 blocks (the host turns that into its
own soft block); anything that goes wrong short of a block exits 0, since
a broken guard must never wedge the agent.
"""

import json
import logging
import sys

from push_guard import color
from push_guard.commands import parse_command
from push_guard.evaluator import evaluate
from push_guard.ledger import Ledger, LedgerError
from push_guard.probe import GitProbe

logger = logging.getLogger(__name__)

_MAX_INPUT = 10 * 1024 * 1024  # 10 MB

UNKNOWN_REPO = "unknown"


def _fail_open(message):
    logger.warning(message)
    print(f"push-guard: {message} -- failing open", file=sys.stderr)
    return 0


def _extract_command(data):
    tool_input = data.get("tool_input")
    if not isinstance(tool_input, dict):
        return ""
    command = tool_input.get("command")
    return command if isinstance(command, str) else ""


def run(raw: bytes, probe=None, state_path=None) -> int:
    """Process one hook payload and return the exit status."""
    if len(raw) > _MAX_INPUT:
        return _fail_open("hook input exceeds 10 MB")
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError):
        return _fail_open("malformed/empty JSON hook input")
    if not isinstance(data, dict):
        return _fail_open("hook input is not a JSON object")

    command = _extract_command(data).strip()
    if not command:
        return 0

    if probe is None:
        probe = GitProbe()
    parsed = parse_command(command, probe)
    if not parsed.creations and not parsed.pushes:
        return 0
    repo = probe.repo_root() or UNKNOWN_REPO

    try:
        ledger = Ledger.load(state_path)
    except LedgerError as e:
        return _fail_open(str(e))

    # Creations are committed before any push is judged, so
    # `git checkout -b x && git push origin x` goes through.
    if parsed.creations:
        for branch in parsed.creations:
            ledger.track(repo, branch)
            logger.info("TRACKED: %s in %s", branch, repo)
        try:
            ledger.save(state_path)
        except LedgerError as e:
            logger.warning("Tracking not saved: %s", e)

    for push in parsed.pushes:
        decision = evaluate(
            repo, push.remote, push.branch, push.force, ledger=ledger, probe=probe
        )
        if not decision.allowed:
            logger.info("BLOCKED: %s | Reason: %s", command, decision.reason.splitlines()[0])
            print(color.paint(decision.reason, color.RED, stream=sys.stderr), file=sys.stderr)
            return 1
        logger.debug("ALLOWED: push %s %s in %s", push.remote, push.branch, repo)
    return 0


def main() -> int:
    try:
        raw = sys.stdin.buffer.read(_MAX_INPUT + 1)
        if len(raw) > _MAX_INPUT:
            # Drain the rest so the writer never blocks on a full pipe
            while sys.stdin.buffer.read(1024 * 1024):
                pass
    except OSError as e:
        return _fail_open(f"could not read hook input: {e}")
    return run(raw)
