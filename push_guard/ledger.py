"""Persistent record of which branches may be pushed.

Two mappings from repo path to branch names:

  tracked     branches the agent created itself (freely pushable)
  authorized  branches the operator has explicitly allowed

The file is loaded whole, mutated in memory and rewritten whole. There is
no locking; the hook host runs hook invocations one at a time.
"""

import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path

from push_guard import config

logger = logging.getLogger(__name__)

_FIELDS = ("tracked", "authorized")


class LedgerError(Exception):
    """Ledger file could not be read, parsed or written."""


class LedgerParseError(LedgerError):
    pass


class LedgerIOError(LedgerError):
    pass


def _parse_mapping(field, raw, path):
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise LedgerParseError(
            f"Failed to parse state file {path}: '{field}' must be an object, "
            f"got {type(raw).__name__}"
        )
    mapping = {}
    for repo, branches in raw.items():
        if not isinstance(branches, list) or not all(isinstance(b, str) for b in branches):
            raise LedgerParseError(
                f"Failed to parse state file {path}: '{field}.{repo}' must be an array of strings"
            )
        unique = list(dict.fromkeys(branches))
        if unique:
            mapping[repo] = unique
    return mapping


class Ledger:
    def __init__(self, tracked=None, authorized=None):
        self.tracked: dict[str, list[str]] = {r: list(b) for r, b in (tracked or {}).items()}
        self.authorized: dict[str, list[str]] = {
            r: list(b) for r, b in (authorized or {}).items()
        }

    def __eq__(self, other):
        if not isinstance(other, Ledger):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"Ledger(tracked={self.tracked!r}, authorized={self.authorized!r})"

    # ── Persistence ──

    @classmethod
    def load(cls, path=None):
        """Read the ledger. A missing, empty or whitespace-only file is an empty ledger."""
        path = Path(path) if path is not None else config.state_path()
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return cls()
        except (OSError, UnicodeDecodeError) as e:
            raise LedgerIOError(f"Failed to read state from {path}: {e}") from e
        if not text.strip():
            return cls()
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise LedgerParseError(f"Failed to parse state file {path}: {e}") from e
        if not isinstance(raw, dict):
            raise LedgerParseError(
                f"Failed to parse state file {path}: expected an object, got {type(raw).__name__}"
            )
        return cls(
            tracked=_parse_mapping("tracked", raw.get("tracked"), path),
            authorized=_parse_mapping("authorized", raw.get("authorized"), path),
        )

    def save(self, path=None):
        """Rewrite the whole file via a temp file + rename in the same directory."""
        path = Path(path) if path is not None else config.state_path()
        contents = json.dumps(self.to_dict(), indent=2, sort_keys=True) + "\n"
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(contents)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
            raise LedgerIOError(f"Failed to write state to {path}: {e}") from e

    def to_dict(self):
        """Persisted shape, with empty repos dropped."""
        return {
            "tracked": {r: list(b) for r, b in self.tracked.items() if b},
            "authorized": {r: list(b) for r, b in self.authorized.items() if b},
        }

    # ── Queries ──

    def is_tracked(self, repo: str, branch: str) -> bool:
        return branch in self.tracked.get(repo, ())

    def is_authorized(self, repo: str, branch: str) -> bool:
        return branch in self.authorized.get(repo, ())

    def repos(self) -> list[str]:
        """Every repo present in either mapping, first-seen order."""
        return list(dict.fromkeys([*self.tracked, *self.authorized]))

    def branches(self, repo: str) -> tuple[list[str], list[str]]:
        return list(self.tracked.get(repo, ())), list(self.authorized.get(repo, ()))

    # ── Mutations ──

    def track(self, repo: str, branch: str) -> None:
        branches = self.tracked.setdefault(repo, [])
        if branch not in branches:
            branches.append(branch)

    def authorize(self, repo: str, branch: str) -> None:
        branches = self.authorized.setdefault(repo, [])
        if branch not in branches:
            branches.append(branch)

    def revoke(self, repo: str, branch: str) -> None:
        """Drop an authorization. Tracking is left alone."""
        branches = self.authorized.get(repo)
        if branches is None:
            return
        if branch in branches:
            branches.remove(branch)
        if not branches:
            del self.authorized[repo]

    def clean_repo(self, repo: str) -> None:
        self.tracked.pop(repo, None)
        self.authorized.pop(repo, None)

    def clean_stale(self) -> list[str]:
        """Forget repos whose paths no longer exist. Returns the removed repo paths."""
        removed = [repo for repo in self.repos() if not os.path.exists(repo)]
        for repo in removed:
            self.clean_repo(repo)
        if removed:
            logger.debug("Stale repos removed: %s", ", ".join(removed))
        return removed
