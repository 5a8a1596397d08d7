"""Read-only git queries.

Each query returns None when git can't answer: not a repository, git
missing, non-zero exit, timeout, or output that isn't UTF-8. Callers
pick their own fallback.
"""

import logging
import subprocess

from push_guard import config

logger = logging.getLogger(__name__)

_HEAD_BRANCH_PREFIX = "HEAD branch:"


class GitProbe:
    def __init__(self, cwd=None):
        self.cwd = str(cwd) if cwd is not None else None
        self._default_branches: dict[str, str | None] = {}

    def _git(self, *args, timeout=None):
        """Run git and return stripped stdout, or None on any failure."""
        try:
            result = subprocess.run(  # noqa: S603, S607
                ["git", *args],
                cwd=self.cwd,
                capture_output=True,
                timeout=timeout if timeout is not None else config.git_timeout(),
            )
        except (OSError, ValueError, subprocess.SubprocessError) as e:
            logger.debug("git %s failed: %s", " ".join(args), e)
            return None
        if result.returncode != 0:
            return None
        try:
            out = result.stdout.decode("utf-8").strip()
        except UnicodeDecodeError:
            return None
        return out or None

    def repo_root(self) -> str | None:
        return self._git("rev-parse", "--show-toplevel")

    def current_branch(self) -> str | None:
        # symbolic-ref fails on a detached HEAD instead of printing "HEAD"
        return self._git("symbolic-ref", "--short", "-q", "HEAD")

    def tracking_pair(self) -> tuple[str, str] | None:
        """(remote, branch) of the current branch's upstream."""
        upstream = self._git("rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{u}")
        if not upstream or "/" not in upstream:
            return None
        remote, branch = upstream.split("/", 1)
        if not remote or not branch:
            return None
        return remote, branch

    def default_branch(self, remote: str) -> str | None:
        """Branch the remote's HEAD points at. Local ref first, then `git remote show`."""
        if remote in self._default_branches:
            return self._default_branches[remote]
        branch = self._default_from_local_ref(remote) or self._default_from_remote_show(remote)
        logger.debug("Default branch of %r: %r", remote, branch)
        self._default_branches[remote] = branch
        return branch

    def _default_from_local_ref(self, remote):
        ref = self._git("symbolic-ref", "--short", f"refs/remotes/{remote}/HEAD")
        if not ref:
            return None
        prefix = f"{remote}/"
        branch = ref[len(prefix) :] if ref.startswith(prefix) else ref
        return branch or None

    def _default_from_remote_show(self, remote):
        out = self._git("remote", "show", remote, timeout=config.remote_timeout())
        if not out:
            return None
        for line in out.splitlines():
            line = line.strip()
            if line.startswith(_HEAD_BRANCH_PREFIX):
                branch = line[len(_HEAD_BRANCH_PREFIX) :].strip()
                if branch and branch != "(unknown)":
                    return branch
                return None
        return None
