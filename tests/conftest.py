import os
import shutil
import subprocess
import sys
from pathlib import Path

import pytest

from push_guard.ledger import Ledger

ROOT = Path(__file__).resolve().parent.parent

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


class FakeProbe:
    """Stand-in for GitProbe with canned answers. Records default_branch calls."""

    def __init__(self, root=None, branch=None, upstream=None, defaults=None):
        self.root = root
        self.branch = branch
        self.upstream = upstream
        self.defaults = defaults or {}
        self.default_calls = []

    def repo_root(self):
        return self.root

    def current_branch(self):
        return self.branch

    def tracking_pair(self):
        return self.upstream

    def default_branch(self, remote):
        self.default_calls.append(remote)
        return self.defaults.get(remote)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point state and logs into tmp_path; never touch the real home dir."""
    state = tmp_path / "state" / "state.json"
    monkeypatch.setenv("PUSH_GUARD_STATE_FILE", str(state))
    monkeypatch.setenv("PUSH_GUARD_LOG_FILE", str(tmp_path / "logs" / "push-guard.log"))
    monkeypatch.setenv("PUSH_GUARD_LOG_LEVEL", "off")
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path.parent))
    monkeypatch.delenv("NO_COLOR", raising=False)
    return state


@pytest.fixture
def state_file(isolated_env):
    return isolated_env


@pytest.fixture
def ledger():
    return Ledger()


@pytest.fixture
def workdir(tmp_path):
    """A directory that is not inside any git repository."""
    d = tmp_path / "work"
    d.mkdir()
    return d


def run_cli(*args, stdin=None, cwd=None, env=None):
    """Invoke `python -m push_guard` as a subprocess (env inherits the fixtures)."""
    full_env = os.environ.copy()
    full_env["PYTHONPATH"] = os.pathsep.join(
        p for p in (str(ROOT), full_env.get("PYTHONPATH", "")) if p
    )
    if env:
        full_env.update(env)
    return subprocess.run(
        [sys.executable, "-m", "push_guard", *args],
        input=stdin,
        capture_output=True,
        text=True,
        cwd=cwd,
        env=full_env,
    )


def git(cwd, *args):
    subprocess.run(
        [
            "git",
            "-c", "user.name=Test",
            "-c", "user.email=test@example.com",
            "-c", "commit.gpgsign=false",
            *args,
        ],
        cwd=cwd,
        check=True,
        capture_output=True,
    )


@pytest.fixture
def git_repo(tmp_path):
    """Repo on branch 'feature' whose origin/HEAD points at origin/main."""
    if shutil.which("git") is None:
        pytest.skip("git not installed")
    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, "init", "-q")
    git(repo, "symbolic-ref", "HEAD", "refs/heads/feature")
    git(repo, "commit", "-q", "--allow-empty", "-m", "init")
    git(repo, "remote", "add", "origin", str(tmp_path / "no-such-remote.git"))
    git(repo, "update-ref", "refs/remotes/origin/main", "HEAD")
    git(repo, "symbolic-ref", "refs/remotes/origin/HEAD", "refs/remotes/origin/main")
    return repo
