"""Tests for push_guard.commands

Pure parsing tests; git answers come from FakeProbe.
"""

import pytest
from conftest import FakeProbe

from push_guard.commands import (
    ParsedCommand,
    PushIntent,
    parse_command,
    parse_push_args,
    split_segments,
)


def parse(command, **probe_kwargs):
    return parse_command(command, FakeProbe(**probe_kwargs))


class TestSplitSegments:
    @pytest.mark.parametrize(
        "command, expected",
        [
            ("git status", [["git", "status"]]),
            ("a; b", [["a"], ["b"]]),
            ("a && b", [["a"], ["b"]]),
            ("a & b;c", [["a"], ["b"], ["c"]]),
            ("a || b", [["a", "||", "b"]]),
            ("  ", []),
            (";;&&", []),
        ],
        ids=["single", "semicolon", "and-and", "mixed", "pipes-not-split", "blank", "only-seps"],
    )
    def test_split(self, command, expected):
        assert split_segments(command) == expected


# ═══════════════════════════════════════════════════════════════════════════════
# Branch creation
# ═══════════════════════════════════════════════════════════════════════════════


class TestCreations:
    @pytest.mark.parametrize(
        "command, expected",
        [
            ("git checkout -b feat", ["feat"]),
            ("git checkout -B feat", ["feat"]),
            ("git switch -c feat", ["feat"]),
            ("git switch -C feat", ["feat"]),
            ("git checkout -bfeat x", ["x"]),
            ("git checkout -b feat origin/main", ["origin/main"]),
            ("git checkout -q -b feat", ["feat"]),
            ("git branch feat", ["feat"]),
            ("git branch feat origin/main", ["feat"]),
            ("git branch -f feat base", ["feat"]),
            ("git checkout feat", []),
            ("git switch feat", []),
            ("git checkout -b", []),
            ("git branch", []),
            ("git branch -a", []),
            ("git commit -m x", []),
            ("echo git", []),
        ],
        ids=[
            "checkout-b",
            "checkout-B",
            "switch-c",
            "switch-C",
            "clustered-flag",
            "last-positional-wins",
            "leading-flag",
            "branch",
            "branch-first-positional",
            "branch-with-flag",
            "checkout-existing",
            "switch-existing",
            "flag-without-name",
            "branch-list",
            "branch-list-flag",
            "other-subcommand",
            "git-last-token",
        ],
    )
    def test_creation(self, command, expected):
        assert parse(command).creations == expected

    def test_one_creation_per_keyword(self):
        result = parse("git branch a; git checkout -b b & git switch -c c")
        assert result.creations == ["a", "b", "c"]

    def test_two_gits_in_one_segment(self):
        # Remainder runs to the end of the segment for each occurrence
        assert parse("git branch a git branch b").creations == ["a", "b"]


# ═══════════════════════════════════════════════════════════════════════════════
# Push arguments
# ═══════════════════════════════════════════════════════════════════════════════


class TestParsePushArgs:
    @pytest.mark.parametrize(
        "args, positionals, force",
        [
            ([], [], False),
            (["origin", "main"], ["origin", "main"], False),
            (["--force", "origin", "x"], ["origin", "x"], True),
            (["-f"], [], True),
            (["--force-with-lease", "origin"], ["origin"], True),
            (["--force-if-includes"], [], True),
            (["-u", "origin", "x"], ["origin", "x"], False),
            (["--set-upstream", "origin"], ["origin"], False),
            (["-o", "ci.skip", "origin", "x"], ["origin", "x"], False),
            (["--push-option", "v", "origin"], ["origin"], False),
            (["--receive-pack", "rp", "origin"], ["origin"], False),
            (["--exec", "rp", "origin"], ["origin"], False),
            (["origin", "-o"], ["origin"], False),
            (["--force-with-lease=main:abc", "origin"], ["origin"], False),
        ],
        ids=[
            "empty",
            "remote-branch",
            "force-long",
            "force-short",
            "force-with-lease",
            "force-if-includes",
            "valueless-flag",
            "valueless-long-flag",
            "push-option-short",
            "push-option-long",
            "receive-pack",
            "exec",
            "value-flag-at-end",
            "lease-with-value-is-plain-flag",
        ],
    )
    def test_args(self, args, positionals, force):
        assert parse_push_args(args) == (positionals, force)


# ═══════════════════════════════════════════════════════════════════════════════
# Push target resolution
# ═══════════════════════════════════════════════════════════════════════════════


class TestPushes:
    def test_remote_and_branch(self):
        assert parse("git push origin feat").pushes == [PushIntent("origin", "feat", False)]

    def test_refspec_destination(self):
        assert parse("git push origin HEAD:main").pushes == [PushIntent("origin", "main", False)]

    def test_delete_refspec(self):
        assert parse("git push origin :old").pushes == [PushIntent("origin", "old", False)]

    def test_force(self):
        assert parse("git push -f origin feat").pushes == [PushIntent("origin", "feat", True)]

    def test_remote_only_uses_current_branch(self):
        result = parse("git push upstream", branch="topic")
        assert result.pushes == [PushIntent("upstream", "topic", False)]

    def test_remote_only_without_current_branch(self):
        assert parse("git push upstream").pushes == [PushIntent("upstream", "", False)]

    def test_bare_push_uses_tracking_pair(self):
        result = parse("git push", branch="local", upstream=("fork", "remote-name"))
        assert result.pushes == [PushIntent("fork", "remote-name", False)]

    def test_bare_push_falls_back_to_origin_and_current_branch(self):
        assert parse("git push", branch="local").pushes == [PushIntent("origin", "local", False)]

    def test_bare_push_nothing_known(self):
        assert parse("git push --force").pushes == [PushIntent("origin", "", True)]

    def test_first_push_per_segment_wins(self):
        result = parse("git push origin a git push origin b")
        assert result.pushes == [PushIntent("origin", "a", False)]

    def test_pushes_in_segment_order(self):
        result = parse("git push origin a; git push -f fork b && git push origin c")
        assert result.pushes == [
            PushIntent("origin", "a", False),
            PushIntent("fork", "b", True),
            PushIntent("origin", "c", False),
        ]

    def test_not_a_push(self):
        assert parse("git pull origin main").pushes == []

    def test_push_word_without_git(self):
        assert parse("echo push origin main").pushes == []


class TestChained:
    def test_create_then_push(self):
        result = parse("git checkout -b feat && git push origin feat")
        assert result == ParsedCommand(["feat"], [PushIntent("origin", "feat", False)])

    @pytest.mark.parametrize(
        "command",
        [
            "",
            "git",
            "git push origin 'quoted branch'",
            "$(git push) `git branch x` | git push ::: -o",
            "git checkout -b \x00 \udcff",
            ";&;&",
            "git push -o",
        ],
        ids=["empty", "lone-git", "quotes", "substitution", "odd-chars", "separators", "dangling"],
    )
    def test_parser_is_total(self, command):
        result = parse(command)
        assert isinstance(result.creations, list)
        assert isinstance(result.pushes, list)

    def test_none_command_is_empty(self):
        assert parse_command(None, FakeProbe()) == ParsedCommand([], [])
