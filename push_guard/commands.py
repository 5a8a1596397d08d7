"""Extract branch creations and pushes from an agent's shell command.

This is a token scanner, not a shell: quotes, escapes, $(...) and pipes
are not interpreted. Segments are split on every ';' and '&', then on
whitespace.
"""

import re
from typing import NamedTuple

_SEGMENT_SPLIT = re.compile(r"[;&]")

_CREATE_FLAGS = ("-b", "-B", "-c", "-C")
_FORCE_FLAGS = frozenset({"--force", "-f", "--force-with-lease", "--force-if-includes"})
# Flags whose next token is their value
_VALUE_FLAGS = frozenset({"-o", "--push-option", "--receive-pack", "--exec"})

DEFAULT_REMOTE = "origin"


class PushIntent(NamedTuple):
    remote: str
    branch: str
    force: bool


class ParsedCommand(NamedTuple):
    creations: list[str]
    pushes: list[PushIntent]


def split_segments(command: str) -> list[list[str]]:
    """Token lists for each ';'/'&'-separated segment (empty segments dropped)."""
    segments = []
    for segment in _SEGMENT_SPLIT.split(command):
        tokens = segment.split()
        if tokens:
            segments.append(tokens)
    return segments


def _is_flag(token):
    return token.startswith("-")


def _created_branch(subcmd, rest):
    if subcmd in ("checkout", "switch"):
        if not any(t.startswith(flag) for t in rest for flag in _CREATE_FLAGS):
            return None
        names = [t for t in rest if not _is_flag(t)]
        return names[-1] if names else None
    if subcmd == "branch":
        return next((t for t in rest if not _is_flag(t)), None)
    return None


def parse_push_args(args):
    """Split `git push` arguments into (positionals, force)."""
    positionals = []
    force = False
    skip_next = False
    for token in args:
        if skip_next:
            skip_next = False
            continue
        if token in _FORCE_FLAGS:
            force = True
        elif token in _VALUE_FLAGS:
            skip_next = True
        elif _is_flag(token):
            continue
        else:
            positionals.append(token)
    return positionals, force


def _resolve_target(positionals, probe):
    if not positionals:
        pair = probe.tracking_pair()
        if pair is not None:
            return pair
        return DEFAULT_REMOTE, probe.current_branch() or ""
    remote = positionals[0]
    branch = positionals[1] if len(positionals) > 1 else probe.current_branch() or ""
    if ":" in branch:
        # refspec src:dst -- only the destination matters
        branch = branch.split(":", 1)[1]
    return remote, branch


def parse_command(command: str, probe) -> ParsedCommand:
    """Find branch creations and push intents, in segment order.

    *probe* answers `tracking_pair()` and `current_branch()` for pushes
    that don't name their target.
    """
    creations: list[str] = []
    pushes: list[PushIntent] = []
    for tokens in split_segments(command or ""):
        push_seen = False
        for i in range(len(tokens) - 1):
            if tokens[i] != "git":
                continue
            subcmd = tokens[i + 1]
            created = _created_branch(subcmd, tokens[i + 2 :])
            if created:
                creations.append(created)
            if subcmd == "push" and not push_seen:
                push_seen = True
                positionals, force = parse_push_args(tokens[i + 2 :])
                remote, branch = _resolve_target(positionals, probe)
                pushes.append(PushIntent(remote, branch, force))
    return ParsedCommand(creations, pushes)
