"""
CLI entry point for push-guard.

Usage:
    push-guard hook                                   Run as a PreToolUse hook (reads stdin)
    push-guard check --repo R --remote N --branch B   Check whether a push is allowed
    push-guard track --repo R --branch B              Mark a branch as created by the agent
    push-guard authorize --repo R --branch B          Allow pushes to a branch
    push-guard revoke --repo R --branch B             Remove an authorization
    push-guard list [--repo R] [--json]               Show tracked and authorized branches
    push-guard clean [--repo R] [--stale]             Forget a repo, or repos that no longer exist

Exit codes: 0 allow/success, 1 block or error.
"""

import argparse
import json
import logging
import sys

from push_guard import __version__, color, hook, logs
from push_guard.evaluator import evaluate
from push_guard.ledger import Ledger, LedgerError
from push_guard.probe import GitProbe

logger = logging.getLogger(__name__)


def _err(message, *codes):
    print(color.paint(message, *codes, stream=sys.stderr), file=sys.stderr)


def cmd_hook(args):
    return hook.main()


def cmd_check(args):
    """Run the evaluator for one push."""
    ledger = Ledger.load()
    decision = evaluate(
        args.repo,
        args.remote,
        args.branch,
        args.force,
        ledger=ledger,
        probe=GitProbe(cwd=args.repo),
    )
    if decision.allowed:
        logger.debug("ALLOWED: check %s %s in %s", args.remote, args.branch, args.repo)
        if args.dry_run:
            _err(f"ALLOWED: push to '{args.branch}' on '{args.remote}'", color.GREEN)
        return 0
    logger.info("BLOCKED: check %s %s in %s", args.remote, args.branch, args.repo)
    _err(decision.reason, color.RED)
    return 0 if args.dry_run else 1


def cmd_track(args):
    ledger = Ledger.load()
    ledger.track(args.repo, args.branch)
    ledger.save()
    logger.info("TRACKED: %s in %s", args.branch, args.repo)
    _err(f"Tracking '{args.branch}' in '{args.repo}'", color.GREEN)
    return 0


def cmd_authorize(args):
    ledger = Ledger.load()
    ledger.authorize(args.repo, args.branch)
    ledger.save()
    logger.info("AUTHORIZED: %s in %s", args.branch, args.repo)
    _err(f"Authorized push to '{args.branch}' in '{args.repo}'", color.GREEN)
    return 0


def cmd_revoke(args):
    ledger = Ledger.load()
    ledger.revoke(args.repo, args.branch)
    ledger.save()
    logger.info("REVOKED: %s in %s", args.branch, args.repo)
    _err(f"Revoked authorization for '{args.branch}' in '{args.repo}'", color.YELLOW)
    return 0


def _tag(label):
    return color.paint(label, color.CYAN if label == "[claude]" else color.YELLOW)


def cmd_list(args):
    """Print tracked and authorized branches, as text or JSON."""
    ledger = Ledger.load()

    if args.json:
        if args.repo:
            tracked, authorized = ledger.branches(args.repo)
            doc = {"tracked": tracked, "authorized": authorized}
        else:
            doc = ledger.to_dict()
        print(json.dumps(doc, indent=2))
        return 0

    if args.repo:
        tracked, authorized = ledger.branches(args.repo)
        print(f"Repo: {color.paint(args.repo, color.BOLD)}")
        for b in tracked:
            print(f"  {_tag('[claude]')}     {b}")
        for b in authorized:
            print(f"  {_tag('[authorized]')} {b}")
        return 0

    if not ledger.repos():
        print("No tracked or authorized branches.")
        return 0
    for repo, branches in ledger.tracked.items():
        for b in branches:
            print(f"{_tag('[claude]')}     {repo}  ::  {b}")
    for repo, branches in ledger.authorized.items():
        for b in branches:
            print(f"{_tag('[authorized]')} {repo}  ::  {b}")
    return 0


def cmd_clean(args):
    if not args.repo and not args.stale:
        _err("clean: specify --repo <path>, --stale, or both")
        return 1
    ledger = Ledger.load()
    if args.repo:
        ledger.clean_repo(args.repo)
        logger.info("CLEANED: %s", args.repo)
        _err(f"Removed entries for '{args.repo}'", color.YELLOW)
    if args.stale:
        removed = ledger.clean_stale()
        for repo in removed:
            logger.info("CLEANED (stale): %s", repo)
            _err(f"Removed stale repo '{repo}'", color.YELLOW)
        if not removed:
            _err("No stale entries.")
    ledger.save()
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog="push-guard",
        description="Git push authorization manager for Claude Code hooks",
    )
    parser.add_argument("--version", action="version", version=f"push-guard {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # hook
    hook_p = subparsers.add_parser("hook", help="Run as a PreToolUse hook (JSON on stdin)")
    hook_p.set_defaults(func=cmd_hook)

    # check
    check_p = subparsers.add_parser(
        "check",
        help="Check if a push is allowed (exit 0 allow, 1 blocked)",
    )
    check_p.add_argument("--repo", required=True)
    check_p.add_argument("--remote", required=True)
    check_p.add_argument("--branch", required=True)
    check_p.add_argument("--force", action="store_true", help="The push is a force push")
    check_p.add_argument(
        "--dry-run", action="store_true", help="Print the decision but always exit 0"
    )
    check_p.set_defaults(func=cmd_check)

    # track / authorize / revoke
    for name, func, help_text in (
        ("track", cmd_track, "Mark a branch as created by the agent"),
        ("authorize", cmd_authorize, "Allow pushes to a branch the agent did not create"),
        ("revoke", cmd_revoke, "Revoke a previously granted authorization"),
    ):
        p = subparsers.add_parser(name, help=help_text)
        p.add_argument("--repo", required=True)
        p.add_argument("--branch", required=True)
        p.set_defaults(func=func)

    # list
    list_p = subparsers.add_parser("list", help="List tracked and authorized branches")
    list_p.add_argument("--repo", help="Only show this repo")
    list_p.add_argument("--json", action="store_true", help="Machine-readable output")
    list_p.set_defaults(func=cmd_list)

    # clean
    clean_p = subparsers.add_parser("clean", help="Remove ledger entries")
    clean_p.add_argument("--repo", help="Remove every entry for this repo")
    clean_p.add_argument(
        "--stale", action="store_true", help="Remove repos whose paths no longer exist"
    )
    clean_p.set_defaults(func=cmd_clean)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    logs.setup_logging()
    try:
        return args.func(args)
    except LedgerError as e:
        logger.error("%s", e)
        _err(f"push-guard: {e}", color.RED)
        return 1


if __name__ == "__main__":
    sys.exit(main())
