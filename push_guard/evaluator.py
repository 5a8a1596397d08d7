"""Allow/block decision for a single push.

Rules, first match wins:

  1. no branch identified        -> allow
  2. force push                  -> block
  3. branch is the remote's HEAD -> block
  4. tracked or authorized       -> allow
  5. otherwise                   -> block

Rule 3 asks the remote which branch its HEAD points at rather than
matching names like "main", so renamed or unusual default branches are
handled. If the remote can't be asked, rule 3 doesn't fire.
"""

from typing import NamedTuple


class Decision(NamedTuple):
    allowed: bool
    reason: str = ""

    @classmethod
    def allow(cls):
        return cls(True)

    @classmethod
    def block(cls, reason):
        return cls(False, reason)


def _force_reason(branch):
    return (
        f"BLOCKED: Force push to '{branch}' requires explicit user authorization.\n"
        'Say "I authorize" to proceed.'
    )


def _default_branch_reason(remote, branch):
    return (
        f"BLOCKED: '{branch}' is the default branch of '{remote}'.\n"
        "Recommendation: push to a feature branch instead.\n"
        f"To push to '{branch}' directly, say \"I authorize\"."
    )


def _unknown_branch_reason(repo, branch):
    return (
        f"BLOCKED: Branch '{branch}' was not created by me and has no authorization.\n"
        f"To authorize pushes: push-guard authorize --repo '{repo}' --branch '{branch}'\n"
        f"To revoke later: push-guard revoke --repo '{repo}' --branch '{branch}'"
    )


def evaluate(repo: str, remote: str, branch: str, force: bool, *, ledger, probe) -> Decision:
    """Decide whether pushing *branch* of *repo* to *remote* is allowed.

    Neither tracking nor authorization is consumed by an allowed push.
    """
    if not branch:
        return Decision.allow()
    if force:
        return Decision.block(_force_reason(branch))
    if probe.default_branch(remote) == branch:
        return Decision.block(_default_branch_reason(remote, branch))
    if ledger.is_tracked(repo, branch) or ledger.is_authorized(repo, branch):
        return Decision.allow()
    return Decision.block(_unknown_branch_reason(repo, branch))
