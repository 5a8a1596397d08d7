"""push-guard -- git push authorization guard for Claude Code hooks.

Tracks branches the agent creates, lets the operator grant push
authorizations, and blocks force pushes and pushes to a remote's
default branch.
"""

import logging

__version__ = "0.3.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
