"""
CLI commands for covergate.
"""

from covergate.cli.init import init_command
from covergate.cli.tag import suggest_command, tag_command, untag_command
from covergate.cli.verify import run_verification, verify_command

__all__ = [
    "verify_command",
    "run_verification",
    "init_command",
    "tag_command",
    "untag_command",
    "suggest_command",
]
