"""Backend mode value object.

Defines the available Claude Code client backends.
"""

from enum import Enum


class BackendMode(str, Enum):
    """Claude Code backend execution mode.

    CLI: claude CLI subprocess with JSON output.
    SDK: claude-agent-sdk query stream.
    """

    CLI = "cli"
    SDK = "sdk"

    @property
    def description(self) -> str:
        """Human readable description for logs and diagnostics."""
        if self is BackendMode.SDK:
            return "Claude Agent SDK"
        return "Claude Code CLI subprocess"
