"""Exit statuses returned by ``pcactl`` commands."""
from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Well-known exit codes shared by every subcommand."""

    OK = 0
    # Unresolved settings under --strict, or an unknown setting name.
    VALIDATION = 2
    # puppet.conf exists but cannot be read.
    ENVIRONMENT = 3
