"""Shell utilities.

Provides a simple wrapper around subprocess for running external tools,
plus output formatting helpers.
"""

from __future__ import annotations

import subprocess
from pathlib import Path


def run(
    *args: str, cwd: Path | str | None = None, check: bool = True
) -> subprocess.CompletedProcess[bytes]:
    """Run an external command.

    Output is not captured - it streams directly to the terminal so users
    can see what the tool is doing (provider downloads, etc.).

    Args:
        *args: Command and arguments (e.g., "terraform", "providers", "lock").
        cwd: Working directory for the command. Defaults to the current one.
        check: If True (default), raise on non-zero exit.

    Returns:
        CompletedProcess with returncode for checking success.
    """
    return subprocess.run(args, cwd=cwd, check=check)


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Marks the start of each update and each lock regeneration, so the
    lock tool's own output is easy to tell apart.
    """
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")
