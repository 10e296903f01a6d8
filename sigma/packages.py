"""Count installed packages by asking the native package database."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Sequence, Tuple

from .commands import run_command
from .config import DEFAULT_COMMAND_TIMEOUT
from .distro import PackageManagerKind
from .errors import UnsupportedManagerError

logger = logging.getLogger(__name__)

ENUMERATION_COMMANDS: Dict[PackageManagerKind, Tuple[str, ...]] = {
    PackageManagerKind.PACMAN: ("pacman", "-Q"),
    PackageManagerKind.APT: ("dpkg", "--get-selections"),
    PackageManagerKind.DNF: ("rpm", "-qa"),
    PackageManagerKind.YUM: ("rpm", "-qa"),
}


def count_output_lines(output: str) -> int:
    """One package per non-empty line; empty output counts as zero."""
    return sum(1 for line in output.splitlines() if line.strip())


def count_packages(
    manager: PackageManagerKind,
    timeout: float = DEFAULT_COMMAND_TIMEOUT,
    runner: Callable[[Sequence[str], float], str] = run_command,
) -> int:
    """Return the number of installed packages known to ``manager``.

    Raises UnsupportedManagerError when there is no enumeration command for the
    manager and CommandExecutionError when the command fails.
    """
    command = ENUMERATION_COMMANDS.get(manager)
    if command is None:
        raise UnsupportedManagerError(manager.value)
    count = count_output_lines(runner(command, timeout))
    logger.debug("%s reported %d packages", " ".join(command), count)
    return count
