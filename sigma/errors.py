"""Exceptions raised while collecting system facts."""

from __future__ import annotations

from typing import Optional, Sequence


class SigmaError(Exception):
    """Base class for every failure the CLI reports to the user."""


class ReadError(SigmaError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"cannot read {path}: {reason}")
        self.path = path


class ParseError(SigmaError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"cannot parse {path}: {reason}")
        self.path = path


class DistroResolutionError(SigmaError):
    pass


class UnsupportedManagerError(SigmaError):
    def __init__(self, manager: str) -> None:
        super().__init__(f"unsupported package manager: {manager}")
        self.manager = manager


class CommandExecutionError(SigmaError):
    def __init__(self, command: Sequence[str], reason: str, returncode: Optional[int] = None) -> None:
        super().__init__(f"command {' '.join(command)!r} failed: {reason}")
        self.command = list(command)
        self.returncode = returncode


class ConfigError(SigmaError):
    pass
