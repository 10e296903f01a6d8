"""Identify the Linux distribution and its package manager."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
import logging
import shutil
from typing import Callable, Dict, List, Optional, Protocol, Sequence

from .commands import run_command
from .config import DEFAULT_COMMAND_TIMEOUT, Config
from .errors import CommandExecutionError, DistroResolutionError, ReadError

logger = logging.getLogger(__name__)

OS_RELEASE_PATH = "/etc/os-release"
LSB_RELEASE_COMMAND = ("lsb_release", "-a")


class PackageManagerKind(str, Enum):
    APT = "apt"
    DNF = "dnf"
    YUM = "yum"
    PACMAN = "pacman"
    ZYPPER = "zypper"
    UNKNOWN = "unknown"


DETECTION_ORDER = (
    PackageManagerKind.APT,
    PackageManagerKind.DNF,
    PackageManagerKind.YUM,
    PackageManagerKind.PACMAN,
    PackageManagerKind.ZYPPER,
)


@dataclass(frozen=True)
class DistroInfo:
    name: str = ""
    version: str = ""
    codename: str = ""
    package_manager: PackageManagerKind = PackageManagerKind.UNKNOWN


class DistroResolver(Protocol):
    """One source of distribution identity, tried in order by resolve_distro."""

    name: str

    def resolve(self) -> DistroInfo: ...


def detect_package_manager(which: Callable[[str], Optional[str]] = shutil.which) -> PackageManagerKind:
    """Return the first package manager in DETECTION_ORDER found on PATH."""
    for kind in DETECTION_ORDER:
        if which(kind.value):
            return kind
    return PackageManagerKind.UNKNOWN


_OS_RELEASE_FIELDS = {"NAME": "name", "VERSION_ID": "version", "VERSION_CODENAME": "codename"}
_LSB_RELEASE_FIELDS = {"Distributor ID": "name", "Release": "version", "Codename": "codename"}


def parse_os_release(text: str) -> DistroInfo:
    fields: Dict[str, str] = {}
    for line in text.splitlines():
        key, sep, value = line.partition("=")
        if not sep or key not in _OS_RELEASE_FIELDS:
            continue
        fields[_OS_RELEASE_FIELDS[key]] = value.strip().strip('"')
    return DistroInfo(**fields)


def parse_lsb_release(text: str) -> DistroInfo:
    fields: Dict[str, str] = {}
    for line in text.splitlines():
        key, sep, value = line.partition(":")
        key = key.strip()
        if not sep or key not in _LSB_RELEASE_FIELDS:
            continue
        fields[_LSB_RELEASE_FIELDS[key]] = value.strip()
    return DistroInfo(**fields)


class OsReleaseResolver:
    """Read the distribution identity from an os-release file."""

    name = "os-release"

    def __init__(self, path: str = OS_RELEASE_PATH) -> None:
        self.path = path

    def resolve(self) -> DistroInfo:
        try:
            with open(self.path, encoding="utf-8", errors="replace") as handle:
                text = handle.read()
        except OSError as exc:
            raise ReadError(self.path, exc.strerror or str(exc)) from exc
        return parse_os_release(text)


class LsbReleaseResolver:
    """Ask ``lsb_release -a`` for the distribution identity."""

    name = "lsb_release"

    def __init__(
        self,
        timeout: float = DEFAULT_COMMAND_TIMEOUT,
        runner: Optional[Callable[[Sequence[str], float], str]] = None,
    ) -> None:
        self.timeout = timeout
        self._runner = runner

    def resolve(self) -> DistroInfo:
        runner = self._runner or run_command
        return parse_lsb_release(runner(LSB_RELEASE_COMMAND, self.timeout))


def default_resolvers(config: Config) -> List[DistroResolver]:
    return [OsReleaseResolver(OS_RELEASE_PATH), LsbReleaseResolver(config.command_timeout)]


def resolve_distro(
    resolvers: Optional[Sequence[DistroResolver]] = None,
    detect: Optional[Callable[[], PackageManagerKind]] = None,
) -> DistroInfo:
    """Try each resolver in order and return the first identity found.

    Later resolvers are never consulted once one succeeds. The package manager
    comes from ``detect`` regardless of which resolver answered.
    """
    if resolvers is None:
        resolvers = [OsReleaseResolver(), LsbReleaseResolver()]
    if detect is None:
        detect = detect_package_manager
    last_error: Optional[Exception] = None
    for resolver in resolvers:
        try:
            info = resolver.resolve()
        except (ReadError, CommandExecutionError) as exc:
            logger.debug("%s unavailable: %s", resolver.name, exc)
            last_error = exc
            continue
        manager = detect()
        logger.debug("distribution from %s: %r, package manager %s", resolver.name, info.name, manager.value)
        return replace(info, package_manager=manager)

    raise DistroResolutionError(
        f"unable to identify distribution: {', '.join(r.name for r in resolvers)} all failed"
    ) from last_error
