"""Collect a point-in-time snapshot of the host's system facts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
import getpass
import logging
import os
import socket
from typing import Callable, List, Mapping, Optional, Sequence

import psutil

from .config import Config
from .distro import DistroInfo, DistroResolver, default_resolvers, resolve_distro
from .errors import CommandExecutionError, ReadError, UnsupportedManagerError
from .packages import count_packages
from .procfs import (
    MEMINFO_PATH,
    UPTIME_PATH,
    VERSION_PATH,
    SystemMemory,
    UptimeInfo,
    read_kernel_version,
    read_memory_info,
    read_uptime,
)

logger = logging.getLogger(__name__)

# Device names that belong to virtual filesystems rather than real storage.
PSEUDO_DEVICE_PREFIXES = ("tmpfs", "dev", "run", "efivarfs")


@dataclass(frozen=True)
class SystemFacts:
    timestamp: datetime
    username: str
    hostname: str
    distro: DistroInfo
    kernel: str
    memory: SystemMemory
    uptime: UptimeInfo
    shell: str
    cpu_count: int
    package_count: int


@dataclass(frozen=True)
class DiskUsage:
    device: str
    mount_point: str
    fstype: str
    total_gb: float
    used_gb: float
    percent: float


@dataclass(frozen=True)
class NetworkInterface:
    name: str
    is_up: bool
    mtu: int
    ipv4: List[str] = field(default_factory=list)
    ipv6: List[str] = field(default_factory=list)
    mac: Optional[str] = None


def shell_name(environ: Optional[Mapping[str, str]] = None) -> str:
    """Return the basename of ``$SHELL``, or ``"unknown"``."""
    env = os.environ if environ is None else environ
    return env.get("SHELL", "").rstrip().split("/")[-1] or "unknown"


def get_hostname() -> str:
    try:
        return socket.gethostname()
    except OSError as exc:
        raise ReadError("hostname", str(exc)) from exc


def get_username() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError) as exc:
        raise ReadError("current user", str(exc)) from exc


def gather_facts(
    config: Config,
    *,
    resolvers: Optional[Sequence[DistroResolver]] = None,
    meminfo_path: str = MEMINFO_PATH,
    uptime_path: str = UPTIME_PATH,
    version_path: str = VERSION_PATH,
    package_counter: Callable[..., int] = count_packages,
    environ: Optional[Mapping[str, str]] = None,
) -> SystemFacts:
    """Collect every fact for the ``fetch`` view.

    Steps run one after another. A failure in any of them aborts the snapshot,
    except the package count, which falls back to zero.
    """
    hostname = get_hostname()
    username = get_username()
    distro = resolve_distro(resolvers if resolvers is not None else default_resolvers(config))
    kernel = read_kernel_version(version_path)
    memory = read_memory_info(meminfo_path)
    uptime = read_uptime(uptime_path)

    try:
        package_count = package_counter(distro.package_manager, timeout=config.command_timeout)
    except UnsupportedManagerError as exc:
        logger.debug("package count unavailable, reporting 0: %s", exc)
        package_count = 0
    except CommandExecutionError as exc:
        logger.warning("package count unavailable, reporting 0: %s", exc)
        package_count = 0

    return SystemFacts(
        timestamp=datetime.now(),
        username=username,
        hostname=hostname,
        distro=distro,
        kernel=kernel,
        memory=memory,
        uptime=uptime,
        shell=shell_name(environ),
        cpu_count=psutil.cpu_count() or 0,
        package_count=package_count,
    )


def gather_disk_usages() -> List[DiskUsage]:
    disk_usages: List[DiskUsage] = []
    for partition in psutil.disk_partitions(all=False):
        if partition.device.startswith(PSEUDO_DEVICE_PREFIXES):
            continue
        device = partition.device.rsplit("/", 1)[-1] or partition.device
        try:
            usage = psutil.disk_usage(partition.mountpoint)
        except (PermissionError, FileNotFoundError):
            logger.debug("skipping %s: not accessible", partition.mountpoint)
            continue
        disk_usages.append(
            DiskUsage(
                device=device,
                mount_point=partition.mountpoint,
                fstype=partition.fstype,
                total_gb=round(usage.total / (1024**3), 2),
                used_gb=round(usage.used / (1024**3), 2),
                percent=usage.percent,
            )
        )
    return disk_usages


def gather_network_interfaces() -> List[NetworkInterface]:
    stats = psutil.net_if_stats()
    interfaces: List[NetworkInterface] = []
    for name, addresses in sorted(psutil.net_if_addrs().items()):
        ipv4 = [addr.address for addr in addresses if addr.family == socket.AF_INET]
        ipv6 = [addr.address for addr in addresses if addr.family == socket.AF_INET6]
        mac = next((addr.address for addr in addresses if addr.family == psutil.AF_LINK), None)
        stat = stats.get(name)
        interfaces.append(
            NetworkInterface(
                name=name,
                is_up=bool(stat and stat.isup),
                mtu=stat.mtu if stat else 0,
                ipv4=ipv4,
                ipv6=ipv6,
                mac=mac,
            )
        )
    return interfaces
