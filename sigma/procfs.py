"""Parse the kernel's /proc pseudo-files into typed records."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Dict

from .errors import ParseError, ReadError

logger = logging.getLogger(__name__)

MEMINFO_PATH = "/proc/meminfo"
UPTIME_PATH = "/proc/uptime"
VERSION_PATH = "/proc/version"

_MEMINFO_KEYS = {
    "MemTotal:": "total",
    "MemFree:": "free",
    "Cached:": "cached",
    "SwapTotal:": "swap_total",
    "SwapFree:": "swap_free",
}


@dataclass(frozen=True)
class SystemMemory:
    """Memory figures in KiB, as reported by /proc/meminfo."""

    total: int = 0
    used: int = 0
    free: int = 0
    cached: int = 0
    swap_total: int = 0
    swap_used: int = 0


@dataclass(frozen=True)
class UptimeInfo:
    uptime_seconds: float
    idle_seconds: float


def parse_meminfo(text: str) -> SystemMemory:
    """Parse ``KEY: VALUE kB`` lines.

    Unknown keys are ignored and missing keys stay at zero. ``used`` and
    ``swap_used`` are derived once the whole file has been read; if the kernel
    reports more free memory than total, they are clamped to zero.
    """
    values: Dict[str, int] = {field: 0 for field in _MEMINFO_KEYS.values()}
    for line in text.splitlines():
        fields = line.split()
        if len(fields) < 2 or fields[0] not in _MEMINFO_KEYS:
            continue
        values[_MEMINFO_KEYS[fields[0]]] = _parse_kib(fields[1])

    used = values["total"] - values["free"] - values["cached"]
    if used < 0:
        logger.warning(
            "MemFree + Cached (%d kB) exceeds MemTotal (%d kB); reporting 0 used",
            values["free"] + values["cached"],
            values["total"],
        )
        used = 0

    swap_used = values["swap_total"] - values["swap_free"]
    if swap_used < 0:
        logger.warning(
            "SwapFree (%d kB) exceeds SwapTotal (%d kB); reporting 0 used",
            values["swap_free"],
            values["swap_total"],
        )
        swap_used = 0

    return SystemMemory(
        total=values["total"],
        used=used,
        free=values["free"],
        cached=values["cached"],
        swap_total=values["swap_total"],
        swap_used=swap_used,
    )


def parse_uptime(text: str, path: str = UPTIME_PATH) -> UptimeInfo:
    tokens = text.split()
    if len(tokens) != 2:
        raise ParseError(path, f"expected 2 fields, got {len(tokens)}")
    try:
        uptime, idle = float(tokens[0]), float(tokens[1])
    except ValueError as exc:
        raise ParseError(path, f"non-numeric uptime {text.strip()!r}") from exc
    if not (math.isfinite(uptime) and math.isfinite(idle)):
        raise ParseError(path, f"non-finite uptime {text.strip()!r}")
    return UptimeInfo(uptime_seconds=uptime, idle_seconds=idle)


def parse_kernel_version(text: str, path: str = VERSION_PATH) -> str:
    tokens = text.split()
    if len(tokens) < 3:
        raise ParseError(path, "unable to parse kernel version")
    return tokens[2]


def read_memory_info(path: str = MEMINFO_PATH) -> SystemMemory:
    return parse_meminfo(_read_text(path))


def read_uptime(path: str = UPTIME_PATH) -> UptimeInfo:
    return parse_uptime(_read_text(path), path)


def read_kernel_version(path: str = VERSION_PATH) -> str:
    return parse_kernel_version(_read_text(path), path)


def _read_text(path: str) -> str:
    try:
        with open(path, encoding="utf-8", errors="replace") as handle:
            return handle.read()
    except OSError as exc:
        raise ReadError(path, exc.strerror or str(exc)) from exc


def _parse_kib(value: str) -> int:
    # A garbled value for a known key counts as zero rather than failing the read.
    try:
        return max(int(value), 0)
    except ValueError:
        return 0
