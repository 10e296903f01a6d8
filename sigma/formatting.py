"""Console-friendly formatting utilities."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from .system_state import DiskUsage, NetworkInterface, SystemFacts

TITLE_COLOR = "\033[1;36m"
VALUE_COLOR = "\033[1;37m"
HEADER_COLOR = "\033[1;33m"
RESET_COLOR = "\033[0m"
SEPARATOR = "─"


def format_uptime(seconds: float) -> str:
    """Render whole days, hours and minutes, dropping leading zero units."""
    total_minutes = int(seconds) // 60
    days, remainder = divmod(total_minutes, 24 * 60)
    hours, minutes = divmod(remainder, 60)
    if days > 0:
        return f"{days}d {hours}h {minutes}m"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def kib_to_gib(kib: int) -> float:
    return kib / (1024 * 1024)


def format_bytes(num: float) -> str:
    suffixes = ["B", "KiB", "MiB", "GiB", "TiB"]
    value = float(num)
    for suffix in suffixes:
        if value < 1024 or suffix == suffixes[-1]:
            return f"{value:.1f} {suffix}"
        value /= 1024
    return f"{value:.1f} TiB"


def render_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    widths = [len(h) for h in headers]
    for row in rows:
        for index, cell in enumerate(row):
            widths[index] = max(widths[index], len(cell))
    lines = []
    lines.append(_format_row(headers, widths))
    lines.append(_format_row([SEPARATOR * w for w in widths], widths))
    for row in rows:
        lines.append(_format_row(row, widths))
    return "\n".join(lines)


def format_facts(facts: SystemFacts, color: bool = True) -> str:
    title, accent, reset = _palette(color)
    rule = f"{title}{SEPARATOR * 40}{reset}"
    distro = facts.distro
    rows = [
        ("OS", f"{distro.name} {distro.version}".strip()),
        ("Kernel", facts.kernel),
        ("Uptime", format_uptime(facts.uptime.uptime_seconds)),
        ("Shell", facts.shell),
        ("CPU", f"{facts.cpu_count} cores"),
        (
            "Memory",
            f"{kib_to_gib(facts.memory.used):.1f} GB / {kib_to_gib(facts.memory.total):.1f} GB",
        ),
        ("Packages", f"{facts.package_count} ({distro.package_manager.value})"),
    ]
    lines = [f"{title}{facts.username}@{facts.hostname}{reset}", rule]
    lines.extend(f"{title}{label:<10}{reset}│ {accent}{text}{reset}" for label, text in rows)
    lines.append(rule)
    return "\n".join(lines)


def format_disk_table(disks: Iterable[DiskUsage], color: bool = True) -> str:
    rows = [
        [disk.device, disk.mount_point, f"{disk.total_gb:.1f}G", f"{disk.used_gb:.1f}G", f"{disk.percent:.0f}%"]
        for disk in disks
    ]
    if not rows:
        return "No disk data"
    return _colored_table(["Filesystem", "Mounted on", "Size", "Used", "Use%"], rows, color)


def format_network_table(interfaces: Iterable[NetworkInterface], color: bool = True) -> str:
    rows: List[List[str]] = []
    for iface in interfaces:
        rows.append(
            [
                iface.name,
                "up" if iface.is_up else "down",
                str(iface.mtu),
                ", ".join(iface.ipv4) or "-",
                ", ".join(iface.ipv6) or "-",
                iface.mac or "-",
            ]
        )
    if not rows:
        return "No network interfaces"
    return _colored_table(["Interface", "State", "MTU", "IPv4", "IPv6", "MAC"], rows, color)


def _colored_table(headers: Sequence[str], rows: Sequence[Sequence[str]], color: bool) -> str:
    lines = render_table(headers, rows).split("\n")
    if not color:
        return "\n".join(lines)
    header, rule, *body = lines
    colored = [f"{HEADER_COLOR}{header}{RESET_COLOR}", f"{TITLE_COLOR}{rule}{RESET_COLOR}"]
    colored.extend(f"{VALUE_COLOR}{line}{RESET_COLOR}" for line in body)
    return "\n".join(colored)


def _palette(color: bool) -> tuple:
    if not color:
        return "", "", ""
    return TITLE_COLOR, VALUE_COLOR, RESET_COLOR


def _format_row(row: Sequence[str], widths: Sequence[int]) -> str:
    padded = [cell.ljust(width) for cell, width in zip(row, widths)]
    return " | ".join(padded)
