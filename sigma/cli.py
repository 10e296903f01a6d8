"""Entry point for the sigma command line tool."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import LOGGER_NAME, __version__
from .config import Config, default_config
from .errors import SigmaError
from .formatting import (
    format_bytes,
    format_disk_table,
    format_facts,
    format_network_table,
    format_uptime,
    kib_to_gib,
)
from .system_state import (
    DiskUsage,
    NetworkInterface,
    SystemFacts,
    gather_disk_usages,
    gather_facts,
    gather_network_interfaces,
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sigma", description="Show system information for Linux hosts.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    commands = parser.add_subparsers(dest="command", required=True)

    system = commands.add_parser("system", help="System information utilities")
    views = system.add_subparsers(dest="view", required=True)
    for name, help_text in (
        ("fetch", "Display system information in a pretty format"),
        ("disk", "Show disk usage for mounted filesystems"),
        ("net", "Show network interfaces and their addresses"),
    ):
        view = views.add_parser(name, help=help_text)
        view.add_argument("--json", action="store_true", help="Print the raw data as JSON")
        view.add_argument("--ui", action="store_true", help="Render with Rich tables")
        view.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = default_config(verbose=args.verbose)
        output = _run_view(args, config)
    except SigmaError as exc:
        logger.debug("fatal error", exc_info=True)
        print(f"sigma: error: {exc}", file=sys.stderr)
        return 1

    if output is not None:
        print(output)
    return 0


def _run_view(args: argparse.Namespace, config: Config) -> Optional[str]:
    color = not args.no_color and sys.stdout.isatty()
    if args.view == "fetch":
        facts = gather_facts(config)
        if args.json:
            return _to_json(asdict(facts), facts.timestamp.isoformat())
        if args.ui:
            _render_rich_facts(facts)
            return None
        return format_facts(facts, color=color)

    if args.view == "disk":
        disks = gather_disk_usages()
        if args.json:
            return _to_json({"disks": [asdict(disk) for disk in disks]})
        if args.ui:
            _render_rich_disks(disks)
            return None
        return format_disk_table(disks, color=color)

    interfaces = gather_network_interfaces()
    if args.json:
        return _to_json({"interfaces": [asdict(iface) for iface in interfaces]})
    if args.ui:
        _render_rich_interfaces(interfaces)
        return None
    return format_network_table(interfaces, color=color)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger(LOGGER_NAME).setLevel(logging.DEBUG if verbose else logging.WARNING)


def _to_json(payload: Dict[str, Any], timestamp: Optional[str] = None) -> str:
    if timestamp is not None:
        payload["timestamp"] = timestamp
    return json.dumps(payload, ensure_ascii=False, indent=2)


def _render_rich_facts(facts: SystemFacts) -> None:
    console = Console()

    console.print(Panel(f"{facts.username}@{facts.hostname}", style="bold cyan"))

    summary = Table(show_header=False, box=box.ROUNDED)
    summary.add_column(style="bold cyan")
    summary.add_column()
    distro = facts.distro
    summary.add_row("OS", f"{distro.name} {distro.version}".strip())
    if distro.codename:
        summary.add_row("Codename", distro.codename)
    summary.add_row("Kernel", facts.kernel)
    summary.add_row("Uptime", format_uptime(facts.uptime.uptime_seconds))
    summary.add_row("Shell", facts.shell)
    summary.add_row("CPU", f"{facts.cpu_count} cores")
    summary.add_row(
        "Memory",
        f"{kib_to_gib(facts.memory.used):.1f} GB / {kib_to_gib(facts.memory.total):.1f} GB",
    )
    if facts.memory.swap_total:
        summary.add_row(
            "Swap",
            f"{format_bytes(facts.memory.swap_used * 1024)} / {format_bytes(facts.memory.swap_total * 1024)}",
        )
    summary.add_row("Packages", f"{facts.package_count} ({distro.package_manager.value})")
    console.print(summary)


def _render_rich_disks(disks: List[DiskUsage]) -> None:
    table = Table(title="Disk Usage", box=box.SIMPLE_HEAD)
    table.add_column("Filesystem", style="bold")
    table.add_column("Mounted on")
    table.add_column("Used / Total")
    table.add_column("Use%", justify="right")

    if not disks:
        table.add_row("-", "No disk data", "-", "-")
    for disk in disks:
        table.add_row(
            disk.device,
            disk.mount_point,
            f"{disk.used_gb:.1f} / {disk.total_gb:.1f} GiB",
            f"{disk.percent:.0f}%",
        )
    Console().print(table)


def _render_rich_interfaces(interfaces: List[NetworkInterface]) -> None:
    table = Table(title="Network Interfaces", box=box.SIMPLE_HEAD)
    table.add_column("Interface", style="bold")
    table.add_column("State")
    table.add_column("MTU", justify="right")
    table.add_column("Addresses")
    table.add_column("MAC")

    if not interfaces:
        table.add_row("-", "No network interfaces", "-", "-", "-")
    for iface in interfaces:
        table.add_row(
            iface.name,
            "[green]up[/green]" if iface.is_up else "[red]down[/red]",
            str(iface.mtu),
            "\n".join(iface.ipv4 + iface.ipv6) or "-",
            iface.mac or "-",
        )
    Console().print(table)


if __name__ == "__main__":
    sys.exit(main())
