from datetime import datetime

import pytest

from sigma.config import Config
from sigma.distro import DistroInfo, PackageManagerKind
from sigma.procfs import SystemMemory, UptimeInfo
from sigma.system_state import SystemFacts


@pytest.fixture()
def config(tmp_path):
    return Config(
        version="test",
        verbose=False,
        config_dir=tmp_path / ".sigma",
        home_dir=tmp_path,
        command_timeout=1.0,
    )


@pytest.fixture()
def proc_files(tmp_path):
    """Write fake /proc files and return their paths as keyword arguments."""
    meminfo = tmp_path / "meminfo"
    meminfo.write_text("MemTotal: 16777216 kB\nMemFree: 4194304 kB\nCached: 4194304 kB\n")
    uptime = tmp_path / "uptime"
    uptime.write_text("12345.67 6789.01\n")
    version = tmp_path / "version"
    version.write_text("Linux version 6.10.2-arch1-1 (linux@archlinux) #1 SMP\n")
    return {"meminfo_path": str(meminfo), "uptime_path": str(uptime), "version_path": str(version)}


@pytest.fixture(autouse=True)
def fixed_host(monkeypatch):
    monkeypatch.setattr("sigma.system_state.socket.gethostname", lambda: "box")
    monkeypatch.setattr("sigma.system_state.getpass.getuser", lambda: "dev")
    monkeypatch.setattr("sigma.system_state.psutil.cpu_count", lambda: 8)
    monkeypatch.setattr("sigma.distro.detect_package_manager", lambda: PackageManagerKind.UNKNOWN)


@pytest.fixture()
def facts():
    return SystemFacts(
        timestamp=datetime(2024, 1, 1, 12, 0, 0),
        username="dev",
        hostname="box",
        distro=DistroInfo("Ubuntu", "24.04", "noble", PackageManagerKind.APT),
        kernel="6.8.0-45-generic",
        memory=SystemMemory(total=16777216, used=8388608, free=4194304, cached=4194304),
        uptime=UptimeInfo(uptime_seconds=12345.67, idle_seconds=6789.01),
        shell="bash",
        cpu_count=8,
        package_count=1875,
    )
