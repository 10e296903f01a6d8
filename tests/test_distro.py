import pytest

from sigma.distro import (
    DETECTION_ORDER,
    DistroInfo,
    LsbReleaseResolver,
    OsReleaseResolver,
    PackageManagerKind,
    default_resolvers,
    detect_package_manager,
    parse_lsb_release,
    parse_os_release,
    resolve_distro,
)
from sigma.errors import CommandExecutionError, DistroResolutionError, ReadError

OS_RELEASE = """\
PRETTY_NAME="Ubuntu 24.04.1 LTS"
NAME="Ubuntu"
VERSION_ID="24.04"
VERSION="24.04.1 LTS (Noble Numbat)"
VERSION_CODENAME=noble
ID=ubuntu
"""

LSB_RELEASE = """\
No LSB modules are available.
Distributor ID:\tDebian
Description:\tDebian GNU/Linux 12 (bookworm)
Release:\t12
Codename:\tbookworm
"""


class FakeRunner:
    def __init__(self, output="", error=None):
        self.output = output
        self.error = error
        self.calls = []

    def __call__(self, args, timeout):
        self.calls.append((tuple(args), timeout))
        if self.error is not None:
            raise self.error
        return self.output


def fake_which(*available):
    return lambda name: f"/usr/bin/{name}" if name in available else None


def test_parse_os_release_strips_quotes():
    info = parse_os_release(OS_RELEASE)
    assert info == DistroInfo(name="Ubuntu", version="24.04", codename="noble")


def test_parse_os_release_ignores_lines_without_separator():
    info = parse_os_release("# comment\n\nNAME=Arch Linux\nbogus line\n")
    assert info.name == "Arch Linux"
    assert info.version == ""
    assert info.codename == ""


def test_parse_lsb_release():
    info = parse_lsb_release(LSB_RELEASE)
    assert info == DistroInfo(name="Debian", version="12", codename="bookworm")


def test_detect_prefers_priority_order():
    assert detect_package_manager(fake_which("pacman", "apt")) is PackageManagerKind.APT
    assert detect_package_manager(fake_which("zypper", "yum")) is PackageManagerKind.YUM


def test_detect_unknown_when_nothing_resolves():
    assert detect_package_manager(fake_which()) is PackageManagerKind.UNKNOWN


def test_detection_order():
    assert [kind.value for kind in DETECTION_ORDER] == ["apt", "dnf", "yum", "pacman", "zypper"]


def test_os_release_wins_and_fallback_is_not_invoked(tmp_path):
    path = tmp_path / "os-release"
    path.write_text(OS_RELEASE)
    runner = FakeRunner(output=LSB_RELEASE)

    info = resolve_distro(
        [OsReleaseResolver(str(path)), LsbReleaseResolver(runner=runner)],
        detect=lambda: PackageManagerKind.APT,
    )

    assert info == DistroInfo("Ubuntu", "24.04", "noble", PackageManagerKind.APT)
    assert runner.calls == []


def test_empty_os_release_is_still_success(tmp_path):
    path = tmp_path / "os-release"
    path.write_text("")
    runner = FakeRunner(output=LSB_RELEASE)

    info = resolve_distro(
        [OsReleaseResolver(str(path)), LsbReleaseResolver(runner=runner)],
        detect=lambda: PackageManagerKind.UNKNOWN,
    )

    assert info == DistroInfo()
    assert runner.calls == []


def test_missing_os_release_falls_back_to_lsb_release(tmp_path):
    runner = FakeRunner(output=LSB_RELEASE)

    info = resolve_distro(
        [OsReleaseResolver(str(tmp_path / "missing")), LsbReleaseResolver(timeout=2.0, runner=runner)],
        detect=lambda: PackageManagerKind.PACMAN,
    )

    assert info.name == "Debian"
    assert info.package_manager is PackageManagerKind.PACMAN
    assert runner.calls == [(("lsb_release", "-a"), 2.0)]


def test_both_tiers_failing_raises(tmp_path):
    runner = FakeRunner(error=CommandExecutionError(["lsb_release", "-a"], "executable not found"))

    with pytest.raises(DistroResolutionError) as excinfo:
        resolve_distro(
            [OsReleaseResolver(str(tmp_path / "missing")), LsbReleaseResolver(runner=runner)],
            detect=lambda: PackageManagerKind.APT,
        )

    assert isinstance(excinfo.value.__cause__, CommandExecutionError)


def test_os_release_resolver_raises_read_error(tmp_path):
    with pytest.raises(ReadError):
        OsReleaseResolver(str(tmp_path / "missing")).resolve()


def test_detector_runs_only_after_success(tmp_path):
    calls = []

    def detect():
        calls.append(1)
        return PackageManagerKind.DNF

    path = tmp_path / "os-release"
    path.write_text('NAME="Fedora Linux"\nVERSION_ID=40\n')
    info = resolve_distro([OsReleaseResolver(str(path))], detect=detect)

    assert info.package_manager is PackageManagerKind.DNF
    assert calls == [1]


def test_default_resolvers_order_and_timeout(config):
    resolvers = default_resolvers(config)
    assert [resolver.name for resolver in resolvers] == ["os-release", "lsb_release"]
    assert resolvers[0].path == "/etc/os-release"
    assert resolvers[1].timeout == config.command_timeout
