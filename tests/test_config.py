from pathlib import Path

import pytest

from sigma import __version__
from sigma.config import DEFAULT_COMMAND_TIMEOUT, default_config
from sigma.errors import ConfigError


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
    config = default_config(environ={})
    assert config.version == __version__
    assert config.verbose is False
    assert config.home_dir == tmp_path
    assert config.config_dir == tmp_path / ".sigma"
    assert config.command_timeout == DEFAULT_COMMAND_TIMEOUT


def test_environment_overrides(tmp_path):
    config = default_config(
        verbose=True,
        environ={"SIGMA_CONFIG_DIR": str(tmp_path / "conf"), "SIGMA_COMMAND_TIMEOUT": "1.5"},
    )
    assert config.verbose is True
    assert config.config_dir == tmp_path / "conf"
    assert config.command_timeout == 1.5


@pytest.mark.parametrize("raw", ["soon", "0", "-2"])
def test_bad_timeout_is_rejected(raw):
    with pytest.raises(ConfigError):
        default_config(environ={"SIGMA_COMMAND_TIMEOUT": raw})


def test_config_is_immutable():
    config = default_config(environ={})
    with pytest.raises(AttributeError):
        config.verbose = True
