"""Runtime configuration, built once by the CLI and passed down explicitly."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Mapping, Optional

from . import __version__
from .errors import ConfigError

DEFAULT_COMMAND_TIMEOUT = 5.0


@dataclass(frozen=True)
class Config:
    version: str
    verbose: bool
    config_dir: Path
    home_dir: Path
    command_timeout: float = DEFAULT_COMMAND_TIMEOUT


def default_config(verbose: bool = False, environ: Optional[Mapping[str, str]] = None) -> Config:
    """Build the configuration from the user's home directory and ``SIGMA_*`` overrides."""
    env = os.environ if environ is None else environ
    try:
        home = Path.home()
    except (RuntimeError, KeyError) as exc:
        raise ConfigError(f"cannot determine home directory: {exc}") from exc

    config_dir = Path(env["SIGMA_CONFIG_DIR"]) if env.get("SIGMA_CONFIG_DIR") else home / ".sigma"

    return Config(
        version=__version__,
        verbose=verbose,
        config_dir=config_dir,
        home_dir=home,
        command_timeout=_parse_timeout(env.get("SIGMA_COMMAND_TIMEOUT")),
    )


def _parse_timeout(raw: Optional[str]) -> float:
    if not raw:
        return DEFAULT_COMMAND_TIMEOUT
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"SIGMA_COMMAND_TIMEOUT must be a number, got {raw!r}") from exc
    if not value > 0:
        raise ConfigError(f"SIGMA_COMMAND_TIMEOUT must be positive, got {raw!r}")
    return value
