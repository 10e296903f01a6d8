"""Run external tools and capture their output."""

from __future__ import annotations

import logging
import subprocess
from typing import Sequence

from .errors import CommandExecutionError

logger = logging.getLogger(__name__)


def run_command(args: Sequence[str], timeout: float) -> str:
    """Run ``args`` once and return its stdout, raising CommandExecutionError on any failure."""
    logger.debug("running %s (timeout %.1fs)", " ".join(args), timeout)
    try:
        result = subprocess.run(
            list(args),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout,
        )
    except FileNotFoundError as exc:
        raise CommandExecutionError(args, "executable not found") from exc
    except subprocess.TimeoutExpired as exc:
        raise CommandExecutionError(args, f"timed out after {timeout:g}s") from exc
    except OSError as exc:
        raise CommandExecutionError(args, str(exc)) from exc

    if result.returncode != 0:
        stderr = result.stderr.strip()
        reason = f"exit status {result.returncode}" + (f": {stderr}" if stderr else "")
        raise CommandExecutionError(args, reason, returncode=result.returncode)
    return result.stdout
