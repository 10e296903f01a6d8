"""
One-shot Linux system facts: distribution, kernel, memory, uptime and package count.
"""

__all__ = ["cli", "commands", "config", "distro", "errors", "formatting", "packages", "procfs", "system_state", "LOGGER_NAME"]
__version__ = "0.1.0"

LOGGER_NAME = "sigma"
