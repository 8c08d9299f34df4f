# asl_common/system_utils.py
# -*- coding: utf-8 -*-
"""
System-level utility functions.

This module includes functions for determining the Debian codename and
enabling systemd services.
"""

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Dict, Optional, Union

from asl_common.command_utils import get_symbols, log_message, run_command
from asl_installer.config_models import AppSettings

module_logger = logging.getLogger(__name__)

OS_RELEASE_PATH = Path("/etc/os-release")
DEBIAN_VERSION_PATH = Path("/etc/debian_version")

DEBIAN_MAJOR_TO_CODENAME: Dict[str, str] = {
    "12": "bookworm",
    "13": "trixie",
}


def parse_os_release(content: str) -> Dict[str, str]:
    """Parse os-release ``KEY=value`` lines, honouring shell quoting."""
    values: Dict[str, str] = {}
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, raw_value = line.partition("=")
        try:
            parts = shlex.split(raw_value)
        except ValueError:
            parts = [raw_value.strip("\"'")]
        values[key.strip()] = parts[0] if parts else ""
    return values


def get_debian_codename(
    os_release_path: Union[str, Path] = OS_RELEASE_PATH,
    debian_version_path: Union[str, Path] = DEBIAN_VERSION_PATH,
) -> str:
    """
    Get the Debian codename (e.g., 'bookworm', 'trixie').

    ``VERSION_CODENAME`` from os-release wins; otherwise the major number in
    ``/etc/debian_version`` is mapped. Returns "unknown" when neither helps.
    """
    os_release = Path(os_release_path)
    if os_release.is_file():
        values = parse_os_release(os_release.read_text(encoding="utf-8"))
        return values.get("VERSION_CODENAME", "")

    debian_version = Path(debian_version_path)
    if debian_version.is_file():
        version = debian_version.read_text(encoding="utf-8").strip()
        major = version.split(".", 1)[0]
        return DEBIAN_MAJOR_TO_CODENAME.get(major, "unknown")

    return "unknown"


def enable_and_start_service(
    service_name: str,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Enable and start a systemd unit.

    Enabling is best effort; a failed start is logged as a warning.

    Returns:
        True if the service started, False otherwise.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    try:
        run_command(
            ["systemctl", "enable", service_name],
            app_settings,
            check=False,
            capture_output=True,
            current_logger=logger_to_use,
        )
        run_command(
            ["systemctl", "start", service_name],
            app_settings,
            capture_output=True,
            current_logger=logger_to_use,
        )
        return True
    except (subprocess.CalledProcessError, FileNotFoundError):
        log_message(
            f"{symbols.get('warning', '!')} Failed to start {service_name} service",
            "warning",
            logger_to_use,
            app_settings,
        )
        return False
