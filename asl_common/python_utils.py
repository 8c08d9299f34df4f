# asl_common/python_utils.py
# -*- coding: utf-8 -*-
"""
Helpers for system-wide Python packages needed by add-ons.

Add-on scripts run under the system ``python3``, so module checks and pip
installs target that interpreter rather than the one running the installer.
"""

import logging
import subprocess
from typing import Optional

from asl_common.command_utils import (
    command_exists,
    get_symbols,
    log_message,
    run_command,
)
from asl_common.debian.apt_manager import AptManager
from asl_common.exceptions import InstallationError
from asl_installer.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def ensure_pip3(
    apt_manager: AptManager,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Install python3-pip when ``pip3`` is not on the PATH."""
    logger_to_use = current_logger if current_logger else module_logger
    if command_exists("pip3"):
        return
    logger_to_use.info("Installing python3-pip")
    if not apt_manager.install("python3-pip"):
        raise InstallationError("Failed to install python3-pip")


def module_importable(
    module_name: str,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """True if the system ``python3`` can import ``module_name``."""
    try:
        result = run_command(
            ["python3", "-c", f"import {module_name}"],
            app_settings,
            check=False,
            capture_output=True,
            current_logger=current_logger,
        )
    except FileNotFoundError:
        return False
    return result.returncode == 0


def install_pip_package(
    package: str,
    app_settings: Optional[AppSettings],
    module_name: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Install ``package`` with pip3 unless its module is already importable.

    Args:
        package: Distribution name on the package index.
        app_settings: Settings used for log symbols.
        module_name: Import name to probe; defaults to ``package``.
        current_logger: Optional logger instance.

    Raises:
        InstallationError: If pip3 fails.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    module_name = module_name or package

    if module_importable(module_name, app_settings, logger_to_use):
        log_message(
            f"{symbols.get('info', 'ℹ️')} {module_name} is already installed",
            "info",
            logger_to_use,
            app_settings,
        )
        return

    log_message(
        f"{symbols.get('package', '📦')} Installing {package} via pip3",
        "info",
        logger_to_use,
        app_settings,
    )
    try:
        run_command(
            ["pip3", "install", "--break-system-packages", package],
            app_settings,
            current_logger=logger_to_use,
        )
    except (subprocess.CalledProcessError, FileNotFoundError) as e:
        raise InstallationError(
            f"Failed to install {package} via pip3"
        ) from e
