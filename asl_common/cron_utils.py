# asl_common/cron_utils.py
# -*- coding: utf-8 -*-
"""
Crontab helpers.
"""

import logging
import os
import subprocess
from tempfile import NamedTemporaryFile
from typing import List, Optional

from asl_common.command_utils import get_symbols, log_message, run_command
from asl_common.exceptions import InstallationError
from asl_installer.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def read_crontab(
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> str:
    """Return the current user's crontab, or an empty string if there is none."""
    try:
        result = run_command(
            ["crontab", "-l"],
            app_settings,
            check=False,
            capture_output=True,
            current_logger=current_logger,
        )
    except FileNotFoundError as e:
        raise InstallationError(f"Failed to read crontab: {e}") from e
    return result.stdout if result.returncode == 0 else ""


def ensure_cron_entry(
    marker: str,
    lines: List[str],
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Append ``lines`` to the crontab unless a line already contains ``marker``.

    Args:
        marker: Substring identifying an existing entry.
        lines: Comment and job lines to append.
        app_settings: Settings used for log symbols.
        current_logger: Optional logger instance.

    Returns:
        True if the crontab was changed, False if the entry already existed.

    Raises:
        InstallationError: If the new crontab cannot be installed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    existing_content = read_crontab(app_settings, logger_to_use)
    if any(marker in line for line in existing_content.splitlines()):
        log_message(
            f"{symbols.get('info', 'ℹ️')} Cron job already exists",
            "info",
            logger_to_use,
            app_settings,
        )
        return False

    new_lines = existing_content.splitlines() + list(lines)
    final_content = "\n".join(new_lines) + "\n"

    temp_cron_file = ""
    try:
        with NamedTemporaryFile(
            mode="w", delete=False, prefix="m_app_cron_"
        ) as temp_f:
            temp_f.write(final_content)
            temp_cron_file = temp_f.name
        run_command(
            ["crontab", temp_cron_file],
            app_settings,
            current_logger=logger_to_use,
        )
    except (subprocess.CalledProcessError, FileNotFoundError) as e:
        raise InstallationError(f"Failed to install crontab entry: {e}") from e
    finally:
        if temp_cron_file and os.path.exists(temp_cron_file):
            os.unlink(temp_cron_file)

    log_message(
        f"{symbols.get('success', '✅')} Cron job added",
        "info",
        logger_to_use,
        app_settings,
    )
    logger_to_use.debug("Cron job details:\n" + "\n".join(lines))
    return True
