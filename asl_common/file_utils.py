# asl_common/file_utils.py
# -*- coding: utf-8 -*-
"""
File system utility functions, such as backing up files and cleaning directories.
"""

import datetime
import logging
import os
import shutil
import stat
import tempfile
from pathlib import Path
from typing import Optional, Union

from asl_installer.config_models import AppSettings

from .command_utils import get_symbols, log_message

module_logger = logging.getLogger(__name__)


def backup_file(
    file_path: Union[str, Path],
    suffix: str,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> Optional[Path]:
    """
    Copy ``file_path`` to ``<file_path>.bak-<suffix>-<timestamp>``.

    Parameters:
        file_path: The file to back up.
        suffix: Label identifying who made the backup, e.g. "supermon".
        app_settings: Application settings used for log symbols.
        current_logger: Logger instance to use; defaults to the module logger.

    Returns:
        The backup path, or None when the source file does not exist.

    Raises:
        OSError: If the copy fails.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    source = Path(file_path)

    if not source.is_file():
        log_message(
            f"{symbols.get('warning', '!')} Configuration file {source} not found",
            "warning",
            logger_to_use,
            app_settings,
        )
        return None

    timestamp = datetime.datetime.now().strftime("%Y%m%d-%H%M%S")
    backup_path = source.with_name(f"{source.name}.bak-{suffix}-{timestamp}")
    shutil.copy2(source, backup_path)
    log_message(
        f"{symbols.get('success', '✅')} Configuration backed up to {backup_path}",
        "info",
        logger_to_use,
        app_settings,
    )
    return backup_path


def read_text_bytesafe(file_path: Union[str, Path]) -> str:
    """Read a config file as UTF-8, carrying undecodable bytes as surrogates."""
    with open(file_path, "r", encoding="utf-8", errors="surrogateescape", newline="") as f:
        return f.read()


def write_text_atomic(file_path: Union[str, Path], content: str) -> None:
    """
    Replace the contents of ``file_path`` without leaving a half-written file.

    The original permission bits and owner are preserved. Text is encoded with
    ``surrogateescape`` so content read by ``read_text_bytesafe`` round-trips
    unchanged.
    """
    target = Path(file_path)
    original_stat = target.stat() if target.exists() else None
    fd, temp_name = tempfile.mkstemp(
        dir=str(target.parent), prefix=f".{target.name}."
    )
    try:
        with os.fdopen(
            fd, "w", encoding="utf-8", errors="surrogateescape", newline=""
        ) as temp_f:
            temp_f.write(content)
        if original_stat is not None:
            os.chown(temp_name, original_stat.st_uid, original_stat.st_gid)
            os.chmod(temp_name, stat.S_IMODE(original_stat.st_mode))
        os.replace(temp_name, target)
    except BaseException:
        if os.path.exists(temp_name):
            os.unlink(temp_name)
        raise


def make_executable(file_path: Union[str, Path], mode: int = 0o755) -> None:
    os.chmod(file_path, mode)


def remove_file(
    file_path: Union[str, Path],
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Remove a temporary file if it exists."""
    logger_to_use = current_logger if current_logger else module_logger
    path_to_remove = Path(file_path)
    if path_to_remove.is_file():
        path_to_remove.unlink()
        logger_to_use.debug(f"Cleaned up temporary file: {path_to_remove}")


def cleanup_directory(
    directory_path: Path,
    app_settings: Optional[AppSettings],
    ensure_dir_exists_after: bool = False,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Removes ``directory_path`` and everything in it, optionally recreating
    it empty afterwards.

    Parameters:
        directory_path (Path): The directory to clean up.
        app_settings (Optional[AppSettings]): Used for log symbols.
        ensure_dir_exists_after (bool): Recreate the directory after cleanup.
        current_logger (Optional[logging.Logger]): Logger to use.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    if directory_path.is_dir():
        shutil.rmtree(directory_path)
        log_message(
            f"Removed directory and its contents: {directory_path}",
            "debug",
            logger_to_use,
            app_settings,
        )
    elif directory_path.exists():
        log_message(
            f"{symbols.get('warning', '!')} Path {directory_path} exists but is not a directory.",
            "warning",
            logger_to_use,
            app_settings,
        )

    if ensure_dir_exists_after:
        directory_path.mkdir(parents=True, exist_ok=True)
        log_message(
            f"Ensured directory exists: {directory_path}",
            "debug",
            logger_to_use,
            app_settings,
        )
