"""
Base component class for all add-on installers.

This module provides the base class that every component module inherits
from, together with the download/execute helpers they share.
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from asl_common.command_utils import log_message, run_command
from asl_common.debian.apt_manager import AptManager
from asl_common.download_utils import safe_download
from asl_common.exceptions import InstallationError
from asl_common.file_utils import make_executable, remove_file
from asl_installer.config_models import AppSettings
from asl_installer.rpt_conf import RptConf


class BaseComponent(ABC):
    """
    Base class for all component modules.

    Subclasses implement ``install``; any failure must be raised as an
    InstallationError so the run stops at the first broken step.
    """

    # Class-level metadata, normally set by the registry decorator
    metadata: Dict[str, Any] = {
        "flag": "",  # Short command-line flag, e.g. "-a"
        "long_flag": "",  # Long command-line flag, e.g. "--allscan"
        "display_name": "",  # Name used in log messages
        "order": 0,  # Position in the installation sequence
        "description": "",
    }

    def __init__(
        self,
        app_settings: AppSettings,
        apt_manager: AptManager,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the component.

        Args:
            app_settings: The application settings.
            apt_manager: Shared apt package manager.
            logger: Optional logger instance. If not provided, a new logger will be created.
        """
        self.app_settings = app_settings
        self.apt_manager = apt_manager
        self.logger = logger or logging.getLogger(self.__class__.__name__)
        self.symbols = app_settings.symbols

    @abstractmethod
    def install(self) -> None:
        """
        Install the component.

        Raises:
            InstallationError: If any step fails.
        """

    @property
    def work_dir(self) -> Path:
        return Path(self.app_settings.temp_dir)

    def log(self, message: str, level: str = "info", symbol: Optional[str] = None) -> None:
        if symbol:
            message = f"{self.symbols.get(symbol, '')} {message}".lstrip()
        log_message(message, level, self.logger, self.app_settings)

    def ensure_packages(self, packages: List[str], error_message: Optional[str] = None) -> None:
        """Install whichever of ``packages`` are missing, or raise."""
        if not self.apt_manager.install(packages):
            raise InstallationError(
                error_message or f"Failed to install {' '.join(packages)}"
            )

    def download(self, url: str, filename: str, mode: Optional[int] = None) -> Path:
        """Download ``url`` into the scratch directory, optionally setting its mode."""
        target = self.work_dir / filename
        safe_download(url, target, self.app_settings, current_logger=self.logger)
        if mode is not None:
            make_executable(target, mode)
        return target

    def run_installer(self, installer_path: Path, error_message: str) -> None:
        """
        Execute a downloaded installer from the scratch directory.

        The installer inherits the terminal so it can prompt the operator.
        """
        try:
            run_command(
                [f"./{installer_path.name}"],
                self.app_settings,
                current_logger=self.logger,
                cwd=str(installer_path.parent),
            )
        except (subprocess.CalledProcessError, OSError) as e:
            raise InstallationError(error_message) from e

    def remove_downloads(self, *paths: Path) -> None:
        for path in paths:
            remove_file(path, current_logger=self.logger)

    def rpt_conf(self) -> RptConf:
        return RptConf(
            self.app_settings.conf_file,
            app_settings=self.app_settings,
            logger=self.logger,
        )
