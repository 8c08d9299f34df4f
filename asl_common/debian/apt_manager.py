# asl_common/debian/apt_manager.py
# -*- coding: utf-8 -*-
import logging
import subprocess
from typing import List, Optional, Union

from asl_common.command_utils import (
    check_package_installed,
    command_exists,
    run_command,
)
from asl_installer.config_models import AppSettings


class AptManager:
    """
    A small manager for Debian apt packages using command-line tools.

    Only packages that dpkg does not already report as installed are handed
    to ``apt-get install``.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initializes the AptManager.
        Args:
            app_settings: The application settings.
            logger: An optional logging object.
        """
        self.app_settings = app_settings
        self.logger = logger or logging.getLogger(__name__)
        if not command_exists("apt-get"):
            self.logger.critical(
                "'apt-get' command not found. This manager cannot function."
            )
            raise FileNotFoundError(
                "'apt-get' not found. Is this a Debian-based system?"
            )

    def update(self, raise_error: bool = False) -> bool:
        """
        Updates the list of available packages using 'apt-get update'.

        Args:
            raise_error: Whether to raise an exception on failure.

        Returns:
            True if successful, False otherwise.
        """
        self.logger.info("Updating apt package lists via 'apt-get update'...")
        try:
            run_command(
                ["apt-get", "update", "-yq"],
                self.app_settings,
                current_logger=self.logger,
            )
            self.logger.debug("Apt package lists updated successfully.")
            return True
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            self.logger.error(f"Failed to update apt cache: {e}")
            if raise_error:
                raise
            return False

    def is_installed(self, package_name: str) -> bool:
        return check_package_installed(
            package_name, self.app_settings, current_logger=self.logger
        )

    def missing_packages(self, packages: List[str]) -> List[str]:
        """Return the subset of ``packages`` that is not installed, in order."""
        return [pkg for pkg in packages if not self.is_installed(pkg)]

    def install(
        self,
        packages: Union[List[str], str],
        update_first: bool = False,
        quiet_errors: bool = False,
    ) -> bool:
        """
        Installs one or more packages using 'apt-get install'.

        Args:
            packages: A single package name or a list of package names.
            update_first: Whether to update the package lists before installing.
            quiet_errors: Log an install failure at DEBUG instead of ERROR,
                for callers that have a fallback.

        Returns:
            True if successful, False otherwise.
        """
        if not isinstance(packages, list):
            packages = [packages]

        packages_to_install = []
        for pkg_name in packages:
            if self.is_installed(pkg_name):
                self.logger.debug(
                    f"Package '{pkg_name}' is already installed. Skipping."
                )
            else:
                packages_to_install.append(pkg_name)

        if not packages_to_install:
            self.logger.debug("All requested packages are already installed.")
            return True

        if update_first and not self.update():
            return False

        self.logger.info(
            f"Installing packages: {', '.join(packages_to_install)}"
        )
        try:
            run_command(
                ["apt-get", "install", "-y"] + packages_to_install,
                self.app_settings,
                current_logger=self.logger,
            )
            return True
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            if quiet_errors:
                self.logger.debug(f"Failed to install packages: {e}")
            else:
                self.logger.error(f"Failed to install packages: {e}")
            return False
