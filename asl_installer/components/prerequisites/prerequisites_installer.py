# asl_installer/components/prerequisites/prerequisites_installer.py
# -*- coding: utf-8 -*-
"""
Installer for the web server and PHP packages shared by the add-ons.

Supermon, DVSwitch and AllScan all serve pages through Apache with PHP, so
this runs before any add-on installer.
"""

import logging
from typing import Optional

from asl_common.debian.apt_manager import AptManager
from asl_common.exceptions import InstallationError
from asl_common.system_utils import enable_and_start_service
from asl_installer.base_component import BaseComponent
from asl_installer.config_models import AppSettings


class PrerequisitesInstaller(BaseComponent):
    """
    Ensures apache2, php and libapache2-mod-php are installed and the web
    server is enabled.
    """

    metadata = {
        "display_name": "Apache2 + PHP prerequisites",
        "description": "Web server and PHP packages needed by the add-ons.",
    }

    def __init__(
        self,
        app_settings: AppSettings,
        apt_manager: AptManager,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(app_settings, apt_manager, logger)
        self.packages = list(app_settings.web_prereq_packages)

    def install(self) -> None:
        self.log("Checking for Apache2 + PHP prerequisites...")
        to_install = self.apt_manager.missing_packages(self.packages)

        if not to_install:
            self.log("Apache2 and PHP appear to be already installed")
            return

        if self.app_settings.dry_run:
            self.log(
                f"[DRY RUN] Would install missing web server / PHP packages: {' '.join(to_install)}"
            )
            return

        self.log(
            f"Installing missing web server / PHP packages: {' '.join(to_install)}",
            symbol="package",
        )
        if not self.apt_manager.update():
            raise InstallationError(
                "apt update failed before installing web prerequisites"
            )
        if not self.apt_manager.install(to_install):
            raise InstallationError("Failed to install apache2 + PHP packages")

        if enable_and_start_service(
            self.app_settings.apache_service, self.app_settings, self.logger
        ):
            self.log("Apache2 + PHP installed and service started", symbol="success")
