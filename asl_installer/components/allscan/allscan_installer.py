# asl_installer/components/allscan/allscan_installer.py
# -*- coding: utf-8 -*-
"""
AllScan installer module.

Fetches AllScan's own PHP install/update script and runs it.
"""

from asl_installer.base_component import BaseComponent
from asl_installer.registry import ComponentRegistry

ALLSCAN_INSTALLER_NAME = "AllScanInstallUpdate.php"


@ComponentRegistry.register(
    name="allscan",
    metadata={
        "flag": "-a",
        "long_flag": "--allscan",
        "display_name": "AllScan",
        "order": 10,
        "description": "Install allscan",
    },
)
class AllScanInstaller(BaseComponent):
    """Installer for the AllScan favorites/scan dashboard."""

    def install(self) -> None:
        self.log("Installing AllScan...", symbol="step")

        self.ensure_packages(["unzip"], "Failed to install unzip")

        installer = self.download(
            self.app_settings.allscan_installer_url,
            ALLSCAN_INSTALLER_NAME,
            mode=0o755,
        )

        self.log("Running AllScan installer...")
        self.run_installer(installer, "AllScan installation failed")
        self.log("AllScan installation completed successfully", symbol="success")

        self.remove_downloads(installer)
