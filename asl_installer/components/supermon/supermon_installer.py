# asl_installer/components/supermon/supermon_installer.py
# -*- coding: utf-8 -*-
"""
Supermon installer module.

Runs the Supermon fresh-install and latest-update scripts, registers the
SMUPDATE DTMF function in rpt.conf and schedules the nightly astdb refresh.
"""

from asl_common.cron_utils import ensure_cron_entry
from asl_installer.base_component import BaseComponent
from asl_installer.registry import ComponentRegistry

SUPERMON_DEPENDENCIES = ["libcgi-session-perl", "bc"]
FRESH_INSTALL_SCRIPT = "supermonASL_fresh_install"
LATEST_UPDATE_SCRIPT = "supermonASL_latest_update"

SMUPDATE_GUARD = "SMUPDATE="
SMUPDATE_LINE = "SMUPDATE=cmd,/usr/local/sbin/supermonASL_latest_update"
CRON_MARKER = "astdb.php cron"


@ComponentRegistry.register(
    name="supermon",
    metadata={
        "flag": "-s",
        "long_flag": "--supermon",
        "display_name": "Supermon",
        "order": 20,
        "description": "Install supermon",
    },
)
class SupermonInstaller(BaseComponent):
    """Installer for the Supermon 7.4+ node dashboard."""

    def script_url(self, script_name: str) -> str:
        return f"{self.app_settings.supermon_base_url.rstrip('/')}/{script_name}"

    def install(self) -> None:
        self.log("Installing Supermon...", symbol="step")

        self.ensure_packages(
            SUPERMON_DEPENDENCIES, "Failed to install Supermon remaining deps"
        )

        fresh_install = self.download(
            self.script_url(FRESH_INSTALL_SCRIPT), FRESH_INSTALL_SCRIPT, mode=0o755
        )
        self.log("Running Supermon fresh install...")
        self.run_installer(fresh_install, "Supermon fresh installation failed")

        latest_update = self.download(
            self.script_url(LATEST_UPDATE_SCRIPT), LATEST_UPDATE_SCRIPT, mode=0o755
        )
        self.log("Running Supermon latest update...")
        self.run_installer(latest_update, "Supermon update failed")

        self.remove_downloads(fresh_install, latest_update)

        self.configure_rpt_conf()
        self.configure_cron()

        self.log("Supermon installation completed", symbol="success")

    def configure_rpt_conf(self) -> None:
        rpt_conf = self.rpt_conf()
        rpt_conf.backup("supermon")
        if rpt_conf.ensure_function_lines(SMUPDATE_GUARD, [SMUPDATE_LINE]):
            self.log("Added SMUPDATE function to configuration")

    def configure_cron(self) -> None:
        self.log("Setting up Supermon cron job...")
        ensure_cron_entry(
            CRON_MARKER,
            [
                self.app_settings.supermon_cron_comment,
                self.app_settings.supermon_cron_job,
            ],
            self.app_settings,
            current_logger=self.logger,
        )
