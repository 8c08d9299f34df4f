# asl_installer/components/dvswitch/dvswitch_installer.py
# -*- coding: utf-8 -*-
"""
DVSwitch Server installer module.

The DVSwitch bootstrap script adds the DVSwitch apt repository; the server
package is then installed from it and its USRP port moved to the one the
AllStarLink node expects.
"""

from asl_common.exceptions import InstallationError
from asl_common.file_utils import read_text_bytesafe, write_text_atomic
from asl_installer.base_component import BaseComponent
from asl_installer.registry import ComponentRegistry

BOOTSTRAP_SCRIPT = "bookworm"
DVSWITCH_PACKAGE = "dvswitch-server"


def replace_first_per_line(text: str, old: str, new: str) -> str:
    """Replace the first occurrence of ``old`` on every line."""
    return "\n".join(line.replace(old, new, 1) for line in text.split("\n"))


@ComponentRegistry.register(
    name="dvswitch",
    metadata={
        "flag": "-d",
        "long_flag": "--dvswitch",
        "display_name": "DVSwitch Server",
        "order": 40,
        "description": "Install dvswitch",
    },
)
class DVSwitchInstaller(BaseComponent):
    """Installer for DVSwitch Server."""

    def install(self) -> None:
        self.log("Installing DVSwitch Server...", symbol="step")

        bootstrap = self.download(
            self.app_settings.dvswitch_installer_url, BOOTSTRAP_SCRIPT, mode=0o755
        )
        self.log("Running DVSwitch bookworm installer...")
        self.run_installer(bootstrap, "DVSwitch bookworm script failed")
        self.remove_downloads(bootstrap)

        if not self.apt_manager.update():
            self.log("apt update failed - continuing with cached package lists", "warning", symbol="warning")
        if not self.apt_manager.install(DVSWITCH_PACKAGE):
            raise InstallationError("Failed to install dvswitch-server package")

        self.configure_usrp_port()

        self.log("DVSwitch Server installation completed", symbol="success")

    def configure_usrp_port(self) -> None:
        config_file = self.app_settings.dvswitch_config_php
        if not config_file.is_file():
            self.log("DVSwitch config.php not found", "warning", symbol="warning")
            return

        port_from = self.app_settings.usrp_port_from
        port_to = self.app_settings.usrp_port_to
        try:
            content = read_text_bytesafe(config_file)
            updated = replace_first_per_line(content, port_from, port_to)
            if updated != content:
                write_text_atomic(config_file, updated)
        except OSError as e:
            self.log(f"Could not update USRP port in config.php: {e}", "warning", symbol="warning")
            return
        self.log(f"Changed USRP port to {port_to}")
