# asl_installer/components/skywarnplus/skywarnplus_installer.py
# -*- coding: utf-8 -*-
"""
SkywarnPlus installer module.

Installs the Python runtime SkywarnPlus needs, runs its ``swp-install``
script (patched for Debian trixie) and wires its DTMF functions and tail
message into rpt.conf.
"""

import subprocess

from asl_common.command_utils import command_exists, run_command
from asl_common.python_utils import ensure_pip3, install_pip_package
from asl_common.system_utils import get_debian_codename
from asl_installer.base_component import BaseComponent
from asl_installer.registry import ComponentRegistry

SKYWARNPLUS_DEPENDENCIES = [
    "unzip",
    "python3",
    "python3-pip",
    "ffmpeg",
    "python3-ruamel.yaml",
    "python3-requests",
    "python3-dateutil",
]

INSTALLER_NAME = "swp-install"
PATCH_NAME = "swp-install-trixie.patch"

SKYWARNPLUS_DIR = "/usr/local/bin/SkywarnPlus"
FUNCTIONS_GUARD = "SkywarnPlus/SkyControl.py"

SKYCONTROL_FUNCTIONS = [
    ("831", "enable toggle", "Toggles SkywarnPlus"),
    ("832", "sayalert toggle", "Toggles SayAlert"),
    ("833", "sayallclear toggle", "Toggles SayAllClear"),
    ("834", "tailmessage toggle", "Toggles TailMessage"),
    ("835", "courtesytone toggle", "Toggles CourtesyTone"),
    ("836", "alertscript toggle", "Toggles AlertScript"),
    ("837", "idchange toggle", "Toggles IDChange"),
    ("838", "changect normal", 'Forces CT to "normal" mode'),
    ("839", "changeid normal", 'Forces ID to "normal" mode'),
]
ALERT_ORDINALS = ["1st", "2nd", "3rd", "4th", "5th", "6th", "7th", "8th", "9th"]

FUNCTION_LINES = [
    f"{code} = cmd,{SKYWARNPLUS_DIR}/SkyControl.py {args} ; {comment}"
    for code, args, comment in SKYCONTROL_FUNCTIONS
] + [
    f"84{n} = cmd,{SKYWARNPLUS_DIR}/SkyDescribe.py {n} ; SkyDescribe the {ordinal} alert"
    for n, ordinal in enumerate(ALERT_ORDINALS, start=1)
]

TAIL_OPTIONS = {
    "tailmessagetime": "600000",
    "tailsquashedtime": "30000",
}
TAIL_MESSAGE_GUARD = r"tailmessagelist.*SkywarnPlus"
TAIL_MESSAGE_ANCHOR = "tailsquashedtime=30000"
TAIL_MESSAGE_LINE = "tailmessagelist = /tmp/SkywarnPlus/wx-tail"


@ComponentRegistry.register(
    name="skywarnplus",
    metadata={
        "flag": "-w",
        "long_flag": "--skywarnplus",
        "display_name": "SkywarnPlus",
        "order": 30,
        "description": "Install skywarnplus",
    },
)
class SkywarnPlusInstaller(BaseComponent):
    """Installer for the SkywarnPlus weather alert system."""

    def install(self) -> None:
        self.log("Installing SkywarnPlus...", symbol="step")

        for dep in SKYWARNPLUS_DEPENDENCIES:
            self.ensure_packages([dep], f"Failed to install {dep}")

        self.install_pydub()

        installer = self.download(
            self.app_settings.skywarnplus_installer_url, INSTALLER_NAME, mode=0o755
        )
        self.apply_compatibility_patch(installer)

        self.log("Running SkywarnPlus installer...")
        self.run_installer(installer, "SkywarnPlus installation failed")
        self.remove_downloads(installer)

        self.configure_rpt_conf()

        self.log("SkywarnPlus installation completed", symbol="success")

    def install_pydub(self) -> None:
        """
        pydub is not packaged for trixie, and Python 3.13 dropped audioop, so
        both come from pip there. Other releases try apt first.
        """
        if get_debian_codename() == "trixie":
            self.log("Debian Trixie detected - using pip for pydub")
            ensure_pip3(self.apt_manager, self.logger)
            install_pip_package("pydub", self.app_settings, "pydub", self.logger)
            install_pip_package("audioop-lts", self.app_settings, "audioop", self.logger)
            return

        if self.apt_manager.is_installed("python3-pydub"):
            return
        self.log("Trying to install python3-pydub via apt")
        if not self.apt_manager.install("python3-pydub", quiet_errors=True):
            self.log("python3-pydub not in apt, falling back to pip", "warning", symbol="warning")
            ensure_pip3(self.apt_manager, self.logger)
            install_pip_package("pydub", self.app_settings, "pydub", self.logger)

    def apply_compatibility_patch(self, installer) -> None:
        self.log("Downloading Trixie compatibility patch...")
        patch_file = self.download(self.app_settings.skywarnplus_patch_url, PATCH_NAME)

        if not command_exists("patch"):
            self.ensure_packages(["patch"], "Failed to install patch")

        self.log("Applying patch (if needed)...")
        try:
            run_command(
                ["patch", installer.name, patch_file.name],
                self.app_settings,
                capture_output=True,
                current_logger=self.logger,
                cwd=str(installer.parent),
            )
        except (subprocess.CalledProcessError, FileNotFoundError):
            self.log("Patch already applied or failed - continuing", "warning", symbol="warning")
        self.remove_downloads(patch_file)

    def configure_rpt_conf(self) -> None:
        rpt_conf = self.rpt_conf()
        rpt_conf.backup("skywarn")
        if not rpt_conf.exists():
            return

        if rpt_conf.ensure_function_lines(FUNCTIONS_GUARD, FUNCTION_LINES):
            self.log("Added SkywarnPlus functions")

        if rpt_conf.set_options(**TAIL_OPTIONS):
            self.log("Set tailmessagetime and tailsquashedtime")

        if rpt_conf.ensure_line_before(
            TAIL_MESSAGE_GUARD, TAIL_MESSAGE_ANCHOR, TAIL_MESSAGE_LINE
        ):
            self.log("Added tailmessagelist")
