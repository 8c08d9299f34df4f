# asl_installer/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for application configuration.

This module defines the structured settings for the installer,
including defaults, type annotations, and descriptions.
Values can be overridden by environment variables (prefix ``MAPP_``),
a YAML file and command-line flags; see ``config_loader``.
"""

from pathlib import Path
from typing import Dict, List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Default Static Values (can be overridden by config file/env/cli) ---
CONF_FILE_DEFAULT: str = "/etc/asterisk/rpt.conf"
LOG_FILE_DEFAULT: str = "/var/log/m_app_install.log"
TEMP_DIR_DEFAULT: str = "/root/m_app_install"
CONFIG_YAML_DEFAULT: str = "/etc/m_app_install/config.yaml"

WEB_PREREQ_PACKAGES_DEFAULT: List[str] = ["apache2", "php", "libapache2-mod-php"]
APACHE_SERVICE_DEFAULT: str = "apache2"

ALLSCAN_INSTALLER_URL_DEFAULT: str = (
    "https://raw.githubusercontent.com/davidgsd/AllScan/main/AllScanInstallUpdate.php"
)
SUPERMON_BASE_URL_DEFAULT: str = "http://2577.asnode.org:43856"
SKYWARNPLUS_INSTALLER_URL_DEFAULT: str = (
    "https://raw.githubusercontent.com/Mason10198/SkywarnPlus/main/swp-install"
)
SKYWARNPLUS_PATCH_URL_DEFAULT: str = (
    "https://raw.githubusercontent.com/KD5FMU/ASL3_Multi_App_Install/"
    "refs/heads/main/swp-install-trixie.patch"
)
DVSWITCH_INSTALLER_URL_DEFAULT: str = "dvswitch.org/bookworm"
DVSWITCH_CONFIG_PHP_DEFAULT: str = "/usr/share/dvswitch/include/config.php"

SUPERMON_CRON_COMMENT_DEFAULT: str = "# Supermon 7.4 updater crontab entry"
SUPERMON_CRON_JOB_DEFAULT: str = (
    "0 3 * * * /var/www/html/supermon/astdb.php cron"
)

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
    "step": "➡️",
    "gear": "⚙️",
    "package": "📦",
    "rocket": "🚀",
    "sparkles": "✨",
    "critical": "🔥",
    "debug": "🐛",
}


class DownloadSettings(BaseSettings):
    """Retry policy for fetching add-on installers."""
    model_config = SettingsConfigDict(
        env_prefix="MAPP_DOWNLOAD_",
        extra="ignore",
    )

    max_retries: int = Field(default=3, ge=1, description="Attempts per download before giving up.")
    retry_delay: float = Field(default=2.0, ge=0, description="Seconds to wait between attempts.")
    timeout: float = Field(default=30.0, gt=0, description="Per-request timeout in seconds.")


class AppSettings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(env_prefix="MAPP_", extra="ignore")

    conf_file: Path = Field(default=Path(CONF_FILE_DEFAULT),
                            description="AllStarLink rpt.conf patched by the add-on installers.")
    log_file: Path = Field(default=Path(LOG_FILE_DEFAULT), description="Log file appended by every run.")
    temp_dir: Path = Field(default=Path(TEMP_DIR_DEFAULT),
                           description="Scratch directory for downloaded installers.")
    dry_run: bool = Field(default=False, description="Log destructive actions without executing them.")
    verbose: bool = Field(default=False, description="Show DEBUG messages on the console.")

    web_prereq_packages: List[str] = Field(
        default_factory=lambda: list(WEB_PREREQ_PACKAGES_DEFAULT),
        description="Web server / PHP packages needed by Supermon, DVSwitch and AllScan.",
    )
    apache_service: str = Field(default=APACHE_SERVICE_DEFAULT, description="systemd unit for the web server.")

    allscan_installer_url: str = Field(default=ALLSCAN_INSTALLER_URL_DEFAULT)
    supermon_base_url: str = Field(default=SUPERMON_BASE_URL_DEFAULT,
                                   description="Location of the Supermon install/update scripts.")
    supermon_cron_comment: str = Field(default=SUPERMON_CRON_COMMENT_DEFAULT)
    supermon_cron_job: str = Field(default=SUPERMON_CRON_JOB_DEFAULT)
    skywarnplus_installer_url: str = Field(default=SKYWARNPLUS_INSTALLER_URL_DEFAULT)
    skywarnplus_patch_url: str = Field(default=SKYWARNPLUS_PATCH_URL_DEFAULT,
                                       description="Debian trixie compatibility patch for swp-install.")
    dvswitch_installer_url: str = Field(default=DVSWITCH_INSTALLER_URL_DEFAULT)
    dvswitch_config_php: Path = Field(default=Path(DVSWITCH_CONFIG_PHP_DEFAULT))
    usrp_port_from: str = Field(default="31001", description="USRP port shipped in DVSwitch config.php.")
    usrp_port_to: str = Field(default="34001", description="USRP port expected by AllStarLink.")

    download: DownloadSettings = Field(default_factory=DownloadSettings)

    symbols: Dict[str, str] = Field(default_factory=lambda: dict(SYMBOLS_DEFAULT))
