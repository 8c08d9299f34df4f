import os
import stat
import subprocess
from pathlib import Path

import pytest

from asl_common.exceptions import InstallationError
from asl_installer.components.supermon.supermon_installer import (
    SMUPDATE_LINE,
    SupermonInstaller,
)

MODULE = "asl_installer.components.supermon.supermon_installer"


def _fake_download(url, path, *args, **kwargs):
    Path(path).write_text("#!/bin/bash\n")


@pytest.fixture
def patched_steps(app_settings, mocker):
    app_settings.temp_dir.mkdir(parents=True)
    return {
        "download": mocker.patch(
            "asl_installer.base_component.safe_download", side_effect=_fake_download
        ),
        "run": mocker.patch("asl_installer.base_component.run_command"),
        "cron": mocker.patch(f"{MODULE}.ensure_cron_entry", return_value=True),
    }


def test_script_url_joins_base(app_settings, mock_apt_manager):
    app_settings.supermon_base_url = "http://example.org:8080/"
    installer = SupermonInstaller(app_settings, mock_apt_manager)

    assert installer.script_url("supermonASL_fresh_install") == (
        "http://example.org:8080/supermonASL_fresh_install"
    )


def test_full_install(app_settings, mock_apt_manager, rpt_conf_file, patched_steps, mocker):
    SupermonInstaller(app_settings, mock_apt_manager).install()

    mock_apt_manager.install.assert_called_once_with(["libcgi-session-perl", "bc"])
    urls = [c.args[0] for c in patched_steps["download"].call_args_list]
    assert urls == [
        "http://2577.asnode.org:43856/supermonASL_fresh_install",
        "http://2577.asnode.org:43856/supermonASL_latest_update",
    ]
    commands = [c.args[0] for c in patched_steps["run"].call_args_list]
    assert commands == [["./supermonASL_fresh_install"], ["./supermonASL_latest_update"]]

    content = rpt_conf_file.read_text()
    assert f"[functions]\n{SMUPDATE_LINE}\n" in content
    assert list(rpt_conf_file.parent.glob("rpt.conf.bak-supermon-*"))

    patched_steps["cron"].assert_called_once_with(
        "astdb.php cron",
        [
            "# Supermon 7.4 updater crontab entry",
            "0 3 * * * /var/www/html/supermon/astdb.php cron",
        ],
        app_settings,
        current_logger=mocker.ANY,
    )


def test_rerun_does_not_duplicate_smupdate(
    app_settings, mock_apt_manager, rpt_conf_file, patched_steps
):
    SupermonInstaller(app_settings, mock_apt_manager).install()
    first = rpt_conf_file.read_text()
    SupermonInstaller(app_settings, mock_apt_manager).install()

    assert rpt_conf_file.read_text() == first
    assert first.count("SMUPDATE=") == 1


def test_missing_rpt_conf_still_sets_cron(app_settings, mock_apt_manager, patched_steps):
    SupermonInstaller(app_settings, mock_apt_manager).install()

    assert not app_settings.conf_file.exists()
    patched_steps["cron"].assert_called_once()


def test_fresh_install_failure_stops(app_settings, mock_apt_manager, patched_steps):
    patched_steps["run"].side_effect = subprocess.CalledProcessError(1, "x")

    with pytest.raises(InstallationError, match="Supermon fresh installation failed"):
        SupermonInstaller(app_settings, mock_apt_manager).install()

    assert patched_steps["download"].call_count == 1
    patched_steps["cron"].assert_not_called()


def test_update_failure(app_settings, mock_apt_manager, patched_steps):
    patched_steps["run"].side_effect = [None, subprocess.CalledProcessError(1, "x")]

    with pytest.raises(InstallationError, match="Supermon update failed"):
        SupermonInstaller(app_settings, mock_apt_manager).install()


def test_dependency_failure(app_settings, mock_apt_manager, patched_steps):
    mock_apt_manager.install.return_value = False

    with pytest.raises(InstallationError, match="Failed to install Supermon remaining deps"):
        SupermonInstaller(app_settings, mock_apt_manager).install()

    patched_steps["download"].assert_not_called()


@pytest.mark.skipif(os.geteuid() != 0, reason="changing file ownership needs root")
def test_rpt_conf_keeps_owner_and_mode(app_settings, mock_apt_manager, rpt_conf_file):
    os.chown(rpt_conf_file, 65534, 65534)
    os.chmod(rpt_conf_file, 0o640)

    SupermonInstaller(app_settings, mock_apt_manager).configure_rpt_conf()

    result = rpt_conf_file.stat()
    assert "SMUPDATE=" in rpt_conf_file.read_text()
    assert (result.st_uid, result.st_gid) == (65534, 65534)
    assert stat.S_IMODE(result.st_mode) == 0o640
