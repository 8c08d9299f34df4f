import subprocess
from pathlib import Path

import pytest

from asl_common.exceptions import InstallationError
from asl_installer.components.dvswitch.dvswitch_installer import (
    DVSwitchInstaller,
    replace_first_per_line,
)

CONFIG_PHP = """\
<?php
define("USRP_PORT", "31001");
define("OTHER", "12345");
"""


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
    }


def test_replace_first_per_line():
    assert replace_first_per_line("31001 31001\nx\n31001", "31001", "34001") == (
        "34001 31001\nx\n34001"
    )


def test_full_install(app_settings, mock_apt_manager, patched_steps):
    app_settings.dvswitch_config_php.write_text(CONFIG_PHP)

    DVSwitchInstaller(app_settings, mock_apt_manager).install()

    assert patched_steps["download"].call_args.args[0] == "dvswitch.org/bookworm"
    assert patched_steps["run"].call_args.args[0] == ["./bookworm"]
    mock_apt_manager.update.assert_called_once()
    mock_apt_manager.install.assert_called_once_with("dvswitch-server")
    assert app_settings.dvswitch_config_php.read_text() == (
        '<?php\ndefine("USRP_PORT", "34001");\ndefine("OTHER", "12345");\n'
    )
    assert not (app_settings.temp_dir / "bookworm").exists()


def test_apt_update_failure_is_warning(app_settings, mock_apt_manager, patched_steps):
    mock_apt_manager.update.return_value = False

    DVSwitchInstaller(app_settings, mock_apt_manager).install()

    mock_apt_manager.install.assert_called_once_with("dvswitch-server")


def test_package_failure(app_settings, mock_apt_manager, patched_steps):
    mock_apt_manager.install.return_value = False

    with pytest.raises(InstallationError, match="Failed to install dvswitch-server package"):
        DVSwitchInstaller(app_settings, mock_apt_manager).install()


def test_bootstrap_failure(app_settings, mock_apt_manager, patched_steps):
    patched_steps["run"].side_effect = subprocess.CalledProcessError(1, "./bookworm")

    with pytest.raises(InstallationError, match="DVSwitch bookworm script failed"):
        DVSwitchInstaller(app_settings, mock_apt_manager).install()

    mock_apt_manager.install.assert_not_called()


def test_missing_config_php_is_warning(app_settings, mock_apt_manager):
    DVSwitchInstaller(app_settings, mock_apt_manager).configure_usrp_port()

    assert not app_settings.dvswitch_config_php.exists()


def test_port_change_is_idempotent(app_settings, mock_apt_manager):
    app_settings.dvswitch_config_php.write_text(CONFIG_PHP)
    installer = DVSwitchInstaller(app_settings, mock_apt_manager)

    installer.configure_usrp_port()
    first = app_settings.dvswitch_config_php.read_text()
    installer.configure_usrp_port()

    assert app_settings.dvswitch_config_php.read_text() == first


def test_non_utf8_config_php(app_settings, mock_apt_manager):
    app_settings.dvswitch_config_php.write_bytes(
        b'<?php\n// r\xe9seau\ndefine("USRP_PORT", "31001");\n'
    )

    DVSwitchInstaller(app_settings, mock_apt_manager).configure_usrp_port()

    assert app_settings.dvswitch_config_php.read_bytes() == (
        b'<?php\n// r\xe9seau\ndefine("USRP_PORT", "34001");\n'
    )
