# tests/conftest.py
import logging
from unittest.mock import MagicMock

import pytest

from asl_common.debian.apt_manager import AptManager
from asl_installer.config_models import AppSettings, DownloadSettings
from asl_installer.orchestrator import load_all_components

# Components register themselves on import; load them once for every test.
load_all_components()

SAMPLE_RPT_CONF = """\
[1999](node-main)
rxchannel = SimpleUSB/1999
duplex = 1
#tailmessagetime=900000
#tailsquashedtime=15000

[functions]
1 = ilink,1
2 = ilink,2

[telemetry]
ct1 = |t(350,0,100,2048)
"""


@pytest.fixture
def app_settings(tmp_path):
    """Settings that keep every file the installer touches under tmp_path."""
    return AppSettings(
        conf_file=tmp_path / "rpt.conf",
        log_file=tmp_path / "m_app_install.log",
        temp_dir=tmp_path / "work",
        dvswitch_config_php=tmp_path / "config.php",
        download=DownloadSettings(max_retries=3, retry_delay=0, timeout=5),
    )


@pytest.fixture
def rpt_conf_file(app_settings):
    app_settings.conf_file.write_text(SAMPLE_RPT_CONF, encoding="utf-8")
    return app_settings.conf_file


@pytest.fixture
def mock_apt_manager():
    manager = MagicMock(spec=AptManager)
    manager.install.return_value = True
    manager.update.return_value = True
    manager.is_installed.return_value = False
    manager.missing_packages.return_value = []
    return manager


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Drop and close handlers that setup_logging attached during a test."""
    root_logger = logging.getLogger()
    saved_level = root_logger.level
    before = set(root_logger.handlers)
    yield
    for handler in root_logger.handlers[:]:
        if handler not in before:
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(saved_level)
