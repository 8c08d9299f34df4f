from unittest.mock import MagicMock

import pytest
import requests

from asl_common.download_utils import normalize_url, safe_download
from asl_common.exceptions import DownloadError, InstallationError


def _response(chunks=(b"#!/bin/sh\n", b"echo ok\n")):
    response = MagicMock()
    response.__enter__.return_value = response
    response.iter_content.return_value = list(chunks)
    return response


@pytest.fixture
def mock_sleep(mocker):
    return mocker.patch("asl_common.download_utils.time.sleep")


def test_normalize_url_adds_http_scheme():
    assert normalize_url("dvswitch.org/bookworm") == "http://dvswitch.org/bookworm"
    assert normalize_url("https://example.com/x") == "https://example.com/x"
    assert normalize_url("http://2577.asnode.org:43856/a") == "http://2577.asnode.org:43856/a"


def test_safe_download_writes_file(mocker, app_settings, tmp_path, mock_sleep):
    mock_get = mocker.patch(
        "asl_common.download_utils.requests.get", return_value=_response()
    )
    target = tmp_path / "work" / "swp-install"

    result = safe_download("https://example.com/swp-install", target, app_settings)

    assert result == target
    assert target.read_bytes() == b"#!/bin/sh\necho ok\n"
    mock_get.assert_called_once_with(
        "https://example.com/swp-install", stream=True, timeout=5
    )
    mock_sleep.assert_not_called()


def test_safe_download_retries_then_succeeds(mocker, app_settings, tmp_path, mock_sleep):
    mock_get = mocker.patch(
        "asl_common.download_utils.requests.get",
        side_effect=[requests.exceptions.ConnectionError("down"), _response()],
    )
    logger = MagicMock()

    safe_download("https://example.com/f", tmp_path / "f", app_settings, logger)

    assert mock_get.call_count == 2
    mock_sleep.assert_called_once_with(0)
    logger.warning.assert_called_once_with(
        "Download failed for https://example.com/f (attempt 1/3)"
    )


def test_safe_download_gives_up_after_max_retries(mocker, app_settings, tmp_path, mock_sleep):
    mock_get = mocker.patch(
        "asl_common.download_utils.requests.get",
        side_effect=requests.exceptions.Timeout("slow"),
    )

    with pytest.raises(DownloadError) as exc_info:
        safe_download("dvswitch.org/bookworm", tmp_path / "bookworm", app_settings)

    assert mock_get.call_count == 3
    # No sleep after the final attempt
    assert mock_sleep.call_count == 2
    assert isinstance(exc_info.value, InstallationError)
    assert exc_info.value.url == "http://dvswitch.org/bookworm"
    assert "after 3 attempts" in str(exc_info.value)


def test_safe_download_http_error_is_retried(mocker, app_settings, tmp_path, mock_sleep):
    failing = _response()
    failing.raise_for_status.side_effect = requests.exceptions.HTTPError("404")
    mocker.patch("asl_common.download_utils.requests.get", return_value=failing)

    with pytest.raises(DownloadError):
        safe_download("https://example.com/missing", tmp_path / "missing", app_settings)


def test_safe_download_default_policy(mocker, tmp_path, mock_sleep):
    mock_get = mocker.patch(
        "asl_common.download_utils.requests.get", return_value=_response()
    )

    safe_download("https://example.com/f", tmp_path / "f")

    mock_get.assert_called_once_with("https://example.com/f", stream=True, timeout=30.0)
