#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Handles downloading add-on installers.

Downloads are streamed to disk with requests and retried a bounded number
of times before the run is aborted with a DownloadError.
"""

import logging
import time
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlparse

import requests

from asl_common.exceptions import DownloadError
from asl_installer.config_models import AppSettings, DownloadSettings

module_logger = logging.getLogger(__name__)


def normalize_url(url: str) -> str:
    """Add an ``http://`` scheme to scheme-less URLs such as ``dvswitch.org/bookworm``."""
    if not urlparse(url).scheme:
        return f"http://{url}"
    return url


def download_file(
    url: str,
    download_to_path: Union[str, Path],
    timeout: float = 30.0,
) -> None:
    """
    Download ``url`` to ``download_to_path`` in a single attempt.

    Raises:
        requests.exceptions.RequestException: On any HTTP or network error.
        OSError: If the file cannot be written.
    """
    download_path = Path(download_to_path)
    download_path.parent.mkdir(parents=True, exist_ok=True)
    with requests.get(url, stream=True, timeout=timeout) as response:
        response.raise_for_status()
        with open(download_path, "wb") as f:
            for chunk in response.iter_content(chunk_size=8192):
                if chunk:
                    f.write(chunk)


def safe_download(
    url: str,
    download_to_path: Union[str, Path],
    app_settings: Optional[AppSettings] = None,
    current_logger: Optional[logging.Logger] = None,
) -> Path:
    """
    Download a file, retrying on failure.

    Args:
        url: Source URL. A missing scheme is treated as plain HTTP.
        download_to_path: Destination file.
        app_settings: Supplies the retry policy; defaults apply when omitted.
        current_logger: Optional logger instance.

    Returns:
        The destination path.

    Raises:
        DownloadError: If every attempt failed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    policy = app_settings.download if app_settings else DownloadSettings()
    download_path = Path(download_to_path)
    full_url = normalize_url(url)
    last_error: Optional[str] = None

    for attempt in range(1, policy.max_retries + 1):
        try:
            download_file(full_url, download_path, timeout=policy.timeout)
            logger_to_use.debug(f"Successfully downloaded {full_url}")
            return download_path
        except (requests.exceptions.RequestException, OSError) as e:
            last_error = str(e)
            logger_to_use.warning(
                f"Download failed for {full_url} (attempt {attempt}/{policy.max_retries})"
            )
            logger_to_use.debug(f"Download error: {e}")
            if attempt < policy.max_retries:
                time.sleep(policy.retry_delay)

    raise DownloadError(full_url, policy.max_retries, last_error)
