# asl_common/exceptions.py
# -*- coding: utf-8 -*-
"""
Exceptions raised by installer steps.

Every fatal condition is an InstallationError; the entry point turns it into
a logged error and exit status 1.
"""

from typing import Optional


class InstallationError(RuntimeError):
    """A step failed and the run must stop."""


class DownloadError(InstallationError):
    """A remote resource could not be fetched within the retry budget."""

    def __init__(self, url: str, attempts: int, reason: Optional[str] = None):
        self.url = url
        self.attempts = attempts
        self.reason = reason
        message = f"Failed to download {url} after {attempts} attempts"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
