# asl_installer/rpt_conf.py
# -*- coding: utf-8 -*-
"""
Idempotent edits to the AllStarLink ``rpt.conf``.

The file belongs to app_rpt, so it is handled as plain lines: every
insertion is guarded by a check for text it would add, and option rewrites
leave the file unchanged once the values are in place.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional, Sequence, Union

from asl_common.command_utils import get_symbols, log_message
from asl_common.exceptions import InstallationError
from asl_common.file_utils import backup_file, read_text_bytesafe, write_text_atomic
from asl_installer.config_models import AppSettings

module_logger = logging.getLogger(__name__)

FUNCTIONS_SECTION = "[functions]"


def _split(text: str) -> List[str]:
    return text.split("\n")


def _join(lines: List[str]) -> str:
    return "\n".join(lines)


def insert_after_matching(text: str, anchor: str, new_lines: Sequence[str]) -> str:
    """Insert ``new_lines`` after every line containing ``anchor``."""
    result: List[str] = []
    for line in _split(text):
        result.append(line)
        if anchor in line:
            result.extend(new_lines)
    return _join(result)


def insert_before_matching(text: str, anchor: str, new_lines: Sequence[str]) -> str:
    """Insert ``new_lines`` before every line containing ``anchor``."""
    result: List[str] = []
    for line in _split(text):
        if anchor in line:
            result.extend(new_lines)
        result.append(line)
    return _join(result)


def set_option(text: str, key: str, value: str) -> str:
    """
    Uncomment and rewrite every ``key=...`` line as ``key=value``.

    A single leading ``#`` is removed from matching lines; anything after the
    value, including an inline comment, is replaced.
    """
    pattern = re.compile(rf"{re.escape(key)}\s*=.*")
    result: List[str] = []
    for line in _split(text):
        if pattern.search(line):
            if line.startswith("#"):
                line = line[1:]
            line = pattern.sub(f"{key}={value}", line)
        result.append(line)
    return _join(result)


class RptConf:
    """
    Wrapper around the rpt.conf path for backup and guarded edits.

    Every method is a no-op when the file does not exist.
    """

    def __init__(
        self,
        path: Union[str, Path],
        app_settings: Optional[AppSettings] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.path = Path(path)
        self.app_settings = app_settings
        self.logger = logger or module_logger
        self.symbols = get_symbols(app_settings)

    def exists(self) -> bool:
        return self.path.is_file()

    def backup(self, suffix: str) -> Optional[Path]:
        try:
            return backup_file(self.path, suffix, self.app_settings, self.logger)
        except OSError as e:
            raise InstallationError(
                f"Failed to back up {self.path}: {e}"
            ) from e

    def read(self) -> str:
        try:
            return read_text_bytesafe(self.path)
        except OSError as e:
            raise InstallationError(f"Failed to read {self.path}: {e}") from e

    def write(self, content: str) -> None:
        try:
            write_text_atomic(self.path, content)
        except OSError as e:
            raise InstallationError(f"Failed to write {self.path}: {e}") from e

    def contains(self, needle: str) -> bool:
        return self.exists() and needle in self.read()

    def matches(self, pattern: str) -> bool:
        """True if any line matches the regular expression ``pattern``."""
        if not self.exists():
            return False
        regex = re.compile(pattern)
        return any(regex.search(line) for line in _split(self.read()))

    def _update(self, content: str) -> bool:
        if content == self.read():
            return False
        self.write(content)
        return True

    def ensure_function_lines(self, guard: str, lines: Sequence[str]) -> bool:
        """
        Add ``lines`` under ``[functions]`` unless ``guard`` is already present.

        Returns:
            True if the file was changed.
        """
        if not self.exists() or self.contains(guard):
            return False
        changed = self._update(
            insert_after_matching(self.read(), FUNCTIONS_SECTION, lines)
        )
        if not changed:
            log_message(
                f"{self.symbols.get('warning', '!')} No {FUNCTIONS_SECTION} section found in {self.path}",
                "warning",
                self.logger,
                self.app_settings,
            )
        return changed

    def set_options(self, **options: str) -> bool:
        """Uncomment and set each ``key=value``; returns True if the file changed."""
        if not self.exists():
            return False
        content = self.read()
        for key, value in options.items():
            content = set_option(content, key, value)
        return self._update(content)

    def ensure_line_before(self, guard_pattern: str, anchor: str, line: str) -> bool:
        """
        Insert ``line`` before lines containing ``anchor`` unless a line
        already matches ``guard_pattern``.
        """
        if not self.exists() or self.matches(guard_pattern):
            return False
        return self._update(insert_before_matching(self.read(), anchor, [line]))
