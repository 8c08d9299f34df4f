# asl_installer/orchestrator.py
# -*- coding: utf-8 -*-
"""
Runs the prerequisite check and the selected add-on installers in order.
"""

import importlib
import logging
import os
from typing import Iterable, List, Optional

import asl_installer.components
from asl_common.command_utils import get_symbols, log_message
from asl_common.debian.apt_manager import AptManager
from asl_common.exceptions import InstallationError
from asl_common.file_utils import cleanup_directory
from asl_installer.components.prerequisites.prerequisites_installer import (
    PrerequisitesInstaller,
)
from asl_installer.config_models import AppSettings
from asl_installer.registry import ComponentRegistry

module_logger = logging.getLogger(__name__)


def load_all_components(logger: Optional[logging.Logger] = None) -> List[str]:
    """
    Import every ``components/<name>/<name>_installer.py`` so that it
    registers itself. Returns the imported module names.
    """
    logger_to_use = logger or module_logger
    components_dir = asl_installer.components.__path__[0]
    loaded = []
    for item in sorted(os.listdir(components_dir)):
        item_path = os.path.join(components_dir, item)
        if not os.path.isdir(item_path) or item.startswith("__"):
            continue
        if not os.path.isfile(os.path.join(item_path, f"{item}_installer.py")):
            continue
        module_name = f"asl_installer.components.{item}.{item}_installer"
        importlib.import_module(module_name)
        logger_to_use.debug(f"Loaded component module {module_name}")
        loaded.append(module_name)
    return loaded


class ComponentOrchestrator:
    """
    Sequential, fail-fast runner for add-on installers.

    The first InstallationError stops the run and propagates to the caller;
    steps that already completed are left in place.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
        apt_manager: Optional[AptManager] = None,
    ):
        self.app_settings = app_settings
        self.logger = logger or module_logger
        self.symbols = get_symbols(app_settings)
        self._apt_manager = apt_manager

    @property
    def apt_manager(self) -> AptManager:
        if self._apt_manager is None:
            try:
                self._apt_manager = AptManager(self.app_settings, logger=self.logger)
            except FileNotFoundError as e:
                raise InstallationError(str(e)) from e
        return self._apt_manager

    def ensure_prerequisites(self) -> None:
        PrerequisitesInstaller(
            self.app_settings, self.apt_manager, logger=self.logger
        ).install()

    def install_component(self, name: str) -> None:
        component_class = ComponentRegistry.get_component(name)
        display_name = component_class.metadata.get("display_name", name)

        if self.app_settings.dry_run:
            log_message(
                f"[DRY RUN] Would install {display_name}",
                "info",
                self.logger,
                self.app_settings,
            )
            return

        component = component_class(
            self.app_settings, self.apt_manager, logger=self.logger
        )
        component.install()

    def run(self, components: Iterable[str]) -> None:
        """
        Install ``components`` in their registered order.

        Raises:
            InstallationError: From the first step that fails.
            KeyError: If a component name is not registered.
        """
        ordered = ComponentRegistry.ordered(components)
        temp_dir = self.app_settings.temp_dir

        self.ensure_prerequisites()

        if not self.app_settings.dry_run:
            try:
                temp_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise InstallationError(
                    f"Failed to create temp directory {temp_dir}: {e}"
                ) from e

        log_message(
            f"{self.symbols.get('rocket', '🚀')} Starting M-Apps installation script",
            "info",
            self.logger,
            self.app_settings,
        )

        if not self.app_settings.conf_file.is_file():
            log_message(
                f"{self.symbols.get('warning', '!')} rpt.conf not found - some steps may behave differently",
                "warning",
                self.logger,
                self.app_settings,
            )

        for name in ordered:
            self.install_component(name)

        if self.app_settings.dry_run:
            log_message(
                "Dry run complete - no changes applied",
                "info",
                self.logger,
                self.app_settings,
            )
            return

        cleanup_directory(temp_dir, self.app_settings, current_logger=self.logger)
        log_message(
            f"{self.symbols.get('sparkles', '✨')} Installation finished. Log: {self.app_settings.log_file}",
            "info",
            self.logger,
            self.app_settings,
        )
