#!/usr/bin/env python3
"""
devstrap Base Package Manager Adapter
Base class for package manager adapters
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Mapping, Optional

from devstrap.errors import LockError
from devstrap.platform.lock import PackageManagerLock
from devstrap.platform.process import CommandResult, CommandRunner


@dataclass
class InstallSettings:
    """Package manager flags taken from configuration"""
    auto_approve: bool = True
    quiet_mode: bool = True
    update_index: bool = True

    @classmethod
    def from_config(cls, config) -> 'InstallSettings':
        return cls(
            auto_approve=config.install_auto_approve,
            quiet_mode=config.install_quiet_mode,
            update_index=config.update_index,
        )


def default_sudo(runner: CommandRunner) -> bool:
    """Use sudo when not root and sudo exists"""
    geteuid = getattr(os, 'geteuid', None)
    if geteuid is None or geteuid() == 0:
        return False
    return runner.exists('sudo')


class BaseInstaller(ABC):
    """
    Abstract base class for package manager adapters
    """

    # Human readable name used in progress messages
    label = ''

    # Shown when the package manager itself is missing
    remediation = ''

    def __init__(
        self,
        package_manager: str,
        runner: Optional[CommandRunner] = None,
        settings: Optional[InstallSettings] = None,
        lock: Optional[PackageManagerLock] = None,
        sudo: Optional[bool] = None,
    ):
        self.package_manager = package_manager
        self.runner = runner or CommandRunner()
        self.settings = settings or InstallSettings()
        self.lock = lock
        self.sudo = default_sudo(self.runner) if sudo is None else sudo

    @property
    def pm_path(self) -> Optional[str]:
        return self.runner.which(self.package_manager)

    def is_available(self) -> bool:
        """Check if the package manager binary can be found"""
        return self.pm_path is not None

    @abstractmethod
    def is_installed(self, package: str) -> bool:
        """
        Check if a package is already installed

        Args:
            package: Package name to check

        Returns:
            True if package is installed
        """

    @abstractmethod
    def get_install_command(self, package: str) -> List[str]:
        """
        Get the install command for a package

        Args:
            package: Package name to install

        Returns:
            Command and arguments
        """

    def install(self, package: str) -> CommandResult:
        """
        Install a package

        Args:
            package: Package name to install

        Returns:
            CommandResult of the install command
        """
        return self.run_mutation(self.get_install_command(package))

    def update_index(self) -> CommandResult:
        """Refresh package lists; a no-op for managers that do it on install"""
        return CommandResult(argv=[], returncode=0)

    def with_sudo(self, cmd: List[str]) -> List[str]:
        return (['sudo'] + cmd) if self.sudo else cmd

    def run_command(self, cmd: List[str], env: Optional[Mapping[str, str]] = None) -> CommandResult:
        """Run a read-only command (queries, listings)"""
        return self.runner.run(cmd, env=env)

    def run_mutation(self, cmd: List[str], env: Optional[Mapping[str, str]] = None) -> CommandResult:
        """
        Run a command that changes the package database, holding the
        package manager lock when one is configured
        """
        if self.lock is None:
            return self.run_command(cmd, env=env)

        try:
            with self.lock:
                return self.run_command(cmd, env=env)
        except LockError as e:
            return CommandResult(argv=cmd, returncode=1, stderr=str(e))
