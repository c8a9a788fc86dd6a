#!/usr/bin/env python3
"""
devstrap Linux Package Manager Adapters
APT, DNF, YUM and Flatpak
"""

import os
from typing import List

from devstrap.platform.installers.base import BaseInstaller
from devstrap.platform.process import CommandResult


class AptInstaller(BaseInstaller):
    """Debian/Ubuntu/Raspberry Pi OS/WSL package installer using apt"""

    label = 'APT'
    remediation = 'APT should be part of every Debian based system. Check that apt-get is on your PATH.'

    def __init__(self, **kwargs):
        super().__init__('apt-get', **kwargs)

    def _noninteractive(self, cmd: List[str]) -> List[str]:
        # sudo resets the environment, so the variable goes on the command line
        if self.sudo:
            return ['sudo', 'DEBIAN_FRONTEND=noninteractive'] + cmd
        return cmd

    def _env(self):
        if self.sudo:
            return None
        return {**os.environ, 'DEBIAN_FRONTEND': 'noninteractive'}

    def get_install_command(self, package: str) -> List[str]:
        cmd = ['apt-get', 'install']
        if self.settings.auto_approve:
            cmd.append('-y')
            cmd.extend([
                '-o', 'Dpkg::Options::=--force-confdef',
                '-o', 'Dpkg::Options::=--force-confold',
            ])
        if self.settings.quiet_mode:
            cmd.append('--quiet')
        cmd.append(package)
        return self._noninteractive(cmd)

    def install(self, package: str) -> CommandResult:
        return self.run_mutation(self.get_install_command(package), env=self._env())

    def update_index(self) -> CommandResult:
        cmd = ['apt-get', 'update']
        if self.settings.quiet_mode:
            cmd.append('-qq')
        return self.run_mutation(self._noninteractive(cmd), env=self._env())

    def is_installed(self, package: str) -> bool:
        """Check if package is installed via dpkg"""
        result = self.run_command(['dpkg-query', '-W', '-f=${Status}', package])
        return result.success and 'install ok installed' in result.stdout


class DnfInstaller(BaseInstaller):
    """Fedora/RHEL 8+/Amazon Linux 2023 package installer using dnf"""

    label = 'dnf'
    remediation = 'dnf was not found. On older releases use yum instead.'

    def __init__(self, **kwargs):
        super().__init__('dnf', **kwargs)

    def get_install_command(self, package: str) -> List[str]:
        cmd = ['dnf', 'install']
        if self.settings.auto_approve:
            cmd.append('-y')
        if self.settings.quiet_mode:
            cmd.append('--quiet')
        cmd.append(package)
        return self.with_sudo(cmd)

    def is_installed(self, package: str) -> bool:
        return self.run_command(['rpm', '-q', package]).success


class YumInstaller(BaseInstaller):
    """RHEL/CentOS 7 and Amazon Linux 2 package installer using yum"""

    label = 'yum'
    remediation = 'yum was not found. Check that the yum package is installed.'

    def __init__(self, **kwargs):
        super().__init__('yum', **kwargs)

    def get_install_command(self, package: str) -> List[str]:
        cmd = ['yum', 'install']
        if self.settings.auto_approve:
            cmd.append('-y')
        if self.settings.quiet_mode:
            cmd.append('-q')
        cmd.append(package)
        return self.with_sudo(cmd)

    def is_installed(self, package: str) -> bool:
        return self.run_command(['rpm', '-q', package]).success


class FlatpakInstaller(BaseInstaller):
    """Desktop application installer using Flatpak and the Flathub remote"""

    label = 'Flatpak'
    remediation = 'Flatpak is not installed. Install it first: https://flatpak.org/setup/'

    REMOTE = 'flathub'
    REMOTE_URL = 'https://dl.flathub.org/repo/flathub.flatpakrepo'

    def __init__(self, **kwargs):
        super().__init__('flatpak', **kwargs)

    def update_index(self) -> CommandResult:
        """Make sure the Flathub remote is configured"""
        return self.run_mutation(
            ['flatpak', 'remote-add', '--if-not-exists', self.REMOTE, self.REMOTE_URL]
        )

    def get_install_command(self, package: str) -> List[str]:
        cmd = ['flatpak', 'install']
        if self.settings.auto_approve:
            cmd.extend(['-y', '--noninteractive'])
        cmd.extend([self.REMOTE, package])
        return cmd

    def is_installed(self, package: str) -> bool:
        return self.run_command(['flatpak', 'info', package]).success
