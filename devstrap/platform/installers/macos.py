#!/usr/bin/env python3
"""
devstrap macOS Package Manager Adapter
Package installer for macOS using Homebrew
"""

from typing import List

from devstrap.platform.installers.base import BaseInstaller
from devstrap.platform.process import CommandResult


class HomebrewInstaller(BaseInstaller):
    """macOS package installer using Homebrew (formulae and casks)"""

    label = 'Homebrew'
    remediation = 'Homebrew is not installed. Please install Homebrew first.\nRun: dev install homebrew'

    def __init__(self, **kwargs):
        # brew refuses to run as root
        kwargs.setdefault('sudo', False)
        super().__init__('brew', **kwargs)

    def get_install_command(self, package: str) -> List[str]:
        cmd = ['brew', 'install', package]
        if self.settings.quiet_mode:
            cmd.append('--quiet')
        return cmd

    def get_cask_install_command(self, cask: str) -> List[str]:
        cmd = ['brew', 'install', '--cask', cask]
        if self.settings.quiet_mode:
            cmd.append('--quiet')
        return cmd

    def install_cask(self, cask: str) -> CommandResult:
        return self.run_mutation(self.get_cask_install_command(cask))

    def is_installed(self, package: str) -> bool:
        """Check if a formula is installed"""
        return self.run_command(['brew', 'list', '--formula', package]).success

    def is_cask_installed(self, cask: str) -> bool:
        return self.run_command(['brew', 'list', '--cask', cask]).success
