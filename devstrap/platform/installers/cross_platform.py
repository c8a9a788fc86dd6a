#!/usr/bin/env python3
"""
devstrap Cross-Platform Package Manager Adapters
Package installers that work on every platform (npm)
"""

from typing import List

from devstrap.platform.installers.base import BaseInstaller


class NpmInstaller(BaseInstaller):
    """Cross-platform global npm installer"""

    label = 'npm'
    remediation = 'npm is not installed. Install Node.js first.\nRun: dev install node'

    def __init__(self, windows: bool = False, **kwargs):
        # Windows: use npm.cmd to bypass PowerShell execution policy issues
        npm_cmd = 'npm.cmd' if windows else 'npm'
        kwargs.setdefault('sudo', False)
        super().__init__(npm_cmd, **kwargs)
        self.npm_cmd = npm_cmd

    def get_install_command(self, package: str) -> List[str]:
        cmd = [self.npm_cmd, 'install', '-g', package]
        if self.settings.quiet_mode:
            cmd.append('--silent')
        return cmd

    def is_installed(self, package: str) -> bool:
        """Check if npm package is installed globally"""
        return self.run_command([self.npm_cmd, 'list', '-g', '--depth=0', package]).success
