#!/usr/bin/env python3
"""
devstrap Windows Package Manager Adapter
Package installer for Windows using Chocolatey
"""

import os
import sys
from typing import List, Optional

from devstrap.platform.installers.base import BaseInstaller
from devstrap.platform.process import CommandResult

CHOCO_DEFAULT_PATH = r'C:\ProgramData\chocolatey\bin\choco.exe'


def refresh_windows_path() -> bool:
    """
    Refresh PATH environment variable from Windows registry.
    This makes newly installed tools available in the current process.
    Returns True if successful, False otherwise.
    """
    if sys.platform != 'win32':
        return False

    import winreg

    def _read(hive, key_path: str) -> str:
        try:
            with winreg.OpenKey(hive, key_path) as key:
                return winreg.QueryValueEx(key, 'Path')[0]
        except OSError:
            return ''

    system_path = _read(
        winreg.HKEY_LOCAL_MACHINE,
        r'SYSTEM\CurrentControlSet\Control\Session Manager\Environment',
    )
    user_path = _read(winreg.HKEY_CURRENT_USER, r'Environment')

    # Combine all paths, removing duplicates while preserving order
    paths: List[str] = []
    for path_str in [user_path, system_path]:
        for path in path_str.split(';'):
            path = os.path.expandvars(path.strip())
            if path and path not in paths:
                paths.append(path)

    if not paths:
        return False

    os.environ['PATH'] = ';'.join(paths)
    return True


class ChocolateyInstaller(BaseInstaller):
    """Windows package installer using Chocolatey (also used from Git Bash)"""

    label = 'Chocolatey'
    remediation = (
        'Chocolatey is not installed. Please install Chocolatey first.\n'
        'Run: dev install chocolatey (from an Administrator PowerShell)'
    )

    def __init__(self, **kwargs):
        kwargs.setdefault('sudo', False)
        super().__init__('choco', **kwargs)

    @property
    def pm_path(self) -> Optional[str]:
        found = self.runner.which('choco')
        if found:
            return found
        # PATH might not be refreshed in current session
        if os.path.exists(CHOCO_DEFAULT_PATH):
            return CHOCO_DEFAULT_PATH
        return None

    def _choco(self) -> str:
        return self.pm_path or 'choco'

    def get_install_command(self, package: str) -> List[str]:
        cmd = [self._choco(), 'install', package]
        if self.settings.auto_approve:
            cmd.append('-y')
        if self.settings.quiet_mode:
            cmd.append('--limit-output')
        return cmd

    def install(self, package: str) -> CommandResult:
        result = super().install(package)
        if result.success:
            refresh_windows_path()
        return result

    def is_installed(self, package: str) -> bool:
        """Check the local package list (limit-output lines are name|version)"""
        result = self.run_command([self._choco(), 'list', '--exact', '--limit-output', package])
        if not result.success:
            return False
        prefix = f'{package.lower()}|'
        return any(line.lower().startswith(prefix) for line in result.stdout.splitlines())
