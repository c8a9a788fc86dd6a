"""
devstrap Package Manager Adapters
Homebrew, APT, DNF, YUM, Chocolatey, Flatpak and npm
"""

from typing import Dict, Optional, Type

from devstrap.platform.detector import PlatformType, WINDOWS_FAMILY
from devstrap.platform.installers.base import BaseInstaller, InstallSettings
from devstrap.platform.installers.linux import (
    AptInstaller,
    DnfInstaller,
    YumInstaller,
    FlatpakInstaller,
)
from devstrap.platform.installers.macos import HomebrewInstaller
from devstrap.platform.installers.windows import ChocolateyInstaller
from devstrap.platform.installers.cross_platform import NpmInstaller
from devstrap.platform.lock import PackageManagerLock
from devstrap.platform.process import CommandRunner

ADAPTERS: Dict[str, Type[BaseInstaller]] = {
    'brew': HomebrewInstaller,
    'apt': AptInstaller,
    'dnf': DnfInstaller,
    'yum': YumInstaller,
    'choco': ChocolateyInstaller,
    'flatpak': FlatpakInstaller,
    'npm': NpmInstaller,
}


def create_adapter(
    name: str,
    runner: Optional[CommandRunner] = None,
    settings: Optional[InstallSettings] = None,
    lock: Optional[PackageManagerLock] = None,
    platform_type: Optional[PlatformType] = None,
) -> BaseInstaller:
    """
    Build a package manager adapter by name

    Args:
        name: One of the ADAPTERS keys
        runner: Command runner shared by all adapters
        settings: Package manager flags
        lock: Lock held around mutating commands
        platform_type: Detected platform, for adapters whose binary name differs per OS

    Returns:
        Adapter instance
    """
    try:
        adapter_cls = ADAPTERS[name]
    except KeyError:
        raise ValueError(f"Unknown package manager: {name}") from None
    kwargs = {'runner': runner, 'settings': settings, 'lock': lock}
    if adapter_cls is NpmInstaller:
        kwargs['windows'] = platform_type in WINDOWS_FAMILY
    return adapter_cls(**kwargs)


__all__ = [
    'ADAPTERS',
    'BaseInstaller',
    'InstallSettings',
    'AptInstaller',
    'DnfInstaller',
    'YumInstaller',
    'FlatpakInstaller',
    'HomebrewInstaller',
    'ChocolateyInstaller',
    'NpmInstaller',
    'create_adapter',
]
