#!/usr/bin/env python3
"""
devstrap Platform Detection
Classifies the host into a single platform type and derives its package manager,
home directory and desktop availability
"""

import os
import platform
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional

from devstrap.errors import HomeDirectoryError


class PlatformType(Enum):
    """Platform categories, exactly one applies to any host"""
    MACOS = "macos"
    UBUNTU = "ubuntu"
    DEBIAN = "debian"
    RASPBIAN = "raspbian"            # Raspberry Pi OS
    AMAZON_LINUX = "amazon_linux"
    RHEL = "rhel"                    # RHEL and CentOS
    FEDORA = "fedora"
    WSL = "wsl"                      # Windows Subsystem for Linux
    WINDOWS = "windows"
    GITBASH = "gitbash"              # Git for Windows bash (MINGW)
    UNKNOWN = "unknown"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    PlatformType.MACOS: "macOS",
    PlatformType.UBUNTU: "Ubuntu",
    PlatformType.DEBIAN: "Debian",
    PlatformType.RASPBIAN: "Raspberry Pi OS",
    PlatformType.AMAZON_LINUX: "Amazon Linux",
    PlatformType.RHEL: "RHEL",
    PlatformType.FEDORA: "Fedora",
    PlatformType.WSL: "WSL",
    PlatformType.WINDOWS: "Windows",
    PlatformType.GITBASH: "Git Bash",
    PlatformType.UNKNOWN: "unknown",
}


class PackageManager(Enum):
    """Primary package manager of a platform"""
    BREW = "brew"            # macOS Homebrew
    APT = "apt"              # Debian/Ubuntu/Raspberry Pi OS/WSL
    DNF = "dnf"              # Fedora/RHEL 8+/Amazon Linux 2023
    YUM = "yum"              # RHEL/CentOS 7, Amazon Linux 2
    CHOCOLATEY = "choco"     # Windows
    NONE = "none"


DEBIAN_FAMILY = frozenset({
    PlatformType.UBUNTU,
    PlatformType.DEBIAN,
    PlatformType.RASPBIAN,
    PlatformType.WSL,
})

RHEL_FAMILY = frozenset({
    PlatformType.AMAZON_LINUX,
    PlatformType.RHEL,
    PlatformType.FEDORA,
})

WINDOWS_FAMILY = frozenset({
    PlatformType.WINDOWS,
    PlatformType.GITBASH,
})

# os-release ID -> platform type
DISTRO_IDS: Dict[str, PlatformType] = {
    'raspbian': PlatformType.RASPBIAN,
    'ubuntu': PlatformType.UBUNTU,
    'debian': PlatformType.DEBIAN,
    'amzn': PlatformType.AMAZON_LINUX,
    'rhel': PlatformType.RHEL,
    'centos': PlatformType.RHEL,
    'fedora': PlatformType.FEDORA,
}

_WINDOWS_KERNEL_PREFIXES = ('windows', 'mingw', 'msys', 'cygwin')


@dataclass(frozen=True)
class PlatformInfo:
    """Result of platform detection, treated as immutable for the whole run"""
    type: PlatformType
    package_manager: PackageManager
    home_dir: Path
    desktop_available: bool
    distro: Optional[str] = None
    architecture: str = ''
    shell: str = ''

    @property
    def display_name(self) -> str:
        return self.type.display_name

    @property
    def is_supported(self) -> bool:
        return self.type is not PlatformType.UNKNOWN

    def to_dict(self) -> Dict:
        """Convert to dictionary for display"""
        return {
            'type': self.type.value,
            'package_manager': self.package_manager.value,
            'home_dir': str(self.home_dir),
            'desktop_available': self.desktop_available,
            'distro': self.distro,
            'architecture': self.architecture,
            'shell': self.shell,
        }


class PlatformDetector:
    """
    Detect the platform type from kernel identity, environment variables
    and filesystem markers.

    Every input can be overridden so detection can be exercised for hosts
    other than the one running the code.
    """

    def __init__(
        self,
        system: Optional[str] = None,
        release: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
        root: Optional[Path] = None,
        which: Optional[Callable[[str], Optional[str]]] = None,
        home: Optional[Callable[[], Path]] = None,
        machine: Optional[str] = None,
    ):
        self.system = system if system is not None else platform.system()
        self.release = release if release is not None else platform.release()
        self.environ = environ if environ is not None else os.environ
        self.root = root if root is not None else Path('/')
        self.which = which or shutil.which
        self.home = home or Path.home
        self.machine = machine if machine is not None else platform.machine()

    def detect(self) -> PlatformInfo:
        """
        Perform full platform detection

        Returns:
            PlatformInfo for the current host

        Raises:
            HomeDirectoryError: if the home directory cannot be resolved
        """
        distro = self._get_linux_distro() if self._is_linux_kernel() else None
        platform_type = self._detect_type(distro)

        return PlatformInfo(
            type=platform_type,
            package_manager=self._get_package_manager(platform_type),
            home_dir=self._resolve_home(),
            desktop_available=self._is_desktop_available(platform_type),
            distro=distro or self._non_linux_label(platform_type),
            architecture=self.machine,
            shell=self._detect_shell(),
        )

    def _detect_type(self, distro: Optional[str]) -> PlatformType:
        """Priority ordered classification, first match wins"""
        system = self.system.lower()

        if system == 'darwin':
            return PlatformType.MACOS

        if system.startswith(_WINDOWS_KERNEL_PREFIXES):
            if 'MINGW' in self.environ.get('MSYSTEM', '').upper():
                return PlatformType.GITBASH
            return PlatformType.WINDOWS

        if not self._is_linux_kernel():
            return PlatformType.UNKNOWN

        if self._is_wsl():
            return PlatformType.WSL

        if distro == 'raspbian':
            return PlatformType.RASPBIAN
        # Pi hardware only refines Debian (or an unidentified distro)
        if distro in (None, 'debian') and self._is_raspberry_pi():
            return PlatformType.RASPBIAN

        return DISTRO_IDS.get(distro or '', PlatformType.UNKNOWN)

    def _is_linux_kernel(self) -> bool:
        return self.system.lower() == 'linux'

    def _is_wsl(self) -> bool:
        """Check if running in Windows Subsystem for Linux"""
        if 'microsoft' in self.release.lower():
            return True
        if self.environ.get('WSL_DISTRO_NAME'):
            return True
        # WSL has /proc/version with "Microsoft" or "WSL"
        version = self._read('proc/version').lower()
        return 'microsoft' in version or 'wsl' in version

    def _is_raspberry_pi(self) -> bool:
        # 64-bit Raspberry Pi OS reports ID=debian
        model = self._read('proc/device-tree/model')
        return 'raspberry pi' in model.lower()

    def _get_linux_distro(self) -> Optional[str]:
        """Get Linux distribution ID from os-release, then lsb-release"""
        for relpath, key in (('etc/os-release', 'ID'), ('etc/lsb-release', 'DISTRIB_ID')):
            for line in self._read(relpath).splitlines():
                if line.startswith(f'{key}='):
                    value = line.split('=', 1)[1].strip().strip('"').strip("'").lower()
                    if value:
                        return value
        return None

    def _get_package_manager(self, platform_type: PlatformType) -> PackageManager:
        """Derive the primary package manager for a platform type"""
        if platform_type is PlatformType.MACOS:
            return PackageManager.BREW
        if platform_type in DEBIAN_FAMILY:
            return PackageManager.APT
        if platform_type in WINDOWS_FAMILY:
            return PackageManager.CHOCOLATEY
        if platform_type in RHEL_FAMILY:
            # dnf takes precedence over yum when both exist
            return PackageManager.DNF if self.which('dnf') else PackageManager.YUM
        return PackageManager.NONE

    def _resolve_home(self) -> Path:
        try:
            home = self.home()
        except (RuntimeError, KeyError, OSError) as e:
            raise HomeDirectoryError(f"Cannot resolve home directory: {e}") from e

        if not str(home) or not Path(home).is_absolute():
            raise HomeDirectoryError(f"Home directory is not an absolute path: '{home}'")
        return Path(home)

    def _is_desktop_available(self, platform_type: PlatformType) -> bool:
        """Heuristic for whether GUI applications can be displayed"""
        if platform_type in (PlatformType.MACOS, PlatformType.WINDOWS, PlatformType.GITBASH):
            return True

        if platform_type is PlatformType.UNKNOWN:
            return False

        env = self.environ
        has_display = bool(env.get('WAYLAND_DISPLAY') or env.get('DISPLAY'))

        if platform_type is PlatformType.WSL:
            # WSLg creates /mnt/wslg when GUI support is available
            return has_display or (self.root / 'mnt' / 'wslg').exists()

        if has_display:
            return True
        if env.get('XDG_SESSION_TYPE') in ('x11', 'wayland'):
            return True
        return bool(env.get('XDG_CURRENT_DESKTOP') or env.get('DESKTOP_SESSION'))

    def _non_linux_label(self, platform_type: PlatformType) -> Optional[str]:
        if platform_type is PlatformType.MACOS:
            return 'macos'
        if platform_type in WINDOWS_FAMILY:
            return 'windows'
        if platform_type is PlatformType.WSL:
            return (self.environ.get('WSL_DISTRO_NAME') or '').lower() or None
        return None

    def _detect_shell(self) -> str:
        """Detect current shell"""
        shell = self.environ.get('SHELL', '')
        if shell:
            return Path(shell).name

        if self.system.lower().startswith('windows'):
            if 'PSModulePath' in self.environ:
                return 'powershell'
            return 'cmd'

        return 'unknown'

    def _read(self, relpath: str) -> str:
        """Read a marker file below root, treating unreadable files as absent"""
        try:
            return (self.root / relpath).read_text(errors='replace')
        except (OSError, ValueError):
            return ''


def detect_platform() -> PlatformInfo:
    """Detect the platform of the running process"""
    return PlatformDetector().detect()
