#!/usr/bin/env python3
"""
devstrap Tool Installer
Routes a tool to the right package manager for the detected platform,
installs it once and verifies the result
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Mapping, Optional

from rich.console import Console
from rich.markup import escape

from devstrap.platform.detector import (
    PackageManager,
    PlatformInfo,
    PlatformType,
    WINDOWS_FAMILY,
)
from devstrap.platform.installers import create_adapter
from devstrap.platform.installers.base import BaseInstaller, InstallSettings
from devstrap.platform.lock import PackageManagerLock
from devstrap.platform.process import CommandRunner
from devstrap.shell_config import add_to_path, get_shell, is_in_path
from devstrap.tools.catalog import ToolSpec

_console = Console()


class InstallOutcome(Enum):
    """Result of one install request"""
    INSTALLED = "installed"
    ALREADY_INSTALLED = "already_installed"
    UNSUPPORTED = "unsupported"
    NO_DESKTOP = "no_desktop"
    MISSING_PREREQUISITE = "missing_prerequisite"
    COMMAND_FAILED = "command_failed"
    NOT_VERIFIED = "not_verified"

    @property
    def exit_code(self) -> int:
        return 0 if self in _SUCCESS_OUTCOMES else 1


_SUCCESS_OUTCOMES = frozenset({
    InstallOutcome.INSTALLED,
    InstallOutcome.ALREADY_INSTALLED,
    InstallOutcome.UNSUPPORTED,
    InstallOutcome.NO_DESKTOP,
})


@dataclass(frozen=True)
class InstallRoute:
    """How a tool gets installed on one platform"""
    adapter: str                            # ADAPTERS key, or 'download'
    package: str
    cask: bool = False
    download_url: Optional[str] = None

    @property
    def is_download(self) -> bool:
        return self.download_url is not None


class ToolInstaller:
    """
    Install one catalog tool on the detected platform.

    Each platform type maps to a route builder; a builder returning None
    means the tool is not offered there.
    """

    PLATFORM_ROUTES: Dict[PlatformType, str] = {
        PlatformType.MACOS: '_route_macos',
        PlatformType.UBUNTU: '_route_debian',
        PlatformType.DEBIAN: '_route_debian',
        PlatformType.RASPBIAN: '_route_debian',
        PlatformType.WSL: '_route_debian',
        PlatformType.AMAZON_LINUX: '_route_rhel',
        PlatformType.RHEL: '_route_rhel',
        PlatformType.FEDORA: '_route_rhel',
        PlatformType.WINDOWS: '_route_windows',
        PlatformType.GITBASH: '_route_gitbash',
        PlatformType.UNKNOWN: '_route_unknown',
    }

    # Managers whose package lists must be refreshed before installing
    REFRESH_ADAPTERS = frozenset({'apt', 'flatpak'})

    def __init__(
        self,
        spec: ToolSpec,
        platform_info: PlatformInfo,
        runner: Optional[CommandRunner] = None,
        settings: Optional[InstallSettings] = None,
        lock: Optional[PackageManagerLock] = None,
        console: Optional[Console] = None,
        adapters: Optional[Dict[str, BaseInstaller]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.spec = spec
        self.platform_info = platform_info
        self.runner = runner or CommandRunner()
        self.settings = settings or InstallSettings()
        self.lock = lock
        self.console = console or _console
        self.adapters = adapters if adapters is not None else {}
        self.environ = environ

    # Route builders -------------------------------------------------------

    def resolve_route(self) -> Optional[InstallRoute]:
        """Pick the route for this platform, or None when unsupported"""
        builder = getattr(self, self.PLATFORM_ROUTES[self.platform_info.type])
        if self.spec.npm and self.platform_info.is_supported:
            return InstallRoute('npm', self.spec.npm)
        return builder()

    def _route_macos(self) -> Optional[InstallRoute]:
        if self.spec.brew_cask:
            return InstallRoute('brew', self.spec.brew_cask, cask=True)
        if self.spec.brew:
            return InstallRoute('brew', self.spec.brew)
        return None

    def _route_debian(self) -> Optional[InstallRoute]:
        if self.spec.apt:
            return InstallRoute('apt', self.spec.apt)
        return self._route_flatpak()

    def _route_rhel(self) -> Optional[InstallRoute]:
        if self.platform_info.package_manager is PackageManager.YUM:
            package, adapter = self.spec.yum_package, 'yum'
        else:
            package, adapter = self.spec.dnf, 'dnf'
        if package:
            return InstallRoute(adapter, package)
        return self._route_flatpak()

    def _route_flatpak(self) -> Optional[InstallRoute]:
        if self.spec.flatpak:
            return InstallRoute('flatpak', self.spec.flatpak)
        return None

    def _route_windows(self) -> Optional[InstallRoute]:
        if self.spec.choco:
            return InstallRoute('choco', self.spec.choco)
        return None

    def _route_gitbash(self) -> Optional[InstallRoute]:
        if self.spec.gitbash_download_url:
            return InstallRoute(
                'download',
                f'{self.spec.command}.exe',
                download_url=self.spec.gitbash_download_url,
            )
        return self._route_windows()

    def _route_unknown(self) -> Optional[InstallRoute]:
        return None

    # Helpers --------------------------------------------------------------

    def adapter(self, name: str) -> BaseInstaller:
        """Get (and cache) the adapter for a package manager"""
        if name not in self.adapters:
            self.adapters[name] = create_adapter(
                name,
                runner=self.runner,
                settings=self.settings,
                lock=self.lock,
                platform_type=self.platform_info.type,
            )
        return self.adapters[name]

    @property
    def download_dir(self) -> Path:
        return self.platform_info.home_dir / 'bin'

    def _package_installed(self, adapter: BaseInstaller, route: InstallRoute) -> bool:
        if route.cask:
            return adapter.is_cask_installed(route.package)
        return adapter.is_installed(route.package)

    def is_eligible(self) -> bool:
        """Can this tool be installed here at all"""
        if self.resolve_route() is None:
            return False
        return not self.spec.requires_desktop or self.platform_info.desktop_available

    def is_installed(self) -> bool:
        """Check the command on PATH, then the package manager's own records"""
        if self.runner.exists(self.spec.command):
            return True

        route = self.resolve_route()
        if route is None:
            return False
        if route.is_download:
            return (self.download_dir / route.package).exists()

        adapter = self.adapter(route.adapter)
        if not adapter.is_available():
            return False
        return self._package_installed(adapter, route)

    # Install --------------------------------------------------------------

    def install(self) -> InstallOutcome:
        """
        Install the tool if it is missing

        Returns:
            InstallOutcome (see InstallOutcome.exit_code for the process status)
        """
        spec = self.spec
        route = self.resolve_route()

        if route is None:
            self.console.print(
                f"[yellow]{spec.display_name} is not available for {self.platform_info.type.value}.[/yellow]"
            )
            if spec.notes:
                self.console.print(f"[dim]{escape(spec.notes)}[/dim]")
            return InstallOutcome.UNSUPPORTED

        if spec.requires_desktop and not self.platform_info.desktop_available:
            self.console.print(
                f"[yellow]{spec.display_name} needs a desktop environment and none was detected. "
                f"Skipping.[/yellow]"
            )
            return InstallOutcome.NO_DESKTOP

        if route.is_download:
            return self._install_download(route)

        adapter = self.adapter(route.adapter)
        if not adapter.is_available():
            self.console.print(f"[red]{escape(adapter.remediation)}[/red]")
            return InstallOutcome.MISSING_PREREQUISITE

        if self.runner.exists(spec.command) or self._package_installed(adapter, route):
            self.console.print(f"[green]{spec.display_name} is already installed, skipping...[/green]")
            return InstallOutcome.ALREADY_INSTALLED

        if route.adapter in self.REFRESH_ADAPTERS and self.settings.update_index:
            refreshed = adapter.update_index()
            if not refreshed.success:
                self.console.print(
                    f"[yellow]Warning: could not refresh {adapter.label} package lists, "
                    f"continuing anyway[/yellow]"
                )
                if refreshed.output:
                    self.console.print(f"[dim]{escape(refreshed.output)}[/dim]")

        self.console.print(f"Installing {spec.display_name} via {adapter.label}...")
        if route.cask:
            result = adapter.install_cask(route.package)
        else:
            result = adapter.install(route.package)

        if not result.success:
            self.console.print(f"[red]Failed to install {spec.display_name} via {adapter.label}.[/red]")
            if result.output:
                self.console.print(f"[dim]{escape(result.output)}[/dim]")
            self.console.print(f"Retry with: {escape(result.display)}")
            return InstallOutcome.COMMAND_FAILED

        return self._verify(adapter, route)

    def _verify(self, adapter: BaseInstaller, route: InstallRoute) -> InstallOutcome:
        spec = self.spec
        if self.runner.exists(spec.command):
            self.console.print(f"[green]{spec.display_name} installed successfully.[/green]")
            return InstallOutcome.INSTALLED

        # GUI apps and fresh Windows installs are often not on PATH until a new session
        off_path_ok = (
            route.cask
            or route.adapter == 'flatpak'
            or self.platform_info.type in WINDOWS_FAMILY
        )
        if off_path_ok and self._package_installed(adapter, route):
            self.console.print(f"[green]{spec.display_name} installed successfully.[/green]")
            self.console.print(
                f"[dim]Note: '{spec.command}' is not on PATH yet. Open a new terminal to use it.[/dim]"
            )
            return InstallOutcome.INSTALLED

        return self._not_verified()

    def _not_verified(self) -> InstallOutcome:
        self.console.print(
            f"[yellow]Warning: the installer finished but '{self.spec.command}' "
            f"cannot be found on PATH.[/yellow]"
        )
        self.console.print("Open a new terminal or refresh your PATH, then check again.")
        return InstallOutcome.NOT_VERIFIED

    def _install_download(self, route: InstallRoute) -> InstallOutcome:
        """Git Bash: download a standalone executable into ~/bin"""
        spec = self.spec
        target = self.download_dir / route.package

        if self.runner.exists(spec.command) or target.exists():
            self.console.print(f"[green]{spec.display_name} is already installed, skipping...[/green]")
            return InstallOutcome.ALREADY_INSTALLED

        if not self.runner.exists('curl'):
            self.console.print("[red]curl is required to download executables in Git Bash.[/red]")
            return InstallOutcome.MISSING_PREREQUISITE

        self.download_dir.mkdir(parents=True, exist_ok=True)
        self.console.print(f"Downloading {spec.display_name} to {escape(str(target))}...")
        result = self.runner.run(['curl', '-fsSL', '-o', str(target), route.download_url])

        if not result.success:
            self.console.print(f"[red]Failed to download {spec.display_name}.[/red]")
            if result.output:
                self.console.print(f"[dim]{escape(result.output)}[/dim]")
            self.console.print(f"Retry with: {escape(result.display)}")
            return InstallOutcome.COMMAND_FAILED

        if not target.exists():
            return self._not_verified()

        self._ensure_download_dir_on_path()
        self.console.print(f"[green]{spec.display_name} installed successfully.[/green]")
        return InstallOutcome.INSTALLED

    def _ensure_download_dir_on_path(self):
        if is_in_path(self.download_dir, self.environ):
            return

        shell, rc_file = get_shell(self.environ, self.platform_info.home_dir)
        if rc_file is None:
            self._manual_path_advice()
            return

        try:
            changed = add_to_path(self.download_dir, rc_file, shell)
        except OSError as e:
            self.console.print(f"[yellow]Could not update {escape(str(rc_file))}: {escape(e.strerror or str(e))}[/yellow]")
            self._manual_path_advice()
            return

        if changed:
            self.console.print(f"[dim]Added {escape(str(self.download_dir))} to PATH in {escape(str(rc_file))}[/dim]")
        self.console.print("[dim]Open a new terminal for the PATH change to take effect.[/dim]")

    def _manual_path_advice(self):
        self.console.print(
            f"[yellow]Add {escape(str(self.download_dir))} to your PATH to use downloaded tools.[/yellow]"
        )
