#!/usr/bin/env python3
"""
devstrap CLI - Command-line interface
Click-based CLI for installing developer tools and running helper scripts
"""

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from devstrap import __version__
from devstrap.config import ConfigManager, DevstrapConfig
from devstrap.errors import DevstrapError, UnknownScriptError
from devstrap.platform.detector import PlatformInfo, detect_platform
from devstrap.platform.installers.base import InstallSettings
from devstrap.platform.lock import PackageManagerLock
from devstrap.platform.process import CommandRunner
from devstrap.scripts import SCRIPTS
from devstrap.tools import ToolInstaller, get_tool, list_tools, plan_install

# Force UTF-8 encoding for stdout/stderr on Windows terminals that default to cp1252
if sys.platform == 'win32':
    import io
    if isinstance(sys.stdout, io.TextIOWrapper):
        sys.stdout.reconfigure(encoding='utf-8', errors='replace')
    if isinstance(sys.stderr, io.TextIOWrapper):
        sys.stderr.reconfigure(encoding='utf-8', errors='replace')

console = Console()
err_console = Console(stderr=True)

# Scripts that run external commands and take the configured runner
RUNNER_SCRIPTS = frozenset({'clear-dns-cache'})


@dataclass
class AppContext:
    """Per-invocation state shared by all commands"""
    platform_info: PlatformInfo
    config: DevstrapConfig
    config_path: Optional[Path]
    runner: CommandRunner
    settings: InstallSettings
    lock: Optional[PackageManagerLock] = None

    def tool_installer(self, spec) -> ToolInstaller:
        return ToolInstaller(
            spec,
            self.platform_info,
            runner=self.runner,
            settings=self.settings,
            lock=self.lock,
            console=console,
        )


def build_context(config_path: Optional[Path], debug: bool) -> AppContext:
    """
    Detect the platform once and load configuration

    Raises:
        HomeDirectoryError: if the home directory cannot be resolved
    """
    platform_info = detect_platform()

    if config_path is None:
        config_path = ConfigManager.find_config(home_dir=platform_info.home_dir)
    config = ConfigManager.load_config(config_path, home_dir=platform_info.home_dir)

    runner = CommandRunner(timeout=config.command_timeout, debug=debug or config.debug)
    lock = None
    if config.serialize_package_managers:
        lock = PackageManagerLock.for_home(platform_info.home_dir, timeout=config.lock_timeout)

    return AppContext(
        platform_info=platform_info,
        config=config,
        config_path=config_path,
        runner=runner,
        settings=InstallSettings.from_config(config),
        lock=lock,
    )


class DevstrapGroup(click.Group):
    """Click group that reports DevstrapError as a one-line error"""

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except DevstrapError as e:
            err_console.print(f"[red]Error: {escape(str(e))}[/red]")
            ctx.exit(1)


@click.group(cls=DevstrapGroup, invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version and exit')
@click.option('--debug', is_flag=True, help='Show every external command and its output')
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              default=None, help='Path to .devstrap.yml (default: search upwards, then home)')
@click.pass_context
def main(ctx, version, debug, config_path):
    """
    devstrap - Cross-Platform Developer Environment Bootstrapper

    Installs developer tools with the native package manager of the
    detected platform and runs small cross-platform helper scripts.

    Examples:
        dev install git jq        # Install tools
        dev run count ~/src       # Run a helper script
        dev status                # Show which tools are installed
        dev platform --json       # Show platform detection result
    """
    if version:
        click.echo(f"devstrap v{__version__}")
        ctx.exit(0)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        return

    ctx.obj = build_context(config_path, debug)


@main.command()
@click.argument('tools', nargs=-1, required=True)
@click.option('--dry-run', is_flag=True, help='Show what would be installed without changing anything')
@click.option('-f', '--force', is_flag=True, help='Do not ask before installing extra dependencies')
@click.pass_obj
def install(app: AppContext, tools, dry_run, force):
    """
    Install one or more tools.

    Dependencies (e.g. Node.js for npm tools) are installed first. Tools that
    are already installed are skipped. Tools that are not offered on this
    platform are reported and skipped without failing.

    Examples:
        dev install git
        dev install jq yq shellcheck
        dev install yarn --dry-run
    """
    exit_code = 0
    requested = []
    for name in tools:
        try:
            requested.append(get_tool(name))
        except DevstrapError as e:
            err_console.print(f"[red]Error: {escape(str(e))}[/red]")
            err_console.print("[dim]Run 'dev list' to see available tools.[/dim]")
            exit_code = 1

    plan = plan_install(requested, app.tool_installer)
    requested_names = {spec.name for spec in requested}
    extra = [spec for spec in plan if spec.name not in requested_names]

    if plan and (extra or dry_run):
        console.print("\n[bold]The following will be installed:[/bold]")
        for spec in plan:
            suffix = " [dim](dependency)[/dim]" if spec.name not in requested_names else ""
            console.print(f"  - {spec.display_name}{suffix}")

    if dry_run:
        console.print("[yellow]Dry run - no changes were made.[/yellow]")
        sys.exit(exit_code)

    if extra and not force:
        if not click.confirm("Proceed with installation?", default=True):
            console.print("Installation cancelled.")
            sys.exit(exit_code)

    for spec in plan:
        outcome = app.tool_installer(spec).install()
        exit_code = max(exit_code, outcome.exit_code)

    sys.exit(exit_code)


@main.command(context_settings={'ignore_unknown_options': True, 'allow_interspersed_args': False})
@click.argument('script')
@click.argument('args', nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def run(app: AppContext, script, args):
    """
    Run a helper script.

    Scripts: count, count-files, count-folders, datauri, get-dependencies,
    clear-dns-cache, mkd, path

    Examples:
        dev run count .
        dev run datauri logo.png
        dev run get-dependencies package.json dev
    """
    script_main = SCRIPTS.get(script)
    if script_main is None:
        raise UnknownScriptError(script)

    kwargs = {'runner': app.runner} if script in RUNNER_SCRIPTS else {}
    sys.exit(script_main(list(args), app.platform_info, **kwargs))


@main.command()
@click.pass_obj
def status(app: AppContext):
    """Show which catalog tools are installed on this machine."""
    table = Table(title="devstrap Tools", show_header=True, header_style="bold cyan")
    table.add_column("Tool", style="cyan")
    table.add_column("Name")
    table.add_column("Status")

    installed = missing = 0
    for spec in list_tools():
        installer = app.tool_installer(spec)
        if not installer.is_eligible():
            state = "[dim]ineligible[/dim]"
        elif installer.is_installed():
            state = "[green]installed[/green]"
            installed += 1
        else:
            state = "[yellow]missing[/yellow]"
            missing += 1
        table.add_row(spec.name, spec.display_name, state)

    console.print(table)
    console.print(f"\n[bold]{installed} installed, {missing} missing[/bold] "
                  f"on {app.platform_info.display_name}")
    if missing:
        console.print("[dim]Run 'dev install <tool>' to install missing tools.[/dim]")


@main.command(name='platform')
@click.option('--json', 'as_json', is_flag=True, help='Print the detection result as JSON')
@click.pass_obj
def platform_cmd(app: AppContext, as_json):
    """Show the detected platform."""
    info = app.platform_info
    if as_json:
        click.echo(json.dumps(info.to_dict(), indent=2))
        return

    console.print("[bold cyan]Platform Information:[/bold cyan]")
    console.print(f"  Platform: {info.display_name} ({info.type.value})")
    if info.distro:
        console.print(f"  Distribution: {escape(info.distro)}")
    console.print(f"  Architecture: {escape(info.architecture or 'unknown')}")
    console.print(f"  Package Manager: {info.package_manager.value}")
    console.print(f"  Home: {escape(str(info.home_dir))}")
    console.print(f"  Desktop: {'yes' if info.desktop_available else 'no'}")
    console.print(f"  Shell: {escape(info.shell or 'unknown')}")
    if not info.is_supported:
        console.print("[yellow]This platform is not supported; installs will be skipped.[/yellow]")


@main.command()
@click.option('--init', 'init_config', is_flag=True, help='Write a default .devstrap.yml in the current directory')
@click.pass_obj
def config(app: AppContext, init_config):
    """Show the effective configuration."""
    if init_config:
        target = Path.cwd() / ConfigManager.DEFAULT_CONFIG_NAME
        if target.exists():
            console.print(f"[yellow]Config file already exists: {escape(str(target))}[/yellow]")
            return
        path = ConfigManager.create_default_config(Path.cwd())
        console.print(f"[green]Created {escape(str(path))}[/green]")
        return

    source = str(app.config_path) if app.config_path else 'defaults (no .devstrap.yml found)'
    console.print(f"[bold cyan]Configuration:[/bold cyan] {escape(source)}\n")
    click.echo(yaml.dump(app.config.to_dict(), default_flow_style=False, sort_keys=False, indent=2), nl=False)


@main.command(name='list')
@click.pass_obj
def list_cmd(app: AppContext):
    """List all installable tools."""
    table = Table(title="Available Tools", show_header=True, header_style="bold cyan")
    table.add_column("Tool", style="cyan")
    table.add_column("Name")
    table.add_column("Kind", style="magenta")
    table.add_column("Here")

    for spec in list_tools():
        if spec.npm:
            kind = "npm"
        elif spec.requires_desktop:
            kind = "desktop"
        else:
            kind = "cli"
        here = "[green]yes[/green]" if app.tool_installer(spec).is_eligible() else "[dim]no[/dim]"
        table.add_row(spec.name, spec.display_name, kind, here)

    console.print(table)
    console.print(f"\n[bold]Total: {len(list_tools())} tools[/bold]")


if __name__ == '__main__':
    main()
