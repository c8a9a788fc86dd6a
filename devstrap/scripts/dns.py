#!/usr/bin/env python3
"""
devstrap clear-dns-cache script
Flushes the operating system's DNS cache
"""

from typing import List, Optional

from rich.console import Console

from devstrap.platform.detector import PlatformInfo, PlatformType
from devstrap.platform.installers.base import default_sudo
from devstrap.platform.process import CommandRunner
from devstrap.scripts.base import dispatch, err_console, run_standalone

console = Console()


def _sudo(runner: CommandRunner, cmd: List[str]) -> List[str]:
    return (['sudo'] + cmd) if default_sudo(runner) else cmd


def flush_macos(args: List[str], runner: CommandRunner) -> int:
    console.print("Flushing DNS cache on macOS...")
    console.print("[dim]Note: This operation requires administrator privileges.[/dim]")

    commands = [
        _sudo(runner, ['dscacheutil', '-flushcache']),
        _sudo(runner, ['killall', '-HUP', 'mDNSResponder']),
    ]
    for cmd in commands:
        result = runner.run(cmd, capture=False)
        if not result.success:
            err_console.print("[red]Error: Failed to flush DNS cache.[/red]")
            err_console.print("You can also try running these commands manually:")
            for manual in commands:
                err_console.print(f"  {' '.join(manual)}")
            return 1

    console.print("[green]DNS cache cleared successfully.[/green]")
    return 0


def flush_linux(args: List[str], runner: CommandRunner) -> int:
    """Try every common Linux DNS cache service; success if any was flushed"""
    console.print("Flushing DNS cache...")
    console.print("[dim]Note: This operation may require administrator privileges.[/dim]")
    flushed = False

    if runner.exists('resolvectl') or runner.exists('systemd-resolve'):
        if runner.exists('resolvectl'):
            cmd = ['resolvectl', 'flush-caches']
        else:
            cmd = ['systemd-resolve', '--flush-caches']
        if runner.run(_sudo(runner, cmd), capture=False).success:
            flushed = True
            console.print("systemd-resolved cache flushed.")
        else:
            console.print("[dim]Note: systemd-resolved flush failed or not active.[/dim]")

    if runner.exists('nscd'):
        if runner.run(_sudo(runner, ['systemctl', 'restart', 'nscd']), capture=False).success:
            flushed = True
            console.print("nscd restarted.")
        elif runner.run(_sudo(runner, ['nscd', '-i', 'hosts']), capture=False).success:
            flushed = True
            console.print("nscd hosts cache invalidated.")
        else:
            console.print("[dim]Note: nscd flush failed or not active.[/dim]")

    if runner.exists('dnsmasq'):
        if runner.run(_sudo(runner, ['systemctl', 'restart', 'dnsmasq']), capture=False).success:
            flushed = True
            console.print("dnsmasq restarted.")
        else:
            console.print("[dim]Note: dnsmasq restart failed or not active.[/dim]")

    if flushed:
        console.print("[green]DNS cache cleared successfully.[/green]")
    else:
        console.print("[yellow]Warning: Could not find a running DNS cache service.[/yellow]")
        console.print("Common DNS caching services: systemd-resolved, nscd and dnsmasq.")
    return 0


def flush_wsl(args: List[str], runner: CommandRunner) -> int:
    code = flush_linux(args, runner)
    console.print("[dim]WSL resolves names through Windows. Run 'ipconfig /flushdns' in Windows to clear its cache.[/dim]")
    return code


def flush_windows(args: List[str], runner: CommandRunner) -> int:
    console.print("Flushing DNS cache on Windows...")
    result = runner.run(['ipconfig', '/flushdns'])
    if not result.success:
        err_console.print("[red]Error: Failed to flush DNS cache.[/red]")
        if result.output:
            err_console.print(result.output, markup=False)
        err_console.print("Try again from an Administrator terminal: ipconfig /flushdns")
        return 1

    console.print("[green]DNS cache cleared successfully.[/green]")
    return 0


HANDLERS = {
    PlatformType.MACOS: flush_macos,
    PlatformType.UBUNTU: flush_linux,
    PlatformType.DEBIAN: flush_linux,
    PlatformType.RASPBIAN: flush_linux,
    PlatformType.AMAZON_LINUX: flush_linux,
    PlatformType.RHEL: flush_linux,
    PlatformType.FEDORA: flush_linux,
    PlatformType.WSL: flush_wsl,
    PlatformType.WINDOWS: flush_windows,
    PlatformType.GITBASH: flush_windows,
}


def main(args: List[str], platform_info: PlatformInfo, runner: Optional[CommandRunner] = None) -> int:
    return dispatch('clear-dns-cache', HANDLERS, args, platform_info, runner=runner or CommandRunner())


def cli():
    run_standalone(main)
