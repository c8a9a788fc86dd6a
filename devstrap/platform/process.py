#!/usr/bin/env python3
"""
devstrap External Process Runner
Runs external commands with captured output, a timeout and a structured result
"""

import shutil
import subprocess
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from rich.console import Console
from rich.markup import escape

# Ten minutes covers large downloads such as texlive-full
DEFAULT_TIMEOUT = 600

# Exit codes used when the process never produced one
EXIT_TIMEOUT = 124
EXIT_NOT_FOUND = 127

_debug_console = Console(stderr=True)


@dataclass
class CommandResult:
    """Outcome of one external command"""
    argv: List[str]
    returncode: int
    stdout: str = ''
    stderr: str = ''
    timed_out: bool = False

    @property
    def success(self) -> bool:
        return self.returncode == 0 and not self.timed_out

    @property
    def output(self) -> str:
        """Text worth showing to the user when the command failed"""
        return (self.stderr.strip() or self.stdout.strip())

    @property
    def display(self) -> str:
        return ' '.join(self.argv)


def _to_text(value) -> str:
    if value is None:
        return ''
    if isinstance(value, bytes):
        return value.decode('utf-8', errors='replace')
    return value


@dataclass
class CommandRunner:
    """
    Single entry point for running external commands.

    Failures never raise: a missing executable becomes return code 127 and
    a timeout becomes return code 124 with timed_out set.
    """
    timeout: Optional[float] = DEFAULT_TIMEOUT
    debug: bool = False
    console: Console = field(default_factory=lambda: _debug_console, repr=False)

    def run(
        self,
        cmd: List[str],
        capture: bool = True,
        timeout: Optional[float] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> CommandResult:
        """
        Run a command and wait for it to exit

        Args:
            cmd: Command and arguments
            capture: Capture stdout/stderr (False streams to the terminal)
            timeout: Seconds before the command is killed (default: runner timeout)
            env: Full environment for the child process

        Returns:
            CommandResult
        """
        limit = self.timeout if timeout is None else timeout
        if self.debug:
            self.console.print(f"[dim][DEBUG] Running: {escape(' '.join(cmd))}[/dim]")

        try:
            completed = subprocess.run(
                cmd,
                capture_output=capture,
                text=True,
                timeout=limit,
                check=False,
                shell=False,
                env=dict(env) if env is not None else None,
            )
            result = CommandResult(
                argv=list(cmd),
                returncode=completed.returncode,
                stdout=_to_text(completed.stdout),
                stderr=_to_text(completed.stderr),
            )
        except subprocess.TimeoutExpired as e:
            result = CommandResult(
                argv=list(cmd),
                returncode=EXIT_TIMEOUT,
                stdout=_to_text(e.stdout),
                stderr=f"Command timed out after {limit} seconds: {' '.join(cmd)}",
                timed_out=True,
            )
        except OSError as e:
            # FileNotFoundError, PermissionError and friends
            result = CommandResult(argv=list(cmd), returncode=EXIT_NOT_FOUND, stderr=str(e))

        if self.debug:
            self.console.print(f"[dim]  Return code: {result.returncode}[/dim]")
            if result.stdout:
                self.console.print(f"[dim]  Stdout: {escape(result.stdout[:300])}[/dim]")
            if result.stderr:
                self.console.print(f"[dim]  Stderr: {escape(result.stderr[:300])}[/dim]")

        return result

    def which(self, command: str) -> Optional[str]:
        """Resolve a command on PATH"""
        return shutil.which(command)

    def exists(self, command: str) -> bool:
        return self.which(command) is not None
