#!/usr/bin/env python3
"""
devstrap mkd script
Creates a directory, including parents
"""

import os
from pathlib import Path
from typing import List, Optional

import click

from devstrap.platform.detector import PlatformInfo
from devstrap.scripts.base import dispatch, error, platform_table, run_standalone


def expand_tilde(raw: str, home_dir: Optional[Path] = None) -> str:
    if raw == '~' or raw.startswith('~/') or raw.startswith('~' + os.sep):
        return str(home_dir or Path.home()) + raw[1:]
    return raw


def do_mkd(args: List[str], home_dir: Optional[Path] = None) -> int:
    if not args:
        error("Usage: mkd <directory>")
        return 1

    target = Path(expand_tilde(' '.join(args), home_dir)).resolve()

    if target.exists():
        if not target.is_dir():
            error(f"A file with this name already exists: {target}")
            return 1
        click.echo(f"Directory already exists: {target}")
    else:
        try:
            target.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            error(f"Permission denied. Cannot create directory: {target}")
            return 1
        except OSError as e:
            error(f"Failed to create directory: {target} ({e.strerror or e})")
            return 1
        click.echo(f"Created directory: {target}")

    click.echo('')
    click.echo(f'To navigate there, run: cd "{target}"')
    return 0


HANDLERS = platform_table(do_mkd)


def main(args: List[str], platform_info: PlatformInfo) -> int:
    return dispatch('mkd', HANDLERS, args, platform_info, fallback=do_mkd, home_dir=platform_info.home_dir)


def cli():
    run_standalone(main)
