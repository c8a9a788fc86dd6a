#!/usr/bin/env python3
"""
devstrap path script
Prints each PATH entry on its own line
"""

import os
from typing import List, Mapping, Optional

import click

from devstrap.platform.detector import PlatformInfo
from devstrap.scripts.base import dispatch, platform_table, run_standalone


def do_path(args: List[str], environ: Optional[Mapping[str, str]] = None) -> int:
    environ = os.environ if environ is None else environ
    path_env = environ.get('PATH', '')

    if not path_env:
        click.echo('PATH environment variable is not set or empty.')
        return 0

    for entry in path_env.split(os.pathsep):
        if entry:
            click.echo(entry)
    return 0


HANDLERS = platform_table(do_path)


def main(args: List[str], platform_info: PlatformInfo, environ: Optional[Mapping[str, str]] = None) -> int:
    return dispatch('path', HANDLERS, args, platform_info, fallback=do_path, environ=environ)


def cli():
    run_standalone(main)
