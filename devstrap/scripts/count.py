#!/usr/bin/env python3
"""
devstrap count scripts
count, count-files and count-folders for the direct entries of a directory
"""

import os
from pathlib import Path
from typing import List, Optional, Tuple

import click

from devstrap.platform.detector import PlatformInfo
from devstrap.scripts.base import dispatch, error, platform_table, run_standalone


def count_entries(directory: Path) -> Tuple[int, int]:
    """
    Count regular files and directories directly inside a directory.
    Symlinks are not followed, so a link to a directory counts as neither.

    Returns:
        (files, folders)
    """
    files = folders = 0
    with os.scandir(directory) as entries:
        for entry in entries:
            if entry.is_file(follow_symlinks=False):
                files += 1
            elif entry.is_dir(follow_symlinks=False):
                folders += 1
    return files, folders


def _scan(args: List[str]) -> Optional[Tuple[int, int]]:
    target = Path(args[0] if args else '.').resolve()

    if not target.exists():
        error(f"Path does not exist: {target}")
        return None
    if not target.is_dir():
        error(f"Path is not a directory: {target}")
        return None

    try:
        return count_entries(target)
    except OSError as e:
        error(f"Cannot read directory: {target} ({e.strerror or e})")
        return None


def do_count(args: List[str]) -> int:
    counts = _scan(args)
    if counts is None:
        return 1
    files, folders = counts
    click.echo(f"Files  : {files}")
    click.echo(f"Folders: {folders}")
    return 0


def do_count_files(args: List[str]) -> int:
    counts = _scan(args)
    if counts is None:
        return 1
    click.echo(counts[0])
    return 0


def do_count_folders(args: List[str]) -> int:
    counts = _scan(args)
    if counts is None:
        return 1
    click.echo(counts[1])
    return 0


HANDLERS = platform_table(do_count)
FILES_HANDLERS = platform_table(do_count_files)
FOLDERS_HANDLERS = platform_table(do_count_folders)


def main(args: List[str], platform_info: PlatformInfo) -> int:
    return dispatch('count', HANDLERS, args, platform_info, fallback=do_count)


def main_files(args: List[str], platform_info: PlatformInfo) -> int:
    return dispatch('count-files', FILES_HANDLERS, args, platform_info, fallback=do_count_files)


def main_folders(args: List[str], platform_info: PlatformInfo) -> int:
    return dispatch('count-folders', FOLDERS_HANDLERS, args, platform_info, fallback=do_count_folders)


def cli():
    run_standalone(main)


def cli_files():
    run_standalone(main_files)


def cli_folders():
    run_standalone(main_folders)
