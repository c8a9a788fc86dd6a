#!/usr/bin/env python3
"""
devstrap get-dependencies script
Lists dependency names from a package.json
"""

import json
from pathlib import Path
from typing import List

import click

from devstrap.platform.detector import PlatformInfo
from devstrap.scripts.base import dispatch, err_console, error, platform_table, run_standalone

# Accepted type keyword -> package.json section
DEPENDENCY_TYPES = {
    'dependencies': 'dependencies',
    'prod': 'dependencies',
    'dev': 'devDependencies',
    'peer': 'peerDependencies',
    'opt': 'optionalDependencies',
    'optional': 'optionalDependencies',
}


def read_dependencies(package_json: Path, section: str) -> List[str]:
    """
    Read dependency names from one section of package.json

    Raises:
        OSError: file cannot be read
        ValueError: file is not a JSON object or the section is not a mapping
    """
    data = json.loads(package_json.read_text(encoding='utf-8'))
    if not isinstance(data, dict):
        raise ValueError("top-level value is not an object")

    deps = data.get(section) or {}
    if not isinstance(deps, dict):
        raise ValueError(f"'{section}' is not an object")
    return list(deps)


def do_get_dependencies(args: List[str]) -> int:
    if not args or args[0].lower() in DEPENDENCY_TYPES:
        package_json = Path('package.json')
        rest = args
    else:
        package_json = Path(args[0])
        rest = args[1:]

    dep_type = rest[0].lower() if rest else 'dependencies'
    section = DEPENDENCY_TYPES.get(dep_type)
    if section is None:
        error(f"Unknown dependency type: {dep_type}")
        err_console.print(f"Valid types: {', '.join(DEPENDENCY_TYPES)}")
        return 1

    package_json = package_json.resolve()
    if not package_json.is_file():
        error(f"package.json not found: {package_json}")
        return 1

    try:
        names = read_dependencies(package_json, section)
    except OSError as e:
        error(f"Cannot read {package_json} ({e.strerror or e})")
        return 1
    except ValueError as e:
        # json.JSONDecodeError is a ValueError
        error(f"Invalid package.json: {package_json} ({e})")
        return 1

    for name in names:
        click.echo(name)
    return 0


HANDLERS = platform_table(do_get_dependencies)


def main(args: List[str], platform_info: PlatformInfo) -> int:
    return dispatch('get-dependencies', HANDLERS, args, platform_info, fallback=do_get_dependencies)


def cli():
    run_standalone(main)
