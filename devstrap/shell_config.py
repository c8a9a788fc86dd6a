#!/usr/bin/env python3
"""
devstrap Shell Configuration
Picks the user's shell rc file and adds PATH entries to it
"""

import os
from pathlib import Path
from typing import Mapping, Optional, Tuple

MARKER = '# Added by devstrap'


def get_shell(environ: Mapping[str, str] = None, home_dir: Path = None) -> Tuple[str, Optional[Path]]:
    """Detect user's shell and its rc file"""
    environ = os.environ if environ is None else environ
    home = home_dir or Path.home()
    shell = environ.get('SHELL', '')

    if 'zsh' in shell:
        return 'zsh', home / '.zshrc'
    elif 'bash' in shell:
        return 'bash', home / '.bashrc'
    elif 'fish' in shell:
        return 'fish', home / '.config' / 'fish' / 'config.fish'
    else:
        return 'unknown', None


def get_shell_rc(environ: Mapping[str, str] = None, home_dir: Path = None) -> Optional[Path]:
    """Return the rc file for the user's shell, or None for unsupported shells"""
    return get_shell(environ, home_dir)[1]


def is_in_path(directory: Path, environ: Mapping[str, str] = None) -> bool:
    """Check if directory is in PATH"""
    environ = os.environ if environ is None else environ
    path_dirs = environ.get('PATH', '').split(os.pathsep)
    return str(directory) in path_dirs


def path_line(directory: Path, shell: str) -> str:
    if shell == 'fish':
        return f'fish_add_path "{directory}"'
    return f'export PATH="{directory}:$PATH"'


def add_to_path(directory: Path, rc_file: Path, shell: str = 'bash') -> bool:
    """
    Append a PATH entry for directory to rc_file

    Returns:
        True if the file was changed, False if the entry was already there
    """
    rc_file.parent.mkdir(parents=True, exist_ok=True)
    content = rc_file.read_text(encoding='utf-8') if rc_file.exists() else ''

    if str(directory) in content:
        return False

    with open(rc_file, 'a', encoding='utf-8') as f:
        if content and not content.endswith('\n'):
            f.write('\n')
        f.write(f'\n{MARKER}\n')
        f.write(f'{path_line(directory, shell)}\n')

    return True
