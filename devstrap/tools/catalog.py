#!/usr/bin/env python3
"""
devstrap Tool Catalog
Declarative description of every installable tool
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from devstrap.errors import UnknownToolError


@dataclass(frozen=True)
class ToolSpec:
    """
    Package identifiers for one tool.

    A missing identifier means the tool is not offered through that package
    manager; `ToolInstaller` turns that into an "unsupported" outcome.
    """
    name: str
    display_name: str
    command: str                            # binary checked on PATH
    brew: Optional[str] = None
    brew_cask: Optional[str] = None
    apt: Optional[str] = None
    dnf: Optional[str] = None
    yum: Optional[str] = None               # falls back to the dnf name
    choco: Optional[str] = None
    flatpak: Optional[str] = None
    npm: Optional[str] = None               # installed with npm on every platform
    requires_desktop: bool = False
    gitbash_download_url: Optional[str] = None
    depends_on: Tuple[str, ...] = ()       # catalog tools installed first
    notes: str = ''

    @property
    def yum_package(self) -> Optional[str]:
        return self.yum or self.dnf


def _same(name: str, command: Optional[str] = None, display_name: Optional[str] = None, **overrides) -> ToolSpec:
    """Tool packaged under the same name by brew, apt, dnf and choco"""
    fields = dict(brew=name, apt=name, dnf=name, choco=name)
    fields.update(overrides)
    return ToolSpec(
        name=name,
        display_name=display_name or name,
        command=command or name,
        **fields,
    )


_CATALOG: List[ToolSpec] = [
    _same('git', display_name='Git'),
    _same('curl', display_name='cURL'),
    _same('wget', display_name='Wget'),
    _same(
        'jq',
        gitbash_download_url='https://github.com/jqlang/jq/releases/download/jq-1.8.1/jq-windows-amd64.exe',
    ),
    _same('tree'),
    _same('tmux', choco=None),
    _same('vim', display_name='Vim', dnf='vim-enhanced'),
    _same('zsh', display_name='Zsh', choco=None),
    _same('shellcheck', display_name='ShellCheck', dnf='ShellCheck'),
    _same('ffmpeg', display_name='FFmpeg', dnf=None, notes='Fedora and RHEL ship FFmpeg through RPM Fusion.'),
    _same('pandoc', display_name='Pandoc'),
    ToolSpec(
        name='yq',
        display_name='yq',
        command='yq',
        brew='yq',
        choco='yq',
        gitbash_download_url='https://github.com/mikefarah/yq/releases/latest/download/yq_windows_amd64.exe',
        notes="The apt 'yq' package is a different Python tool.",
    ),
    ToolSpec(
        name='latex',
        display_name='LaTeX',
        command='pdflatex',
        brew_cask='mactex-no-gui',
        apt='texlive-full',
        dnf='texlive-scheme-full',
        choco='texlive',
        notes='Full TeX distributions are several gigabytes.',
    ),
    ToolSpec(
        name='vscode',
        display_name='Visual Studio Code',
        command='code',
        brew_cask='visual-studio-code',
        flatpak='com.visualstudio.code',
        choco='vscode',
        requires_desktop=True,
    ),
    ToolSpec(
        name='slack',
        display_name='Slack',
        command='slack',
        brew_cask='slack',
        flatpak='com.slack.Slack',
        choco='slack',
        requires_desktop=True,
    ),
    ToolSpec(
        name='node',
        display_name='Node.js',
        command='node',
        brew='node',
        apt='nodejs',
        dnf='nodejs',
        choco='nodejs-lts',
    ),
    ToolSpec(name='yarn', display_name='Yarn', command='yarn', npm='yarn', depends_on=('node',)),
    ToolSpec(
        name='gemini-cli',
        display_name='Gemini CLI',
        command='gemini',
        npm='@google/gemini-cli',
        depends_on=('node',),
    ),
]

TOOLS: Dict[str, ToolSpec] = {spec.name: spec for spec in _CATALOG}


def get_tool(name: str) -> ToolSpec:
    """
    Look up a tool by name (case-insensitive)

    Raises:
        UnknownToolError: if no tool has that name
    """
    try:
        return TOOLS[name.lower()]
    except KeyError:
        raise UnknownToolError(name) from None


def list_tools() -> List[ToolSpec]:
    """All catalog tools sorted by name"""
    return sorted(TOOLS.values(), key=lambda spec: spec.name)
