"""
devstrap Tools
Tool catalog and the per-platform install dispatch
"""

from devstrap.tools.catalog import TOOLS, ToolSpec, get_tool, list_tools
from devstrap.tools.installer import InstallOutcome, InstallRoute, ToolInstaller
from devstrap.tools.plan import plan_install

__all__ = [
    'TOOLS',
    'ToolSpec',
    'get_tool',
    'list_tools',
    'InstallOutcome',
    'InstallRoute',
    'ToolInstaller',
    'plan_install',
]
