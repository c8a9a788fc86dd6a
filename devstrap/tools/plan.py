#!/usr/bin/env python3
"""
devstrap Install Planning
Orders requested tools so that their dependencies are installed first
"""

from typing import Callable, List, Set

from devstrap.tools.catalog import ToolSpec, get_tool


def plan_install(
    specs: List[ToolSpec],
    installer_for: Callable,
    lookup: Callable[[str], ToolSpec] = get_tool,
) -> List[ToolSpec]:
    """
    Build the ordered install list for the requested tools

    Dependencies come before the tools that need them. A dependency that is
    already installed or cannot be installed on this platform is left out;
    requested tools are always kept so their own outcome gets reported.
    Circular dependencies are broken at the first repeat.

    Args:
        specs: Tools the user asked for, in order
        installer_for: Returns a ToolInstaller for a spec
        lookup: Resolves a dependency name to its spec

    Returns:
        Tools to install, without duplicates
    """
    plan: List[ToolSpec] = []
    done: Set[str] = set()
    resolving: Set[str] = set()
    skipped: Set[str] = set()

    def visit(spec: ToolSpec):
        if spec.name in done or spec.name in resolving:
            return
        resolving.add(spec.name)

        for dep_name in spec.depends_on:
            dep = lookup(dep_name)
            if dep.name in done or dep.name in resolving or dep.name in skipped:
                continue
            installer = installer_for(dep)
            if not installer.is_eligible() or installer.is_installed():
                skipped.add(dep.name)
                continue
            visit(dep)

        resolving.discard(spec.name)
        done.add(spec.name)
        plan.append(spec)

    for spec in specs:
        visit(spec)
    return plan
