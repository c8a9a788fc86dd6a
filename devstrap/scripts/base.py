#!/usr/bin/env python3
"""
devstrap Script Dispatch
Shared platform dispatch and entry point handling for the standalone scripts
"""

import sys
from typing import Callable, Dict, List, Optional

from rich.console import Console
from rich.markup import escape

from devstrap.errors import HomeDirectoryError
from devstrap.platform.detector import PlatformInfo, PlatformType, detect_platform

Handler = Callable[..., int]
ScriptMain = Callable[[List[str], PlatformInfo], int]

# Errors and warnings go to stderr
err_console = Console(stderr=True)


def platform_table(handler: Handler) -> Dict[PlatformType, Handler]:
    """Map every known platform to one shared implementation"""
    return {
        platform_type: handler
        for platform_type in PlatformType
        if platform_type is not PlatformType.UNKNOWN
    }


def dispatch(
    name: str,
    handlers: Dict[PlatformType, Handler],
    args: List[str],
    platform_info: PlatformInfo,
    fallback: Optional[Handler] = None,
    **kwargs,
) -> int:
    """
    Run the handler registered for the detected platform

    Args:
        name: Script name used in messages
        handlers: Platform type to handler
        args: Script arguments
        platform_info: Detected platform
        fallback: Generic implementation for platforms without a handler
        **kwargs: Passed through to the handler

    Returns:
        Exit code
    """
    handler = handlers.get(platform_info.type)
    if handler is not None:
        return handler(args, **kwargs)

    if fallback is None:
        supported = ', '.join(platform_type.value for platform_type in handlers)
        err_console.print(
            f"[yellow]{name} is not available for {platform_info.type.value}.[/yellow]"
        )
        err_console.print(f"Supported platforms: {supported}")
        return 0

    err_console.print(
        f"[yellow]Warning: Platform '{platform_info.type.value}' is not explicitly supported. "
        f"Using the generic implementation.[/yellow]"
    )
    return fallback(args, **kwargs)


def error(message: str):
    err_console.print(f"[red]Error: {escape(message)}[/red]")


def run_standalone(main: ScriptMain, argv: Optional[List[str]] = None):
    """Detect the platform, run a script and exit with its code"""
    args = sys.argv[1:] if argv is None else argv
    try:
        platform_info = detect_platform()
    except HomeDirectoryError as e:
        error(str(e))
        sys.exit(1)
    sys.exit(main(args, platform_info))
