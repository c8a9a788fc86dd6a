#!/usr/bin/env python3
"""
devstrap module entry point
Allows running: python3 -m devstrap
"""

import sys

if __name__ == '__main__':
    # Allow running a single script directly: python3 -m devstrap count .
    from devstrap.scripts import SCRIPTS
    if len(sys.argv) > 1 and sys.argv[1] in SCRIPTS:
        from devstrap.scripts.base import run_standalone
        name = sys.argv.pop(1)
        run_standalone(SCRIPTS[name])
    else:
        from devstrap.cli import main
        main()
