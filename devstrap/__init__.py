"""
devstrap - Cross-Platform Developer Environment Bootstrapper
Detects the host platform and installs developer tools with its native package manager.
"""

__version__ = "1.0.0"
__author__ = "devstrap contributors"
__license__ = "MIT"

__all__ = ["__version__"]
