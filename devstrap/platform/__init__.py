"""
devstrap Platform Detection & Package Managers
Host classification, external process execution and package manager adapters
"""

from devstrap.platform.detector import (
    PlatformDetector,
    PlatformInfo,
    PlatformType,
    PackageManager,
    detect_platform,
)

__all__ = [
    'PlatformDetector',
    'PlatformInfo',
    'PlatformType',
    'PackageManager',
    'detect_platform',
]
