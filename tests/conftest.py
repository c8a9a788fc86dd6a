"""
Shared fixtures for devstrap tests
"""
from pathlib import Path
from typing import Optional

import pytest

from devstrap.platform.detector import PackageManager, PlatformDetector, PlatformInfo, PlatformType

from tests.helpers import FakeRunner


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def make_platform(tmp_path):
    """Build a PlatformInfo for any platform type without detection"""
    def _make(
        platform_type: PlatformType,
        package_manager: Optional[PackageManager] = None,
        desktop: bool = False,
        home: Optional[Path] = None,
    ) -> PlatformInfo:
        if package_manager is None:
            package_manager = PlatformDetector(which=lambda name: '/usr/bin/dnf')._get_package_manager(
                platform_type
            )
        return PlatformInfo(
            type=platform_type,
            package_manager=package_manager,
            home_dir=home or tmp_path,
            desktop_available=desktop,
        )
    return _make
