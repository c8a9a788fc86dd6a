"""
Tests for devstrap platform detection

Every host is simulated with an explicit kernel name, environment and a
fake filesystem root, so the results do not depend on the test machine.
"""
from pathlib import Path

import pytest

from devstrap.errors import HomeDirectoryError
from devstrap.platform.detector import (
    DEBIAN_FAMILY,
    PackageManager,
    PlatformDetector,
    PlatformType,
    RHEL_FAMILY,
)


@pytest.fixture
def fake_root(tmp_path):
    """Create marker files below a fake filesystem root"""
    root = tmp_path / 'root'
    root.mkdir()

    def _write(relpath: str, content: str = '') -> Path:
        path = root / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    _write.root = root
    return _write


def make_detector(fake_root, system='Linux', release='6.1.0-13-amd64', environ=None, has_dnf=False, home=None):
    return PlatformDetector(
        system=system,
        release=release,
        environ=environ if environ is not None else {},
        root=fake_root.root,
        which=lambda name: '/usr/bin/dnf' if (has_dnf and name == 'dnf') else None,
        home=home or (lambda: Path('/home/dev')),
        machine='x86_64',
    )


class TestPlatformType:
    """Classification rules"""

    def test_darwin_is_macos(self, fake_root):
        info = make_detector(fake_root, system='Darwin', release='23.1.0').detect()
        assert info.type is PlatformType.MACOS
        assert info.package_manager is PackageManager.BREW
        assert info.desktop_available is True

    def test_windows_without_msystem(self, fake_root):
        info = make_detector(fake_root, system='Windows', release='10').detect()
        assert info.type is PlatformType.WINDOWS
        assert info.package_manager is PackageManager.CHOCOLATEY

    def test_windows_with_mingw_msystem_is_gitbash(self, fake_root):
        info = make_detector(fake_root, system='Windows', environ={'MSYSTEM': 'MINGW64'}).detect()
        assert info.type is PlatformType.GITBASH
        assert info.package_manager is PackageManager.CHOCOLATEY

    def test_mingw_kernel_name_is_gitbash(self, fake_root):
        info = make_detector(fake_root, system='MINGW64_NT-10.0-19045', environ={'MSYSTEM': 'MINGW64'}).detect()
        assert info.type is PlatformType.GITBASH

    def test_msys_shell_is_plain_windows(self, fake_root):
        info = make_detector(fake_root, system='MSYS_NT-10.0', environ={'MSYSTEM': 'MSYS'}).detect()
        assert info.type is PlatformType.WINDOWS

    def test_wsl_from_kernel_release(self, fake_root):
        fake_root('etc/os-release', 'ID=ubuntu\n')
        info = make_detector(fake_root, release='5.15.153.1-microsoft-standard-WSL2').detect()
        assert info.type is PlatformType.WSL
        assert info.package_manager is PackageManager.APT
        assert info.distro == 'ubuntu'

    def test_wsl_from_proc_version(self, fake_root):
        fake_root('proc/version', 'Linux version 4.4.0-19041-Microsoft (Microsoft@Microsoft.com)')
        info = make_detector(fake_root).detect()
        assert info.type is PlatformType.WSL

    def test_wsl_from_distro_name_variable(self, fake_root):
        info = make_detector(fake_root, environ={'WSL_DISTRO_NAME': 'Ubuntu'}).detect()
        assert info.type is PlatformType.WSL

    @pytest.mark.parametrize('distro_id,expected', [
        ('ubuntu', PlatformType.UBUNTU),
        ('debian', PlatformType.DEBIAN),
        ('raspbian', PlatformType.RASPBIAN),
        ('amzn', PlatformType.AMAZON_LINUX),
        ('rhel', PlatformType.RHEL),
        ('centos', PlatformType.RHEL),
        ('fedora', PlatformType.FEDORA),
    ])
    def test_os_release_ids(self, fake_root, distro_id, expected):
        fake_root('etc/os-release', f'NAME="Something"\nID="{distro_id}"\nVERSION_ID="1"\n')
        assert make_detector(fake_root).detect().type is expected

    def test_raspberry_pi_model_overrides_debian(self, fake_root):
        fake_root('etc/os-release', 'ID=debian\n')
        fake_root('proc/device-tree/model', 'Raspberry Pi 4 Model B Rev 1.4\x00')
        assert make_detector(fake_root).detect().type is PlatformType.RASPBIAN

    @pytest.mark.parametrize('distro_id,expected,manager', [
        ('fedora', PlatformType.FEDORA, PackageManager.DNF),
        ('ubuntu', PlatformType.UBUNTU, PackageManager.APT),
        ('amzn', PlatformType.AMAZON_LINUX, PackageManager.DNF),
    ])
    def test_raspberry_pi_model_keeps_other_distros(self, fake_root, distro_id, expected, manager):
        fake_root('etc/os-release', f'ID={distro_id}\n')
        fake_root('proc/device-tree/model', 'Raspberry Pi 4 Model B Rev 1.4\x00')
        info = make_detector(fake_root, has_dnf=True).detect()
        assert info.type is expected
        assert info.package_manager is manager

    def test_raspberry_pi_model_without_distro_id(self, fake_root):
        fake_root('proc/device-tree/model', 'Raspberry Pi 3 Model B\x00')
        assert make_detector(fake_root).detect().type is PlatformType.RASPBIAN

    def test_lsb_release_fallback(self, fake_root):
        fake_root('etc/lsb-release', 'DISTRIB_ID=Ubuntu\nDISTRIB_RELEASE=22.04\n')
        assert make_detector(fake_root).detect().type is PlatformType.UBUNTU

    def test_unrecognized_distro_is_unknown(self, fake_root):
        fake_root('etc/os-release', 'ID=arch\n')
        info = make_detector(fake_root, environ={'DISPLAY': ':0'}).detect()
        assert info.type is PlatformType.UNKNOWN
        assert info.package_manager is PackageManager.NONE
        assert info.desktop_available is False
        assert info.is_supported is False

    def test_missing_marker_files_is_unknown(self, fake_root):
        assert make_detector(fake_root).detect().type is PlatformType.UNKNOWN

    def test_other_kernel_is_unknown(self, fake_root):
        assert make_detector(fake_root, system='FreeBSD').detect().type is PlatformType.UNKNOWN

    def test_detection_is_deterministic(self, fake_root):
        fake_root('etc/os-release', 'ID=fedora\n')
        detector = make_detector(fake_root, has_dnf=True)
        assert detector.detect() == detector.detect()


class TestPackageManager:
    """Package manager derivation"""

    @pytest.mark.parametrize('platform_type', sorted(RHEL_FAMILY, key=lambda t: t.value))
    def test_rhel_family_prefers_dnf(self, fake_root, platform_type):
        with_dnf = make_detector(fake_root, has_dnf=True)
        without_dnf = make_detector(fake_root, has_dnf=False)
        assert with_dnf._get_package_manager(platform_type) is PackageManager.DNF
        assert without_dnf._get_package_manager(platform_type) is PackageManager.YUM

    @pytest.mark.parametrize('platform_type', sorted(DEBIAN_FAMILY, key=lambda t: t.value))
    def test_debian_family_uses_apt(self, fake_root, platform_type):
        assert make_detector(fake_root)._get_package_manager(platform_type) is PackageManager.APT

    def test_every_type_has_a_package_manager(self, fake_root):
        detector = make_detector(fake_root)
        for platform_type in PlatformType:
            assert isinstance(detector._get_package_manager(platform_type), PackageManager)
            assert platform_type.display_name


class TestDesktop:
    """Desktop availability heuristic"""

    @pytest.fixture
    def ubuntu(self, fake_root):
        fake_root('etc/os-release', 'ID=ubuntu\n')
        return fake_root

    @pytest.mark.parametrize('environ,expected', [
        ({}, False),
        ({'DISPLAY': ':0'}, True),
        ({'WAYLAND_DISPLAY': 'wayland-0'}, True),
        ({'XDG_SESSION_TYPE': 'x11'}, True),
        ({'XDG_SESSION_TYPE': 'tty'}, False),
        ({'XDG_CURRENT_DESKTOP': 'GNOME'}, True),
        ({'DESKTOP_SESSION': 'plasma'}, True),
    ])
    def test_linux_desktop_signals(self, ubuntu, environ, expected):
        assert make_detector(ubuntu, environ=environ).detect().desktop_available is expected

    def test_wsl_without_wslg(self, fake_root):
        info = make_detector(fake_root, release='5.15-microsoft-standard-WSL2', environ={'XDG_SESSION_TYPE': 'x11'}).detect()
        assert info.desktop_available is False

    def test_wsl_with_wslg(self, fake_root):
        (fake_root.root / 'mnt' / 'wslg').mkdir(parents=True)
        info = make_detector(fake_root, release='5.15-microsoft-standard-WSL2').detect()
        assert info.desktop_available is True


class TestHomeDirectory:
    """Home directory resolution"""

    def test_home_is_reported(self, fake_root):
        info = make_detector(fake_root, system='Darwin').detect()
        assert info.home_dir == Path('/home/dev')

    def test_relative_home_raises(self, fake_root):
        with pytest.raises(HomeDirectoryError):
            make_detector(fake_root, home=lambda: Path('relative')).detect()

    def test_unresolvable_home_raises(self, fake_root):
        def no_home():
            raise RuntimeError("Could not determine home directory.")

        with pytest.raises(HomeDirectoryError):
            make_detector(fake_root, home=no_home).detect()


def test_to_dict_is_json_friendly(fake_root):
    fake_root('etc/os-release', 'ID=debian\n')
    data = make_detector(fake_root, environ={'SHELL': '/bin/zsh'}).detect().to_dict()
    assert data['type'] == 'debian'
    assert data['package_manager'] == 'apt'
    assert data['home_dir'] == str(Path('/home/dev'))
    assert data['shell'] == 'zsh'
    assert data['architecture'] == 'x86_64'
