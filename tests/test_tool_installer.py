"""
Tests for the tool catalog and the per-platform install dispatch
"""
import io

import pytest
from rich.console import Console

from devstrap.errors import UnknownToolError
from devstrap.platform.detector import PackageManager, PlatformType
from devstrap.platform.installers.base import InstallSettings
from devstrap.platform.lock import PackageManagerLock
from devstrap.platform.process import CommandResult
from devstrap.tools import InstallOutcome, InstallRoute, ToolInstaller, get_tool, list_tools

from tests.helpers import FakeRunner, fail


def make_console() -> Console:
    return Console(file=io.StringIO(), width=200)


def output_of(console: Console) -> str:
    return console.file.getvalue()


def make_installer(tool, platform_info, runner, **kwargs):
    kwargs.setdefault('console', make_console())
    return ToolInstaller(get_tool(tool), platform_info, runner=runner, **kwargs)


class TestCatalog:
    """Tool catalog lookups"""

    def test_required_tools_are_present(self):
        names = {spec.name for spec in list_tools()}
        for name in ('git', 'curl', 'wget', 'jq', 'tree', 'tmux', 'vim', 'zsh', 'shellcheck',
                     'ffmpeg', 'pandoc', 'yq', 'latex', 'vscode', 'slack', 'node', 'yarn', 'gemini-cli'):
            assert name in names

    def test_lookup_is_case_insensitive(self):
        assert get_tool('JQ').name == 'jq'

    def test_unknown_tool(self):
        with pytest.raises(UnknownToolError) as exc_info:
            get_tool('emacs')
        assert exc_info.value.name == 'emacs'
        assert 'Unknown tool: emacs' in str(exc_info.value)

    def test_yum_falls_back_to_dnf_name(self):
        assert get_tool('vim').yum_package == 'vim-enhanced'


class TestDispatchTable:
    """Every platform type has a route builder"""

    def test_table_is_exhaustive(self):
        assert set(ToolInstaller.PLATFORM_ROUTES) == set(PlatformType)
        for builder in ToolInstaller.PLATFORM_ROUTES.values():
            assert callable(getattr(ToolInstaller, builder))

    @pytest.mark.parametrize('platform_type', list(PlatformType))
    def test_every_tool_resolves_on_every_platform(self, make_platform, platform_type):
        runner = FakeRunner()
        for spec in list_tools():
            route = ToolInstaller(spec, make_platform(platform_type), runner=runner).resolve_route()
            assert route is None or isinstance(route, InstallRoute)
        assert runner.calls == []

    @pytest.mark.parametrize('tool', [spec.name for spec in list_tools()])
    def test_unknown_platform_is_graceful(self, make_platform, tool):
        runner = FakeRunner(available={'apt-get', 'brew', 'npm', 'choco'})
        installer = make_installer(tool, make_platform(PlatformType.UNKNOWN), runner)

        outcome = installer.install()

        assert outcome is InstallOutcome.UNSUPPORTED
        assert outcome.exit_code == 0
        assert 'is not available for unknown.' in output_of(installer.console)
        assert runner.calls == []

    def test_macos_prefers_cask(self, make_platform):
        route = ToolInstaller(get_tool('latex'), make_platform(PlatformType.MACOS)).resolve_route()
        assert route == InstallRoute('brew', 'mactex-no-gui', cask=True)

    def test_rhel_with_yum(self, make_platform):
        info = make_platform(PlatformType.RHEL, package_manager=PackageManager.YUM)
        route = ToolInstaller(get_tool('vim'), info).resolve_route()
        assert route == InstallRoute('yum', 'vim-enhanced')

    def test_fedora_with_dnf(self, make_platform):
        route = ToolInstaller(get_tool('shellcheck'), make_platform(PlatformType.FEDORA)).resolve_route()
        assert route == InstallRoute('dnf', 'ShellCheck')

    def test_gui_tool_uses_flatpak_on_linux(self, make_platform):
        route = ToolInstaller(get_tool('slack'), make_platform(PlatformType.DEBIAN, desktop=True)).resolve_route()
        assert route == InstallRoute('flatpak', 'com.slack.Slack')

    def test_npm_tool_everywhere_supported(self, make_platform):
        for platform_type in PlatformType:
            route = ToolInstaller(get_tool('yarn'), make_platform(platform_type)).resolve_route()
            if platform_type is PlatformType.UNKNOWN:
                assert route is None
            else:
                assert route == InstallRoute('npm', 'yarn')

    def test_gitbash_download(self, make_platform):
        route = ToolInstaller(get_tool('jq'), make_platform(PlatformType.GITBASH)).resolve_route()
        assert route.is_download
        assert route.package == 'jq.exe'

    def test_gitbash_falls_back_to_choco(self, make_platform):
        route = ToolInstaller(get_tool('git'), make_platform(PlatformType.GITBASH)).resolve_route()
        assert route == InstallRoute('choco', 'git')


class TestInstallFlow:
    """Prerequisite, idempotency, install and verification"""

    @staticmethod
    def apt_runner(installs_command=True, update_fails=False, install_fails=False):
        runner = FakeRunner(available={'apt-get'})

        def responder(cmd):
            if cmd[0] == 'dpkg-query':
                return fail(cmd)
            if cmd[:2] == ['apt-get', 'update'] and update_fails:
                return fail(cmd, 'Temporary failure resolving archive.ubuntu.com')
            if cmd[:2] == ['apt-get', 'install']:
                if install_fails:
                    return fail(cmd, 'E: Unable to locate package jq')
                if installs_command:
                    runner.available.add('jq')
            return None

        runner.responder = responder
        return runner

    def test_second_install_is_a_noop(self, make_platform):
        runner = self.apt_runner()
        info = make_platform(PlatformType.UBUNTU)

        first = make_installer('jq', info, runner).install()
        assert first is InstallOutcome.INSTALLED
        assert len(runner.commands_containing('install')) == 1
        assert len(runner.commands_containing('update')) == 1

        runner.calls.clear()
        second = make_installer('jq', info, runner)
        assert second.install() is InstallOutcome.ALREADY_INSTALLED
        assert runner.commands_containing('install') == []
        assert runner.commands_containing('update') == []
        assert 'already installed' in output_of(second.console)

    def test_missing_package_manager(self, make_platform):
        installer = make_installer('jq', make_platform(PlatformType.MACOS), FakeRunner())
        outcome = installer.install()
        assert outcome is InstallOutcome.MISSING_PREREQUISITE
        assert outcome.exit_code == 1
        assert 'Homebrew is not installed' in output_of(installer.console)

    def test_command_failure_surfaces_output(self, make_platform):
        installer = make_installer('jq', make_platform(PlatformType.DEBIAN), self.apt_runner(install_fails=True))
        outcome = installer.install()
        assert outcome is InstallOutcome.COMMAND_FAILED
        assert outcome.exit_code == 1
        output = output_of(installer.console)
        assert 'Unable to locate package jq' in output
        assert 'Retry with:' in output

    def test_timeout_is_a_command_failure(self, make_platform):
        runner = FakeRunner(available={'apt-get'})

        def responder(cmd):
            if cmd[0] == 'dpkg-query':
                return fail(cmd)
            if cmd[:2] == ['apt-get', 'install']:
                return CommandResult(cmd, 124, stderr='Command timed out after 600 seconds', timed_out=True)
            return None

        runner.responder = responder
        installer = make_installer('jq', make_platform(PlatformType.UBUNTU), runner)
        assert installer.install() is InstallOutcome.COMMAND_FAILED
        assert 'timed out' in output_of(installer.console)

    def test_not_verified_is_distinct(self, make_platform):
        installer = make_installer('jq', make_platform(PlatformType.UBUNTU), self.apt_runner(installs_command=False))
        outcome = installer.install()
        assert outcome is InstallOutcome.NOT_VERIFIED
        assert outcome.exit_code == 1
        assert 'new terminal' in output_of(installer.console)

    def test_index_refresh_failure_only_warns(self, make_platform):
        runner = self.apt_runner(update_fails=True)
        installer = make_installer('jq', make_platform(PlatformType.UBUNTU), runner)
        assert installer.install() is InstallOutcome.INSTALLED
        assert 'could not refresh' in output_of(installer.console)

    def test_index_refresh_can_be_disabled(self, make_platform):
        runner = self.apt_runner()
        settings = InstallSettings(update_index=False)
        assert make_installer('jq', make_platform(PlatformType.UBUNTU), runner, settings=settings).install() \
            is InstallOutcome.INSTALLED
        assert runner.commands_containing('update') == []

    def test_desktop_app_without_desktop(self, make_platform):
        runner = FakeRunner(available={'apt-get', 'flatpak'})
        installer = make_installer('vscode', make_platform(PlatformType.UBUNTU, desktop=False), runner)
        outcome = installer.install()
        assert outcome is InstallOutcome.NO_DESKTOP
        assert outcome.exit_code == 0
        assert runner.calls == []

    def test_flatpak_app_installed_off_path(self, make_platform):
        runner = FakeRunner(available={'flatpak'})
        state = {'installed': False}

        def responder(cmd):
            if cmd[:2] == ['flatpak', 'info']:
                return None if state['installed'] else fail(cmd)
            if cmd[:2] == ['flatpak', 'install']:
                state['installed'] = True
            return None

        runner.responder = responder
        installer = make_installer('slack', make_platform(PlatformType.FEDORA, desktop=True), runner)
        assert installer.install() is InstallOutcome.INSTALLED
        assert runner.calls[0][:2] == ['flatpak', 'info']
        assert ['flatpak', 'remote-add', '--if-not-exists', 'flathub',
                'https://dl.flathub.org/repo/flathub.flatpakrepo'] in runner.calls
        assert 'not on PATH yet' in output_of(installer.console)

    def test_windows_package_not_yet_on_path(self, make_platform):
        runner = FakeRunner(available={'choco'})
        state = {'installed': False}

        def responder(cmd):
            if cmd[1] == 'list':
                return CommandResult(cmd, 0, stdout='git|2.43.0\n' if state['installed'] else '')
            if cmd[1] == 'install':
                state['installed'] = True
            return None

        runner.responder = responder
        installer = make_installer('git', make_platform(PlatformType.WINDOWS, desktop=True), runner)
        assert installer.install() is InstallOutcome.INSTALLED

    def test_unsupported_on_supported_platform(self, make_platform):
        installer = make_installer('tmux', make_platform(PlatformType.WINDOWS), FakeRunner(available={'choco'}))
        assert installer.install() is InstallOutcome.UNSUPPORTED
        assert 'is not available for windows.' in output_of(installer.console)

    def test_npm_tool_needs_node(self, make_platform):
        installer = make_installer('gemini-cli', make_platform(PlatformType.UBUNTU), FakeRunner(available={'apt-get'}))
        assert installer.install() is InstallOutcome.MISSING_PREREQUISITE
        assert 'dev install node' in output_of(installer.console)

    def test_npm_tool_installs_globally(self, make_platform):
        runner = FakeRunner(available={'npm'})

        def responder(cmd):
            if cmd[1] == 'list':
                return fail(cmd)
            if cmd[1] == 'install':
                runner.available.add('yarn')
            return None

        runner.responder = responder
        assert make_installer('yarn', make_platform(PlatformType.MACOS), runner).install() is InstallOutcome.INSTALLED
        assert ['npm', 'install', '-g', 'yarn', '--silent'] in runner.calls


class TestGitBashDownload:
    """Direct executable downloads into ~/bin"""

    def test_download_and_path_update(self, make_platform, tmp_path):
        home = tmp_path / 'home'
        home.mkdir()
        runner = FakeRunner(available={'curl'})

        def responder(cmd):
            if cmd[0] == 'curl':
                target = cmd[cmd.index('-o') + 1]
                with open(target, 'wb') as f:
                    f.write(b'MZ')
            return None

        runner.responder = responder
        info = make_platform(PlatformType.GITBASH, home=home)
        environ = {'SHELL': '/usr/bin/bash', 'PATH': '/usr/bin'}

        installer = make_installer('jq', info, runner, environ=environ)
        assert installer.install() is InstallOutcome.INSTALLED
        assert (home / 'bin' / 'jq.exe').read_bytes() == b'MZ'
        assert str(home / 'bin') in (home / '.bashrc').read_text()

        again = make_installer('jq', info, runner, environ=environ)
        assert again.install() is InstallOutcome.ALREADY_INSTALLED
        assert len(runner.commands_containing('curl')) == 1
        assert again.is_installed()

    def test_download_needs_curl(self, make_platform):
        installer = make_installer('jq', make_platform(PlatformType.GITBASH), FakeRunner())
        assert installer.install() is InstallOutcome.MISSING_PREREQUISITE

    def test_download_failure(self, make_platform):
        runner = FakeRunner(available={'curl'}, responder=lambda cmd: fail(cmd, 'curl: (6) Could not resolve host'))
        installer = make_installer('yq', make_platform(PlatformType.GITBASH), runner)
        assert installer.install() is InstallOutcome.COMMAND_FAILED
        assert 'Could not resolve host' in output_of(installer.console)


class TestFilesystemErrors:
    """Unwritable state files are reported, never raised"""

    def test_unusable_lock_directory_fails_the_install(self, make_platform, tmp_path):
        (tmp_path / '.devstrap').write_text('not a directory')
        runner = TestInstallFlow.apt_runner()
        lock = PackageManagerLock.for_home(tmp_path, timeout=0)
        installer = make_installer('jq', make_platform(PlatformType.UBUNTU), runner, lock=lock)

        assert installer.install() is InstallOutcome.COMMAND_FAILED
        assert runner.commands_containing('install') == []
        assert 'Cannot create lock directory' in output_of(installer.console)

    def test_unwritable_rc_file_prints_manual_advice(self, make_platform, tmp_path):
        home = tmp_path / 'home'
        (home / '.bashrc').mkdir(parents=True)
        runner = FakeRunner(available={'curl'})

        def responder(cmd):
            if cmd[0] == 'curl':
                with open(cmd[cmd.index('-o') + 1], 'wb') as f:
                    f.write(b'MZ')
            return None

        runner.responder = responder
        environ = {'SHELL': '/usr/bin/bash', 'PATH': '/usr/bin'}
        installer = make_installer('jq', make_platform(PlatformType.GITBASH, home=home), runner, environ=environ)

        assert installer.install() is InstallOutcome.INSTALLED
        output = output_of(installer.console)
        assert 'Could not update' in output
        assert 'to your PATH to use downloaded tools' in output


class TestStatusHelpers:
    """is_installed and is_eligible"""

    def test_is_installed_via_path(self, make_platform):
        runner = FakeRunner(available={'git'})
        assert ToolInstaller(get_tool('git'), make_platform(PlatformType.UBUNTU), runner=runner).is_installed()

    def test_is_installed_via_package_manager(self, make_platform):
        runner = FakeRunner(
            available={'apt-get'},
            responder=lambda cmd: CommandResult(cmd, 0, stdout='install ok installed'),
        )
        assert ToolInstaller(get_tool('pandoc'), make_platform(PlatformType.DEBIAN), runner=runner).is_installed()

    def test_not_installed_without_package_manager(self, make_platform):
        assert not ToolInstaller(get_tool('jq'), make_platform(PlatformType.MACOS), runner=FakeRunner()).is_installed()

    def test_eligibility(self, make_platform):
        headless = make_platform(PlatformType.UBUNTU, desktop=False)
        assert ToolInstaller(get_tool('jq'), headless).is_eligible()
        assert not ToolInstaller(get_tool('vscode'), headless).is_eligible()
        assert not ToolInstaller(get_tool('jq'), make_platform(PlatformType.UNKNOWN)).is_eligible()


@pytest.mark.parametrize('outcome,code', [
    (InstallOutcome.INSTALLED, 0),
    (InstallOutcome.ALREADY_INSTALLED, 0),
    (InstallOutcome.UNSUPPORTED, 0),
    (InstallOutcome.NO_DESKTOP, 0),
    (InstallOutcome.MISSING_PREREQUISITE, 1),
    (InstallOutcome.COMMAND_FAILED, 1),
    (InstallOutcome.NOT_VERIFIED, 1),
])
def test_exit_codes(outcome, code):
    assert outcome.exit_code == code
