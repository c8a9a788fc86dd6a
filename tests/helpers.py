"""
Test doubles shared across devstrap tests
"""
from typing import Callable, Iterable, List, Optional

from devstrap.platform.process import CommandResult


class FakeRunner:
    """
    Stand-in for CommandRunner: records every command and answers from a
    responder instead of spawning processes
    """

    def __init__(self, available: Iterable[str] = (), responder: Optional[Callable] = None):
        self.available = set(available)
        self.responder = responder
        self.calls: List[List[str]] = []
        self.envs: List = []
        self.timeout = 600
        self.debug = False

    def which(self, command: str) -> Optional[str]:
        return f'/usr/bin/{command}' if command in self.available else None

    def exists(self, command: str) -> bool:
        return self.which(command) is not None

    def run(self, cmd, capture=True, timeout=None, env=None) -> CommandResult:
        self.calls.append(list(cmd))
        self.envs.append(env)
        if self.responder is not None:
            result = self.responder(list(cmd))
            if result is not None:
                return result
        return CommandResult(argv=list(cmd), returncode=0)

    def commands_containing(self, word: str) -> List[List[str]]:
        return [call for call in self.calls if word in call]


def fail(cmd: List[str], stderr: str = 'boom') -> CommandResult:
    return CommandResult(argv=cmd, returncode=1, stderr=stderr)
