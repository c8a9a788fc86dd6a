#!/usr/bin/env python3
"""
devstrap Errors
Exception types that cross module boundaries
"""


class DevstrapError(Exception):
    """Base class for all devstrap errors"""


class HomeDirectoryError(DevstrapError):
    """The invoking user's home directory could not be resolved"""


class ConfigError(DevstrapError):
    """Configuration file could not be read or written"""


class LockError(DevstrapError):
    """The package manager lock file could not be created or opened"""


class LockTimeoutError(LockError):
    """Another devstrap process held the package manager lock for too long"""


class UnknownToolError(DevstrapError):
    """No installer exists for the requested tool"""

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class UnknownScriptError(DevstrapError):
    """No script exists with the requested name"""

    def __init__(self, name: str):
        super().__init__(f"Unknown script: {name}")
        self.name = name
