#!/usr/bin/env python3
"""
devstrap Configuration Management
Handles .devstrap.yml configuration files
"""

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from devstrap.errors import ConfigError
from devstrap.platform.lock import DEFAULT_LOCK_TIMEOUT
from devstrap.platform.process import DEFAULT_TIMEOUT


@dataclass
class DevstrapConfig:
    """devstrap configuration structure"""

    version: str = "1.0"

    # External process settings
    command_timeout: int = DEFAULT_TIMEOUT
    lock_timeout: int = DEFAULT_LOCK_TIMEOUT
    serialize_package_managers: bool = True

    # Refresh package lists (apt) before installing
    update_index: bool = True

    debug: bool = False

    # Non-interactive defaults for package manager flags
    install_auto_approve: bool = True
    install_quiet_mode: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DevstrapConfig':
        """Create config from dictionary"""
        config = cls()

        config.version = str(data.get('version', config.version))
        config.command_timeout = _positive_int(data.get('command_timeout'), config.command_timeout)
        config.lock_timeout = _positive_int(data.get('lock_timeout'), config.lock_timeout)
        config.serialize_package_managers = _flag(
            data, 'serialize_package_managers', config.serialize_package_managers
        )
        config.update_index = _flag(data, 'update_index', config.update_index)
        config.debug = _flag(data, 'debug', config.debug)

        install = data.get('install') or {}
        if not isinstance(install, dict):
            print("Warning: Ignoring 'install' in config: expected a mapping", file=sys.stderr)
            install = {}
        config.install_auto_approve = _flag(install, 'auto_approve', config.install_auto_approve, 'install.')
        config.install_quiet_mode = _flag(install, 'quiet_mode', config.install_quiet_mode, 'install.')

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for YAML export"""
        return {
            'version': self.version,
            'command_timeout': self.command_timeout,
            'lock_timeout': self.lock_timeout,
            'serialize_package_managers': self.serialize_package_managers,
            'update_index': self.update_index,
            'debug': self.debug,
            'install': {
                'auto_approve': self.install_auto_approve,
                'quiet_mode': self.install_quiet_mode,
            },
        }


def _flag(data: Dict[str, Any], key: str, default: bool, prefix: str = '') -> bool:
    """Read a YAML boolean; anything else keeps the default with a warning"""
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    print(f"Warning: Ignoring '{prefix}{key}: {value}' in config: expected true or false", file=sys.stderr)
    return default


def _positive_int(value: Any, default: int) -> int:
    if value is None:
        return default
    try:
        return max(1, int(value))
    except (TypeError, ValueError):
        return default


class ConfigManager:
    """Manage devstrap configuration files"""

    DEFAULT_CONFIG_NAME = ".devstrap.yml"

    @staticmethod
    def find_config(start_path: Path = None, home_dir: Path = None) -> Optional[Path]:
        """
        Find .devstrap.yml by walking up directory tree, then in the home directory

        Args:
            start_path: Starting directory (default: current directory)
            home_dir: Fallback directory (default: user home)

        Returns:
            Path to .devstrap.yml or None if not found
        """
        current = (start_path or Path.cwd()).resolve()

        while True:
            config_file = current / ConfigManager.DEFAULT_CONFIG_NAME
            if config_file.is_file():
                return config_file
            if current == current.parent:
                break
            current = current.parent

        home_config = (home_dir or Path.home()) / ConfigManager.DEFAULT_CONFIG_NAME
        if home_config.is_file():
            return home_config

        return None

    @staticmethod
    def load_config(config_path: Path = None, home_dir: Path = None) -> DevstrapConfig:
        """
        Load configuration from .devstrap.yml

        Args:
            config_path: Path to config file (default: search from current dir)
            home_dir: Home directory used as the last search location

        Returns:
            DevstrapConfig object (defaults when no usable file exists)
        """
        if config_path is None:
            config_path = ConfigManager.find_config(home_dir=home_dir)

        if config_path is None or not config_path.exists():
            return DevstrapConfig()

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            print(f"Warning: Failed to load config from {config_path}: {e}", file=sys.stderr)
            return DevstrapConfig()

        if data is None:
            return DevstrapConfig()

        if not isinstance(data, dict):
            print(f"Warning: Ignoring {config_path}: expected a mapping at the top level", file=sys.stderr)
            return DevstrapConfig()

        return DevstrapConfig.from_dict(data)

    @staticmethod
    def save_config(config: DevstrapConfig, config_path: Path) -> bool:
        """
        Save configuration to .devstrap.yml

        Args:
            config: DevstrapConfig object
            config_path: Path where to save

        Returns:
            True if successful
        """
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)

            with open(config_path, 'w', encoding='utf-8') as f:
                yaml.dump(
                    config.to_dict(),
                    f,
                    default_flow_style=False,
                    sort_keys=False,
                    indent=2
                )

            return True

        except OSError as e:
            print(f"Error: Failed to save config to {config_path}: {e}", file=sys.stderr)
            return False

    @staticmethod
    def create_default_config(directory: Path) -> Path:
        """
        Create default .devstrap.yml in a directory

        Args:
            directory: Target directory

        Returns:
            Path to created config file
        """
        config_path = directory / ConfigManager.DEFAULT_CONFIG_NAME
        if not ConfigManager.save_config(DevstrapConfig(), config_path):
            raise ConfigError(f"Could not write {config_path}")
        return config_path
