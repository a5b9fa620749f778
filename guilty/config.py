#!/usr/bin/env python3

import os
import json
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import logging
import sys

import yaml

from .exit_codes import ConfigError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("guilty")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. GUILTY_CONFIG environment variable
    2. ~/.guilty/ directory
    """
    if 'GUILTY_CONFIG' in os.environ:
        path = Path(os.environ['GUILTY_CONFIG'])
        if path.exists():
            return path
        logger.warning(f"GUILTY_CONFIG points to missing file {path}")

    guilty_dir = Path.home() / '.guilty'
    for filename in CONFIG_FILENAMES:
        path = guilty_dir / filename
        if path.exists():
            return path

    # If no file exists, return default path
    return guilty_dir / 'config.json'


def get_default_config():
    """Get default configuration."""
    return {
        "store": {
            "root": "/mnt/git",
            "host_name": "localhost",
            "default_group": "git",
            "bare_suffix": "git",
            "quarantine_suffix": "deleted",
            "excluded_groups": ["git-shell-commands", "lost+found"],
        },
        "git": {
            "binary": "git",
            "timeout_seconds": None,
        },
        "server": {
            "host": "0.0.0.0",
            "port": 8000,
            "cors_origins": ["*"],
        },
        "logging": {
            "level": "INFO",
            "format": "%(levelname)s: %(message)s",
        },
    }


def _read_config_file(config_path: Path) -> dict:
    suffix = config_path.suffix.lower()
    if suffix == '.toml':
        with open(config_path, 'rb') as f:
            return tomllib.load(f)
    if suffix in ('.yaml', '.yml'):
        with open(config_path, 'r') as f:
            return yaml.safe_load(f) or {}
    with open(config_path, 'r') as f:
        return json.load(f)


def load_config(config_path: Optional[Path] = None):
    """Load configuration from file.

    Raises:
        ConfigError: if the file exists but cannot be parsed
    """
    config_path = config_path or get_config_path()

    # Start with default config
    config = get_default_config()

    if config_path.exists():
        try:
            file_config = _read_config_file(config_path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"Error loading config from {config_path}: {e}") from e
        if not isinstance(file_config, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")
        config = merge_configs(config, file_config)
        logger.debug(f"Loaded config from {config_path}")

    # Apply environment variable overrides
    return apply_env_overrides(config)


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            # Recursively merge nested dictionaries
            merged[key] = merge_configs(merged[key], value)
        else:
            # Override or add new key
            merged[key] = value

    return merged


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: GUILTY_SECTION_KEY
    For example: GUILTY_STORE_ROOT=/srv/git
    """
    env_prefix = "GUILTY_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == "GUILTY_CONFIG":
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        # Convert value
        if value.lower() in ('true', 'yes', 'on'):
            typed_value = True
        elif value.lower() in ('false', 'no', 'off'):
            typed_value = False
        elif value.isdigit():
            typed_value = int(value)
        else:
            typed_value = value

        current_level = config
        i = 0
        while i < len(key_parts):
            # Find the longest key in current_level that is a prefix of the remaining key_parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts_from_key = config_key.split('_')
                if key_parts[i : i + len(config_key_parts_from_key)] == config_key_parts_from_key:
                    if len(config_key_parts_from_key) > best_match_len:
                        best_match_len = len(config_key_parts_from_key)
                        matched_key = config_key

            if matched_key:
                if i + best_match_len == len(key_parts):
                    current_level[matched_key] = typed_value
                    break

                if isinstance(current_level[matched_key], dict):
                    current_level = current_level[matched_key]
                    i += best_match_len
                else:
                    break
            else:
                break

    return config


def configure_logging(config) -> None:
    """Apply the logging section to the package logger."""
    section = config.get("logging", {})
    level = str(section.get("level", "INFO")).upper()
    logger.setLevel(getattr(logging, level, logging.INFO))
    fmt = section.get("format")
    if fmt:
        for handler in logging.getLogger().handlers:
            handler.setFormatter(logging.Formatter(fmt))


@dataclass(frozen=True)
class StoreConfig:
    """
    Immutable settings threaded into every engine component.

    Built once from the loaded config dict; components never read
    the config dict or the environment themselves.
    """
    root: Path
    host_name: str = "localhost"
    default_group: str = "git"
    bare_suffix: str = "git"
    quarantine_suffix: str = "deleted"
    excluded_groups: Tuple[str, ...] = ("git-shell-commands", "lost+found")
    git_binary: str = "git"
    git_timeout: Optional[float] = None

    @classmethod
    def from_config(cls, config) -> 'StoreConfig':
        store = config.get("store", {})
        git = config.get("git", {})
        if not store.get("root"):
            raise ConfigError("store.root must be set")
        timeout = git.get("timeout_seconds")
        return cls(
            root=Path(os.path.expanduser(str(store["root"]))),
            host_name=store.get("host_name", "localhost"),
            default_group=store.get("default_group", "git"),
            bare_suffix=str(store.get("bare_suffix", "git")).lstrip('.'),
            quarantine_suffix=str(store.get("quarantine_suffix", "deleted")).lstrip('.'),
            excluded_groups=tuple(store.get("excluded_groups", ())),
            git_binary=git.get("binary", "git"),
            git_timeout=float(timeout) if timeout else None,
        )

    def group_path(self, group: str) -> Path:
        return self.root / group

    def repository_path(self, group: str, name: str) -> Path:
        return self.root / group / f"{name}.{self.bare_suffix}"

    def quarantine_path(self, repo_path: Path) -> Path:
        return repo_path.with_name(f"{repo_path.name}.{self.quarantine_suffix}")

    def clone_url(self, group: str, name: str) -> str:
        return f"git@{self.host_name}:{group}/{name}.{self.bare_suffix}"
