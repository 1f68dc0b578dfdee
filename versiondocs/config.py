#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

from .exit_codes import ConfigError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("versiondocs")

CONFIG_FILENAMES = ['.versiondocs.json', '.versiondocs.toml', '.versiondocs.yaml', '.versiondocs.yml']

# Mappings a config file replaces wholesale instead of merging into
REPLACED_SETTINGS = [('versions', 'aliases')]


def get_config_path(repo_path=None):
    """Get the path to the configuration file.

    Checks in order:
    1. VERSIONDOCS_CONFIG environment variable
    2. .versiondocs.{json,toml,yaml,yml} at the repository root

    If no file exists, returns the default JSON path for saving.
    """
    if 'VERSIONDOCS_CONFIG' in os.environ:
        path = Path(os.environ['VERSIONDOCS_CONFIG']).expanduser()
        if path.exists():
            return path
        logger.debug(f"VERSIONDOCS_CONFIG points at missing file {path}")

    repo_dir = Path(repo_path or '.').resolve()
    for filename in CONFIG_FILENAMES:
        path = repo_dir / filename
        if path.exists():
            return path

    return repo_dir / CONFIG_FILENAMES[0]


def get_default_config():
    """Get default configuration."""
    return {
        "project": {
            "name": ""  # Empty means: use the repository directory name
        },
        "versions": {
            "head_ref": "main",
            "head_label": "prerelease (main branch)",
            "head_directory": "main",
            "legacy_head_markers": ["mdbook"],
            # Releases whose own tag lacks a buildable configuration,
            # published from a fixed-up tag instead.
            "aliases": {"v0.8.0-mdbook": "v0.8.0"},
            "stable_label": "{tag} stable"
        },
        "builder": {
            "command": ["mdbook", "build"],
            "config_path": "docs/.mdbook/book.toml",
            "title_template": "{project} {label} docs",
            "default_build_dir": "book",
            "timeout_seconds": 600
        },
        "publish": {
            "branch": "gh-pages",
            "index_filename": "index.md",
            "commit_message": "Publish documentation"
        },
        "git": {
            "author_name": "",
            "author_email": "",
            "timeout_seconds": 120
        },
        "logging": {
            "level": "INFO",
            "format": "%(levelname)s: %(message)s"
        }
    }


def load_config(repo_path=None):
    """Load configuration from file.

    Raises:
        ConfigError: If the configuration file exists but cannot be parsed
    """
    config_path = get_config_path(repo_path)

    # Start with default config
    config = get_default_config()

    # Load from file if it exists
    if config_path.exists():
        try:
            if config_path.suffix.lower() in ['.toml']:
                with open(config_path, 'rb') as f:
                    file_config = tomllib.load(f)
            elif config_path.suffix.lower() in ['.yaml', '.yml']:
                import yaml
                with open(config_path, 'r') as f:
                    file_config = yaml.safe_load(f) or {}
            else:
                # Default to JSON format
                with open(config_path, 'r') as f:
                    file_config = json.load(f)
        except Exception as e:
            raise ConfigError(f"Error loading config from {config_path}: {e}") from e

        if not isinstance(file_config, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")

        # Merge file config with defaults
        config = merge_configs(config, file_config)
        for section, key in REPLACED_SETTINGS:
            value = file_config.get(section)
            if isinstance(value, dict) and isinstance(value.get(key), dict):
                config[section][key] = dict(value[key])
        logger.debug(f"Loaded configuration from {config_path}")

    # Apply environment variable overrides
    config = apply_env_overrides(config)

    return config


def save_config(config, config_path):
    """Save configuration to file, choosing the format from the suffix."""
    config_path = Path(config_path)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    if config_path.suffix.lower() in ['.toml']:
        # tomllib is read-only
        import toml
        with open(config_path, 'w') as f:
            toml.dump(config, f)
    elif config_path.suffix.lower() in ['.yaml', '.yml']:
        import yaml
        with open(config_path, 'w') as f:
            yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
    else:
        # Default to JSON format
        with open(config_path, 'w') as f:
            json.dump(config, f, indent=2)
            f.write('\n')

    logger.info(f"Configuration saved to {config_path}")


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
    Environment variables follow the pattern: VERSIONDOCS_SECTION_KEY
    For example: VERSIONDOCS_PUBLISH_BRANCH=pages
    """
    env_prefix = "VERSIONDOCS_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == "VERSIONDOCS_CONFIG":
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
                # If we are at the end of the env var, we have found the key to set
                if i + best_match_len == len(key_parts):
                    current_level[matched_key] = typed_value
                    break

                # Otherwise, we descend into the dictionary
                if isinstance(current_level[matched_key], dict):
                    current_level = current_level[matched_key]
                    i += best_match_len
                else:
                    # Path conflict, e.g., env var is longer but we found a non-dict value
                    break
            else:
                # No match found
                break

    return config


def configure_logging(config=None, verbose=False):
    """Apply the configured log level and format to the package logger."""
    logging_config = (config or get_default_config()).get("logging", {})
    level_name = "DEBUG" if verbose else str(logging_config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    logger.setLevel(level)

    fmt = logging_config.get("format")
    if fmt:
        for handler in logging.getLogger().handlers:
            handler.setFormatter(logging.Formatter(fmt))

    return level


def project_name(config, repo_path):
    """Project name for titles and the index header."""
    name = config.get("project", {}).get("name") or ""
    return name or Path(repo_path).resolve().name
