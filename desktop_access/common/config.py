"""Configuration management for desktop-access.

Handles loading of YAML role definition files.

Example:

    roles:
      - name: template-users
        grants: [ReadTemplates, LaunchTemplates]
        rules:
          - verbs: [read, launch]
            resources: [templates]
            resourcePatterns: ["^ubuntu-"]
            namespaces: [default]
"""

import os
from pathlib import Path
from typing import Any, Dict, List

import yaml

from desktop_access.core.rbac.roles import Role
from .logger import get_logger

logger = get_logger("config")


def parse_roles(config_dict: Dict[str, Any]) -> List[Role]:
    """Parse the roles section of a configuration dictionary.

    Args:
        config_dict: Full configuration dictionary

    Returns:
        List of Role instances, in file order

    Raises:
        ValueError: If a role is unnamed, duplicated or lists an unknown grant
    """
    role_dicts = config_dict.get("roles") or []
    if not isinstance(role_dicts, list):
        raise ValueError(f"roles must be a list, got {type(role_dicts).__name__}")

    roles = []
    seen = set()
    for role_dict in role_dicts:
        role = Role.from_dict(role_dict)
        if role.name in seen:
            raise ValueError(f"Duplicate role name: {role.name}")
        seen.add(role.name)
        roles.append(role)
    return roles


def load_config(config_path: str) -> Dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid YAML
        TypeError: If the document root is not a mapping
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_file.open("r") as f:
        config = yaml.safe_load(f)

    if config is None:
        config = {}

    if not isinstance(config, dict):
        raise TypeError(
            f"Configuration root must be a mapping, got {type(config).__name__}"
        )

    return _expand_env_vars(config)


def _expand_env_vars(obj: Any) -> Any:
    """Recursively expand environment variables in configuration."""
    if isinstance(obj, dict):
        return {key: _expand_env_vars(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        return os.path.expandvars(obj)
    else:
        return obj


def load_roles(config_path: str) -> List[Role]:
    """Load and parse role definitions from a YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        List of Role instances
    """
    roles = parse_roles(load_config(config_path))
    logger.info(f"Loaded {len(roles)} role(s) from {config_path}")
    return roles
