"""Locating and reading the YAML configuration."""

import os
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml
from dotenv import load_dotenv

CONFIG_ENV_VAR = "LINESENSE_CONFIG"

# repo_root/config/, with the package installed at repo_root/linesense/
DEFAULT_CONFIG_DIR = Path(__file__).parent.parent.parent / "config"


def get_environment() -> str:
    """Deployment name from LINESENSE_ENV, 'linesense' when unset."""
    return os.getenv("LINESENSE_ENV", "linesense")


def get_config_path(
    config_name: Optional[str] = None,
    config_dir: Optional[Union[str, Path]] = None,
) -> Path:
    """Path of ``config_name`` (default ``{environment}.yaml``) in ``config_dir``."""
    config_dir = Path(config_dir) if config_dir is not None else DEFAULT_CONFIG_DIR
    return config_dir / (config_name or f"{get_environment()}.yaml")


def resolve_config_path(config_path: Optional[Union[str, Path]] = None) -> Path:
    """Explicit path, else LINESENSE_CONFIG, else the environment's default file."""
    if config_path is None:
        config_path = os.getenv(CONFIG_ENV_VAR) or get_config_path()
    return Path(config_path)


def load_yaml_config(
    config_path: Optional[Union[str, Path]] = None,
    load_env: bool = True,
) -> dict:
    """Read a YAML config file into a dict (empty file gives ``{}``).

    Raises:
        FileNotFoundError: If the resolved file doesn't exist.
        yaml.YAMLError: If the file is not valid YAML.
    """
    if load_env:
        load_dotenv()

    path = resolve_config_path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def get_log_level(config: Mapping[str, Any], default: str = "INFO") -> str:
    """Upper-cased ``log_level`` of a config mapping."""
    return str(config.get("log_level") or default).upper()
