import os
import yaml
from pathlib import Path
from typing import Any, Dict
from dotenv import dotenv_values, find_dotenv
import logging

from .utils.build import BuildSettings

logger = logging.getLogger(__name__)


def get_project_root() -> Path:
    """Get the directory holding the packaged configuration.

    Returns:
        Path to the scriptdeps package directory
    """
    return Path(__file__).parent


def get_config() -> Dict[str, Any]:
    """Get configuration by merging config.yaml and environment variables.
    Environment variables from .env take precedence over config.yaml values.

    Returns:
        Dictionary containing merged configuration
    """
    config_path = Path(
        os.getenv("SCRIPTDEPS_CONFIG_PATH", str(get_project_root() / "config.yaml"))
    )
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        config = yaml.safe_load(f) or {}

    dotenv_path = find_dotenv(usecwd=True)
    if not dotenv_path:
        logger.debug("No .env file found")
    else:
        env_vars = dotenv_values(dotenv_path)
        config.update(env_vars)

    return config  # type: ignore[no-any-return]


def get_storage_params(config: dict) -> Dict[str, Path]:
    """Get storage folders from config with defaults.

    Args:
        config: Config dictionary containing a ``storage`` section

    Returns:
        Dictionary with the following keys:
        - base_path: Root folder for all scriptdeps state (default: ~/.scriptdeps)
        - registry_folder: Folder with one record file per package
        - generated_folder: Folder holding the generated manifest and build cache
    """
    storage_config = config.get("storage") or {}
    base_path = Path(
        os.getenv("SCRIPTDEPS_HOME")
        or config.get("SCRIPTDEPS_HOME")
        or storage_config.get("base_path", "~/.scriptdeps")
    ).expanduser()

    return {
        "base_path": base_path,
        "registry_folder": base_path / storage_config.get("registry_dir", "packages"),
        "generated_folder": base_path
        / storage_config.get("generated_dir", "generated"),
    }


def get_build_params(config: dict) -> BuildSettings:
    """Get external build tool settings from config with defaults.

    Args:
        config: Config dictionary containing a ``build`` section

    Returns:
        BuildSettings with the build command, manifest file name, build cache
        folder name and aggregate target name
    """
    build_config = config.get("build") or {}
    command = build_config.get("command", BuildSettings().command)
    if isinstance(command, str):
        command = command.split()

    return BuildSettings(
        command=list(command),
        manifest_name=build_config.get("manifest_name", BuildSettings().manifest_name),
        cache_dir=build_config.get("cache_dir", BuildSettings().cache_dir),
        aggregate_name=build_config.get(
            "aggregate_name", BuildSettings().aggregate_name
        ),
    )
