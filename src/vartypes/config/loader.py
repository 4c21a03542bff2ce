"""Configuration file loading and merging."""

import logging
import os
from pathlib import Path

import yaml

from vartypes.config.schema import DEFAULT_CONFIG, VarTypesConfig, coerce_bool

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.yaml"
BUILTIN_MODE_ENV = "VARTYPES_BUILTIN_MODE"


def get_home_config_path() -> Path:
    """Get path to global config: ~/.vartypes/config.yaml."""
    return Path.home() / ".vartypes" / CONFIG_FILENAME


def get_local_config_path() -> Path:
    """Get path to local config: ./.vartypes/config.yaml."""
    return Path.cwd() / ".vartypes" / CONFIG_FILENAME


def home_config_exists() -> bool:
    """Check if the global home config exists."""
    return get_home_config_path().exists()


def local_config_exists() -> bool:
    """Check if the local project config exists."""
    return get_local_config_path().exists()


def load_yaml_config(path: Path) -> dict[str, object] | None:
    """Load a YAML config file, return None if not found or empty."""
    if not path.exists():
        return None
    try:
        with path.open() as f:
            data = yaml.safe_load(f)
            if data is None:
                return None
            if not isinstance(data, dict):
                logger.warning("Ignoring %s: top level is not a mapping", path)
                return None
            result: dict[str, object] = data
            return result
    except yaml.YAMLError as e:
        logger.warning("Ignoring unparsable config %s: %s", path, e)
        return None


def load_config() -> VarTypesConfig:
    """Load merged configuration.

    Precedence (lowest to highest):
    1. Built-in defaults
    2. Global config (~/.vartypes/config.yaml)
    3. Local config (./.vartypes/config.yaml)
    4. VARTYPES_BUILTIN_MODE environment variable (builtin_mode only)

    Returns merged VarTypesConfig.
    """
    config = DEFAULT_CONFIG

    home_data = load_yaml_config(get_home_config_path())
    if home_data:
        config = config.merge(VarTypesConfig.from_dict(home_data))

    local_data = load_yaml_config(get_local_config_path())
    if local_data:
        config = config.merge(VarTypesConfig.from_dict(local_data))

    env_builtin = os.environ.get(BUILTIN_MODE_ENV)
    if env_builtin:
        config = config.merge(VarTypesConfig(builtin_mode=coerce_bool(env_builtin)))

    return config


def save_config(config: VarTypesConfig, path: Path) -> None:
    """Save config to a YAML file.

    Creates parent directories if needed.
    Only saves non-None values.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.to_dict()
    with path.open("w") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)


def remember_target_folder(folder: Path) -> None:
    """Store the last successful target folder in the local config."""
    path = get_local_config_path()
    existing = VarTypesConfig.from_dict(load_yaml_config(path) or {})
    save_config(existing.merge(VarTypesConfig(last_target_folder=str(folder))), path)


def resolve_assets_root(config: VarTypesConfig) -> Path:
    """Absolute project asset root for a config, relative to the cwd."""
    root = Path(config.assets_root or DEFAULT_CONFIG.assets_root or "Assets")
    if not root.is_absolute():
        root = Path.cwd() / root
    return root


def resolve_templates_path(config: VarTypesConfig) -> Path | None:
    """Configured templates path, if any, made absolute."""
    if not config.templates_path:
        return None
    path = Path(config.templates_path).expanduser()
    return path if path.is_absolute() else Path.cwd() / path
