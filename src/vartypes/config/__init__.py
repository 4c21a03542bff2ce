"""Configuration loading and defaults."""

from vartypes.config.loader import (
    home_config_exists,
    load_config,
    local_config_exists,
    remember_target_folder,
    resolve_assets_root,
    resolve_templates_path,
    save_config,
)
from vartypes.config.schema import DEFAULT_CONFIG, VarTypesConfig

__all__ = [
    "DEFAULT_CONFIG",
    "VarTypesConfig",
    "home_config_exists",
    "load_config",
    "local_config_exists",
    "remember_target_folder",
    "resolve_assets_root",
    "resolve_templates_path",
    "save_config",
]
