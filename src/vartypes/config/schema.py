"""Configuration schema and validation for vartypes."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

from vartypes.metadata.descriptor import DEFAULT_MENU_ORDER


def coerce_bool(raw: object) -> bool | None:
    if raw is None:
        return None
    if isinstance(raw, str):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    return bool(raw)


@dataclass
class VarTypesConfig:
    """vartypes configuration schema.

    None values indicate "not set" and will use defaults or be inherited.
    """

    # Project layout
    assets_root: str | None = None
    templates_path: str | None = None

    # Builtin (elevated) mode: new artifacts are labeled system-owned and
    # system-owned sets become editable.
    builtin_mode: bool | None = None

    # Creation defaults
    default_menu_order: int | None = None
    last_target_folder: str | None = None

    def merge(self, other: VarTypesConfig) -> VarTypesConfig:
        """Merge another config into this one.

        Values from `other` take precedence when they are not None.
        Returns a new VarTypesConfig instance.
        """
        return VarTypesConfig(
            **{
                f.name: (
                    getattr(other, f.name)
                    if getattr(other, f.name) is not None
                    else getattr(self, f.name)
                )
                for f in fields(self)
            }
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary, excluding None values."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                result[f.name] = value
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VarTypesConfig:
        """Create a VarTypesConfig from a dictionary.

        Unknown keys are ignored. Type validation is performed.
        """
        assets_root = data.get("assets_root")
        templates_path = data.get("templates_path")
        last_target_folder = data.get("last_target_folder")

        menu_order_raw = data.get("default_menu_order")
        default_menu_order: int | None = None
        if menu_order_raw is not None:
            try:
                default_menu_order = int(menu_order_raw)
            except (TypeError, ValueError):
                default_menu_order = None

        return cls(
            assets_root=str(assets_root) if assets_root is not None else None,
            templates_path=str(templates_path) if templates_path is not None else None,
            builtin_mode=coerce_bool(data.get("builtin_mode")),
            default_menu_order=default_menu_order,
            last_target_folder=(
                str(last_target_folder) if last_target_folder is not None else None
            ),
        )


# Default configuration values (used when not specified anywhere)
DEFAULT_CONFIG = VarTypesConfig(
    assets_root="Assets",
    builtin_mode=False,
    default_menu_order=DEFAULT_MENU_ORDER,
)
