"""Initialization logic for vartypes directory structure."""

from pathlib import Path

from vartypes.templates.loader import copy_default_templates_to_user


def copy_default_templates(local: bool = False, overwrite: bool = False) -> list[str]:
    """Copy default templates from package to templates directory.

    Args:
        local: If True, copy to ./.vartypes/templates/ (project-local).
               If False, copy to ~/.vartypes/templates/ (global, default).
        overwrite: Replace templates that already exist.

    Returns:
        Relative paths of the templates that were copied.
    """
    if local:
        target = Path.cwd() / ".vartypes" / "templates"
    else:
        target = Path.home() / ".vartypes" / "templates"

    return copy_default_templates_to_user(target, overwrite=overwrite)


def ensure_vartypes_dir() -> Path:
    """Create .vartypes directory in current working directory."""
    vartypes_dir = Path.cwd() / ".vartypes"
    vartypes_dir.mkdir(parents=True, exist_ok=True)
    return vartypes_dir


def ensure_home_vartypes_dir() -> Path:
    """Create ~/.vartypes directory if it doesn't exist.

    Returns the path to the home vartypes directory.
    """
    home_dir = Path.home() / ".vartypes"
    home_dir.mkdir(parents=True, exist_ok=True)
    return home_dir
