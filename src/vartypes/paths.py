"""Path helpers for the runtime-visible / tool-only split of a project tree.

Any directory named ``Editor`` (and everything below it) belongs to the
tool-only partition: its contents are excluded from runtime builds.
"""

from __future__ import annotations

from pathlib import Path

TOOL_FOLDER_NAME = "Editor"


def relative_parts(path: Path, root: Path | None = None) -> tuple[str, ...]:
    """Return the components of ``path`` below ``root`` (all of them if None)."""
    if root is not None:
        try:
            return path.resolve().relative_to(root.resolve()).parts
        except ValueError:
            pass
    return path.parts


def is_tool_only(path: Path, root: Path | None = None) -> bool:
    """True if ``path`` is a tool-only folder or lies inside one.

    Only whole components count: ``Foo/EditorStuff`` is runtime-visible.
    """
    return TOOL_FOLDER_NAME in relative_parts(path, root)


def tool_folder_for(directory: Path, root: Path | None = None) -> Path:
    """Return the tool-only folder that pairs with ``directory``.

    A directory already inside the tool-only partition is its own pair;
    otherwise the pair is its ``Editor`` child.
    """
    if is_tool_only(directory, root):
        return directory
    return directory / TOOL_FOLDER_NAME


def is_within(path: Path, root: Path) -> bool:
    """True if ``path`` is ``root`` or lies below it."""
    try:
        path.resolve().relative_to(root.resolve())
    except ValueError:
        return False
    return True
