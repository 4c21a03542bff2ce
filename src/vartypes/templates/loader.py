"""Template loading and discovery."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

import yaml

from vartypes.metadata.codec import strip_metadata
from vartypes.metadata.descriptor import (
    CONCRETE_REFERABILITIES,
    Referability,
)
from vartypes.paths import is_tool_only
from vartypes.templates.base import Placement, TemplateDescriptor

logger = logging.getLogger(__name__)

# Constants
TEMPLATE_DIRNAME = "templates"
TEMPLATE_SUFFIX = ".template"
FRONT_MATTER_MARKER = "---"


class TemplateError(Exception):
    """Raised when a template file cannot be loaded."""


def get_package_templates_path() -> Path:
    """Get path to package-bundled default templates."""
    return Path(__file__).parent / "default"


def get_global_templates_path() -> Path:
    """Get path to global user templates: ~/.vartypes/templates/."""
    return Path.home() / ".vartypes" / TEMPLATE_DIRNAME


def get_local_templates_path() -> Path:
    """Get path to project-specific templates: ./.vartypes/templates/."""
    return Path.cwd() / ".vartypes" / TEMPLATE_DIRNAME


def get_template_search_paths(configured: Path | None = None) -> list[Path]:
    """Return existing template roots in priority order (highest first).

    Resolution order:
    1. Configured templates path
    2. Local project templates (./.vartypes/templates/)
    3. Global user templates (~/.vartypes/templates/)
    4. Package defaults
    """
    candidates = [
        configured,
        get_local_templates_path(),
        get_global_templates_path(),
        get_package_templates_path(),
    ]
    return [path for path in candidates if path is not None and path.is_dir()]


def resolve_templates_root(configured: Path | None = None) -> Path:
    """Pick the single template root to use; the first search path wins."""
    paths = get_template_search_paths(configured)
    if configured is not None and configured not in paths:
        logger.warning("Configured templates path %s does not exist", configured)
    return paths[0] if paths else get_package_templates_path()


def _split_front_matter(text: str) -> tuple[dict[str, object], str]:
    """Split an optional leading YAML block from the template body."""
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != FRONT_MATTER_MARKER:
        return {}, text

    for index in range(1, len(lines)):
        if lines[index].strip() == FRONT_MATTER_MARKER:
            raw = "".join(lines[1:index])
            try:
                data = yaml.safe_load(raw)
            except yaml.YAMLError as e:
                raise TemplateError(f"invalid front matter: {e}") from e
            if data is None:
                data = {}
            if not isinstance(data, dict):
                raise TemplateError("front matter must be a mapping")
            return data, "".join(lines[index + 1 :])

    raise TemplateError("front matter is not terminated")


def _parse_referabilities(raw: object) -> frozenset[Referability]:
    if raw is None:
        return CONCRETE_REFERABILITIES
    items = raw if isinstance(raw, list) else [raw]
    kinds = {Referability.parse(item) for item in items}
    if Referability.UNKNOWN in kinds:
        raise TemplateError(f"unknown referability in {raw!r}")
    if not kinds:
        raise TemplateError("referability list is empty")
    return frozenset(kinds)


def load_template_from_file(path: Path, root: Path) -> TemplateDescriptor:
    """Load a TemplateDescriptor from a ``*.template`` file.

    Placement comes from the file's location below ``root``: anything in an
    ``Editor`` folder is tool-only.

    Raises:
        TemplateError: If the file is unreadable or its front matter is bad.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateError(f"cannot read template: {e}") from e

    front_matter, body = _split_front_matter(text)
    referabilities = _parse_referabilities(front_matter.get("referability"))

    relative_dir = path.parent.relative_to(root)
    placement = (
        Placement.TOOL_ONLY if is_tool_only(relative_dir) else Placement.RUNTIME_VISIBLE
    )

    return TemplateDescriptor(
        source=path,
        name_pattern=path.name[: -len(TEMPLATE_SUFFIX)],
        body=strip_metadata(body).rstrip("\n"),
        referabilities=referabilities,
        placement=placement,
    )


class TemplateCatalog:
    """The set of templates found below one root.

    The catalog is scanned once on first use; call ``scan`` again to pick
    up changes. There is no incremental update.
    """

    def __init__(self, root: Path) -> None:
        self.root = root
        self._templates: list[TemplateDescriptor] | None = None

    def scan(self) -> list[TemplateDescriptor]:
        """Read every template below the root, skipping broken ones."""
        templates: list[TemplateDescriptor] = []
        if self.root.is_dir():
            for path in sorted(self.root.rglob(f"*{TEMPLATE_SUFFIX}")):
                if not path.is_file():
                    continue
                try:
                    templates.append(load_template_from_file(path, self.root))
                except TemplateError as e:
                    logger.warning("Skipping template %s: %s", path, e)
        else:
            logger.warning("Template root %s does not exist", self.root)

        self._templates = templates
        logger.debug("Found %d template(s) in %s", len(templates), self.root)
        return list(templates)

    @property
    def templates(self) -> list[TemplateDescriptor]:
        if self._templates is None:
            self.scan()
        assert self._templates is not None
        return list(self._templates)

    def templates_for(self, referability: Referability) -> list[TemplateDescriptor]:
        """Templates compatible with ``referability``, in catalog order."""
        return [t for t in self.templates if t.is_compatible_with(referability)]


def copy_default_templates_to_user(
    dest: Path | None = None, overwrite: bool = False
) -> list[str]:
    """Copy package default templates to a user templates directory.

    Args:
        dest: Target directory. Defaults to ~/.vartypes/templates/.
        overwrite: If True, overwrite existing templates. If False, skip existing.

    Returns:
        Relative paths of the templates that were copied.
    """
    package_path = get_package_templates_path()
    dest = dest or get_global_templates_path()
    dest.mkdir(parents=True, exist_ok=True)

    copied: list[str] = []
    for template in sorted(package_path.rglob(f"*{TEMPLATE_SUFFIX}")):
        relative = template.relative_to(package_path)
        target = dest / relative

        if target.exists() and not overwrite:
            continue

        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(template, target)
        copied.append(relative.as_posix())

    return copied
