"""Shared fixtures: a temporary project tree with a small template set."""

from pathlib import Path

import pytest

from vartypes.generator import CodeGenerator
from vartypes.registry import ArtifactRegistry
from vartypes.store import AssetStore
from vartypes.templates import TemplateCatalog

VARIABLE_TEMPLATE = """\
public class @Name@Variable : Base.@Referable@Variable<@Type@> {} // @Order@
"""

DRAWER_TEMPLATE = """\
[CustomPropertyDrawer(typeof(@Name@Reference))]
public class @Name@Drawer : ReferenceDrawer {}
"""


def write_template(
    root: Path,
    relative: str,
    body: str,
    referability: list[str] | None = None,
) -> Path:
    """Write a ``.template`` file, with front matter when referability is given."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    text = body
    if referability is not None:
        kinds = ", ".join(referability)
        text = f"---\nreferability: [{kinds}]\n---\n{body}"
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def assets(tmp_path: Path) -> Path:
    """Project asset root."""
    root = tmp_path / "Assets"
    root.mkdir()
    return root.resolve()


@pytest.fixture
def target(assets: Path) -> Path:
    """Runtime-visible folder inside the asset root."""
    folder = assets / "Vars"
    folder.mkdir()
    return folder


@pytest.fixture
def templates_root(tmp_path: Path) -> Path:
    """One runtime-visible and one tool-only template."""
    root = tmp_path / "templates"
    write_template(root, "@Name@Variable.cs.template", VARIABLE_TEMPLATE)
    write_template(root, "Editor/@Name@Drawer.cs.template", DRAWER_TEMPLATE)
    return root


@pytest.fixture
def store(assets: Path) -> AssetStore:
    return AssetStore(assets)


@pytest.fixture
def registry(store: AssetStore) -> ArtifactRegistry:
    return ArtifactRegistry(store)


@pytest.fixture
def catalog(templates_root: Path) -> TemplateCatalog:
    return TemplateCatalog(templates_root)


@pytest.fixture
def generator(
    store: AssetStore, registry: ArtifactRegistry, catalog: TemplateCatalog
) -> CodeGenerator:
    return CodeGenerator(store, registry, catalog)
