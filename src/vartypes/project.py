"""Wiring of store, registry, catalog and generator for one project."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from vartypes.config.loader import (
    load_config,
    resolve_assets_root,
    resolve_templates_path,
)
from vartypes.config.schema import VarTypesConfig
from vartypes.generator.builder import CodeGenerator
from vartypes.registry.registry import ArtifactRegistry
from vartypes.store.store import AssetStore
from vartypes.templates.loader import TemplateCatalog, resolve_templates_root


@dataclass
class Project:
    """The collaborators for one project tree, created once per process."""

    config: VarTypesConfig
    store: AssetStore
    registry: ArtifactRegistry
    catalog: TemplateCatalog
    generator: CodeGenerator

    @property
    def builtin_mode(self) -> bool:
        return self.generator.builtin_mode

    @classmethod
    def open(
        cls,
        root: Path,
        templates_root: Path,
        builtin_mode: bool = False,
        config: VarTypesConfig | None = None,
    ) -> Project:
        """Build a project over an explicit asset root and template root."""
        store = AssetStore(root)
        store.refresh()
        registry = ArtifactRegistry(store)
        catalog = TemplateCatalog(templates_root)
        generator = CodeGenerator(store, registry, catalog, builtin_mode=builtin_mode)
        return cls(
            config=config or VarTypesConfig(),
            store=store,
            registry=registry,
            catalog=catalog,
            generator=generator,
        )

    @classmethod
    def from_config(cls, config: VarTypesConfig | None = None) -> Project:
        """Build a project from the merged configuration files."""
        config = config or load_config()
        return cls.open(
            root=resolve_assets_root(config),
            templates_root=resolve_templates_root(resolve_templates_path(config)),
            builtin_mode=bool(config.builtin_mode),
            config=config,
        )
