"""Code generator: creates, rebuilds and deletes artifact sets."""

from __future__ import annotations

import logging
from pathlib import Path

from vartypes.generator.errors import (
    GenerationError,
    GenerationResult,
    InvalidIdentifierError,
    InvalidPlacementError,
    InvalidReferabilityError,
    IOFailureError,
    NameCollisionError,
    PathNotFoundError,
    ReadOnlySetError,
)
from vartypes.metadata.codec import encode
from vartypes.metadata.descriptor import Referability, TypeDescriptor
from vartypes.metadata.identifiers import is_valid_name
from vartypes.paths import is_tool_only, is_within, tool_folder_for
from vartypes.registry.models import ArtifactSet, Partition
from vartypes.registry.registry import ArtifactRegistry
from vartypes.store.store import AssetStore, meta_path_for
from vartypes.templates.base import TemplateDescriptor
from vartypes.templates.loader import TemplateCatalog

logger = logging.getLogger(__name__)

TEMPLATE_NEWLINE = "\n"


class CodeGenerator:
    """Generates variable-type artifact sets from templates.

    Writes are all-or-nothing: every file and folder created by a failing
    ``create`` is removed again before the error is returned.
    """

    def __init__(
        self,
        store: AssetStore,
        registry: ArtifactRegistry,
        catalog: TemplateCatalog,
        builtin_mode: bool = False,
    ) -> None:
        """Initialize the generator.

        Args:
            store: Store that owns the project tree.
            registry: Registry consulted for name checks and invalidated
                after every write.
            catalog: Templates to instantiate.
            builtin_mode: Label new artifacts as system-owned and allow
                editing system-owned sets.
        """
        self.store = store
        self.registry = registry
        self.catalog = catalog
        self.builtin_mode = builtin_mode

    @property
    def target_partition(self) -> Partition:
        return Partition.for_mode(self.builtin_mode)

    # Validation

    def validate(
        self,
        descriptor: TypeDescriptor,
        target_directory: Path,
        override_existing: bool = False,
    ) -> Path:
        """Check every precondition of ``create`` without touching disk.

        Returns the tool-only folder that pairs with ``target_directory``.

        Raises:
            GenerationError: The first failed precondition.
        """
        if not is_valid_name(descriptor.name):
            raise InvalidIdentifierError("Name", descriptor.name)
        if not override_existing and self.registry.is_name_taken(descriptor.name):
            raise NameCollisionError(descriptor.name)
        if not is_valid_name(descriptor.type_name):
            raise InvalidIdentifierError("Type", descriptor.type_name)
        if descriptor.referability is Referability.UNKNOWN:
            raise InvalidReferabilityError(descriptor.name)

        if not target_directory.is_dir():
            raise PathNotFoundError(target_directory)
        if not is_within(target_directory, self.store.root):
            raise PathNotFoundError(
                target_directory, f"not inside the project root {self.store.root}"
            )
        if is_tool_only(target_directory, self.store.root):
            raise InvalidPlacementError(target_directory)

        tool_folder = tool_folder_for(target_directory.resolve(), self.store.root)
        if tool_folder.exists() and not tool_folder.is_dir():
            raise IOFailureError(
                f"{tool_folder} exists as a file, so a folder cannot be made there",
                tool_folder,
            )
        return tool_folder

    def _check_editable(self, artifact_set: ArtifactSet) -> None:
        if not ArtifactRegistry.is_editable(artifact_set, self.builtin_mode):
            raise ReadOnlySetError(artifact_set.name)

    # Creation

    def create(
        self,
        descriptor: TypeDescriptor,
        target_directory: Path | str,
        override_existing: bool = False,
    ) -> GenerationResult:
        """Generate every compatible template for ``descriptor``.

        Runtime-visible templates are written into ``target_directory``,
        tool-only ones into its ``Editor`` child, which is created if needed.

        Args:
            descriptor: Metadata for the new scripts.
            target_directory: Existing folder inside the project root, not
                inside an Editor folder.
            override_existing: Skip the name check and overwrite existing
                files. Existing handles are kept.

        Returns:
            A GenerationResult with the written handles, or the error.
        """
        try:
            handles, paths = self._create(
                descriptor, Path(target_directory), override_existing
            )
        except GenerationError as e:
            logger.warning("Could not create '%s': %s", descriptor.name, e)
            return GenerationResult.failure(e)
        return GenerationResult(handles=handles, paths=paths)

    def _create(
        self,
        descriptor: TypeDescriptor,
        target_directory: Path,
        override_existing: bool,
    ) -> tuple[tuple[str, ...], tuple[Path, ...]]:
        tool_folder = self.validate(descriptor, target_directory, override_existing)
        target = target_directory.resolve()

        # Everything created here, most recent last.
        tracked: list[Path] = []
        try:
            with self.store.reload_guard():
                try:
                    if not tool_folder.is_dir():
                        tool_folder.mkdir()
                        tracked.append(tool_folder)

                    for template in self.catalog.templates_for(descriptor.referability):
                        self._write_artifact(
                            template,
                            descriptor,
                            target,
                            tool_folder,
                            override_existing,
                            tracked,
                        )
                except Exception:
                    self._rollback(tracked)
                    raise
        except OSError as e:
            raise IOFailureError(f"Failed writing '{descriptor.name}': {e}") from e

        written = [path for path in dict.fromkeys(tracked) if path.is_file()]
        if tool_folder in tracked:
            self.store.import_path(tool_folder)
        handles = self._label(written)

        self.registry.invalidate()
        self.store.request_reload()
        logger.info(
            "Generated %d artifact(s) for %s in %s", len(written), descriptor, target
        )
        return handles, tuple(written)

    def _write_artifact(
        self,
        template: TemplateDescriptor,
        descriptor: TypeDescriptor,
        runtime_folder: Path,
        tool_folder: Path,
        override_existing: bool,
        tracked: list[Path],
    ) -> Path:
        """Instantiate one template and write it; returns the new path.

        The path is tracked before it is opened, so a write that fails
        partway is rolled back with the rest.
        """
        folder = tool_folder if template.is_tool_only else runtime_folder
        path = folder / template.output_name(descriptor)

        if path.exists() and not override_existing:
            raise IOFailureError(f"{path} already exists", path)

        contents = template.render(descriptor) + TEMPLATE_NEWLINE + TEMPLATE_NEWLINE
        contents += encode(descriptor)
        tracked.append(path)
        with path.open("w", encoding="utf-8", newline=TEMPLATE_NEWLINE) as f:
            f.write(contents)
        logger.debug("Wrote %s from %s", path, template.source.name)
        return path

    def _rollback(self, tracked: list[Path]) -> None:
        """Remove tracked writes, newest first. Folders go only when empty."""
        for path in reversed(tracked):
            try:
                if path.is_dir():
                    if any(path.iterdir()):
                        continue
                    path.rmdir()
                else:
                    path.unlink(missing_ok=True)
                meta_path_for(path).unlink(missing_ok=True)
            except OSError:
                logger.warning("Rollback could not remove %s", path, exc_info=True)
        if tracked:
            logger.info("Rolled back %d tracked write(s)", len(tracked))

    def _label(self, written: list[Path]) -> tuple[str, ...]:
        """Import written files and tag them for discovery."""
        label = self.target_partition.label
        handles: list[str] = []
        try:
            for path in written:
                self.store.set_labels(path, [label])
                guid = self.store.guid_for(path)
                if guid is not None:
                    handles.append(guid)
        except OSError as e:
            raise IOFailureError(f"Failed labeling generated files: {e}") from e
        return tuple(handles)

    # Rebuild and delete

    def rebuild(
        self,
        artifact_set: ArtifactSet,
        new_descriptor: TypeDescriptor | None = None,
    ) -> GenerationResult:
        """Regenerate a set in place and prune artifacts no longer produced.

        Files go to the set's dominant location. Original artifacts whose
        paths were not rewritten (for example because a template was removed
        or the set was renamed) are deleted afterwards.
        """
        descriptor = new_descriptor or artifact_set.descriptor
        try:
            self._check_editable(artifact_set)
            if descriptor.name != artifact_set.name and self.registry.is_name_taken(
                descriptor.name
            ):
                raise NameCollisionError(descriptor.name)

            location = artifact_set.dominant_location(self.store)
            if location is None:
                raise PathNotFoundError(
                    None, f"'{artifact_set.name}' has no runtime-visible artifacts"
                )

            original_paths = artifact_set.paths(self.store)
            handles, paths = self._create(descriptor, location, override_existing=True)

            fresh = {path.resolve() for path in paths}
            removed: list[Path] = []
            for path in original_paths:
                if path.resolve() in fresh:
                    continue
                try:
                    if self.store.delete(path):
                        removed.append(path)
                except OSError as e:
                    raise IOFailureError(f"Could not delete {path}: {e}", path) from e
        except GenerationError as e:
            logger.warning("Could not rebuild '%s': %s", artifact_set.name, e)
            return GenerationResult.failure(e)
        finally:
            self.registry.invalidate()

        if removed:
            logger.info(
                "Removed %d orphaned artifact(s) of %s", len(removed), descriptor
            )
        return GenerationResult(handles=handles, paths=paths, removed=tuple(removed))

    def rebuild_all(self, partition: Partition) -> dict[str, GenerationResult]:
        """Rebuild every set in a partition from its own metadata."""
        results: dict[str, GenerationResult] = {}
        for name, artifact_set in self.registry.partition(partition).items():
            results[name] = self.rebuild(artifact_set)
        return results

    def delete(self, artifact_set: ArtifactSet) -> list[Path]:
        """Delete every artifact of a set and prune its empty Editor folder.

        Returns the paths whose deletion was requested. Deletion goes through
        the store; callers must not assume the host has caught up yet.

        Raises:
            ReadOnlySetError: For system-owned sets outside builtin mode.
            IOFailureError: If a file cannot be removed.
        """
        self._check_editable(artifact_set)
        paths = artifact_set.paths(self.store)
        if not paths:
            return []

        tool_folder = tool_folder_for(paths[0].parent, self.store.root)
        removed: list[Path] = []
        try:
            for path in paths:
                if self.store.delete(path):
                    removed.append(path)

            if tool_folder.is_dir() and not any(tool_folder.iterdir()):
                self.store.delete(tool_folder)
        except OSError as e:
            raise IOFailureError(f"Could not delete '{artifact_set.name}': {e}") from e
        finally:
            self.registry.invalidate()

        logger.info(
            "Deleted %d artifact(s) of %s", len(removed), artifact_set.descriptor
        )
        return removed
