"""Artifact registry: discovers generated artifact sets by label."""

from __future__ import annotations

import logging

from vartypes.metadata.codec import MetadataParseError, read_metadata
from vartypes.metadata.descriptor import Referability
from vartypes.registry.models import ArtifactSet, Partition, RegistryEntry
from vartypes.store.store import AssetStore

logger = logging.getLogger(__name__)


class ArtifactRegistry:
    """Cached mapping from logical name to artifact set, per partition.

    Results are rebuilt lazily: the registry starts dirty, rescans both
    partitions on the first lookup after being invalidated, and otherwise
    serves the last completed scan. The store's ``changed`` and
    ``before_reload`` signals invalidate it.
    """

    def __init__(self, store: AssetStore) -> None:
        self.store = store
        self._partitions: dict[Partition, dict[str, ArtifactSet]] = {
            partition: {} for partition in Partition
        }
        self._dirty = True
        self.scan_count = 0
        store.changed.connect(self.invalidate)
        store.before_reload.connect(self.invalidate)

    def close(self) -> None:
        """Stop listening to the store."""
        self.store.changed.disconnect(self.invalidate)
        self.store.before_reload.disconnect(self.invalidate)

    @property
    def dirty(self) -> bool:
        return self._dirty

    def invalidate(self) -> None:
        """Mark cached results outdated; the next lookup rescans."""
        self._dirty = True

    def scan(self, partition: Partition) -> dict[str, ArtifactSet]:
        """Build the name -> ArtifactSet mapping for one partition.

        Files whose metadata cannot be decoded are skipped with a warning.
        Files that disagree with the canonical descriptor of their name are
        flagged on the set but still included. A descriptor with unknown
        referability is only a placeholder: it is flagged, and the first
        later file with a known referability replaces it.
        """
        sets: dict[str, ArtifactSet] = {}

        for guid in self.store.find_by_label(partition.label):
            path = self.store.path_for(guid)
            if path is None:
                continue

            try:
                file_data = read_metadata(path)
            except MetadataParseError as e:
                logger.warning("Skipping %s: %s", path, e)
                continue

            artifact_set = sets.get(file_data.name)
            if artifact_set is None:
                artifact_set = ArtifactSet(descriptor=file_data, partition=partition)
                sets[file_data.name] = artifact_set

                if file_data.referability is Referability.UNKNOWN:
                    message = f"Unable to identify the referability mode for {path}"
                    logger.warning(message)
                    artifact_set.add_warning(message)
            else:
                canonical = artifact_set.descriptor
                if canonical.type_name != file_data.type_name:
                    message = (
                        f"Type mismatch in {path}: expected "
                        f"'{canonical.type_name}' but found '{file_data.type_name}'"
                    )
                    logger.warning(message)
                    artifact_set.add_warning(message)
                if (
                    canonical.referability is Referability.UNKNOWN
                    and file_data.referability is not Referability.UNKNOWN
                ):
                    logger.debug("Taking %s as the descriptor of %s", path, canonical)
                    artifact_set.descriptor = file_data
                elif canonical.referability is not file_data.referability:
                    message = (
                        f"Referability mismatch in {path}: expected "
                        f"'{canonical.referability.text}' but found "
                        f"'{file_data.referability.text}'"
                    )
                    logger.warning(message)
                    artifact_set.add_warning(message)

            artifact_set.add_handle(guid)

        return sets

    def _update(self) -> None:
        if not self._dirty:
            return
        self._dirty = False
        logger.debug("Refreshing artifact registry")

        system = self.scan(Partition.SYSTEM)
        custom = self.scan(Partition.CUSTOM)
        for name in system.keys() & custom.keys():
            message = f"'{name}' is registered as both a system and a custom type"
            logger.warning(message)
            custom[name].add_warning(message)

        self._partitions = {Partition.SYSTEM: system, Partition.CUSTOM: custom}
        self.scan_count += 1

    # Lookups

    def partition(self, which: Partition) -> dict[str, ArtifactSet]:
        """Copy of one partition's mapping."""
        self._update()
        return dict(self._partitions[which])

    def list_partition(self, which: Partition) -> list[RegistryEntry]:
        """Entries of one partition ordered by menu order, then name."""
        sets = sorted(
            self.partition(which).values(),
            key=lambda s: (s.descriptor.menu_order, s.name),
        )
        return [
            RegistryEntry(
                name=s.name,
                descriptor=s.descriptor,
                dominant_location=s.dominant_location(self.store),
                artifact_set=s,
            )
            for s in sets
        ]

    def get(self, name: str) -> ArtifactSet | None:
        """Look a set up by name in either partition (custom first)."""
        self._update()
        for which in (Partition.CUSTOM, Partition.SYSTEM):
            found = self._partitions[which].get(name)
            if found is not None:
                return found
        return None

    def is_name_taken(self, name: str) -> bool:
        """True if ``name`` is used by a set in either partition."""
        self._update()
        return any(name in sets for sets in self._partitions.values())

    @staticmethod
    def is_editable(artifact_set: ArtifactSet, builtin_mode: bool) -> bool:
        """System-owned sets are read-only unless builtin mode is on."""
        return builtin_mode or artifact_set.partition is Partition.CUSTOM
