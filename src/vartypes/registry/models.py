"""Registry data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from vartypes.metadata.descriptor import TypeDescriptor
from vartypes.paths import is_tool_only

if TYPE_CHECKING:
    from vartypes.store.store import AssetStore

BASE_LABEL = "ReachBeyond.VariableObjects"


class Partition(Enum):
    """Registry partitions. Values are the discovery labels."""

    SYSTEM = f"{BASE_LABEL}.Unity"
    CUSTOM = f"{BASE_LABEL}.Custom"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def for_mode(cls, builtin_mode: bool) -> Partition:
        """Partition that newly generated artifacts are labeled into."""
        return cls.SYSTEM if builtin_mode else cls.CUSTOM


@dataclass
class ArtifactSet:
    """All generated files that realize one TypeDescriptor.

    The descriptor is the first one observed during scanning with a known
    referability, or the first one at all if none is known. Handles keep
    discovery order and never repeat.
    """

    descriptor: TypeDescriptor
    partition: Partition = Partition.CUSTOM
    _handles: list[str] = field(default_factory=list, repr=False)
    warnings: list[str] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def handles(self) -> tuple[str, ...]:
        return tuple(self._handles)

    def add_handle(self, handle: str) -> bool:
        """Append a handle. Returns False for empty or duplicate handles."""
        if not handle or handle in self._handles:
            return False
        self._handles.append(handle)
        return True

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def paths(self, store: AssetStore) -> list[Path]:
        """Resolve handles to current paths, dropping unknown handles."""
        resolved = (store.path_for(handle) for handle in self._handles)
        return [path for path in resolved if path is not None]

    def dominant_location(self, store: AssetStore) -> Path | None:
        """Best-guess runtime-visible directory of this set.

        Scans handles in order and returns the directory of the first one
        outside the tool-only partition, or None if there is none.
        """
        for handle in self._handles:
            path = store.path_for(handle)
            if path is None:
                continue
            if not is_tool_only(path, store.root):
                return path.parent
        return None


@dataclass(frozen=True)
class RegistryEntry:
    """One row of a partition listing."""

    name: str
    descriptor: TypeDescriptor
    dominant_location: Path | None
    artifact_set: ArtifactSet
