"""Artifact registry and its data models."""

from vartypes.registry.models import (
    BASE_LABEL,
    ArtifactSet,
    Partition,
    RegistryEntry,
)
from vartypes.registry.registry import ArtifactRegistry

__all__ = [
    "BASE_LABEL",
    "ArtifactRegistry",
    "ArtifactSet",
    "Partition",
    "RegistryEntry",
]
