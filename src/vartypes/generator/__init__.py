"""Code generation: create, rebuild and delete artifact sets."""

from vartypes.generator.builder import CodeGenerator
from vartypes.generator.errors import (
    ErrorKind,
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

__all__ = [
    "CodeGenerator",
    "ErrorKind",
    "GenerationError",
    "GenerationResult",
    "IOFailureError",
    "InvalidIdentifierError",
    "InvalidPlacementError",
    "InvalidReferabilityError",
    "NameCollisionError",
    "PathNotFoundError",
    "ReadOnlySetError",
]
