"""Generation errors and the result type returned by the generator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class ErrorKind(Enum):
    """Kinds of generation failure, for callers that branch on the cause."""

    INVALID_IDENTIFIER = "invalid_identifier"
    NAME_COLLISION = "name_collision"
    INVALID_REFERABILITY = "invalid_referability"
    PATH_NOT_FOUND = "path_not_found"
    INVALID_PLACEMENT = "invalid_placement"
    IO_FAILURE = "io_failure"
    READ_ONLY = "read_only"


class GenerationError(Exception):
    """Base exception for code generation failures."""

    kind: ErrorKind = ErrorKind.IO_FAILURE


class InvalidIdentifierError(GenerationError):
    """Raised when a name or type is not a usable identifier."""

    kind = ErrorKind.INVALID_IDENTIFIER

    def __init__(self, field_name: str, value: str) -> None:
        self.field_name = field_name
        self.value = value
        super().__init__(
            f"{field_name} '{value}' either contains invalid characters "
            "or could conflict with a C# keyword"
        )


class NameCollisionError(GenerationError):
    """Raised when a name is already used by another variable type."""

    kind = ErrorKind.NAME_COLLISION

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"'{name}' is already taken by another variable type")


class InvalidReferabilityError(GenerationError):
    """Raised when a descriptor's referability was never determined."""

    kind = ErrorKind.INVALID_REFERABILITY

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Referability of '{name}' must be Struct or Class, not Unknown"
        )


class PathNotFoundError(GenerationError):
    """Raised when the target directory does not exist."""

    kind = ErrorKind.PATH_NOT_FOUND

    def __init__(self, path: Path | None, reason: str = "") -> None:
        self.path = path
        message = (
            f"Target folder {path} must be a pre-existing folder"
            if path is not None
            else "No target folder could be determined"
        )
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InvalidPlacementError(GenerationError):
    """Raised when the target directory is inside the tool-only partition."""

    kind = ErrorKind.INVALID_PLACEMENT

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Target folder {path} must not be nested in an Editor folder")


class IOFailureError(GenerationError):
    """Raised for read, write and delete faults and per-file collisions."""

    kind = ErrorKind.IO_FAILURE

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


class ReadOnlySetError(GenerationError):
    """Raised when modifying a system-owned set outside builtin mode."""

    kind = ErrorKind.READ_ONLY

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"'{name}' is a built-in variable type and cannot be modified "
            "unless builtin mode is enabled"
        )


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of a create or rebuild.

    On success ``handles`` and ``paths`` list the written artifacts in write
    order. On failure ``error`` is set and nothing was left on disk.
    """

    handles: tuple[str, ...] = ()
    paths: tuple[Path, ...] = ()
    error: GenerationError | None = None
    removed: tuple[Path, ...] = field(default=())

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ErrorKind | None:
        return None if self.error is None else self.error.kind

    def unwrap(self) -> tuple[str, ...]:
        """Return the written handles, raising the error on failure."""
        if self.error is not None:
            raise self.error
        return self.handles

    @classmethod
    def failure(cls, error: GenerationError) -> GenerationResult:
        return cls(error=error)
