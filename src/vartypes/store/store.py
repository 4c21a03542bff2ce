"""File-backed asset store with stable handles and labels.

Every file and folder under the store root gets a sidecar ``<name>.meta``
YAML file holding a random ``guid`` and a list of ``labels``. The guid is
the stable handle used by the registry; it survives content rewrites
because the sidecar is left in place when a file is overwritten.
"""

from __future__ import annotations

import logging
import shutil
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import yaml

from vartypes.paths import is_within
from vartypes.store.events import Signal

logger = logging.getLogger(__name__)

META_SUFFIX = ".meta"


class StoreError(Exception):
    """Base exception for asset store operations."""


class OutsideStoreError(StoreError):
    """Raised when a path outside the store root is used."""

    def __init__(self, path: Path, root: Path) -> None:
        self.path = path
        self.root = root
        super().__init__(f"{path} is not inside the project root {root}")


def meta_path_for(path: Path) -> Path:
    """Return the sidecar meta path for a file or folder."""
    return path.with_name(path.name + META_SUFFIX)


def _is_hidden(path: Path, root: Path) -> bool:
    return any(part.startswith(".") for part in path.relative_to(root).parts)


class AssetStore:
    """Tracks files below a project root by guid and label.

    The store also owns the host reload mechanism: ``request_reload`` fires
    ``before_reload`` immediately unless a ``reload_guard`` is held, in which
    case the reload runs when the outermost guard is released.
    """

    def __init__(self, root: Path) -> None:
        """Initialize the store.

        Args:
            root: Project asset root. Created if missing.
        """
        self.root = root.resolve()
        self.root.mkdir(parents=True, exist_ok=True)
        self.changed = Signal("changed")
        self.before_reload = Signal("before_reload")
        self._index: dict[str, Path] | None = None
        self._lock_depth = 0
        self._reload_pending = False

    # Meta files

    def _read_meta(self, meta_path: Path) -> dict[str, Any] | None:
        try:
            with meta_path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Unreadable meta file %s: %s", meta_path, e)
            return None
        if not isinstance(data, dict) or not isinstance(data.get("guid"), str):
            logger.warning("Malformed meta file %s", meta_path)
            return None
        return data

    def _write_meta(self, meta_path: Path, data: dict[str, Any]) -> None:
        with meta_path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

    def _iter_metas(self) -> Iterator[tuple[Path, dict[str, Any]]]:
        """Yield (asset path, meta data) for every valid sidecar, path-sorted."""
        for meta_path in sorted(self.root.rglob(f"*{META_SUFFIX}")):
            if _is_hidden(meta_path, self.root) or not meta_path.is_file():
                continue
            data = self._read_meta(meta_path)
            if data is None:
                continue
            yield meta_path.with_name(meta_path.name[: -len(META_SUFFIX)]), data

    def _check_inside(self, path: Path) -> Path:
        resolved = path.resolve()
        if not is_within(resolved, self.root):
            raise OutsideStoreError(path, self.root)
        return resolved

    # Index

    def _build_index(self) -> dict[str, Path]:
        index: dict[str, Path] = {}
        for asset_path, data in self._iter_metas():
            if asset_path.exists():
                index[data["guid"]] = asset_path
        return index

    @property
    def index(self) -> dict[str, Path]:
        if self._index is None:
            self._index = self._build_index()
        return self._index

    # Import and refresh

    def import_path(self, path: Path) -> str:
        """Ensure ``path`` has a sidecar and return its guid.

        An existing sidecar is kept as is, so the guid is preserved.
        """
        resolved = self._check_inside(path)
        meta_path = meta_path_for(resolved)
        if meta_path.exists():
            data = self._read_meta(meta_path)
            if data is not None:
                self.index[data["guid"]] = resolved
                return str(data["guid"])

        guid = uuid.uuid4().hex
        data = {"guid": guid, "labels": []}
        if resolved.is_dir():
            data["folder"] = True
        self._write_meta(meta_path, data)
        self.index[guid] = resolved
        logger.debug("Imported %s as %s", resolved, guid)
        return guid

    def refresh(self) -> None:
        """Import untracked entries, drop orphaned sidecars, emit ``changed``."""
        for meta_path in sorted(self.root.rglob(f"*{META_SUFFIX}")):
            if _is_hidden(meta_path, self.root):
                continue
            target = meta_path.with_name(meta_path.name[: -len(META_SUFFIX)])
            if not target.exists():
                meta_path.unlink(missing_ok=True)

        for entry in sorted(self.root.rglob("*")):
            if _is_hidden(entry, self.root) or entry.name.endswith(META_SUFFIX):
                continue
            meta_path = meta_path_for(entry)
            if not meta_path.exists() or self._read_meta(meta_path) is None:
                self.import_path(entry)

        self._index = None
        self.changed.emit()

    # Lookup

    def guid_for(self, path: Path) -> str | None:
        meta_path = meta_path_for(path.resolve())
        if not meta_path.exists():
            return None
        data = self._read_meta(meta_path)
        return None if data is None else str(data["guid"])

    def path_for(self, guid: str) -> Path | None:
        """Resolve a guid to its current path, or None if unknown."""
        path = self.index.get(guid)
        if path is not None and not path.exists():
            del self.index[guid]
            return None
        return path

    def find_by_label(self, label: str) -> list[str]:
        """Return guids of all files (not folders) carrying ``label``."""
        guids: list[str] = []
        for asset_path, data in self._iter_metas():
            if data.get("folder") or not asset_path.is_file():
                continue
            labels = data.get("labels") or []
            if isinstance(labels, list) and label in labels:
                guids.append(str(data["guid"]))
                self.index[str(data["guid"])] = asset_path
        return guids

    def get_labels(self, path: Path) -> list[str]:
        data = self._read_meta(meta_path_for(path.resolve()))
        if data is None:
            return []
        labels = data.get("labels") or []
        return [str(label) for label in labels] if isinstance(labels, list) else []

    def set_labels(self, path: Path, labels: list[str]) -> None:
        """Replace the labels of an asset, importing it first if needed."""
        resolved = self._check_inside(path)
        self.import_path(resolved)
        meta_path = meta_path_for(resolved)
        data = self._read_meta(meta_path) or {"guid": uuid.uuid4().hex}
        data["labels"] = list(labels)
        self._write_meta(meta_path, data)

    # Deletion

    def delete(self, path: Path) -> bool:
        """Delete an asset (file or folder tree) and its sidecar.

        Returns False when there was nothing to delete.
        """
        resolved = self._check_inside(path)
        if resolved == self.root:
            raise StoreError("Refusing to delete the project root")
        meta_path = meta_path_for(resolved)
        guid = self.guid_for(resolved)
        existed = resolved.exists()

        if resolved.is_dir():
            shutil.rmtree(resolved)
        elif existed:
            resolved.unlink()
        meta_path.unlink(missing_ok=True)

        if guid is not None and self._index is not None:
            self._index.pop(guid, None)
        if existed:
            logger.debug("Deleted %s", resolved)
            self.changed.emit()
        return existed

    # Reload suppression

    @property
    def reload_locked(self) -> bool:
        return self._lock_depth > 0

    @contextmanager
    def reload_guard(self) -> Iterator[None]:
        """Hold off host reloads for the duration of a multi-file write.

        Re-entrant. A reload requested while held runs on final release,
        whether the block exits normally or by exception.
        """
        self._lock_depth += 1
        try:
            yield
        finally:
            self._lock_depth -= 1
            if self._lock_depth == 0 and self._reload_pending:
                self._reload_pending = False
                self._reload()

    def request_reload(self) -> bool:
        """Ask the host to reload compiled code.

        Returns True if the reload ran now, False if it was deferred.
        """
        if self.reload_locked:
            logger.debug("Reload deferred while guard is held")
            self._reload_pending = True
            return False
        self._reload()
        return True

    def _reload(self) -> None:
        self.before_reload.emit()
