"""Asset store: stable handles, labels and reload suppression."""

from vartypes.store.events import Signal
from vartypes.store.store import (
    META_SUFFIX,
    AssetStore,
    OutsideStoreError,
    StoreError,
    meta_path_for,
)

__all__ = [
    "META_SUFFIX",
    "AssetStore",
    "OutsideStoreError",
    "Signal",
    "StoreError",
    "meta_path_for",
]
