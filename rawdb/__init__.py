"""Lightweight document collections stored as newline-delimited JSON files."""

from rawdb.codec import DecodeError
from rawdb.collection import CollectionStore
from rawdb.config import load_config
from rawdb.paths import CollectionPaths, resolve_paths

__all__ = [
    "CollectionPaths",
    "CollectionStore",
    "DecodeError",
    "load_config",
    "resolve_paths",
]
