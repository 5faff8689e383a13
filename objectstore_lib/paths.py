"""Mapping from logical keys to on-disk paths.

Layout::

    <data_directory>/<collection>/<ns_1>/.../<id>.json      published object
    <temporary_directory>/<collection>-<id>.json            staged write

All functions here are pure; nothing touches the filesystem.
"""
from __future__ import annotations
import uuid
from pathlib import Path
from typing import Iterable

from .collection import OBJECT_SUFFIX, Collection, Key, normalize_namespace, validate_segment
from .errors import InvalidKey


def namespace_path(collection: Collection, namespace: Iterable[str] = ()) -> Path:
    path = collection.config.data_directory / collection.name
    for segment in normalize_namespace(namespace):
        path = path / segment
    return path


def object_data_path(key: Key) -> Path:
    return namespace_path(key.collection, key.namespace) / f"{key.id}{OBJECT_SUFFIX}"


def object_temp_path(key: Key) -> Path:
    """Return the staging path for a write to `key`.

    The default name is deterministic per (collection, id), so two writers
    racing on the same key share a temp file. With `unique_temp_names`
    each call gets its own token.
    """
    cfg = key.collection.config
    stem = f"{key.collection.name}-{key.id}"
    if cfg.unique_temp_names:
        stem = f"{stem}.{uuid.uuid4().hex}"
    return cfg.temporary_directory / f"{stem}{OBJECT_SUFFIX}"


def temp_prefix(collection_name: str) -> str:
    return f"{collection_name}-"


def _valid_id(stem: str) -> str | None:
    try:
        return validate_segment(stem)
    except InvalidKey:
        return None


def id_from_filename(filename: str) -> str | None:
    """Return the object id for a data file name, or None if it is not one.

    Stray files whose stem could not have been written through a `Key`
    (``.json``, ``..json``) are not objects either.
    """
    if not filename.endswith(OBJECT_SUFFIX):
        return None
    return _valid_id(filename[: -len(OBJECT_SUFFIX)])


def staged_id(filename: str, collection: Collection) -> str | None:
    """Return the id part of a staging file name for `collection`, or None."""
    prefix = temp_prefix(collection.name)
    if not filename.startswith(prefix) or not filename.endswith(OBJECT_SUFFIX):
        return None
    return _valid_id(filename[len(prefix): -len(OBJECT_SUFFIX)])
