"""Storage error taxonomy.

Every store operation either returns its result or raises one of the
classes below. Callers branch on the concrete type; the underlying
exception is always chained as ``__cause__``.
"""
from __future__ import annotations
from pathlib import Path
from typing import Optional, Sequence


class StorageError(Exception):
    """Base class for all object store failures."""

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        return self.message


class ObjectNotFound(StorageError, KeyError):
    """The addressed object has never been written or was deleted.

    Subclasses `KeyError` so callers following the usual backend contract
    ("missing keys raise KeyError") can keep catching that.
    """

    def __init__(self, namespace: Sequence[str], id: str, path: Optional[Path] = None) -> None:
        self.namespace = tuple(namespace)
        self.id = id
        where = "/".join(self.namespace + (id,))
        super().__init__(f"object not found: {where}", path)


class CorruptJson(StorageError):
    """The object file was read but the collection codec rejected it."""

    def __init__(self, path: Path, detail: BaseException) -> None:
        self.detail = detail
        super().__init__(f"cannot decode {path}: {detail}", path)


class FileSystemError(StorageError):
    """Any other filesystem failure (permissions, disk full, I/O error)."""

    def __init__(self, path: Path, cause: OSError) -> None:
        self.cause = cause
        reason = cause.strerror or str(cause)
        super().__init__(f"filesystem error at {path}: {reason}", path)


class InvalidKey(StorageError, ValueError):
    """A collection name, namespace segment or id is not a safe path segment."""

    def __init__(self, segment: str, reason: str) -> None:
        self.segment = segment
        super().__init__(f"invalid key segment {segment!r}: {reason}")
