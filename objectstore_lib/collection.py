"""Collections and keys.

A `Collection` is the logical equivalent of a table: a name, the codec
used for its values and the `StoreConfig` it lives in. A `Key` addresses
exactly one object inside a collection by namespace and id.
"""
from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import Generic, Iterable, Tuple, TypeVar

from .codec import Codec
from .config import StoreConfig
from .errors import InvalidKey

T = TypeVar("T")

OBJECT_SUFFIX = ".json"

_SEPARATORS = {"/", "\\", os.sep} | ({os.altsep} if os.altsep else set())


def validate_segment(segment: str) -> str:
    """Reject segments that would escape or split a directory level."""
    if not isinstance(segment, str):
        raise InvalidKey(repr(segment), "expected a string")
    if not segment:
        raise InvalidKey(segment, "empty segment")
    if segment in (".", ".."):
        raise InvalidKey(segment, "relative path component")
    if "\x00" in segment:
        raise InvalidKey(segment, "contains NUL")
    for sep in _SEPARATORS:
        if sep in segment:
            raise InvalidKey(segment, f"contains path separator {sep!r}")
    return segment


def normalize_namespace(namespace: Iterable[str]) -> Tuple[str, ...]:
    """Return `namespace` as a validated tuple of segments.

    A namespace directory named like an object file (``x.json``) would
    collide with object ``x`` of the parent namespace, so such segments
    are refused.
    """
    if isinstance(namespace, str):
        # a bare string would otherwise be split into characters
        namespace = (namespace,)
    segments = tuple(namespace)
    for segment in segments:
        validate_segment(segment)
        if segment.endswith(OBJECT_SUFFIX):
            raise InvalidKey(segment, f"namespace segments may not end with {OBJECT_SUFFIX}")
    return segments


@dataclass(frozen=True)
class Collection(Generic[T]):
    name: str
    codec: Codec[T]
    config: StoreConfig

    def __post_init__(self) -> None:
        validate_segment(self.name)
        if self.name.startswith("."):
            raise InvalidKey(self.name, "collection names may not start with '.'")

    def key(self, id: str, namespace: Iterable[str] = ()) -> "Key[T]":
        return Key(self, id, namespace)


@dataclass(frozen=True)
class Key(Generic[T]):
    collection: Collection[T]
    id: str
    namespace: Tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "namespace", normalize_namespace(self.namespace))
        validate_segment(self.id)
