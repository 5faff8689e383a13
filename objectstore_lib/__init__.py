"""Durable object store persisting typed records as individual JSON files."""

from .codec import Codec, encrypted_codec, json_codec, model_codec
from .collection import Collection, Key
from .config import StoreConfig, load_config
from .engine import ObjectStore
from .errors import CorruptJson, FileSystemError, InvalidKey, ObjectNotFound, StorageError
from .file_backend import LocalFilesystem
from .interfaces import FilesystemGateway
from .memory_backend import MemoryFilesystem

__all__ = [
    "Codec",
    "Collection",
    "CorruptJson",
    "FileSystemError",
    "FilesystemGateway",
    "InvalidKey",
    "Key",
    "LocalFilesystem",
    "MemoryFilesystem",
    "ObjectNotFound",
    "ObjectStore",
    "StorageError",
    "StoreConfig",
    "encrypted_codec",
    "json_codec",
    "load_config",
    "model_codec",
]
