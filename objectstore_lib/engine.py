"""Object store engine.

Each operation is a self-contained sequence of gateway calls with no
locking and no cache. Writes are staged in the temporary directory and
published with a single rename, so readers see either the previous or
the new complete object, never a partial one.

Failures are classified into the `objectstore_lib.errors` taxonomy; the
first failing call fails the operation, nothing is retried.
"""
from __future__ import annotations
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, TypeVar

from .collection import OBJECT_SUFFIX, Collection, Key, normalize_namespace
from .config import StoreConfig
from .errors import CorruptJson, FileSystemError, ObjectNotFound
from .file_backend import LocalFilesystem
from .interfaces import FilesystemGateway
from .paths import (
    id_from_filename,
    namespace_path,
    object_data_path,
    object_temp_path,
    staged_id,
    temp_prefix,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ObjectStore:
    """Durable JSON-file object store.

    Parameters
    - gateway: filesystem primitives to drive. Defaults to the local
      filesystem; pass a `MemoryFilesystem` to keep everything in process.
    """

    def __init__(self, gateway: Optional[FilesystemGateway] = None) -> None:
        self.gateway: FilesystemGateway = gateway if gateway is not None else LocalFilesystem()

    def _fs_error(self, op: str, path: Path, exc: OSError) -> FileSystemError:
        logger.warning("%s failed for %s: %s", op, path, exc)
        return FileSystemError(path, exc)

    def _ensure_directory(self, path: Path) -> None:
        try:
            self.gateway.create_directory(path)
        except OSError as e:
            raise self._fs_error("create_directory", path, e) from e

    def write(self, key: Key[T], value: T) -> None:
        """Store `value` under `key`, replacing any previous object.

        Raises `FileSystemError` carrying the directory, temp path or data
        path depending on which step failed.
        """
        data_path = object_data_path(key)
        temp_path = object_temp_path(key)
        self._ensure_directory(temp_path.parent)
        self._ensure_directory(data_path.parent)

        data = key.collection.codec.encode(value)

        try:
            self.gateway.write_file(temp_path, data)
        except OSError as e:
            raise self._fs_error("write_file", temp_path, e) from e

        try:
            self.gateway.rename_file(temp_path, data_path)
        except OSError as e:
            self._discard_temp(temp_path)
            raise self._fs_error("rename_file", data_path, e) from e
        logger.debug("Wrote %s (%d bytes)", data_path, len(data))

    def _discard_temp(self, temp_path: Path) -> None:
        try:
            self.gateway.delete_file(temp_path)
        except OSError:
            logger.warning("Could not remove staged file %s", temp_path, exc_info=True)

    def read(self, key: Key[T]) -> T:
        """Return the object stored under `key`.

        Raises `ObjectNotFound` if nothing was written there, `CorruptJson`
        if the codec rejects the stored bytes and `FileSystemError` for any
        other read failure.
        """
        path = object_data_path(key)
        try:
            raw = self.gateway.read_file(path)
        except FileNotFoundError:
            logger.debug("No object at %s", path)
            raise ObjectNotFound(key.namespace, key.id, path) from None
        except OSError as e:
            raise self._fs_error("read_file", path, e) from e
        return self._decode(key.collection, path, raw)

    def _decode(self, collection: Collection[T], path: Path, raw: bytes) -> T:
        # codecs are caller supplied; whatever they raise on these bytes is a
        # decode failure, including RecursionError on deeply nested documents
        try:
            return collection.codec.decode(raw)
        except Exception as e:
            logger.warning("Corrupt object %s: %s", path, e)
            raise CorruptJson(path, e) from e

    def read_optional(self, key: Key[T]) -> Optional[T]:
        """Like `read`, but return None instead of raising `ObjectNotFound`."""
        try:
            return self.read(key)
        except ObjectNotFound:
            return None

    def exists(self, key: Key) -> bool:
        path = object_data_path(key)
        try:
            return self.gateway.file_exists(path)
        except OSError as e:
            raise self._fs_error("file_exists", path, e) from e

    def delete(self, key: Key) -> None:
        """Remove the object under `key`. Deleting an absent object is a no-op."""
        path = object_data_path(key)
        try:
            self.gateway.delete_file(path)
        except FileNotFoundError:
            logger.debug("Delete of %s: already absent", path)
            return
        except OSError as e:
            raise self._fs_error("delete_file", path, e) from e
        logger.debug("Deleted %s", path)

    def list_ids(self, collection: Collection, namespace: Iterable[str] = ()) -> List[str]:
        """Return the ids of objects directly inside `namespace`.

        Not recursive: objects in sub-namespaces are not included. A
        namespace that was never written to is empty, not an error. Order is
        whatever the directory listing yields.
        """
        path = namespace_path(collection, namespace)
        try:
            names = self.gateway.list_directory(path)
        except FileNotFoundError:
            logger.debug("Namespace %s does not exist; treating as empty", path)
            return []
        except OSError as e:
            raise self._fs_error("list_directory", path, e) from e
        ids = [obj_id for obj_id in map(id_from_filename, names) if obj_id is not None]
        logger.debug("Listed %d objects in %s", len(ids), path)
        return ids

    def read_namespace(self, collection: Collection[T], namespace: Iterable[str] = ()) -> Dict[str, T]:
        """Read every object directly inside `namespace` into an id -> value dict.

        The first read or decode failure aborts the whole call; no partial
        result is returned.
        """
        segments = normalize_namespace(namespace)
        return {
            obj_id: self.read(Key(collection, obj_id, segments))
            for obj_id in self.list_ids(collection, segments)
        }

    def list_namespaces(self, collection: Collection, namespace: Iterable[str] = ()) -> List[str]:
        """Return the names of sub-namespaces directly inside `namespace`."""
        path = namespace_path(collection, namespace)
        try:
            return self.gateway.list_subdirectories(path)
        except FileNotFoundError:
            return []
        except OSError as e:
            raise self._fs_error("list_subdirectories", path, e) from e

    def _collection_names(self, config: StoreConfig) -> List[str]:
        try:
            return self.gateway.list_subdirectories(config.data_directory)
        except FileNotFoundError:
            return []
        except OSError as e:
            raise self._fs_error("list_subdirectories", config.data_directory, e) from e

    def clean_temp_files(self, config: StoreConfig, collection: Optional[Collection] = None) -> int:
        """Remove staging files left behind by interrupted writes.

        Only safe while no writes are in flight, since an in-progress write
        would lose its staged file. Restrict to one collection's files by
        passing `collection`. Staged names are `<collection>-<id>.json`, so a
        file that could also belong to another collection in the data
        directory whose name starts with `<collection>-` is left in place.
        Returns how many files were removed; files that cannot be removed are
        logged and skipped.
        """
        tmp_dir = config.temporary_directory
        try:
            names = self.gateway.list_directory(tmp_dir)
        except FileNotFoundError:
            return 0
        except OSError as e:
            raise self._fs_error("list_directory", tmp_dir, e) from e

        if collection is not None:
            # "<name>-" also matches staging files of collections like
            # "<name>-a"; files claimed by such a collection are left alone
            prefix = temp_prefix(collection.name)
            longer = [
                temp_prefix(other)
                for other in self._collection_names(config)
                if other != collection.name and other.startswith(prefix)
            ]
        else:
            prefix, longer = "", []

        removed = 0
        for name in names:
            if not name.endswith(OBJECT_SUFFIX) or not name.startswith(prefix):
                continue
            if collection is not None and (
                staged_id(name, collection) is None or any(name.startswith(p) for p in longer)
            ):
                logger.debug("Leaving %s: not attributable to collection %s", name, collection.name)
                continue
            try:
                self.gateway.delete_file(tmp_dir / name)
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.warning("Could not remove stale temp file %s: %s", tmp_dir / name, e)
                continue
            removed += 1
        logger.info("Removed %d stale temp files from %s", removed, tmp_dir)
        return removed
