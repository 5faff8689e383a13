"""Memory-backed filesystem gateway.

Keeps file contents in a dict keyed by path, with directories tracked
explicitly so listing and not-found behave like a real filesystem.
Useful for tests and for embedding the store without touching disk.

`fail_on` maps an operation name (e.g. ``"rename_file"``) to an
exception that operation raises instead of running, to exercise error
handling.
"""
from __future__ import annotations
import errno
from pathlib import PurePath
from threading import RLock
from typing import Dict, List, Optional, Set


class MemoryFilesystem:
    def __init__(self, fail_on: Optional[Dict[str, OSError]] = None) -> None:
        self._lock = RLock()
        self._files: Dict[PurePath, bytes] = {}
        self._dirs: Set[PurePath] = set()
        self.fail_on: Dict[str, OSError] = dict(fail_on or {})

    def _check(self, op: str) -> None:
        exc = self.fail_on.get(op)
        if exc is not None:
            raise exc

    def _require_parent(self, path: PurePath) -> None:
        parent = path.parent
        if parent in self._files:
            raise NotADirectoryError(errno.ENOTDIR, "Not a directory", str(parent))
        if parent != path and parent not in self._dirs:
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", str(parent))

    def create_directory(self, path) -> None:
        self._check("create_directory")
        p = PurePath(path)
        with self._lock:
            if p in self._files:
                raise FileExistsError(errno.EEXIST, "File exists", str(p))
            for ancestor in p.parents:
                if ancestor in self._files:
                    raise NotADirectoryError(errno.ENOTDIR, "Not a directory", str(ancestor))
            self._dirs.add(p)
            self._dirs.update(p.parents)

    def write_file(self, path, data: bytes) -> None:
        self._check("write_file")
        p = PurePath(path)
        with self._lock:
            self._require_parent(p)
            if p in self._dirs:
                raise IsADirectoryError(errno.EISDIR, "Is a directory", str(p))
            self._files[p] = bytes(data)

    def read_file(self, path) -> bytes:
        self._check("read_file")
        p = PurePath(path)
        with self._lock:
            if p not in self._files:
                raise FileNotFoundError(errno.ENOENT, "No such file or directory", str(p))
            return self._files[p]

    def rename_file(self, src, dst) -> None:
        self._check("rename_file")
        s, d = PurePath(src), PurePath(dst)
        with self._lock:
            if s not in self._files:
                raise FileNotFoundError(errno.ENOENT, "No such file or directory", str(s))
            self._require_parent(d)
            if d in self._dirs:
                raise IsADirectoryError(errno.EISDIR, "Is a directory", str(d))
            self._files[d] = self._files.pop(s)

    def delete_file(self, path) -> None:
        self._check("delete_file")
        p = PurePath(path)
        with self._lock:
            if p not in self._files:
                raise FileNotFoundError(errno.ENOENT, "No such file or directory", str(p))
            del self._files[p]

    def list_directory(self, path) -> List[str]:
        self._check("list_directory")
        p = PurePath(path)
        with self._lock:
            if p not in self._dirs:
                raise FileNotFoundError(errno.ENOENT, "No such file or directory", str(p))
            return [f.name for f in self._files if f.parent == p]

    def list_subdirectories(self, path) -> List[str]:
        self._check("list_subdirectories")
        p = PurePath(path)
        with self._lock:
            if p not in self._dirs:
                raise FileNotFoundError(errno.ENOENT, "No such file or directory", str(p))
            return [d.name for d in self._dirs if d.parent == p and d != p]

    def file_exists(self, path) -> bool:
        self._check("file_exists")
        with self._lock:
            return PurePath(path) in self._files
