"""Protocol for the filesystem primitives the object store drives."""
from __future__ import annotations
from pathlib import Path
from typing import List, Protocol, runtime_checkable


@runtime_checkable
class FilesystemGateway(Protocol):
    """Filesystem primitives the object store is built on.

    Implementations report failures as `OSError`. `read_file`,
    `delete_file` and `list_directory` must raise `FileNotFoundError`
    (not a generic `OSError`) when the target is absent, since the store
    treats that case differently from other failures. `rename_file` must
    replace an existing target atomically when both paths share a volume.
    """

    def create_directory(self, path: Path) -> None: ...

    def write_file(self, path: Path, data: bytes) -> None: ...

    def read_file(self, path: Path) -> bytes: ...

    def rename_file(self, src: Path, dst: Path) -> None: ...

    def delete_file(self, path: Path) -> None: ...

    def list_directory(self, path: Path) -> List[str]: ...

    def list_subdirectories(self, path: Path) -> List[str]: ...

    def file_exists(self, path: Path) -> bool: ...
