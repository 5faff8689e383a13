"""Local filesystem gateway.

Thin wrapper over `os`/`pathlib`. Writes are flushed and fsynced before
returning so a subsequent rename publishes complete content.
"""
from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)


class LocalFilesystem:
    def create_directory(self, path: Path) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)

    def write_file(self, path: Path, data: bytes) -> None:
        with open(path, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())

    def read_file(self, path: Path) -> bytes:
        with open(path, "rb") as f:
            data = f.read()
        logger.debug("LocalFilesystem read %s (%d bytes)", path, len(data))
        return data

    def rename_file(self, src: Path, dst: Path) -> None:
        os.replace(src, dst)

    def delete_file(self, path: Path) -> None:
        Path(path).unlink()

    def list_directory(self, path: Path) -> List[str]:
        with os.scandir(path) as it:
            return [entry.name for entry in it if entry.is_file()]

    def list_subdirectories(self, path: Path) -> List[str]:
        with os.scandir(path) as it:
            return [entry.name for entry in it if entry.is_dir()]

    def file_exists(self, path: Path) -> bool:
        return Path(path).is_file()
