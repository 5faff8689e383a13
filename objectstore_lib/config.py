"""Store configuration.

A `StoreConfig` names the directory that holds published objects and the
directory used to stage writes before they are renamed into place. Both
should live on the same filesystem so the final rename is atomic; this is
reported by `check_same_volume` but never enforced.
"""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

logger = logging.getLogger(__name__)

DEFAULT_TEMP_DIRNAME = ".tmp"


@dataclass(frozen=True)
class StoreConfig:
    data_directory: Path
    temporary_directory: Path
    unique_temp_names: bool = False

    def __post_init__(self) -> None:
        # Accept plain strings from callers; frozen, so go through object.__setattr__
        object.__setattr__(self, "data_directory", Path(self.data_directory))
        object.__setattr__(self, "temporary_directory", Path(self.temporary_directory))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], base_dir: str | Path | None = None) -> "StoreConfig":
        """Build a config from a parsed mapping (e.g. a YAML document).

        Relative directories are resolved against `base_dir` when given.
        `temporary_directory` defaults to a `.tmp` folder inside the data
        directory so both share a volume.
        """
        raw_data_dir = data.get("data_directory")
        if not raw_data_dir:
            raise ValueError("invalid config format: data_directory is required")
        data_dir = _resolve(raw_data_dir, base_dir)
        raw_tmp = data.get("temporary_directory")
        tmp_dir = _resolve(raw_tmp, base_dir) if raw_tmp else data_dir / DEFAULT_TEMP_DIRNAME
        return cls(
            data_directory=data_dir,
            temporary_directory=tmp_dir,
            unique_temp_names=bool(data.get("unique_temp_names", False)),
        )

    def ensure_directories(self) -> None:
        self.data_directory.mkdir(parents=True, exist_ok=True)
        self.temporary_directory.mkdir(parents=True, exist_ok=True)
        if not self.check_same_volume():
            logger.warning(
                "Data directory %s and temporary directory %s are on different volumes; "
                "renames will not be atomic",
                self.data_directory,
                self.temporary_directory,
            )

    def check_same_volume(self) -> bool:
        """Return True if both directories resolve to the same device.

        Directories that do not exist yet are checked through their nearest
        existing ancestor.
        """
        try:
            data_dev = os.stat(_existing_ancestor(self.data_directory)).st_dev
            tmp_dev = os.stat(_existing_ancestor(self.temporary_directory)).st_dev
        except OSError:
            logger.debug("Could not stat store directories for volume check", exc_info=True)
            return False
        return data_dev == tmp_dev


def _resolve(value: str | Path, base_dir: str | Path | None) -> Path:
    path = Path(value).expanduser()
    if base_dir is not None and not path.is_absolute():
        path = Path(base_dir) / path
    return path


def _existing_ancestor(path: Path) -> Path:
    path = path.absolute()
    while not path.exists() and path != path.parent:
        path = path.parent
    return path


def read_config_file(path: str | Path) -> dict:
    """Parse a YAML config file into a mapping."""
    cfg_path = Path(path)
    with cfg_path.open("r", encoding="utf-8") as f:
        try:
            data: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError("invalid config format: parse error") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("invalid config format: expected mapping")
    return data


def load_config(path: str | Path) -> StoreConfig:
    """Load a `StoreConfig` from a YAML file.

    Relative directories in the file are taken relative to the file itself.
    """
    cfg_path = Path(path)
    data = read_config_file(cfg_path)
    cfg = StoreConfig.from_mapping(data, base_dir=cfg_path.parent)
    logger.debug("Loaded store config from %s: data=%s tmp=%s", cfg_path, cfg.data_directory, cfg.temporary_directory)
    return cfg
