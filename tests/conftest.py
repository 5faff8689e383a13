"""Pytest configuration helpers for test collection.

Ensure the project root is on sys.path so tests can import the package
without requiring PYTHONPATH to be set externally, and provide store
fixtures shared by the unit and backend suites.
"""
import logging
import sys
from pathlib import Path

import pytest


def pytest_configure(config):
    # Insert repo root (one level up from tests/) to sys.path
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))


@pytest.fixture
def store_config(tmp_path):
    from objectstore_lib.config import StoreConfig

    return StoreConfig(data_directory=tmp_path / "data", temporary_directory=tmp_path / "tmp")


@pytest.fixture
def local_store():
    from objectstore_lib.engine import ObjectStore

    return ObjectStore()


@pytest.fixture
def memory_fs():
    from objectstore_lib.memory_backend import MemoryFilesystem

    return MemoryFilesystem()


@pytest.fixture
def memory_store(memory_fs):
    from objectstore_lib.engine import ObjectStore

    return ObjectStore(memory_fs)


@pytest.fixture
def things(store_config):
    from objectstore_lib.codec import json_codec
    from objectstore_lib.collection import Collection

    return Collection("things", json_codec(), store_config)


@pytest.fixture(autouse=True)
def restore_root_logger():
    # configure_logging replaces root handlers; put pytest's back afterwards
    root = logging.getLogger()
    level, handlers = root.level, root.handlers[:]
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
