from pathlib import Path

import pytest

from objectstore_lib.interfaces import FilesystemGateway
from objectstore_lib.memory_backend import MemoryFilesystem


def test_memory_filesystem_basic_operations():
    m = MemoryFilesystem()
    assert isinstance(m, FilesystemGateway)

    m.create_directory(Path("/r/a/b"))
    m.write_file(Path("/r/a/b/f.json"), b"1")
    assert m.read_file(Path("/r/a/b/f.json")) == b"1"
    assert m.file_exists(Path("/r/a/b/f.json")) is True
    assert m.list_directory(Path("/r/a/b")) == ["f.json"]
    assert m.list_subdirectories(Path("/r")) == ["a"]

    m.rename_file(Path("/r/a/b/f.json"), Path("/r/a/g.json"))
    assert m.file_exists(Path("/r/a/b/f.json")) is False
    assert m.list_directory(Path("/r/a")) == ["g.json"]

    m.delete_file(Path("/r/a/g.json"))
    assert m.list_directory(Path("/r/a")) == []


def test_memory_filesystem_not_found_semantics():
    m = MemoryFilesystem()
    with pytest.raises(FileNotFoundError):
        m.read_file(Path("/nope.json"))
    with pytest.raises(FileNotFoundError):
        m.delete_file(Path("/nope.json"))
    with pytest.raises(FileNotFoundError):
        m.list_directory(Path("/nope"))
    # writing needs the parent directory, like a real filesystem
    with pytest.raises(FileNotFoundError):
        m.write_file(Path("/missing/f.json"), b"")


def test_memory_filesystem_rename_overwrites_target():
    m = MemoryFilesystem()
    m.create_directory(Path("/r"))
    m.write_file(Path("/r/a"), b"old")
    m.write_file(Path("/r/b"), b"new")
    m.rename_file(Path("/r/b"), Path("/r/a"))
    assert m.read_file(Path("/r/a")) == b"new"
    assert m.list_directory(Path("/r")) == ["a"]


def test_memory_filesystem_fault_injection():
    m = MemoryFilesystem(fail_on={"write_file": OSError(28, "No space left on device")})
    m.create_directory(Path("/r"))
    with pytest.raises(OSError):
        m.write_file(Path("/r/a"), b"x")
    m.fail_on.clear()
    m.write_file(Path("/r/a"), b"x")
    assert m.read_file(Path("/r/a")) == b"x"


def test_memory_filesystem_matches_directory_errors():
    m = MemoryFilesystem()
    m.create_directory(Path("/r/sub"))
    m.write_file(Path("/r/f.json"), b"x")
    with pytest.raises(IsADirectoryError):
        m.rename_file(Path("/r/f.json"), Path("/r/sub"))
    assert m.read_file(Path("/r/f.json")) == b"x"
    with pytest.raises(NotADirectoryError):
        m.create_directory(Path("/r/f.json/below"))
    with pytest.raises(NotADirectoryError):
        m.write_file(Path("/r/f.json/g.json"), b"y")
    with pytest.raises(FileExistsError):
        m.create_directory(Path("/r/f.json"))
