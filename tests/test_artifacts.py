import os
import sys

import pytest

from cairo_compile_server.errors import ArtifactEncodingError, ArtifactNotFoundError
from cairo_compile_server.services.artifacts import (
    ensure_parent_dir,
    list_files_recursive,
    read_text,
    write_bytes,
)


def test_ensure_parent_dir_creates_ancestors_and_is_idempotent(tmp_path):
    target = tmp_path / "a" / "b" / "c" / "out.sierra"

    ensure_parent_dir(target)
    ensure_parent_dir(target)

    assert target.parent.is_dir()
    assert not target.exists()


def test_read_text_roundtrip(tmp_path):
    path = tmp_path / "lib.sierra"
    path.write_text("type felt252 = felt252;", encoding="utf-8")
    assert read_text(path) == "type felt252 = felt252;"


def test_read_text_missing_file(tmp_path):
    with pytest.raises(ArtifactNotFoundError):
        read_text(tmp_path / "missing.sierra")


def test_read_text_invalid_utf8(tmp_path):
    path = tmp_path / "blob.bin"
    path.write_bytes(b"\xff\xfe\x00\x81")
    with pytest.raises(ArtifactEncodingError):
        read_text(path)


def test_write_bytes_creates_dirs_and_replaces(tmp_path):
    path = tmp_path / "proj" / "src" / "lib.cairo"

    write_bytes(path, b"fn main() {}")
    write_bytes(path, b"fn main() -> felt252 { 1 }")

    assert path.read_bytes() == b"fn main() -> felt252 { 1 }"
    # No temporary files left behind
    assert [p.name for p in path.parent.iterdir()] == ["lib.cairo"]


def test_list_files_recursive_descends_into_subdirs(tmp_path):
    (tmp_path / "sub").mkdir()
    (tmp_path / "a.txt").write_text("x", encoding="utf-8")
    (tmp_path / "sub" / "b.txt").write_text("y", encoding="utf-8")

    files = list_files_recursive(tmp_path)

    assert len(files) == 2
    assert {(f.file_name, f.file_content) for f in files} == {("a.txt", "x"), ("b.txt", "y")}


def test_list_files_recursive_is_sorted_and_skips_binaries(tmp_path):
    (tmp_path / "z_dir").mkdir()
    (tmp_path / "z_dir" / "inner.json").write_text("{}", encoding="utf-8")
    (tmp_path / "b.sierra.json").write_text("{\"sierra_program\": []}", encoding="utf-8")
    (tmp_path / "a.casm.json").write_text("{\"bytecode\": []}", encoding="utf-8")
    (tmp_path / "c.bin").write_bytes(b"\x00\xff\xfe\x81")

    files = list_files_recursive(tmp_path)

    assert [f.file_name for f in files] == ["a.casm.json", "b.sierra.json", "inner.json"]


def test_list_files_recursive_missing_dir_is_empty(tmp_path):
    assert list_files_recursive(tmp_path / "target" / "dev") == []


@pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
def test_list_files_recursive_ignores_symlink_loops(tmp_path):
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "b.txt").write_text("y", encoding="utf-8")
    os.symlink(tmp_path, tmp_path / "sub" / "loop")

    files = list_files_recursive(tmp_path)

    assert [(f.file_name, f.file_content) for f in files] == [("b.txt", "y")]
