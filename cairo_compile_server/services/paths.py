"""Mapping of caller supplied relative paths onto the storage roots.

Every on-disk location handed to a compiler goes through resolve(), which
refuses anything that would land outside its root.
"""

from pathlib import Path, PurePosixPath
from typing import Union

from ..errors import InvalidPathError


def resolve(relative_path: str, root: Union[str, Path]) -> Path:
    """Join a caller supplied relative path onto root.

    Raises InvalidPathError for empty or absolute paths, `..` segments,
    NUL bytes, and symlinks that point outside root.
    """
    if not relative_path or not relative_path.strip():
        raise InvalidPathError(relative_path, "path is empty")
    if "\x00" in relative_path:
        raise InvalidPathError(relative_path, "path contains a NUL byte")

    rel = PurePosixPath(relative_path)
    if rel.is_absolute():
        raise InvalidPathError(relative_path, "path must be relative")

    parts = [part for part in rel.parts if part not in ("", ".")]
    if ".." in parts:
        raise InvalidPathError(relative_path, "parent directory segments are not allowed")
    if not parts:
        raise InvalidPathError(relative_path, "path is empty")

    root_path = Path(root).resolve()
    candidate = root_path.joinpath(*parts)

    if not candidate.resolve().is_relative_to(root_path):
        raise InvalidPathError(relative_path, "path escapes its root")

    return candidate


def extension_of(path: str) -> str:
    """Return the text after the last '.' of the final segment, or ''."""
    name = PurePosixPath(path).name
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1]


def replace_extension(path: str, new_ext: str) -> str:
    """Swap the final extension of path for new_ext (no leading dot)."""
    p = PurePosixPath(path)
    stem = p.name.rsplit(".", 1)[0] if "." in p.name else p.name
    return str(p.with_name(f"{stem}.{new_ext}"))
