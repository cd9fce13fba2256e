"""Artifact storage: directory preparation, uploads, and read-back of build output."""

import logging
import os
import tempfile
from pathlib import Path
from typing import List

from ..errors import ArtifactEncodingError, ArtifactIOError, ArtifactNotFoundError
from ..models import FileContentMap

logger = logging.getLogger(__name__)


def ensure_parent_dir(path: Path) -> None:
    """Create every missing ancestor of path. Safe to call repeatedly."""
    parent = Path(path).parent
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ArtifactIOError(f"Error creating directory {parent}: {e}") from e
    logger.debug("Ensured directory: %s", parent)


def read_text(path: Path) -> str:
    """Read a whole file as UTF-8 text."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ArtifactNotFoundError(path) from e
    except UnicodeDecodeError as e:
        raise ArtifactEncodingError(path) from e
    except OSError as e:
        raise ArtifactIOError(f"Error reading {path}: {e}") from e


def write_bytes(path: Path, data: bytes) -> None:
    """Write data to path, replacing any existing file in one rename."""
    path = Path(path)
    ensure_parent_dir(path)

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".part")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_name, path)
    except OSError as e:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise ArtifactIOError(f"Error saving file {path}: {e}") from e


def list_files_recursive(base_path: Path) -> List[FileContentMap]:
    """Collect every UTF-8 file below base_path, depth first.

    Entries are visited in name order. Binary and unreadable files are
    skipped; a missing directory yields an empty list.
    """
    base_path = Path(base_path)
    files: List[FileContentMap] = []

    if not base_path.is_dir():
        return files

    try:
        entries = sorted(base_path.iterdir(), key=lambda p: p.name)
    except OSError as e:
        logger.warning("Skipping unreadable directory %s: %s", base_path, e)
        return files

    for entry in entries:
        if entry.is_symlink() and entry.is_dir():
            logger.debug("Skipping symlinked directory %s", entry)
            continue
        if entry.is_dir():
            files.extend(list_files_recursive(entry))
            continue
        if not entry.is_file():
            continue
        try:
            content = entry.read_text(encoding="utf-8")
        except (UnicodeDecodeError, OSError):
            logger.debug("Skipping non-text artifact %s", entry)
            continue
        files.append(FileContentMap(file_name=entry.name, file_content=content))

    return files
