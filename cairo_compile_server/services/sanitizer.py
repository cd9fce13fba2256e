"""Rewrite server-side absolute paths in tool output back to caller paths."""

from typing import Iterable, Tuple, Union
from pathlib import Path


def decode_output(data: bytes) -> str:
    """Decode captured process output, replacing invalid UTF-8 sequences."""
    return (data or b"").decode("utf-8", errors="replace")


def sanitize(text: str, absolute_path: Union[str, Path], relative_path: str) -> str:
    """Replace every occurrence of absolute_path in text with relative_path."""
    absolute = str(absolute_path)
    if not absolute:
        return text
    return text.replace(absolute, relative_path)


def sanitize_all(text: str, replacements: Iterable[Tuple[Union[str, Path], str]]) -> str:
    """Apply several sanitize() substitutions.

    Longer absolute paths go first so that a path which is a prefix of
    another one cannot split it.
    """
    ordered = sorted(replacements, key=lambda pair: len(str(pair[0])), reverse=True)
    for absolute_path, relative_path in ordered:
        text = sanitize(text, absolute_path, relative_path)
    return text
