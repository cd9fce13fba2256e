"""Exception hierarchy for the compile pipeline.

- CompileServerError (base, carries the response status it maps to)
- InvalidPathError
- ArtifactNotFoundError / ArtifactEncodingError / ArtifactIOError
- ToolNotFoundError / SpawnFailedError / ProcessTimeoutError
- VersionQueryError

Services raise these; the dispatcher turns them into a status on the result.
"""

from typing import Optional

from .models import CompileStatus


class CompileServerError(Exception):
    """Base class for all compile pipeline errors."""

    status: CompileStatus = CompileStatus.unknown_error

    def __init__(self, message: str, status: Optional[CompileStatus] = None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status


class InvalidPathError(CompileServerError):
    """Caller supplied path is empty, absolute, or escapes its root."""

    status = CompileStatus.invalid_path

    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid path {path!r}: {reason}")
        self.path = path
        self.reason = reason


class ArtifactNotFoundError(CompileServerError):
    """A file that should be read back does not exist."""

    status = CompileStatus.file_not_found

    def __init__(self, path):
        super().__init__(f"File not found: {path}")
        self.path = path


class ArtifactEncodingError(CompileServerError):
    """A file could not be decoded as UTF-8 text."""

    status = CompileStatus.unknown_error

    def __init__(self, path):
        super().__init__(f"File is not valid UTF-8: {path}")
        self.path = path


class ArtifactIOError(CompileServerError):
    """Directory creation, read or write failed at the OS level."""

    status = CompileStatus.io_error


class ToolNotFoundError(CompileServerError):
    """The external tool executable could not be located."""

    status = CompileStatus.tool_not_found

    def __init__(self, executable: str):
        super().__init__(f"Tool not found: {executable}")
        self.executable = executable


class SpawnFailedError(CompileServerError):
    """The external tool exists but could not be started."""

    status = CompileStatus.spawn_failed

    def __init__(self, executable: str, reason: str):
        super().__init__(f"Failed to start {executable}: {reason}")
        self.executable = executable
        self.reason = reason


class ProcessTimeoutError(CompileServerError):
    """The external tool ran past its deadline and was killed."""

    status = CompileStatus.timeout

    def __init__(self, executable: str, timeout: float):
        super().__init__(f"{executable} timed out after {timeout:g}s")
        self.executable = executable
        self.timeout = timeout


class VersionQueryError(CompileServerError):
    """The compiler version could not be determined."""
