from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class CompileStatus(str, Enum):
    """Outcome reported in every compile response."""
    success = "Success"
    compilation_failed = "CompilationFailed"
    sierra_compilation_failed = "SierraCompilationFailed"
    scarb_build_failed = "ScarbBuildFailed"
    file_not_found = "FileNotFound"
    file_extension_not_supported = "FileExtensionNotSupported"
    invalid_path = "InvalidPath"
    tool_not_found = "ToolNotFound"
    spawn_failed = "SpawnFailed"
    timeout = "Timeout"
    io_error = "IoError"
    unknown_error = "UnknownError"


# Compile jobs

class VersionQuery(BaseModel):
    """Ask the compiler for its version string."""
    kind: Literal["version"] = "version"


class SierraCompile(BaseModel):
    """Compile a .cairo file to Sierra."""
    kind: Literal["sierra"] = "sierra"
    path: str


class CasmCompile(BaseModel):
    """Compile a .sierra file to CASM."""
    kind: Literal["casm"] = "casm"
    path: str


class ScarbBuild(BaseModel):
    """Run `scarb build` in a project directory."""
    kind: Literal["scarb"] = "scarb"
    path: str


class Shutdown(BaseModel):
    kind: Literal["shutdown"] = "shutdown"


CompileJob = Annotated[
    Union[VersionQuery, SierraCompile, CasmCompile, ScarbBuild, Shutdown],
    Field(discriminator="kind"),
]


# Compile results

class VersionResult(BaseModel):
    """Compiler version text as printed by the tool."""
    version: str


class CompileResponse(BaseModel):
    """Single artifact compile response (Sierra or CASM)."""
    status: CompileStatus
    message: str = ""
    file_content: str = ""


class FileContentMap(BaseModel):
    """One build artifact read back from disk."""
    file_name: str
    file_content: str


class ScarbCompileResponse(BaseModel):
    """Scarb build response with every text artifact under target/dev."""
    status: CompileStatus
    message: str = ""
    file_content_map_array: List[FileContentMap] = Field(default_factory=list)


class ShutdownResult(BaseModel):
    acknowledged: bool = True


CompileResult = Union[VersionResult, CompileResponse, ScarbCompileResponse, ShutdownResult]


# Subprocess

class ProcessOutcome(BaseModel):
    """Captured result of one external tool run.

    exit_code is None when the process was terminated by a signal.
    """
    model_config = ConfigDict(frozen=True)

    exit_code: Optional[int] = None
    stdout: bytes = b""
    stderr: bytes = b""
