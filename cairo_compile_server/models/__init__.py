from .schemas import (
    CasmCompile,
    CompileJob,
    CompileResponse,
    CompileResult,
    CompileStatus,
    FileContentMap,
    ProcessOutcome,
    ScarbBuild,
    ScarbCompileResponse,
    Shutdown,
    ShutdownResult,
    SierraCompile,
    VersionQuery,
    VersionResult,
)

__all__ = [
    "CasmCompile",
    "CompileJob",
    "CompileResponse",
    "CompileResult",
    "CompileStatus",
    "FileContentMap",
    "ProcessOutcome",
    "ScarbBuild",
    "ScarbCompileResponse",
    "Shutdown",
    "ShutdownResult",
    "SierraCompile",
    "VersionQuery",
    "VersionResult",
]
