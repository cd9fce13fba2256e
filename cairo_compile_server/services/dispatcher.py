"""Compile job dispatcher.

Each job runs path resolution -> directory preparation -> tool run ->
artifact read-back -> output sanitization -> response assembly. Failures at
any stage end up in the status/message of the response instead of being
raised to the caller.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from ..config import Settings, ToolchainMode, settings as default_settings
from ..errors import CompileServerError, InvalidPathError, VersionQueryError
from ..models import (
    CasmCompile,
    CompileJob,
    CompileResponse,
    CompileResult,
    CompileStatus,
    ScarbBuild,
    ScarbCompileResponse,
    Shutdown,
    ShutdownResult,
    SierraCompile,
    VersionQuery,
    VersionResult,
)
from .artifacts import ensure_parent_dir, list_files_recursive, read_text, write_bytes
from .locks import PathLocks, get_path_locks
from .paths import extension_of, replace_extension, resolve
from .runner import ProcessRunner
from .sanitizer import decode_output, sanitize, sanitize_all

logger = logging.getLogger(__name__)

CAIRO_COMPILE_BIN = "cairo-compile"
SIERRA_COMPILE_BIN = "starknet-compile"
CASM_COMPILE_BIN = "starknet-sierra-compile"

SCARB_OUTPUT_DIR = Path("target") / "dev"


def status_from_exit_code(exit_code: Optional[int], failure: CompileStatus) -> CompileStatus:
    """Map a process exit code to a response status."""
    if exit_code is None:
        return CompileStatus.unknown_error
    if exit_code == 0:
        return CompileStatus.success
    return failure


class CompileDispatcher:
    """Runs compile jobs against the configured toolchain and storage roots."""

    def __init__(
        self,
        settings: Settings,
        runner: Optional[ProcessRunner] = None,
        locks: Optional[PathLocks] = None,
    ):
        self.settings = settings
        self.runner = runner if runner is not None else ProcessRunner()
        self.locks = locks if locks is not None else get_path_locks()

    @property
    def toolchain_dir(self) -> Path:
        """Working directory for the Cairo compiler binaries.

        Prebuilt binaries do not need the toolchain checkout, so binary mode
        falls back to the project root when cairo_dir is absent.
        """
        cairo_dir = Path(self.settings.cairo_dir).resolve()
        if self.settings.toolchain_mode == ToolchainMode.binary and not cairo_dir.is_dir():
            return Path(self.settings.project_root).resolve()
        return cairo_dir

    async def dispatch(self, job: CompileJob) -> CompileResult:
        """Run a single job and return its result."""
        logger.info("Received job: %r", job)

        if isinstance(job, VersionQuery):
            return VersionResult(version=await self.cairo_version())
        if isinstance(job, SierraCompile):
            return await self.compile_to_sierra(job.path)
        if isinstance(job, CasmCompile):
            return await self.compile_to_casm(job.path)
        if isinstance(job, ScarbBuild):
            return await self.scarb_build(job.path)
        if isinstance(job, Shutdown):
            logger.info("Shutdown requested")
            return ShutdownResult()

        raise TypeError(f"Unknown compile job: {job!r}")

    def tool_command(self, tool: str, args: Sequence[str], quiet: bool = False) -> Tuple[str, List[str]]:
        """Build (executable, args) for one of the Cairo compiler binaries."""
        if self.settings.toolchain_mode == ToolchainMode.cargo:
            cargo_args = ["run"]
            if quiet:
                cargo_args.append("-q")
            cargo_args += ["--release", "--bin", tool, "--", *args]
            return self.settings.cargo_bin, cargo_args

        executable = tool
        if self.settings.tool_bin_dir is not None:
            executable = str(Path(self.settings.tool_bin_dir) / tool)
        return executable, list(args)

    # Jobs

    async def cairo_version(self) -> str:
        """Return the compiler's --version output."""
        executable, args = self.tool_command(CAIRO_COMPILE_BIN, ["--version"], quiet=True)
        try:
            outcome = await self.runner.run(
                executable, args, self.toolchain_dir, timeout=self.settings.compile_timeout
            )
        except CompileServerError as e:
            logger.error("Version query failed: %s", e)
            raise VersionQueryError(e.message, status=e.status) from e

        try:
            return outcome.stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise VersionQueryError("Compiler version output is not valid UTF-8") from e

    async def compile_to_sierra(self, remix_file_path: str) -> CompileResponse:
        """Compile a .cairo file into the Sierra root."""
        return await self._compile_file(
            remix_file_path,
            source_ext="cairo",
            target_ext="sierra",
            output_root=self.settings.sierra_root,
            tool=SIERRA_COMPILE_BIN,
            extra_args=["--single-file"],
            failure=CompileStatus.compilation_failed,
        )

    async def compile_to_casm(self, remix_file_path: str) -> CompileResponse:
        """Compile a .sierra file into the CASM root."""
        return await self._compile_file(
            remix_file_path,
            source_ext="sierra",
            target_ext="casm",
            output_root=self.settings.casm_root,
            tool=CASM_COMPILE_BIN,
            extra_args=[],
            failure=CompileStatus.sierra_compilation_failed,
        )

    async def scarb_build(self, remix_file_path: str) -> ScarbCompileResponse:
        """Run `scarb build` in a project directory and return its target/dev files."""
        try:
            project_dir = resolve(remix_file_path, self.settings.project_root)
        except InvalidPathError as e:
            logger.warning("%s", e)
            return ScarbCompileResponse(status=e.status, message=e.message)

        if not project_dir.is_dir():
            return ScarbCompileResponse(
                status=CompileStatus.file_not_found,
                message=f"Project directory not found: {remix_file_path}",
            )

        async with self.locks.hold(project_dir):
            try:
                outcome = await self.runner.run(
                    self.settings.scarb_bin,
                    ["build"],
                    project_dir,
                    timeout=self.settings.compile_timeout,
                )
            except CompileServerError as e:
                logger.error("Scarb build failed to run: %s", e)
                return ScarbCompileResponse(
                    status=e.status,
                    message=sanitize(e.message, project_dir, remix_file_path),
                )

            files = list_files_recursive(project_dir / SCARB_OUTPUT_DIR)

        message = sanitize(
            decode_output(outcome.stdout), project_dir, remix_file_path
        ) + sanitize(decode_output(outcome.stderr), project_dir, remix_file_path)

        status = status_from_exit_code(outcome.exit_code, CompileStatus.scarb_build_failed)
        logger.info("Scarb build of %s: %s, %d artifact(s)", remix_file_path, status.value, len(files))
        return ScarbCompileResponse(status=status, message=message, file_content_map_array=files)

    async def save_code(self, remix_file_path: str, data: bytes) -> str:
        """Store an upload under the project root.

        Returns the absolute path written, or "" on any failure.
        """
        try:
            file_path = resolve(remix_file_path, self.settings.project_root)
        except InvalidPathError as e:
            logger.warning("Refusing upload: %s", e)
            return ""

        async with self.locks.hold(file_path):
            try:
                write_bytes(file_path, data)
            except CompileServerError as e:
                logger.error("Error saving file: %s", e)
                return ""

        logger.info("File saved successfully: %s (%d bytes)", file_path, len(data))
        return str(file_path)

    # Helpers

    async def _compile_file(
        self,
        remix_file_path: str,
        *,
        source_ext: str,
        target_ext: str,
        output_root: Path,
        tool: str,
        extra_args: Sequence[str],
        failure: CompileStatus,
    ) -> CompileResponse:
        if extension_of(remix_file_path) != source_ext:
            logger.info("File extension not supported: %s", remix_file_path)
            return CompileResponse(
                status=CompileStatus.file_extension_not_supported,
                message="File extension not supported",
            )

        target_remix_path = replace_extension(remix_file_path, target_ext)
        try:
            file_path = resolve(remix_file_path, self.settings.project_root)
            target_path = resolve(target_remix_path, output_root)
        except InvalidPathError as e:
            logger.warning("%s", e)
            return CompileResponse(status=e.status, message=e.message)

        if not file_path.is_file():
            return CompileResponse(
                status=CompileStatus.file_not_found,
                message=f"File not found: {remix_file_path}",
            )

        replacements = [(file_path, remix_file_path), (target_path, target_remix_path)]

        async with self.locks.hold(target_path):
            try:
                ensure_parent_dir(target_path)
                # A failed run must not hand back a previous build's artifact
                target_path.unlink(missing_ok=True)
                executable, args = self.tool_command(
                    tool, [str(file_path), str(target_path), *extra_args]
                )
                outcome = await self.runner.run(
                    executable, args, self.toolchain_dir, timeout=self.settings.compile_timeout
                )
            except OSError as e:
                logger.error("Error preparing %s: %s", target_path, e)
                return CompileResponse(
                    status=CompileStatus.io_error,
                    message=sanitize_all(str(e), replacements),
                )
            except CompileServerError as e:
                logger.error("%s failed to run: %s", tool, e)
                return CompileResponse(status=e.status, message=sanitize_all(e.message, replacements))

            file_content = self._read_artifact(target_path)

        status = status_from_exit_code(outcome.exit_code, failure)
        logger.info("Compiled %s -> %s: %s", remix_file_path, target_remix_path, status.value)
        return CompileResponse(
            status=status,
            message=sanitize_all(decode_output(outcome.stderr), replacements),
            file_content=file_content,
        )

    @staticmethod
    def _read_artifact(path: Path) -> str:
        try:
            return read_text(path)
        except CompileServerError as e:
            logger.debug("No artifact read back: %s", e)
            return ""


# Global singleton
_dispatcher: Optional[CompileDispatcher] = None


def get_dispatcher() -> CompileDispatcher:
    """Get the global dispatcher instance."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = CompileDispatcher(default_settings)
    return _dispatcher


def reset_dispatcher():
    """Reset the dispatcher singleton (for testing)."""
    global _dispatcher
    _dispatcher = None
