"""Subprocess execution for the external compiler tools."""

import asyncio
import contextlib
import logging
import os
import signal
from pathlib import Path
from typing import Optional, Sequence, Union

from ..errors import ProcessTimeoutError, SpawnFailedError, ToolNotFoundError
from ..models import ProcessOutcome

logger = logging.getLogger(__name__)


class ProcessRunner:
    """Runs one tool invocation to completion and captures its output.

    Each child runs in its own session; on timeout the whole process group
    is killed, including compilers started by cargo.
    """

    async def run(
        self,
        executable: str,
        args: Sequence[str],
        working_dir: Union[str, Path],
        timeout: Optional[float] = None,
    ) -> ProcessOutcome:
        cmd = [executable, *[str(a) for a in args]]
        if not Path(working_dir).is_dir():
            raise SpawnFailedError(executable, f"working directory does not exist: {working_dir}")

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=str(working_dir),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except FileNotFoundError as e:
            raise ToolNotFoundError(executable) from e
        except OSError as e:
            raise SpawnFailedError(executable, str(e)) from e

        logger.info("Ran command: %s (cwd=%s, pid=%s)", " ".join(cmd), working_dir, proc.pid)

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            _kill_group(proc)
            await proc.wait()
            logger.warning("Command timed out after %ss: %s", timeout, " ".join(cmd))
            raise ProcessTimeoutError(executable, timeout)
        except asyncio.CancelledError:
            _kill_group(proc)
            with contextlib.suppress(Exception):
                await proc.wait()
            raise

        exit_code = proc.returncode
        if exit_code is not None and exit_code < 0:
            # Terminated by signal -exit_code
            exit_code = None

        logger.info("Command finished with exit code %s: %s", exit_code, executable)
        return ProcessOutcome(exit_code=exit_code, stdout=stdout or b"", stderr=stderr or b"")


def _kill_group(proc: asyncio.subprocess.Process) -> None:
    """Kill proc and everything it spawned."""
    if hasattr(os, "killpg"):
        with contextlib.suppress(ProcessLookupError, PermissionError):
            os.killpg(proc.pid, signal.SIGKILL)
    else:
        with contextlib.suppress(ProcessLookupError):
            proc.kill()
