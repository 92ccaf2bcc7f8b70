"""
Async subprocess runner

One call is one attempt: there are no retries and no timeouts here. Callers
decide what a failure means for their pipeline.
"""

import asyncio
from dataclasses import dataclass
from typing import List, Sequence

import structlog

from .errors import ToolInvocationError

logger = structlog.get_logger(__name__)


@dataclass
class ProcessResult:
    """Captured output of a finished process"""
    command: List[str]
    returncode: int
    stdout: str
    stderr: str


class ProcessRunner:
    """Spawns an executable and waits for it to exit with code 0"""

    async def run(self, executable: str, args: Sequence[str]) -> ProcessResult:
        command = [executable, *args]
        logger.debug("Spawning process", command=command)

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.warning("Process spawn failed", command=command, error=str(e))
            raise ToolInvocationError(command, spawn_error=str(e)) from e

        try:
            stdout_bytes, stderr_bytes = await process.communicate()
        except BaseException:
            # cancelled: the child must not outlive its workspace
            if process.returncode is None:
                try:
                    process.kill()
                except ProcessLookupError:
                    pass
                await process.wait()
                logger.warning("Process killed before exit", command=command)
            raise

        stdout = stdout_bytes.decode(errors="replace")
        stderr = stderr_bytes.decode(errors="replace")

        if process.returncode != 0:
            logger.warning(
                "Process exited with non-zero code",
                command=command,
                returncode=process.returncode,
                stderr=stderr,
            )
            raise ToolInvocationError(command, process.returncode, stdout, stderr)

        logger.debug("Process finished", command=command, returncode=process.returncode)
        return ProcessResult(command, process.returncode, stdout, stderr)
