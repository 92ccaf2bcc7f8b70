"""
Error taxonomy for the proving pipelines

Request validation errors never reach this module; they are rejected by the
HTTP layer before any workspace exists.
"""

from typing import List, Optional, Sequence


class BbServiceError(Exception):
    """Base class for pipeline failures"""
    label = "pipeline error"


class WorkspaceIOError(BbServiceError):
    """Reading or writing a workspace artifact failed"""
    label = "workspace i/o error"


class WitnessError(BbServiceError):
    """The witness engine rejected the inputs for this circuit"""
    label = "witness error"


class ToolInvocationError(BbServiceError):
    """An external executable exited non-zero or could not be spawned"""
    label = "tool invocation error"

    def __init__(
        self,
        command: Sequence[str],
        returncode: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
        spawn_error: Optional[str] = None,
    ):
        self.command: List[str] = list(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.spawn_error = spawn_error

        tool = self.command[0] if self.command else "process"
        if spawn_error is not None:
            message = f"Failed to spawn {tool}: {spawn_error}"
        else:
            message = f"{tool} failed with code {returncode}. stderr: {stderr}, stdout: {stdout}"
        super().__init__(message)


class PostConditionViolation(BbServiceError):
    """A tool reported success but its output artifact is missing or unreadable"""
    label = "post-condition violation"

    def __init__(self, path: str, reason: str = "expected artifact was not produced"):
        self.path = path
        super().__init__(f"Tool reported success but {reason}: {path}")
