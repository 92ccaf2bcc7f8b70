"""
Witness execution

The witness engine turns a compiled circuit and an input map into a binary
witness. It is a collaborator of the prove pipeline, reached through the
WitnessEngine interface so tests and alternative engines can be swapped in.
"""

import json
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import aiofiles
import aiofiles.os
import structlog

from .errors import ToolInvocationError, WitnessError
from .process import ProcessRunner
from .workspace import Workspace

logger = structlog.get_logger(__name__)

WITNESS_NAME = "witness"


class WitnessEngine(ABC):
    """Executes a circuit against inputs and returns the witness blob"""

    @abstractmethod
    async def execute(self, circuit: Dict[str, Any], inputs: Dict[str, Any],
                      workspace: Workspace) -> bytes:
        """Raise WitnessError if the inputs do not satisfy the circuit"""


class NoirExecuteWitnessEngine(WitnessEngine):
    """Runs `noir-execute` against the circuit artifact already in the workspace"""

    def __init__(self, executable: str = "noir-execute", runner: Optional[ProcessRunner] = None):
        self.executable = executable
        self.runner = runner or ProcessRunner()

    async def execute(self, circuit: Dict[str, Any], inputs: Dict[str, Any],
                      workspace: Workspace) -> bytes:
        prover_file = workspace.join("Prover.json")
        output_dir = workspace.join("witness_out")

        try:
            async with aiofiles.open(prover_file, "w") as f:
                await f.write(json.dumps(inputs))
            await aiofiles.os.makedirs(output_dir, exist_ok=True)
        except (OSError, TypeError, ValueError) as e:
            raise WitnessError(f"Failed to prepare witness inputs: {e}") from e

        try:
            await self.runner.run(self.executable, [
                "execute",
                "--artifact-path", workspace.circuit_path,
                "--prover-file", prover_file,
                "--output-dir", output_dir,
                "--witness-name", WITNESS_NAME,
            ])
        except ToolInvocationError as e:
            detail = e.stderr.strip() or str(e)
            raise WitnessError(f"Circuit execution failed: {detail}") from e

        witness_file = os.path.join(output_dir, f"{WITNESS_NAME}.gz")
        try:
            async with aiofiles.open(witness_file, "rb") as f:
                witness = await f.read()
        except OSError as e:
            raise WitnessError(f"Witness engine produced no witness: {witness_file}") from e

        logger.debug("Witness generated", workspace=workspace.path, size=len(witness))
        return witness
