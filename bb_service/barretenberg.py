"""
Barretenberg CLI binding

Builds the exact argument lists the `bb` executable expects for each stage.
Exit-code interpretation is left to the pipelines.
"""

import os
from typing import Optional

from .process import ProcessResult, ProcessRunner

PROOF_FILENAME = "proof"
VK_FILENAME = "vk"


class BarretenbergCli:
    """Thin wrapper over the `bb` command line"""

    def __init__(self, bb_path: str = "bb", scheme: str = "ultra_honk",
                 runner: Optional[ProcessRunner] = None):
        self.bb_path = bb_path
        self.scheme = scheme
        self.runner = runner or ProcessRunner()

    async def prove(self, circuit_path: str, witness_path: str, output_dir: str) -> str:
        """Run `bb prove`; returns the path the proof is expected at"""
        await self.runner.run(self.bb_path, [
            "prove",
            "--scheme", self.scheme,
            "-b", circuit_path,
            "-w", witness_path,
            "-o", output_dir,
        ])
        return os.path.join(output_dir, PROOF_FILENAME)

    async def write_vk(self, circuit_path: str, output_dir: str) -> str:
        """Run `bb write_vk`; returns the path the key is expected at"""
        await self.runner.run(self.bb_path, [
            "write_vk",
            "--scheme", self.scheme,
            "-b", circuit_path,
            "-o", output_dir,
        ])
        return os.path.join(output_dir, VK_FILENAME)

    async def verify(self, vk_path: str, proof_path: str) -> ProcessResult:
        return await self.runner.run(self.bb_path, [
            "verify",
            "--scheme", self.scheme,
            "-k", vk_path,
            "-p", proof_path,
        ])
