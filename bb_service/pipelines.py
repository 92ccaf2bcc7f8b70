"""
Prove and verify pipelines

Each pipeline runs its stages strictly in order inside one workspace, and the
workspace is released on every exit path. The two pipelines deliberately
treat tool failures differently: a failed `bb prove` is a fault, while a
failed `write_vk` or `verify` is reported as an invalid proof.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Union

import structlog

from .barretenberg import BarretenbergCli
from .codec import ProofData
from .config import Settings
from .errors import PostConditionViolation, ToolInvocationError, WitnessError, WorkspaceIOError
from .process import ProcessRunner
from .witness import NoirExecuteWitnessEngine, WitnessEngine
from .workspace import Workspace, WorkspaceManager

logger = structlog.get_logger(__name__)


async def _write_circuit(workspaces: WorkspaceManager, workspace: Workspace,
                         circuit: Dict[str, Any]) -> None:
    try:
        payload = json.dumps(circuit)
    except (TypeError, ValueError) as e:
        raise WorkspaceIOError(f"Circuit is not JSON serializable: {e}") from e
    await workspaces.write_file(workspace.circuit_path, payload)


class ProvePipeline:
    """circuit + inputs -> witness -> `bb prove` -> ProofData"""

    def __init__(self, workspaces: WorkspaceManager, bb: BarretenbergCli, witness_engine: WitnessEngine):
        self.workspaces = workspaces
        self.bb = bb
        self.witness_engine = witness_engine

    async def run(self, circuit: Dict[str, Any], inputs: Dict[str, Any]) -> ProofData:
        async with self.workspaces.scoped("proof") as workspace:
            log = logger.bind(workspace=workspace.path)

            await _write_circuit(self.workspaces, workspace, circuit)

            try:
                witness = await self.witness_engine.execute(circuit, inputs, workspace)
            except ToolInvocationError as e:
                raise WitnessError(str(e)) from e
            await self.workspaces.write_file(workspace.witness_path, witness)

            output_dir = await self.workspaces.mkdir(workspace.proof_output_dir)
            log.debug("Invoking prover", stage="prove")
            proof_path = await self.bb.prove(workspace.circuit_path, workspace.witness_path, output_dir)

            try:
                proof = await self.workspaces.read_file(proof_path)
            except WorkspaceIOError as e:
                raise PostConditionViolation(proof_path) from e
            if not proof:
                raise PostConditionViolation(proof_path, "the artifact is empty")

            log.info("Proof generated", size=len(proof))
            # bb's CLI output does not separate public inputs from the proof blob
            return ProofData(proof=proof, public_inputs=b"")


class VerifyPipeline:
    """circuit + proof -> `bb write_vk` -> `bb verify` -> bool"""

    def __init__(self, workspaces: WorkspaceManager, bb: BarretenbergCli):
        self.workspaces = workspaces
        self.bb = bb

    async def run(self, circuit: Dict[str, Any], proof: Union[ProofData, Dict[str, Any]]) -> bool:
        if not isinstance(proof, ProofData):
            proof = ProofData.from_wire(proof)

        async with self.workspaces.scoped("verify") as workspace:
            log = logger.bind(workspace=workspace.path)

            await _write_circuit(self.workspaces, workspace, circuit)
            await self.workspaces.write_file(workspace.proof_path, proof.proof)

            output_dir = await self.workspaces.mkdir(workspace.vk_output_dir)
            try:
                vk_path = await self.bb.write_vk(workspace.circuit_path, output_dir)
            except ToolInvocationError as e:
                log.warning("Verification key derivation failed", stage="write_vk", error=str(e))
                return False

            # a non-zero exit cannot be told apart from a broken tool at this layer
            try:
                await self.bb.verify(vk_path, workspace.proof_path)
            except ToolInvocationError as e:
                log.info("Proof rejected", stage="verify", returncode=e.returncode)
                return False

            log.info("Proof verified")
            return True


class ProofService(ABC):
    """What the HTTP layer depends on"""

    @abstractmethod
    async def generate_proof(self, circuit: Dict[str, Any], inputs: Dict[str, Any]) -> ProofData:
        ...

    @abstractmethod
    async def verify_proof(self, circuit: Dict[str, Any], proof: Union[ProofData, Dict[str, Any]]) -> bool:
        ...


class DefaultProofService(ProofService):
    """Runs the pipelines against the real `bb` and `noir-execute` binaries"""

    def __init__(self, settings: Optional[Settings] = None,
                 runner: Optional[ProcessRunner] = None,
                 witness_engine: Optional[WitnessEngine] = None):
        self.settings = settings or Settings.from_env()
        runner = runner or ProcessRunner()
        workspaces = WorkspaceManager(self.settings.workspace_root)
        bb = BarretenbergCli(self.settings.bb_path, self.settings.scheme, runner)
        witness_engine = witness_engine or NoirExecuteWitnessEngine(self.settings.noir_execute_path, runner)

        self.prove_pipeline = ProvePipeline(workspaces, bb, witness_engine)
        self.verify_pipeline = VerifyPipeline(workspaces, bb)

    async def generate_proof(self, circuit: Dict[str, Any], inputs: Dict[str, Any]) -> ProofData:
        return await self.prove_pipeline.run(circuit, inputs)

    async def verify_proof(self, circuit: Dict[str, Any], proof: Union[ProofData, Dict[str, Any]]) -> bool:
        return await self.verify_pipeline.run(circuit, proof)
