"""
Request schemas

Structural checks only: the service never inspects circuit semantics here.
Unknown circuit and ABI fields are kept so the artifact written to disk is
the one the client sent.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

from .codec import ProofData, from_wire

PROVE_USAGE = "Invalid request body. Expected circuit (CompiledCircuit) and input (InputMap) parameters."
VERIFY_USAGE = "Invalid request body. Expected circuit (CompiledCircuit) and proof (ProofData) parameters."


class Abi(BaseModel):
    model_config = ConfigDict(extra="allow")

    parameters: List[Any]


class CompiledCircuit(BaseModel):
    """A compiled Noir program as produced by nargo"""
    model_config = ConfigDict(extra="allow")

    bytecode: StrictStr = Field(..., min_length=1)
    abi: Abi
    debug_symbols: StrictStr = Field(..., min_length=1)
    file_map: Dict[str, Any]

    def to_artifact(self) -> Dict[str, Any]:
        return self.model_dump()


class WireProof(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    proof: bytes
    public_inputs: bytes = Field(default=b"", alias="publicInputs")

    @field_validator("proof", mode="before")
    @classmethod
    def _decode_proof(cls, value: Any) -> bytes:
        return from_wire(value)

    @field_validator("public_inputs", mode="before")
    @classmethod
    def _decode_public_inputs(cls, value: Any) -> bytes:
        if value is None:
            return b""
        return from_wire(value)

    def to_proof_data(self) -> ProofData:
        return ProofData(proof=self.proof, public_inputs=self.public_inputs)


class ProveRequest(BaseModel):
    circuit: CompiledCircuit
    input: Dict[str, Any]


class VerifyRequest(BaseModel):
    circuit: CompiledCircuit
    proof: WireProof
