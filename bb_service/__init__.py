"""bb-service: ZK proof generation and verification over the Barretenberg CLI"""

from .codec import ProofData, from_wire, split_public_inputs, to_wire
from .errors import (
    BbServiceError,
    PostConditionViolation,
    ToolInvocationError,
    WitnessError,
    WorkspaceIOError,
)
from .pipelines import DefaultProofService, ProofService, ProvePipeline, VerifyPipeline
from .process import ProcessRunner
from .workspace import Workspace, WorkspaceManager

__all__ = [
    'ProofData',
    'from_wire',
    'to_wire',
    'split_public_inputs',
    'BbServiceError',
    'WorkspaceIOError',
    'WitnessError',
    'ToolInvocationError',
    'PostConditionViolation',
    'ProofService',
    'DefaultProofService',
    'ProvePipeline',
    'VerifyPipeline',
    'ProcessRunner',
    'Workspace',
    'WorkspaceManager',
]
