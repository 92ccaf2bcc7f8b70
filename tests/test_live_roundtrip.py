"""
End-to-end round trip against the real `bb` and `noir-execute`

Needs a compiled circuit: set BB_TEST_CIRCUIT to its JSON path and
BB_TEST_INPUTS to a JSON file with satisfying inputs.
"""
import asyncio
import json
import os
import shutil

import pytest

from bb_service.config import Settings
from bb_service.pipelines import DefaultProofService

pytestmark = pytest.mark.skipif(
    not (shutil.which("bb") and shutil.which("noir-execute")
         and os.getenv("BB_TEST_CIRCUIT") and os.getenv("BB_TEST_INPUTS")),
    reason="Requires bb, noir-execute and BB_TEST_CIRCUIT/BB_TEST_INPUTS",
)


def test_prove_then_verify(tmp_path):
    with open(os.environ["BB_TEST_CIRCUIT"]) as f:
        circuit = json.load(f)
    with open(os.environ["BB_TEST_INPUTS"]) as f:
        inputs = json.load(f)

    service = DefaultProofService(Settings(workspace_root=str(tmp_path)))

    async def scenario():
        proof = await service.generate_proof(circuit, inputs)
        return await service.verify_proof(circuit, proof.to_wire())

    assert asyncio.run(scenario()) is True
    assert os.listdir(tmp_path) == []
