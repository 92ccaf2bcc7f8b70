"""
Tests for workspace isolation and cleanup
"""
import asyncio
import os

import pytest
from structlog.testing import capture_logs

from bb_service.errors import WorkspaceIOError
from bb_service.workspace import WorkspaceManager

from conftest import leftover_workspaces


def test_acquire_creates_tagged_unique_directory(workspace_root):
    manager = WorkspaceManager(workspace_root)
    workspace = asyncio.run(manager.acquire("proof"))

    assert os.path.isdir(workspace.path)
    assert os.path.dirname(workspace.path) == workspace_root
    assert os.path.basename(workspace.path) == f"bb-proof-{workspace.token}"
    assert len(workspace.token) == 16
    int(workspace.token, 16)
    assert workspace.circuit_path == os.path.join(workspace.path, "circuit.json")
    assert workspace.witness_path == os.path.join(workspace.path, "witness.gz")


def test_concurrent_acquire_never_collides(workspace_root):
    manager = WorkspaceManager(workspace_root)

    async def acquire_many():
        return await asyncio.gather(*(manager.acquire("verify") for _ in range(50)))

    workspaces = asyncio.run(acquire_many())
    assert len({w.path for w in workspaces}) == 50
    assert len(leftover_workspaces(workspace_root)) == 50


def test_release_removes_everything(workspace_root):
    manager = WorkspaceManager(workspace_root)

    async def scenario():
        workspace = await manager.acquire("proof")
        nested = await manager.mkdir(workspace.proof_output_dir)
        await manager.write_file(os.path.join(nested, "proof"), b"\x00\x01")
        await manager.write_file(workspace.circuit_path, "{}")
        await manager.release(workspace)
        return workspace

    workspace = asyncio.run(scenario())
    assert not os.path.exists(workspace.path)
    assert leftover_workspaces(workspace_root) == []


def test_release_failure_is_swallowed(workspace_root):
    manager = WorkspaceManager(workspace_root)

    async def scenario():
        workspace = await manager.acquire("proof")
        await manager.release(workspace)
        # second removal fails: directory is already gone
        await manager.release(workspace)
        return workspace

    with capture_logs() as logs:
        workspace = asyncio.run(scenario())

    warnings = [e for e in logs if e["log_level"] == "warning"]
    assert len(warnings) == 1
    assert warnings[0]["event"] == "Failed to clean up workspace"
    assert warnings[0]["workspace"] == workspace.path


def test_scoped_releases_on_error(workspace_root):
    manager = WorkspaceManager(workspace_root)
    seen = []

    async def scenario():
        async with manager.scoped("proof") as workspace:
            seen.append(workspace.path)
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        asyncio.run(scenario())
    assert not os.path.exists(seen[0])


def test_read_missing_file_is_io_error(workspace_root):
    manager = WorkspaceManager(workspace_root)
    with pytest.raises(WorkspaceIOError):
        asyncio.run(manager.read_file(os.path.join(workspace_root, "nope")))
