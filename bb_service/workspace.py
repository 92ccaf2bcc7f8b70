"""
Ephemeral per-request workspaces

Every pipeline invocation gets its own directory named by a random token.
The token is the only isolation mechanism: no locks are taken, and no
directory is ever reused.
"""

import asyncio
import os
import secrets
import shutil
import tempfile
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional, Union

import aiofiles
import aiofiles.os
import structlog

from .errors import WorkspaceIOError

logger = structlog.get_logger(__name__)

TOKEN_BYTES = 8


@dataclass(frozen=True)
class Workspace:
    """A directory owned by exactly one pipeline invocation"""
    path: str
    tag: str
    token: str

    @property
    def circuit_path(self) -> str:
        return os.path.join(self.path, "circuit.json")

    @property
    def witness_path(self) -> str:
        return os.path.join(self.path, "witness.gz")

    @property
    def proof_path(self) -> str:
        return os.path.join(self.path, "proof")

    @property
    def proof_output_dir(self) -> str:
        return os.path.join(self.path, "proof_out")

    @property
    def vk_output_dir(self) -> str:
        return os.path.join(self.path, "vk_out")

    def join(self, *parts: str) -> str:
        return os.path.join(self.path, *parts)


class WorkspaceManager:
    """Creates, populates and removes workspaces under a shared temp root"""

    def __init__(self, root: Optional[str] = None):
        self.root = root or tempfile.gettempdir()

    def _new_path(self, tag: str) -> tuple:
        token = secrets.token_hex(TOKEN_BYTES)
        return os.path.join(self.root, f"bb-{tag}-{token}"), token

    async def acquire(self, tag: str) -> Workspace:
        """Create a fresh, empty workspace directory"""
        path, token = self._new_path(tag)
        try:
            await aiofiles.os.makedirs(self.root, exist_ok=True)
            # mkdir (not makedirs) fails if the name already exists
            await aiofiles.os.mkdir(path)
        except OSError as e:
            raise WorkspaceIOError(f"Failed to create workspace {path}: {e}") from e

        logger.debug("Workspace acquired", workspace=path, tag=tag)
        return Workspace(path=path, tag=tag, token=token)

    async def release(self, workspace: Workspace) -> None:
        """Remove the workspace recursively; failures are logged, never raised"""
        try:
            await asyncio.to_thread(shutil.rmtree, workspace.path)
            logger.debug("Workspace released", workspace=workspace.path)
        except Exception as e:
            logger.warning("Failed to clean up workspace", workspace=workspace.path, error=str(e))

    async def mkdir(self, path: str) -> str:
        """Create a directory an external tool expects to already exist"""
        try:
            await aiofiles.os.makedirs(path, exist_ok=True)
        except OSError as e:
            raise WorkspaceIOError(f"Failed to create directory {path}: {e}") from e
        return path

    async def write_file(self, path: str, data: Union[str, bytes]) -> None:
        mode = "wb" if isinstance(data, (bytes, bytearray)) else "w"
        try:
            async with aiofiles.open(path, mode) as f:
                await f.write(data)
        except OSError as e:
            raise WorkspaceIOError(f"Failed to write {path}: {e}") from e

    async def read_file(self, path: str) -> bytes:
        try:
            async with aiofiles.open(path, "rb") as f:
                return await f.read()
        except OSError as e:
            raise WorkspaceIOError(f"Failed to read {path}: {e}") from e

    @asynccontextmanager
    async def scoped(self, tag: str) -> AsyncIterator[Workspace]:
        """Acquire a workspace and release it on every exit path"""
        workspace = await self.acquire(tag)
        try:
            yield workspace
        finally:
            await self.release(workspace)
