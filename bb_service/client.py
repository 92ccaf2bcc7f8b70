"""
Async client for bb-service

Mirrors the HTTP API: generate a proof, verify a proof, check health.
"""

import asyncio
import json
from typing import Any, Dict, Optional, Union

import aiohttp
import structlog

from .codec import ProofData

logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000"


class ClientError(Exception):
    """Base exception for client failures"""


class RequestError(ClientError):
    """The request could not be sent or the connection failed"""


class ServiceError(ClientError):
    """The service answered with an error body"""


class InvalidResponseError(ClientError):
    """The service answered with something that is not the expected JSON"""


class BbServiceClient:
    """Async HTTP client; use as `async with BbServiceClient(...) as client`"""

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = 300):
        self.base_url = base_url.rstrip('/')
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        self.session = aiohttp.ClientSession(
            timeout=self.timeout,
            headers={'Accept': 'application/json'},
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.session:
            await self.session.close()
            self.session = None

    def _require_session(self) -> aiohttp.ClientSession:
        if not self.session:
            raise RuntimeError("Client is not open. Use `async with`.")
        return self.session

    async def _post(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        session = self._require_session()
        url = f"{self.base_url}{endpoint}"
        try:
            async with session.post(url, json=payload) as response:
                logger.debug("bb-service request", url=url, status_code=response.status)
                if 200 <= response.status < 300:
                    try:
                        return await response.json()
                    except (aiohttp.ContentTypeError, json.JSONDecodeError) as e:
                        raise InvalidResponseError(f"Malformed success response from {url}") from e

                try:
                    error_data = await response.json()
                except (aiohttp.ContentTypeError, json.JSONDecodeError) as e:
                    raise InvalidResponseError(f"HTTP {response.status} with non-JSON body") from e
                raise ServiceError(f"{error_data.get('error', f'HTTP {response.status}')}: "
                                   f"{error_data.get('details') or ''}")
        except asyncio.TimeoutError as e:
            raise RequestError(f"Request to {url} timed out") from e
        except aiohttp.ClientError as e:
            raise RequestError(f"Request to {url} failed: {e}") from e

    async def generate_proof(self, circuit: Dict[str, Any], inputs: Dict[str, Any]) -> ProofData:
        body = await self._post("/prove", {"circuit": circuit, "input": inputs})
        try:
            return ProofData.from_wire(body["proof"])
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidResponseError("Response does not contain a proof") from e

    async def verify_proof(self, circuit: Dict[str, Any], proof: Union[ProofData, Dict[str, Any]]) -> bool:
        if not isinstance(proof, ProofData):
            proof = ProofData.from_wire(proof)
        body = await self._post("/verify", {"circuit": circuit, "proof": proof.to_wire()})
        is_valid = body.get("isValid")
        if not isinstance(is_valid, bool):
            raise InvalidResponseError("Response does not contain isValid")
        return is_valid

    async def health_check(self) -> bool:
        session = self._require_session()
        url = f"{self.base_url}/health"
        try:
            async with session.get(url) as response:
                return 200 <= response.status < 300
        except asyncio.TimeoutError as e:
            raise RequestError(f"Request to {url} timed out") from e
        except aiohttp.ClientError as e:
            raise RequestError(f"Request to {url} failed: {e}") from e


def load_circuit_definition(path: str) -> Dict[str, Any]:
    """Load a compiled circuit JSON file, checking it has bytecode and abi"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            circuit = json.load(f)
    except OSError as e:
        raise ValueError(f"Failed to read circuit file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse circuit JSON: {e}") from e

    if not isinstance(circuit, dict):
        raise ValueError("Circuit JSON must be an object")
    if "bytecode" not in circuit or "abi" not in circuit:
        raise ValueError("Circuit JSON must contain 'bytecode' and 'abi' fields")
    return circuit
