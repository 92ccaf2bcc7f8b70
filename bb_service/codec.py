"""
Proof wire codec

Proof artifacts are raw binary inside the service and JSON arrays of byte
values on the wire. There is no compression or checksum: integrity comes
from the cryptographic verification step itself.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

FIELD_BYTE_SIZE = 32


def to_wire(data: bytes) -> List[int]:
    """Binary buffer -> JSON-safe list of ints"""
    return list(bytes(data))


def _from_int_sequence(values) -> bytes:
    for value in values:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Byte values must be integers, got {type(value).__name__}")
        if not 0 <= value <= 255:
            raise ValueError(f"Byte value out of range: {value}")
    return bytes(values)


def from_wire(value: Any) -> bytes:
    """
    Decode any accepted wire representation into bytes.

    Accepted forms:
    - bytes / bytearray / memoryview (already decoded, returned as bytes)
    - list or tuple of ints in 0..255
    - Node Buffer JSON: {"type": "Buffer", "data": [...]}
    - JS typed array JSON: {"0": b0, "1": b1, ...}

    Raises:
        ValueError: if the value is none of the above.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)

    if isinstance(value, (list, tuple)):
        return _from_int_sequence(value)

    if isinstance(value, dict):
        if value.get("type") == "Buffer" and isinstance(value.get("data"), list):
            return _from_int_sequence(value["data"])

        keys = [str(i) for i in range(len(value))]
        if set(value) != set(keys):
            raise ValueError("Indexed byte object must have keys \"0\"..\"n-1\"")
        return _from_int_sequence([value[k] for k in keys])

    raise ValueError(f"Unsupported proof encoding: {type(value).__name__}")


def split_public_inputs(data: bytes) -> List[str]:
    """Split a public-inputs buffer into 0x-prefixed 32-byte field elements"""
    if len(data) % FIELD_BYTE_SIZE != 0:
        raise ValueError(
            f"Invalid public inputs binary length: {len(data)}, not divisible by {FIELD_BYTE_SIZE}"
        )
    return [
        "0x" + data[i:i + FIELD_BYTE_SIZE].hex()
        for i in range(0, len(data), FIELD_BYTE_SIZE)
    ]


@dataclass
class ProofData:
    """A proof and its (possibly empty) public inputs, both binary"""
    proof: bytes
    public_inputs: bytes = field(default=b"")

    def to_wire(self) -> Dict[str, List[int]]:
        return {"proof": to_wire(self.proof), "publicInputs": to_wire(self.public_inputs)}

    @classmethod
    def from_wire(cls, data: Dict[str, Any]) -> 'ProofData':
        public_inputs = data.get("publicInputs")
        return cls(
            proof=from_wire(data["proof"]),
            public_inputs=from_wire(public_inputs) if public_inputs is not None else b"",
        )

    def public_input_fields(self) -> List[str]:
        return split_public_inputs(self.public_inputs)
