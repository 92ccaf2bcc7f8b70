import os
import stat

import pytest

from bb_service.errors import WitnessError
from bb_service.witness import WitnessEngine


VALID_CIRCUIT = {
    "noir_version": "1.0.0-beta.3",
    "hash": 1234,
    "bytecode": "H4sIAAAAAAAA/wEAAP//AAAAAAAAAAA=",
    "abi": {
        "parameters": [{"name": "x", "type": {"kind": "field"}, "visibility": "private"}],
        "return_type": None,
        "error_types": {},
    },
    "debug_symbols": "eJyrVsrJT0xRsqpWKi1OLcpLzE1VslIqS8wpTtVRKi1OLcpLzE1VslIqS8wpTtWprQUALOoM",
    "file_map": {"1": {"source": "fn main(x: Field) {}", "path": "src/main.nr"}},
}


# Fake `bb`: proof = "proof:" + witness, verify accepts proofs with that prefix.
FAKE_BB = r"""#!/bin/sh
cmd="$1"; shift
b=""; w=""; o=""; k=""; p=""; prev=""
for a in "$@"; do
  case "$prev" in
    -b) b="$a" ;;
    -w) w="$a" ;;
    -o) o="$a" ;;
    -k) k="$a" ;;
    -p) p="$a" ;;
  esac
  prev="$a"
done
if [ -n "$BB_CALL_LOG" ]; then echo "$cmd $*" >> "$BB_CALL_LOG"; fi
case "$cmd" in
  prove)
    [ -d "$o" ] || { echo "output dir missing: $o" >&2; exit 3; }
    { printf 'proof:'; cat "$w"; } > "$o/proof"
    ;;
  write_vk)
    [ -d "$o" ] || { echo "output dir missing: $o" >&2; exit 3; }
    { printf 'vk:'; cat "$b"; } > "$o/vk"
    ;;
  verify)
    [ -f "$k" ] || { echo "no vk" >&2; exit 2; }
    head -c 6 "$p" | grep -q '^proof:' || { echo "proof invalid" >&2; exit 1; }
    ;;
  *)
    echo "unknown command $cmd" >&2; exit 64 ;;
esac
exit 0
"""


def write_script(directory, name, body):
    path = os.path.join(str(directory), name)
    with open(path, "w") as f:
        f.write(body)
    os.chmod(path, os.stat(path).st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


class FakeWitnessEngine(WitnessEngine):
    """Witness = b"witness:" + sorted input names; rejects inputs with a 'bad' key"""

    def __init__(self):
        self.calls = []

    async def execute(self, circuit, inputs, workspace):
        self.calls.append(workspace.path)
        assert os.path.isfile(workspace.circuit_path)
        if "bad" in inputs:
            raise WitnessError("Cannot satisfy constraint")
        return b"witness:" + ",".join(sorted(inputs)).encode()


@pytest.fixture
def circuit():
    return dict(VALID_CIRCUIT)


@pytest.fixture
def workspace_root(tmp_path):
    root = tmp_path / "workspaces"
    root.mkdir()
    return str(root)


@pytest.fixture
def fake_bb(tmp_path):
    return write_script(tmp_path, "bb", FAKE_BB)


@pytest.fixture
def witness_engine():
    return FakeWitnessEngine()


def leftover_workspaces(root):
    return [name for name in os.listdir(root) if name.startswith("bb-")]
