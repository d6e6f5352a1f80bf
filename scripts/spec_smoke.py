#!/usr/bin/env python3

"""Smoke test for the chain-spec builder.

Builds every built-in environment twice with a placeholder runtime blob and
checks:
  - both renders are byte-identical
  - genesis invariants hold (balances/evm, invulnerables/session)
  - network identity (id, relay chain, para id) matches the profile

Usage:
  python3 scripts/spec_smoke.py

Optional env overrides:
  NISKALA_WASM_PATH=./target/release/wbuild/niskala-runtime/niskala_runtime.compact.compressed.wasm
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from niskala.chain.chain_spec import build_chain_spec, to_json
from niskala.chain.environments import ENVIRONMENTS
from niskala.chain.genesis import check_genesis_consistency

_PLACEHOLDER_WASM = b"\x00asm\x01\x00\x00\x00"


def _code() -> bytes:
    p = os.environ.get("NISKALA_WASM_PATH")
    if p:
        return Path(p).read_bytes()
    return _PLACEHOLDER_WASM


def main() -> int:
    code = _code()
    for tag, profile in sorted(ENVIRONMENTS.items()):
        first = to_json(build_chain_spec(profile, code))
        second = to_json(build_chain_spec(profile, code))
        if first != second:
            raise RuntimeError(f"{tag}: chain spec is not deterministic")

        spec = json.loads(first)
        patch = spec["genesis"]["runtimeGenesis"]["patch"]
        check_genesis_consistency(patch)

        if spec["id"] != profile.chain_identifier:
            raise RuntimeError(f"{tag}: id mismatch {spec['id']!r}")
        if spec["relay_chain"] != profile.relay_chain or spec["para_id"] != profile.parachain_id:
            raise RuntimeError(f"{tag}: extension mismatch {spec['relay_chain']!r}/{spec['para_id']!r}")

        print(
            f"OK: {tag}",
            {
                "bytes": len(first),
                "authorities": len(patch["collatorSelection"]["invulnerables"]),
                "endowed": len(patch["balances"]["balances"]),
            },
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
