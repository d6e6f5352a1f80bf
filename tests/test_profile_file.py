# tests/test_profile_file.py
from __future__ import annotations

import json
from pathlib import Path

import pytest

from niskala.chain.constants import UNIT
from niskala.chain.genesis import assemble_genesis
from niskala.chain.profile import ChainType, EncodedKey, LiteralAccount, SeedKey, resolve_profile
from niskala.chain.profile_file import load_profile_file, parse_profile_obj
from niskala.cli import select_profile
from niskala.errors import ConfigurationError

STAGING_YAML = """
chain_name: Niskala Staging
chain_identifier: staging
chain_type: Live
protocol_id: niskala/staging
fork_id: niskala/staging
relay_chain: westend
parachain_id: 4100
token_symbol: KPGS
evm_chain_id: 6026
initial_balance_units: 1000
initial_authorities:
  - address: 5HMa8oTYwr5viSwQBSbWgM7vxxiCcgLUgSbcumExjEyJ8sTr
  - seed: Charlie
endowed_accounts:
  - account: "0xCea1fA4027315dEfC217054bc16c97C3527d9A0E"
  - seed: Bob
root_account:
  account: "0xCea1fA4027315dEfC217054bc16c97C3527d9A0E"
properties:
  website: https://niskala.example
"""


def _minimal() -> dict:
    return {
        "chain_name": "Niskala Test",
        "chain_identifier": "test",
        "chain_type": "Development",
        "protocol_id": "niskala/test",
        "fork_id": "niskala/test",
        "relay_chain": "westend-local",
        "parachain_id": 2001,
        "token_symbol": "KPGX",
        "evm_chain_id": 1,
        "initial_balance": 5,
        "initial_authorities": [{"seed": "Ferdie"}],
        "endowed_accounts": [{"seed": "Alice"}],
        "root_account": {"seed": "Alice"},
    }


def test_load_yaml_profile(tmp_path: Path) -> None:
    p = tmp_path / "staging.yaml"
    p.write_text(STAGING_YAML, encoding="utf-8")

    prof = load_profile_file(str(p))
    assert prof.chain_type is ChainType.LIVE
    assert prof.initial_balance == 1000 * UNIT
    assert prof.initial_authorities == (
        EncodedKey("5HMa8oTYwr5viSwQBSbWgM7vxxiCcgLUgSbcumExjEyJ8sTr"),
        SeedKey("Charlie"),
    )
    assert prof.root_account == LiteralAccount("0xCea1fA4027315dEfC217054bc16c97C3527d9A0E")
    # Defaults applied for fields the file omits.
    assert prof.token_decimals == 18
    assert prof.ss58_format == 6629
    assert prof.bootnodes == ()
    assert prof.telemetry is None
    assert dict(prof.properties) == {"website": "https://niskala.example"}

    doc = assemble_genesis(resolve_profile(prof))
    assert doc["parachainInfo"] == {"parachainId": 4100}
    assert len(doc["collatorSelection"]["invulnerables"]) == 2


def test_load_json_profile(tmp_path: Path) -> None:
    p = tmp_path / "test.json"
    p.write_text(json.dumps(_minimal()), encoding="utf-8")
    prof = load_profile_file(str(p))
    assert prof.chain_type is ChainType.DEVELOPMENT
    assert prof.initial_balance == 5


@pytest.mark.parametrize("missing", ["chain_name", "parachain_id", "initial_authorities", "root_account"])
def test_missing_required_field(missing: str) -> None:
    obj = _minimal()
    del obj[missing]
    with pytest.raises(ConfigurationError) as ei:
        parse_profile_obj(obj)
    assert ei.value.code == "invalid_profile_file"


def test_unknown_key_is_rejected() -> None:
    obj = _minimal()
    obj["surprise"] = True
    with pytest.raises(ConfigurationError):
        parse_profile_obj(obj)


def test_balance_must_be_given_exactly_once() -> None:
    obj = _minimal()
    obj["initial_balance_units"] = 1
    with pytest.raises(ConfigurationError):
        parse_profile_obj(obj)

    obj = _minimal()
    del obj["initial_balance"]
    with pytest.raises(ConfigurationError):
        parse_profile_obj(obj)


def test_key_source_needs_exactly_one_form() -> None:
    obj = _minimal()
    obj["initial_authorities"] = [{"seed": "Ferdie", "address": "5HMa8oTYwr5viSwQBSbWgM7vxxiCcgLUgSbcumExjEyJ8sTr"}]
    with pytest.raises(ConfigurationError):
        parse_profile_obj(obj)


def test_missing_and_unparseable_files(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError) as ei:
        load_profile_file(str(tmp_path / "nope.yaml"))
    assert ei.value.code == "missing_profile_file"

    bad = tmp_path / "bad.yaml"
    bad.write_text("chain_name: [unclosed", encoding="utf-8")
    with pytest.raises(ConfigurationError) as ei:
        load_profile_file(str(bad))
    assert ei.value.code == "invalid_profile_file"

    scalar = tmp_path / "scalar.yaml"
    scalar.write_text("just a string\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_profile_file(str(scalar))


def test_file_profile_with_its_own_identity_is_selectable(tmp_path: Path) -> None:
    p = tmp_path / "staging.yaml"
    p.write_text(STAGING_YAML, encoding="utf-8")
    prof = select_profile(str(p))
    assert prof.chain_identifier == "staging"
    assert prof.relay_chain == "westend"


@pytest.mark.parametrize(
    "changes",
    [
        {"chain_identifier": "dev"},
        {"parachain_id": 2000},
        {"protocol_id": "template-local"},
        {"fork_id": "niskala/live"},
        {"relay_chain": "paseo"},
    ],
)
def test_file_profile_cannot_reuse_builtin_identity(tmp_path: Path, changes: dict) -> None:
    obj = _minimal()
    obj.update(changes)
    p = tmp_path / "clash.json"
    p.write_text(json.dumps(obj), encoding="utf-8")

    # The file itself is well formed.
    load_profile_file(str(p))
    with pytest.raises(ConfigurationError) as ei:
        select_profile(str(p))
    assert ei.value.code == "identity_collision"
