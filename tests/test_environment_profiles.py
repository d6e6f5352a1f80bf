# tests/test_environment_profiles.py
from __future__ import annotations

from dataclasses import replace

import pytest

from niskala.chain.constants import DEFAULT_TELEMETRY_URL, UNIT
from niskala.chain.environments import DEV, ENVIRONMENTS, LIVE, get_environment
from niskala.chain.profile import (
    ChainType,
    EncodedKey,
    LiteralAccount,
    SeedAccount,
    SeedKey,
    chain_spec_properties,
    default_properties,
    extension,
    resolve_profile,
    telemetry_endpoints,
    validate_registry,
)
from niskala.crypto.keys import derive_authority_key, encode_authority_address
from niskala.errors import ConfigurationError


def test_dev_profile_shape() -> None:
    assert DEV.chain_type is ChainType.LOCAL
    assert DEV.relay_chain == "rococo-local"
    assert DEV.parachain_id == 2000
    assert DEV.initial_balance == 1_000_000 * UNIT
    assert DEV.initial_authorities == (SeedKey("Charlie"), SeedKey("Ferdie"))
    assert len(DEV.endowed_accounts) == 5
    assert all(isinstance(a, SeedAccount) for a in DEV.endowed_accounts)


def test_live_profile_shape() -> None:
    assert LIVE.chain_type is ChainType.LIVE
    assert LIVE.relay_chain == "paseo"
    assert LIVE.parachain_id == 4022
    assert LIVE.initial_balance == 100_000_000 * UNIT
    assert all(isinstance(a, EncodedKey) for a in LIVE.initial_authorities)
    assert all(isinstance(a, LiteralAccount) for a in LIVE.endowed_accounts)
    assert LIVE.root_account in LIVE.endowed_accounts


def test_resolve_dev() -> None:
    r = resolve_profile(DEV)
    assert r.authorities == (derive_authority_key("Charlie"), derive_authority_key("Ferdie"))
    assert len(set(r.endowed_accounts)) == 5
    assert r.root_account == r.endowed_accounts[0]


def test_resolve_live_uses_literals() -> None:
    r = resolve_profile(LIVE)
    assert len(r.authorities) == 2
    for src, key in zip(LIVE.initial_authorities, r.authorities):
        assert encode_authority_address(key) == src.address
    assert r.root_account.hex() == "0xcea1fa4027315defc217054bc16c97c3527d9a0e"
    assert r.root_account in r.endowed_accounts


def test_resolution_is_deterministic() -> None:
    assert resolve_profile(DEV) == resolve_profile(DEV)


def test_default_properties() -> None:
    assert default_properties(DEV) == {
        "tokenSymbol": "KPGD",
        "tokenDecimals": 18,
        "ss58Format": 6629,
        "isEthereum": True,
    }
    assert chain_spec_properties(LIVE)["tokenSymbol"] == "KPGT"


def test_properties_extension_overrides_defaults() -> None:
    prof = replace(DEV, properties={"isEthereum": False, "website": "https://example.org"})
    props = chain_spec_properties(prof)
    assert props["isEthereum"] is False
    assert props["website"] == "https://example.org"
    assert props["tokenSymbol"] == "KPGD"


def test_default_telemetry_and_bootnodes() -> None:
    assert telemetry_endpoints(DEV) == [(DEFAULT_TELEMETRY_URL, 0)]
    assert telemetry_endpoints(DEV, default_url="wss://telemetry.example/submit/") == [
        ("wss://telemetry.example/submit/", 0)
    ]
    assert telemetry_endpoints(replace(DEV, telemetry=())) == []
    assert DEV.bootnodes == ()
    assert DEV.diagnostics is True


def test_extension_record() -> None:
    assert extension(DEV).to_json() == {"relay_chain": "rococo-local", "para_id": 2000}
    assert extension(LIVE).to_json() == {"relay_chain": "paseo", "para_id": 4022}


def test_get_environment() -> None:
    assert get_environment("dev") is DEV
    assert get_environment("LIVE") is LIVE
    assert get_environment("") is DEV
    assert get_environment("local") is DEV
    with pytest.raises(ConfigurationError) as ei:
        get_environment("staging")
    assert ei.value.code == "unknown_environment"


def test_registry_identities_are_unique() -> None:
    validate_registry(list(ENVIRONMENTS.values()))
    with pytest.raises(ConfigurationError) as ei:
        validate_registry([DEV, replace(LIVE, parachain_id=2000)])
    assert ei.value.code == "identity_collision"

    with pytest.raises(ConfigurationError) as ei:
        validate_registry([DEV, replace(LIVE, relay_chain=DEV.relay_chain)])
    assert ei.value.code == "identity_collision"


def test_missing_required_field() -> None:
    with pytest.raises(ConfigurationError) as ei:
        resolve_profile(replace(DEV, chain_name=""))
    assert ei.value.code == "missing_field"

    with pytest.raises(ConfigurationError):
        resolve_profile(replace(DEV, initial_authorities=()))


@pytest.mark.parametrize(
    "changes",
    [
        {"parachain_id": 0},
        {"evm_chain_id": -1},
        {"initial_balance": -5},
        {"initial_balance": 1 << 128},
        {"token_decimals": 300},
        {"token_decimals": "18"},
        {"token_decimals": None},
        {"chain_type": "Local"},
    ],
)
def test_bad_scalar_fields(changes: dict) -> None:
    with pytest.raises(ConfigurationError):
        resolve_profile(replace(DEV, **changes))


def test_malformed_literal_address_fails_at_startup() -> None:
    prof = replace(LIVE, initial_authorities=(EncodedKey("5HMa8oTYwr5viSwQBSbWgM7vxxiCcgLUgSbcumExjEyJ8sTX"),))
    with pytest.raises(ConfigurationError) as ei:
        resolve_profile(prof)
    assert ei.value.code == "bad_authority_literal"


def test_malformed_literal_account_fails_at_startup() -> None:
    with pytest.raises(ConfigurationError):
        resolve_profile(replace(LIVE, root_account=LiteralAccount("0xdeadbeef")))


def test_duplicate_authority_rejected() -> None:
    with pytest.raises(ConfigurationError) as ei:
        resolve_profile(replace(DEV, initial_authorities=(SeedKey("Charlie"), SeedKey("//Charlie"))))
    assert ei.value.code == "duplicate_authority"


def test_duplicate_endowed_account_rejected() -> None:
    with pytest.raises(ConfigurationError):
        resolve_profile(replace(DEV, endowed_accounts=(SeedAccount("Alice"), SeedAccount("Alice"))))
