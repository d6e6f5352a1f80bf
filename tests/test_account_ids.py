# tests/test_account_ids.py
from __future__ import annotations

import pytest

from niskala.chain.account import (
    AccountId,
    account_id_from_authority_key,
    account_id_from_evm_key,
    account_id_from_literal,
    evm_account_id_from_seed,
)
from niskala.crypto.keys import AuthorityKey, EvmKey, derive_authority_key
from niskala.errors import ConfigurationError


def test_uncompressed_key_truncates_to_first_20_bytes() -> None:
    raw = bytes([0x04]) + bytes(range(1, 65))
    assert len(raw) == 65
    acct = account_id_from_evm_key(EvmKey(raw))
    assert acct.raw == raw[:20]
    assert acct.hex() == "0x" + raw[:20].hex()


def test_truncation_is_not_a_hash() -> None:
    raw = b"\xaa" * 20 + b"\xbb" * 13
    assert account_id_from_evm_key(EvmKey(raw)).raw == b"\xaa" * 20


def test_authority_projection_truncates() -> None:
    key = derive_authority_key("Charlie")
    acct = account_id_from_authority_key(key)
    assert acct.hex() == "0x90b5ab205c6974c9ea841be688864633dc9ca8a3"


def test_seed_account_uses_ecdsa_key() -> None:
    assert evm_account_id_from_seed("Alice").hex() == "0x020a1091341fe5664bfa1782d5e04779689068c9"


def test_literal_accepts_hex_with_or_without_prefix() -> None:
    a = account_id_from_literal("0xCea1fA4027315dEfC217054bc16c97C3527d9A0E")
    b = account_id_from_literal("cea1fa4027315defc217054bc16c97c3527d9a0e")
    assert a == b
    assert a.hex() == "0xcea1fa4027315defc217054bc16c97c3527d9a0e"
    assert account_id_from_literal(bytes(20)) == AccountId(bytes(20))


@pytest.mark.parametrize("bad", ["0x1234", "zz" * 20, "00" * 21])
def test_literal_rejects_malformed_values(bad: str) -> None:
    with pytest.raises(ConfigurationError):
        account_id_from_literal(bad)


def test_account_id_is_exactly_20_bytes() -> None:
    with pytest.raises(ConfigurationError):
        AccountId(b"\x00" * 19)
    with pytest.raises(ConfigurationError):
        EvmKey(b"\x00" * 19)
    assert len(account_id_from_authority_key(AuthorityKey(b"\x01" * 32)).raw) == 20
