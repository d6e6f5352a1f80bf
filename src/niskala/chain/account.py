# src/niskala/chain/account.py
from __future__ import annotations

"""Chain-native 20-byte account ids.

Account ids are EVM-address shaped. Projections from public keys keep the
first 20 bytes of the raw key as-is; this is NOT keccak/blake hashing and
downstream address expectations depend on the exact truncation.
"""

from dataclasses import dataclass
from typing import Union

from niskala.crypto.keys import AuthorityKey, EvmKey, derive_evm_key
from niskala.errors import ConfigurationError

ACCOUNT_ID_LEN = 20


@dataclass(frozen=True, slots=True, order=True)
class AccountId:
    raw: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.raw, (bytes, bytearray)) or len(self.raw) != ACCOUNT_ID_LEN:
            raise ConfigurationError(
                "bad_account_id",
                f"account id must be exactly {ACCOUNT_ID_LEN} bytes",
                len(self.raw) if isinstance(self.raw, (bytes, bytearray)) else type(self.raw).__name__,
            )
        object.__setattr__(self, "raw", bytes(self.raw))

    def __bytes__(self) -> bytes:
        return self.raw

    def hex(self) -> str:
        return "0x" + self.raw.hex()

    def __str__(self) -> str:
        return self.hex()


def _truncate(raw: bytes) -> AccountId:
    if len(raw) < ACCOUNT_ID_LEN:
        raise ConfigurationError("short_public_key", f"need at least {ACCOUNT_ID_LEN} bytes; got {len(raw)}")
    return AccountId(bytes(raw[:ACCOUNT_ID_LEN]))


def account_id_from_evm_key(key: EvmKey) -> AccountId:
    return _truncate(key.raw)


def account_id_from_authority_key(key: AuthorityKey) -> AccountId:
    return _truncate(key.raw)


def account_id_from_literal(value: Union[bytes, bytearray, str]) -> AccountId:
    """Wrap a hard-coded 20-byte value (raw bytes or hex, optional 0x prefix)."""
    if isinstance(value, str):
        s = value.strip()
        if s[:2] in ("0x", "0X"):
            s = s[2:]
        try:
            raw = bytes.fromhex(s)
        except ValueError as e:
            raise ConfigurationError("bad_account_literal", "account literal is not valid hex", value) from e
        return AccountId(raw)
    return AccountId(bytes(value))


def evm_account_id_from_seed(seed: str) -> AccountId:
    """Development helper: derive the ECDSA key for seed, then truncate."""
    return account_id_from_evm_key(derive_evm_key(seed))
