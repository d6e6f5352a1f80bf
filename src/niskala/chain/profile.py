# src/niskala/chain/profile.py
from __future__ import annotations

"""EnvironmentProfile: every per-environment parameter of a chain spec.

A profile is a frozen value, not a subclass. Each environment supplies the
required fields; everything else falls back to the pure default functions
below (`default_properties`, `telemetry_endpoints`, `extension`).

Key material is declared as tagged sources so production profiles never go
through seed derivation:

  SeedKey("Charlie")            -> sr25519 derivation of //Charlie
  EncodedKey("5HMa8o...")       -> SS58 literal
  SeedAccount("Alice")          -> ecdsa derivation of //Alice, truncated
  LiteralAccount("0xB14f...")   -> 20-byte literal

`resolve_profile` is the single startup validation pass that turns all of
these into concrete keys and account ids, raising ConfigurationError on the
first problem.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from niskala.chain.account import (
    AccountId,
    account_id_from_authority_key,
    account_id_from_literal,
    evm_account_id_from_seed,
)
from niskala.chain.constants import DEFAULT_TELEMETRY_URL, DEFAULT_TELEMETRY_VERBOSITY, SS58_FORMAT
from niskala.crypto.keys import AuthorityKey, decode_authority_address, derive_authority_key
from niskala.errors import ConfigurationError, DecodeError

Json = Dict[str, Any]


class ChainType(str, Enum):
    DEVELOPMENT = "Development"
    LOCAL = "Local"
    LIVE = "Live"


@dataclass(frozen=True)
class SeedKey:
    seed: str


@dataclass(frozen=True)
class EncodedKey:
    address: str


@dataclass(frozen=True)
class SeedAccount:
    seed: str


@dataclass(frozen=True)
class LiteralAccount:
    value: str


KeySource = Union[SeedKey, EncodedKey]
AccountSource = Union[SeedAccount, LiteralAccount]


@dataclass(frozen=True)
class Extensions:
    """Network extension record carried alongside the genesis patch."""

    relay_chain: str
    para_id: int

    def to_json(self) -> Json:
        return {"relay_chain": self.relay_chain, "para_id": int(self.para_id)}


@dataclass(frozen=True)
class EnvironmentProfile:
    chain_name: str
    chain_identifier: str  # e.g. "dev", "local", "live"
    chain_type: ChainType
    protocol_id: str
    fork_id: str
    relay_chain: str
    parachain_id: int

    token_symbol: str
    token_decimals: int
    evm_chain_id: int
    initial_balance: int

    initial_authorities: Tuple[KeySource, ...]
    endowed_accounts: Tuple[AccountSource, ...]
    root_account: AccountSource

    bootnodes: Tuple[str, ...] = ()
    # None means "one well-known endpoint" (see telemetry_endpoints()).
    telemetry: Optional[Tuple[Tuple[str, int], ...]] = None
    # Merged over default_properties(); override entries win.
    properties: Mapping[str, Any] = field(default_factory=dict)
    ss58_format: int = SS58_FORMAT
    diagnostics: bool = True


@dataclass(frozen=True)
class ResolvedProfile:
    """A profile whose key material has been derived/decoded and checked."""

    profile: EnvironmentProfile
    authorities: Tuple[AuthorityKey, ...]
    endowed_accounts: Tuple[AccountId, ...]
    root_account: AccountId


# ---------------------------------------------------------------------------
# Pure defaults
# ---------------------------------------------------------------------------


def extension(profile: EnvironmentProfile) -> Extensions:
    return Extensions(relay_chain=profile.relay_chain, para_id=int(profile.parachain_id))


def default_properties(profile: EnvironmentProfile) -> Json:
    return {
        "tokenSymbol": profile.token_symbol,
        "tokenDecimals": int(profile.token_decimals),
        "ss58Format": int(profile.ss58_format),
        "isEthereum": True,
    }


def chain_spec_properties(profile: EnvironmentProfile) -> Json:
    props = default_properties(profile)
    props.update(dict(profile.properties))
    return props


def telemetry_endpoints(
    profile: EnvironmentProfile,
    *,
    default_url: str = DEFAULT_TELEMETRY_URL,
    default_verbosity: int = DEFAULT_TELEMETRY_VERBOSITY,
) -> List[Tuple[str, int]]:
    if profile.telemetry is None:
        return [(default_url, int(default_verbosity))]
    return [(str(url), int(v)) for url, v in profile.telemetry]


# ---------------------------------------------------------------------------
# Startup validation
# ---------------------------------------------------------------------------

_REQUIRED_STR_FIELDS = (
    "chain_name",
    "chain_identifier",
    "protocol_id",
    "fork_id",
    "relay_chain",
    "token_symbol",
)


def _resolve_authority(src: KeySource) -> AuthorityKey:
    if isinstance(src, SeedKey):
        return derive_authority_key(src.seed)
    if isinstance(src, EncodedKey):
        try:
            return decode_authority_address(src.address)
        except DecodeError as e:
            raise ConfigurationError("bad_authority_literal", e.reason, src.address) from e
    raise ConfigurationError("bad_key_source", f"unsupported authority source {type(src).__name__}")


def _resolve_account(src: AccountSource) -> AccountId:
    if isinstance(src, SeedAccount):
        return evm_account_id_from_seed(src.seed)
    if isinstance(src, LiteralAccount):
        return account_id_from_literal(src.value)
    raise ConfigurationError("bad_account_source", f"unsupported account source {type(src).__name__}")


def validate_profile_fields(profile: EnvironmentProfile) -> None:
    for name in _REQUIRED_STR_FIELDS:
        v = getattr(profile, name, None)
        if not isinstance(v, str) or not v.strip():
            raise ConfigurationError("missing_field", f"{name} must be a non-empty string", profile.chain_identifier)

    if not isinstance(profile.chain_type, ChainType):
        raise ConfigurationError("bad_chain_type", f"unknown chain_type {profile.chain_type!r}")

    for name in ("parachain_id", "evm_chain_id"):
        v = getattr(profile, name)
        if isinstance(v, bool) or not isinstance(v, int) or v <= 0:
            raise ConfigurationError("bad_field", f"{name} must be a positive int; got {v!r}")

    if isinstance(profile.initial_balance, bool) or not isinstance(profile.initial_balance, int):
        raise ConfigurationError("bad_field", "initial_balance must be an int")
    if profile.initial_balance < 0 or profile.initial_balance >= 1 << 128:
        raise ConfigurationError("bad_field", "initial_balance must fit in u128", profile.initial_balance)

    v = profile.token_decimals
    if isinstance(v, bool) or not isinstance(v, int) or not 0 <= v <= 255:
        raise ConfigurationError("bad_field", "token_decimals must fit in u8", profile.token_decimals)

    if not profile.initial_authorities:
        raise ConfigurationError("missing_field", "initial_authorities must not be empty")
    if not profile.endowed_accounts:
        raise ConfigurationError("missing_field", "endowed_accounts must not be empty")


def resolve_profile(profile: EnvironmentProfile) -> ResolvedProfile:
    """Derive/decode every key in the profile; fail before assembly."""
    validate_profile_fields(profile)

    authorities = tuple(_resolve_authority(src) for src in profile.initial_authorities)

    seen: set = set()
    for key in authorities:
        acct = account_id_from_authority_key(key)
        if acct in seen:
            raise ConfigurationError("duplicate_authority", "authority listed twice", acct.hex())
        seen.add(acct)

    endowed = tuple(_resolve_account(src) for src in profile.endowed_accounts)
    if len(set(endowed)) != len(endowed):
        raise ConfigurationError("duplicate_endowed_account", "endowed account listed twice")

    return ResolvedProfile(
        profile=profile,
        authorities=authorities,
        endowed_accounts=endowed,
        root_account=_resolve_account(profile.root_account),
    )


def validate_registry(profiles: Sequence[EnvironmentProfile]) -> None:
    """Network identity fields must not collide between environments."""
    for name in ("chain_identifier", "protocol_id", "fork_id", "parachain_id", "relay_chain"):
        owners: Dict[Any, str] = {}
        for p in profiles:
            v = getattr(p, name)
            if v in owners:
                raise ConfigurationError(
                    "identity_collision",
                    f"{name}={v!r} shared by {owners[v]!r} and {p.chain_name!r}",
                )
            owners[v] = p.chain_name
