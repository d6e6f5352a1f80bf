# src/niskala/chain/environments.py
from __future__ import annotations

"""Built-in environments.

dev:  local testnet against a rococo-local relay; every identity derives
      from the public development phrase.
live: production parachain on paseo; every identity is a literal address.
"""

from typing import Dict, Optional

from niskala.chain.constants import TOKEN_DECIMALS, UNIT
from niskala.chain.profile import (
    ChainType,
    EncodedKey,
    EnvironmentProfile,
    LiteralAccount,
    SeedAccount,
    SeedKey,
    validate_registry,
)
from niskala.errors import ConfigurationError

DEV = EnvironmentProfile(
    chain_name="Niskala Dev",
    chain_identifier="dev",
    chain_type=ChainType.LOCAL,
    protocol_id="template-local",
    fork_id="template-local",
    relay_chain="rococo-local",
    parachain_id=2000,
    token_symbol="KPGD",
    token_decimals=TOKEN_DECIMALS,
    evm_chain_id=895670,
    initial_balance=1_000_000 * UNIT,
    # Relay chain validators are expected to be Alice and Bob.
    initial_authorities=(
        SeedKey("Charlie"),
        SeedKey("Ferdie"),
    ),
    endowed_accounts=(
        SeedAccount("Alice"),
        SeedAccount("Bob"),
        SeedAccount("Charlie"),
        SeedAccount("Dave"),
        SeedAccount("Eve"),
    ),
    root_account=SeedAccount("Alice"),
)

LIVE = EnvironmentProfile(
    chain_name="Niskala",
    chain_identifier="live",
    chain_type=ChainType.LIVE,
    protocol_id="niskala/live",
    fork_id="niskala/live",
    relay_chain="paseo",
    parachain_id=4022,
    token_symbol="KPGT",
    token_decimals=TOKEN_DECIMALS,
    evm_chain_id=6025,
    initial_balance=100_000_000 * UNIT,
    initial_authorities=(
        # collator 1
        EncodedKey("5HMa8oTYwr5viSwQBSbWgM7vxxiCcgLUgSbcumExjEyJ8sTr"),
        # collator 2
        EncodedKey("5HTaZj7BtHFN5NsK5CYcK99ZPmH8ESz78hybbjmftKsCKyn1"),
    ),
    endowed_accounts=(
        # collator 1
        LiteralAccount("B14fAa1D5a6213BF946C51FCC0097C5E40B7758A"),
        # collator 2
        LiteralAccount("fb8d71863b415DC999C4f475A229aFa147c786e4"),
        # sudo
        LiteralAccount("Cea1fA4027315dEfC217054bc16c97C3527d9A0E"),
        # team
        LiteralAccount("cf34cEfE42aB033Db814639f72EA37baD3e82219"),
        # foundation
        LiteralAccount("e6D8A2F367250bc677a3D566E3Aeb526697C7399"),
    ),
    root_account=LiteralAccount("Cea1fA4027315dEfC217054bc16c97C3527d9A0E"),
)

ENVIRONMENTS: Dict[str, EnvironmentProfile] = {
    DEV.chain_identifier: DEV,
    LIVE.chain_identifier: LIVE,
}

_ALIASES = {"": "dev", "local": "dev", "development": "dev", "mainnet": "live"}

validate_registry(list(ENVIRONMENTS.values()))


def get_environment(tag: Optional[str]) -> EnvironmentProfile:
    t = str(tag or "").strip().lower()
    t = _ALIASES.get(t, t)
    prof = ENVIRONMENTS.get(t)
    if prof is None:
        raise ConfigurationError("unknown_environment", f"no environment named {tag!r}", sorted(ENVIRONMENTS))
    return prof
