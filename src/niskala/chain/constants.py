# src/niskala/chain/constants.py
from __future__ import annotations

"""Runtime and network constants mirrored from the parachain runtime.

These values must match the compiled runtime the chain spec embeds.
"""

# Monetary precision (1 UNIT = 1e18 base units, EVM-style)
TOKEN_DECIMALS: int = 18
UNIT: int = 10**TOKEN_DECIMALS
MILLIUNIT: int = UNIT // 1_000

EXISTENTIAL_DEPOSIT: int = MILLIUNIT

# Collator selection policy
CANDIDACY_BOND_MULTIPLIER: int = 16
DESIRED_CANDIDATES: int = 20

# Cross-chain messaging version accepted at genesis
SAFE_XCM_VERSION: int = 4

# Address format advertised in chain properties
SS58_FORMAT: int = 6629

DEFAULT_TELEMETRY_URL: str = "wss://telemetry.polkadot.io/submit/"
DEFAULT_TELEMETRY_VERBOSITY: int = 0
