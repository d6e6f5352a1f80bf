# src/niskala/chain/genesis.py
from __future__ import annotations

"""Genesis patch assembly.

assemble_genesis() is a pure function of (ResolvedProfile, GenesisParams):
no I/O, no randomness, no clock. Output leaves are str/int/bool/bytes so
the chain-spec serializer can render them deterministically.

Document shape (sub-section order irrelevant):

  system            {}
  parachainInfo     {"parachainId": int}
  auraExt           {}
  collatorSelection {"candidacyBond": int, "invulnerables": [acct], "desiredCandidates": int}
  polkadotXcm       {"safeXcmVersion": int}
  session           {"keys": [[acct, acct, {"aura": ss58}], ...]}
  balances          {"balances": [[acct, int], ...]}
  sudo              {"key": acct}
  evm               {"accounts": {acct: {"balance": "0x..", "nonce": "0x0", "code": [], "storage": {}}}}
  baseFee           {}
  evmChainId        {"chainId": int}

Account ids render as 0x-prefixed lowercase hex.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from niskala.chain.account import AccountId, account_id_from_authority_key
from niskala.chain.constants import (
    CANDIDACY_BOND_MULTIPLIER,
    DESIRED_CANDIDATES,
    EXISTENTIAL_DEPOSIT,
    SAFE_XCM_VERSION,
)
from niskala.chain.profile import ResolvedProfile
from niskala.crypto.keys import AuthorityKey
from niskala.errors import ConsistencyViolation
from niskala.structured_logging import log_event

Json = Dict[str, Any]

log = logging.getLogger("niskala.genesis")


@dataclass(frozen=True)
class GenesisParams:
    """Runtime-side constants that shape the genesis patch."""

    existential_deposit: int = EXISTENTIAL_DEPOSIT
    safe_xcm_version: int = SAFE_XCM_VERSION
    desired_candidates: int = DESIRED_CANDIDATES
    candidacy_bond_multiplier: int = CANDIDACY_BOND_MULTIPLIER

    @property
    def candidacy_bond(self) -> int:
        return int(self.existential_deposit) * int(self.candidacy_bond_multiplier)


def u256_hex(v: int) -> str:
    if v < 0 or v >= 1 << 256:
        raise ValueError(f"value out of U256 range: {v}")
    return hex(int(v))


def session_keys(key: AuthorityKey) -> Json:
    """Per-authority session key bundle. New roles (grandpa, im-online, ...) go here."""
    return {"aura": key.to_ss58()}


def _authority_entries(resolved: ResolvedProfile) -> List[Tuple[AccountId, Json]]:
    return [(account_id_from_authority_key(k), session_keys(k)) for k in resolved.authorities]


def evm_genesis_accounts(accounts: Tuple[AccountId, ...], balance: int) -> Json:
    out: Json = {}
    for acct in accounts:
        out[acct.hex()] = {
            "balance": u256_hex(balance),
            "nonce": "0x0",
            "code": [],
            "storage": {},
        }
    return out


def assemble_genesis(resolved: ResolvedProfile, params: GenesisParams | None = None) -> Json:
    params = params or GenesisParams()
    profile = resolved.profile

    entries = _authority_entries(resolved)
    invulnerables = [acct.hex() for acct, _ in entries]
    session = [[acct.hex(), acct.hex(), keys] for acct, keys in entries]

    balance = int(profile.initial_balance)
    balances = [[acct.hex(), balance] for acct in resolved.endowed_accounts]

    doc: Json = {
        "system": {},
        "parachainInfo": {"parachainId": int(profile.parachain_id)},
        "auraExt": {},
        "collatorSelection": {
            "candidacyBond": params.candidacy_bond,
            "invulnerables": invulnerables,
            "desiredCandidates": int(params.desired_candidates),
        },
        "polkadotXcm": {"safeXcmVersion": int(params.safe_xcm_version)},
        "session": {"keys": session},
        "balances": {"balances": balances},
        "sudo": {"key": resolved.root_account.hex()},
        "evm": {"accounts": evm_genesis_accounts(resolved.endowed_accounts, balance)},
        "baseFee": {},
        "evmChainId": {"chainId": int(profile.evm_chain_id)},
    }

    check_genesis_consistency(doc)

    if profile.diagnostics:
        log_event(
            log,
            "genesis_assembled",
            chain=profile.chain_identifier,
            parachain_id=int(profile.parachain_id),
            authorities=len(invulnerables),
            endowed_accounts=len(balances),
            sudo=resolved.root_account.hex(),
        )
    return doc


def check_genesis_consistency(doc: Json) -> None:
    """Re-verify the cross-section invariants of a genesis patch.

    Raises ConsistencyViolation when:
      - balances and evm accounts cover different account sets
      - an account's evm balance differs from its native balance
      - a balances/invulnerables entry is duplicated
      - an invulnerable is not its own session owner and controller
    """
    balances = doc.get("balances", {}).get("balances", [])
    native: Dict[str, int] = {}
    for acct, amount in balances:
        if acct in native:
            raise ConsistencyViolation("duplicate_balance", "account endowed twice", acct)
        native[acct] = int(amount)

    evm = doc.get("evm", {}).get("accounts", {})
    if set(native) != set(evm):
        missing = sorted(set(native) ^ set(evm))
        raise ConsistencyViolation("evm_balance_set_mismatch", "balances and evm accounts differ", missing)
    for acct, amount in native.items():
        evm_balance = int(str(evm[acct].get("balance", "0x0")), 16)
        if evm_balance != amount:
            raise ConsistencyViolation("evm_balance_mismatch", f"{amount} != {evm_balance}", acct)

    invulnerables = doc.get("collatorSelection", {}).get("invulnerables", [])
    if len(set(invulnerables)) != len(invulnerables):
        raise ConsistencyViolation("duplicate_invulnerable", "invulnerable listed twice")

    owners: Dict[str, str] = {}
    for owner, controller, _keys in doc.get("session", {}).get("keys", []):
        owners[owner] = controller
    for acct in invulnerables:
        if acct not in owners:
            raise ConsistencyViolation("invulnerable_without_session", "invulnerable has no session keys", acct)
        if owners[acct] != acct:
            raise ConsistencyViolation("session_controller_mismatch", "owner and controller differ", acct)
