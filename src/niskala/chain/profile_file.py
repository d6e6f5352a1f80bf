# src/niskala/chain/profile_file.py
from __future__ import annotations

"""Extra environments declared in YAML or JSON files.

Example (YAML):

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
  endowed_accounts:
    - account: "0xCea1fA4027315dEfC217054bc16c97C3527d9A0E"
  root_account:
    account: "0xCea1fA4027315dEfC217054bc16c97C3527d9A0E"

Only the required fields must be present; optional ones fall back to the
same defaults the built-in environments use.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from niskala.chain.constants import SS58_FORMAT, TOKEN_DECIMALS, UNIT
from niskala.chain.profile import (
    AccountSource,
    ChainType,
    EncodedKey,
    EnvironmentProfile,
    KeySource,
    LiteralAccount,
    SeedAccount,
    SeedKey,
)
from niskala.errors import ConfigurationError


class _StrictModel(BaseModel):
    """Strict model: reject unknown keys."""

    model_config = ConfigDict(extra="forbid")


class KeySourceModel(_StrictModel):
    seed: Optional[str] = None
    address: Optional[str] = None

    @model_validator(mode="after")
    def _exactly_one(self) -> "KeySourceModel":
        if (self.seed is None) == (self.address is None):
            raise ValueError("authority needs exactly one of 'seed' or 'address'")
        return self

    def to_source(self) -> KeySource:
        if self.seed is not None:
            return SeedKey(self.seed)
        return EncodedKey(str(self.address))


class AccountSourceModel(_StrictModel):
    seed: Optional[str] = None
    account: Optional[str] = None

    @model_validator(mode="after")
    def _exactly_one(self) -> "AccountSourceModel":
        if (self.seed is None) == (self.account is None):
            raise ValueError("account needs exactly one of 'seed' or 'account'")
        return self

    def to_source(self) -> AccountSource:
        if self.seed is not None:
            return SeedAccount(self.seed)
        return LiteralAccount(str(self.account))


class ProfileFileModel(_StrictModel):
    chain_name: str = Field(..., min_length=1)
    chain_identifier: str = Field(..., min_length=1)
    chain_type: ChainType
    protocol_id: str = Field(..., min_length=1)
    fork_id: str = Field(..., min_length=1)
    relay_chain: str = Field(..., min_length=1)
    parachain_id: int = Field(..., gt=0)

    token_symbol: str = Field(..., min_length=1)
    token_decimals: int = Field(default=TOKEN_DECIMALS, ge=0, le=255)
    evm_chain_id: int = Field(..., gt=0)

    # Exactly one of these: whole UNITs or raw base units.
    initial_balance_units: Optional[int] = Field(default=None, ge=0)
    initial_balance: Optional[int] = Field(default=None, ge=0)

    initial_authorities: List[KeySourceModel] = Field(..., min_length=1)
    endowed_accounts: List[AccountSourceModel] = Field(..., min_length=1)
    root_account: AccountSourceModel

    bootnodes: List[str] = Field(default_factory=list)
    telemetry: Optional[List[Tuple[str, int]]] = None
    properties: Dict[str, Union[str, int, bool]] = Field(default_factory=dict)
    ss58_format: int = Field(default=SS58_FORMAT, ge=0, le=16383)
    diagnostics: bool = True

    @model_validator(mode="after")
    def _one_balance(self) -> "ProfileFileModel":
        if (self.initial_balance is None) == (self.initial_balance_units is None):
            raise ValueError("set exactly one of 'initial_balance' or 'initial_balance_units'")
        return self

    def to_profile(self) -> EnvironmentProfile:
        if self.initial_balance is not None:
            balance = int(self.initial_balance)
        else:
            balance = int(self.initial_balance_units or 0) * UNIT
        return EnvironmentProfile(
            chain_name=self.chain_name,
            chain_identifier=self.chain_identifier,
            chain_type=self.chain_type,
            protocol_id=self.protocol_id,
            fork_id=self.fork_id,
            relay_chain=self.relay_chain,
            parachain_id=self.parachain_id,
            token_symbol=self.token_symbol,
            token_decimals=self.token_decimals,
            evm_chain_id=self.evm_chain_id,
            initial_balance=balance,
            initial_authorities=tuple(a.to_source() for a in self.initial_authorities),
            endowed_accounts=tuple(a.to_source() for a in self.endowed_accounts),
            root_account=self.root_account.to_source(),
            bootnodes=tuple(self.bootnodes),
            telemetry=tuple(self.telemetry) if self.telemetry is not None else None,
            properties=dict(self.properties),
            ss58_format=self.ss58_format,
            diagnostics=self.diagnostics,
        )


def parse_profile_obj(obj: Any) -> EnvironmentProfile:
    if not isinstance(obj, dict):
        raise ConfigurationError("invalid_profile_file", "profile must be a mapping")
    try:
        return ProfileFileModel.model_validate(obj).to_profile()
    except ValidationError as e:
        raise ConfigurationError("invalid_profile_file", "profile failed schema validation", e.errors()) from e


def load_profile_file(path: str) -> EnvironmentProfile:
    p = Path(path)
    if not p.is_file():
        raise ConfigurationError("missing_profile_file", "profile file not found", str(p))

    raw = p.read_text(encoding="utf-8")
    try:
        if p.suffix.lower() == ".json":
            obj = json.loads(raw)
        else:
            obj = yaml.safe_load(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError("invalid_profile_file", f"cannot parse {p.name}", str(e)) from e

    return parse_profile_obj(obj)
