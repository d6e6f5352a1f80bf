# src/niskala/config.py
from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from niskala.chain.constants import DEFAULT_TELEMETRY_URL, EXISTENTIAL_DEPOSIT, SAFE_XCM_VERSION
from niskala.chain.genesis import GenesisParams
from niskala.errors import ConfigurationError

Json = Dict[str, Any]


def _as_int(v: Any, default: int, *, name: str) -> int:
    if v is None:
        return int(default)
    if isinstance(v, bool):
        raise ConfigurationError("bad_config", f"{name} must be an int; got bool")
    try:
        return int(v)
    except (TypeError, ValueError) as e:
        raise ConfigurationError("bad_config", f"{name} must be an int; got {v!r}") from e


def _as_str(v: Any, default: str) -> str:
    if v is None:
        return str(default)
    s = str(v)
    return s if s.strip() else str(default)


def _as_opt_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v).strip()
    return s or None


@dataclass(frozen=True)
class BuildConfig:
    chain: str  # environment tag or path to a profile file

    # Compiled runtime blob embedded into the chain spec.
    wasm_path: Optional[str]
    # None writes to stdout.
    output_path: Optional[str]

    telemetry_url: str
    safe_xcm_version: int
    existential_deposit: int

    log_level: str

    def genesis_params(self) -> GenesisParams:
        return GenesisParams(
            existential_deposit=int(self.existential_deposit),
            safe_xcm_version=int(self.safe_xcm_version),
        )


_ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def validate_build_config(cfg: BuildConfig) -> None:
    """Fail-fast validation; every problem is a ConfigurationError."""

    if not isinstance(cfg.chain, str) or not cfg.chain.strip():
        raise ConfigurationError("bad_config", "chain must be a non-empty string")

    if not str(cfg.telemetry_url).startswith(("ws://", "wss://")):
        raise ConfigurationError("bad_config", f"telemetry_url must be a ws(s) url; got {cfg.telemetry_url!r}")

    if int(cfg.safe_xcm_version) <= 0:
        raise ConfigurationError("bad_config", f"safe_xcm_version must be > 0; got {cfg.safe_xcm_version}")

    if int(cfg.existential_deposit) < 0:
        raise ConfigurationError("bad_config", f"existential_deposit must be >= 0; got {cfg.existential_deposit}")

    if str(cfg.log_level).upper() not in _ALLOWED_LOG_LEVELS:
        raise ConfigurationError("bad_config", f"log_level must be one of {sorted(_ALLOWED_LOG_LEVELS)}")

    if cfg.wasm_path is not None and not Path(cfg.wasm_path).is_file():
        raise ConfigurationError("missing_runtime_code", "wasm_path does not exist or is not a file", cfg.wasm_path)


def default_build_config() -> BuildConfig:
    return BuildConfig(
        chain="dev",
        wasm_path=os.environ.get("NISKALA_WASM_PATH") or None,
        output_path=None,
        telemetry_url=DEFAULT_TELEMETRY_URL,
        safe_xcm_version=SAFE_XCM_VERSION,
        existential_deposit=EXISTENTIAL_DEPOSIT,
        log_level=(os.environ.get("NISKALA_LOG_LEVEL") or "INFO").strip().upper(),
    )


def _read_raw(p: Path) -> Json:
    if not p.is_file():
        raise ConfigurationError("missing_config", "build config file not found", str(p))
    text = p.read_text(encoding="utf-8")
    try:
        raw = json.loads(text) if p.suffix.lower() == ".json" else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError("bad_config", f"cannot parse {p.name}", str(e)) from e
    if not isinstance(raw, dict):
        raise ConfigurationError("bad_config", "build config must be a mapping")
    return raw


def read_build_config_file(path: str) -> BuildConfig:
    raw = _read_raw(Path(path))
    d = default_build_config()

    cfg = BuildConfig(
        chain=_as_str(raw.get("chain"), d.chain),
        wasm_path=_as_opt_str(raw.get("wasm_path")) or d.wasm_path,
        output_path=_as_opt_str(raw.get("output_path")),
        telemetry_url=_as_str(raw.get("telemetry_url"), d.telemetry_url),
        safe_xcm_version=_as_int(raw.get("safe_xcm_version"), d.safe_xcm_version, name="safe_xcm_version"),
        existential_deposit=_as_int(raw.get("existential_deposit"), d.existential_deposit, name="existential_deposit"),
        log_level=_as_str(raw.get("log_level"), d.log_level).upper(),
    )

    validate_build_config(cfg)
    return cfg


def load_build_config(*, config_path: Optional[str] = None, **overrides: Any) -> BuildConfig:
    """defaults -> config file (arg or NISKALA_BUILD_CONFIG_PATH) -> overrides.

    Overrides set to None are ignored so CLI flags can be passed through as-is.
    """
    p = config_path or os.environ.get("NISKALA_BUILD_CONFIG_PATH")
    cfg = read_build_config_file(p) if p else default_build_config()

    updates = {k: v for k, v in overrides.items() if v is not None}
    if updates:
        unknown = set(updates) - set(BuildConfig.__dataclass_fields__)
        if unknown:
            raise ConfigurationError("bad_config", f"unknown config keys: {sorted(unknown)}")
        cfg = replace(cfg, **updates)

    validate_build_config(cfg)
    return cfg
