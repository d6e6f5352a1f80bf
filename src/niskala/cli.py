# src/niskala/cli.py
from __future__ import annotations

"""Command line entry point.

Usage:
  niskala-spec build-spec --chain dev --wasm ./niskala_runtime.wasm > dev.json
  niskala-spec build-spec --chain ./staging.yaml --wasm ./runtime.wasm --output staging.json
  niskala-spec inspect-key Charlie

Environment:
  NISKALA_BUILD_CONFIG_PATH  JSON/YAML build config (see niskala.config)
  NISKALA_WASM_PATH          default runtime blob
  NISKALA_LOG_LEVEL          log level (default INFO)
  NISKALA_DOTENV_PATH        .env file to load first (default ./.env)
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from niskala.chain.account import account_id_from_authority_key, account_id_from_evm_key
from niskala.chain.chain_spec import build_chain_spec, to_json
from niskala.chain.environments import ENVIRONMENTS, get_environment
from niskala.chain.profile import EnvironmentProfile, validate_registry
from niskala.chain.profile_file import load_profile_file
from niskala.config import BuildConfig, load_build_config
from niskala.crypto.keys import derive_authority_key, derive_evm_key
from niskala.crypto.ss58 import GENERIC_SUBSTRATE_PREFIX
from niskala.env import load_dotenv_if_present
from niskala.errors import ConfigurationError, NiskalaError
from niskala.structured_logging import configure_structured_logging, log_event

log = logging.getLogger("niskala.cli")

_PROFILE_SUFFIXES = {".yaml", ".yml", ".json"}


def select_profile(chain: str) -> EnvironmentProfile:
    """Environment tag ("dev", "live") or path to a profile file.

    File profiles must not reuse the identity of a built-in environment.
    """
    p = Path(chain)
    if p.suffix.lower() in _PROFILE_SUFFIXES:
        prof = load_profile_file(str(p))
        validate_registry([*ENVIRONMENTS.values(), prof])
        return prof
    return get_environment(chain)


def _read_code(cfg: BuildConfig) -> bytes:
    if not cfg.wasm_path:
        raise ConfigurationError("missing_runtime_code", "no runtime blob; pass --wasm or set NISKALA_WASM_PATH")
    return Path(cfg.wasm_path).read_bytes()


def cmd_build_spec(args: argparse.Namespace) -> int:
    cfg = load_build_config(
        config_path=args.config,
        chain=args.chain,
        wasm_path=args.wasm,
        output_path=args.output,
        log_level=args.log_level,
    )
    configure_structured_logging(cfg.log_level)

    profile = select_profile(cfg.chain)
    spec = build_chain_spec(
        profile,
        _read_code(cfg),
        params=cfg.genesis_params(),
        telemetry_url=cfg.telemetry_url,
    )
    text = to_json(spec)

    if cfg.output_path:
        out = Path(cfg.output_path)
        out.write_text(text, encoding="utf-8")
        log_event(log, "chain_spec_written", path=str(out), bytes=len(text))
    else:
        sys.stdout.write(text)
    return 0


def cmd_inspect_key(args: argparse.Namespace) -> int:
    authority = derive_authority_key(args.seed)
    evm = derive_evm_key(args.seed)
    out = {
        "seed": args.seed,
        "sr25519": {
            "public": authority.hex(),
            "ss58": authority.to_ss58(int(args.prefix)),
            "account_id": account_id_from_authority_key(authority).hex(),
        },
        "ecdsa": {
            "public": evm.hex(),
            "account_id": account_id_from_evm_key(evm).hex(),
        },
    }
    sys.stdout.write(json.dumps(out, sort_keys=True, indent=2) + "\n")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="niskala-spec", description="Niskala chain-spec builder")
    sub = ap.add_subparsers(dest="command", required=True)

    bs = sub.add_parser("build-spec", help="Render a plain JSON chain spec")
    bs.add_argument("--chain", default=None, help="environment tag (dev, live) or profile file path")
    bs.add_argument("--wasm", default=None, help="path to the compiled runtime blob")
    bs.add_argument("--output", default=None, help="write here instead of stdout")
    bs.add_argument("--config", default=None, help="JSON/YAML build config")
    bs.add_argument("--log-level", dest="log_level", default=None)
    bs.set_defaults(func=cmd_build_spec)

    ik = sub.add_parser("inspect-key", help="Show keys and account ids derived from a development seed")
    ik.add_argument("seed")
    ik.add_argument("--prefix", type=int, default=GENERIC_SUBSTRATE_PREFIX, help="ss58 prefix for display")
    ik.set_defaults(func=cmd_inspect_key)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    # Load .env early so NISKALA_* vars exist before anything reads them.
    load_dotenv_if_present()
    configure_structured_logging()

    args = build_parser().parse_args(argv)
    try:
        return int(args.func(args))
    except NiskalaError as e:
        log_event(log, "spec_build_failed", level=logging.ERROR, code=e.code, reason=e.reason, details=e.details)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
