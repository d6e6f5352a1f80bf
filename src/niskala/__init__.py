# src/niskala/__init__.py
"""
Niskala — genesis chain-spec builder

  - crypto: seed derivation (sr25519 / secp256k1) and SS58 addresses
  - chain.account: 20-byte account ids
  - chain.profile / chain.environments: per-environment parameters
  - chain.genesis: genesis patch assembly + invariant checks
  - chain.chain_spec: plain JSON chain-spec document
"""

__version__ = "0.1.0"
