# src/niskala/crypto/__init__.py
"""Seed derivation (sr25519 / secp256k1) and SS58 address encoding."""
