# src/niskala/chain/__init__.py
"""
Chain-spec construction:
  - account: 20-byte account ids and key projections
  - profile: EnvironmentProfile value + pure defaults + startup resolution
  - environments: the built-in dev / live profiles
  - profile_file: extra environments from YAML/JSON
  - genesis: genesis patch assembly and invariant checks
  - chain_spec: plain JSON chain-spec document
"""
