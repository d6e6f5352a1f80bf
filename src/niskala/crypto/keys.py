# src/niskala/crypto/keys.py
from __future__ import annotations

"""Deterministic key derivation from secret URIs.

Supported secret URI shapes (Substrate conventions):

  "Charlie"                   -> "//Charlie" on the development phrase
  "//Charlie"                 -> hard junction on the development phrase
  "<12..24 words>//a/b///pw"  -> phrase, hard/soft junctions, password
  "0x<64 hex>//a"             -> raw 32-byte seed, then junctions

Schemes:
  - sr25519: consensus authority (Aura) keys, soft and hard junctions
  - ecdsa (secp256k1): EVM-compatible keys, hard junctions only

WARNING: every key produced from the development phrase is public knowledge.
These helpers exist to bootstrap local networks and tests, never to hold
production funds.
"""

import hashlib
import re
from dataclasses import dataclass
from typing import Final, List, Optional, Tuple

import sr25519
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from mnemonic import Mnemonic

from niskala.crypto.ss58 import GENERIC_SUBSTRATE_PREFIX, ss58_decode, ss58_encode
from niskala.errors import ConfigurationError

DEV_PHRASE: Final[str] = "bottom drive obey lake curtain smoke basket hold race lonely fit walk"

_JUNCTION_ID_LEN = 32
_SECRET_URI_RE = re.compile(r"^(?P<phrase>[\d\w ]+)?(?P<path>(//?[^/]+)*)(///(?P<password>.*))?$")
_JUNCTION_RE = re.compile(r"/(/?[^/]+)")
_SECP256K1_HDKD = "Secp256k1HDKD"


@dataclass(frozen=True, slots=True)
class AuthorityKey:
    """sr25519 public key identifying a block producer."""

    raw: bytes

    def __post_init__(self) -> None:
        if len(self.raw) != 32:
            raise ConfigurationError("bad_authority_key", f"sr25519 public key must be 32 bytes; got {len(self.raw)}")

    def __bytes__(self) -> bytes:
        return self.raw

    def hex(self) -> str:
        return "0x" + self.raw.hex()

    def to_ss58(self, prefix: int = GENERIC_SUBSTRATE_PREFIX) -> str:
        return ss58_encode(self.raw, prefix)


@dataclass(frozen=True, slots=True)
class EvmKey:
    """secp256k1 public key in its raw (compressed or uncompressed) form."""

    raw: bytes

    def __post_init__(self) -> None:
        if len(self.raw) < 20:
            raise ConfigurationError("bad_evm_key", f"ecdsa public key too short: {len(self.raw)} bytes")

    def __bytes__(self) -> bytes:
        return self.raw

    def hex(self) -> str:
        return "0x" + self.raw.hex()


@dataclass(frozen=True, slots=True)
class Junction:
    chain_code: bytes
    hard: bool


@dataclass(frozen=True, slots=True)
class SecretUri:
    phrase: str
    junctions: Tuple[Junction, ...]
    password: str


def _compact_len(n: int) -> bytes:
    if n < 1 << 6:
        return bytes([n << 2])
    if n < 1 << 14:
        return ((n << 2) | 0b01).to_bytes(2, "little")
    if n < 1 << 30:
        return ((n << 2) | 0b10).to_bytes(4, "little")
    raise ValueError("junction too long")


def _scale_str(s: str) -> bytes:
    b = s.encode("utf-8")
    return _compact_len(len(b)) + b


def _blake2_256(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=32).digest()


def junction_chain_code(name: str) -> bytes:
    """SCALE-encode a junction name into its 32-byte chain code.

    Numeric names encode as u64 little endian, everything else as a SCALE
    string. Encodings longer than 32 bytes are blake2-256 hashed.
    """
    if name.isascii() and name.isdigit() and int(name) < 1 << 64:
        encoded = int(name).to_bytes(8, "little")
    else:
        encoded = _scale_str(name)
    if len(encoded) > _JUNCTION_ID_LEN:
        return _blake2_256(encoded)
    return encoded.ljust(_JUNCTION_ID_LEN, b"\x00")


def parse_secret_uri(suri: str) -> SecretUri:
    s = str(suri or "")
    if s and not s.startswith("/") and "/" not in s and " " not in s and not s.startswith("0x"):
        # Bare well-known name.
        s = f"//{s}"

    m = _SECRET_URI_RE.match(s)
    if m is None:
        raise ConfigurationError("bad_secret_uri", "secret uri does not parse", suri)

    phrase = (m.group("phrase") or "").strip() or DEV_PHRASE
    junctions: List[Junction] = []
    for part in _JUNCTION_RE.findall(m.group("path") or ""):
        hard = part.startswith("/")
        name = part[1:] if hard else part
        junctions.append(Junction(chain_code=junction_chain_code(name), hard=hard))

    return SecretUri(phrase=phrase, junctions=tuple(junctions), password=m.group("password") or "")


def mini_secret_from_phrase(phrase: str, password: str = "") -> bytes:
    """BIP39 entropy -> 32-byte mini secret.

    Substrate feeds the mnemonic *entropy* (not the phrase) into
    PBKDF2-HMAC-SHA512 with salt "mnemonic" + password and keeps the first
    32 bytes of the 64-byte output.
    """
    if phrase.startswith("0x"):
        try:
            seed = bytes.fromhex(phrase[2:])
        except ValueError as e:
            raise ConfigurationError("bad_seed_hex", "hex seed is not valid hex") from e
        if len(seed) != 32:
            raise ConfigurationError("bad_seed_hex", f"hex seed must be 32 bytes; got {len(seed)}")
        return seed

    try:
        entropy = bytes(Mnemonic("english").to_entropy(phrase))
    except (ValueError, LookupError) as e:
        raise ConfigurationError("bad_mnemonic", "phrase is not a valid BIP39 mnemonic") from e

    salt = ("mnemonic" + password).encode("utf-8")
    return hashlib.pbkdf2_hmac("sha512", entropy, salt, 2048, dklen=64)[:32]


def sr25519_keypair_from_uri(suri: str) -> Tuple[bytes, bytes]:
    """Return (public, secret) for an sr25519 secret URI."""
    parsed = parse_secret_uri(suri)
    public, secret = sr25519.pair_from_seed(mini_secret_from_phrase(parsed.phrase, parsed.password))
    for j in parsed.junctions:
        derive = sr25519.hard_derive_keypair if j.hard else sr25519.derive_keypair
        _, public, secret = derive((j.chain_code, public, secret), b"")
    return bytes(public), bytes(secret)


def _ecdsa_hard_derive(seed: bytes, chain_code: bytes) -> bytes:
    return _blake2_256(_scale_str(_SECP256K1_HDKD) + seed + chain_code)


def ecdsa_private_key_from_uri(suri: str) -> ec.EllipticCurvePrivateKey:
    parsed = parse_secret_uri(suri)
    seed = mini_secret_from_phrase(parsed.phrase, parsed.password)
    for j in parsed.junctions:
        if not j.hard:
            raise ConfigurationError("soft_junction", "ecdsa keys support hard junctions only", suri)
        seed = _ecdsa_hard_derive(seed, j.chain_code)
    try:
        return ec.derive_private_key(int.from_bytes(seed, "big"), ec.SECP256K1())
    except ValueError as e:
        raise ConfigurationError("bad_ecdsa_seed", "derived seed is not a valid secp256k1 scalar", suri) from e


def derive_authority_key(seed: str) -> AuthorityKey:
    """sr25519 authority key for a development seed. Not for production secrets."""
    public, _ = sr25519_keypair_from_uri(seed)
    return AuthorityKey(public)


def derive_evm_key(seed: str, *, compressed: bool = True) -> EvmKey:
    """secp256k1 public key for a development seed. Not for production secrets."""
    fmt = serialization.PublicFormat.CompressedPoint if compressed else serialization.PublicFormat.UncompressedPoint
    pub = ecdsa_private_key_from_uri(seed).public_key()
    return EvmKey(pub.public_bytes(serialization.Encoding.X962, fmt))


def decode_authority_address(text: str, *, expected_prefix: Optional[int] = None) -> AuthorityKey:
    """Decode an SS58 address into an authority key. Raises DecodeError."""
    _, raw = ss58_decode(text, expected_prefix=expected_prefix)
    return AuthorityKey(raw)


def encode_authority_address(key: AuthorityKey, prefix: int = GENERIC_SUBSTRATE_PREFIX) -> str:
    return ss58_encode(key.raw, prefix)


__all__ = [
    "AuthorityKey",
    "DEV_PHRASE",
    "EvmKey",
    "decode_authority_address",
    "derive_authority_key",
    "derive_evm_key",
    "encode_authority_address",
    "parse_secret_uri",
]
