# src/niskala/crypto/ss58.py
from __future__ import annotations

"""SS58 address codec.

Layout of the decoded base58 payload:

  <prefix: 1 or 2 bytes> <public key: 32 bytes> <checksum: 2 bytes>

checksum = blake2b-512(b"SS58PRE" + prefix + key)[:2]

Prefixes 0..63 use a single byte; 64..16383 use the two-byte form.
"""

import hashlib
from typing import Optional, Tuple

import base58

from niskala.errors import DecodeError

GENERIC_SUBSTRATE_PREFIX = 42

_SS58_PRE = b"SS58PRE"
_KEY_LEN = 32
_CHECKSUM_LEN = 2
_MAX_PREFIX = 16383


def _checksum(body: bytes) -> bytes:
    return hashlib.blake2b(_SS58_PRE + body, digest_size=64).digest()[:_CHECKSUM_LEN]


def _encode_prefix(prefix: int) -> bytes:
    if prefix < 0 or prefix > _MAX_PREFIX:
        raise ValueError(f"ss58 prefix out of range: {prefix}")
    if prefix < 64:
        return bytes([prefix])
    first = ((prefix & 0b0000_0000_1111_1100) >> 2) | 0b0100_0000
    second = (prefix >> 8) | ((prefix & 0b0000_0000_0000_0011) << 6)
    return bytes([first, second])


def _decode_prefix(data: bytes) -> Tuple[int, int]:
    """Return (prefix, prefix_len)."""
    if not data:
        raise DecodeError("bad_length", "empty payload")
    b0 = data[0]
    if b0 < 64:
        return b0, 1
    if b0 < 128:
        if len(data) < 2:
            raise DecodeError("bad_length", "truncated two-byte prefix")
        b1 = data[1]
        lower = ((b0 << 2) | (b1 >> 6)) & 0xFF
        upper = b1 & 0b0011_1111
        return lower | (upper << 8), 2
    raise DecodeError("bad_prefix", "reserved prefix byte", b0)


def ss58_encode(key: bytes, prefix: int = GENERIC_SUBSTRATE_PREFIX) -> str:
    if len(key) != _KEY_LEN:
        raise ValueError(f"ss58 key must be {_KEY_LEN} bytes; got {len(key)}")
    body = _encode_prefix(int(prefix)) + bytes(key)
    return base58.b58encode(body + _checksum(body)).decode("ascii")


def ss58_decode(text: str, *, expected_prefix: Optional[int] = None) -> Tuple[int, bytes]:
    """Decode SS58 text into (prefix, 32-byte public key).

    Raises DecodeError on any malformed input.
    """
    s = (text or "").strip()
    if not s:
        raise DecodeError("empty_address", "address text is empty")

    try:
        data = base58.b58decode(s)
    except ValueError as e:
        raise DecodeError("bad_base58", "address is not valid base58", s) from e

    prefix, prefix_len = _decode_prefix(data)
    if len(data) != prefix_len + _KEY_LEN + _CHECKSUM_LEN:
        raise DecodeError("bad_length", f"decoded address has {len(data)} bytes", s)

    body = data[: prefix_len + _KEY_LEN]
    if _checksum(body) != data[prefix_len + _KEY_LEN :]:
        raise DecodeError("bad_checksum", "address checksum mismatch", s)

    if expected_prefix is not None and prefix != int(expected_prefix):
        raise DecodeError("bad_prefix", f"expected prefix {expected_prefix}, got {prefix}", s)

    return prefix, bytes(data[prefix_len:prefix_len + _KEY_LEN])
