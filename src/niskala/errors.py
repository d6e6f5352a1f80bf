# src/niskala/errors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class NiskalaError(Exception):
    """Base error type for chain-spec generation failures."""

    code: str
    reason: str
    details: Any | None = None

    def __str__(self) -> str:
        if self.details is None:
            return f"{self.code}:{self.reason}"
        return f"{self.code}:{self.reason}:{self.details}"


class ConfigurationError(NiskalaError):
    """Malformed constant, missing profile field, or invalid seed.

    Raised during the startup validation pass, before any assembly happens.
    """


class DecodeError(NiskalaError):
    """Encoded address text could not be decoded (checksum, prefix, length)."""


class ConsistencyViolation(NiskalaError):
    """Two derived views of the genesis document disagree."""
