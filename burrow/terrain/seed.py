"""Level seed derivation.

A human-readable seed string is hashed with SHA-256; the digest feeds a
``random.Random`` so every phase of a level draws from one deterministic
stream.
"""
from __future__ import annotations

import hashlib
import random
import secrets
from typing import Union


class Seed:
    __slots__ = ("raw", "_hash")

    def __init__(self, raw: str):
        self.raw = raw
        self._hash = hashlib.sha256(raw.encode("utf-8")).digest()

    @classmethod
    def coerce(cls, value: Union["Seed", str, int, None]) -> "Seed":
        """Accept a Seed, str or int; ``None`` or blank picks a random seed string."""
        if isinstance(value, Seed):
            return value
        if value is None:
            return cls(secrets.token_hex(8))
        if isinstance(value, int):
            return cls(str(value))
        s = str(value).strip()
        if not s:
            return cls(secrets.token_hex(8))
        return cls(s)

    def to_32_bit(self) -> int:
        """First four digest bytes as a big-endian unsigned int."""
        return int.from_bytes(self._hash[:4], "big")

    def to_256_bit(self) -> bytes:
        return self._hash

    def make_rng(self) -> random.Random:
        return random.Random(int.from_bytes(self._hash, "big"))

    @property
    def hexdigest(self) -> str:
        return self._hash.hex()

    def __eq__(self, other):
        if not isinstance(other, Seed):
            return NotImplemented
        return self.raw == other.raw

    def __hash__(self):
        return hash(self.raw)

    def __repr__(self):
        return f"Seed({self.raw!r})"


__all__ = ["Seed"]
