from __future__ import annotations

import re
import secrets
from dataclasses import dataclass

from httpsocket.errors import MalformedIdentifierError

_HEX128_RE = re.compile(r'^[0-9A-Fa-f]{32}$')
_MASK64 = (1 << 64) - 1


@dataclass(frozen=True, order=True)
class Identifier:
    """
    A 128-bit connection identifier.

    The wire form is exactly 32 hex digits; str() always yields lowercase,
    so parse(str(x)) == x.
    """
    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or not 0 <= self.value < (1 << 128):
            raise MalformedIdentifierError(f"Identifier out of range: {self.value!r}")

    @classmethod
    def parse(cls, text: str) -> 'Identifier':
        """Parse the 32-hex-digit form, raising MalformedIdentifierError otherwise"""
        if not isinstance(text, str):
            raise MalformedIdentifierError(f"Identifier must be a string, got {type(text).__name__}")
        stripped = text.strip()
        if not _HEX128_RE.fullmatch(stripped):
            raise MalformedIdentifierError(f"Invalid identifier: {text!r}")
        return cls(int(stripped, 16))

    @classmethod
    def random(cls) -> 'Identifier':
        return cls(secrets.randbits(128))

    @property
    def hi(self) -> int:
        return self.value >> 64

    @property
    def lo(self) -> int:
        return self.value & _MASK64

    def __str__(self) -> str:
        return f"{self.value:032x}"
