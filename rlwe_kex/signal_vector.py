"""
SignalVector — 128 booleans
============================
Carries both the reconciliation signal w and the derived secret bits.

Wire form: 16 bytes, bit i in byte i // 8 at position i % 8 (LSB first).
Debug form: one glyph per bit, '*' for set and ' ' for clear.
"""

from typing import Iterable

from .params import N

SET_GLYPH   = "*"
CLEAR_GLYPH = " "


class SignalVector:
    """Immutable, hashable vector of exactly 128 bools."""

    SIZE = N

    def __init__(self, bits: Iterable):
        values = tuple(bool(b) for b in bits)
        if len(values) != self.SIZE:
            raise ValueError(
                f"SignalVector needs {self.SIZE} bits, got {len(values)}")
        self._bits = values

    @classmethod
    def zeros(cls) -> "SignalVector":
        return cls([False] * cls.SIZE)

    @classmethod
    def ones(cls) -> "SignalVector":
        return cls([True] * cls.SIZE)

    @classmethod
    def from_bytes(cls, data: bytes) -> "SignalVector":
        if len(data) != cls.SIZE // 8:
            raise ValueError(
                f"encoded SignalVector must be {cls.SIZE // 8} bytes, got {len(data)}")
        return cls((data[i // 8] >> (i % 8)) & 1 for i in range(cls.SIZE))

    @property
    def bits(self) -> tuple:
        return self._bits

    def __len__(self):
        return self.SIZE

    def __iter__(self):
        return iter(self._bits)

    def __getitem__(self, i):
        return self._bits[i]

    def __xor__(self, other):
        if not isinstance(other, SignalVector):
            return NotImplemented
        return SignalVector(a != b for a, b in zip(self._bits, other._bits))

    def count(self) -> int:
        """Number of set bits."""
        return sum(self._bits)

    def any(self) -> bool:
        return any(self._bits)

    def to_bytes(self) -> bytes:
        out = bytearray(self.SIZE // 8)
        for i, b in enumerate(self._bits):
            if b:
                out[i // 8] |= 1 << (i % 8)
        return bytes(out)

    def render(self) -> str:
        return "".join(SET_GLYPH if b else CLEAR_GLYPH for b in self._bits)

    def __str__(self):
        return self.render()

    def __repr__(self):
        return f"SignalVector({self.to_bytes().hex()})"

    def __eq__(self, other):
        if not isinstance(other, SignalVector):
            return NotImplemented
        return self._bits == other._bits

    def __hash__(self):
        return hash(self._bits)
