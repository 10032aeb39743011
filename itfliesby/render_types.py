"""Colour values shared by the renderer: packed 8-bit and normalized float."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass

__all__ = [
    "NORMALIZING_FACTOR",
    "ColorHex",
    "ColorNormalized",
    "normalize_color",
    "color_to_hex",
]

# One over 255, as the renderer stores it.
NORMALIZING_FACTOR = 0.00392157

_U32_MAX = 0xFFFFFFFF


def _f32(value: float) -> float:
    """Round a float to single precision, as the GPU-facing data is stored."""
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _channel(name: str, value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= 255:
        raise ValueError(f"{name} must be an integer in 0..255, not {value!r}")
    return value


@dataclass(frozen=True)
class ColorHex:
    """An RGBA colour with one byte per channel."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 0

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            _channel(name, getattr(self, name))

    @property
    def value(self) -> int:
        """The four channels packed into one 32-bit value, red in the low byte."""
        return self.r | (self.g << 8) | (self.b << 16) | (self.a << 24)

    @classmethod
    def from_value(cls, value: int) -> ColorHex:
        """Unpack a 32-bit value whose low byte is red."""
        if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= _U32_MAX:
            raise ValueError(f"packed colour must be a 32-bit unsigned integer, not {value!r}")
        return cls(
            value & 0xFF,
            (value >> 8) & 0xFF,
            (value >> 16) & 0xFF,
            (value >> 24) & 0xFF,
        )

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)


@dataclass(frozen=True)
class ColorNormalized:
    """An RGBA colour with single-precision channels, nominally in 0..1."""

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 0.0

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            object.__setattr__(self, name, _f32(float(getattr(self, name))))

    @property
    def data(self) -> tuple[float, float, float, float]:
        """The channels in the order they are uploaded."""
        return (self.r, self.g, self.b, self.a)


def normalize_color(color_hex: ColorHex) -> ColorNormalized:
    """Scale each byte channel into the 0..1 range."""
    return ColorNormalized(
        color_hex.r * NORMALIZING_FACTOR,
        color_hex.g * NORMALIZING_FACTOR,
        color_hex.b * NORMALIZING_FACTOR,
        color_hex.a * NORMALIZING_FACTOR,
    )


def _to_byte(name: str, value: float) -> int:
    scaled = _f32(value * 255)
    if not math.isfinite(scaled):
        raise ValueError(f"{name} channel {value!r} is not a finite number")
    byte = int(scaled)
    if not 0 <= byte <= 255:
        raise ValueError(f"{name} channel {value!r} is outside 0..1")
    return byte


def color_to_hex(color: ColorNormalized) -> ColorHex:
    """Scale each channel by 255 and truncate it to a byte."""
    return ColorHex(
        _to_byte("r", color.r),
        _to_byte("g", color.g),
        _to_byte("b", color.b),
        _to_byte("a", color.a),
    )