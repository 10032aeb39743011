"""Shaders and the per-frame batches of quads that the renderer draws."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, Sequence

from .render_types import ColorHex, ColorNormalized

__all__ = [
    "SIMPLE_QUAD_BATCH_MAX",
    "SOLID_QUADS_MAX",
    "VERTICES_SQUARE_QUAD",
    "UV_SQUARE_QUAD",
    "INDICES_QUAD",
    "SIMPLE_QUAD_VERTEX_BUFFER",
    "SIMPLE_QUAD_UV_BUFFER",
    "UNIFORM_SOLID_QUAD_UPDATE",
    "UNIFORM_SOLID_QUAD_UPDATE_MODEL",
    "UNIFORM_SOLID_QUAD_UPDATE_COLOR",
    "UNIFORM_SOLID_QUAD_BINDING_POINT",
    "SIMPLE_QUAD_UNIFORM_TRANSFORM",
    "SIMPLE_QUAD_UNIFORM_COLOR",
    "SIMPLE_QUAD_UNIFORM_TEXTURE_SAMPLER",
    "BatchFullError",
    "ShaderType",
    "Shader",
    "SimpleQuad",
    "SimpleQuadBatch",
    "SolidQuadUpdate",
    "SolidQuadBatch",
]

SIMPLE_QUAD_BATCH_MAX = 32
SOLID_QUADS_MAX = 128

VERTICES_SQUARE_QUAD = (
    -0.5, 0.5,
    0.5, -0.5,
    -0.5, -0.5,
    0.5, 0.5,
)
UV_SQUARE_QUAD = (
    0.0, 1.0,
    1.0, 0.0,
    0.0, 0.0,
    1.0, 1.0,
)
INDICES_QUAD = (0, 1, 2, 0, 3, 1)

# Two triangles, non-indexed: top-left, bottom-left, bottom-right, then
# top-left, top-right, bottom-right.
SIMPLE_QUAD_VERTEX_BUFFER = (
    -0.5, 0.5,
    -0.5, -0.5,
    0.5, -0.5,
    -0.5, 0.5,
    0.5, 0.5,
    0.5, -0.5,
)
SIMPLE_QUAD_UV_BUFFER = (
    0.0, 1.0,
    0.0, 0.0,
    1.0, 0.0,
    0.0, 1.0,
    1.0, 1.0,
    1.0, 0.0,
)

UNIFORM_SOLID_QUAD_UPDATE = "solid_quad_update"
UNIFORM_SOLID_QUAD_UPDATE_MODEL = "model"
UNIFORM_SOLID_QUAD_UPDATE_COLOR = "color"
UNIFORM_SOLID_QUAD_BINDING_POINT = 0

SIMPLE_QUAD_UNIFORM_TRANSFORM = "transform"
SIMPLE_QUAD_UNIFORM_COLOR = "color"
SIMPLE_QUAD_UNIFORM_TEXTURE_SAMPLER = "texture_sampler"

_MAT3 = struct.Struct("<9f")
_MAT3_LEN = 9


class BatchFullError(Exception):
    """The batch cannot take the quads it was given."""


class ShaderType(IntEnum):
    INVALID = -1
    TEXTURED_QUAD = 0
    SOLID_QUAD = 1
    TEST = 2
    COUNT = 3


@dataclass
class Shader:
    """The ids of a linked program and its two stages; zero means absent."""

    gl_program_id: int = 0
    gl_stage_id_vertex: int = 0
    gl_stage_id_fragment: int = 0

    def is_valid(self) -> bool:
        return (
            self.gl_program_id > 0
            and self.gl_stage_id_vertex > 0
            and self.gl_stage_id_fragment > 0
        )


def _transform(values: Iterable[float]) -> tuple[float, ...]:
    values = tuple(float(v) for v in values)
    if len(values) != _MAT3_LEN:
        raise ValueError(f"a transform needs {_MAT3_LEN} values, got {len(values)}")
    if not all(math.isfinite(v) for v in values):
        raise ValueError("transform values must be finite")
    # Stored at single precision, as uploaded.
    return _MAT3.unpack(_MAT3.pack(*values))


@dataclass(frozen=True)
class SimpleQuad:
    """One textured quad: a row-major 3x3 transform, a colour and a texture id."""

    transform: tuple[float, ...]
    color: ColorNormalized = field(default_factory=ColorNormalized)
    texture: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "transform", _transform(self.transform))
        if not isinstance(self.texture, int) or self.texture < 0:
            raise ValueError(f"texture id must be a non-negative integer, not {self.texture!r}")


class SimpleQuadBatch:
    """Quads queued for the next frame, at most :data:`SIMPLE_QUAD_BATCH_MAX`."""

    def __init__(self) -> None:
        self._quads: list[SimpleQuad] = []

    def __len__(self) -> int:
        return len(self._quads)

    def __iter__(self):
        return iter(list(self._quads))

    @property
    def count(self) -> int:
        return len(self._quads)

    def push(self, quad: SimpleQuad) -> int:
        """Queue one quad and return its index in the batch."""
        if len(self._quads) == SIMPLE_QUAD_BATCH_MAX:
            raise BatchFullError(f"batch already holds {SIMPLE_QUAD_BATCH_MAX} quads")
        self._quads.append(quad)
        return len(self._quads) - 1

    def push_batch(self, quads: Sequence[SimpleQuad]) -> list[int]:
        """Queue several quads at once and return their indices.

        The whole group is refused unless it leaves the batch below its limit.
        """
        quads = list(quads)
        if len(self._quads) + len(quads) >= SIMPLE_QUAD_BATCH_MAX:
            raise BatchFullError(
                f"{len(quads)} quads do not fit in a batch holding {len(self._quads)}"
            )
        start = len(self._quads)
        self._quads.extend(quads)
        return list(range(start, start + len(quads)))

    def drain(self) -> list[SimpleQuad]:
        """Return the queued quads in draw order and empty the batch."""
        quads, self._quads = self._quads, []
        return quads


@dataclass(frozen=True)
class SolidQuadUpdate:
    """One untextured quad: a row-major 3x3 transform and a byte colour."""

    transform: tuple[float, ...]
    color: ColorHex = field(default_factory=ColorHex)

    def __post_init__(self) -> None:
        object.__setattr__(self, "transform", _transform(self.transform))


class SolidQuadBatch:
    """The solid quads drawn each frame, at most :data:`SOLID_QUADS_MAX`."""

    def __init__(self) -> None:
        self.batch: list[SolidQuadUpdate] = []

    def __len__(self) -> int:
        return len(self.batch)

    @property
    def count(self) -> int:
        return len(self.batch)

    def update(self, updates: Iterable[SolidQuadUpdate]) -> None:
        """Replace the batch with ``updates``."""
        updates = list(updates)
        if len(updates) > SOLID_QUADS_MAX:
            raise BatchFullError(
                f"{len(updates)} solid quads exceed the limit of {SOLID_QUADS_MAX}"
            )
        self.batch = updates

    def pack_uniforms(
        self, block_data_size: int, offset_model: int, offset_color: int
    ) -> bytes:
        """Lay the batch out as consecutive uniform blocks.

        Each block is ``block_data_size`` bytes; the transform goes at
        ``offset_model`` as nine little-endian floats and the colour at
        ``offset_color`` as four bytes, red first.
        """
        for name, value in (
            ("block_data_size", block_data_size),
            ("offset_model", offset_model),
            ("offset_color", offset_color),
        ):
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, not {value!r}")
        if offset_model + _MAT3.size > block_data_size:
            raise ValueError("transform does not fit inside the uniform block")
        if offset_color + 4 > block_data_size:
            raise ValueError("colour does not fit inside the uniform block")

        buffer = bytearray(block_data_size * len(self.batch))
        for index, quad in enumerate(self.batch):
            base = index * block_data_size
            _MAT3.pack_into(buffer, base + offset_model, *quad.transform)
            start = base + offset_color
            buffer[start : start + 4] = bytes(quad.color.as_tuple())
        return bytes(buffer)