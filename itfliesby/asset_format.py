"""The packed asset file header: a verification string and an index per asset.

An asset file starts with the three bytes ``IFB`` and the number of indexes
as an unsigned 32-bit integer. Each index follows: a NUL-padded 32-byte tag
and three unsigned 32-bit integers (file size, allocation size and offset).
All integers are little-endian, and nothing is padded between fields.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable

__all__ = [
    "VERIFICATION",
    "EXTENSION",
    "TAG_SIZE",
    "VERIFICATION_SIZE",
    "INDEX_SIZE",
    "IMAGE_CHANNEL_COUNT",
    "IMAGE_DATA_OFFSET",
    "AssetFileType",
    "AssetIndex",
    "AssetFileHeader",
    "classify_path",
    "header_size",
    "image_size_bytes",
    "image_allocation_size_bytes",
]

VERIFICATION = b"IFB"
EXTENSION = "ifb"
TAG_SIZE = 32

_PREAMBLE = struct.Struct("<3sI")
_INDEX = struct.Struct(f"<{TAG_SIZE}s3I")

VERIFICATION_SIZE = _PREAMBLE.size
INDEX_SIZE = _INDEX.size

IMAGE_CHANNEL_COUNT = 4
_PIXEL_SIZE = 4
# Width and height, each a signed 32-bit integer, precede the pixels.
IMAGE_DATA_OFFSET = 8

_U32_MAX = 0xFFFFFFFF


class AssetFileType(IntEnum):
    INVALID = -1
    TEXT = 0
    IMAGE = 1
    MODEL = 2
    COUNT = 3

    @property
    def label(self) -> str:
        """The upper-case name used in log lines."""
        return self.name


def _u32(name: str, value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= _U32_MAX:
        raise ValueError(f"{name} must be an unsigned 32-bit integer, not {value!r}")
    return value


def _non_negative(name: str, value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ValueError(f"{name} must be a non-negative integer, not {value!r}")
    return value


def classify_path(path) -> AssetFileType:
    """Pick an asset type from a file's extension; anything unknown is text."""
    text = str(path)
    dot = text.rfind(".")
    if dot <= 0 or dot == len(text) - 1:
        return AssetFileType.TEXT
    extension = text[dot + 1 :]
    if extension == "png":
        return AssetFileType.IMAGE
    if extension == "fbx":
        return AssetFileType.MODEL
    return AssetFileType.TEXT


def header_size(num_indexes: int) -> int:
    """Bytes taken by a header holding ``num_indexes`` indexes."""
    return VERIFICATION_SIZE + INDEX_SIZE * _non_negative("num_indexes", num_indexes)


def image_size_bytes(width_pixels: int, height_pixels: int) -> int:
    """Bytes of RGBA pixel data for an image of the given size."""
    return (
        _PIXEL_SIZE
        * _non_negative("width_pixels", width_pixels)
        * _non_negative("height_pixels", height_pixels)
    )


def image_allocation_size_bytes(width_pixels: int, height_pixels: int) -> int:
    """Bytes of a stored image asset: its dimensions followed by its pixels."""
    return image_size_bytes(width_pixels, height_pixels) + IMAGE_DATA_OFFSET


@dataclass
class AssetIndex:
    """Where one asset sits in the file and how much memory it needs."""

    tag: str
    file_size: int = 0
    allocation_size: int = 0
    offset: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.tag, str):
            raise ValueError("tag must be a string")
        encoded = self.tag.encode("utf-8")
        if b"\x00" in encoded:
            raise ValueError("tag must not contain NUL characters")
        if len(encoded) >= TAG_SIZE:
            raise ValueError(
                f"tag {self.tag!r} does not fit in {TAG_SIZE} bytes with its terminator"
            )
        _u32("file_size", self.file_size)
        _u32("allocation_size", self.allocation_size)
        _u32("offset", self.offset)

    def pack(self) -> bytes:
        return _INDEX.pack(
            self.tag.encode("utf-8"), self.file_size, self.allocation_size, self.offset
        )

    @classmethod
    def unpack(cls, data) -> AssetIndex:
        if len(data) < INDEX_SIZE:
            raise ValueError(f"an index needs {INDEX_SIZE} bytes, got {len(data)}")
        raw_tag, file_size, allocation_size, offset = _INDEX.unpack_from(data)
        tag = raw_tag.split(b"\x00", 1)[0].decode("utf-8")
        return cls(tag, file_size, allocation_size, offset)


@dataclass
class AssetFileHeader:
    """The header at the start of an asset file."""

    indexes: list[AssetIndex] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.indexes = list(self.indexes)
        _u32("number of indexes", len(self.indexes))

    @property
    def size(self) -> int:
        """Bytes the packed header takes."""
        return header_size(len(self.indexes))

    @classmethod
    def from_indexes(cls, indexes: Iterable[AssetIndex]) -> AssetFileHeader:
        return cls(list(indexes))

    def pack(self) -> bytes:
        """Serialize the header to its packed form."""
        parts = [_PREAMBLE.pack(VERIFICATION, len(self.indexes))]
        parts.extend(index.pack() for index in self.indexes)
        return b"".join(parts)

    @classmethod
    def unpack(cls, data) -> AssetFileHeader:
        """Read a header from the start of ``data``; trailing bytes are ignored."""
        data = bytes(data)
        if len(data) < VERIFICATION_SIZE:
            raise ValueError(
                f"an asset file header needs at least {VERIFICATION_SIZE} bytes, "
                f"got {len(data)}"
            )
        verification, count = _PREAMBLE.unpack_from(data)
        if verification != VERIFICATION:
            raise ValueError(f"not an asset file: verification bytes {verification!r}")
        needed = header_size(count)
        if len(data) < needed:
            raise ValueError(
                f"header with {count} indexes needs {needed} bytes, got {len(data)}"
            )
        indexes = [
            AssetIndex.unpack(data[start : start + INDEX_SIZE])
            for start in range(VERIFICATION_SIZE, needed, INDEX_SIZE)
        ]
        return cls(indexes)