"""Arenas, partitions and allocator headers laid out over one byte buffer.

An :class:`Arena` owns a caller-supplied buffer. Partitions are carved out of
the arena one after another, and each partition hands out allocator headers
that describe regions of its own memory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

__all__ = [
    "ARENA_HEADER_SIZE",
    "PARTITION_HEADER_SIZE",
    "ALLOCATOR_HEADER_SIZE",
    "LINEAR_ALLOCATOR_SIZE",
    "ARENA_MINIMUM_SIZE",
    "TAG_CAPACITY",
    "AllocationError",
    "InvalidArgumentError",
    "CoreMemoryNullError",
    "NotEnoughArenaMemoryError",
    "NotEnoughPartitionMemoryError",
    "NotEnoughAllocatorMemoryError",
    "AllocatorType",
    "AllocatorHeader",
    "Arena",
    "Partition",
]

# Bookkeeping sizes, in bytes, of the records that precede each region.
ARENA_HEADER_SIZE = 48
PARTITION_HEADER_SIZE = 64
ALLOCATOR_HEADER_SIZE = 112
LINEAR_ALLOCATOR_SIZE = 16
ARENA_MINIMUM_SIZE = (
    ARENA_HEADER_SIZE
    + PARTITION_HEADER_SIZE
    + ALLOCATOR_HEADER_SIZE
    + LINEAR_ALLOCATOR_SIZE
    + 1
)

# Tags are stored as NUL-terminated strings in a fixed field of this size.
TAG_CAPACITY = 32


class AllocationError(Exception):
    """Base class for every memory error; ``code`` is the numeric result code."""

    code = 0x80000000


class NotEnoughArenaMemoryError(AllocationError):
    """The arena cannot hold the requested partition or is too small."""

    code = 0x80000000


class NotEnoughPartitionMemoryError(AllocationError):
    """The partition cannot hold the requested allocator."""

    code = 0x80000001


class NotEnoughAllocatorMemoryError(AllocationError):
    """The allocator has no room left for the request."""

    code = 0x80000002


class CoreMemoryNullError(AllocationError):
    """No backing memory was supplied to the arena."""

    code = 0x80000003


class InvalidArgumentError(AllocationError, ValueError):
    """An argument was missing or out of range."""

    code = 0x80000005


class AllocatorType(IntEnum):
    STACK = 0
    QUEUE = 1
    BLOCK = 2
    LINEAR = 3
    HEAP = 4


def _check_tag(tag: str) -> str:
    if not isinstance(tag, str):
        raise InvalidArgumentError("tag must be a string")
    if len(tag.encode("utf-8")) >= TAG_CAPACITY:
        raise InvalidArgumentError(
            f"tag {tag!r} does not fit in {TAG_CAPACITY} bytes with its terminator"
        )
    return tag


def _check_size(size: int) -> int:
    if not isinstance(size, int) or isinstance(size, bool) or size < 0:
        raise InvalidArgumentError(f"size must be a non-negative integer, not {size!r}")
    return size


@dataclass(eq=False)
class AllocatorHeader:
    """Describes one allocator's region inside a partition."""

    type: AllocatorType
    tag: str
    size: int
    partition: Partition = field(repr=False)
    offset: int

    @property
    def data_offset(self) -> int:
        """Offset in the arena buffer where the allocator's data begins."""
        return self.offset + ALLOCATOR_HEADER_SIZE

    @property
    def memory(self) -> memoryview:
        """A view over the allocator's data region."""
        start = self.data_offset
        return self.partition.arena.memory[start : start + self.size]


@dataclass(eq=False)
class Partition:
    """A named slice of an arena that allocators are placed in."""

    tag: str
    size: int
    arena: Arena = field(repr=False)
    offset: int
    allocators: list[AllocatorHeader] = field(default_factory=list, repr=False)

    def create_header(self, allocator_type, tag: str, size: int) -> AllocatorHeader:
        """Reserve a header and ``size`` data bytes for a new allocator."""
        allocator_type = AllocatorType(allocator_type)
        _check_tag(tag)
        _check_size(size)
        if ALLOCATOR_HEADER_SIZE + size > self.space_free():
            raise NotEnoughPartitionMemoryError(
                f"partition {self.tag!r} has {self.space_free()} bytes free, "
                f"{ALLOCATOR_HEADER_SIZE + size} requested"
            )
        if self.allocators:
            previous = self.allocators[-1]
            offset = previous.offset + ALLOCATOR_HEADER_SIZE + previous.size + 1
        else:
            offset = self.offset + PARTITION_HEADER_SIZE + 1
        header = AllocatorHeader(allocator_type, tag, size, self, offset)
        self.allocators.append(header)
        return header

    def raw_memory(self) -> memoryview:
        """A view over the partition's data region."""
        start = self.offset + PARTITION_HEADER_SIZE
        return self.arena.memory[start : start + self.size]

    def space_total(self) -> int:
        return self.size

    def space_occupied(self) -> int:
        return sum(ALLOCATOR_HEADER_SIZE + header.size for header in self.allocators)

    def space_free(self) -> int:
        return self.size - self.space_occupied()


class Arena:
    """The top-level region that owns a caller-supplied buffer."""

    def __init__(self, tag: str, memory) -> None:
        if memory is None:
            raise CoreMemoryNullError("arena requires backing memory")
        view = memory if isinstance(memory, memoryview) else memoryview(memory)
        if view.nbytes < ARENA_MINIMUM_SIZE:
            raise NotEnoughArenaMemoryError(
                f"arena needs at least {ARENA_MINIMUM_SIZE} bytes, got {view.nbytes}"
            )
        self.tag = _check_tag(tag)
        self.memory = view.cast("B") if view.format != "B" or view.ndim != 1 else view
        self.size = view.nbytes - ARENA_HEADER_SIZE
        self.partitions: list[Partition] = []

    def __repr__(self) -> str:
        return (
            f"Arena(tag={self.tag!r}, size={self.size}, "
            f"partitions={len(self.partitions)})"
        )

    def create_partition(self, tag: str, size: int) -> Partition:
        """Carve a new partition of ``size`` bytes after the last one."""
        _check_tag(tag)
        _check_size(size)
        available = self.size_free()
        if PARTITION_HEADER_SIZE + size > available:
            raise NotEnoughArenaMemoryError(
                f"arena {self.tag!r} has {available} bytes free, "
                f"{PARTITION_HEADER_SIZE + size} requested"
            )
        if self.partitions:
            previous = self.partitions[-1]
            offset = previous.offset + PARTITION_HEADER_SIZE + previous.size
        else:
            offset = ARENA_HEADER_SIZE
        partition = Partition(tag, size, self, offset)
        self.partitions.append(partition)
        return partition

    def size_total(self) -> int:
        return self.size

    def size_occupied(self) -> int:
        return sum(partition.size for partition in self.partitions)

    def size_free(self) -> int:
        return self.size - self.size_occupied()