"""Linear and fixed-size block allocators placed inside a partition."""

from __future__ import annotations

import heapq

from .memory_core import (
    AllocatorHeader,
    AllocatorType,
    InvalidArgumentError,
    NotEnoughAllocatorMemoryError,
    Partition,
)

__all__ = ["LinearAllocator", "BlockAllocator"]


def _non_negative(name: str, value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise InvalidArgumentError(f"{name} must be a non-negative integer, not {value!r}")
    return value


def _require_partition(partition) -> Partition:
    if partition is None:
        raise InvalidArgumentError("allocator requires a partition")
    return partition


class LinearAllocator:
    """Hands out consecutive slices of its region until it is reset."""

    def __init__(self, partition: Partition, tag: str, size: int) -> None:
        _require_partition(partition)
        _non_negative("size", size)
        self.header: AllocatorHeader = partition.create_header(
            AllocatorType.LINEAR, tag, size
        )
        self.used_space = 0

    def __repr__(self) -> str:
        return (
            f"LinearAllocator(tag={self.tag!r}, size={self.header.size}, "
            f"used={self.used_space})"
        )

    @property
    def tag(self) -> str:
        return self.header.tag

    def allocate(self, size: int) -> memoryview:
        """Return the next ``size`` bytes of the region."""
        if not isinstance(size, int) or isinstance(size, bool) or size <= 0:
            raise InvalidArgumentError(f"allocation size must be positive, not {size!r}")
        if self.space_clear() < size:
            raise NotEnoughAllocatorMemoryError(
                f"allocator {self.tag!r} has {self.space_clear()} bytes clear, "
                f"{size} requested"
            )
        start = self.used_space
        self.used_space += size
        return self.header.memory[start : start + size]

    def reset(self) -> None:
        """Forget every allocation; the region can be handed out again."""
        self.used_space = 0

    def space_total(self) -> int:
        return self.header.size

    def space_clear(self) -> int:
        return self.header.size - self.used_space

    def space_occupied(self) -> int:
        return self.used_space


class BlockAllocator:
    """Hands out equally sized blocks; freed blocks are reused lowest first."""

    def __init__(
        self, partition: Partition, tag: str, block_size: int, block_count: int
    ) -> None:
        _require_partition(partition)
        _non_negative("block_size", block_size)
        _non_negative("block_count", block_count)
        if block_count == 0:
            raise InvalidArgumentError("block_count must be greater than zero")
        self.block_size = block_size
        self.block_count = block_count
        self.header: AllocatorHeader = partition.create_header(
            AllocatorType.BLOCK, tag, block_size * block_count
        )
        self._free = list(range(block_count))
        heapq.heapify(self._free)
        self._outstanding: dict[int, tuple[memoryview, int]] = {}

    def __repr__(self) -> str:
        return (
            f"BlockAllocator(tag={self.tag!r}, block_size={self.block_size}, "
            f"blocks={self.block_count}, free={self.blocks_free})"
        )

    @property
    def tag(self) -> str:
        return self.header.tag

    @property
    def blocks_free(self) -> int:
        return len(self._free)

    @property
    def blocks_occupied(self) -> int:
        return self.block_count - len(self._free)

    def allocate(self) -> memoryview:
        """Return a free block of ``block_size`` bytes."""
        if not self._free:
            raise NotEnoughAllocatorMemoryError(
                f"allocator {self.tag!r} has no free blocks"
            )
        index = heapq.heappop(self._free)
        start = index * self.block_size
        block = self.header.memory[start : start + self.block_size]
        self._outstanding[id(block)] = (block, index)
        return block

    def free(self, block) -> None:
        """Return a block to the allocator; unknown blocks are ignored."""
        if block is None:
            return
        entry = self._outstanding.pop(id(block), None)
        if entry is None or entry[0] is not block:
            if entry is not None:
                self._outstanding[id(block)] = entry
            return
        heapq.heappush(self._free, entry[1])