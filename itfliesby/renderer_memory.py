"""The renderer's fixed memory layout: one arena, two partitions, two allocators."""

from __future__ import annotations

from .allocators import LinearAllocator
from .memory_core import Arena, InvalidArgumentError

__all__ = [
    "MEMORY_SIZE_BYTES",
    "PARTITION_CORE_SIZE_BYTES",
    "PARTITION_UNIFORM_BUFFER_BYTES",
    "ALLOCATOR_CORE_SYSTEM_SIZE_BYTES",
    "ALLOCATOR_UNIFORM_BUFFER_BYTES",
    "RendererMemory",
]

_KILOBYTE = 1024
_MEGABYTE = 1024 * _KILOBYTE

MEMORY_SIZE_BYTES = 64 * _MEGABYTE
PARTITION_CORE_SIZE_BYTES = 32 * _KILOBYTE
PARTITION_UNIFORM_BUFFER_BYTES = 2 * _MEGABYTE
ALLOCATOR_CORE_SYSTEM_SIZE_BYTES = 16 * _KILOBYTE
ALLOCATOR_UNIFORM_BUFFER_BYTES = 1 * _MEGABYTE


class RendererMemory:
    """Owns the renderer's arena and the allocators carved out of it."""

    def __init__(self, core_memory=None) -> None:
        if core_memory is None:
            core_memory = bytearray(MEMORY_SIZE_BYTES)
        view = core_memory if isinstance(core_memory, memoryview) else memoryview(core_memory)
        if view.nbytes != MEMORY_SIZE_BYTES:
            raise InvalidArgumentError(
                f"renderer memory must be exactly {MEMORY_SIZE_BYTES} bytes, "
                f"got {view.nbytes}"
            )
        self.arena = Arena("RENDERER ARENA", view)
        self.core_partition = self.arena.create_partition(
            "RENDERER CORE PRTN", PARTITION_CORE_SIZE_BYTES
        )
        self.uniform_partition = self.arena.create_partition(
            "RENDERER UNIFORM PRTN", PARTITION_UNIFORM_BUFFER_BYTES
        )
        self.core_system_allocator = LinearAllocator(
            self.core_partition, "RENDERER CORE ALCTR", ALLOCATOR_CORE_SYSTEM_SIZE_BYTES
        )
        self.uniform_buffer_allocator = LinearAllocator(
            self.uniform_partition,
            "RENDERER UNIFORM ALCTR",
            ALLOCATOR_UNIFORM_BUFFER_BYTES,
        )

    def allocate_core(self, size: int) -> memoryview:
        """Allocate ``size`` zeroed bytes for the renderer's core state."""
        block = self.core_system_allocator.allocate(size)
        block[:] = bytes(len(block))
        return block

    def allocate_uniform_buffer_memory(
        self, uniform_size_bytes: int, num_elements: int
    ) -> memoryview:
        """Allocate room for ``num_elements`` uniform blocks of the given size."""
        return self.uniform_buffer_allocator.allocate(uniform_size_bytes * num_elements)