"""Bump heap allocator and physical frame allocator."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from itertools import islice
from typing import Iterable, Iterator, Optional

logger = logging.getLogger(__name__)

HEAP_SIZE = 100 * 1024
FRAME_SIZE = 4096


class BumpAllocator:
    """Hands out memory from a fixed heap by moving an offset forward."""

    def __init__(self, heap_size: int = HEAP_SIZE) -> None:
        if heap_size < 0:
            raise ValueError("heap size must not be negative")
        self.heap_size = heap_size
        self.start = 0
        self.offset = 0
        self.deallocations = 0
        self.memory = bytearray(heap_size)

    @property
    def remaining(self) -> int:
        return self.heap_size - self.offset

    def init_heap(self, start: int) -> None:
        """Place the heap at ``start``, zero it and forget earlier allocations."""
        self.start = start
        self.offset = 0
        self.memory[:] = bytes(self.heap_size)
        logger.debug("Heap initialized at %#x with size %d", start, self.heap_size)

    def alloc(self, size: int, align: int = 1) -> int:
        """Return the address of ``size`` bytes aligned to ``align``."""
        if align <= 0 or align & (align - 1):
            raise ValueError(f"alignment must be a power of two, got {align}")
        if size < 0:
            raise ValueError("size must not be negative")
        aligned_offset = (self.offset + align - 1) & ~(align - 1)
        if aligned_offset + size > self.heap_size:
            message = f"Out of memory: offset={aligned_offset}, size={size}"
            logger.debug(message)
            raise MemoryError(message)
        self.offset = aligned_offset + size
        address = self.start + aligned_offset
        logger.debug("Allocated %d bytes at %#x with align %d", size, address, align)
        return address

    def dealloc(self, address: int) -> None:
        """Record a release; a bump allocator never reuses memory."""
        self.deallocations += 1
        logger.debug("dealloc was called at %#x", address)


class MemoryRegionKind(Enum):
    """What a region of physical memory is used for."""

    USABLE = auto()
    BOOTLOADER = auto()
    UNKNOWN_UEFI = auto()
    UNKNOWN_BIOS = auto()


@dataclass(frozen=True)
class MemoryRegion:
    """A physical memory range ``[start, end)`` of a given kind."""

    start: int
    end: int
    kind: MemoryRegionKind


class BootInfoFrameAllocator:
    """Hands out 4 KiB physical frames from the usable regions of a memory map."""

    def __init__(self, memory_map: Iterable[MemoryRegion]) -> None:
        self.memory_map = tuple(memory_map)
        self.allocated = 0

    def usable_frames(self) -> Iterator[int]:
        """Yield the start address of every frame in a usable region."""
        for region in self.memory_map:
            if region.kind is not MemoryRegionKind.USABLE:
                continue
            for address in range(region.start, region.end, FRAME_SIZE):
                yield address - address % FRAME_SIZE

    def allocate_frame(self) -> Optional[int]:
        """Return the next unused frame, or None once all are taken."""
        frame = next(islice(self.usable_frames(), self.allocated, None), None)
        self.allocated += 1
        return frame