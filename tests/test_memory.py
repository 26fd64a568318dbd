import pytest

from pongkernel.memory import (
    FRAME_SIZE,
    BootInfoFrameAllocator,
    BumpAllocator,
    MemoryRegion,
    MemoryRegionKind,
)


def test_first_allocation_is_heap_start():
    allocator = BumpAllocator(64)
    allocator.init_heap(0x1000)
    assert allocator.alloc(3, 1) == 0x1000


def test_allocations_are_aligned_and_disjoint():
    allocator = BumpAllocator(64)
    allocator.init_heap(0x1000)
    first = allocator.alloc(3, 1)
    second = allocator.alloc(4, 4)
    assert second % 4 == 0
    assert second >= first + 3
    assert allocator.offset == second - 0x1000 + 4


def test_exact_fit_then_out_of_memory():
    allocator = BumpAllocator(32)
    allocator.alloc(32, 1)
    assert allocator.remaining == 0
    with pytest.raises(MemoryError):
        allocator.alloc(1, 1)


def test_failed_allocation_keeps_offset():
    allocator = BumpAllocator(16)
    allocator.alloc(10, 1)
    with pytest.raises(MemoryError):
        allocator.alloc(8, 1)
    assert allocator.offset == 10


def test_alignment_padding_counts_against_heap():
    allocator = BumpAllocator(16)
    allocator.alloc(1, 1)
    with pytest.raises(MemoryError):
        allocator.alloc(16, 16)


def test_invalid_alignment_rejected():
    allocator = BumpAllocator(16)
    with pytest.raises(ValueError):
        allocator.alloc(1, 3)
    with pytest.raises(ValueError):
        allocator.alloc(1, 0)


def test_init_heap_resets_and_zeroes():
    allocator = BumpAllocator(16)
    allocator.memory[:] = b"\xff" * 16
    allocator.alloc(8, 1)
    allocator.init_heap(0x2000)
    assert allocator.offset == 0
    assert allocator.memory == bytearray(16)
    assert allocator.alloc(1, 1) == 0x2000


def test_dealloc_does_not_reclaim():
    allocator = BumpAllocator(16)
    address = allocator.alloc(8, 1)
    allocator.dealloc(address)
    assert allocator.deallocations == 1
    assert allocator.offset == 8


def sample_map():
    return [
        MemoryRegion(0, 3 * FRAME_SIZE, MemoryRegionKind.USABLE),
        MemoryRegion(3 * FRAME_SIZE, 5 * FRAME_SIZE, MemoryRegionKind.BOOTLOADER),
        MemoryRegion(5 * FRAME_SIZE, 7 * FRAME_SIZE, MemoryRegionKind.USABLE),
    ]


def test_usable_frames_skip_other_regions():
    frames = list(BootInfoFrameAllocator(sample_map()).usable_frames())
    assert frames == [0, FRAME_SIZE, 2 * FRAME_SIZE, 5 * FRAME_SIZE, 6 * FRAME_SIZE]


def test_unaligned_region_yields_containing_frames():
    region = MemoryRegion(FRAME_SIZE + 0x800, 3 * FRAME_SIZE, MemoryRegionKind.USABLE)
    frames = list(BootInfoFrameAllocator([region]).usable_frames())
    assert frames == [FRAME_SIZE, 2 * FRAME_SIZE]


def test_allocate_frame_in_order_then_exhausted():
    allocator = BootInfoFrameAllocator(sample_map())
    expected = list(allocator.usable_frames())
    taken = [allocator.allocate_frame() for _ in expected]
    assert taken == expected
    assert allocator.allocate_frame() is None
    assert allocator.allocate_frame() is None


def test_no_usable_regions():
    region = MemoryRegion(0, 2 * FRAME_SIZE, MemoryRegionKind.UNKNOWN_UEFI)
    allocator = BootInfoFrameAllocator([region])
    assert list(allocator.usable_frames()) == []
    assert allocator.allocate_frame() is None