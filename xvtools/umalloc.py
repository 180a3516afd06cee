"""A heap allocator keeping a circular, address-ordered free list."""

import bisect
from dataclasses import dataclass

HEADER_SIZE = 16
MIN_GROWTH_UNITS = 4096


@dataclass
class _Block:
    start: int  # position of the header, in header-sized units
    size: int  # length including the header, in header-sized units


class Allocator:
    """Next-fit allocator over a simulated heap of at most *heap_limit* bytes.

    Every block carries a one-unit header; addresses handed out point
    just past it.  The heap grows by at least MIN_GROWTH_UNITS units at
    a time, and freed blocks are merged with their neighbours.
    """

    def __init__(self, heap_limit):
        if heap_limit < 0:
            raise ValueError("heap limit must not be negative")
        self.heap_limit = heap_limit
        self._brk = 0
        # The first entry is a zero-sized anchor that sorts before the heap.
        self._free = [_Block(-1, 0)]
        self._rover = 0
        self._allocated = {}

    def _sbrk(self, nbytes):
        if self._brk + nbytes > self.heap_limit:
            return None
        old = self._brk
        self._brk += nbytes
        return old

    def _morecore(self, nunits):
        nunits = max(nunits, MIN_GROWTH_UNITS)
        address = self._sbrk(nunits * HEADER_SIZE)
        if address is None:
            return False
        start = address // HEADER_SIZE
        self._allocated[start] = nunits
        self.free((start + 1) * HEADER_SIZE)
        return True

    def malloc(self, nbytes):
        """Return the address of *nbytes* of fresh memory, or None when out of heap."""
        if nbytes < 0:
            raise ValueError("cannot allocate a negative size")
        nunits = (nbytes + HEADER_SIZE - 1) // HEADER_SIZE + 1
        prev = self._rover
        while True:
            index = (prev + 1) % len(self._free)
            block = self._free[index]
            if block.size >= nunits:
                if block.size == nunits:
                    del self._free[index]
                    start = block.start
                else:
                    block.size -= nunits
                    start = block.start + block.size
                self._rover = prev
                self._allocated[start] = nunits
                return (start + 1) * HEADER_SIZE
            if index == self._rover:
                if not self._morecore(nunits):
                    return None
                prev = self._rover
                continue
            prev = index

    def free(self, address):
        """Give back a block previously returned by malloc."""
        start, remainder = divmod(address, HEADER_SIZE)
        start -= 1
        size = self._allocated.pop(start, None) if remainder == 0 else None
        if size is None:
            raise ValueError(f"address {address:#x} is not an allocated block")
        block = _Block(start, size)
        index = bisect.bisect_left(self._free, start, key=lambda b: b.start)
        prev_index = index - 1
        following = self._free[index % len(self._free)]
        if block.start + block.size == following.start:
            block.size += following.size
            del self._free[index % len(self._free)]
        previous = self._free[prev_index]
        if previous.start + previous.size == block.start:
            previous.size += block.size
        else:
            self._free.insert(prev_index + 1, block)
        self._rover = prev_index

    def free_blocks(self):
        """Return the free blocks as (address, size in bytes), in address order."""
        return [(b.start * HEADER_SIZE, b.size * HEADER_SIZE) for b in self._free[1:]]