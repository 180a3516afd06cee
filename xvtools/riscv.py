"""Sv39 paging arithmetic and control-register bit definitions."""

from enum import IntFlag

PGSIZE = 4096  # bytes per page
PGSHIFT = 12  # bits of offset within a page
PXMASK = 0x1FF  # nine bits of page-table index
PTE_FLAG_MASK = 0x3FF

_MASK64 = (1 << 64) - 1

# One beyond the highest usable virtual address.  It is one bit less than
# Sv39 allows, so addresses with the high bit set need no sign extension.
MAXVA = 1 << (9 + 9 + 9 + 12 - 1)

SATP_SV39 = 8 << 60

# Machine status register.
MSTATUS_MPP_MASK = 3 << 11
MSTATUS_MPP_M = 3 << 11
MSTATUS_MPP_S = 1 << 11
MSTATUS_MPP_U = 0 << 11
MSTATUS_MIE = 1 << 3

# Supervisor status register.
SSTATUS_SPP = 1 << 8
SSTATUS_SPIE = 1 << 5
SSTATUS_UPIE = 1 << 4
SSTATUS_SIE = 1 << 1
SSTATUS_UIE = 1 << 0

# Supervisor interrupt enable.
SIE_SEIE = 1 << 9
SIE_STIE = 1 << 5
SIE_SSIE = 1 << 1

# Machine-mode interrupt enable.
MIE_MEIE = 1 << 11
MIE_MTIE = 1 << 7
MIE_MSIE = 1 << 3


class PteFlag(IntFlag):
    """Permission and validity bits of a page-table entry."""

    V = 1 << 0
    R = 1 << 1
    W = 1 << 2
    X = 1 << 3
    U = 1 << 4


def pgroundup(size):
    """Round *size* up to a multiple of the page size (64-bit wrap-around)."""
    return ((size + PGSIZE - 1) & ~(PGSIZE - 1)) & _MASK64


def pgrounddown(address):
    """Round *address* down to the start of its page."""
    return address & ~(PGSIZE - 1)


def pa2pte(pa):
    """Shift a physical address into the page-number field of an entry."""
    return (pa >> 12) << 10


def pte2pa(pte):
    """Return the physical page address held by a page-table entry."""
    return (pte >> 10) << 12


def pte_flags(pte):
    """Return the low ten flag bits of a page-table entry."""
    return pte & PTE_FLAG_MASK


def px(level, va):
    """Return the nine-bit page-table index of *va* at *level* (0, 1 or 2)."""
    return (va >> (PGSHIFT + 9 * level)) & PXMASK


def make_satp(pagetable):
    """Return the satp value selecting Sv39 with root table at *pagetable*."""
    return SATP_SV39 | (pagetable >> 12)