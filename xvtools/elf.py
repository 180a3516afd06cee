"""Reading and writing 64-bit little-endian ELF file and program headers."""

import struct
from dataclasses import dataclass

ELF_MAGIC = 0x464C457F  # "\x7FELF" read as a little-endian word

ELF_PROG_LOAD = 1

ELF_PROG_FLAG_EXEC = 1
ELF_PROG_FLAG_WRITE = 2
ELF_PROG_FLAG_READ = 4

_ELF_HEADER = struct.Struct("<I12sHHIQQQIHHHHHH")
_PROG_HEADER = struct.Struct("<IIQQQQQQ")

ELF_HEADER_SIZE = _ELF_HEADER.size
PROG_HEADER_SIZE = _PROG_HEADER.size


class ElfFormatError(ValueError):
    """Data that is not a well-formed ELF image."""


@dataclass
class ElfHeader:
    """The file header at the start of an ELF image."""

    magic: int = ELF_MAGIC
    ident: bytes = bytes(12)
    type: int = 0
    machine: int = 0
    version: int = 0
    entry: int = 0
    phoff: int = 0
    shoff: int = 0
    flags: int = 0
    ehsize: int = 0
    phentsize: int = 0
    phnum: int = 0
    shentsize: int = 0
    shnum: int = 0
    shstrndx: int = 0

    @classmethod
    def parse(cls, data):
        """Decode the header at the start of *data*; raises ElfFormatError."""
        if len(data) < ELF_HEADER_SIZE:
            raise ElfFormatError("data too short for an ELF header")
        header = cls(*_ELF_HEADER.unpack_from(data))
        if header.magic != ELF_MAGIC:
            raise ElfFormatError(f"bad ELF magic {header.magic:#x}")
        return header

    def pack(self):
        """Encode the header as bytes."""
        return _ELF_HEADER.pack(
            self.magic,
            bytes(self.ident),
            self.type,
            self.machine,
            self.version,
            self.entry,
            self.phoff,
            self.shoff,
            self.flags,
            self.ehsize,
            self.phentsize,
            self.phnum,
            self.shentsize,
            self.shnum,
            self.shstrndx,
        )


@dataclass
class ProgramHeader:
    """One program segment header."""

    type: int = 0
    flags: int = 0
    off: int = 0
    vaddr: int = 0
    paddr: int = 0
    filesz: int = 0
    memsz: int = 0
    align: int = 0

    @classmethod
    def parse(cls, data):
        """Decode the program header at the start of *data*; raises ElfFormatError."""
        if len(data) < PROG_HEADER_SIZE:
            raise ElfFormatError("data too short for a program header")
        return cls(*_PROG_HEADER.unpack_from(data))

    def pack(self):
        """Encode the program header as bytes."""
        return _PROG_HEADER.pack(
            self.type,
            self.flags,
            self.off,
            self.vaddr,
            self.paddr,
            self.filesz,
            self.memsz,
            self.align,
        )


def program_headers(data):
    """Return the program headers of the ELF image *data*, in table order."""
    header = ElfHeader.parse(data)
    view = memoryview(data)
    result = []
    for index in range(header.phnum):
        offset = header.phoff + index * PROG_HEADER_SIZE
        if offset + PROG_HEADER_SIZE > len(data):
            raise ElfFormatError(f"program header {index} lies beyond the data")
        result.append(ProgramHeader.parse(view[offset:offset + PROG_HEADER_SIZE]))
    return result