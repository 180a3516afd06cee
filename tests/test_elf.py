import pytest

from xvtools.elf import (
    ELF_PROG_FLAG_EXEC,
    ELF_PROG_FLAG_READ,
    ELF_PROG_FLAG_WRITE,
    ELF_PROG_LOAD,
    ElfFormatError,
    ElfHeader,
    ProgramHeader,
    program_headers,
)


def _segments():
    return [
        ProgramHeader(
            type=ELF_PROG_LOAD,
            flags=ELF_PROG_FLAG_READ | ELF_PROG_FLAG_EXEC,
            off=0x1000,
            vaddr=0,
            paddr=0,
            filesz=0x800,
            memsz=0x800,
            align=0x1000,
        ),
        ProgramHeader(
            type=ELF_PROG_LOAD,
            flags=ELF_PROG_FLAG_READ | ELF_PROG_FLAG_WRITE,
            off=0x2000,
            vaddr=0x1000,
            paddr=0x1000,
            filesz=0x10,
            memsz=0x400,
            align=0x1000,
        ),
    ]


def _image(segments):
    header = ElfHeader(entry=0x40, phoff=64, phnum=len(segments), phentsize=56)
    return header.pack() + b"".join(s.pack() for s in segments)


def test_header_sizes_fixed_by_format():
    assert len(ElfHeader().pack()) == 64
    assert len(ProgramHeader().pack()) == 56


def test_header_starts_with_magic_bytes():
    assert ElfHeader().pack()[:4] == b"\x7fELF"


def test_header_round_trip():
    header = ElfHeader(ident=b"\x02\x01\x01" + bytes(9), type=2, machine=243,
                       version=1, entry=0x1234, phoff=64, phnum=3, shstrndx=7)
    assert ElfHeader.parse(header.pack()) == header


def test_program_header_round_trip():
    segment = _segments()[1]
    assert ProgramHeader.parse(segment.pack()) == segment


def test_bad_magic_rejected():
    data = bytearray(ElfHeader().pack())
    data[0] = 0
    with pytest.raises(ElfFormatError):
        ElfHeader.parse(bytes(data))


def test_short_data_rejected():
    with pytest.raises(ElfFormatError):
        ElfHeader.parse(ElfHeader().pack()[:-1])
    with pytest.raises(ElfFormatError):
        ProgramHeader.parse(b"\x00" * 10)


def test_program_headers_in_table_order():
    segments = _segments()
    assert program_headers(_image(segments)) == segments


def test_program_headers_none():
    assert program_headers(ElfHeader().pack()) == []


def test_truncated_program_table_rejected():
    with pytest.raises(ElfFormatError):
        program_headers(_image(_segments())[:-1])