"""File metadata in the form the tools report it, and open-mode flags."""

import os
import stat as _stat
from dataclasses import dataclass
from enum import IntEnum

O_RDONLY = 0x000
O_WRONLY = 0x001
O_RDWR = 0x002
O_CREATE = 0x200
O_TRUNC = 0x400


class FileType(IntEnum):
    """Kinds of file a path can name."""

    DIR = 1
    FILE = 2
    DEVICE = 3


@dataclass(frozen=True)
class FileStat:
    """Device, inode number, type, link count and size of a file."""

    dev: int
    ino: int
    type: FileType
    nlink: int
    size: int

    @classmethod
    def from_os(cls, result):
        """Build from an ``os.stat_result``."""
        if _stat.S_ISDIR(result.st_mode):
            kind = FileType.DIR
        elif _stat.S_ISREG(result.st_mode):
            kind = FileType.FILE
        else:
            kind = FileType.DEVICE
        return cls(
            dev=result.st_dev,
            ino=result.st_ino,
            type=kind,
            nlink=result.st_nlink,
            size=result.st_size,
        )


def stat_path(path):
    """Return the FileStat of *path*; raises OSError if it cannot be read."""
    return FileStat.from_os(os.stat(path))