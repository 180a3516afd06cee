"""Basic file-system checks: truncation, small and big files, creation, links."""

import contextlib
import os
import struct

from xvtools.filestat import O_CREATE, O_RDONLY, O_RDWR, O_TRUNC, O_WRONLY

BSIZE = 1024  # file-system block size in bytes
MAXOPBLOCKS = 10  # most blocks one file-system operation writes
MAX_FILE_BLOCKS = 268  # blocks the largest file can hold
BUFSZ = (MAXOPBLOCKS + 2) * BSIZE

_HOST_FLAGS = {
    O_WRONLY: os.O_WRONLY,
    O_RDWR: os.O_RDWR,
    O_CREATE: os.O_CREAT,
    O_TRUNC: os.O_TRUNC,
}


class CheckFailed(Exception):
    """A check found the file system behaving wrongly."""


def _host_flags(mode):
    flags = os.O_RDONLY if mode & (O_WRONLY | O_RDWR) == O_RDONLY else 0
    for bit, host in _HOST_FLAGS.items():
        if mode & bit:
            flags |= host
    return flags


def _try_open(path, mode):
    """Open *path* with the tool open mode; return the descriptor or None."""
    try:
        return os.open(path, _host_flags(mode), 0o666)
    except OSError:
        return None


def _open(path, mode, message):
    fd = _try_open(path, mode)
    if fd is None:
        raise CheckFailed(message)
    return fd


def _unlink(path):
    """Remove a file or empty directory; return True on success."""
    try:
        if os.path.isdir(path) and not os.path.islink(path):
            os.rmdir(path)
        else:
            os.unlink(path)
    except OSError:
        return False
    return True


def _link(old, new):
    try:
        os.link(old, new)
    except OSError:
        return False
    return True


def _closing(stack, fd):
    stack.callback(os.close, fd)
    return fd


def check_truncate1(workdir):
    """Check that opening with truncation empties the file for every reader.

    Returns the sizes of the five reads made along the way.
    """
    name = "truncate1"
    path = os.path.join(workdir, "truncfile")
    _unlink(path)
    fd1 = _open(path, O_CREATE | O_WRONLY | O_TRUNC, f"{name}: create truncfile failed")
    os.write(fd1, b"abcd")
    os.close(fd1)

    sizes = []

    def expect(fd, wanted):
        n = len(os.read(fd, 32))
        sizes.append(n)
        if n != wanted:
            raise CheckFailed(f"{name}: read {n} bytes, wanted {wanted}")

    with contextlib.ExitStack() as stack:
        fd2 = _closing(stack, _open(path, O_RDONLY, f"{name}: open truncfile failed"))
        expect(fd2, 4)
        fd1 = _closing(stack, _open(path, O_WRONLY | O_TRUNC, f"{name}: open truncfile failed"))
        fd3 = _closing(stack, _open(path, O_RDONLY, f"{name}: open truncfile failed"))
        expect(fd3, 0)
        expect(fd2, 0)
        os.write(fd1, b"abcdef")
        expect(fd3, 6)
        expect(fd2, 2)
        _unlink(path)
    return sizes


def check_writetest(workdir):
    """Write a small file in short pieces and read it back; return the bytes read."""
    name = "writetest"
    count, size = 100, 10
    path = os.path.join(workdir, "small")
    fd = _open(path, O_CREATE | O_RDWR, f"{name}: error: creat small failed!")
    with contextlib.closing_fd if False else contextlib.ExitStack() as stack:
        _closing(stack, fd)
        for i in range(count):
            if os.write(fd, b"a" * size) != size:
                raise CheckFailed(f"{name}: error: write aa {i} new file failed")
            if os.write(fd, b"b" * size) != size:
                raise CheckFailed(f"{name}: error: write bb {i} new file failed")
    fd = _open(path, O_RDONLY, f"{name}: error: open small failed!")
    try:
        data = os.read(fd, count * size * 2)
    finally:
        os.close(fd)
    if len(data) != count * size * 2:
        raise CheckFailed(f"{name}: read failed")
    if not _unlink(path):
        raise CheckFailed(f"{name}: unlink small failed")
    return data


def check_writebig(workdir):
    """Write the largest file block by block and read it back.

    Every block starts with its own number.  Returns the blocks read.
    """
    name = "writebig"
    path = os.path.join(workdir, "big")
    block = bytearray(BSIZE)
    fd = _open(path, O_CREATE | O_RDWR, f"{name}: error: creat big failed!")
    try:
        for i in range(MAX_FILE_BLOCKS):
            struct.pack_into("<i", block, 0, i)
            if os.write(fd, block) != BSIZE:
                raise CheckFailed(f"{name}: error: write big file failed")
    finally:
        os.close(fd)

    fd = _open(path, O_RDONLY, f"{name}: error: open big failed!")
    n = 0
    try:
        while True:
            data = os.read(fd, BSIZE)
            if not data:
                if n == MAX_FILE_BLOCKS - 1:
                    raise CheckFailed(f"{name}: read only {n} blocks from big")
                break
            if len(data) != BSIZE:
                raise CheckFailed(f"{name}: read failed {len(data)}")
            (number,) = struct.unpack_from("<i", data)
            if number != n:
                raise CheckFailed(f"{name}: read content of block {n} is {number}")
            n += 1
    finally:
        os.close(fd)
    if not _unlink(path):
        raise CheckFailed(f"{name}: unlink big failed")
    return n


def check_createtest(workdir):
    """Create many files, then remove them all; return the names used."""
    names = ["a" + chr(ord("0") + i) for i in range(52)]
    for entry in names:
        fd = _try_open(os.path.join(workdir, entry), O_CREATE | O_RDWR)
        if fd is not None:
            os.close(fd)
    for entry in names:
        _unlink(os.path.join(workdir, entry))
    return names


def check_dirtest(workdir):
    """Make a directory, enter it and leave it, then remove it; return its path."""
    name = "dirtest"
    path = os.path.join(workdir, "dir0")
    try:
        os.mkdir(path)
    except OSError as exc:
        raise CheckFailed(f"{name}: mkdir failed") from exc
    if not os.path.isdir(path):
        raise CheckFailed(f"{name}: chdir dir0 failed")
    if not os.path.isdir(os.path.join(path, "..")):
        raise CheckFailed(f"{name}: chdir .. failed")
    if not _unlink(path):
        raise CheckFailed(f"{name}: unlink dir0 failed")
    return path


def check_unlinkread(workdir):
    """Check that an unlinked file stays readable and writable while open.

    Returns the data read through the still-open descriptor.
    """
    name = "unlinkread"
    size = 5
    path = os.path.join(workdir, "unlinkread")
    fd = _open(path, O_CREATE | O_RDWR, f"{name}: create unlinkread failed")
    os.write(fd, b"hello")
    os.close(fd)

    fd = _open(path, O_RDWR, f"{name}: open unlinkread failed")
    try:
        if not _unlink(path):
            raise CheckFailed(f"{name}: unlink unlinkread failed")
        fd1 = _try_open(path, O_CREATE | O_RDWR)
        if fd1 is not None:
            os.write(fd1, b"yyy")
            os.close(fd1)
        data = os.read(fd, BUFSZ)
        if len(data) != size:
            raise CheckFailed(f"{name}: unlinkread read failed")
        if data[:1] != b"h":
            raise CheckFailed(f"{name}: unlinkread wrong data")
        if os.write(fd, (data + bytes(10))[:10]) != 10:
            raise CheckFailed(f"{name}: unlinkread write failed")
    finally:
        os.close(fd)
    _unlink(path)
    return data


def check_linktest(workdir):
    """Check hard links: creation, survival of the original's removal, refusals.

    Returns the data read through the second name.
    """
    name = "linktest"
    size = 5
    lf1 = os.path.join(workdir, "lf1")
    lf2 = os.path.join(workdir, "lf2")
    _unlink(lf1)
    _unlink(lf2)

    fd = _open(lf1, O_CREATE | O_RDWR, f"{name}: create lf1 failed")
    try:
        if os.write(fd, b"hello") != size:
            raise CheckFailed(f"{name}: write lf1 failed")
    finally:
        os.close(fd)

    if not _link(lf1, lf2):
        raise CheckFailed(f"{name}: link lf1 lf2 failed")
    _unlink(lf1)

    fd = _try_open(lf1, O_RDONLY)
    if fd is not None:
        os.close(fd)
        raise CheckFailed(f"{name}: unlinked lf1 but it is still there!")

    fd = _open(lf2, O_RDONLY, f"{name}: open lf2 failed")
    try:
        data = os.read(fd, BUFSZ)
    finally:
        os.close(fd)
    if len(data) != size:
        raise CheckFailed(f"{name}: read lf2 failed")

    if _link(lf2, lf2):
        raise CheckFailed(f"{name}: link lf2 lf2 succeeded! oops")

    _unlink(lf2)
    if _link(lf2, lf1):
        raise CheckFailed(f"{name}: link non-existent succeeded! oops")

    if _link(os.path.join(workdir, "."), lf1):
        _unlink(lf1)
        raise CheckFailed(f"{name}: link . lf1 succeeded! oops")
    return data