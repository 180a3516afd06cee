"""Directory and larger file-system checks.

Covers nested directories, big and many-block files, refusals on ``.``
and ``..``, files used as directories, concurrent writers and a large
directory.
"""

import contextlib
import os
import threading
from concurrent.futures import ThreadPoolExecutor

from xvtools.filestat import O_CREATE, O_RDONLY, O_RDWR, O_TRUNC, O_WRONLY
from xvtools.usertests_files import BUFSZ, CheckFailed

BIGWRITE_START = 499
BIGWRITE_STEP = 471

BIGFILE_BLOCKS = 20
BIGFILE_SIZE = 600

FOURFILES_CHILDREN = 4
FOURFILES_WRITES = 12
FOURFILES_SIZE = 500

CREATEDELETE_FILES = 20
CREATEDELETE_CHILDREN = 4

SHAREDFD_WRITES = 1000
SHAREDFD_SIZE = 10

BIGDIR_ENTRIES = 500


def _host_flags(mode):
    if mode & O_RDWR:
        flags = os.O_RDWR
    elif mode & O_WRONLY:
        flags = os.O_WRONLY
    else:
        flags = os.O_RDONLY
    if mode & O_CREATE:
        flags |= os.O_CREAT
    if mode & O_TRUNC:
        flags |= os.O_TRUNC
    return flags


class _Fs:
    """Path operations inside *root*, which acts as "/"; ".." never leaves it."""

    def __init__(self, root):
        self.root = os.path.abspath(root)
        self.cwd = []

    def _host(self, parts):
        return os.path.join(self.root, *parts)

    def _parts(self, path):
        parts = [] if path.startswith("/") else list(self.cwd)
        for comp in path.split("/"):
            if not comp:
                continue
            current = self._host(parts)
            if not os.path.isdir(current):
                raise NotADirectoryError(path)
            if comp == ".":
                continue
            if comp == "..":
                if parts:
                    parts.pop()
            else:
                parts.append(comp)
        return parts

    def _resolve(self, path):
        try:
            return self._host(self._parts(path))
        except OSError:
            return None

    def open(self, path, mode):
        """Return a descriptor for *path*, or None if it cannot be opened."""
        host = self._resolve(path)
        if host is None:
            return None
        try:
            return os.open(host, _host_flags(mode), 0o666)
        except OSError:
            return None

    def probe_open(self, path, mode):
        """Tell whether *path* can be opened with *mode*, closing it again."""
        fd = self.open(path, mode)
        if fd is None:
            return False
        os.close(fd)
        return True

    def unlink(self, path):
        comps = [c for c in path.split("/") if c]
        if not comps or comps[-1] in (".", ".."):
            return False
        host = self._resolve(path)
        if host is None:
            return False
        try:
            if os.path.isdir(host) and not os.path.islink(host):
                os.rmdir(host)
            else:
                os.unlink(host)
        except OSError:
            return False
        return True

    def mkdir(self, path):
        host = self._resolve(path)
        if host is None:
            return False
        try:
            os.mkdir(host)
        except OSError:
            return False
        return True

    def link(self, old, new):
        old_host = self._resolve(old)
        new_host = self._resolve(new)
        if old_host is None or new_host is None:
            return False
        try:
            os.link(old_host, new_host)
        except OSError:
            return False
        return True

    def chdir(self, path):
        try:
            parts = self._parts(path)
        except OSError:
            return False
        if not os.path.isdir(self._host(parts)):
            return False
        self.cwd = parts
        return True


def _must_open(fs, path, mode, message):
    fd = fs.open(path, mode)
    if fd is None:
        raise CheckFailed(message)
    return fd


def check_subdir(workdir):
    """Exercise nested directories, relative paths and refused operations.

    Returns the contents read through the link ``dd/dd/ffff``.
    """
    name = "subdir"
    fs = _Fs(workdir)

    fs.unlink("ff")
    if not fs.mkdir("dd"):
        raise CheckFailed(f"{name}: mkdir dd failed")

    fd = _must_open(fs, "dd/ff", O_CREATE | O_RDWR, f"{name}: create dd/ff failed")
    os.write(fd, b"ff")
    os.close(fd)

    if fs.unlink("dd"):
        raise CheckFailed(f"{name}: unlink dd (non-empty dir) succeeded!")

    if not fs.mkdir("/dd/dd"):
        raise CheckFailed(f"{name}: mkdir dd/dd failed")

    fd = _must_open(fs, "dd/dd/ff", O_CREATE | O_RDWR, f"{name}: create dd/dd/ff failed")
    os.write(fd, b"FF")
    os.close(fd)

    fd = _must_open(fs, "dd/dd/../ff", O_RDONLY, f"{name}: open dd/dd/../ff failed")
    try:
        data = os.read(fd, BUFSZ)
    finally:
        os.close(fd)
    if len(data) != 2 or data[:1] != b"f":
        raise CheckFailed(f"{name}: dd/dd/../ff wrong content")

    if not fs.link("dd/dd/ff", "dd/dd/ffff"):
        raise CheckFailed(f"{name}: link dd/dd/ff dd/dd/ffff failed")
    if not fs.unlink("dd/dd/ff"):
        raise CheckFailed(f"{name}: unlink dd/dd/ff failed")
    if fs.probe_open("dd/dd/ff", O_RDONLY):
        raise CheckFailed(f"{name}: open (unlinked) dd/dd/ff succeeded")

    for target in ("dd", "dd/../../dd", "dd/../../../dd", "./.."):
        if not fs.chdir(target):
            raise CheckFailed(f"{name}: chdir {target} failed")

    fd = _must_open(fs, "dd/dd/ffff", O_RDONLY, f"{name}: open dd/dd/ffff failed")
    try:
        linked = os.read(fd, BUFSZ)
    finally:
        os.close(fd)
    if len(linked) != 2:
        raise CheckFailed(f"{name}: read dd/dd/ffff wrong len")

    if fs.probe_open("dd/dd/ff", O_RDONLY):
        raise CheckFailed(f"{name}: open (unlinked) dd/dd/ff succeeded!")

    refusals = [
        (lambda: fs.probe_open("dd/ff/ff", O_CREATE | O_RDWR), "create dd/ff/ff"),
        (lambda: fs.probe_open("dd/xx/ff", O_CREATE | O_RDWR), "create dd/xx/ff"),
        (lambda: fs.probe_open("dd", O_CREATE), "create dd"),
        (lambda: fs.probe_open("dd", O_RDWR), "open dd rdwr"),
        (lambda: fs.probe_open("dd", O_WRONLY), "open dd wronly"),
        (lambda: fs.link("dd/ff/ff", "dd/dd/xx"), "link dd/ff/ff dd/dd/xx"),
        (lambda: fs.link("dd/xx/ff", "dd/dd/xx"), "link dd/xx/ff dd/dd/xx"),
        (lambda: fs.link("dd/ff", "dd/dd/ffff"), "link dd/ff dd/dd/ffff"),
        (lambda: fs.mkdir("dd/ff/ff"), "mkdir dd/ff/ff"),
        (lambda: fs.mkdir("dd/xx/ff"), "mkdir dd/xx/ff"),
        (lambda: fs.mkdir("dd/dd/ffff"), "mkdir dd/dd/ffff"),
        (lambda: fs.unlink("dd/xx/ff"), "unlink dd/xx/ff"),
        (lambda: fs.unlink("dd/ff/ff"), "unlink dd/ff/ff"),
        (lambda: fs.chdir("dd/ff"), "chdir dd/ff"),
        (lambda: fs.chdir("dd/xx"), "chdir dd/xx"),
    ]
    for attempt, what in refusals:
        if attempt():
            raise CheckFailed(f"{name}: {what} succeeded!")

    if not fs.unlink("dd/dd/ffff"):
        raise CheckFailed(f"{name}: unlink dd/dd/ff failed")
    if not fs.unlink("dd/ff"):
        raise CheckFailed(f"{name}: unlink dd/ff failed")
    if fs.unlink("dd"):
        raise CheckFailed(f"{name}: unlink non-empty dd succeeded!")
    if not fs.unlink("dd/dd"):
        raise CheckFailed(f"{name}: unlink dd/dd failed")
    if not fs.unlink("dd"):
        raise CheckFailed(f"{name}: unlink dd failed")
    return linked


def check_bigwrite(workdir):
    """Write files in pairs of ever larger writes; return the write sizes used."""
    name = "bigwrite"
    fs = _Fs(workdir)
    buf = bytes(BUFSZ)
    fs.unlink("bigwrite")
    sizes = []
    for size in range(BIGWRITE_START, BUFSZ, BIGWRITE_STEP):
        fd = _must_open(fs, "bigwrite", O_CREATE | O_RDWR, f"{name}: cannot create bigwrite")
        try:
            for _ in range(2):
                written = os.write(fd, buf[:size])
                if written != size:
                    raise CheckFailed(f"{name}: write({size}) ret {written}")
        finally:
            os.close(fd)
        fs.unlink("bigwrite")
        sizes.append(size)
    return sizes


def check_bigfile(workdir):
    """Write a many-block file and read it back in half-block pieces.

    Returns the number of bytes read.
    """
    name = "bigfile"
    fs = _Fs(workdir)
    fs.unlink("bigfile.dat")
    fd = _must_open(fs, "bigfile.dat", O_CREATE | O_RDWR, f"{name}: cannot create bigfile")
    try:
        for i in range(BIGFILE_BLOCKS):
            if os.write(fd, bytes([i]) * BIGFILE_SIZE) != BIGFILE_SIZE:
                raise CheckFailed(f"{name}: write bigfile failed")
    finally:
        os.close(fd)

    half = BIGFILE_SIZE // 2
    total = 0
    fd = _must_open(fs, "bigfile.dat", O_RDONLY, f"{name}: cannot open bigfile")
    try:
        i = 0
        while True:
            try:
                data = os.read(fd, half)
            except OSError as exc:
                raise CheckFailed(f"{name}: read bigfile failed") from exc
            if not data:
                break
            if len(data) != half:
                raise CheckFailed(f"{name}: short read bigfile")
            if data[0] != i // 2 or data[half - 1] != i // 2:
                raise CheckFailed(f"{name}: read bigfile wrong data")
            total += len(data)
            i += 1
    finally:
        os.close(fd)
    if total != BIGFILE_BLOCKS * BIGFILE_SIZE:
        raise CheckFailed(f"{name}: read bigfile wrong total")
    fs.unlink("bigfile.dat")
    return total


def check_rmdot(workdir):
    """Check that "." and ".." cannot be removed; return the paths refused."""
    name = "rmdot"
    fs = _Fs(workdir)
    if not fs.mkdir("dots"):
        raise CheckFailed(f"{name}: mkdir dots failed")
    if not fs.chdir("dots"):
        raise CheckFailed(f"{name}: chdir dots failed")
    refused = []
    for path in (".", ".."):
        if fs.unlink(path):
            raise CheckFailed(f"{name}: rm {path} worked!")
        refused.append(path)
    if not fs.chdir("/"):
        raise CheckFailed(f"{name}: chdir / failed")
    for path in ("dots/.", "dots/.."):
        if fs.unlink(path):
            raise CheckFailed(f"{name}: unlink {path} worked!")
        refused.append(path)
    if not fs.unlink("dots"):
        raise CheckFailed(f"{name}: unlink dots failed!")
    return refused


def check_dirfile(workdir):
    """Check that a plain file cannot be used as a directory, nor "." written.

    Returns descriptions of the operations that were refused.
    """
    name = "dirfile"
    fs = _Fs(workdir)
    fd = _must_open(fs, "dirfile", O_CREATE, f"{name}: create dirfile failed")
    os.close(fd)

    refusals = [
        (lambda: fs.chdir("dirfile"), "chdir dirfile"),
        (lambda: fs.probe_open("dirfile/xx", O_RDONLY), "open dirfile/xx"),
        (lambda: fs.probe_open("dirfile/xx", O_CREATE), "create dirfile/xx"),
        (lambda: fs.mkdir("dirfile/xx"), "mkdir dirfile/xx"),
        (lambda: fs.unlink("dirfile/xx"), "unlink dirfile/xx"),
        (lambda: fs.link("dirfile", "dirfile/xx"), "link to dirfile/xx"),
    ]
    refused = []
    for attempt, what in refusals:
        if attempt():
            raise CheckFailed(f"{name}: {what} succeeded!")
        refused.append(what)
    if not fs.unlink("dirfile"):
        raise CheckFailed(f"{name}: unlink dirfile failed!")

    if fs.probe_open(".", O_RDWR):
        raise CheckFailed(f"{name}: open . for writing succeeded!")
    refused.append("open . for writing")

    fd = fs.open(".", O_RDONLY)
    if fd is not None:
        try:
            with contextlib.suppress(OSError):
                if os.write(fd, b"x") > 0:
                    raise CheckFailed(f"{name}: write . succeeded!")
        finally:
            os.close(fd)
    refused.append("write .")
    return refused


def check_fourfiles(workdir):
    """Have four workers write their own files at once, then verify them.

    Returns a mapping from file name to the number of bytes read back.
    """
    fs = _Fs(workdir)
    names = [f"f{i}" for i in range(FOURFILES_CHILDREN)]
    for fname in names:
        fs.unlink(fname)

    def write(index):
        fd = _must_open(fs, names[index], O_CREATE | O_RDWR, "create failed")
        block = bytes([ord("0") + index]) * FOURFILES_SIZE
        try:
            for _ in range(FOURFILES_WRITES):
                written = os.write(fd, block)
                if written != FOURFILES_SIZE:
                    raise CheckFailed(f"write failed {written}")
        finally:
            os.close(fd)

    with ThreadPoolExecutor(max_workers=FOURFILES_CHILDREN) as pool:
        list(pool.map(write, range(FOURFILES_CHILDREN)))

    totals = {}
    for index, fname in enumerate(names):
        fd = _must_open(fs, fname, O_RDONLY, f"open {fname} failed")
        expected = ord("0") + index
        total = 0
        try:
            while data := os.read(fd, BUFSZ):
                if any(byte != expected for byte in data):
                    raise CheckFailed("wrong char")
                total += len(data)
        finally:
            os.close(fd)
        if total != FOURFILES_WRITES * FOURFILES_SIZE:
            raise CheckFailed(f"wrong length {total}")
        fs.unlink(fname)
        totals[fname] = total
    return totals


def _cd_name(child, i):
    return chr(ord("p") + child) + chr(ord("0") + i)


def check_createdelete(workdir):
    """Four workers create files and delete earlier ones in the same directory.

    Returns the names found to exist afterwards, in the order checked.
    """
    name = "createdelete"
    fs = _Fs(workdir)

    def work(child):
        for i in range(CREATEDELETE_FILES):
            fd = _must_open(fs, _cd_name(child, i), O_CREATE | O_RDWR, f"{name}: create failed")
            os.close(fd)
            if i > 0 and i % 2 == 0:
                if not fs.unlink(_cd_name(child, i // 2)):
                    raise CheckFailed(f"{name}: unlink failed")

    with ThreadPoolExecutor(max_workers=CREATEDELETE_CHILDREN) as pool:
        list(pool.map(work, range(CREATEDELETE_CHILDREN)))

    half = CREATEDELETE_FILES // 2
    present = []
    for i in range(CREATEDELETE_FILES):
        for child in range(CREATEDELETE_CHILDREN):
            entry = _cd_name(child, i)
            exists = fs.probe_open(entry, O_RDONLY)
            if (i == 0 or i >= half) and not exists:
                raise CheckFailed(f"{name}: oops createdelete {entry} didn't exist")
            if 1 <= i < half and exists:
                raise CheckFailed(f"{name}: oops createdelete {entry} did exist")
            if exists:
                present.append(entry)

    for entry in present:
        fs.unlink(entry)
    return present


def check_sharedfd(workdir):
    """Two writers share one descriptor; check nothing is overwritten.

    Returns the counts of each writer's bytes found in the file.
    """
    name = "sharedfd"
    fs = _Fs(workdir)
    fs.unlink("sharedfd")
    fd = _must_open(fs, "sharedfd", O_CREATE | O_RDWR,
                    f"{name}: cannot open sharedfd for writing")
    errors = []

    def write(marker):
        block = marker * SHAREDFD_SIZE
        try:
            for _ in range(SHAREDFD_WRITES):
                if os.write(fd, block) != SHAREDFD_SIZE:
                    raise CheckFailed(f"{name}: write sharedfd failed")
        except (OSError, CheckFailed) as exc:
            errors.append(exc)

    try:
        writers = [threading.Thread(target=write, args=(m,)) for m in (b"c", b"p")]
        for writer in writers:
            writer.start()
        for writer in writers:
            writer.join()
    finally:
        os.close(fd)
    if errors:
        raise CheckFailed(f"{name}: write sharedfd failed") from errors[0]

    fd = _must_open(fs, "sharedfd", O_RDONLY, f"{name}: cannot open sharedfd for reading")
    nc = np = 0
    try:
        while data := os.read(fd, SHAREDFD_SIZE):
            nc += data.count(b"c")
            np += data.count(b"p")
    finally:
        os.close(fd)
    fs.unlink("sharedfd")
    expected = SHAREDFD_WRITES * SHAREDFD_SIZE
    if nc != expected or np != expected:
        raise CheckFailed(f"{name}: nc/np test fails")
    return nc, np


def check_bigdir(workdir):
    """Fill a directory with many links to one file, then remove them all.

    Returns the link names, in the order they were made.
    """
    name = "bigdir"
    fs = _Fs(workdir)
    fs.unlink("bd")
    fd = _must_open(fs, "bd", O_CREATE, f"{name}: bigdir create failed")
    os.close(fd)

    names = [
        "x" + chr(ord("0") + i // 64) + chr(ord("0") + i % 64)
        for i in range(BIGDIR_ENTRIES)
    ]
    for entry in names:
        if not fs.link("bd", entry):
            raise CheckFailed(f"{name}: bigdir link(bd, {entry}) failed")

    fs.unlink("bd")
    for entry in names:
        if not fs.unlink(entry):
            raise CheckFailed(f"{name}: bigdir unlink failed")
    return names