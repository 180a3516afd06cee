"""Random file-system operations, run to shake out bugs in the file system."""

import contextlib
import errno
import os
from collections import Counter

from xvtools.cat import cat
from xvtools.echo import echo

_MODULUS = 0x7FFFFFFF
_MULTIPLIER = 16807
OPERATIONS = 23
BUFFER_SIZE = 999
SBRK_STEP = 6011


def do_rand(state):
    """Return the next Park-Miller value after *state*; it is also the new state.

    The state is mapped into [1, 0x7ffffffe], multiplied by 7**5 modulo
    2**31 - 1, and the result returned in [0, 0x7ffffffd].
    """
    x = (state % 0x7FFFFFFE) + 1
    x = (_MULTIPLIER * x) % _MODULUS
    return x - 1


class ParkMiller:
    """The minimal-standard random number generator, seeded with *seed*."""

    def __init__(self, seed=1):
        self.state = seed

    def next(self):
        """Advance and return the next value."""
        self.state = do_rand(self.state)
        return self.state


class _Grinder:
    def __init__(self, root):
        self.root = os.path.abspath(root)
        self.cwd = []
        self.fd = None
        self.buf = bytearray(BUFFER_SIZE)
        self.heap = bytearray()

    # -- path handling: "/" is the root directory, ".." never leaves it --

    def _host(self, parts):
        return os.path.join(self.root, *parts)

    def _parts(self, path, cwd=None):
        parts = [] if path.startswith("/") else list(self.cwd if cwd is None else cwd)
        for comp in path.split("/"):
            if not comp:
                continue
            current = self._host(parts)
            if not os.path.isdir(current):
                code = errno.ENOTDIR if os.path.exists(current) else errno.ENOENT
                raise OSError(code, os.strerror(code), path)
            if comp == ".":
                continue
            if comp == "..":
                if parts:
                    parts.pop()
            else:
                parts.append(comp)
        return parts

    def _path(self, path, cwd=None):
        return self._host(self._parts(path, cwd))

    # -- system-call equivalents; failures raise OSError --

    def open(self, path, cwd=None):
        return os.open(self._path(path, cwd), os.O_CREAT | os.O_RDWR, 0o666)

    def touch(self, path, cwd=None):
        with contextlib.suppress(OSError):
            os.close(self.open(path, cwd))

    def unlink(self, path, cwd=None):
        with contextlib.suppress(OSError):
            target = self._path(path, cwd)
            if os.path.isdir(target) and not os.path.islink(target):
                os.rmdir(target)
            else:
                os.unlink(target)

    def mkdir(self, path, cwd=None):
        with contextlib.suppress(OSError):
            os.mkdir(self._path(path, cwd))

    def link(self, old, new):
        with contextlib.suppress(OSError):
            os.link(self._path(old), self._path(new))

    def chdir(self, path):
        parts = self._parts(path)
        if not os.path.isdir(self._host(parts)):
            raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), path)
        self.cwd = parts

    def must_chdir(self, path, message):
        try:
            self.chdir(path)
        except OSError as exc:
            raise RuntimeError(message) from exc

    def close_fd(self):
        if self.fd is not None:
            with contextlib.suppress(OSError):
                os.close(self.fd)
            self.fd = None

    def reopen(self, path):
        self.close_fd()
        with contextlib.suppress(OSError):
            self.fd = self.open(path)

    # -- the operations --

    def setup(self):
        self.mkdir("grindir")
        self.must_chdir("grindir", "grind: chdir grindir failed")
        self.chdir("/")

    def step(self, what):
        if what == 1:
            self.touch("grindir/../a")
        elif what == 2:
            self.touch("grindir/../grindir/../b")
        elif what == 3:
            self.unlink("grindir/../a")
        elif what == 4:
            self.must_chdir("grindir", "grind: chdir grindir failed")
            self.unlink("../b")
            self.chdir("/")
        elif what == 5:
            self.reopen("/grindir/../a")
        elif what == 6:
            self.reopen("/./grindir/./../b")
        elif what == 7:
            if self.fd is not None:
                with contextlib.suppress(OSError):
                    os.write(self.fd, self.buf)
        elif what == 8:
            if self.fd is not None:
                with contextlib.suppress(OSError):
                    data = os.read(self.fd, BUFFER_SIZE)
                    self.buf[:len(data)] = data
        elif what == 9:
            self.mkdir("grindir/../a")
            self.touch("a/../a/./a")
            self.unlink("a/a")
        elif what == 10:
            self.mkdir("/../b")
            self.touch("grindir/../b/b")
            self.unlink("b/b")
        elif what == 11:
            self.unlink("b")
            self.link("../grindir/./../a", "../b")
        elif what == 12:
            self.unlink("../grindir/../a")
            self.link(".././b", "/grindir/../a")
        elif what == 15:
            self.heap.extend(bytes(SBRK_STEP))
        elif what == 16:
            self.heap.clear()
        elif what == 17:
            self.touch("a")
            self.must_chdir("../grindir/..", "grind: chdir failed")
        elif what == 19:
            self._pipe_round_trip()
        elif what == 20:
            self._scratch_directory()
        elif what == 21:
            self._check_fresh_file()
        elif what == 22:
            self._pipeline()
        # 0, 13, 14 and 18 only create and reap short-lived processes.

    def _pipe_round_trip(self):
        try:
            read_end, write_end = os.pipe()
        except OSError as exc:
            raise RuntimeError("grind: pipe failed") from exc
        try:
            os.write(write_end, b"x")
            os.read(read_end, 1)
        finally:
            os.close(read_end)
            os.close(write_end)

    def _scratch_directory(self):
        cwd = list(self.cwd)
        self.unlink("a", cwd)
        self.mkdir("a", cwd)
        with contextlib.suppress(OSError):
            cwd = self._parts("a", cwd)
        self.unlink("../a", cwd)
        with contextlib.suppress(OSError):
            os.close(self.open("x", cwd))
        self.unlink("x", cwd)

    def _check_fresh_file(self):
        self.unlink("c")
        try:
            fd = self.open("c")
        except OSError as exc:
            raise RuntimeError("grind: create c failed") from exc
        try:
            if os.write(fd, b"x") != 1:
                raise RuntimeError("grind: write c failed")
            size = os.fstat(fd).st_size
            if size != 1:
                raise RuntimeError(f"grind: fstat reports wrong size {size}")
        finally:
            os.close(fd)
        self.unlink("c")

    def _pipeline(self):
        aa_r, aa_w = os.pipe()
        bb_r, bb_w = os.pipe()
        with os.fdopen(aa_w, "w") as producer:
            producer.write(echo(["hi"]))
        with os.fdopen(aa_r, "rb") as source, os.fdopen(bb_w, "wb") as sink:
            cat(source, sink)
        with os.fdopen(bb_r, "rb") as result:
            got = b"".join(result.read(1) for _ in range(3))
        if got != b"hi\n":
            raise RuntimeError(f'grind: exec pipeline failed "{got.decode(errors="replace")}"')


def grind_steps(directory, rng, steps):
    """Run *steps* random operations inside *directory*, which acts as "/".

    Each step picks ``rng.next() % 23``; returns a Counter of the
    operation numbers run.  Raises RuntimeError where a step that must
    succeed fails.
    """
    grinder = _Grinder(directory)
    grinder.setup()
    done = Counter()
    try:
        for _ in range(steps):
            what = rng.next() % OPERATIONS
            grinder.step(what)
            done[what] += 1
    finally:
        grinder.close_fd()
    return done