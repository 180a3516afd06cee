"""Several workers writing and reading their own files at the same time."""

import os
import sys
import threading
from concurrent.futures import ThreadPoolExecutor

BLOCK_SIZE = 512
BLOCKS = 20
WORKERS = 5


def stressfs(directory, workers=WORKERS, out=None):
    """Have *workers* threads each write and read back a file in *directory*.

    Worker i uses ``stressfs<i>``, opened without truncation.  Returns a
    mapping from each file's path to the number of bytes read back.
    """
    if workers < 1:
        raise ValueError("at least one worker is needed")
    out = sys.stdout if out is None else out
    lock = threading.Lock()

    def say(text):
        with lock:
            out.write(text + "\n")

    data = b"a" * BLOCK_SIZE
    say("stressfs starting")

    def work(index):
        say(f"write {index}")
        path = os.path.join(directory, f"stressfs{index}")
        fd = os.open(path, os.O_CREAT | os.O_RDWR, 0o666)
        try:
            for _ in range(BLOCKS):
                os.write(fd, data)
        finally:
            os.close(fd)
        say("read")
        total = 0
        fd = os.open(path, os.O_RDONLY)
        try:
            for _ in range(BLOCKS):
                total += len(os.read(fd, BLOCK_SIZE))
        finally:
            os.close(fd)
        return path, total

    with ThreadPoolExecutor(max_workers=workers) as pool:
        return dict(pool.map(work, range(workers)))


def main(argv=None):
    stressfs(".", WORKERS, sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())