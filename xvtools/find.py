"""Search a directory tree for entries with a given name."""

import os
import sys

from xvtools.filestat import FileType, stat_path

DIRSIZ = 14
PATH_BUFFER = 512


def fmtname(path):
    """Return the last component of *path*, the text after its last slash."""
    return path.rsplit("/", 1)[-1]


def find(path, filename, out):
    """Write to *out* every path under *path* whose last component is *filename*.

    Returns the matching paths in the order they were written.
    """
    matches = []
    _walk(path, filename, out, matches, descend=True)
    return matches


def _walk(path, filename, out, matches, descend):
    if fmtname(path) == filename:
        out.write(f"{path}\n")
        matches.append(path)
    try:
        info = stat_path(path)
    except OSError:
        print(f"find: cannot open {path}", file=sys.stderr)
        return
    if info.type != FileType.DIR or not descend:
        return
    if len(path) + 1 + DIRSIZ + 1 > PATH_BUFFER:
        out.write("find: path too long\n")
        return
    try:
        names = sorted(os.listdir(path))
    except OSError:
        print(f"find: cannot open {path}", file=sys.stderr)
        return
    for name in names:
        if name in (".", ".."):
            continue
        child = f"{path}/{name}"
        # Symbolic links are matched by name but never followed.
        _walk(child, filename, out, matches, descend=not os.path.islink(child))


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2:
        print("find requires 3 args")
        return 1
    path, filename = args
    find(path, filename, sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())