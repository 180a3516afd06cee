"""List a file, or the entries of a directory, with type, inode and size."""

import os
import sys

from xvtools.filestat import FileType, stat_path

DIRSIZ = 14
PATH_BUFFER = 512


def fmtname(path):
    """Return the last component of *path*, blank-padded to DIRSIZ characters."""
    name = path.rsplit("/", 1)[-1]
    if len(name) >= DIRSIZ:
        return name
    return name.ljust(DIRSIZ)


def _line(name, info):
    return f"{name} {int(info.type)} {info.ino} {info.size}\n"


def ls(path, out):
    """Write one line per listed file to *out*.

    Returns the listed entries as (path, FileStat) pairs; a directory
    lists ``.`` and ``..`` first, then its entries by name.
    """
    try:
        info = stat_path(path)
    except OSError:
        print(f"ls: cannot open {path}", file=sys.stderr)
        return []
    if info.type != FileType.DIR:
        out.write(_line(fmtname(path), info))
        return [(path, info)]
    if len(path) + 1 + DIRSIZ + 1 > PATH_BUFFER:
        out.write("ls: path too long\n")
        return []
    try:
        names = [".", ".."] + sorted(os.listdir(path))
    except OSError:
        print(f"ls: cannot open {path}", file=sys.stderr)
        return []
    listed = []
    for name in names:
        entry = f"{path}/{name}"
        try:
            entry_info = stat_path(entry)
        except OSError:
            out.write(f"ls: cannot stat {entry}\n")
            continue
        out.write(_line(fmtname(entry), entry_info))
        listed.append((entry, entry_info))
    return listed


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    for path in args or ["."]:
        ls(path, sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())