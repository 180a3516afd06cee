"""Count lines, words and characters."""

import sys
from dataclasses import dataclass

CHUNK_SIZE = 512
# A NUL byte also ends a word.
_SEPARATORS = frozenset(" \r\t\n\v\0")


@dataclass(frozen=True)
class Counts:
    """Line, word and character totals."""

    lines: int
    words: int
    chars: int


def _tally(chunks):
    lines = words = chars = 0
    in_word = False
    for chunk in chunks:
        if isinstance(chunk, (bytes, bytearray)):
            chunk = bytes(chunk).decode("latin-1")
        chars += len(chunk)
        lines += chunk.count("\n")
        for ch in chunk:
            if ch in _SEPARATORS:
                in_word = False
            elif not in_word:
                words += 1
                in_word = True
    return Counts(lines, words, chars)


def count(data):
    """Return the Counts of *data*, given as ``str`` or ``bytes``."""
    return _tally([data])


def wc(stream, name, out):
    """Count *stream*, write ``lines words chars name`` to *out*, return the Counts."""
    counts = _tally(iter(lambda: stream.read(CHUNK_SIZE), stream.read(0)))
    out.write(f"{counts.lines} {counts.words} {counts.chars} {name}\n")
    return counts


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        if not args:
            wc(sys.stdin.buffer, "", sys.stdout)
            return 0
        for path in args:
            try:
                stream = open(path, "rb")
            except OSError:
                print(f"wc: cannot open {path}")
                return 1
            with stream:
                wc(stream, path, sys.stdout)
    except OSError:
        print("wc: read error")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())