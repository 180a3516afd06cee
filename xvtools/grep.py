"""Search lines for a pattern supporting only ^ . * and $."""

import sys

MAX_LINE = 1022


def match(pattern, text):
    """Return True if *pattern* matches anywhere in *text*."""
    if pattern.startswith("^"):
        return _match_here(pattern, 1, text, 0)
    return any(_match_here(pattern, 0, text, start) for start in range(len(text) + 1))


def _match_here(pattern, pi, text, ti):
    while True:
        if pi == len(pattern):
            return True
        if pi + 1 < len(pattern) and pattern[pi + 1] == "*":
            return _match_star(pattern[pi], pattern, pi + 2, text, ti)
        if pattern[pi] == "$" and pi + 1 == len(pattern):
            return ti == len(text)
        if ti < len(text) and pattern[pi] in (".", text[ti]):
            pi += 1
            ti += 1
            continue
        return False


def _match_star(ch, pattern, pi, text, ti):
    while True:
        if _match_here(pattern, pi, text, ti):
            return True
        if ti < len(text) and (text[ti] == ch or ch == "."):
            ti += 1
        else:
            return False


def grep(pattern, stream, out):
    """Copy to *out* the newline-terminated lines of *stream* that match.

    A final line without a newline is ignored, and a line longer than
    MAX_LINE characters ends the search.  Returns the number of lines written.
    """
    found = 0
    for line in stream:
        if not line.endswith("\n") or len(line) - 1 > MAX_LINE:
            break
        if match(pattern, line[:-1]):
            out.write(line)
            found += 1
    return found


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print("usage: grep pattern [file ...]", file=sys.stderr)
        return 1
    pattern, *paths = args
    if not paths:
        grep(pattern, sys.stdin, sys.stdout)
        return 0
    for path in paths:
        try:
            stream = open(path, encoding="utf-8", errors="surrogateescape", newline="\n")
        except OSError:
            print(f"grep: cannot open {path}")
            return 1
        with stream:
            grep(pattern, stream, sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())