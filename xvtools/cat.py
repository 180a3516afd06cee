"""Copy files or standard input to standard output."""

import sys

CHUNK_SIZE = 512


def cat(stream, out):
    """Copy binary *stream* to *out*; raises OSError on a read or write failure."""
    while True:
        try:
            chunk = stream.read(CHUNK_SIZE)
        except OSError as exc:
            raise OSError("cat: read error") from exc
        if not chunk:
            return
        try:
            written = out.write(chunk)
        except OSError as exc:
            raise OSError("cat: write error") from exc
        if written is not None and written != len(chunk):
            raise OSError("cat: write error")


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    sys.stdout.flush()
    out = sys.stdout.buffer
    try:
        if not args:
            cat(sys.stdin.buffer, out)
            return 0
        for path in args:
            try:
                stream = open(path, "rb")
            except OSError:
                print(f"cat: cannot open {path}", file=sys.stderr)
                return 1
            with stream:
                cat(stream, out)
    except OSError as exc:
        print(exc, file=sys.stderr)
        return 1
    finally:
        out.flush()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())