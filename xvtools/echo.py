"""Print the arguments separated by spaces."""

import sys


def echo(args):
    """Return the arguments joined by spaces with a newline, or '' for none."""
    args = list(args)
    if not args:
        return ""
    return " ".join(args) + "\n"


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    sys.stdout.write(echo(args))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())