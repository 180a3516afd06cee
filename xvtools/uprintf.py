"""Minimal formatted output understanding %d, %l, %x, %p, %s, %c and %%."""

import sys

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF


def _int32(value):
    value &= _MASK32
    return value - (1 << 32) if value & 0x80000000 else value


def _format_int(value, base, signed):
    number = _int32(value)
    negative = signed and number < 0
    magnitude = -number if negative else number & _MASK32
    text = format(magnitude, "X") if base == 16 else str(magnitude)
    return "-" + text if negative else text


def _format_pointer(value):
    return "0x" + format(value & _MASK64, "016X")


def _format_string(value):
    if value is None:
        return "(null)"
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def _format_char(value):
    if isinstance(value, str):
        return value[:1]
    return chr(value & 0xFF)


def format_message(fmt, *args):
    """Render *fmt* with *args* and return the text.

    %d is a signed 32-bit integer, %l and %x print the low 32 bits as
    unsigned decimal and upper-case hex, %p prints 16 hex digits.
    Unknown sequences are copied through unchanged.
    """
    pending = iter(args)

    def take():
        try:
            return next(pending)
        except StopIteration:
            raise TypeError(f"not enough arguments for format {fmt!r}") from None

    out = []
    chars = iter(fmt)
    for ch in chars:
        if ch != "%":
            out.append(ch)
            continue
        spec = next(chars, None)
        if spec is None:
            break
        if spec == "d":
            out.append(_format_int(take(), 10, signed=True))
        elif spec == "l":
            out.append(_format_int(take(), 10, signed=False))
        elif spec == "x":
            out.append(_format_int(take(), 16, signed=False))
        elif spec == "p":
            out.append(_format_pointer(take()))
        elif spec == "s":
            out.append(_format_string(take()))
        elif spec == "c":
            out.append(_format_char(take()))
        elif spec == "%":
            out.append("%")
        else:
            out.append("%" + spec)
    return "".join(out)


def fprintf(stream, fmt, *args):
    """Write the formatted text to *stream*."""
    stream.write(format_message(fmt, *args))


def printf(fmt, *args):
    """Write the formatted text to standard output."""
    fprintf(sys.stdout, fmt, *args)