"""Reading of float, string, character and scan-set conversions from an input stream."""

from __future__ import annotations

import math
import re
import struct

from .scanformat import BRACE, BracketTable, NumberWidth, ScanSpec
from .scannumber import ScanFailed
from .stream import EOF, SPACE_CHARS, InputStream

_DIGITS = frozenset("0123456789")
_MULTI_BYTE_MAX = 6

_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:inf(?:inity)?|nan|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))",
    re.IGNORECASE,
)


class BufferTooSmall(ValueError):
    """Raised when the destination of a text conversion has no room left."""


def _read_sign(stream: InputStream, spec: ScanSpec, out: list[str]) -> None:
    if not spec.width_left():
        return
    ch = stream.get_char()
    if ch in ("+", "-"):
        spec.consume_width()
        if ch == "-":
            out.append("-")
    else:
        stream.unget_char(ch)


def _read_digits(stream: InputStream, spec: ScanSpec, out: list[str]) -> bool:
    started = False
    while spec.width_left():
        ch = stream.get_char()
        if ch is EOF or ch not in _DIGITS:
            stream.unget_char(ch)
            break
        spec.consume_width()
        started = True
        out.append(ch)
    return started


def read_float(stream: InputStream, spec: ScanSpec) -> str:
    """Read the text of one floating-point number for ``spec``.

    The returned text holds an optional ``-``, digits, an optional fraction
    and an optional exponent written with ``e``.  Raises
    :class:`ScanFailed` when no digit was read.
    """
    out: list[str] = []
    _read_sign(stream, spec, out)
    started = _read_digits(stream, spec, out)

    if spec.width_left():
        ch = stream.get_char()
        if ch == ".":
            spec.consume_width()
            out.append(".")
            started = _read_digits(stream, spec, out) or started
        else:
            stream.unget_char(ch)

    if started and spec.width_left():
        ch = stream.get_char()
        if ch in ("e", "E"):
            spec.consume_width()
            out.append("e")
            _read_sign(stream, spec, out)
            _read_digits(stream, spec, out)
        else:
            stream.unget_char(ch)

    if not started:
        raise ScanFailed("no digits for floating-point conversion")
    return "".join(out)


def _to_single(value: float) -> float:
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def float_value(text: str, spec: ScanSpec) -> float:
    """Convert the longest numeric prefix of ``text`` to the precision ``spec`` stores.

    ``float`` targets are rounded to single precision; ``double`` and
    ``long double`` targets keep double precision.  Raises
    :class:`ScanFailed` when ``text`` holds no number.
    """
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        raise ScanFailed(f"no number in {text!r}")
    value = float(match.group(1))
    if spec.number_width > NumberWidth.INT:
        return value
    return _to_single(value)


def _can_take(spec: ScanSpec, ch: str | None, table: BracketTable | None) -> bool:
    if ch is EOF:
        return False
    if spec.conversion == "c":
        return True
    if spec.conversion == "s":
        return ch not in SPACE_CHARS
    if spec.conversion == BRACE and table is not None:
        return table.accepts(ch)
    return False


def _wide_char(stream: InputStream, ch: str) -> str:
    """Decode a UTF-8 sequence whose lead byte is ``ch``; ``?`` when it fails."""
    code = ord(ch)
    if code < 0x80 or code > 0xFF:
        return ch
    raw = bytearray([code])
    while len(raw) < _MULTI_BYTE_MAX:
        nxt = stream.get_char()
        if nxt is EOF or ord(nxt) > 0xFF:
            return "?"
        raw.append(ord(nxt))
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            continue
    return "?"


def read_string(
    stream: InputStream,
    spec: ScanSpec,
    table: BracketTable | None,
    size: int | None,
) -> str:
    """Read the text of a ``%c``, ``%s`` or ``%[`` conversion.

    ``size`` is the destination's capacity in characters; for ``%s`` and
    ``%[`` one of them is kept for the terminator.  A suppressed conversion
    needs no size.  ``%c`` without a width reads one character.  Returns the
    characters read.  Raises :class:`BufferTooSmall` when the destination
    fills up and :class:`ScanFailed` when nothing matched.
    """
    if spec.conversion == "c" and not spec.width_set:
        spec.width_set = True
        spec.width = 1

    remaining = 0
    if not spec.suppress:
        if size is None or size < 1:
            raise ValueError("a destination size of at least 1 is required")
        remaining = size if spec.conversion == "c" else size - 1

    out: list[str] = []
    while spec.width_left():
        spec.consume_width()
        ch = stream.get_char()
        if not _can_take(spec, ch, table):
            stream.unget_char(ch)
            break
        if spec.suppress:
            out.append(ch)
            continue
        if remaining == 0:
            raise BufferTooSmall(f"destination of {size} characters is too small")
        out.append(_wide_char(stream, ch) if spec.is_wide else ch)
        remaining -= 1

    if not out:
        raise ScanFailed("no input matched the text conversion")
    return "".join(out)