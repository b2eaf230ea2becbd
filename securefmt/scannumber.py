"""Reading of integer conversions (``%d %i %o %u %x %p``) from an input stream."""

from __future__ import annotations

from .scanformat import NumberWidth, ScanSpec
from .stream import EOF, InputStream

_MAX_64 = 2**64 - 1
_MAX_32 = 2**32 - 1
_MIN_64_NEG = 2**63
_MAX_64_POS = 2**63 - 1

_DECIMAL = frozenset("0123456789")
_OCTAL = frozenset("01234567")
_HEX = frozenset("0123456789abcdefABCDEF")

_RADIX = {"x": 16, "p": 16, "o": 8}


class ScanFailed(ValueError):
    """Raised when the input does not hold a value for the conversion."""


def _is_signed(spec: ScanSpec) -> bool:
    return spec.original in ("d", "i")


def _accepts(spec: ScanSpec, ch: str | None) -> bool:
    if ch is EOF:
        return False
    if spec.conversion in ("x", "p"):
        return ch in _HEX
    if spec.conversion == "o":
        return ch in _OCTAL
    return ch in _DECIMAL


def _finish_negative_int(number: int, beyond: bool, signed: bool) -> int:
    if signed:
        if number > _MIN_64_NEG:
            number = 0
        else:
            number = (-(number & _MAX_32)) & _MAX_32
        if beyond:
            number = 0
        return number
    if number > _MAX_32 + 1:
        number = _MAX_32
    else:
        number = (-(number & _MAX_32)) & _MAX_32
    if beyond:
        number = _MAX_64
    return number


def _finish_negative_other(number: int, beyond: bool, signed: bool, width: int) -> int:
    if signed:
        if number > _MIN_64_NEG:
            number = _MIN_64_NEG
        else:
            number = (-number) & _MAX_64
        if beyond:
            if width < NumberWidth.INT:
                number = 0
            if width == NumberWidth.LONG:
                number = _MIN_64_NEG
        return number
    number = (-number) & _MAX_64
    if beyond:
        number = _MAX_64
    return number


def _finish_positive_int(number: int, beyond: bool, signed: bool) -> int:
    if signed:
        if number > _MAX_64_POS or beyond:
            number = _MAX_64
        return number
    if beyond:
        number = _MAX_32
    return number


def _finish_positive_other(number: int, beyond: bool, signed: bool, width: int) -> int:
    if signed:
        if number > _MAX_64_POS:
            number = _MAX_64_POS
        if beyond and width < NumberWidth.INT:
            number = _MAX_64
        if beyond and width == NumberWidth.LONG:
            number = _MAX_64_POS
        return number
    if beyond:
        number = _MAX_64
    return number


def _finish_64(number: int, beyond: bool, signed: bool, negative: bool) -> int:
    if negative:
        if signed:
            number = _MIN_64_NEG if number > _MIN_64_NEG else (-number) & _MAX_64
            if beyond:
                number = _MIN_64_NEG
            return number
        number = (-number) & _MAX_64
        return _MAX_64 if beyond else number
    if signed:
        if number > _MAX_64_POS or beyond:
            number = _MAX_64_POS
        return number
    return _MAX_64 if beyond else number


def _finish(value: int, spec: ScanSpec, negative: bool) -> int:
    beyond = value > _MAX_64
    number = value & _MAX_64
    signed = _is_signed(spec)
    if spec.is_64bit:
        return _finish_64(number, beyond, signed, negative)
    if spec.number_width == NumberWidth.INT:
        if negative:
            return _finish_negative_int(number, beyond, signed)
        return _finish_positive_int(number, beyond, signed)
    if negative:
        return _finish_negative_other(number, beyond, signed, spec.number_width)
    return _finish_positive_other(number, beyond, signed, spec.number_width)


def read_integer(stream: InputStream, spec: ScanSpec) -> int:
    """Read one integer for ``spec`` and return its stored bits as an unsigned value.

    Out-of-range input saturates the way the conversion's type demands.
    Raises :class:`ScanFailed` when no digit could be read.
    """
    if spec.original == "p":
        spec.number_width = NumberWidth.INT
        spec.is_64bit = True

    ch = stream.get_char()
    stream.unget_char(ch)

    negative = False
    if ch in ("+", "-"):
        negative = ch == "-"
        spec.consume_width()
        stream.get_char()
        ch = stream.get_char()
        stream.unget_char(ch)

    if spec.original == "i":
        spec.conversion = "d"

    started = False
    if ch == "0" and spec.original in ("x", "i") and spec.width_left():
        spec.consume_width()
        stream.get_char()
        if not spec.width_left():
            return 0
        following = stream.get_char()
        if following in ("x", "X"):
            spec.conversion = "x"
            spec.consume_width()
        else:
            if spec.original == "i":
                spec.conversion = "o"
            stream.unget_char(following)
            started = True

    radix = _RADIX.get(spec.conversion, 10)
    value = 0
    while spec.width_left():
        ch = stream.get_char()
        if not _accepts(spec, ch):
            stream.unget_char(ch)
            break
        spec.consume_width()
        started = True
        value = value * radix + int(ch, 16)

    number = _finish(value, spec, negative)
    if not started:
        raise ScanFailed("no digits for integer conversion")
    return number


def _to_signed(value: int, bits: int) -> int:
    mask = (1 << bits) - 1
    value &= mask
    return value - (1 << bits) if value >> (bits - 1) else value


def to_typed_integer(value: int, spec: ScanSpec) -> int:
    """Return ``value`` as the signed integer the conversion's target type would hold."""
    if spec.is_64bit or spec.number_width > NumberWidth.INT:
        return _to_signed(value, 64)
    if spec.number_width == NumberWidth.INT:
        return _to_signed(value, 32)
    if spec.number_width == NumberWidth.SHORT:
        return _to_signed(value, 16)
    return _to_signed(value, 8)