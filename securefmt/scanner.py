"""The scanf-style input engine: matching a format against a character stream."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO

from .scanformat import (
    BRACE,
    BracketTable,
    NumberWidth,
    ScanFormatError,
    ScanSpec,
    parse_bracket,
    parse_directive,
)
from .scannumber import ScanFailed, read_integer, to_typed_integer
from .scantext import BufferTooSmall, float_value, read_float, read_string
from .stream import EOF, SPACE_CHARS, InputStream, file_stream, string_stream

_TEXT_CONVERSIONS = ("c", "s", BRACE)
_INTEGER_CONVERSIONS = ("p", "o", "u", "d", "i", "x")
_FLOAT_CONVERSIONS = ("e", "f", "g")
_UNSIGNED_CONVERSIONS = ("o", "u", "x", "p")


@dataclass(frozen=True)
class ScanResult:
    """Values stored by a scan, in format order, and how many conversions counted.

    ``values`` also holds ``%n`` results, which ``count`` leaves out.
    """

    values: tuple = field(default_factory=tuple)
    count: int = 0


class ScanError(ValueError):
    """Raised for an invalid format or a missing destination.

    ``result`` holds whatever was stored before the error.
    """

    def __init__(self, message: str, result: ScanResult | None = None):
        super().__init__(message)
        self.result = result if result is not None else ScanResult()


class ScanEOFError(ScanError, EOFError):
    """Raised when input ended before anything was matched or stored."""


class _Recorder:
    """Wraps a stream and remembers the last character read from it."""

    def __init__(self, stream: InputStream):
        self._stream = stream
        self.last: str | None = ""

    @property
    def consumed(self) -> int:
        return self._stream.consumed

    def get_char(self) -> str | None:
        self.last = self._stream.get_char()
        return self.last

    def unget_char(self, ch: str | None) -> None:
        self._stream.unget_char(ch)

    def skip_space(self) -> str | None:
        while True:
            ch = self.get_char()
            if ch is EOF or ch not in SPACE_CHARS:
                return ch


def _storage_bits(spec: ScanSpec) -> int:
    if spec.is_64bit or spec.number_width > NumberWidth.INT:
        return 64
    if spec.number_width == NumberWidth.INT:
        return 32
    if spec.number_width == NumberWidth.SHORT:
        return 16
    return 8


def _integer_value(number: int, spec: ScanSpec) -> int:
    if spec.original in _UNSIGNED_CONVERSIONS:
        return number & ((1 << _storage_bits(spec)) - 1)
    return to_typed_integer(number, spec)


def _next_size(sizes) -> int | None:
    try:
        return next(sizes)
    except StopIteration:
        raise TypeError("missing destination size for a text conversion") from None


def scan_stream(stream: InputStream, fmt: str, *args) -> ScanResult:
    """Match ``fmt`` against ``stream`` and return what was stored.

    Every ``%c``, ``%s`` and ``%[`` that is not suppressed takes one entry
    from ``args``: the destination's size in characters, or ``None`` for a
    missing destination.  Numeric and ``%n`` conversions take no argument.
    """
    reader = _Recorder(stream)
    sizes = iter(args)
    values: list = []
    done = 0
    matched = 0
    format_error = False
    para_null = False
    pos = 0
    try:
        while pos < len(fmt):
            current = fmt[pos]
            if current in SPACE_CHARS:
                reader.unget_char(reader.skip_space())
                while pos < len(fmt) and fmt[pos] in SPACE_CHARS:
                    pos += 1
                continue

            if current != "%":
                ch = reader.get_char()
                if ch != current:
                    reader.unget_char(ch)
                    break
                pos += 1
                continue

            try:
                spec, pos = parse_directive(fmt, pos)
            except ScanFormatError:
                format_error = True
                break
            if not spec.width_left():
                break

            conversion = spec.conversion
            if conversion != "n":
                if conversion in ("c", BRACE):
                    ch = reader.get_char()
                else:
                    ch = reader.skip_space()
                if ch is EOF:
                    break

            if conversion in _TEXT_CONVERSIONS:
                reader.unget_char(ch)
                size = None
                if not spec.suppress:
                    size = _next_size(sizes)
                    if size is None:
                        para_null = True
                        break
                    if size < 1:
                        break
                table: BracketTable | None = None
                if conversion == BRACE:
                    try:
                        table, pos = parse_bracket(fmt, pos)
                    except ScanFormatError:
                        break
                    if pos >= len(fmt):
                        break
                try:
                    text = read_string(reader, spec, table, size)
                except (BufferTooSmall, ScanFailed):
                    break
                if not spec.suppress:
                    values.append(text)
                    done += 1
            elif conversion in _INTEGER_CONVERSIONS:
                reader.unget_char(ch)
                try:
                    number = read_integer(reader, spec)
                except ScanFailed:
                    break
                if not spec.suppress:
                    values.append(_integer_value(number, spec))
                    done += 1
            elif conversion == "n":
                if not spec.suppress:
                    spec.is_64bit = False
                    values.append(to_typed_integer(reader.consumed & 0xFFFFFFFF, spec))
            elif conversion in _FLOAT_CONVERSIONS:
                reader.unget_char(ch)
                try:
                    text = read_float(reader, spec)
                except ScanFailed:
                    break
                if not spec.suppress:
                    try:
                        values.append(float_value(text, spec))
                    except ScanFailed:
                        break
                    done += 1
            else:
                if spec.raw != ch:
                    reader.unget_char(ch)
                    format_error = True
                    break
                pos += 1
                continue
            matched += 1
            pos += 1
    finally:
        stream.close()

    result = ScanResult(values=tuple(values), count=done)
    if reader.last is EOF:
        if done or matched:
            return result
        raise ScanEOFError("input ended before any conversion", result)
    if format_error:
        raise ScanError("invalid format directive", result)
    if para_null:
        raise ScanError("missing destination for a text conversion", result)
    return result


def sscanf(text: str, fmt: str, *args) -> ScanResult:
    """Scan ``text`` according to ``fmt``."""
    return scan_stream(string_stream(text), fmt, *args)


def fscanf(fileobj: BinaryIO, fmt: str, *args) -> ScanResult:
    """Scan a binary file according to ``fmt``, leaving it just past what was used."""
    with file_stream(fileobj) as stream:
        return scan_stream(stream, fmt, *args)


def first_buffer_cleared(buffer: str, fmt: str, *args) -> bool:
    """Return True if the first directive's destination is to be emptied up front.

    That holds when the first directive is an unsuppressed ``%s``, or a
    ``%c`` or complete ``%[...]`` while ``buffer`` is empty, and the first
    argument is a non-zero destination size.
    """
    start = fmt.find("%")
    if start < 0:
        return False
    try:
        spec, pos = parse_directive(fmt, start)
    except ScanFormatError:
        return False
    if spec.suppress:
        return False
    conversion = spec.conversion
    if conversion not in _TEXT_CONVERSIONS:
        return False
    if conversion == BRACE:
        if spec.raw == "{":
            return False
        pos += 1
        if pos < len(fmt) and fmt[pos] == "^":
            pos += 1
        if pos < len(fmt) and fmt[pos] == "]":
            pos += 1
        if fmt.find("]", pos) < 0:
            return False
    if buffer and conversion != "s":
        return False
    if not args:
        return False
    size = args[0]
    if size is None or (size & 0xFFFFFFFF) == 0:
        return False
    return True