"""Decoding of scanf-style conversion directives and ``%[...]`` scan sets."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

BRACE = "{"
"""Lower-cased form of ``[``; the conversion code of a scan-set directive."""

MAX_WIDTH = 2**31 - 1
"""Largest field width a directive may carry."""

_MAX_WIDTH_DIV_TEN = MAX_WIDTH // 10
_INTEGER_AFTER_I = frozenset("dioxX")


class ScanFormatError(ValueError):
    """Raised when a format directive cannot be decoded."""


class NumberWidth(enum.IntEnum):
    """Size of the integer or float a numeric conversion stores."""

    CHAR = -1
    SHORT = 0
    INT = 1
    LONG = 2
    LONG_LONG = 3


def _lower(ch: str) -> str:
    return chr(ord(ch) | 0x20) if ch else ""


@dataclass
class ScanSpec:
    """Everything a single ``%`` directive says about one conversion.

    ``conversion`` starts equal to ``original`` (both lower-cased) and may be
    narrowed while an integer is read; ``raw`` is the character exactly as it
    appears in the format.  ``wide`` is -1 or 0 for narrow text and 1 for wide
    text or ``long`` arguments.
    """

    width: int = 0
    width_set: bool = False
    number_width: int = NumberWidth.INT
    is_64bit: bool = False
    wide: int = 0
    suppress: bool = False
    conversion: str = ""
    original: str = ""
    raw: str = ""

    @property
    def is_wide(self) -> bool:
        return self.wide > 0

    def width_left(self) -> bool:
        """Return True while the field width still allows another character."""
        return not self.width_set or self.width > 0

    def consume_width(self) -> None:
        """Account for one character taken from the field."""
        if self.width_set:
            self.width -= 1


def _char_at(fmt: str, index: int) -> str:
    return fmt[index] if index < len(fmt) else ""


def _decode_width(fmt: str, pos: int, spec: ScanSpec) -> int:
    while pos < len(fmt) and "0" <= fmt[pos] <= "9":
        spec.width_set = True
        if spec.width > _MAX_WIDTH_DIV_TEN:
            raise ScanFormatError(f"field width too large at position {pos}")
        spec.width = spec.width * 10 + (ord(fmt[pos]) - ord("0"))
        pos += 1
    return pos


def _decode_qualifier(fmt: str, pos: int, spec: ScanSpec) -> tuple[int, bool]:
    """Apply the qualifier at ``pos``; return the new position and whether decoding ends."""
    ch = _char_at(fmt, pos)
    if ch in ("F", "N"):
        return pos, False
    if ch == "h":
        spec.number_width -= 1
        spec.wide = -1
        return pos, False
    if ch in ("j", "t", "z", "L", "q"):
        spec.number_width = NumberWidth.LONG_LONG
        spec.is_64bit = True
        return pos, False
    if ch == "l":
        if _char_at(fmt, pos + 1) == "l":
            spec.is_64bit = True
            spec.number_width = NumberWidth.LONG_LONG
            return pos + 1, False
        spec.number_width = NumberWidth.LONG
        spec.is_64bit = True
        spec.wide = 1
        return pos, False
    if ch == "w":
        spec.wide = 1
        return pos, False
    if ch == "*":
        spec.suppress = True
        return pos, False
    if ch == "I":
        following = fmt[pos + 1:pos + 3]
        if following == "64":
            spec.is_64bit = True
            return pos + 2, False
        if following == "32":
            return pos + 2, False
        spec.is_64bit = True
        return pos, _char_at(fmt, pos + 1) not in _INTEGER_AFTER_I
    return pos, True


def _update_wide_flag(ch: str, spec: ScanSpec) -> None:
    if spec.wide != 0:
        return
    spec.wide = 1 if ch in ("C", "S") else -1


def parse_directive(fmt: str, pos: int) -> tuple[ScanSpec, int]:
    """Decode the directive whose ``%`` is at ``fmt[pos]``.

    Returns the spec and the index of the conversion character, which is
    ``len(fmt)`` when the format ends inside the directive.
    """
    spec = ScanSpec()
    finished = False
    while not finished:
        pos += 1
        pos = _decode_width(fmt, pos, spec)
        pos, finished = _decode_qualifier(fmt, pos, spec)
    raw = _char_at(fmt, pos)
    _update_wide_flag(raw, spec)
    spec.raw = raw
    spec.conversion = _lower(raw)
    spec.original = spec.conversion
    return spec, pos


@dataclass
class BracketTable:
    """The set of characters a ``%[...]`` directive accepts."""

    chars: set[str] = field(default_factory=set)
    negated: bool = False

    def add(self, ch: str) -> None:
        """Put one character into the set."""
        self.chars.add(ch)

    def add_range(self, start: str, end: str) -> None:
        """Put every character from ``start`` to ``end`` inclusive into the set."""
        self.chars.update(chr(code) for code in range(ord(start), ord(end) + 1))

    def accepts(self, ch: str | None) -> bool:
        """Return True if ``ch`` may be stored by the directive."""
        if ch is None:
            return False
        return (ch in self.chars) != self.negated


def parse_bracket(fmt: str, pos: int) -> tuple[BracketTable, int]:
    """Build the scan set whose opening ``[`` is at ``fmt[pos]``.

    Returns the table and the index of the closing ``]``; that index is
    ``len(fmt)`` when the format is truncated.
    """
    if _char_at(fmt, pos) == BRACE:
        raise ScanFormatError(f"'{{' is not a scan-set opener at position {pos}")
    table = BracketTable()
    pos += 1
    if _char_at(fmt, pos) == "^":
        table.negated = True
        pos += 1
    previous: str | None = None
    if _char_at(fmt, pos) == "]":
        previous = "]"
        table.add("]")
        pos += 1
    while pos < len(fmt) and fmt[pos] != "]":
        ch = fmt[pos]
        pos += 1
        nxt = _char_at(fmt, pos)
        if ch != "-" or previous is None or nxt in ("]", ""):
            previous = ch
            table.add(ch)
            continue
        pos += 1
        if previous <= nxt:
            table.add_range(previous, nxt)
        else:
            table.add("-")
            table.add(nxt)
        previous = None
    return table, pos