import pytest

from securefmt.scanformat import (
    BRACE,
    BracketTable,
    NumberWidth,
    ScanFormatError,
    ScanSpec,
    parse_bracket,
    parse_directive,
)


def test_plain_decimal():
    spec, pos = parse_directive("%d", 0)
    assert pos == 1
    assert spec.conversion == "d"
    assert spec.original == "d"
    assert spec.width_set is False
    assert spec.number_width == NumberWidth.INT
    assert spec.is_64bit is False


def test_width_is_read():
    spec, pos = parse_directive("x%12s", 1)
    assert pos == 4
    assert spec.width == 12
    assert spec.width_set is True
    assert spec.conversion == "s"


def test_suppress_before_and_after_width():
    for fmt in ("%*6d", "%6*d"):
        spec, pos = parse_directive(fmt, 0)
        assert spec.suppress is True
        assert spec.width == 6
        assert fmt[pos] == "d"


@pytest.mark.parametrize(
    "fmt, width",
    [
        ("%hd", NumberWidth.SHORT),
        ("%hhd", NumberWidth.CHAR),
        ("%ld", NumberWidth.LONG),
        ("%lld", NumberWidth.LONG_LONG),
        ("%Lf", NumberWidth.LONG_LONG),
        ("%zu", NumberWidth.LONG_LONG),
        ("%jd", NumberWidth.LONG_LONG),
    ],
)
def test_size_qualifiers(fmt, width):
    spec, pos = parse_directive(fmt, 0)
    assert spec.number_width == width
    assert pos == len(fmt) - 1


def test_long_sets_wide_and_64bit():
    spec, _ = parse_directive("%ls", 0)
    assert spec.is_wide
    assert spec.is_64bit


def test_short_is_never_64bit():
    spec, _ = parse_directive("%hd", 0)
    assert spec.is_64bit is False
    assert spec.wide == -1


@pytest.mark.parametrize("fmt, wide", [("%s", -1), ("%S", 1), ("%C", 1), ("%hS", -1), ("%wc", 1)])
def test_wide_flag(fmt, wide):
    spec, _ = parse_directive(fmt, 0)
    assert spec.wide == wide


def test_i64_and_i32():
    spec, pos = parse_directive("%I64d", 0)
    assert spec.is_64bit is True
    assert pos == 4
    spec, pos = parse_directive("%I32d", 0)
    assert spec.is_64bit is False
    assert pos == 4


def test_i_before_integer_conversion():
    spec, pos = parse_directive("%Ix", 0)
    assert pos == 2
    assert spec.conversion == "x"
    assert spec.is_64bit is True


def test_lone_i_is_the_conversion():
    spec, pos = parse_directive("%Is", 0)
    assert pos == 1
    assert spec.raw == "I"
    assert spec.conversion == "i"


def test_uppercase_is_lowered_raw_kept():
    spec, _ = parse_directive("%X", 0)
    assert spec.raw == "X"
    assert spec.conversion == "x"


def test_bracket_conversion_is_brace():
    spec, pos = parse_directive("%[abc]", 0)
    assert spec.raw == "["
    assert spec.conversion == BRACE
    assert pos == 1


def test_format_ending_inside_directive():
    spec, pos = parse_directive("%5", 0)
    assert pos == 2
    assert spec.raw == ""
    assert spec.width == 5


def test_width_overflow_raises():
    with pytest.raises(ScanFormatError):
        parse_directive("%99999999999d", 0)


def test_width_left_and_consume():
    spec = ScanSpec(width=2, width_set=True)
    assert spec.width_left()
    spec.consume_width()
    spec.consume_width()
    assert spec.width == 0
    assert not spec.width_left()


def test_unset_width_is_unlimited():
    spec = ScanSpec()
    spec.consume_width()
    assert spec.width == 0
    assert spec.width_left()


def test_bracket_simple_set():
    table, pos = parse_bracket("[abc]", 0)
    assert pos == 4
    assert all(table.accepts(c) for c in "abc")
    assert not table.accepts("d")


def test_bracket_negated():
    table, _ = parse_bracket("[^abc]", 0)
    assert not table.accepts("a")
    assert table.accepts("z")


def test_bracket_rejects_eof():
    table, _ = parse_bracket("[^a]", 0)
    assert table.accepts(None) is False


def test_bracket_leading_close():
    table, pos = parse_bracket("[]a]", 0)
    assert table.accepts("]")
    assert table.accepts("a")
    assert pos == 3


def test_bracket_range():
    table, _ = parse_bracket("[a-e]", 0)
    assert all(table.accepts(c) for c in "abcde")
    assert not table.accepts("f")
    assert not table.accepts("-")


def test_bracket_reversed_range():
    table, _ = parse_bracket("[z-a]", 0)
    assert table.accepts("z")
    assert table.accepts("a")
    assert table.accepts("-")
    assert not table.accepts("m")


def test_bracket_trailing_dash_is_literal():
    table, _ = parse_bracket("[a-]", 0)
    assert table.accepts("-")
    assert table.accepts("a")
    assert not table.accepts("b")


def test_bracket_truncated():
    fmt = "[abc"
    table, pos = parse_bracket(fmt, 0)
    assert pos == len(fmt)
    assert table.accepts("b")


def test_brace_is_rejected():
    with pytest.raises(ScanFormatError):
        parse_bracket("{abc]", 0)


def test_table_add_range_inclusive():
    table = BracketTable()
    table.add_range("0", "9")
    table.add("x")
    assert all(table.accepts(c) for c in "0123456789x")
    assert not table.accepts("a")