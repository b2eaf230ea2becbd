import io

import pytest

from securefmt.scanner import (
    ScanEOFError,
    ScanError,
    ScanResult,
    first_buffer_cleared,
    fscanf,
    scan_stream,
    sscanf,
)
from securefmt.stream import string_stream


def test_integer_and_string():
    result = sscanf("12 abc", "%d %s", 10)
    assert result.values == (12, "abc")
    assert result.count == 2


def test_negative_decimal():
    assert sscanf("-5", "%d").values == (-5,)


def test_unsigned_wraps_negative():
    assert sscanf("-1", "%u").values == (4294967295,)


def test_hex_conversion():
    assert sscanf("ff", "%x").values == (0xFF,)


def test_i_detects_octal():
    assert sscanf("010", "%i").values == (8,)


def test_short_target_truncates():
    assert sscanf("65535", "%hd").values == (-1,)
    assert sscanf("65535", "%hu").values == (65535,)


def test_empty_input_raises_eof():
    with pytest.raises(ScanEOFError):
        sscanf("", "%d")


def test_eof_error_is_scan_error():
    with pytest.raises(ScanError):
        sscanf("   ", "%s", 4)


def test_partial_match_at_eof_returns_count():
    result = sscanf("7", "%d %d")
    assert result.values == (7,)
    assert result.count == 1


def test_buffer_too_small_stores_nothing():
    result = sscanf("abcdef", "%s", 3)
    assert result.count == 0
    assert result.values == ()


def test_missing_destination_is_error():
    with pytest.raises(ScanError) as info:
        sscanf("abc", "%s", None)
    assert info.value.result.count == 0


def test_missing_size_argument_raises_type_error():
    with pytest.raises(TypeError):
        sscanf("abc", "%s")


def test_suppressed_conversion_not_counted():
    result = sscanf("1 2", "%*d %d")
    assert result.values == (2,)
    assert result.count == 1


def test_char_count_directive():
    result = sscanf("abc", "%s%n", 10)
    assert result.values == ("abc", len("abc"))
    assert result.count == 1


def test_scan_set_range():
    assert sscanf("abcd", "%[a-c]", 10).values == ("abc",)


def test_char_does_not_skip_space():
    assert sscanf(" x", "%c", 2).values == (" ",)


def test_double_float():
    assert sscanf("0.1", "%lf").values == (0.1,)


def test_single_float_rounds():
    (value,) = sscanf("0.1", "%f").values
    assert value != 0.1
    assert abs(value - 0.1) < 1e-7


def test_literal_mismatch_stops():
    result = sscanf("a1", "b%d")
    assert result == ScanResult(values=(), count=0)


def test_unknown_conversion_is_format_error():
    with pytest.raises(ScanError):
        sscanf("1", "%y")


def test_percent_literal():
    assert sscanf("%5", "%%%d").values == (5,)


def test_field_width_limits_digits():
    result = sscanf("12345", "%3d%d")
    assert result.values == (123, 45)


def test_scan_stream_with_string_stream():
    stream = string_stream("3 4")
    assert scan_stream(stream, "%d %d").values == (3, 4)


def test_fscanf_repositions_file():
    data = io.BytesIO(b"42 rest")
    result = fscanf(data, "%d")
    assert result.values == (42,)
    assert data.tell() == len(b"42")
    assert data.read() == b" rest"


@pytest.mark.parametrize(
    "buffer, fmt, args, expected",
    [
        ("", "%s", (10,), True),
        ("abc", "%s", (10,), True),
        ("abc", "%c", (10,), False),
        ("", "%c", (10,), True),
        ("", "%*s", (), False),
        ("", "%d", (10,), False),
        ("", "%s", (0,), False),
        ("", "%s", (None,), False),
        ("", "%[abc", (10,), False),
        ("", "%[abc]", (10,), True),
        ("", "no directive", (10,), False),
    ],
)
def test_first_buffer_cleared(buffer, fmt, args, expected):
    assert first_buffer_cleared(buffer, fmt, *args) is expected