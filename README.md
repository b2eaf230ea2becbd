# securefmt

`securefmt` reads formatted input the way the `scanf` family of functions
does, with one difference that matters: every string, character and
`%[...]` directive is paired with a destination size, and input that would
not fit stops the scan instead of overflowing.

It works on in-memory text and on open binary file objects.

## Modules

| Module | What it holds |
| --- | --- |
| `securefmt.scanner` | `sscanf`, `fscanf`, `scan_stream`, `first_buffer_cleared`, `ScanResult`, `ScanError`, `ScanEOFError` |
| `securefmt.stream` | `InputStream`, `string_stream`, `file_stream`, `starts_with_bom` |
| `securefmt.scanformat` | `parse_directive`, `parse_bracket`, `ScanSpec`, `BracketTable`, `NumberWidth`, `ScanFormatError` |
| `securefmt.scannumber` | `read_integer`, `to_typed_integer`, `ScanFailed` |
| `securefmt.scantext` | `read_float`, `float_value`, `read_string`, `BufferTooSmall` |

## Scanning

```python
from securefmt.scanner import sscanf

result = sscanf("width=640 name=alpha", "width=%d name=%s", 16)
result.values   # (640, 'alpha')
result.count    # 2
```

Each `%c`, `%s` and `%[` directive that is not suppressed takes one extra
positional argument: the size of its destination in characters. `%s` and
`%[` keep one of those characters for a terminator, so a size of 16 accepts
at most 15 characters; `%c` may use all of them. Numeric and `%n` directives
take no argument. Leaving a needed size out raises `TypeError`.

`sscanf` and `fscanf` return a `ScanResult`: `values` holds the converted
values in format order (`%n` results included) and `count` the number of
assignments made (`%n` not counted).

When the input stops matching the format, or a text field does not fit its
destination, scanning stops and the values stored so far are returned.
Errors are raised as exceptions, each carrying the partial `result`:

- `ScanEOFError` (a `ScanError` and an `EOFError`) when input ended before
  anything was matched or stored, e.g. `sscanf("", "%d")`;
- `ScanError` for a directive that cannot be decoded or for `None` given as
  a destination size.

### Files

`fscanf` scans a file opened in **binary** mode; text-mode files are
rejected with `TypeError`. Each byte is one character.

```python
from securefmt.scanner import fscanf

with open("values.txt", "rb") as fileobj:
    result = fscanf(fileobj, "%d %d")
```

A seekable file is read in blocks of 1024 bytes; a UTF-8 byte order mark at
the very start of the file is skipped. When scanning ends the file is
positioned just after the characters actually consumed, so later reads
continue where scanning stopped. A file that cannot be sought is read one
byte at a time instead.

### Several formats over one source

`scan_stream` runs the same engine over any `InputStream`:

```python
from securefmt.stream import string_stream
from securefmt.scanner import scan_stream

stream = string_stream("12 34")
scan_stream(stream, "%d").values   # (12,)
scan_stream(stream, "%d").values   # (34,)
```

### Clearing the first destination

`first_buffer_cleared(buffer, fmt, *args)` tells whether the first
directive's destination should be emptied before scanning: true for an
unsuppressed `%s`, or a `%c` or complete `%[...]` while `buffer` is empty,
when the first argument is a non-zero size.

## Supported directives

- Integers: `%d`, `%i` (with `0x` hex and leading-`0` octal detection),
  `%o`, `%u`, `%x`, `%p`, with the `hh`, `h`, `l`, `ll`, `L`, `q`, `z`, `t`,
  `j`, `I`, `I32` and `I64` modifiers. Out-of-range input saturates, and
  the value is returned as the selected integer type would hold it:
  signed for `%d` and `%i`, unsigned for `%o`, `%u`, `%x` and `%p`.
- Floats: `%e`, `%f`, `%g`, decimal point `.` only. Plain targets are
  rounded to single precision; `l` and `L` keep double precision.
- Text: `%c`, `%s`, `%[set]`, `%[^set]`, with ranges such as `%[a-z]`. With
  `l`, `w`, `%C` or `%S` the characters are decoded as UTF-8, and a
  sequence that cannot be decoded becomes `?`.
- `%n` for the number of characters consumed so far.
- `%*` to match and discard a field, and field widths such as `%5s`.
- White space in the format matches any run of white space in the input;
  any other character must match itself.

## What this package does not do

It only reads formatted input. It has no formatted output (no `printf`-style
writing), accepts only `str` formats and offers no command-line tool.

## Running the tests

```
pip install -e ".[test]"
pytest
```