"""Character sources for formatted input: in-memory strings, seekable files and pipes."""

from __future__ import annotations

import enum
import io
import os
from typing import BinaryIO

EOF = None
"""Value returned by :meth:`InputStream.get_char` when no character is left."""

SPACE_CHARS = " \t\n\v\f\r"
"""Characters treated as white space by the scanner."""

BLOCK_SIZE = 1024
UTF8_BOM = b"\xef\xbb\xbf"


class _Mode(enum.Flag):
    NONE = 0
    MEMORY = enum.auto()
    FILE = enum.auto()
    PIPE = enum.auto()
    LOADED = enum.auto()


def starts_with_bom(data) -> bool:
    """Return True if ``data`` is exactly a UTF-8 byte order mark."""
    return len(data) == len(UTF8_BOM) and bytes(data) == UTF8_BOM


class InputStream:
    """A source of single characters with one-step push-back.

    ``consumed`` counts every read attempt (end of input included) minus
    every push-back, which is what ``%n`` reports.
    """

    def __init__(self, text: str = "", fileobj: BinaryIO | None = None):
        self.consumed = 0
        self._file = fileobj
        self._pushback: list[str] = []
        self._origin = 0
        self._real_read = 0
        self._at_eof = False
        self._cur = 0
        if fileobj is None:
            self._mode = _Mode.MEMORY
            self._buffer: str | None = text
        else:
            if isinstance(fileobj, io.TextIOBase):
                raise TypeError("file streams must be opened in binary mode")
            self._mode = _Mode.FILE
            self._buffer = None

    def __enter__(self) -> InputStream:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _take(self) -> str | None:
        if self._buffer is not None and self._cur < len(self._buffer):
            ch = self._buffer[self._cur]
            self._cur += 1
            return ch
        return EOF

    def _read_bytes(self, size: int) -> str:
        data = self._file.read(size)
        if not data:
            self._at_eof = True
            return ""
        if len(data) < size:
            self._at_eof = True
        return bytes(data).decode("latin-1")

    def _origin_position(self) -> int | None:
        try:
            if not self._file.seekable():
                return None
            return self._file.tell()
        except (OSError, AttributeError, ValueError):
            return None

    def _get_from_pipe(self) -> str | None:
        if self._pushback:
            return self._pushback.pop()
        data = self._file.read(1)
        if not data:
            return EOF
        return bytes(data).decode("latin-1")

    def _get_from_file(self) -> str | None:
        if self._buffer is None or self._cur >= len(self._buffer):
            if self._buffer is None:
                origin = self._origin_position()
                if origin is None:
                    self._mode = _Mode.PIPE
                    return self._get_from_pipe()
                self._origin = origin
                self._buffer = ""
                if origin == 0:
                    head = self._file.read(len(UTF8_BOM)) or b""
                    if len(head) < len(UTF8_BOM):
                        self._at_eof = True
                    if not starts_with_bom(head):
                        self._buffer = bytes(head).decode("latin-1")
            else:
                self._buffer = self._buffer[self._cur:]
            self._buffer += self._read_bytes(BLOCK_SIZE)
            self._cur = 0
            self._mode |= _Mode.LOADED
        ch = self._take()
        if ch is not EOF:
            self._real_read += 1
        return ch

    def get_char(self) -> str | None:
        """Return the next character, or ``EOF`` when input is exhausted."""
        self.consumed += 1
        if _Mode.MEMORY in self._mode:
            return self._take()
        if _Mode.FILE in self._mode:
            return self._get_from_file()
        if _Mode.PIPE in self._mode:
            return self._get_from_pipe()
        return EOF

    def unget_char(self, ch: str | None) -> None:
        """Push ``ch`` back so the next read returns it again."""
        self.consumed -= 1
        if ch is EOF:
            return
        if _Mode.MEMORY in self._mode:
            if self._cur > 0:
                self._cur -= 1
            return
        if _Mode.LOADED in self._mode:
            if self._cur > 0:
                self._cur -= 1
            if self._real_read > 0:
                self._real_read -= 1
            return
        if _Mode.PIPE in self._mode:
            self._pushback.append(ch)

    def skip_space(self) -> str | None:
        """Read past white space and return the first other character or ``EOF``."""
        while True:
            ch = self.get_char()
            if ch is EOF or ch not in SPACE_CHARS:
                return ch

    def close(self) -> None:
        """Leave a buffered file positioned just after the characters consumed."""
        if _Mode.FILE not in self._mode or self._buffer is None:
            return
        remaining = len(self._buffer) - self._cur
        self._buffer = None
        if remaining == 0 and self._at_eof:
            return
        try:
            self._file.seek(self._origin, os.SEEK_SET)
        except OSError:
            self._origin = 0
            return
        if self._real_read > 0:
            try:
                self._file.seek(self._real_read, os.SEEK_CUR)
            except OSError:
                self._origin = 0


def string_stream(text: str) -> InputStream:
    """Return a stream reading the characters of ``text``."""
    return InputStream(text=text)


def file_stream(fileobj: BinaryIO) -> InputStream:
    """Return a stream reading a binary file, buffered when it is seekable."""
    return InputStream(fileobj=fileobj)