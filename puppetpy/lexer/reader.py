"""Character input for the lexer.

`CharReader` is the raw input: it hands out source code units one at a time
and lets the lexer push back anything read since the current token started.
`UnicodeEscapeReader` sits on top and decodes `\\uXXXX` escapes on read, so the
lexer never sees them; it remembers how many raw units the last two decoded
units consumed and can only push those back.
"""

from typing import Final

EOF: Final[str] = ""
"""Returned by every read past the end of input."""

_HEX_DIGITS: Final[frozenset[str]] = frozenset("0123456789abcdefABCDEF")


class CharReader:
    """Raw reader over one immutable source snapshot."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._token_start = 0
        # Runs past len(text) when EOF is read so that backup stays symmetric.
        self._offset = 0

    @property
    def text(self) -> str:
        return self._text

    @property
    def token_start(self) -> int:
        return self._token_start

    @property
    def read_length(self) -> int:
        """Units read for the current token, EOF reads excluded."""
        return min(self._offset, len(self._text)) - self._token_start

    @property
    def read_length_eof(self) -> int:
        """Units read for the current token, EOF reads included."""
        return self._offset - self._token_start

    def read(self) -> str:
        offset = self._offset
        self._offset += 1
        if offset >= len(self._text):
            return EOF
        return self._text[offset]

    def backup(self, count: int) -> None:
        if count < 0 or count > self.read_length_eof:
            raise ValueError(f"Cannot back up {count} units, {self.read_length_eof} read")
        self._offset -= count

    def consume(self, length: int) -> None:
        """Close the current token after `length` units and start the next one."""
        if length < 0 or length > self.read_length:
            raise ValueError(f"Cannot consume {length} units, {self.read_length} read")
        self._token_start += length
        self._offset = self._token_start


class UnicodeEscapeReader:
    """Decode-on-read wrapper with a two-unit push-back history."""

    def __init__(self, reader: CharReader) -> None:
        self._reader = reader
        self._current_length = -1
        self._previous_length = -1
        self._escape_starts: list[int] = []

    @property
    def reader(self) -> CharReader:
        return self._reader

    @property
    def read_length(self) -> int:
        return self._reader.read_length

    def has_escape_within(self, length: int) -> bool:
        """Whether a `\\uXXXX` escape was decoded in the first `length` units of the token."""
        return any(start < length for start in self._escape_starts)

    def next_char(self) -> str:
        self._previous_length = self._current_length
        start = self._reader.read_length_eof
        ch = self._reader.read()
        if ch != "\\":
            self._current_length = 1
            return ch

        saw_u = False
        first = self._reader.read()
        while first == "u":
            saw_u = True
            first = self._reader.read()

        if not saw_u:
            return self._reread_raw(start)

        digits = (first, self._reader.read(), self._reader.read(), self._reader.read())
        if not all(digit in _HEX_DIGITS for digit in digits):
            return self._reread_raw(start)

        self._current_length = self._reader.read_length_eof - start
        self._escape_starts.append(start)
        return chr(int("".join(digits), 16))

    def backup(self, count: int) -> None:
        """Push back the last one or two decoded units."""
        assert count in (1, 2), f"backup depth {count} is not supported"
        if count == 1:
            assert self._current_length != -1, "nothing to back up"
            self._reader.backup(self._current_length)
            self._current_length = self._previous_length
            self._previous_length = -1
        else:
            assert self._current_length != -1 and self._previous_length != -1, "nothing to back up"
            self._reader.backup(self._current_length + self._previous_length)
            self._current_length = -1
            self._previous_length = -1

    def mark(self) -> int:
        """Raw position inside the current token, for `reset`."""
        return self._reader.read_length_eof

    def reset(self, mark: int) -> None:
        self._reader.backup(self._reader.read_length_eof - mark)
        self._current_length = -1
        self._previous_length = -1

    def consume(self, length: int) -> None:
        self._reader.consume(length)
        self._current_length = -1
        self._previous_length = -1
        self._escape_starts.clear()

    def _reread_raw(self, start: int) -> str:
        self._reader.backup(self._reader.read_length_eof - start)
        self._current_length = 1
        return self._reader.read()
