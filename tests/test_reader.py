import pytest

from puppetpy.lexer import EOF, CharReader, UnicodeEscapeReader


def _escape_reader(text: str) -> UnicodeEscapeReader:
    return UnicodeEscapeReader(CharReader(text))


def _escaped(code: str) -> str:
    """Source spelling of a unicode escape for the given hex digits."""
    return "\\" + "u" + code


def test_char_reader_counts_reads_past_end():
    reader = CharReader("ab")

    assert reader.read() == "a"
    assert reader.read() == "b"
    assert reader.read() == EOF
    assert reader.read() == EOF

    assert reader.read_length == 2
    assert reader.read_length_eof == 4

    reader.backup(3)
    assert reader.read_length_eof == 1
    assert reader.read() == "b"


def test_char_reader_consume_starts_next_token():
    reader = CharReader("abc")
    reader.read()
    reader.read()

    reader.consume(1)

    assert reader.token_start == 1
    assert reader.read_length == 0
    assert reader.read() == "b"


def test_char_reader_rejects_backup_before_token_start():
    reader = CharReader("abc")
    reader.read()
    reader.consume(1)
    reader.read()

    with pytest.raises(ValueError):
        reader.backup(2)


def test_unicode_escape_decodes_to_single_unit():
    reader = _escape_reader(_escaped("0041") + _escaped("0042"))

    assert reader.next_char() == "A"
    assert reader.read_length == 6
    assert reader.next_char() == "B"
    assert reader.next_char() == EOF
    assert reader.has_escape_within(7)


def test_unicode_escape_accepts_repeated_u():
    reader = _escape_reader(r"\uuu0041")

    assert reader.next_char() == "A"
    assert reader.read_length == 8


@pytest.mark.parametrize("text", [r"\u004", r"\u00g1", r"\x0041", "\\"])
def test_malformed_unicode_escape_returns_raw_backslash(text: str):
    reader = _escape_reader(text)

    decoded = []
    while (ch := reader.next_char()) != EOF:
        decoded.append(ch)

    assert "".join(decoded) == text
    assert not reader.has_escape_within(len(text))


def test_backup_undoes_decoded_units_by_consumed_length():
    reader = _escape_reader(_escaped("0041") + _escaped("0042") + "C")

    assert reader.next_char() == "A"
    assert reader.next_char() == "B"
    reader.backup(1)
    assert reader.read_length == 6
    assert reader.next_char() == "B"

    reader.backup(2)
    assert reader.read_length == 0
    assert reader.next_char() == "A"


def test_backup_depth_is_limited_to_two():
    reader = _escape_reader("abc")
    reader.next_char()
    reader.next_char()
    reader.next_char()

    with pytest.raises(AssertionError):
        reader.backup(3)


def test_mark_and_reset_restore_raw_position():
    reader = _escape_reader("a" + _escaped("0062") + "cd")
    reader.next_char()
    mark = reader.mark()
    reader.next_char()
    reader.next_char()

    reader.reset(mark)

    assert reader.read_length == 1
    assert reader.next_char() == "b"
