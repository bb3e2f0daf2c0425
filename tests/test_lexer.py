import textwrap

import pytest

from puppetpy.diagnostics import (
    LEXER_INVALID_CHARACTER,
    LEXER_UNTERMINATED_COMMENT,
    LEXER_UNTERMINATED_REGEXP,
    LEXER_UNTERMINATED_STRING,
)
from puppetpy.lexer import (
    KEYWORDS,
    Lexer,
    Token,
    TokenCategory,
    TokenFlags,
    TokenKind,
    token_text,
)
from tests._debug import debug_dump_tokens
from tests._shared_cases import MANIFEST_CASES


def lex(text: str, *, allow_multiline_strings: bool = False) -> list[Token]:
    return Lexer(text, allow_multiline_strings=allow_multiline_strings).lex()


def kinds(tokens: list[Token]) -> list[TokenKind]:
    return [token.kind for token in tokens]


def significant(tokens: list[Token]) -> list[Token]:
    return [token for token in tokens if not token.kind.is_trivia]


def _escaped(code: str) -> str:
    return "\\" + "u" + code


@pytest.mark.parametrize("entry", KEYWORDS, ids=lambda entry: entry.spelling)
def test_keyword_followed_by_non_identifier_is_one_keyword_token(entry):
    tokens = lex(entry.spelling + " ")

    assert kinds(tokens) == [entry.kind, TokenKind.WHITESPACE]
    assert tokens[0].range.as_tuple() == (0, len(entry.spelling))
    assert tokens[0].is_flyweight
    assert tokens[0].fixed_text == entry.spelling


@pytest.mark.parametrize("entry", KEYWORDS, ids=lambda entry: entry.spelling)
def test_keyword_followed_by_identifier_part_is_one_identifier(entry):
    source = entry.spelling + "x_1"
    tokens = lex(source)

    assert kinds(tokens) == [TokenKind.IDENTIFIER]
    assert tokens[0].range.as_tuple() == (0, len(source))
    assert not tokens[0].is_flyweight


def test_classroom_is_single_identifier():
    tokens = lex("classroom")

    assert kinds(tokens) == [TokenKind.IDENTIFIER]
    assert token_text("classroom", tokens[0]) == "classroom"


def test_keyword_prefix_is_identifier():
    assert kinds(lex("cla")) == [TokenKind.IDENTIFIER]
    assert kinds(lex("els")) == [TokenKind.IDENTIFIER]
    assert kinds(lex("elsif")) == [TokenKind.ELSIF]


@pytest.mark.parametrize("case", MANIFEST_CASES, ids=lambda case: case.name)
def test_token_texts_reconstruct_source(case):
    tokens = lex(case.source)
    debug_dump_tokens(case.name, case.source, tokens)

    assert "".join(token_text(case.source, token) for token in tokens) == case.source

    position = 0
    for token in tokens:
        assert token.offset == position
        position = token.range.end
    assert position == len(case.source)


def test_qualified_names_keep_double_colons():
    source = "apache::mod::ssl"
    tokens = lex(source)

    assert kinds(tokens) == [TokenKind.IDENTIFIER]
    assert tokens[0].length == len(source)


def test_single_trailing_colon_is_pushed_back():
    tokens = lex("foo: bar")

    assert kinds(tokens) == [
        TokenKind.IDENTIFIER,
        TokenKind.COLON,
        TokenKind.WHITESPACE,
        TokenKind.IDENTIFIER,
    ]
    assert tokens[0].range.as_tuple() == (0, 3)


def test_trailing_double_colon_stays_on_identifier():
    tokens = lex("foo:: ")

    assert kinds(tokens) == [TokenKind.IDENTIFIER, TokenKind.WHITESPACE]
    assert tokens[0].range.as_tuple() == (0, 5)


def test_variables_exclude_trailing_colons():
    source = "$foo::bar $top: $x::"
    tokens = significant(lex(source))

    assert [token_text(source, token) for token in tokens] == [
        "$foo::bar",
        "$top",
        ":",
        "$x",
        ":",
        ":",
    ]
    assert kinds(tokens)[:2] == [TokenKind.VARIABLE, TokenKind.VARIABLE]


def test_top_scope_variable():
    tokens = lex("$::osfamily")

    assert kinds(tokens) == [TokenKind.VARIABLE]
    assert tokens[0].length == len("$::osfamily")


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("=", TokenKind.EQUALS),
        ("==", TokenKind.EQUAL_EQUAL),
        ("=~", TokenKind.MATCH),
        ("=>", TokenKind.PARAM_ASSIGN),
        ("!", TokenKind.NOT),
        ("!=", TokenKind.NOT_EQUAL),
        ("!~", TokenKind.NOT_MATCH),
        (">=", TokenKind.GREATER_THAN_OR_EQUAL),
        (">>", TokenKind.RIGHT_SHIFT),
        ("<=", TokenKind.LESS_THAN_OR_EQUAL),
        ("<<", TokenKind.LEFT_SHIFT),
        ("<|", TokenKind.LCOLLECTOR),
        ("<<|", TokenKind.LEXPORT_COLLECTOR),
        ("|>", TokenKind.RCOLLECTOR),
        ("|>>", TokenKind.REXPORT_COLLECTOR),
        ("->", TokenKind.ORDER_ARROW),
        ("~>", TokenKind.NOTIFY_ARROW),
        ("@", TokenKind.AT),
        ("@@", TokenKind.AT_AT),
        ("%", TokenKind.PERCENT),
    ],
)
def test_operators_use_longest_match(source: str, expected: TokenKind):
    tokens = lex(source)

    assert kinds(tokens) == [expected]
    assert tokens[0].is_flyweight
    assert tokens[0].fixed_text == source
    assert tokens[0].kind.category == TokenCategory.OPERATOR


def test_operator_longest_match_splits_runs():
    assert kinds(lex("<<<")) == [TokenKind.LEFT_SHIFT, TokenKind.LESS_THAN]
    assert kinds(lex("===")) == [TokenKind.EQUAL_EQUAL, TokenKind.EQUALS]


def test_punctuation_maps_one_to_one():
    tokens = lex("(){}[],:;")

    assert kinds(tokens) == [
        TokenKind.LPAREN,
        TokenKind.RPAREN,
        TokenKind.LBRACE,
        TokenKind.RBRACE,
        TokenKind.LBRACKET,
        TokenKind.RBRACKET,
        TokenKind.COMMA,
        TokenKind.COLON,
        TokenKind.SEMICOLON,
    ]
    assert all(token.kind.category == TokenCategory.SEPARATOR for token in tokens)


def test_numbers_are_digit_runs_only():
    source = "123abc 1.5"
    tokens = lex(source)

    assert kinds(tokens) == [
        TokenKind.INT,
        TokenKind.IDENTIFIER,
        TokenKind.WHITESPACE,
        TokenKind.INT,
        TokenKind.DOT,
        TokenKind.INT,
    ]
    assert TokenKind.FLOAT not in kinds(tokens)


def test_line_comment_includes_newline():
    source = "# one\r\nx # two"
    tokens = lex(source)

    assert kinds(tokens) == [
        TokenKind.COMMENT,
        TokenKind.IDENTIFIER,
        TokenKind.WHITESPACE,
        TokenKind.COMMENT,
    ]
    assert token_text(source, tokens[0]) == "# one\r\n"
    assert token_text(source, tokens[3]) == "# two"


def test_block_comment_ends_at_first_terminator():
    source = "/* a /* b */ */"
    tokens = lex(source)

    assert token_text(source, tokens[0]) == "/* a /* b */"
    assert tokens[0].kind == TokenKind.BLOCK_COMMENT
    assert tokens[0].kind.category == TokenCategory.COMMENT


def test_unterminated_block_comment_is_partial():
    lexer = Lexer("/* open")
    tokens = lexer.lex()

    assert kinds(tokens) == [TokenKind.BLOCK_COMMENT]
    assert tokens[0].is_partial
    assert [d.code for d in lexer.diagnostics] == [LEXER_UNTERMINATED_COMMENT.code]


def test_regexp_runs_to_unescaped_slash():
    source = r"/^a\/b$/ x"
    tokens = lex(source)

    assert tokens[0].kind == TokenKind.REGEXP
    assert token_text(source, tokens[0]) == r"/^a\/b$/"
    assert tokens[0].flags & TokenFlags.HAS_ESCAPE
    assert not tokens[0].is_partial


def test_regexp_broken_by_newline_is_partial():
    lexer = Lexer("/abc\nx")
    tokens = lexer.lex()

    assert kinds(tokens) == [TokenKind.REGEXP, TokenKind.IDENTIFIER]
    assert tokens[0].range.as_tuple() == (0, 5)
    assert tokens[0].is_partial
    assert [d.code for d in lexer.diagnostics] == [LEXER_UNTERMINATED_REGEXP.code]


def test_unterminated_string_at_end_is_single_partial_token():
    lexer = Lexer('"abc')
    tokens = lexer.lex()

    assert kinds(tokens) == [TokenKind.STRING]
    assert tokens[0].range.as_tuple() == (0, 4)
    assert tokens[0].is_partial
    assert [d.code for d in lexer.diagnostics] == [LEXER_UNTERMINATED_STRING.code]
    assert lexer.diagnostics[0].severity == "error"


def test_string_broken_by_newline_includes_newline():
    source = "'ab\ncd'"
    tokens = lex(source)

    assert kinds(tokens) == [TokenKind.STRING, TokenKind.IDENTIFIER, TokenKind.STRING]
    assert token_text(source, tokens[0]) == "'ab\n"
    assert tokens[0].is_partial
    assert tokens[2].is_partial


def test_multiline_strings_option():
    source = "'ab\ncd'"
    tokens = lex(source, allow_multiline_strings=True)

    assert kinds(tokens) == [TokenKind.STRING]
    assert not tokens[0].is_partial


def test_string_escapes_do_not_close_string():
    source = r"'it\'s' " + r'"a\"b"'
    tokens = significant(lex(source))

    assert [token_text(source, token) for token in tokens] == [r"'it\'s'", r'"a\"b"']
    assert all(token.flags & TokenFlags.HAS_ESCAPE for token in tokens)


def test_single_space_is_shared_flyweight():
    tokens = lex("a b  c")

    assert kinds(tokens) == [
        TokenKind.IDENTIFIER,
        TokenKind.WHITESPACE,
        TokenKind.IDENTIFIER,
        TokenKind.WHITESPACE,
        TokenKind.IDENTIFIER,
    ]
    assert tokens[1].is_flyweight
    assert tokens[1].fixed_text == " "
    assert not tokens[3].is_flyweight
    assert tokens[3].length == 2


def test_whitespace_run_is_one_token():
    source = "\n\t \r\n"
    tokens = lex(source)

    assert kinds(tokens) == [TokenKind.WHITESPACE]
    assert tokens[0].length == len(source)


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("include foo", TokenKind.INCLUDE),
        ("notice('x')", TokenKind.NOTICE),
        ("require => Foo", TokenKind.IDENTIFIER),
        ("tag{", TokenKind.IDENTIFIER),
        ("contain\n  = 1", TokenKind.IDENTIFIER),
        ("includes", TokenKind.IDENTIFIER),
        ("fail", TokenKind.FAIL),
    ],
)
def test_function_keywords_depend_on_next_significant_unit(source: str, expected: TokenKind):
    tokens = lex(source)

    assert tokens[0].kind == expected
    if expected != TokenKind.IDENTIFIER:
        assert tokens[0].kind.category == TokenCategory.FUNCTION


def test_function_keyword_lookahead_does_not_consume_whitespace():
    source = "require   {"
    tokens = lex(source)

    assert kinds(tokens) == [TokenKind.IDENTIFIER, TokenKind.WHITESPACE, TokenKind.LBRACE]
    assert tokens[0].range.as_tuple() == (0, 7)


def test_unicode_escaped_keyword_is_keyword_but_not_flyweight():
    source = _escaped("0063") + "lass"
    tokens = lex(source)

    assert kinds(tokens) == [TokenKind.CLASS]
    assert tokens[0].length == len(source)
    assert not tokens[0].is_flyweight
    assert tokens[0].fixed_text is None
    assert tokens[0].flags & TokenFlags.UNICODE_ESCAPE


def test_malformed_unicode_escape_leaves_raw_text():
    source = "\\u00g1"
    lexer = Lexer(source)
    tokens = lexer.lex()

    assert kinds(tokens) == [TokenKind.ERROR, TokenKind.IDENTIFIER]
    assert "".join(token_text(source, token) for token in tokens) == source
    assert not any(token.flags & TokenFlags.UNICODE_ESCAPE for token in tokens)


def test_escaped_surrogate_pair_forms_identifier():
    source = _escaped("d835") + _escaped("dc9c") + "x"
    tokens = lex(source)

    assert kinds(tokens) == [TokenKind.IDENTIFIER]
    assert tokens[0].length == len(source)


def test_unpaired_high_surrogate_is_error_token():
    source = _escaped("d800") + "x"
    lexer = Lexer(source)
    tokens = lexer.lex()

    assert kinds(tokens) == [TokenKind.ERROR, TokenKind.IDENTIFIER]
    assert [d.code for d in lexer.diagnostics] == [LEXER_INVALID_CHARACTER.code]


def test_invalid_character_is_error_token():
    lexer = Lexer("a ` b")
    tokens = lexer.lex()

    assert kinds(tokens)[2] == TokenKind.ERROR
    assert tokens[2].length == 1
    assert tokens[2].kind.category == TokenCategory.ERROR
    assert lexer.diagnostics[0].range.as_tuple() == (2, 3)


def test_next_token_returns_none_at_end_repeatedly():
    lexer = Lexer("x")

    assert lexer.next_token() is not None
    assert lexer.next_token() is None
    assert lexer.next_token() is None


def test_resource_declaration_tokens():
    src = textwrap.dedent(
        """
        @@file { '/tmp/x':
          ensure => present,
        }
        """
    ).lstrip()

    tokens = significant(lex(src))

    assert kinds(tokens) == [
        TokenKind.AT_AT,
        TokenKind.IDENTIFIER,
        TokenKind.LBRACE,
        TokenKind.STRING,
        TokenKind.COLON,
        TokenKind.IDENTIFIER,
        TokenKind.PARAM_ASSIGN,
        TokenKind.PRESENT,
        TokenKind.COMMA,
        TokenKind.RBRACE,
    ]
