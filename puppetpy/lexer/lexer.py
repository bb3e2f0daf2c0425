"""Lexer."""

from typing import Final

from puppetpy.diagnostics import (
    LEXER_INVALID_CHARACTER,
    LEXER_UNTERMINATED_COMMENT,
    LEXER_UNTERMINATED_REGEXP,
    LEXER_UNTERMINATED_STRING,
    Diagnostic,
    DiagnosticSpec,
    make_diagnostic,
)
from puppetpy.lexer.keywords import KEYWORD_TRIE, KeywordEntry
from puppetpy.lexer.reader import EOF, CharReader, UnicodeEscapeReader
from puppetpy.lexer.tokens import OPERATORS, PUNCTUATION, SINGLE_SPACE, Token, TokenFlags, TokenKind
from puppetpy.text import TextRange, slice_text_range

_DIGITS: Final[frozenset[str]] = frozenset("0123456789")
_NON_BREAKING_SPACES: Final[frozenset[str]] = frozenset("\xa0\u2007\u202f\x85")


def is_whitespace(ch: str) -> bool:
    return ch.isspace() and ch not in _NON_BREAKING_SPACES


def is_identifier_start(ch: str) -> bool:
    return ch.isidentifier()


def is_identifier_part(ch: str) -> bool:
    return ch != EOF and ("_" + ch).isidentifier()


def _is_high_surrogate(ch: str) -> bool:
    return ch != EOF and "\ud800" <= ch <= "\udbff"


def _is_low_surrogate(ch: str) -> bool:
    return ch != EOF and "\udc00" <= ch <= "\udfff"


class Lexer:
    """Lossless lexer over Puppet manifests.

    Every source unit ends up in exactly one token, so broken input still
    renders: unterminated literals come back flagged ``PARTIAL`` and stray
    units as ``ERROR`` tokens. Nothing is raised for bad input.
    """

    def __init__(self, source: str, *, allow_multiline_strings: bool = False) -> None:
        self._reader = CharReader(source)
        self._input = UnicodeEscapeReader(self._reader)
        self._allow_multiline_strings = allow_multiline_strings
        self._diagnostics: list[Diagnostic] = []

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """List of diagnostics emitted during lexing."""
        return self._diagnostics

    def next_token(self) -> Token | None:
        """Lex one token, or return None at end of input."""
        ch = self._next_char()
        if ch == EOF:
            self._input.reset(0)
            return None

        if ch in _DIGITS:
            return self._finish_number()

        match ch:
            case "#":
                return self._finish_line_comment()
            case "'" | '"':
                return self._finish_string(ch)
            case "$":
                return self._finish_variable()
            case "/":
                return self._finish_slash()
            case " ":
                return self._finish_space()

        if ch in OPERATORS:
            return self._finish_operator(ch)
        if ch in PUNCTUATION:
            return self._token(PUNCTUATION[ch])
        if is_identifier_start(ch):
            return self._finish_word(ch)
        if is_whitespace(ch):
            return self._finish_whitespace()

        ch = self._translate_surrogates(ch)
        if is_identifier_start(ch):
            return self._finish_identifier(ch, 0)
        return self._error_token(LEXER_INVALID_CHARACTER)

    def lex(self) -> list[Token]:
        tokens: list[Token] = []
        while (token := self.next_token()) is not None:
            tokens.append(token)
        return tokens

    def _finish_number(self) -> Token:
        while self._next_char() in _DIGITS:
            pass
        self._input.backup(1)
        return self._token(TokenKind.INT)

    def _finish_line_comment(self) -> Token:
        while True:
            match self._next_char():
                case "\r":
                    self._consume_newline()
                    return self._token(TokenKind.COMMENT)
                case "\n" | "":
                    return self._token(TokenKind.COMMENT)

    def _finish_string(self, quote: str) -> Token:
        flags = TokenFlags.NONE
        while True:
            ch = self._next_char()
            if ch == quote:
                return self._token(TokenKind.STRING, flags)
            if ch == "\\":
                flags |= TokenFlags.HAS_ESCAPE
                self._next_char()
                continue
            if ch == EOF:
                break
            if ch == "\r" or ch == "\n":
                if self._allow_multiline_strings:
                    continue
                if ch == "\r":
                    self._consume_newline()
                break
        return self._partial_token(TokenKind.STRING, LEXER_UNTERMINATED_STRING, flags)

    def _finish_variable(self) -> Token:
        colon_mark: int | None = None
        while True:
            mark = self._input.mark()
            ch = self._translate_surrogates(self._next_char())
            if ch == ":":
                if colon_mark is None:
                    colon_mark = mark
                continue
            if is_identifier_part(ch):
                colon_mark = None
                continue
            # Trailing colons belong to whatever follows the variable.
            self._input.reset(colon_mark if colon_mark is not None else mark)
            return self._token(TokenKind.VARIABLE)

    def _finish_slash(self) -> Token:
        if self._next_char() == "*":
            return self._finish_block_comment()
        self._input.backup(1)
        return self._finish_regexp()

    def _finish_block_comment(self) -> Token:
        star = False
        while True:
            ch = self._next_char()
            if ch == EOF:
                return self._partial_token(TokenKind.BLOCK_COMMENT, LEXER_UNTERMINATED_COMMENT)
            if ch == "/" and star:
                return self._token(TokenKind.BLOCK_COMMENT)
            star = ch == "*"

    def _finish_regexp(self) -> Token:
        flags = TokenFlags.NONE
        escaped = False
        while True:
            ch = self._next_char()
            if ch == "\r":
                self._consume_newline()
                break
            if ch == "\n" or ch == EOF:
                break
            if ch == "\\":
                flags |= TokenFlags.HAS_ESCAPE
                escaped = not escaped
                continue
            if ch == "/" and not escaped:
                return self._token(TokenKind.REGEXP, flags)
            escaped = False
        return self._partial_token(TokenKind.REGEXP, LEXER_UNTERMINATED_REGEXP, flags)

    def _finish_space(self) -> Token:
        ch = self._next_char()
        self._input.backup(1)
        if not is_whitespace(ch):
            return self._token(TokenKind.WHITESPACE, fixed_text=SINGLE_SPACE)
        return self._finish_whitespace()

    def _finish_whitespace(self) -> Token:
        while is_whitespace(self._next_char()):
            pass
        self._input.backup(1)
        return self._token(TokenKind.WHITESPACE)

    def _finish_operator(self, spelling: str) -> Token:
        while True:
            ch = self._next_char()
            if ch == EOF or spelling + ch not in OPERATORS:
                self._input.backup(1)
                return self._token(OPERATORS[spelling])
            spelling += ch

    def _finish_word(self, ch: str) -> Token:
        """Walk the keyword trie, falling back to a plain identifier."""
        node = KEYWORD_TRIE.root.step(ch)
        mark = 0
        while node is not None:
            mark = self._input.mark()
            ch = self._next_char()
            following = node.step(ch)
            if following is not None:
                node = following
                continue
            if node.entry is None:
                break
            ch = self._translate_surrogates(ch)
            if is_identifier_part(ch):
                break
            return self._keyword_or_identifier(node.entry, ch, mark)
        return self._finish_identifier(ch, mark)

    def _keyword_or_identifier(self, entry: KeywordEntry, ch: str, mark: int) -> Token:
        """Emit a keyword whose spelling ended at `mark`; `ch` is the unit after it."""
        kind = entry.kind
        if entry.function_like:
            while is_whitespace(ch):
                ch = self._next_char()
            if ch == "{" or ch == "=":
                kind = TokenKind.IDENTIFIER
        self._input.reset(mark)
        return self._token(kind)

    def _finish_identifier(self, ch: str, mark: int) -> Token:
        """Scan the rest of an identifier; `ch` was read right after `mark`."""
        while True:
            ch = self._translate_surrogates(ch)
            if not is_identifier_part(ch) and not (ch == ":" and self._next_char() == ":"):
                self._input.reset(mark)
                return self._token(TokenKind.IDENTIFIER)
            mark = self._input.mark()
            ch = self._next_char()

    def _consume_newline(self) -> None:
        if self._next_char() != "\n":
            self._input.backup(1)

    def _translate_surrogates(self, ch: str) -> str:
        """Join an escaped surrogate pair into one scalar."""
        if not _is_high_surrogate(ch):
            return ch
        low = self._next_char()
        if _is_low_surrogate(low):
            return chr(0x10000 + ((ord(ch) - 0xD800) << 10) + (ord(low) - 0xDC00))
        self._input.backup(1)
        return ch

    def _next_char(self) -> str:
        return self._input.next_char()

    def _token(
        self,
        kind: TokenKind,
        flags: TokenFlags = TokenFlags.NONE,
        fixed_text: str | None = None,
    ) -> Token:
        length = self._input.read_length
        start = self._reader.token_start
        if fixed_text is None:
            fixed_text = kind.fixed_text
        if fixed_text is not None and len(fixed_text) == length:
            flags |= TokenFlags.FLYWEIGHT
        else:
            fixed_text = None
        if self._input.has_escape_within(length):
            flags |= TokenFlags.UNICODE_ESCAPE
        self._input.consume(length)
        return Token(kind, TextRange.at(start, length), flags, fixed_text)

    def _partial_token(
        self,
        kind: TokenKind,
        spec: DiagnosticSpec,
        flags: TokenFlags = TokenFlags.NONE,
    ) -> Token:
        token = self._token(kind, flags | TokenFlags.PARTIAL)
        self._diagnostics.append(make_diagnostic(spec, token.range))
        return token

    def _error_token(self, spec: DiagnosticSpec) -> Token:
        token = self._token(TokenKind.ERROR)
        self._diagnostics.append(make_diagnostic(spec, token.range))
        return token


def token_text(source: str, token: Token) -> str:
    """Get the text of a token, preferring its shared spelling."""
    if token.fixed_text is not None:
        return token.fixed_text
    return slice_text_range(source, token.range)


def dump_tokens(tokens: list[Token], source: str, diagnostics: list[Diagnostic] | None = None) -> None:
    """Print token list with kind, range, flags, and text for debugging."""
    for i, tok in enumerate(tokens):
        text = token_text(source, tok)
        print(f"{i:03d} {tok.kind.name:<22} range={tok.range.as_tuple()} flags={tok.flags!r} text={text!r}")

    if diagnostics is not None:
        print("\nDiagnostics:")
        for d in diagnostics:
            print(f"- {d.severity.upper()} {d.code} range={d.range.as_tuple()} message={d.message}")
