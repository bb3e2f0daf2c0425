"""Lexer tokens."""

from dataclasses import dataclass
from enum import IntEnum, IntFlag, StrEnum
from typing import Final

from puppetpy.text import TextRange


class TokenCategory(StrEnum):
    """Coarse token classes consumed by presentation layers."""

    WHITESPACE = "whitespace"
    COMMENT = "comment"
    ERROR = "error"
    NUMBER = "number"
    STRING = "string"
    REGEXP = "regexp"
    VARIABLE = "variable"
    IDENTIFIER = "identifier"
    OPERATOR = "operator"
    SEPARATOR = "separator"
    KEYWORD = "keyword"
    FUNCTION = "function"


class TokenKind(IntEnum):
    # -------------------------
    # Trivia tokens (emitted by the lexer)
    # -------------------------
    WHITESPACE = 10
    COMMENT = 11  # `# ...`
    BLOCK_COMMENT = 12  # `/* ... */`
    ERROR = 13

    # -------------------------
    # Literals / names
    # -------------------------
    INT = 20
    FLOAT = 21  # reserved, the lexer only emits INT
    STRING = 22
    REGEXP = 23
    VARIABLE = 24
    IDENTIFIER = 25

    # -------------------------
    # Operators (multi-char included)
    # -------------------------
    EQUALS = 30  # =
    EQUAL_EQUAL = 31  # ==
    MATCH = 32  # =~
    PARAM_ASSIGN = 33  # =>
    NOT = 34  # !
    NOT_EQUAL = 35  # !=
    NOT_MATCH = 36  # !~
    GREATER_THAN = 37  # >
    GREATER_THAN_OR_EQUAL = 38  # >=
    RIGHT_SHIFT = 39  # >>
    LESS_THAN = 40  # <
    LESS_THAN_OR_EQUAL = 41  # <=
    LEFT_SHIFT = 42  # <<
    LCOLLECTOR = 43  # <|
    LEXPORT_COLLECTOR = 44  # <<|
    PIPE = 45  # |
    RCOLLECTOR = 46  # |>
    REXPORT_COLLECTOR = 47  # |>>
    MINUS = 48  # -
    ORDER_ARROW = 49  # ->
    TILDE = 50  # ~
    NOTIFY_ARROW = 51  # ~>
    PLUS = 52  # +
    STAR = 53  # *
    PERCENT = 54  # %
    QUESTION = 55  # ?
    DOT = 56  # .
    AT = 57  # @
    AT_AT = 58  # @@

    # -------------------------
    # Punctuation / separators
    # -------------------------
    LBRACE = 60  # {
    RBRACE = 61  # }
    LBRACKET = 62  # [
    RBRACKET = 63  # ]
    LPAREN = 64  # (
    RPAREN = 65  # )
    COMMA = 66  # ,
    COLON = 67  # :
    SEMICOLON = 68  # ;

    # -------------------------
    # Keywords
    # -------------------------
    AND = 100
    OR = 101
    ABSENT = 102
    PRESENT = 103
    CASE = 104
    CLASS = 105
    DEFINE = 106
    DEFAULT = 107
    ELSE = 108
    ELSIF = 109
    FALSE = 110
    TRUE = 111
    IF = 112
    IMPORT = 113
    INHERITS = 114
    NODE = 115
    NIL = 116
    UNDEF = 117
    UNLESS = 118

    # -------------------------
    # Built-in functions callable without parentheses
    # -------------------------
    CONTAIN = 150
    DEBUG = 151
    ERR = 152
    FAIL = 153
    INCLUDE = 154
    INFO = 155
    NOTICE = 156
    REALIZE = 157
    REQUIRE = 158
    TAG = 159
    WARNING = 160

    @property
    def is_trivia(self) -> bool:
        return self in (
            TokenKind.WHITESPACE,
            TokenKind.COMMENT,
            TokenKind.BLOCK_COMMENT,
        )

    @property
    def fixed_text(self) -> str | None:
        """Shared spelling for kinds that always read the same."""
        return _FIXED_TEXT.get(self)

    @property
    def category(self) -> TokenCategory:
        if self.is_trivia:
            return TokenCategory.COMMENT if self != TokenKind.WHITESPACE else TokenCategory.WHITESPACE
        if self >= TokenKind.CONTAIN:
            return TokenCategory.FUNCTION
        if self >= TokenKind.AND:
            return TokenCategory.OPERATOR if self in (TokenKind.AND, TokenKind.OR) else TokenCategory.KEYWORD
        if self >= TokenKind.LBRACE:
            return TokenCategory.SEPARATOR
        if self >= TokenKind.EQUALS:
            return TokenCategory.OPERATOR
        return _LITERAL_CATEGORY[self]


_LITERAL_CATEGORY: Final[dict[TokenKind, TokenCategory]] = {
    TokenKind.ERROR: TokenCategory.ERROR,
    TokenKind.INT: TokenCategory.NUMBER,
    TokenKind.FLOAT: TokenCategory.NUMBER,
    TokenKind.STRING: TokenCategory.STRING,
    TokenKind.REGEXP: TokenCategory.REGEXP,
    TokenKind.VARIABLE: TokenCategory.VARIABLE,
    TokenKind.IDENTIFIER: TokenCategory.IDENTIFIER,
}

OPERATORS: Final[dict[str, TokenKind]] = {
    "=": TokenKind.EQUALS,
    "==": TokenKind.EQUAL_EQUAL,
    "=~": TokenKind.MATCH,
    "=>": TokenKind.PARAM_ASSIGN,
    "!": TokenKind.NOT,
    "!=": TokenKind.NOT_EQUAL,
    "!~": TokenKind.NOT_MATCH,
    ">": TokenKind.GREATER_THAN,
    ">=": TokenKind.GREATER_THAN_OR_EQUAL,
    ">>": TokenKind.RIGHT_SHIFT,
    "<": TokenKind.LESS_THAN,
    "<=": TokenKind.LESS_THAN_OR_EQUAL,
    "<<": TokenKind.LEFT_SHIFT,
    "<|": TokenKind.LCOLLECTOR,
    "<<|": TokenKind.LEXPORT_COLLECTOR,
    "|": TokenKind.PIPE,
    "|>": TokenKind.RCOLLECTOR,
    "|>>": TokenKind.REXPORT_COLLECTOR,
    "-": TokenKind.MINUS,
    "->": TokenKind.ORDER_ARROW,
    "~": TokenKind.TILDE,
    "~>": TokenKind.NOTIFY_ARROW,
    "+": TokenKind.PLUS,
    "*": TokenKind.STAR,
    "%": TokenKind.PERCENT,
    "?": TokenKind.QUESTION,
    ".": TokenKind.DOT,
    "@": TokenKind.AT,
    "@@": TokenKind.AT_AT,
}
"""Operator spellings; every prefix of a spelling is itself an operator."""

PUNCTUATION: Final[dict[str, TokenKind]] = {
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
    ":": TokenKind.COLON,
    ";": TokenKind.SEMICOLON,
}

_FIXED_TEXT: Final[dict[TokenKind, str]] = {
    **{kind: spelling for spelling, kind in OPERATORS.items()},
    **{kind: spelling for spelling, kind in PUNCTUATION.items()},
    **{kind: kind.name.lower() for kind in TokenKind if kind >= TokenKind.AND},
}


class TokenFlags(IntFlag):
    """Token metadata flags."""

    NONE = 0
    PARTIAL = 1 << 0  # unterminated string, regexp or block comment
    FLYWEIGHT = 1 << 1  # text is the shared fixed spelling
    HAS_ESCAPE = 1 << 2  # backslash escape inside a string or regexp
    UNICODE_ESCAPE = 1 << 3  # contains a decoded \uXXXX sequence


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexed token (trivia or non-trivia)."""

    kind: TokenKind
    range: TextRange
    flags: TokenFlags = TokenFlags.NONE
    fixed_text: str | None = None

    @property
    def offset(self) -> int:
        return self.range.start

    @property
    def length(self) -> int:
        return self.range.length

    @property
    def is_partial(self) -> bool:
        return bool(self.flags & TokenFlags.PARTIAL)

    @property
    def is_flyweight(self) -> bool:
        return bool(self.flags & TokenFlags.FLYWEIGHT)


SINGLE_SPACE: Final[str] = " "
"""Shared spelling of the single-space whitespace token."""
