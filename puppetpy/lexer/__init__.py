"""Lexer."""

from puppetpy.lexer.keywords import KEYWORD_TRIE, KEYWORDS, KeywordEntry, KeywordTrie
from puppetpy.lexer.lexer import Lexer, dump_tokens, token_text
from puppetpy.lexer.reader import EOF, CharReader, UnicodeEscapeReader
from puppetpy.lexer.tokens import (
    OPERATORS,
    PUNCTUATION,
    Token,
    TokenCategory,
    TokenFlags,
    TokenKind,
)

__all__ = [
    "EOF",
    "KEYWORDS",
    "KEYWORD_TRIE",
    "OPERATORS",
    "PUNCTUATION",
    "CharReader",
    "KeywordEntry",
    "KeywordTrie",
    "Lexer",
    "Token",
    "TokenCategory",
    "TokenFlags",
    "TokenKind",
    "UnicodeEscapeReader",
    "dump_tokens",
    "token_text",
]
