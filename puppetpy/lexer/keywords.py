"""Keyword trie used by the lexer for longest-match keyword recognition."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from puppetpy.lexer.tokens import TokenKind


@dataclass(frozen=True, slots=True)
class KeywordEntry:
    kind: TokenKind
    spelling: str
    function_like: bool = False


@dataclass(slots=True)
class TrieNode:
    children: dict[str, TrieNode] = field(default_factory=dict)
    entry: KeywordEntry | None = None

    def step(self, ch: str) -> TrieNode | None:
        return self.children.get(ch)


class KeywordTrie:
    """Spelling -> (kind, is-function-like), walked one decoded unit at a time."""

    def __init__(self, entries: tuple[KeywordEntry, ...]) -> None:
        self._root = TrieNode()
        for entry in entries:
            self._insert(entry)

    @property
    def root(self) -> TrieNode:
        return self._root

    def _insert(self, entry: KeywordEntry) -> None:
        node = self._root
        for ch in entry.spelling:
            node = node.children.setdefault(ch, TrieNode())
        if node.entry is not None:
            raise ValueError(f"Duplicate keyword spelling: {entry.spelling!r}")
        node.entry = entry


_KEYWORD_KINDS: Final[tuple[TokenKind, ...]] = (
    TokenKind.AND,
    TokenKind.OR,
    TokenKind.ABSENT,
    TokenKind.PRESENT,
    TokenKind.CASE,
    TokenKind.CLASS,
    TokenKind.DEFINE,
    TokenKind.DEFAULT,
    TokenKind.ELSE,
    TokenKind.ELSIF,
    TokenKind.FALSE,
    TokenKind.TRUE,
    TokenKind.IF,
    TokenKind.IMPORT,
    TokenKind.INHERITS,
    TokenKind.NODE,
    TokenKind.NIL,
    TokenKind.UNDEF,
    TokenKind.UNLESS,
)

# Only a keyword when not followed by `{` or `=`, so `require => ...` stays a name.
_FUNCTION_KINDS: Final[tuple[TokenKind, ...]] = (
    TokenKind.CONTAIN,
    TokenKind.DEBUG,
    TokenKind.ERR,
    TokenKind.FAIL,
    TokenKind.INCLUDE,
    TokenKind.INFO,
    TokenKind.NOTICE,
    TokenKind.REALIZE,
    TokenKind.REQUIRE,
    TokenKind.TAG,
    TokenKind.WARNING,
)

KEYWORDS: Final[tuple[KeywordEntry, ...]] = (
    *(KeywordEntry(kind, kind.fixed_text or "") for kind in _KEYWORD_KINDS),
    *(KeywordEntry(kind, kind.fixed_text or "", function_like=True) for kind in _FUNCTION_KINDS),
)

KEYWORD_TRIE: Final[KeywordTrie] = KeywordTrie(KEYWORDS)
