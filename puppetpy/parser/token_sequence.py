"""Bidirectional cursor over a lexed token list."""

from puppetpy.lexer import Token, token_text


class TokenSequence:
    """Offset-aware cursor the parser walks back and forth.

    The cursor starts before the first token. Moving past either end leaves it
    outside the list, where `token` is None.
    """

    def __init__(self, text: str, tokens: list[Token]) -> None:
        self._text = text
        self._tokens = tokens
        self._index = -1
        self._valid = True

    @property
    def text(self) -> str:
        return self._text

    @property
    def tokens(self) -> list[Token]:
        return self._tokens

    @property
    def index(self) -> int:
        return self._index

    @property
    def token(self) -> Token | None:
        if 0 <= self._index < len(self._tokens):
            return self._tokens[self._index]
        return None

    @property
    def offset(self) -> int:
        """Start offset of the current token, clamped to the text at either end."""
        token = self.token
        if token is not None:
            return token.offset
        if self._index < 0:
            return 0
        return len(self._text)

    @property
    def is_valid(self) -> bool:
        return self._valid

    def invalidate(self) -> None:
        """Mark the backing text as changed; the parse in flight gives up."""
        self._valid = False

    def move_start(self) -> None:
        self._index = -1

    def move_to(self, index: int) -> None:
        """Return to a position previously read from `index`."""
        assert -1 <= index <= len(self._tokens), f"index {index} outside the sequence"
        self._index = index

    def move_next(self) -> bool:
        if self._index + 1 >= len(self._tokens):
            self._index = len(self._tokens)
            return False
        self._index += 1
        return True

    def move_previous(self) -> bool:
        if self._index - 1 < 0:
            return False
        self._index -= 1
        return True

    def token_text(self) -> str | None:
        token = self.token
        if token is None:
            return None
        return token_text(self._text, token)
