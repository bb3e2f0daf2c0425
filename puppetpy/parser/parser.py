"""Parser cursor over a token sequence."""

from puppetpy.diagnostics import Diagnostic, DiagnosticSpec, make_diagnostic
from puppetpy.lexer import Token, TokenKind, token_text
from puppetpy.parser.cancellation import CancellationToken
from puppetpy.parser.options import ParserOptions
from puppetpy.parser.token_sequence import TokenSequence
from puppetpy.text import TextRange


class Parser:
    """Trivia-aware movement over a `TokenSequence`, plus diagnostics.

    Grammar routines agree on one convention: on return the cursor sits on
    the last token the routine consumed, and the caller advances past it.
    """

    def __init__(
        self,
        sequence: TokenSequence,
        options: ParserOptions | None = None,
        cancellation: CancellationToken | None = None,
    ) -> None:
        self._sequence = sequence
        self._options = options or ParserOptions()
        self._cancellation = cancellation
        self._diagnostics: list[Diagnostic] = []

    @property
    def sequence(self) -> TokenSequence:
        return self._sequence

    @property
    def options(self) -> ParserOptions:
        return self._options

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self._diagnostics

    @property
    def source(self) -> str:
        return self._sequence.text

    @property
    def token(self) -> Token | None:
        return self._sequence.token

    @property
    def kind(self) -> TokenKind | None:
        token = self._sequence.token
        return token.kind if token is not None else None

    @property
    def offset(self) -> int:
        return self._sequence.offset

    @property
    def is_cancelled(self) -> bool:
        return self._cancellation is not None and self._cancellation.is_cancelled

    def text(self, token: Token | None = None) -> str:
        if token is None:
            token = self._sequence.token
        if token is None:
            return ""
        return token_text(self._sequence.text, token)

    def at(self, kind: TokenKind) -> bool:
        return self.kind == kind

    def move_next(self) -> Token | None:
        self._sequence.move_next()
        return self._sequence.token

    def skip_trivia(self) -> Token | None:
        """Move forward off trivia, staying put on anything else."""
        sequence = self._sequence
        while sequence.token is not None and sequence.token.kind.is_trivia:
            if not sequence.move_next():
                return None
        return sequence.token

    def next_non_trivia(self) -> Token | None:
        if not self._sequence.move_next():
            return None
        return self.skip_trivia()

    def backoff_trivia(self) -> Token | None:
        """Move backward off trivia, staying put on anything else."""
        sequence = self._sequence
        while sequence.token is not None and sequence.token.kind.is_trivia:
            if not sequence.move_previous():
                return None
        return sequence.token

    def previous_non_trivia(self) -> Token | None:
        """Unread one significant token."""
        if not self._sequence.move_previous():
            return None
        return self.backoff_trivia()

    def collect_text(self, stops: frozenset[TokenKind]) -> str | None:
        """Concatenate raw token texts up to a stop kind; None if input ends first."""
        parts: list[str] = []
        token = self._sequence.token
        while token is not None and token.kind not in stops:
            parts.append(self.text(token))
            self._sequence.move_next()
            token = self._sequence.token
        if token is None:
            return None
        return "".join(parts)

    def current_range(self) -> TextRange:
        token = self._sequence.token
        if token is not None:
            return token.range
        return TextRange.empty(self._sequence.offset)

    def error(self, spec: DiagnosticSpec, range: TextRange | None = None, message: str | None = None) -> None:
        diagnostic = make_diagnostic(spec, range if range is not None else self.current_range(), message)
        if self._diagnostics:
            previous = self._diagnostics[-1]
            if previous.range.start == diagnostic.range.start:
                return
        self._diagnostics.append(diagnostic)
