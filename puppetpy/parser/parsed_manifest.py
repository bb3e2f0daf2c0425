"""Parse result carrier."""

from dataclasses import dataclass

from puppetpy.ast import Element, OutlineEntry, outline
from puppetpy.diagnostics import Diagnostic, has_errors
from puppetpy.lexer import Token


@dataclass(frozen=True, slots=True)
class ParsedManifest:
    """Tokens, tree and diagnostics for one source snapshot."""

    text: str
    tokens: tuple[Token, ...]
    root: Element
    diagnostics: tuple[Diagnostic, ...]
    cancelled: bool = False
    aborted: bool = False

    @property
    def is_partial(self) -> bool:
        """Whether parsing stopped before the end of the manifest."""
        return self.cancelled or self.aborted

    @property
    def has_errors(self) -> bool:
        return has_errors(self.diagnostics)

    def outline(self) -> list[OutlineEntry]:
        return outline(self.root)
