"""High-level lex/parse entrypoints for Puppet manifests."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from puppetpy.diagnostics import Diagnostic, collect_diagnostics
from puppetpy.lexer import Lexer, Token
from puppetpy.parser.cancellation import CancellationToken
from puppetpy.parser.grammar import parse_manifest
from puppetpy.parser.options import ParserOptions
from puppetpy.parser.parsed_manifest import ParsedManifest
from puppetpy.parser.parser import Parser
from puppetpy.parser.token_sequence import TokenSequence

LOGGER = logging.getLogger(__name__)


def lex(text: str, options: ParserOptions | None = None) -> tuple[list[Token], list[Diagnostic]]:
    resolved_options = options or ParserOptions()
    lexer = Lexer(text, allow_multiline_strings=resolved_options.allow_multiline_strings)
    tokens = lexer.lex()
    return tokens, lexer.diagnostics


def parse(
    text: str,
    options: ParserOptions | None = None,
    *,
    cancellation: CancellationToken | None = None,
) -> ParsedManifest:
    resolved_options = options or ParserOptions()
    tokens, lexer_diagnostics = lex(text, resolved_options)
    return parse_tokens(
        TokenSequence(text, tokens),
        resolved_options,
        cancellation=cancellation,
        lexer_diagnostics=lexer_diagnostics,
    )


def parse_tokens(
    sequence: TokenSequence,
    options: ParserOptions | None = None,
    *,
    cancellation: CancellationToken | None = None,
    lexer_diagnostics: Iterable[Diagnostic] = (),
) -> ParsedManifest:
    """Parse an already lexed token sequence."""
    LOGGER.debug("Parsing manifest: %d chars, %d tokens", len(sequence.text), len(sequence.tokens))
    parser = Parser(sequence, options=options, cancellation=cancellation)
    root = parse_manifest(parser)

    cancelled = parser.is_cancelled
    aborted = not sequence.is_valid
    if cancelled:
        LOGGER.info("Parse cancelled, returning partial tree")
    if aborted:
        LOGGER.warning("Token stream invalidated mid-parse, returning partial tree")

    diagnostics = collect_diagnostics(lexer_diagnostics, parser.diagnostics)
    LOGGER.debug(
        "Parsed manifest: %d top-level declarations, %d diagnostics",
        len(root.children),
        len(diagnostics),
    )
    return ParsedManifest(
        text=sequence.text,
        tokens=tuple(sequence.tokens),
        root=root,
        diagnostics=tuple(diagnostics),
        cancelled=cancelled,
        aborted=aborted,
    )
