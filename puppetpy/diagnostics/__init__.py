"""Diagnostics."""

from puppetpy.diagnostics.codes import (
    LEXER_INVALID_CHARACTER,
    LEXER_UNTERMINATED_COMMENT,
    LEXER_UNTERMINATED_REGEXP,
    LEXER_UNTERMINATED_STRING,
    PARSER_EXPECTED_BODY,
    PARSER_MALFORMED_CLASS_REFERENCE,
    PARSER_MISSING_TITLE_COLON,
    PARSER_UNEXPECTED_RESOURCE_TITLE,
    PARSER_UNSUPPORTED_TOP_LEVEL_STATEMENT,
    DiagnosticSpec,
)
from puppetpy.diagnostics.diagnostic import Diagnostic, Severity
from puppetpy.diagnostics.report import collect_diagnostics, has_errors, make_diagnostic

__all__ = [
    "LEXER_INVALID_CHARACTER",
    "LEXER_UNTERMINATED_COMMENT",
    "LEXER_UNTERMINATED_REGEXP",
    "LEXER_UNTERMINATED_STRING",
    "PARSER_EXPECTED_BODY",
    "PARSER_MALFORMED_CLASS_REFERENCE",
    "PARSER_MISSING_TITLE_COLON",
    "PARSER_UNEXPECTED_RESOURCE_TITLE",
    "PARSER_UNSUPPORTED_TOP_LEVEL_STATEMENT",
    "Diagnostic",
    "DiagnosticSpec",
    "Severity",
    "collect_diagnostics",
    "has_errors",
    "make_diagnostic",
]
