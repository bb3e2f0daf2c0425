"""Diagnostic codes and messages."""

from dataclasses import dataclass
from typing import Final, Literal

Severity = Literal["error", "warning"]


@dataclass(frozen=True, slots=True)
class DiagnosticSpec:
    code: str
    message: str
    hint: str | None = None
    severity: Severity = "error"
    category: str | None = None


LEXER_UNTERMINATED_STRING: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_STRING",
    message="Unterminated string literal.",
    hint="Close the string with the same quote it was opened with.",
    severity="error",
    category="lexer",
)

LEXER_UNTERMINATED_REGEXP: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_REGEXP",
    message="Unterminated regular expression.",
    hint="Close the regular expression with an unescaped `/` on the same line.",
    severity="error",
    category="lexer",
)

LEXER_UNTERMINATED_COMMENT: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_COMMENT",
    message="Unterminated block comment.",
    hint="Close the comment with `*/`.",
    severity="error",
    category="lexer",
)

LEXER_INVALID_CHARACTER: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_INVALID_CHARACTER",
    message="Invalid character.",
    severity="error",
    category="lexer",
)

PARSER_MALFORMED_CLASS_REFERENCE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_MALFORMED_CLASS_REFERENCE",
    message="Malformed class reference, expected `Class['name']`.",
    severity="error",
    category="parser",
)

PARSER_UNEXPECTED_RESOURCE_TITLE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNEXPECTED_RESOURCE_TITLE",
    message="Expected a resource title (string, variable, name or array).",
    severity="error",
    category="parser",
)

PARSER_MISSING_TITLE_COLON: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_MISSING_TITLE_COLON",
    message="Expected `:` after the resource title.",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_BODY: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_BODY",
    message="Expected `{` to open the declaration body.",
    severity="error",
    category="parser",
)

PARSER_UNSUPPORTED_TOP_LEVEL_STATEMENT: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNSUPPORTED_TOP_LEVEL_STATEMENT",
    message="Top-level statements other than class, define and node are not represented in the tree.",
    hint="Wrap the statements in a class or node to see them in the outline.",
    severity="warning",
    category="parser",
)
