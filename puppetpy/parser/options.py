"""Parser configuration options."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ParserOptions:
    """Feature flags controlling lexing and gap reporting."""

    allow_multiline_strings: bool = False
    report_top_level_gap: bool = True
