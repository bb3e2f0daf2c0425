"""Parser infrastructure (token sequence + cursor + grammar)."""

from puppetpy.parser.cancellation import CancellationToken
from puppetpy.parser.grammar import (
    DEFAULT_PARAM_TYPE,
    fast_forward,
    parse_case,
    parse_class,
    parse_class_internal,
    parse_class_reference,
    parse_define,
    parse_if,
    parse_manifest,
    parse_node,
    parse_params,
    parse_requirement_list,
    parse_resource,
    parse_resource_attrs,
)
from puppetpy.parser.options import ParserOptions
from puppetpy.parser.parsed_manifest import ParsedManifest
from puppetpy.parser.parser import Parser
from puppetpy.parser.puppet import lex, parse, parse_tokens
from puppetpy.parser.token_sequence import TokenSequence

__all__ = [
    "DEFAULT_PARAM_TYPE",
    "CancellationToken",
    "ParsedManifest",
    "Parser",
    "ParserOptions",
    "TokenSequence",
    "fast_forward",
    "lex",
    "parse",
    "parse_case",
    "parse_class",
    "parse_class_internal",
    "parse_class_reference",
    "parse_define",
    "parse_if",
    "parse_manifest",
    "parse_node",
    "parse_params",
    "parse_requirement_list",
    "parse_resource",
    "parse_resource_attrs",
    "parse_tokens",
]
