#!/usr/bin/env python
"""Print the AST, outline and diagnostics of a Puppet manifest."""

import argparse
import logging
from pathlib import Path

from puppetpy.ast import OutlineEntry, format_tree
from puppetpy.parser import ParserOptions, parse


def _print_outline(entries: list[OutlineEntry] | tuple[OutlineEntry, ...], depth: int = 0) -> None:
    for entry in entries:
        print(f"{'  ' * depth}{entry.kind.value} {entry.name} ({entry.range.start}..{entry.range.end})")
        _print_outline(entry.children, depth + 1)


def main() -> int:
    parser = argparse.ArgumentParser(description="Dump the syntax tree of a Puppet manifest")
    parser.add_argument("manifest", type=Path, help="Path to a .pp file")
    parser.add_argument("--outline", action="store_true", help="Print the declaration outline instead of the tree")
    parser.add_argument("--multiline-strings", action="store_true", help="Let strings span lines")
    parser.add_argument("--verbose", action="store_true", help="Show parser debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    text = args.manifest.read_text(encoding="utf-8")
    parsed = parse(text, ParserOptions(allow_multiline_strings=args.multiline_strings))

    if args.outline:
        _print_outline(parsed.outline())
    else:
        print(format_tree(parsed.root))

    if parsed.diagnostics:
        print("\nDiagnostics:")
        for d in parsed.diagnostics:
            print(f"- {d.severity.upper()} {d.code} range={d.range.as_tuple()} message={d.message}")
    return 1 if parsed.has_errors else 0


if __name__ == "__main__":
    raise SystemExit(main())
