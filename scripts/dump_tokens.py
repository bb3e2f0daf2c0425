#!/usr/bin/env python
import argparse
from pathlib import Path

from puppetpy.lexer import Token, token_text
from puppetpy.parser import ParserOptions, lex


def format_token(idx: int, token: Token, source: str) -> str:
    base = (
        f"[{idx}] kind={token.kind.name} "
        f"category={token.kind.category.name} "
        f"text={token_text(source, token)!r} "
        f"span=({token.range.start},{token.range.end})"
    )
    if token.flags:
        return base + f" flags={token.flags!r}"
    return base


def main() -> None:
    parser = argparse.ArgumentParser(description="Dump the token stream of a Puppet manifest")
    parser.add_argument("manifest", type=Path, help="Path to a .pp file")
    parser.add_argument("--output", type=Path, default=None, help="Write tokens here instead of stdout")
    parser.add_argument("--multiline-strings", action="store_true", help="Let strings span lines")
    args = parser.parse_args()

    text = args.manifest.read_text(encoding="utf-8")
    tokens, diagnostics = lex(text, ParserOptions(allow_multiline_strings=args.multiline_strings))

    lines = [format_token(idx, token, text) for idx, token in enumerate(tokens)]
    lines.extend(
        f"{d.severity.upper()} {d.code} span=({d.range.start},{d.range.end}) {d.message}" for d in diagnostics
    )

    if args.output is None:
        print("\n".join(lines))
        return

    args.output.parent.mkdir(parents=True, exist_ok=True)
    with args.output.open("w", encoding="utf-8") as f:
        for line in lines:
            f.write(line + "\n")

    print(f"Wrote {len(tokens)} tokens to {args.output}")


if __name__ == "__main__":
    main()
