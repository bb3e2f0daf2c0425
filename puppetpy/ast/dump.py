"""Debug rendering of AST trees."""

from puppetpy.ast.model import Blob, Element


def format_tree(element: Element, *, indent: str = "  ") -> str:
    lines: list[str] = []
    _format_into(element, 0, indent, lines)
    return "\n".join(lines)


def _format_into(element: Element, depth: int, indent: str, lines: list[str]) -> None:
    line = f"{indent * depth}{element!r}"
    if isinstance(element, Blob) and element.raw:
        line += " raw=" + repr(" ".join(element.raw))
    lines.append(line)
    for child in element.children:
        _format_into(child, depth + 1, indent, lines)


def dump_ast(element: Element) -> None:
    """Print the tree rooted at `element`, one node per line."""
    print(format_tree(element))
