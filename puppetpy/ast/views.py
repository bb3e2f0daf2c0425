"""Consumer views over the AST: traversal, offset lookup and outline."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from puppetpy.ast.model import (
    ClassDecl,
    DefineDecl,
    Element,
    ElementKind,
    NodeDecl,
    Resource,
    StringLiteral,
)
from puppetpy.text import TextRange

_OUTLINE_KINDS = frozenset(
    {
        ElementKind.CLASS,
        ElementKind.DEFINE,
        ElementKind.NODE,
        ElementKind.RESOURCE,
    }
)


@dataclass(frozen=True, slots=True)
class OutlineEntry:
    """One navigable declaration in the outline view."""

    kind: ElementKind
    name: str
    range: TextRange
    children: tuple[OutlineEntry, ...] = ()


def walk(element: Element) -> Iterator[Element]:
    """Yield `element` and all its descendants in pre-order."""
    stack = [element]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def element_at(root: Element, offset: int) -> Element | None:
    """Deepest element whose span contains `offset`."""
    if not root.offset <= offset < root.end_offset:
        return None

    node = root
    while True:
        for child in node.children:
            if child.offset <= offset < child.end_offset:
                node = child
                break
        else:
            return node


def outline(root: Element) -> list[OutlineEntry]:
    """Class, define, node and resource declarations nested as in the source."""
    entries: list[OutlineEntry] = []
    for child in root.children:
        entries.extend(_outline_entries(child))
    return entries


def _outline_entries(element: Element) -> list[OutlineEntry]:
    nested: list[OutlineEntry] = []
    for child in element.children:
        nested.extend(_outline_entries(child))

    if element.kind not in _OUTLINE_KINDS:
        return nested

    return [
        OutlineEntry(
            kind=element.kind,
            name=_outline_name(element),
            range=TextRange(element.offset, element.end_offset),
            children=tuple(nested),
        )
    ]


def _outline_name(element: Element) -> str:
    match element:
        case ClassDecl(name=name) if name is not None:
            return name.name
        case DefineDecl(name=name) if name is not None:
            return name
        case NodeDecl(names=names):
            return ", ".join(names)
        case Resource(resource_type=resource_type, title=StringLiteral(value=value)):
            return f"{resource_type}[{value}]"
        case Resource(resource_type=resource_type):
            return resource_type
    return "<anonymous>"
