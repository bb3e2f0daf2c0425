"""AST data model for Puppet manifests.

Nodes form an ownership tree through `children`; `parent` is a plain
back-reference kept in step by `set_parent`. Children stay sorted by offset
so rendering and lookup never need to re-sort.
"""

from __future__ import annotations

import bisect
import re
from collections.abc import Iterator
from enum import StrEnum
from typing import Final


class ElementKind(StrEnum):
    ROOT = "root"
    BLOB = "blob"
    IDENTIFIER = "identifier"
    VARIABLE = "variable"
    VARIABLE_DEFINITION = "variable_definition"
    STRING = "string"
    CLASS_REF = "class_ref"
    TYPE_REFERENCE = "type_reference"
    FUNCTION_CALL = "function_call"
    RESOURCE = "resource"
    RESOURCE_ATTRIBUTE = "resource_attribute"
    CLASS = "class"
    NODE = "node"
    DEFINE = "define"
    CASE = "case"
    CONDITION = "condition"
    CLASS_PARAM = "class_param"


class Element:
    __slots__ = ("kind", "offset", "parent", "_children", "_end_offset")

    def __init__(self, kind: ElementKind, parent: Element | None, offset: int) -> None:
        self.kind = kind
        self.offset = offset
        self.parent: Element | None = None
        self._children: list[Element] = []
        self._end_offset: int | None = None
        if parent is not None:
            self.set_parent(parent)

    @property
    def children(self) -> tuple[Element, ...]:
        return tuple(self._children)

    @property
    def intrinsic_length(self) -> int:
        """Length of the node's own text, without its children."""
        return 0

    @property
    def end_offset(self) -> int:
        end = self._end_offset if self._end_offset is not None else self.offset + self.intrinsic_length
        for child in self._children:
            end = max(end, child.end_offset)
        return end

    def set_end_offset(self, end_offset: int) -> None:
        self._end_offset = end_offset

    def set_parent(self, parent: Element | None) -> None:
        if self.parent is parent:
            return
        if self.parent is not None:
            self.parent._children.remove(self)
        self.parent = parent
        if parent is not None:
            bisect.insort(parent._children, self, key=lambda element: element.offset)

    def children_of_kind(self, kind: ElementKind) -> list[Element]:
        return [child for child in self._children if child.kind == kind]

    def iter_ancestors(self) -> Iterator[Element]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def label(self) -> str | None:
        """Short name shown in dumps and outlines."""
        return None

    def __repr__(self) -> str:
        base = f"{self.kind.name}({self.offset}..{self.end_offset})"
        label = self.label()
        return f"{base}[{label}]" if label is not None else base


class Blob(Element):
    """Tolerant container for a token span; recognised pieces become children."""

    __slots__ = ("_raw",)

    def __init__(self, parent: Element | None, offset: int) -> None:
        super().__init__(ElementKind.BLOB, parent, offset)
        self._raw: list[str] = []

    @property
    def raw(self) -> tuple[str, ...]:
        """Texts of the tokens nothing more specific was built for."""
        return tuple(self._raw)

    def append_raw(self, text: str) -> None:
        self._raw.append(text)

    @property
    def is_empty(self) -> bool:
        return not self._raw and not self._children


class Identifier(Element):
    __slots__ = ("name",)

    def __init__(self, parent: Element | None, offset: int, name: str) -> None:
        super().__init__(ElementKind.IDENTIFIER, parent, offset)
        self.name = name

    @property
    def intrinsic_length(self) -> int:
        return len(self.name)

    def label(self) -> str:
        return self.name


class Variable(Element):
    __slots__ = ("name", "_length")

    def __init__(
        self,
        parent: Element | None,
        offset: int,
        name: str,
        *,
        length: int | None = None,
        kind: ElementKind = ElementKind.VARIABLE,
    ) -> None:
        super().__init__(kind, parent, offset)
        self.name = name
        # Interpolated `${name}` spans more source than the name itself.
        self._length = length if length is not None else len(name)

    @property
    def intrinsic_length(self) -> int:
        return self._length

    def label(self) -> str:
        return self.name


class VariableDefinition(Variable):
    __slots__ = ()

    def __init__(self, parent: Element | None, offset: int, name: str) -> None:
        super().__init__(parent, offset, name, kind=ElementKind.VARIABLE_DEFINITION)


# A `$` escaped by an odd run of backslashes is literal; `\\$x` still interpolates.
_INTERPOLATION: Final[re.Pattern[str]] = re.compile(
    r"(?<!\\)(?:\\\\)*(?P<reference>\$(?:\{(?P<braced>[A-Za-z_:][A-Za-z0-9_:]*)\}|(?P<bare>[A-Za-z_][A-Za-z0-9_]*(?:::[A-Za-z_][A-Za-z0-9_]*)*)))"
)


class StringLiteral(Element):
    """Quoted (or bare-word) string; double-quoted ones expose interpolated variables."""

    __slots__ = ("raw_text", "value")

    def __init__(self, parent: Element | None, offset: int, raw_text: str) -> None:
        super().__init__(ElementKind.STRING, parent, offset)
        self.raw_text = raw_text
        self.value = raw_text
        if _is_quoted(raw_text, '"'):
            self.value = raw_text[1:-1]
            for match in _INTERPOLATION.finditer(self.value):
                name = match.group("braced") or match.group("bare")
                start, end = match.span("reference")
                Variable(self, offset + 1 + start, "$" + name, length=end - start)
        elif _is_quoted(raw_text, "'"):
            self.value = raw_text[1:-1]

    @property
    def was_quoted(self) -> bool:
        return self.value != self.raw_text

    @property
    def intrinsic_length(self) -> int:
        return len(self.raw_text)

    def label(self) -> str:
        return self.value


def _is_quoted(text: str, quote: str) -> bool:
    return len(text) >= 2 and text.startswith(quote) and text.endswith(quote)


class ClassRef(Element):
    __slots__ = ("name",)

    def __init__(self, parent: Element | None, offset: int) -> None:
        super().__init__(ElementKind.CLASS_REF, parent, offset)
        self.name: Identifier | None = None

    def set_name(self, name: Identifier) -> None:
        name.set_parent(self)
        self.name = name

    def label(self) -> str | None:
        return self.name.name if self.name is not None else None


class TypeReference(Element):
    """`Type[...]` expression; the bracket contents are a child blob."""

    __slots__ = ("name",)

    def __init__(self, parent: Element | None, offset: int, name: str) -> None:
        super().__init__(ElementKind.TYPE_REFERENCE, parent, offset)
        self.name = name

    @property
    def intrinsic_length(self) -> int:
        return len(self.name)

    def label(self) -> str:
        return self.name


class FunctionCall(Element):
    __slots__ = ("name",)

    def __init__(self, parent: Element | None, offset: int, name: str) -> None:
        super().__init__(ElementKind.FUNCTION_CALL, parent, offset)
        self.name = name

    @property
    def intrinsic_length(self) -> int:
        return len(self.name)

    @property
    def arguments(self) -> list[Element]:
        return list(self._children)

    def label(self) -> str:
        return self.name


class Resource(Element):
    __slots__ = ("resource_type", "title", "_attributes")

    def __init__(self, parent: Element | None, offset: int, resource_type: str) -> None:
        super().__init__(ElementKind.RESOURCE, parent, offset)
        self.resource_type = resource_type
        self.title: Element | None = None
        self._attributes: list[ResourceAttribute] = []

    @property
    def intrinsic_length(self) -> int:
        return len(self.resource_type)

    @property
    def attributes(self) -> tuple[ResourceAttribute, ...]:
        return tuple(self._attributes)

    def set_title(self, title: Element) -> None:
        title.set_parent(self)
        self.title = title

    def add_attribute(self, attribute: ResourceAttribute) -> None:
        attribute.set_parent(self)
        self._attributes.append(attribute)

    def label(self) -> str:
        return self.resource_type


class ResourceAttribute(Element):
    __slots__ = ("name", "value")

    def __init__(self, parent: Element | None, offset: int, name: str) -> None:
        super().__init__(ElementKind.RESOURCE_ATTRIBUTE, parent, offset)
        self.name = name
        self.value: Element | None = None

    @property
    def intrinsic_length(self) -> int:
        return len(self.name)

    def set_value(self, value: Element) -> None:
        value.set_parent(self)
        self.value = value

    def label(self) -> str:
        return self.name


class ClassParam(Element):
    __slots__ = ("variable", "type_name", "default")

    def __init__(self, parent: Element | None, offset: int, variable: VariableDefinition) -> None:
        super().__init__(ElementKind.CLASS_PARAM, parent, offset)
        variable.set_parent(self)
        self.variable = variable
        self.type_name = "Any"
        self.default: Element | None = None

    def set_default(self, default: Element) -> None:
        default.set_parent(self)
        self.default = default

    def label(self) -> str:
        return f"{self.type_name} {self.variable.name}"


class ParamContainer(Element):
    """Declaration that takes a parameter list."""

    __slots__ = ("_params",)

    def __init__(self, kind: ElementKind, parent: Element | None, offset: int) -> None:
        super().__init__(kind, parent, offset)
        self._params: tuple[ClassParam, ...] = ()

    @property
    def params(self) -> tuple[ClassParam, ...]:
        return self._params

    def set_params(self, params: list[ClassParam]) -> None:
        self._params = tuple(params)

    @property
    def body(self) -> Blob | None:
        for child in reversed(self._children):
            if isinstance(child, Blob):
                return child
        return None


class ClassDecl(ParamContainer):
    __slots__ = ("name", "inherits")

    def __init__(self, parent: Element | None, offset: int) -> None:
        super().__init__(ElementKind.CLASS, parent, offset)
        self.name: Identifier | None = None
        self.inherits: ClassRef | None = None

    def set_name(self, name: Identifier) -> None:
        name.set_parent(self)
        self.name = name

    def set_inherits(self, inherits: ClassRef) -> None:
        inherits.set_parent(self)
        self.inherits = inherits

    def label(self) -> str | None:
        return self.name.name if self.name is not None else None


class DefineDecl(ParamContainer):
    __slots__ = ("name",)

    def __init__(self, parent: Element | None, offset: int) -> None:
        super().__init__(ElementKind.DEFINE, parent, offset)
        self.name: str | None = None

    def label(self) -> str | None:
        return self.name


class NodeDecl(Element):
    __slots__ = ("names",)

    def __init__(self, parent: Element | None, offset: int) -> None:
        super().__init__(ElementKind.NODE, parent, offset)
        self.names: tuple[str, ...] = ()

    @property
    def body(self) -> Blob | None:
        for child in self._children:
            if isinstance(child, Blob):
                return child
        return None

    def label(self) -> str:
        return ", ".join(self.names)


class CaseStmt(Element):
    __slots__ = ("control", "_cases")

    def __init__(self, parent: Element | None, offset: int) -> None:
        super().__init__(ElementKind.CASE, parent, offset)
        self.control: Blob | None = None
        self._cases: list[tuple[Blob, Blob]] = []

    @property
    def cases(self) -> tuple[tuple[Blob, Blob], ...]:
        """(match expression, body) pairs in source order."""
        return tuple(self._cases)

    def add_case(self, match: Blob, body: Blob) -> None:
        self._cases.append((match, body))


class Condition(Element):
    """`if`/`unless` branch; an `elsif` chain nests through `otherwise`."""

    __slots__ = ("condition", "consequence", "otherwise")

    def __init__(self, parent: Element | None, offset: int) -> None:
        super().__init__(ElementKind.CONDITION, parent, offset)
        self.condition: Blob | None = None
        self.consequence: Blob | None = None
        self.otherwise: Element | None = None
