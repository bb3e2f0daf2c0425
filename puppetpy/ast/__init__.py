"""Typed AST over Puppet manifests."""

from puppetpy.ast.dump import dump_ast, format_tree
from puppetpy.ast.model import (
    Blob,
    CaseStmt,
    ClassDecl,
    ClassParam,
    ClassRef,
    Condition,
    DefineDecl,
    Element,
    ElementKind,
    FunctionCall,
    Identifier,
    NodeDecl,
    ParamContainer,
    Resource,
    ResourceAttribute,
    StringLiteral,
    TypeReference,
    Variable,
    VariableDefinition,
)
from puppetpy.ast.views import OutlineEntry, element_at, outline, walk

__all__ = [
    "Blob",
    "CaseStmt",
    "ClassDecl",
    "ClassParam",
    "ClassRef",
    "Condition",
    "DefineDecl",
    "Element",
    "ElementKind",
    "FunctionCall",
    "Identifier",
    "NodeDecl",
    "OutlineEntry",
    "ParamContainer",
    "Resource",
    "ResourceAttribute",
    "StringLiteral",
    "TypeReference",
    "Variable",
    "VariableDefinition",
    "dump_ast",
    "element_at",
    "format_tree",
    "outline",
    "walk",
]
