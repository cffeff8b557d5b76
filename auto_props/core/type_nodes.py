"""
Type-expression model for TypeScript annotations.

This module contains pure data structures describing the closed set of
type-expression kinds the resolution engine understands, plus the member
and declaration shapes they refer to. Instances are produced by the
tree-sitter adapter and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Union

if TYPE_CHECKING:
    from .program import SourceModule


@dataclass
class TypeNode:
    """Base class for all lowered type expressions."""
    text: str
    line: int


@dataclass
class PredefinedType(TypeNode):
    """A keyword type: string, number, boolean, object, any or undefined."""
    keyword: str


@dataclass
class LiteralType(TypeNode):
    """A string, numeric, boolean or null literal used as a type."""
    value: str


@dataclass
class ArrayType(TypeNode):
    element: Optional[TypeNode]


@dataclass
class FunctionType(TypeNode):
    pass


@dataclass
class ParenthesizedType(TypeNode):
    inner: Optional[TypeNode]


@dataclass
class StructuralType(TypeNode):
    """An object type literal: ``{ title: string, badge?: number }``."""
    members: List[Member] = field(default_factory=list)


@dataclass
class UnionType(TypeNode):
    types: List[TypeNode] = field(default_factory=list)


@dataclass
class IntersectionType(TypeNode):
    types: List[TypeNode] = field(default_factory=list)


@dataclass
class TypeReference(TypeNode):
    """A named type at its use site, resolved through the module it appears in."""
    name: str
    type_arguments: List[TypeNode] = field(default_factory=list)
    scope: Optional["SourceModule"] = field(default=None, repr=False, compare=False)


@dataclass
class UnsupportedType(TypeNode):
    """Any syntax the engine does not classify (tuples, keyof, conditionals...)."""
    kind: str = ""


@dataclass
class PropertySignature:
    name: Optional[str]
    type: Optional[TypeNode]
    optional: bool
    line: int
    doc: List[str] = field(default_factory=list)


@dataclass
class MethodSignature:
    name: Optional[str]
    parameters: str
    return_type: Optional[str]
    optional: bool
    line: int
    doc: List[str] = field(default_factory=list)


Member = Union[PropertySignature, MethodSignature]


@dataclass
class Declaration:
    """Base class for top-level declarations a symbol can point at."""
    name: str
    line: int
    module: Optional["SourceModule"] = field(default=None, repr=False, compare=False)


@dataclass
class TypeAliasDeclaration(Declaration):
    type: Optional[TypeNode] = None


@dataclass
class InterfaceDeclaration(Declaration):
    members: List[Member] = field(default_factory=list)
    extends: List[TypeNode] = field(default_factory=list)


@dataclass
class ImportSpecifier(Declaration):
    """A named import or re-export; ``name`` is the local binding."""
    imported_name: str = ""
    source: str = ""


@dataclass
class OtherDeclaration(Declaration):
    """Classes, enums, functions and values: nothing to look inside."""
    kind: str = ""

