"""
Type tag resolution.

Maps a lowered type annotation onto the runtime tag vocabulary, following
aliases and imports through the type information service.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Set

from .models import UNRESOLVABLE_TYPE, Diagnostics
from .program import Symbol, TypeInformationService
from .type_nodes import (
    ArrayType,
    Declaration,
    FunctionType,
    ImportSpecifier,
    IntersectionType,
    LiteralType,
    ParenthesizedType,
    PredefinedType,
    StructuralType,
    TypeAliasDeclaration,
    TypeNode,
    TypeReference,
    UnionType,
)
from .type_tags import (
    ARRAY,
    ARRAY_KIND,
    BASIC_GLOBALS,
    CONSTRUCTOR_GLOBALS,
    FUNCTION,
    FUNCTION_KIND,
    GLOBAL,
    KEYWORD_TAGS,
    LITERAL,
    OBJECT,
    OPAQUE,
    STRUCTURAL,
    UNBOUND,
    DocumentedTags,
    TagResolution,
    TypeTag,
    basic,
    basic_tags,
    describe,
)

ARRAY_GLOBALS = ("Array", "ReadonlyArray")

# Depth 1 is a property's own annotation; deeper levels sit inside a combinator.
TOP_LEVEL = 1


class TypeTagResolver:
    """Resolve type annotations to runtime type tags.

    Only at depth 1 are arrays, functions, structural literals, unions,
    intersections and aliases wrapped in ``DocumentedTags`` (runtime tag
    set plus a documentation-only generic parameter); nested levels return
    bare tags or flat tag lists for the enclosing combinator.
    """

    def __init__(self, service: TypeInformationService, diagnostics: Diagnostics):
        self.service = service
        self.diagnostics = diagnostics

    def resolve(self, node: Optional[TypeNode], depth: int = TOP_LEVEL,
                visited: Optional[Set[str]] = None) -> TagResolution:
        if node is None:
            return None
        if visited is None:
            visited = set()

        if isinstance(node, PredefinedType):
            return basic(KEYWORD_TAGS[node.keyword])
        if isinstance(node, ArrayType):
            inner = self.resolve(node.element, depth + 1, visited)
            return self._wrap(TypeTag(name=ARRAY, kind=ARRAY_KIND, inner=inner), depth)
        if isinstance(node, FunctionType):
            return self._wrap(TypeTag(name=FUNCTION, kind=FUNCTION_KIND, text=node.text), depth)
        if isinstance(node, ParenthesizedType):
            return self.resolve(node.inner, depth, visited)
        if isinstance(node, LiteralType):
            return TypeTag(name=node.value, kind=LITERAL)
        if isinstance(node, StructuralType):
            return self._wrap(TypeTag(name=OBJECT, kind=STRUCTURAL, text=node.text), depth)
        if isinstance(node, (UnionType, IntersectionType)):
            members = self._resolve_all(node.types, depth + 1, visited)
            if not members:
                return None
            if depth == TOP_LEVEL:
                return DocumentedTags(tags=basic_tags(members), annotation=node.text, resolved=members)
            return members
        if isinstance(node, TypeReference):
            return self._resolve_reference(node, depth, visited)

        logging.debug(f"Unsupported type syntax '{node.text}' at line {node.line}")
        return None

    def _resolve_all(self, nodes: List[TypeNode], depth: int, visited: Set[str]) -> List[TypeTag]:
        tags: List[TypeTag] = []
        for node in nodes:
            resolved = self.resolve(node, depth, visited)
            if resolved is None:
                continue
            if isinstance(resolved, TypeTag):
                resolved = [resolved]
            elif isinstance(resolved, DocumentedTags):
                resolved = list(resolved.tags)
            for tag in resolved:
                if tag not in tags:
                    tags.append(tag)
        return tags

    def _resolve_reference(self, node: TypeReference, depth: int, visited: Set[str]) -> TagResolution:
        symbol = self.service.symbol_at(node)
        if symbol is None:
            # type parameters and undeclared names: any value is acceptable
            return TypeTag(name=node.name or self.service.type_to_string(node), kind=UNBOUND)
        declaration = self.service.first_declaration(symbol)

        if isinstance(declaration, ImportSpecifier):
            # imports are transparent: same depth as the reference itself
            target = self.service.aliased_symbol(symbol)
            target_declaration = self.service.first_declaration(target) if target is not None else None
            if target is None or target_declaration is None:
                logging.debug(f"Import '{node.name}' from '{declaration.source}' does not resolve to a declaration")
                return self._opaque(node)
            return self._resolve_declaration(node, target, target_declaration, depth, visited)

        if declaration is None and symbol.is_builtin:
            if symbol.name in ARRAY_GLOBALS:
                inner = self.resolve(node.type_arguments[0], depth + 1, visited) if node.type_arguments else None
                return self._wrap(TypeTag(name=ARRAY, kind=ARRAY_KIND, inner=inner), depth)
            if symbol.name in BASIC_GLOBALS:
                return basic(symbol.name)
            if symbol.name in CONSTRUCTOR_GLOBALS:
                return TypeTag(name=symbol.name, kind=GLOBAL)

        return self._resolve_declaration(node, symbol, declaration, depth, visited)

    def _resolve_declaration(self, node: TypeReference, symbol: Symbol, declaration: Optional[Declaration],
                             depth: int, visited: Set[str]) -> TagResolution:
        if not isinstance(declaration, TypeAliasDeclaration):
            return self._opaque(node, declaration)
        if symbol.key in visited:
            self.diagnostics.warn(UNRESOLVABLE_TYPE, f"type alias '{symbol.name}' refers to itself", node.line)
            return None
        visited.add(symbol.key)
        try:
            resolved = self.resolve(declaration.type, depth + 1, visited)
        finally:
            visited.discard(symbol.key)
        if resolved is not None and depth == TOP_LEVEL:
            return DocumentedTags(tags=basic_tags(resolved), annotation=describe(resolved), resolved=resolved)
        return resolved

    def _opaque(self, node: TypeReference, declaration: Optional[Declaration] = None) -> TypeTag:
        name = declaration.name if declaration is not None and declaration.name else node.name
        return TypeTag(name=name or self.service.type_to_string(node), kind=OPAQUE)

    def _wrap(self, tag: TypeTag, depth: int) -> TagResolution:
        if depth != TOP_LEVEL:
            return tag
        return DocumentedTags(tags=basic_tags(tag), annotation=describe(tag), resolved=tag)
