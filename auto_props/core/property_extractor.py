"""
Convert structural types into lists of PropertyMeta.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Set, Union

from .models import UNRESOLVABLE_TYPE, UNSUPPORTED_PATTERN, Diagnostics, PropertyMeta
from .program import TypeInformationService
from .type_nodes import (
    ImportSpecifier,
    InterfaceDeclaration,
    IntersectionType,
    Member,
    MethodSignature,
    ParenthesizedType,
    PropertySignature,
    StructuralType,
    TypeAliasDeclaration,
    TypeNode,
    TypeReference,
)
from .type_resolver import TypeTagResolver
from .type_tags import FUNCTION, FUNCTION_KIND, UNDEFINED, TypeTag, runtime_names

Extractable = Union[TypeNode, InterfaceDeclaration]


class PropertyExtractor:
    def __init__(self, service: TypeInformationService, resolver: TypeTagResolver, diagnostics: Diagnostics):
        self.service = service
        self.resolver = resolver
        self.diagnostics = diagnostics

    def extract(self, node: Optional[Extractable], visited: Optional[Set[str]] = None) -> Optional[List[PropertyMeta]]:
        """
        Extract one PropertyMeta per named member of a structural type.

        Handles object type literals, interfaces (including inherited members),
        intersections of those, and references that lead to one of them.
        Returns None when nothing could be extracted from the node.
        """
        if node is None:
            return None
        if visited is None:
            visited = set()

        if isinstance(node, (StructuralType, InterfaceDeclaration)):
            props: List[PropertyMeta] = []
            if isinstance(node, InterfaceDeclaration):
                for base in node.extends:
                    props.extend(self.extract(base, visited) or [])
            props.extend(self.extract_members(node.members))
            return props
        if isinstance(node, IntersectionType):
            props = []
            for part in node.types:
                if isinstance(part, ParenthesizedType):
                    part = part.inner
                if isinstance(part, (StructuralType, TypeReference)):
                    props.extend(self.extract(part, visited) or [])
                elif part is not None:
                    self.diagnostics.warn(
                        UNSUPPORTED_PATTERN,
                        f"cannot merge '{part.text}' into an intersection of structural types",
                        part.line,
                    )
            return props
        if isinstance(node, ParenthesizedType):
            return self.extract(node.inner, visited)
        if isinstance(node, TypeReference):
            return self._extract_reference(node, visited)

        logging.debug(f"No properties to extract from '{getattr(node, 'text', node)}'")
        return None

    def extract_members(self, members: List[Member]) -> List[PropertyMeta]:
        props: List[PropertyMeta] = []
        for member in members:
            prop = self._property_from_member(member)
            if prop is not None:
                props.append(prop)
        return props

    def _property_from_member(self, member: Member) -> Optional[PropertyMeta]:
        if not member.name:
            return None
        if isinstance(member, MethodSignature):
            signature = self.service.type_to_string(member)
            return PropertyMeta(
                name=member.name,
                type_tags=TypeTag(name=FUNCTION, kind=FUNCTION_KIND, text=signature),
                required=not member.optional,
                doc=list(member.doc),
            )
        if isinstance(member, PropertySignature):
            type_tags = self.resolver.resolve(member.type)
            has_undefined = UNDEFINED in runtime_names(type_tags)
            return PropertyMeta(
                name=member.name,
                type_tags=type_tags,
                required=not member.optional and not has_undefined,
                doc=list(member.doc),
            )
        return None

    def _extract_reference(self, node: TypeReference, visited: Set[str]) -> Optional[List[PropertyMeta]]:
        symbol = self.service.symbol_at(node)
        if symbol is None:
            self._unresolvable(node, "does not resolve to a symbol")
            return None
        declaration = self.service.first_declaration(symbol)
        if declaration is None:
            self._unresolvable(node, "does not resolve to a declaration")
            return None

        if isinstance(declaration, ImportSpecifier):
            target = self.service.aliased_symbol(symbol)
            if target is None:
                self._unresolvable(node, f"import from '{declaration.source}' does not resolve")
                return None
            symbol = target
            declaration = self.service.first_declaration(target)

        if symbol.key in visited:
            self._unresolvable(node, "refers to itself")
            return None

        if isinstance(declaration, TypeAliasDeclaration):
            next_nodes: List[Optional[Extractable]] = [declaration.type]
        elif isinstance(declaration, InterfaceDeclaration):
            # merged declarations contribute members in source order
            next_nodes = [d for d in self.service.declarations(symbol) if isinstance(d, InterfaceDeclaration)]
        else:
            self._unresolvable(node, "resolves to an unsupported kind of declaration")
            return None

        visited.add(symbol.key)
        try:
            extracted = [self.extract(next_node, visited) for next_node in next_nodes]
        finally:
            visited.discard(symbol.key)
        if all(props is None for props in extracted):
            return None
        return [prop for props in extracted if props for prop in props]

    def _unresolvable(self, node: TypeReference, reason: str) -> None:
        self.diagnostics.warn(UNRESOLVABLE_TYPE, f"type reference '{node.name}' {reason}", node.line)
