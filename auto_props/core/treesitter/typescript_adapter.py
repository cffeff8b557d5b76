"""
Tree-sitter adapter for TypeScript/TSX source.

Lowers tree-sitter type syntax into the ``type_nodes`` model and collects
the top-level declarations of a module for the symbol table.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, List, Optional

from tree_sitter import Node

from ..type_nodes import (
    ArrayType,
    Declaration,
    FunctionType,
    ImportSpecifier,
    InterfaceDeclaration,
    IntersectionType,
    LiteralType,
    Member,
    MethodSignature,
    OtherDeclaration,
    ParenthesizedType,
    PredefinedType,
    PropertySignature,
    StructuralType,
    TypeAliasDeclaration,
    TypeNode,
    TypeReference,
    UnionType,
    UnsupportedType,
)

if TYPE_CHECKING:
    from ..program import SourceModule

# keyword -> normalized keyword
_PREDEFINED_KEYWORDS = {
    "string": "string",
    "number": "number",
    "boolean": "boolean",
    "object": "object",
    "any": "any",
    "unknown": "any",
    "undefined": "undefined",
    "void": "undefined",
}

_ANNOTATION_NODES = {"type_annotation", "opting_type_annotation", "omitting_type_annotation"}

_WHITESPACE = re.compile(r"\s+")


def lower_type(node: Optional[Node], scope: Optional["SourceModule"] = None) -> Optional[TypeNode]:
    if node is None:
        return None
    kind = node.type
    if kind in _ANNOTATION_NODES:
        inner = named_children(node)
        return lower_type(inner[0], scope) if inner else None

    text = collapse_whitespace(node_text(node))
    line = line_of(node)

    if kind == "predefined_type":
        keyword = _PREDEFINED_KEYWORDS.get(text)
        if keyword:
            return PredefinedType(text=text, line=line, keyword=keyword)
        return UnsupportedType(text=text, line=line, kind=text)
    if kind == "literal_type":
        literal = named_children(node)
        if literal and literal[0].type == "undefined":
            return PredefinedType(text=text, line=line, keyword="undefined")
        return LiteralType(text=text, line=line, value=text)
    if kind in {"type_identifier", "nested_type_identifier"}:
        if text == "undefined":
            return PredefinedType(text=text, line=line, keyword="undefined")
        return TypeReference(text=text, line=line, name=text, scope=scope)
    if kind == "generic_type":
        name_node = node.child_by_field_name("name")
        args_node = node.child_by_field_name("type_arguments")
        arguments = [lower_type(arg, scope) for arg in named_children(args_node)] if args_node else []
        return TypeReference(
            text=text,
            line=line,
            name=node_text(name_node),
            type_arguments=[arg for arg in arguments if arg is not None],
            scope=scope,
        )
    if kind == "array_type":
        element = named_children(node)
        return ArrayType(text=text, line=line, element=lower_type(element[0], scope) if element else None)
    if kind == "readonly_type":
        inner = named_children(node)
        return lower_type(inner[0], scope) if inner else None
    if kind == "function_type":
        return FunctionType(text=text, line=line)
    if kind == "parenthesized_type":
        inner = named_children(node)
        return ParenthesizedType(text=text, line=line, inner=lower_type(inner[0], scope) if inner else None)
    if kind == "object_type":
        return StructuralType(text=text, line=line, members=lower_members(node, scope))
    if kind == "union_type":
        return UnionType(text=text, line=line, types=_flatten(node, kind, scope))
    if kind == "intersection_type":
        return IntersectionType(text=text, line=line, types=_flatten(node, kind, scope))
    return UnsupportedType(text=text, line=line, kind=kind)


def _flatten(node: Node, kind: str, scope: Optional["SourceModule"]) -> List[TypeNode]:
    types: List[TypeNode] = []
    for child in named_children(node):
        if child.type == kind:
            types.extend(_flatten(child, kind, scope))
            continue
        lowered = lower_type(child, scope)
        if lowered is not None:
            types.append(lowered)
    return types


def lower_members(body: Optional[Node], scope: Optional["SourceModule"] = None) -> List[Member]:
    if body is None:
        return []
    members: List[Member] = []
    for child in body.named_children:
        if child.type == "property_signature":
            members.append(
                PropertySignature(
                    name=property_name(child.child_by_field_name("name")),
                    type=lower_type(child.child_by_field_name("type"), scope),
                    optional=_has_token(child, "?"),
                    line=line_of(child),
                    doc=extract_jsdoc(child),
                )
            )
        elif child.type == "method_signature":
            return_node = child.child_by_field_name("return_type")
            returned = named_children(return_node) if return_node is not None else []
            members.append(
                MethodSignature(
                    name=property_name(child.child_by_field_name("name")),
                    parameters=collapse_whitespace(node_text(child.child_by_field_name("parameters"))) or "()",
                    return_type=collapse_whitespace(node_text(returned[0])) if returned else None,
                    optional=_has_token(child, "?"),
                    line=line_of(child),
                    doc=extract_jsdoc(child),
                )
            )
    return members


def property_name(node: Optional[Node]) -> Optional[str]:
    """Name of a member or object key; ``None`` for computed or missing names."""
    if node is None:
        return None
    if node.type in {"property_identifier", "identifier", "private_property_identifier",
                     "shorthand_property_identifier", "type_identifier", "number"}:
        return node_text(node) or None
    if node.type == "string":
        return strip_quotes(node_text(node)) or None
    return None


def extract_declarations(root: Node, module: Optional["SourceModule"] = None) -> List[Declaration]:
    declarations: List[Declaration] = []
    for child in root.named_children:
        if child.type == "import_statement":
            declarations.extend(_import_specifiers(child, module))
        elif child.type == "export_statement":
            declaration = child.child_by_field_name("declaration")
            is_default = _has_token(child, "default")
            if declaration is not None:
                exported = _declarations_of(declaration, module)
                declarations.extend(exported)
                if is_default and exported and exported[0].name:
                    declarations.append(_local_alias("default", exported[0].name, child, module))
            elif is_default:
                value = child.child_by_field_name("value")
                if value is not None and value.type == "identifier":
                    declarations.append(_local_alias("default", node_text(value), child, module))
            else:
                declarations.extend(_reexport_specifiers(child, module))
        else:
            declarations.extend(_declarations_of(child, module))
    return declarations


def _declarations_of(node: Node, module: Optional["SourceModule"]) -> List[Declaration]:
    kind = node.type
    name = node_text(node.child_by_field_name("name"))
    line = line_of(node)
    if kind == "type_alias_declaration":
        return [TypeAliasDeclaration(
            name=name,
            line=line,
            module=module,
            type=lower_type(node.child_by_field_name("value"), module),
        )]
    if kind == "interface_declaration":
        extends: List[TypeNode] = []
        for clause in node.named_children:
            if clause.type == "extends_type_clause":
                extends.extend(t for t in (lower_type(c, module) for c in named_children(clause)) if t is not None)
        return [InterfaceDeclaration(
            name=name,
            line=line,
            module=module,
            members=lower_members(node.child_by_field_name("body"), module),
            extends=extends,
        )]
    if kind in {"class_declaration", "abstract_class_declaration"}:
        return [OtherDeclaration(name=name, line=line, module=module, kind="class")]
    if kind == "enum_declaration":
        return [OtherDeclaration(name=name, line=line, module=module, kind="enum")]
    if kind in {"function_declaration", "generator_function_declaration", "function_signature"}:
        return [OtherDeclaration(name=name, line=line, module=module, kind="function")]
    if kind in {"lexical_declaration", "variable_declaration"}:
        return [
            OtherDeclaration(name=node_text(declarator.child_by_field_name("name")), line=line_of(declarator),
                             module=module, kind="variable")
            for declarator in node.named_children
            if declarator.type == "variable_declarator"
            and getattr(declarator.child_by_field_name("name"), "type", None) == "identifier"
        ]
    if kind == "ambient_declaration":
        declarations: List[Declaration] = []
        for inner in node.named_children:
            declarations.extend(_declarations_of(inner, module))
        return declarations
    return []


def _import_specifiers(node: Node, module: Optional["SourceModule"]) -> List[Declaration]:
    source_node = node.child_by_field_name("source")
    source = strip_quotes(node_text(source_node)) if source_node else ""
    specifiers: List[Declaration] = []
    for clause in node.named_children:
        if clause.type != "import_clause":
            continue
        for item in clause.named_children:
            if item.type == "identifier":
                specifiers.append(ImportSpecifier(
                    name=node_text(item), line=line_of(item), module=module,
                    imported_name="default", source=source,
                ))
            elif item.type == "named_imports":
                for spec in item.named_children:
                    if spec.type == "import_specifier":
                        specifiers.append(_specifier(spec, source, module))
    return specifiers


def _reexport_specifiers(node: Node, module: Optional["SourceModule"]) -> List[Declaration]:
    source_node = node.child_by_field_name("source")
    if source_node is None:
        return []
    source = strip_quotes(node_text(source_node))
    specifiers: List[Declaration] = []
    for clause in node.named_children:
        if clause.type == "export_clause":
            for spec in clause.named_children:
                if spec.type == "export_specifier":
                    specifiers.append(_specifier(spec, source, module))
    return specifiers


def _specifier(spec: Node, source: str, module: Optional["SourceModule"]) -> ImportSpecifier:
    imported = node_text(spec.child_by_field_name("name"))
    alias_node = spec.child_by_field_name("alias")
    local = node_text(alias_node) if alias_node is not None else imported
    return ImportSpecifier(name=local, line=line_of(spec), module=module, imported_name=imported, source=source)


def _local_alias(name: str, target: str, node: Node, module: Optional["SourceModule"]) -> ImportSpecifier:
    # an empty source points back at the declaring module
    return ImportSpecifier(name=name, line=line_of(node), module=module, imported_name=target, source="")


def extract_jsdoc(node: Node) -> List[str]:
    prev = node.prev_named_sibling
    if prev is None or prev.type != "comment":
        return []
    text = node_text(prev)
    if not text.startswith("/**"):
        return []
    lines = []
    for raw in text[3:-2].splitlines():
        stripped = raw.strip()
        if stripped.startswith("*"):
            stripped = stripped[1:]
            if stripped.startswith(" "):
                stripped = stripped[1:]
        lines.append(stripped.rstrip())
    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    return lines


def type_annotation_node(node: Optional[Node]) -> Optional[Node]:
    """Return the type inside a ``: T`` annotation node."""
    if node is None:
        return None
    if node.type in _ANNOTATION_NODES:
        inner = named_children(node)
        return inner[0] if inner else None
    return node


def named_children(node: Optional[Node]) -> List[Node]:
    if node is None:
        return []
    return [child for child in node.named_children if child.type != "comment"]


def _has_token(node: Node, token: str) -> bool:
    return any(child.type == token for child in node.children)


def line_of(node: Optional[Node]) -> int:
    return node.start_point[0] + 1 if node is not None else 0


def node_text(node: Optional[Node]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")


def strip_quotes(text: str) -> str:
    if len(text) >= 2 and text[0] in "\"'`" and text[-1] == text[0]:
        return text[1:-1]
    return text


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()
