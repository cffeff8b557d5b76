"""
Recognize component declarations among a module's top-level statements.

Four declaration shapes are understood:

A. ``const C = defineComponent<Props, Events, Slots>(...)``
B. ``const C = defineComponent((props: Props, ctx: SetupContext<Events, Slots>) => ...)``
C. ``const C = defineComponent({ setup(props: Props, ctx: SetupContext<Events, Slots>) {} })``
D. ``const C: FunctionalComponent<Props, Events, Slots> = (props, ctx) => ...``

Explicit generic arguments always win over callback parameter annotations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Iterator, List, Optional, Sequence, Tuple

from tree_sitter import Node

from .models import UNSUPPORTED_PATTERN, ComponentMeta, ComponentMetaMap, Diagnostics, PropertyMeta
from .property_extractor import PropertyExtractor
from .treesitter.typescript_adapter import (
    line_of,
    lower_type,
    named_children,
    node_text,
    property_name,
    strip_quotes,
    type_annotation_node,
)
from .type_nodes import TypeNode, TypeReference

if TYPE_CHECKING:
    from .program import SourceModule

CALLBACK_NODES = {"arrow_function", "function_expression", "function"}
PARAMETER_NODES = {"required_parameter", "optional_parameter"}
DECLARATION_NODES = {"lexical_declaration", "variable_declaration"}


@dataclass
class ComponentTypeSources:
    """Raw type annotations found for one component, before extraction."""
    props: Optional[TypeNode] = None
    events: Optional[TypeNode] = None
    slots: Optional[TypeNode] = None
    excluded_props: List[str] = field(default_factory=list)
    excluded_events: List[str] = field(default_factory=list)

    def fill(self, candidates: Sequence[Optional[TypeNode]]) -> None:
        """Take each of props/events/slots from candidates unless already set."""
        padded = list(candidates) + [None] * (3 - len(candidates))
        if self.props is None:
            self.props = padded[0]
        if self.events is None:
            self.events = padded[1]
        if self.slots is None:
            self.slots = padded[2]


class ComponentShapeMatcher:
    def __init__(
        self,
        extractor: PropertyExtractor,
        diagnostics: Diagnostics,
        module: Optional["SourceModule"] = None,
        factory_names: Iterable[str] = ("defineComponent",),
        functional_type_names: Iterable[str] = ("FunctionalComponent",),
    ):
        self.extractor = extractor
        self.diagnostics = diagnostics
        self.module = module
        self.factory_names = set(factory_names)
        self.functional_type_names = set(functional_type_names)

    def match_statements(self, statements: Optional[Sequence[Node]]) -> ComponentMetaMap:
        if statements is None:
            raise TypeError("statements must be a sequence of top-level statement nodes, not None")
        components: ComponentMetaMap = {}
        for statement in statements:
            for name, declarator in _variable_declarators(statement):
                sources = self.match_declarator(declarator)
                if sources is None:
                    continue
                meta = self.build_component(sources)
                if meta is not None:
                    components[name] = meta
        return components

    def match_declarator(self, declarator: Node) -> Optional[ComponentTypeSources]:
        value = _unwrap_parentheses(declarator.child_by_field_name("value"))
        if value is None:
            return None
        if value.type == "call_expression" and self._is_factory_call(value):
            return self._match_factory_call(value)
        if value.type in CALLBACK_NODES:
            annotation = type_annotation_node(declarator.child_by_field_name("type"))
            return self._match_functional(annotation, value)
        return None

    def build_component(self, sources: ComponentTypeSources) -> Optional[ComponentMeta]:
        if sources.props is None:
            return None
        props = _without(self.extractor.extract(sources.props) or [], sources.excluded_props)
        events = _without(self.extractor.extract(sources.events) or [], sources.excluded_events)
        slots = self.extractor.extract(sources.slots) or []
        return ComponentMeta(props=props, events=events, slots=slots)

    def _is_factory_call(self, call: Node) -> bool:
        callee = call.child_by_field_name("function")
        return callee is not None and callee.type == "identifier" and node_text(callee) in self.factory_names

    def _match_factory_call(self, call: Node) -> ComponentTypeSources:
        sources = ComponentTypeSources()
        sources.fill(self._lower_all(named_children(call.child_by_field_name("type_arguments"))))

        arguments = named_children(call.child_by_field_name("arguments"))
        first = _unwrap_parentheses(arguments[0]) if arguments else None
        if first is None:
            return sources
        if first.type in CALLBACK_NODES:
            self._fill_from_callback(sources, first)
            if len(arguments) > 1 and arguments[1].type == "object":
                self._collect_exclusions(sources, arguments[1])
        elif first.type == "object":
            self._fill_from_descriptor(sources, first)
        return sources

    def _match_functional(self, annotation: Optional[Node], callback: Node) -> Optional[ComponentTypeSources]:
        lowered = self._lower(annotation)
        if not isinstance(lowered, TypeReference):
            return None
        if lowered.name.split(".")[-1] not in self.functional_type_names:
            return None
        sources = ComponentTypeSources()
        sources.fill(lowered.type_arguments)
        self._fill_from_callback(sources, callback)
        return sources

    def _fill_from_descriptor(self, sources: ComponentTypeSources, descriptor: Node) -> None:
        for entry in named_children(descriptor):
            if entry.type == "method_definition" and property_name(entry.child_by_field_name("name")) == "setup":
                self._fill_from_callback(sources, entry)
            elif entry.type == "pair" and property_name(entry.child_by_field_name("key")) == "setup":
                value = _unwrap_parentheses(entry.child_by_field_name("value"))
                if value is not None and value.type in CALLBACK_NODES:
                    self._fill_from_callback(sources, value)
        self._collect_exclusions(sources, descriptor)

    def _fill_from_callback(self, sources: ComponentTypeSources, callback: Node) -> None:
        parameters = [p for p in named_children(callback.child_by_field_name("parameters")) if p.type in PARAMETER_NODES]
        props_type = self._lower(_parameter_type(parameters[0])) if parameters else None
        context_args: List[TypeNode] = []
        if len(parameters) > 1:
            context = self._lower(_parameter_type(parameters[1]))
            if isinstance(context, TypeReference):
                context_args = context.type_arguments
        sources.fill([props_type] + context_args[:2])

    def _collect_exclusions(self, sources: ComponentTypeSources, descriptor: Node) -> None:
        for entry in named_children(descriptor):
            if entry.type != "pair":
                continue
            key = property_name(entry.child_by_field_name("key"))
            if key == "props":
                sources.excluded_props.extend(self._manual_names(entry.child_by_field_name("value")))
            elif key in ("events", "emits"):
                sources.excluded_events.extend(self._manual_names(entry.child_by_field_name("value")))

    def _manual_names(self, value: Optional[Node]) -> List[str]:
        value = _unwrap_parentheses(value)
        names: List[str] = []
        if value is None:
            return names
        if value.type == "object":
            for entry in named_children(value):
                if entry.type == "pair":
                    name = property_name(entry.child_by_field_name("key"))
                elif entry.type == "method_definition":
                    name = property_name(entry.child_by_field_name("name"))
                elif entry.type == "shorthand_property_identifier":
                    name = node_text(entry)
                else:
                    name = None
                if name:
                    names.append(name)
                else:
                    self._unsupported(entry, "manual declaration key cannot be read")
        elif value.type == "array":
            for element in named_children(value):
                if element.type == "string":
                    names.append(strip_quotes(node_text(element)))
                else:
                    self._unsupported(element, "manual declaration entry is not a string literal")
        else:
            self._unsupported(value, "manual declarations must be an object or array literal")
        return names

    def _lower(self, node: Optional[Node]) -> Optional[TypeNode]:
        return lower_type(node, self.module)

    def _lower_all(self, nodes: List[Node]) -> List[Optional[TypeNode]]:
        return [self._lower(node) for node in nodes]

    def _unsupported(self, node: Node, message: str) -> None:
        self.diagnostics.warn(UNSUPPORTED_PATTERN, f"{message}: '{node_text(node)}'", line_of(node))


def _variable_declarators(statement: Node) -> Iterator[Tuple[str, Node]]:
    if statement.type == "export_statement":
        statement = statement.child_by_field_name("declaration")
        if statement is None:
            return
    if statement.type not in DECLARATION_NODES:
        return
    for declarator in statement.named_children:
        if declarator.type != "variable_declarator":
            continue
        name_node = declarator.child_by_field_name("name")
        if name_node is not None and name_node.type == "identifier":
            yield node_text(name_node), declarator


def _parameter_type(parameter: Node) -> Optional[Node]:
    return type_annotation_node(parameter.child_by_field_name("type"))


def _unwrap_parentheses(node: Optional[Node]) -> Optional[Node]:
    while node is not None and node.type == "parenthesized_expression":
        inner = named_children(node)
        node = inner[0] if inner else None
    return node


def _without(props: List[PropertyMeta], excluded: List[str]) -> List[PropertyMeta]:
    if not excluded:
        return props
    return [prop for prop in props if prop.name not in excluded]
