"""
Core data models for resolved component metadata.

This module contains pure data structures for components, their properties
and the diagnostics collected while resolving one module.
"""

from typing import Any, Dict, Iterator, List, Optional
from dataclasses import dataclass, field

from .type_tags import TagResolution, annotation_of, runtime_names

UNRESOLVABLE_TYPE = "unresolvable-type"
UNSUPPORTED_PATTERN = "unsupported-pattern"


@dataclass
class PropertyMeta:
    """One declared property, event or slot."""
    name: str
    type_tags: TagResolution = None
    required: bool = True
    default: Optional[str] = None  # JavaScript expression, emitted verbatim
    doc: List[str] = field(default_factory=list)

    def __post_init__(self):
        if not self.name:
            raise ValueError("PropertyMeta.name must not be empty")


@dataclass
class ComponentMeta:
    """Everything resolved about a single component declaration."""
    props: List[PropertyMeta] = field(default_factory=list)
    events: List[PropertyMeta] = field(default_factory=list)
    slots: List[PropertyMeta] = field(default_factory=list)


ComponentMetaMap = Dict[str, ComponentMeta]


@dataclass
class Diagnostic:
    category: str
    message: str
    path: Optional[str] = None
    line: Optional[int] = None

    def __str__(self) -> str:
        location = self.path or "<module>"
        if self.line:
            location = f"{location}:{self.line}"
        return f"{location}: {self.message} [{self.category}]"


class Diagnostics:
    """Per-pass sink for recoverable problems; the caller decides what to show."""

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self.items: List[Diagnostic] = []

    def warn(self, category: str, message: str, line: Optional[int] = None) -> None:
        self.items.append(Diagnostic(category=category, message=message, path=self.path, line=line))

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass
class ResolvedModule:
    components: ComponentMetaMap = field(default_factory=dict)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        def _prop(prop: PropertyMeta) -> Dict[str, Any]:
            return {
                "name": prop.name,
                "type": runtime_names(prop.type_tags),
                "annotation": annotation_of(prop.type_tags),
                "required": prop.required,
                "doc": prop.doc,
            }

        return {
            "components": {
                name: {
                    "props": [_prop(p) for p in meta.props],
                    "events": [_prop(p) for p in meta.events],
                    "slots": [_prop(p) for p in meta.slots],
                }
                for name, meta in self.components.items()
            },
            "diagnostics": [str(d) for d in self.diagnostics],
        }
