"""
Runtime type tag vocabulary.

A resolved annotation is a ``TypeTag``, a list of tags (nested combinators),
a ``DocumentedTags`` wrapper (a property's own annotation: runtime tag set
plus a documentation-only generic parameter) or ``None`` when unresolved.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

STRING = "String"
NUMBER = "Number"
BOOLEAN = "Boolean"
OBJECT = "Object"
ARRAY = "Array"
FUNCTION = "Function"
ANY = "Any"
UNDEFINED = "Undefined"

# tag kinds
BASIC = "basic"
ARRAY_KIND = "array"
FUNCTION_KIND = "function"
LITERAL = "literal"
STRUCTURAL = "structural"
OPAQUE = "opaque"
GLOBAL = "global"  # ambient runtime constructor, e.g. Date
UNBOUND = "unbound"  # name with no symbol, e.g. a type parameter

# ambient globals that are themselves runtime tags
BASIC_GLOBALS = frozenset({STRING, NUMBER, BOOLEAN, OBJECT, FUNCTION})
CONSTRUCTOR_GLOBALS = frozenset({
    "Date",
    "RegExp",
    "Error",
    "Promise",
    "Map",
    "Set",
    "WeakMap",
    "WeakSet",
    "Symbol",
})

KEYWORD_TAGS = {
    "string": STRING,
    "number": NUMBER,
    "boolean": BOOLEAN,
    "object": OBJECT,
    "any": ANY,
    "undefined": UNDEFINED,
}


@dataclass(frozen=True)
class TypeTag:
    name: str
    kind: str = BASIC
    inner: "TagResolution" = None
    text: Optional[str] = None

    @property
    def runtime_name(self) -> Optional[str]:
        """Constructor this tag contributes to a runtime declaration."""
        if self.kind in (BASIC, GLOBAL):
            return self.name
        if self.kind == UNBOUND:
            return ANY
        if self.kind == ARRAY_KIND:
            return ARRAY
        if self.kind == FUNCTION_KIND:
            return FUNCTION
        if self.kind in (STRUCTURAL, OPAQUE):
            return OBJECT
        if self.kind == LITERAL:
            return _literal_runtime_name(self.name)
        return None


@dataclass(frozen=True)
class DocumentedTags:
    tags: Tuple[TypeTag, ...]
    annotation: str
    resolved: "TagResolution" = None


TagResolution = Union[TypeTag, List[TypeTag], DocumentedTags, None]


def basic(name: str) -> TypeTag:
    return TypeTag(name=name)


def iter_tags(resolution: TagResolution) -> List[TypeTag]:
    if resolution is None:
        return []
    if isinstance(resolution, TypeTag):
        return [resolution]
    if isinstance(resolution, DocumentedTags):
        return list(resolution.tags)
    tags: List[TypeTag] = []
    for item in resolution:
        tags.extend(iter_tags(item))
    return tags


def runtime_names(resolution: TagResolution) -> List[str]:
    """Deduplicated runtime tag names, in first-seen order."""
    names: List[str] = []
    for tag in iter_tags(resolution):
        name = tag.runtime_name
        if name and name not in names:
            names.append(name)
    return names


def basic_tags(resolution: TagResolution) -> Tuple[TypeTag, ...]:
    return tuple(basic(name) for name in runtime_names(resolution))


def describe(resolution: TagResolution) -> str:
    """Documentation form of a resolution, e.g. ``Array<String | Number>``."""
    if resolution is None:
        return "any"
    if isinstance(resolution, DocumentedTags):
        return resolution.annotation
    if isinstance(resolution, TypeTag):
        if resolution.kind == ARRAY_KIND:
            return f"Array<{describe(resolution.inner)}>" if resolution.inner is not None else ARRAY
        if resolution.kind in (FUNCTION_KIND, STRUCTURAL) and resolution.text:
            return resolution.text
        return resolution.name
    parts = []
    for item in resolution:
        text = describe(item)
        if isinstance(item, TypeTag) and item.kind == FUNCTION_KIND:
            text = f"({text})"
        if text not in parts:
            parts.append(text)
    return " | ".join(parts)


def annotation_of(resolution: TagResolution) -> Optional[str]:
    """Documentation-only generic parameter to render next to the runtime type."""
    if isinstance(resolution, DocumentedTags):
        return resolution.annotation
    if isinstance(resolution, TypeTag) and resolution.kind != BASIC:
        return describe(resolution)
    if isinstance(resolution, list) and any(tag.kind != BASIC for tag in iter_tags(resolution)):
        return describe(resolution)
    return None


def _literal_runtime_name(text: str) -> Optional[str]:
    if text[:1] in ("'", '"', "`"):
        return STRING
    if text in ("true", "false"):
        return BOOLEAN
    if text == "null":
        return None
    return NUMBER
