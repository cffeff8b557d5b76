"""
Render resolved component metadata as a JavaScript patch.

The patch installs Vue-style runtime declarations on each component object:
a ``props`` record of ``{ type, required }`` descriptors keyed by name and an
``emits`` array of event names.
"""

import json
from typing import List, Optional

from .models import ComponentMetaMap, PropertyMeta
from .type_tags import ANY, UNDEFINED, annotation_of, runtime_names

AS_COMMENT = "as-comment"
AS_META_DATA = "as-meta-data"
DOC_MODES = (AS_COMMENT, AS_META_DATA)

INDENT = "  "

_GUARD = """
if ({component}.props === undefined) {{
  {component}.props = {{}};
}}
if ({component}.emits === undefined) {{
  {component}.emits = [];
}}
"""


def render_components(components: ComponentMetaMap, include_docs: Optional[str] = None) -> str:
    """Return the patch for every component, or an empty string if there are none."""
    if include_docs is not None and include_docs not in DOC_MODES:
        raise ValueError(f"include_docs must be one of {DOC_MODES} or None, got {include_docs!r}")
    chunks: List[str] = []
    for name, meta in components.items():
        chunks.append(_GUARD.format(component=name))
        for prop in meta.props:
            chunks.append(render_prop(name, prop, include_docs))
        if meta.events:
            events = ", ".join(json.dumps(event.name) for event in meta.events)
            chunks.append(f"{name}.emits.push({events});\n")
    return "".join(chunks)


def render_prop(component: str, prop: PropertyMeta, include_docs: Optional[str] = None) -> str:
    lines: List[str] = []
    if include_docs == AS_COMMENT and prop.doc:
        lines.append("/**")
        lines.extend(f" * {_comment_safe(line)}".rstrip() for line in prop.doc)
        lines.append(" */")
    lines.append(f"{component}.props[{json.dumps(prop.name)}] = {{")
    lines.append(f"{INDENT}type: {render_type(prop)},")
    lines.append(f"{INDENT}required: {'true' if prop.required else 'false'},")
    if prop.default is not None:
        lines.append(f"{INDENT}default: {prop.default},")
    if include_docs == AS_META_DATA and prop.doc:
        lines.append(f"{INDENT}doc: {json.dumps(prop.doc)},")
    lines.append("};")
    return "\n".join(lines) + "\n"


def render_type(prop: PropertyMeta) -> str:
    """Runtime constructor(s) followed by the documentation-only generic parameter."""
    names = [name for name in runtime_names(prop.type_tags) if name != UNDEFINED]
    if not names or ANY in names:
        runtime = "null"
    elif len(names) == 1:
        runtime = names[0]
    else:
        runtime = f"[{', '.join(names)}]"
    annotation = annotation_of(prop.type_tags)
    if annotation and annotation != runtime:
        return f"{runtime} /* {_comment_safe(annotation)} */"
    return runtime


def _comment_safe(text: str) -> str:
    return text.replace("*/", "*\\/")
