"""
Tree-sitter integration for auto_props.

Provides language loading, parsing and lowering of TypeScript syntax into
the type-expression model used by the resolution engine.
"""

from .parser import parse_source, get_parser, language_for_path
from .languages import get_ts_language, get_tsx_language

__all__ = [
    "parse_source",
    "get_parser",
    "language_for_path",
    "get_ts_language",
    "get_tsx_language",
]
