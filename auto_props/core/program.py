"""
Type information service backed by tree-sitter parsed modules.

The resolution engine only talks to the ``TypeInformationService`` protocol.
``SourceProgram`` is the bundled implementation: a set of parsed modules with
per-module symbol tables and cross-module import resolution.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union

from tree_sitter import Node, Tree

from .treesitter import language_for_path, parse_source
from .treesitter.typescript_adapter import collapse_whitespace, extract_declarations
from .type_nodes import Declaration, ImportSpecifier, MethodSignature, TypeNode, TypeReference

# Ambient global types that are always in scope.
BUILTIN_GLOBAL_TYPES = frozenset({
    "Array",
    "ReadonlyArray",
    "Date",
    "RegExp",
    "Error",
    "Promise",
    "Record",
    "Partial",
    "Required",
    "Readonly",
    "Pick",
    "Omit",
    "Map",
    "Set",
    "WeakMap",
    "WeakSet",
    "Function",
    "Object",
    "String",
    "Number",
    "Boolean",
    "Symbol",
})

_MODULE_SUFFIXES = ("", ".ts", ".tsx", ".d.ts", "/index.ts", "/index.tsx")


@dataclass
class Symbol:
    name: str
    module: Optional["SourceModule"] = field(default=None, repr=False, compare=False)
    declarations: List[Declaration] = field(default_factory=list)

    @property
    def is_builtin(self) -> bool:
        return self.module is None

    @property
    def key(self) -> str:
        origin = self.module.path if self.module is not None else "<global>"
        return f"{origin}::{self.name}"


@dataclass(eq=False)
class SourceModule:
    path: str
    source: str
    tree: Tree = field(repr=False)
    language_id: str = "typescript"
    symbols: Dict[str, Symbol] = field(default_factory=dict, repr=False)

    @property
    def statements(self) -> List[Node]:
        return list(self.tree.root_node.named_children)

    def index_declarations(self) -> None:
        self.symbols = {}
        for declaration in extract_declarations(self.tree.root_node, self):
            if not declaration.name:
                continue
            symbol = self.symbols.setdefault(declaration.name, Symbol(name=declaration.name, module=self))
            symbol.declarations.append(declaration)


class TypeInformationService(Protocol):
    """Symbol and declaration queries the resolution engine depends on."""

    def symbol_at(self, reference: TypeReference) -> Optional[Symbol]:
        ...

    def first_declaration(self, symbol: Symbol) -> Optional[Declaration]:
        ...

    def declarations(self, symbol: Symbol) -> List[Declaration]:
        ...

    def aliased_symbol(self, symbol: Symbol) -> Optional[Symbol]:
        ...

    def type_to_string(self, node: Union[TypeNode, MethodSignature]) -> str:
        ...

    def module_of(self, node: Node) -> Optional["SourceModule"]:
        ...


class SourceProgram:
    """A collection of parsed TypeScript modules that answers symbol queries."""

    def __init__(self, load_from_disk: bool = True):
        self.modules: Dict[str, SourceModule] = {}
        self.load_from_disk = load_from_disk

    def add_source(self, path: str, source: str) -> SourceModule:
        key = _normalize_path(path)
        language_id = language_for_path(key)
        module = SourceModule(path=key, source=source, tree=parse_source(source, language_id), language_id=language_id)
        module.index_declarations()
        self.modules[key] = module
        logging.debug(f"Indexed {key}: {len(module.symbols)} top-level symbols")
        return module

    def load_file(self, path: Union[str, Path]) -> SourceModule:
        file_path = Path(path)
        if not file_path.is_file():
            raise FileNotFoundError(f"No such module: {file_path}")
        return self.add_source(str(file_path.resolve()), file_path.read_text(encoding="utf-8"))

    def get_module(self, path: str) -> Optional[SourceModule]:
        return self.modules.get(_normalize_path(path))

    def symbol_at(self, reference: TypeReference) -> Optional[Symbol]:
        name = reference.name
        if not name or "." in name:
            return None
        module = reference.scope
        if module is not None and name in module.symbols:
            return module.symbols[name]
        if name in BUILTIN_GLOBAL_TYPES:
            return Symbol(name=name)
        return None

    def first_declaration(self, symbol: Symbol) -> Optional[Declaration]:
        return symbol.declarations[0] if symbol.declarations else None

    def declarations(self, symbol: Symbol) -> List[Declaration]:
        return list(symbol.declarations)

    def aliased_symbol(self, symbol: Symbol) -> Optional[Symbol]:
        seen = set()
        current = symbol
        while True:
            declaration = self.first_declaration(current)
            if not isinstance(declaration, ImportSpecifier):
                return current if current is not symbol else None
            if current.key in seen:
                logging.debug(f"Import cycle while resolving {symbol.name}")
                return None
            seen.add(current.key)
            target = self._resolve_module(declaration)
            if target is None:
                return None
            resolved = target.symbols.get(declaration.imported_name)
            if resolved is None:
                logging.debug(f"{target.path} does not declare {declaration.imported_name}")
                return None
            current = resolved

    def type_to_string(self, node: Union[TypeNode, MethodSignature]) -> str:
        if isinstance(node, MethodSignature):
            return f"{node.parameters} => {node.return_type or 'any'}"
        return collapse_whitespace(node.text)

    def module_of(self, node: Node) -> Optional[SourceModule]:
        """The registered module whose syntax tree contains ``node``."""
        root = node
        while root.parent is not None:
            root = root.parent
        for module in self.modules.values():
            if module.tree.root_node == root:
                return module
        return None

    def _resolve_module(self, specifier: ImportSpecifier) -> Optional[SourceModule]:
        source = specifier.source
        if not source:
            # local alias such as `export default Props`
            return specifier.module
        if not source.startswith((".", "/")):
            return None
        base = specifier.module.path if specifier.module is not None else ""
        if source.startswith("/"):
            target = posixpath.normpath(source)
        else:
            target = posixpath.normpath(posixpath.join(posixpath.dirname(base), source))
        for suffix in _MODULE_SUFFIXES:
            candidate = target + suffix
            if candidate in self.modules:
                return self.modules[candidate]
        if not self.load_from_disk:
            return None
        for suffix in _MODULE_SUFFIXES:
            candidate = Path(target + suffix)
            if candidate.is_file():
                logging.debug(f"Loading imported module {candidate}")
                return self.add_source(str(candidate), candidate.read_text(encoding="utf-8"))
        return None


def _normalize_path(path: str) -> str:
    return posixpath.normpath(str(path).replace("\\", "/"))
