"""
Per-module transform: resolve component metadata and append the runtime patch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from tree_sitter import Node

from .component_matcher import ComponentShapeMatcher
from .config import AutoPropsConfig
from .models import ComponentMetaMap, Diagnostic, Diagnostics, ResolvedModule
from .program import SourceModule, SourceProgram, TypeInformationService
from .property_extractor import PropertyExtractor
from .renderer import render_components
from .type_resolver import TypeTagResolver


class AutoPropsTransform:
    """
    Find components in a module and resolve their props, events and slots.

    The type information service is injected; each call to
    ``resolve_components`` is an independent pass with its own diagnostics.
    """

    def __init__(
        self,
        service: TypeInformationService,
        factory_names: Iterable[str] = ("defineComponent",),
        functional_type_names: Iterable[str] = ("FunctionalComponent",),
    ):
        self.service = service
        self.factory_names = tuple(factory_names)
        self.functional_type_names = tuple(functional_type_names)

    def resolve_components(self, statements: Optional[Sequence[Node]],
                           module: Optional[SourceModule] = None) -> ResolvedModule:
        if module is None and statements:
            # type references resolve in the scope of the module being scanned
            module = self.service.module_of(statements[0])
            if module is None:
                logging.debug("Statements do not belong to a registered module; references will not resolve")
        diagnostics = Diagnostics(path=module.path if module is not None else None)
        resolver = TypeTagResolver(self.service, diagnostics)
        extractor = PropertyExtractor(self.service, resolver, diagnostics)
        matcher = ComponentShapeMatcher(
            extractor,
            diagnostics,
            module=module,
            factory_names=self.factory_names,
            functional_type_names=self.functional_type_names,
        )
        components = matcher.match_statements(statements)
        return ResolvedModule(components=components, diagnostics=list(diagnostics))

    def resolve_module(self, module: SourceModule) -> ResolvedModule:
        return self.resolve_components(module.statements, module)


@dataclass
class TransformResult:
    code: str
    components: ComponentMetaMap = field(default_factory=dict)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.components)


def should_transform(path: str, config: Optional[AutoPropsConfig] = None) -> bool:
    config = config or AutoPropsConfig()
    if path.endswith(".d.ts"):
        return False
    return any(path.endswith(extension) for extension in config.include_extensions)


def transform_source(program: SourceProgram, path: str, source: str,
                     config: Optional[AutoPropsConfig] = None) -> TransformResult:
    config = config or AutoPropsConfig()
    module = program.add_source(path, source)
    transform = AutoPropsTransform(
        program,
        factory_names=config.factory_names,
        functional_type_names=config.functional_type_names,
    )
    resolved = transform.resolve_module(module)

    if not config.hide_warnings:
        for diagnostic in resolved.diagnostics:
            logging.warning(str(diagnostic))

    if not resolved.components:
        return TransformResult(code=source, diagnostics=resolved.diagnostics)

    logging.info(f"{path}: generated runtime declarations for {', '.join(resolved.components)}")
    patch = render_components(resolved.components, include_docs=config.include_docs)
    return TransformResult(code=source + patch, components=resolved.components, diagnostics=resolved.diagnostics)
