"""
Core engine: type tag resolution, property extraction, component matching and rendering.
"""

from .models import ComponentMeta, Diagnostic, PropertyMeta, ResolvedModule
from .program import SourceModule, SourceProgram, TypeInformationService
from .renderer import render_components
from .transform import AutoPropsTransform, TransformResult, should_transform, transform_source

__all__ = [
    "AutoPropsTransform",
    "ComponentMeta",
    "Diagnostic",
    "PropertyMeta",
    "ResolvedModule",
    "SourceModule",
    "SourceProgram",
    "TransformResult",
    "TypeInformationService",
    "render_components",
    "should_transform",
    "transform_source",
]
