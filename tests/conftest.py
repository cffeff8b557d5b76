"""
Pytest configuration and fixtures for auto_props.
"""

import shutil
import tempfile
from pathlib import Path
from typing import List, Union

import pytest

from auto_props.core.models import Diagnostics, ResolvedModule
from auto_props.core.program import SourceProgram
from auto_props.core.property_extractor import PropertyExtractor
from auto_props.core.transform import AutoPropsTransform
from auto_props.core.type_resolver import TypeTagResolver


def virtual_path(index: int) -> str:
    return f"/virtual/module_{index}.ts"


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path)


@pytest.fixture
def program():
    """An in-memory program that never touches the file system."""
    return SourceProgram(load_from_disk=False)


@pytest.fixture
def resolve(program):
    """
    Register one or more modules as /virtual/module_<i>.ts and resolve the first.

    Mirrors a build where every module is visible to the type service but only
    the module being transformed is scanned for components.
    """
    def _resolve(sources: Union[str, List[str]], index: int = 0) -> ResolvedModule:
        sources = [sources] if isinstance(sources, str) else sources
        modules = [program.add_source(virtual_path(i), code) for i, code in enumerate(sources)]
        return AutoPropsTransform(program).resolve_module(modules[index])

    return _resolve


@pytest.fixture
def diagnostics():
    return Diagnostics(path=virtual_path(0))


@pytest.fixture
def resolver(program, diagnostics):
    return TypeTagResolver(program, diagnostics)


@pytest.fixture
def extractor(program, resolver, diagnostics):
    return PropertyExtractor(program, resolver, diagnostics)


@pytest.fixture
def alias_type(program):
    """Lower ``type Subject = <expr>`` (plus optional extra declarations) and return the expression."""
    def _alias_type(expression: str, prelude: str = ""):
        module = program.add_source(virtual_path(0), f"{prelude}\ntype Subject = {expression}\n")
        return module.symbols["Subject"].declarations[0].type

    return _alias_type
