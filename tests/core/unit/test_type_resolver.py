"""
Unit tests for TypeTagResolver.
"""

from auto_props.core.models import UNRESOLVABLE_TYPE
from auto_props.core.type_tags import (
    ARRAY_KIND,
    FUNCTION_KIND,
    GLOBAL,
    LITERAL,
    OPAQUE,
    STRUCTURAL,
    UNBOUND,
    DocumentedTags,
    TypeTag,
    basic,
    runtime_names,
)


class TestPrimitives:
    def test_keywords_map_to_fixed_tags(self, resolver, alias_type):
        cases = {
            "string": "String",
            "number": "Number",
            "boolean": "Boolean",
            "object": "Object",
            "any": "Any",
            "undefined": "Undefined",
        }
        for expression, expected in cases.items():
            assert resolver.resolve(alias_type(expression)) == basic(expected), expression

    def test_unsupported_syntax_is_unresolved(self, resolver, alias_type):
        assert resolver.resolve(alias_type("[string, number]")) is None
        assert resolver.resolve(None) is None

    def test_literal_keeps_text(self, resolver, alias_type):
        tag = resolver.resolve(alias_type("'compact'"))
        assert tag == TypeTag(name="'compact'", kind=LITERAL)
        assert tag.runtime_name == "String"


class TestArrays:
    def test_array_at_top_level_is_documented(self, resolver, alias_type):
        result = resolver.resolve(alias_type("string[]"))
        assert isinstance(result, DocumentedTags)
        assert result.tags == (basic("Array"),)
        assert result.annotation == "Array<String>"

    def test_nested_generic_arrays(self, resolver, alias_type):
        result = resolver.resolve(alias_type("Array<Array<string>>"))
        assert result.tags == (basic("Array"),)
        assert result.annotation == "Array<Array<String>>"
        assert result.resolved == TypeTag(
            name="Array",
            kind=ARRAY_KIND,
            inner=TypeTag(name="Array", kind=ARRAY_KIND, inner=basic("String")),
        )

    def test_nested_array_is_bare(self, resolver, alias_type):
        result = resolver.resolve(alias_type("number[]"), depth=2)
        assert result == TypeTag(name="Array", kind=ARRAY_KIND, inner=basic("Number"))

    def test_array_of_union(self, resolver, alias_type):
        result = resolver.resolve(alias_type("Array<string | number>"))
        assert result.annotation == "Array<String | Number>"


class TestFunctionsAndStructures:
    def test_function_type_preserves_signature(self, resolver, alias_type):
        result = resolver.resolve(alias_type("(event: string) => void"))
        assert result.tags == (basic("Function"),)
        assert result.annotation == "(event: string) => void"

    def test_nested_function_type(self, resolver, alias_type):
        result = resolver.resolve(alias_type("(event: string) => void"), depth=2)
        assert result.kind == FUNCTION_KIND
        assert result.text == "(event: string) => void"

    def test_parenthesized_type_is_transparent(self, resolver, alias_type):
        assert resolver.resolve(alias_type("(boolean)")) == basic("Boolean")

    def test_structural_literal_renders_as_object(self, resolver, alias_type):
        result = resolver.resolve(alias_type("{ title: string }"))
        assert result.tags == (basic("Object"),)
        assert result.annotation == "{ title: string }"
        assert result.resolved.kind == STRUCTURAL


class TestUnions:
    def test_duplicate_members_collapse(self, resolver, alias_type):
        result = resolver.resolve(alias_type("string | string | number"))
        assert result.tags == (basic("String"), basic("Number"))
        assert result.annotation == "string | string | number"

    def test_literal_union_contributes_base_types(self, resolver, alias_type):
        result = resolver.resolve(alias_type("'none' | 'compact' | 0 | 1 | string[]"))
        assert runtime_names(result) == ["String", "Number", "Array"]

    def test_nested_union_is_flat_list(self, resolver, alias_type):
        result = resolver.resolve(alias_type("string | undefined"), depth=2)
        assert result == [basic("String"), basic("Undefined")]

    def test_union_with_function_member(self, resolver, alias_type):
        result = resolver.resolve(alias_type("((param: number) => boolean) | string | undefined"))
        assert runtime_names(result) == ["Function", "String", "Undefined"]

    def test_nested_intersection_concatenates(self, resolver, alias_type):
        result = resolver.resolve(alias_type("{ a: string } & { b: number }"), depth=2)
        assert isinstance(result, list)
        assert [tag.kind for tag in result] == [STRUCTURAL, STRUCTURAL]

    def test_top_level_intersection_keeps_source_text(self, resolver, alias_type):
        result = resolver.resolve(alias_type("{ a: string } & { b: number }"))
        assert isinstance(result, DocumentedTags)
        assert result.tags == (basic("Object"),)
        assert result.annotation == "{ a: string } & { b: number }"


class TestReferences:
    def test_alias_is_documented_with_resolved_form(self, resolver, alias_type):
        result = resolver.resolve(alias_type("Density", prelude="type Density = 'none' | 'dense' | 0"))
        assert result.tags == (basic("String"), basic("Number"))
        assert result.annotation == "'none' | 'dense' | 0"

    def test_alias_nested_in_array(self, resolver, alias_type):
        result = resolver.resolve(alias_type("Post[]", prelude="type Post = { title: string }"))
        assert result.annotation == "Array<{ title: string }>"

    def test_interface_reference_is_opaque(self, resolver, alias_type):
        result = resolver.resolve(alias_type("User", prelude="interface User { id: number }"))
        assert result == TypeTag(name="User", kind=OPAQUE)
        assert result.runtime_name == "Object"

    def test_runtime_constructors_keep_their_name(self, resolver, alias_type):
        for name in ("Date", "RegExp", "Map", "Set", "Error"):
            result = resolver.resolve(alias_type(name))
            assert result == TypeTag(name=name, kind=GLOBAL), name
            assert result.runtime_name == name

    def test_basic_constructor_references(self, resolver, alias_type):
        for name in ("Function", "Object", "String", "Number", "Boolean"):
            assert resolver.resolve(alias_type(name)) == basic(name), name

    def test_undeclared_name_accepts_anything(self, resolver, alias_type):
        result = resolver.resolve(alias_type("Missing"))
        assert result == TypeTag(name="Missing", kind=UNBOUND)
        assert result.runtime_name == "Any"

    def test_type_parameter_accepts_anything(self, resolver, alias_type):
        result = resolver.resolve(alias_type("Maybe<string>", prelude="type Maybe<T> = T | undefined"))
        assert runtime_names(result) == ["Any", "Undefined"]
        assert result.annotation == "T | Undefined"

    def test_local_declaration_shadows_constructor(self, resolver, alias_type):
        result = resolver.resolve(alias_type("Date", prelude="interface Date { day: number }"))
        assert result == TypeTag(name="Date", kind=OPAQUE)

    def test_generic_reference_uses_declared_name(self, resolver, alias_type):
        assert resolver.resolve(alias_type("Promise<string>")) == TypeTag(name="Promise", kind=GLOBAL)
        assert resolver.resolve(alias_type("Record<string, number>")) == TypeTag(name="Record", kind=OPAQUE)

    def test_import_indirection_keeps_depth(self, program, resolver):
        program.add_source("/virtual/types.ts", "export type Size = 'sm' | 'lg'\n")
        module = program.add_source(
            "/virtual/module_0.ts",
            "import { Size } from './types'\ntype Local = 'sm' | 'lg'\ntype A = Size\ntype B = Local\n",
        )
        imported = resolver.resolve(module.symbols["A"].declarations[0].type)
        local = resolver.resolve(module.symbols["B"].declarations[0].type)
        assert isinstance(imported, DocumentedTags)
        assert imported == local

    def test_unresolved_import_falls_back_to_name(self, program, resolver):
        module = program.add_source("/virtual/module_0.ts", "import { Component } from 'vue'\ntype A = Component\n")
        assert resolver.resolve(module.symbols["A"].declarations[0].type) == TypeTag(name="Component", kind=OPAQUE)

    def test_self_referential_alias_terminates(self, resolver, diagnostics, alias_type):
        result = resolver.resolve(alias_type("Tree", prelude="type Tree = string | Tree[]"))
        assert runtime_names(result) == ["String", "Array"]
        assert [d.category for d in diagnostics] == [UNRESOLVABLE_TYPE]

    def test_repeated_alias_is_not_a_cycle(self, resolver, diagnostics, alias_type):
        result = resolver.resolve(alias_type("Name | Name[]", prelude="type Name = string"))
        assert runtime_names(result) == ["String", "Array"]
        assert len(diagnostics) == 0
