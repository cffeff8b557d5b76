"""
Unit tests for PropertyExtractor.
"""

from auto_props.core.models import UNRESOLVABLE_TYPE, UNSUPPORTED_PATTERN
from auto_props.core.type_tags import FUNCTION_KIND, runtime_names


def names(props):
    return [prop.name for prop in props]


class TestStructuralTypes:
    def test_object_literal_members(self, extractor, alias_type):
        props = extractor.extract(alias_type("{ title: string; count?: number; 'data-id': string }"))
        assert names(props) == ["title", "count", "data-id"]
        assert [p.required for p in props] == [True, False, True]

    def test_undefined_in_union_makes_optional(self, extractor, alias_type):
        props = extractor.extract(alias_type("{ label: string | undefined }"))
        assert props[0].required is False
        assert runtime_names(props[0].type_tags) == ["String", "Undefined"]

    def test_method_signature_is_function(self, extractor, alias_type):
        props = extractor.extract(alias_type("{ onSelect(id: number): void; format?(value: string): string }"))
        select, fmt = props
        assert select.type_tags.kind == FUNCTION_KIND
        assert select.type_tags.text == "(id: number) => void"
        assert select.required is True
        assert fmt.required is False

    def test_method_without_return_type(self, extractor, alias_type):
        props = extractor.extract(alias_type("{ reset() }"))
        assert props[0].type_tags.text == "() => any"

    def test_jsdoc_is_collected(self, extractor, alias_type):
        props = extractor.extract(alias_type("{\n  /**\n   * Visible title.\n   * @example 'Hi'\n   */\n  title: string\n}"))
        assert props[0].doc == ["Visible title.", "@example 'Hi'"]

    def test_computed_keys_are_skipped(self, extractor, alias_type):
        props = extractor.extract(alias_type("{ [key: string]: number; name: string }"))
        assert names(props) == ["name"]


class TestReferences:
    def test_interface_with_extends(self, extractor, alias_type):
        prelude = "interface Base { id: number }\ninterface Named extends Base { name: string }"
        props = extractor.extract(alias_type("Named", prelude=prelude))
        assert names(props) == ["id", "name"]

    def test_alias_chain(self, extractor, alias_type):
        prelude = "type Inner = { a: string }\ntype Outer = Inner"
        assert names(extractor.extract(alias_type("Outer", prelude=prelude))) == ["a"]

    def test_imported_interface(self, program, extractor):
        program.add_source("/virtual/props.ts", "export interface Props { size: number; tone?: string }\n")
        module = program.add_source("/virtual/module_0.ts", "import { Props } from './props'\ntype Subject = Props\n")
        props = extractor.extract(module.symbols["Subject"].declarations[0].type)
        assert names(props) == ["size", "tone"]

    def test_reexported_alias(self, program, extractor):
        program.add_source("/virtual/base.ts", "export type Props = { size: number }\n")
        program.add_source("/virtual/index.ts", "export { Props as Shared } from './base'\n")
        module = program.add_source("/virtual/module_0.ts", "import { Shared } from './index'\ntype Subject = Shared\n")
        assert names(extractor.extract(module.symbols["Subject"].declarations[0].type)) == ["size"]

    def test_merged_interface_declarations(self, extractor, alias_type):
        prelude = "interface Props { a: string }\ninterface Props { b?: number }"
        props = extractor.extract(alias_type("Props", prelude=prelude))
        assert names(props) == ["a", "b"]
        assert [p.required for p in props] == [True, False]

    def test_default_imported_interface(self, program, extractor):
        program.add_source("/virtual/props.ts", "export default interface Props { size: number }\n")
        module = program.add_source("/virtual/module_0.ts", "import P from './props'\ntype Subject = P\n")
        assert names(extractor.extract(module.symbols["Subject"].declarations[0].type)) == ["size"]

    def test_unknown_reference_warns(self, extractor, diagnostics, alias_type):
        assert extractor.extract(alias_type("Nowhere")) is None
        assert [d.category for d in diagnostics] == [UNRESOLVABLE_TYPE]

    def test_unresolved_import_warns(self, extractor, diagnostics, alias_type):
        assert extractor.extract(alias_type("Props", prelude="import { Props } from './missing'")) is None
        assert "does not resolve" in diagnostics.items[0].message

    def test_class_reference_is_unsupported(self, extractor, diagnostics, alias_type):
        assert extractor.extract(alias_type("Store", prelude="class Store {}")) is None
        assert len(diagnostics) == 1

    def test_self_reference_stops(self, extractor, diagnostics, alias_type):
        prelude = "type Loop = { a: string } & Loop"
        props = extractor.extract(alias_type("Loop", prelude=prelude))
        assert names(props) == ["a"]
        assert "refers to itself" in diagnostics.items[0].message


class TestIntersections:
    def test_members_of_every_part(self, extractor, alias_type):
        prelude = "type A = { a: string }\ninterface B { b: number }"
        props = extractor.extract(alias_type("A & B & { c: boolean }", prelude=prelude))
        assert names(props) == ["a", "b", "c"]

    def test_parenthesized_parts(self, extractor, alias_type):
        props = extractor.extract(alias_type("({ a: string }) & ({ b: string })"))
        assert names(props) == ["a", "b"]

    def test_non_structural_part_warns(self, extractor, diagnostics, alias_type):
        props = extractor.extract(alias_type("{ a: string } & string[]"))
        assert names(props) == ["a"]
        assert [d.category for d in diagnostics] == [UNSUPPORTED_PATTERN]

    def test_non_structural_input(self, extractor, alias_type):
        assert extractor.extract(alias_type("string")) is None
        assert extractor.extract(None) is None
