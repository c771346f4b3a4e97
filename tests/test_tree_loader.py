"""Tests for loading tree documents."""

import json

import pytest

from ctorlike.config import AnalyzerConfig
from ctorlike.errors import InvalidSchemaVersionError, TreeFormatError, TreeNotFoundError
from ctorlike.models import ClassKind, ClassType, Nesting, OtherType, Sentinel, SymbolRef
from ctorlike.tree_loader import load_tree, tree_from_dict

from .conftest import ANNOTATION, PKG, cls, companion, fn, load, ref, tree


class TestLoadTree:
    def test_load_from_file(self, tree_file):
        module = load_tree(tree_file, AnalyzerConfig(annotation=ANNOTATION))
        assert module.name == "test-module"
        assert [p.name for p in module.packages] == [PKG]

    def test_missing_file(self, temp_dir):
        with pytest.raises(TreeNotFoundError):
            load_tree(temp_dir / "missing.json")

    def test_invalid_json(self, temp_dir):
        path = temp_dir / "broken.json"
        path.write_text("{not json")
        with pytest.raises(TreeFormatError, match="not valid JSON"):
            load_tree(path)

    def test_invalid_utf8(self, temp_dir):
        path = temp_dir / "latin1.json"
        path.write_bytes(b'{"name": "\xff"}')
        with pytest.raises(TreeFormatError, match="cannot read file"):
            load_tree(path)

    def test_directory(self, temp_dir):
        with pytest.raises(TreeFormatError, match="cannot read file"):
            load_tree(temp_dir)

    def test_unsupported_schema_version(self, temp_dir):
        path = temp_dir / "future.json"
        path.write_text(json.dumps(tree(schema_version=2)))
        with pytest.raises(InvalidSchemaVersionError) as exc_info:
            load_tree(path)
        assert exc_info.value.found == 2
        assert exc_info.value.supported == 1


class TestStructure:
    def test_refs_follow_nesting(self, mixed_tree):
        module = load(mixed_tree)
        widget = module.find_classlike(ref("Widget"))
        assert widget is not None
        assert widget.companion == ref("Widget.Companion")
        assert [c.ref for c in widget.classlikes] == [
            ref("Widget.Companion"),
            ref("Widget.Part"),
            ref("Widget.Handle"),
        ]
        assert widget.functions[0].ref == ref("Widget", "Handle")

    def test_nesting_defaults(self):
        module = load(tree(cls("Outer", cls("Nested"))))
        outer = module.find_classlike(ref("Outer"))
        nested = module.find_classlike(ref("Outer.Nested"))
        assert outer.nesting is Nesting.TOP_LEVEL
        assert nested.nesting is Nesting.NESTED

    def test_kinds(self):
        module = load(tree(cls("A", kind="interface"), cls("B", kind="annotation")))
        assert [c.kind for c in module.classlikes()] == [ClassKind.INTERFACE, ClassKind.ANNOTATION]

    def test_unknown_kind(self):
        with pytest.raises(TreeFormatError, match="expected one of"):
            load(tree(cls("A", kind="struct")))

    def test_inner_at_package_level(self):
        with pytest.raises(TreeFormatError, match="must be top_level"):
            load(tree(cls("A", nesting="inner")))

    def test_top_level_inside_class(self):
        with pytest.raises(TreeFormatError, match="cannot be top_level"):
            load(tree(cls("A", cls("B", nesting="top_level"))))

    def test_companion_must_be_child(self):
        with pytest.raises(TreeFormatError, match="no nested classlike named 'Companion'"):
            load(tree(cls("A", companion="Companion")))

    def test_dotted_name_rejected(self):
        with pytest.raises(TreeFormatError, match="simple name"):
            load(tree(cls("A.B")))

    def test_missing_lists_are_empty(self):
        module = load({"name": "bare", "packages": [{"name": PKG}]})
        assert module.packages[0].functions == ()
        assert module.packages[0].classlikes == ()

    def test_location_in_error(self):
        doc = tree(cls("A", functions=({"return_type": "x/Y"},)))
        with pytest.raises(TreeFormatError) as exc_info:
            load(doc)
        assert exc_info.value.location == "$.packages[0].classlikes[0].functions[0].name"

    def test_root_must_be_object(self):
        with pytest.raises(TreeFormatError):
            load([])


class TestFunctions:
    def test_flags(self):
        module = load(
            tree(
                functions=(
                    fn("invoke", "A", operator=True),
                    fn("A", "A", annotated=False),
                )
            )
        )
        invoke, plain = module.packages[0].functions
        assert invoke.is_operator is True
        assert invoke.is_constructor_like is True
        assert plain.is_operator is False
        assert plain.is_constructor_like is False

    def test_custom_annotation(self):
        doc = tree(functions=(fn("A", "A", annotations=["com.example.Factory"]),))
        module = tree_from_dict(doc, AnalyzerConfig(annotation="com.example.Factory"))
        assert module.packages[0].functions[0].is_constructor_like is True

    def test_missing_return_type_is_unit(self):
        module = load(tree(functions=({"name": "f"},)))
        assert module.packages[0].functions[0].return_type is Sentinel.NO_VALUE

    def test_generics(self):
        module = load(tree(functions=(fn("A", "A", generics=["T", "R"]),)))
        assert module.packages[0].functions[0].generics == ("T", "R")


class TestTypes:
    def _return_type(self, type_data, config=None):
        doc = tree(functions=({"name": "f", "return_type": type_data},))
        module = tree_from_dict(doc, config)
        return module.packages[0].functions[0].return_type

    def test_string_form(self):
        assert self._return_type("com.example/Outer.Inner") == ClassType(
            SymbolRef("com.example", "Outer.Inner")
        )

    def test_string_form_root_package(self):
        assert self._return_type("/Foo") == ClassType(SymbolRef("", "Foo"))

    def test_string_form_without_class(self):
        with pytest.raises(TreeFormatError, match="package/ClassName"):
            self._return_type("com.example")

    def test_object_form(self):
        result = self._return_type({"kind": "class", "package": "a.b", "class_names": "C"})
        assert result == ClassType(SymbolRef("a.b", "C"))

    def test_sentinels(self):
        assert self._return_type({"kind": "unit"}) is Sentinel.NO_VALUE
        assert self._return_type({"kind": "nothing"}) is Sentinel.NO_RETURN

    def test_other(self):
        assert self._return_type({"kind": "other", "name": "T"}) == OtherType("T")

    def test_unknown_type_kind(self):
        with pytest.raises(TreeFormatError, match="unknown type kind"):
            self._return_type({"kind": "union"})

    def test_builtin_names_map_to_sentinels(self):
        assert self._return_type("kotlin/Unit") is Sentinel.NO_VALUE
        assert self._return_type("kotlin/Nothing") is Sentinel.NO_RETURN

    def test_configured_builtin_names(self):
        config = AnalyzerConfig(unit_type="builtins.None", nothing_type="typing.NoReturn")
        assert self._return_type("builtins/None", config) is Sentinel.NO_VALUE
        assert self._return_type("typing/NoReturn", config) is Sentinel.NO_RETURN
        assert self._return_type("kotlin/Unit", config) == ClassType(SymbolRef("kotlin", "Unit"))


class TestSourceSets:
    def test_default(self):
        module = load(tree(cls("A")))
        assert module.source_sets == frozenset({"main"})
        assert module.find_classlike(ref("A")).source_sets == frozenset({"main"})

    def test_inherited_from_parent(self):
        module = load(
            tree(
                cls(
                    "A",
                    companion(functions=(fn("invoke", "A", operator=True),)),
                    companion="Companion",
                    source_sets=["jvm", "js"],
                )
            )
        )
        invoke = next(module.functions())
        assert invoke.source_sets == frozenset({"jvm", "js"})

    def test_must_be_strings(self):
        with pytest.raises(TreeFormatError, match="list of strings"):
            load(tree(cls("A", source_sets=[1])))
