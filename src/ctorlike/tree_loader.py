"""Loading declaration trees from the front end's JSON dump."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .config import AnalyzerConfig
from .errors import InvalidSchemaVersionError, TreeFormatError, TreeNotFoundError
from .models import (
    ClassKind,
    Classlike,
    ClassType,
    Function,
    Module,
    Nesting,
    OtherType,
    Package,
    Sentinel,
    SymbolRef,
    TypeRef,
)

SCHEMA_VERSION = 1
DEFAULT_SOURCE_SETS = ("main",)
OPERATOR_MODIFIER = "operator"


def load_tree(path: str | Path, config: AnalyzerConfig | None = None) -> Module:
    """
    Load a declaration tree from a JSON file.

    Raises:
        TreeNotFoundError: If the file doesn't exist.
        TreeFormatError: If the document is not a valid tree.
        InvalidSchemaVersionError: If the schema version is unsupported.
    """
    path = Path(path)
    if not path.exists():
        raise TreeNotFoundError(str(path))
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise TreeFormatError(str(path), f"not valid JSON ({e})") from e
    except (OSError, UnicodeDecodeError) as e:
        raise TreeFormatError(str(path), f"cannot read file ({e})") from e
    return tree_from_dict(data, config)


def tree_from_dict(data: Any, config: AnalyzerConfig | None = None) -> Module:
    """Build a Module from a parsed tree document."""
    return _TreeReader(config or AnalyzerConfig()).read_module(data)


class _TreeReader:
    def __init__(self, config: AnalyzerConfig) -> None:
        self.config = config

    def read_module(self, data: Any) -> Module:
        data = _expect_object(data, "$")
        version = data.get("schema_version", SCHEMA_VERSION)
        if version != SCHEMA_VERSION:
            raise InvalidSchemaVersionError(version, SCHEMA_VERSION)

        name = data.get("name", "")
        if not isinstance(name, str):
            raise TreeFormatError("$.name", "expected a string")
        source_sets = self._source_sets(data, "$", frozenset(DEFAULT_SOURCE_SETS))
        packages = tuple(
            self._read_package(package, f"$.packages[{i}]", source_sets)
            for i, package in enumerate(_expect_list(data, "packages", "$"))
        )
        return Module(name=name, packages=packages, source_sets=source_sets)

    def _read_package(
        self, data: Any, location: str, inherited: frozenset[str]
    ) -> Package:
        data = _expect_object(data, location)
        name = data.get("name", "")
        if not isinstance(name, str):
            raise TreeFormatError(f"{location}.name", "expected a string")
        ref = SymbolRef(name)
        source_sets = self._source_sets(data, location, inherited)
        return Package(
            ref=ref,
            functions=self._read_functions(data, location, ref, source_sets),
            classlikes=self._read_classlikes(data, location, ref, source_sets, nested=False),
            source_sets=source_sets,
        )

    def _read_classlikes(
        self,
        data: dict[str, Any],
        location: str,
        scope: SymbolRef,
        source_sets: frozenset[str],
        nested: bool,
    ) -> tuple[Classlike, ...]:
        return tuple(
            self._read_classlike(item, f"{location}.classlikes[{i}]", scope, source_sets, nested)
            for i, item in enumerate(_expect_list(data, "classlikes", location))
        )

    def _read_classlike(
        self,
        data: Any,
        location: str,
        scope: SymbolRef,
        inherited: frozenset[str],
        nested: bool,
    ) -> Classlike:
        data = _expect_object(data, location)
        ref = scope.child_class(_expect_name(data, location))

        kind = _parse_enum(ClassKind, data.get("kind", "class"), f"{location}.kind")
        default_nesting = Nesting.NESTED if nested else Nesting.TOP_LEVEL
        nesting = _parse_enum(
            Nesting, data.get("nesting", default_nesting.value), f"{location}.nesting"
        )
        if not nested and nesting is not Nesting.TOP_LEVEL:
            raise TreeFormatError(f"{location}.nesting", "package-level classlike must be top_level")
        if nested and nesting is Nesting.TOP_LEVEL:
            raise TreeFormatError(f"{location}.nesting", "nested classlike cannot be top_level")

        source_sets = self._source_sets(data, location, inherited)
        classlikes = self._read_classlikes(data, location, ref, source_sets, nested=True)

        companion = None
        companion_name = data.get("companion")
        if companion_name is not None:
            if not isinstance(companion_name, str):
                raise TreeFormatError(f"{location}.companion", "expected a string")
            companion = ref.child_class(companion_name)
            if not any(child.ref == companion for child in classlikes):
                raise TreeFormatError(
                    f"{location}.companion", f"no nested classlike named '{companion_name}'"
                )

        return Classlike(
            ref=ref,
            kind=kind,
            nesting=nesting,
            companion=companion,
            functions=self._read_functions(data, location, ref, source_sets),
            classlikes=classlikes,
            source_sets=source_sets,
        )

    def _read_functions(
        self,
        data: dict[str, Any],
        location: str,
        scope: SymbolRef,
        inherited: frozenset[str],
    ) -> tuple[Function, ...]:
        return tuple(
            self._read_function(item, f"{location}.functions[{i}]", scope, inherited)
            for i, item in enumerate(_expect_list(data, "functions", location))
        )

    def _read_function(
        self,
        data: Any,
        location: str,
        scope: SymbolRef,
        inherited: frozenset[str],
    ) -> Function:
        data = _expect_object(data, location)
        ref = scope.child_callable(_expect_name(data, location))

        receiver = None
        if data.get("receiver") is not None:
            receiver = self._read_type(data["receiver"], f"{location}.receiver")
        if data.get("return_type") is None:
            return_type: TypeRef = Sentinel.NO_VALUE
        else:
            return_type = self._read_type(data["return_type"], f"{location}.return_type")

        modifiers = _expect_strings(data, "modifiers", location)
        annotations = _expect_strings(data, "annotations", location)
        generics = _expect_strings(data, "generics", location)

        return Function(
            ref=ref,
            return_type=return_type,
            receiver=receiver,
            is_operator=OPERATOR_MODIFIER in modifiers,
            is_constructor_like=self.config.annotation in annotations,
            source_sets=self._source_sets(data, location, inherited),
            generics=tuple(generics),
        )

    def _read_type(self, data: Any, location: str) -> TypeRef:
        if isinstance(data, str):
            package_name, sep, class_names = data.partition("/")
            if not sep or not class_names:
                raise TreeFormatError(location, f"expected 'package/ClassName', got '{data}'")
            return self._class_type(SymbolRef(package_name, class_names))

        data = _expect_object(data, location)
        kind = data.get("kind", "class")
        if kind == "unit":
            return Sentinel.NO_VALUE
        if kind == "nothing":
            return Sentinel.NO_RETURN
        if kind == "other":
            name = data.get("name")
            if not isinstance(name, str):
                raise TreeFormatError(f"{location}.name", "expected a string")
            return OtherType(name)
        if kind != "class":
            raise TreeFormatError(f"{location}.kind", f"unknown type kind '{kind}'")
        package_name = data.get("package", "")
        class_names = data.get("class_names")
        if not isinstance(package_name, str) or not isinstance(class_names, str) or not class_names:
            raise TreeFormatError(location, "class type needs 'package' and 'class_names'")
        return self._class_type(SymbolRef(package_name, class_names))

    def _class_type(self, ref: SymbolRef) -> TypeRef:
        if ref.qualified_name == self.config.unit_type:
            return Sentinel.NO_VALUE
        if ref.qualified_name == self.config.nothing_type:
            return Sentinel.NO_RETURN
        return ClassType(ref)

    def _source_sets(
        self, data: dict[str, Any], location: str, inherited: frozenset[str]
    ) -> frozenset[str]:
        if "source_sets" not in data:
            return inherited
        return frozenset(_expect_strings(data, "source_sets", location))


def _expect_object(data: Any, location: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise TreeFormatError(location, "expected an object")
    return data


def _expect_list(data: dict[str, Any], key: str, location: str) -> list[Any]:
    value = data.get(key, [])
    if not isinstance(value, list):
        raise TreeFormatError(f"{location}.{key}", "expected a list")
    return value


def _expect_strings(data: dict[str, Any], key: str, location: str) -> list[str]:
    values = _expect_list(data, key, location)
    if not all(isinstance(v, str) for v in values):
        raise TreeFormatError(f"{location}.{key}", "expected a list of strings")
    return values


def _expect_name(data: dict[str, Any], location: str) -> str:
    name = data.get("name")
    if not isinstance(name, str) or not name or "." in name:
        raise TreeFormatError(f"{location}.name", "expected a simple name")
    return name


def _parse_enum(enum_type: Any, value: Any, location: str) -> Any:
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise TreeFormatError(location, f"expected one of {allowed}, got {value!r}") from None
