"""Data models for ctorlike.

The declaration tree is built once per analysis run by an external front end
and never mutated afterwards, so every node here is a frozen dataclass.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator, Union


@dataclass(frozen=True)
class SymbolRef:
    """Identifier of a declaration.

    Attributes:
        package_name: Dotted package name, "" for the root package.
        class_names: Dotted path of enclosing classlikes ("Outer.Inner"),
            or None for package-level declarations.
        callable_name: Function name, or None for classlikes and packages.
    """

    package_name: str
    class_names: str | None = None
    callable_name: str | None = None

    @property
    def parent(self) -> SymbolRef:
        """Reference of the immediately enclosing scope.

        A package reference is its own parent.
        """
        if self.callable_name is not None:
            return SymbolRef(self.package_name, self.class_names)
        if self.class_names is not None and "." in self.class_names:
            return SymbolRef(self.package_name, self.class_names.rsplit(".", 1)[0])
        return SymbolRef(self.package_name)

    @property
    def is_classlike(self) -> bool:
        return self.class_names is not None and self.callable_name is None

    @property
    def simple_name(self) -> str:
        if self.callable_name is not None:
            return self.callable_name
        if self.class_names is not None:
            return self.class_names.rsplit(".", 1)[-1]
        return self.package_name.rsplit(".", 1)[-1]

    @property
    def qualified_name(self) -> str:
        return ".".join(
            part
            for part in (self.package_name, self.class_names, self.callable_name)
            if part
        )

    def child_class(self, name: str) -> SymbolRef:
        """Reference of a classlike declared directly in this scope."""
        class_names = f"{self.class_names}.{name}" if self.class_names else name
        return SymbolRef(self.package_name, class_names)

    def child_callable(self, name: str) -> SymbolRef:
        """Reference of a function declared directly in this scope."""
        return SymbolRef(self.package_name, self.class_names, name)

    def __str__(self) -> str:
        return f"{self.package_name}/{self.class_names or ''}/{self.callable_name or ''}"


# Type references


class Sentinel(Enum):
    """Built-in bottom/void-like types that can never be constructed."""

    NO_VALUE = "no_value"  # Unit / void
    NO_RETURN = "no_return"  # Nothing / never


@dataclass(frozen=True)
class ClassType:
    """A resolved reference to a classlike."""

    ref: SymbolRef


@dataclass(frozen=True)
class OtherType:
    """A type that is not a classlike reference (type parameter, function type...)."""

    name: str


TypeRef = Union[ClassType, Sentinel, OtherType]


# Declaration tree


class ClassKind(Enum):
    CLASS = "class"
    INTERFACE = "interface"
    OBJECT = "object"
    ENUM = "enum"
    ANNOTATION = "annotation"


class Nesting(Enum):
    TOP_LEVEL = "top_level"
    NESTED = "nested"
    INNER = "inner"


@dataclass(frozen=True)
class Function:
    """A function declaration.

    A function with a receiver is an extension; one declared directly inside
    a classlike without a receiver is a member.

    Attributes:
        ref: Reference of the function; its parent is the declaring scope.
        return_type: Declared return type.
        receiver: Extension receiver type, or None.
        is_operator: Whether the function carries the operator modifier.
        is_constructor_like: Whether the function carries the pseudo-constructor
            annotation.
        source_sets: Build variants the function is compiled for.
        generics: Names of the function's type parameters.
        is_constructor: Set on the copies handed to the renderer.
    """

    ref: SymbolRef
    return_type: TypeRef
    receiver: TypeRef | None = None
    is_operator: bool = False
    is_constructor_like: bool = False
    source_sets: frozenset[str] = frozenset()
    generics: tuple[str, ...] = ()
    is_constructor: bool = False

    @property
    def name(self) -> str:
        return self.ref.callable_name or ""

    @property
    def is_extension(self) -> bool:
        return self.receiver is not None

    @property
    def in_classlike(self) -> bool:
        """True if declared directly inside a classlike."""
        return self.ref.class_names is not None

    def as_constructor(self, strip_receiver: bool) -> Function:
        """Copy of this function marked as a constructor."""
        return replace(
            self,
            is_constructor=True,
            receiver=None if strip_receiver else self.receiver,
        )


@dataclass(frozen=True)
class Classlike:
    """A class, interface, object, enum or annotation declaration.

    Attributes:
        ref: Reference of the classlike.
        kind: Declaration kind.
        nesting: Whether the classlike is top-level, nested or inner.
        companion: Reference of the child object acting as static host.
        functions: Directly declared functions, in declaration order.
        classlikes: Directly declared classlikes (the companion included),
            in declaration order.
        source_sets: Build variants the classlike is compiled for.
    """

    ref: SymbolRef
    kind: ClassKind
    nesting: Nesting = Nesting.TOP_LEVEL
    companion: SymbolRef | None = None
    functions: tuple[Function, ...] = ()
    classlikes: tuple[Classlike, ...] = ()
    source_sets: frozenset[str] = frozenset()

    @property
    def name(self) -> str:
        return self.ref.simple_name

    def child(self, ref: SymbolRef) -> Classlike | None:
        """Direct child classlike with the given reference."""
        for classlike in self.classlikes:
            if classlike.ref == ref:
                return classlike
        return None


@dataclass(frozen=True)
class Package:
    """A package and its package-level declarations."""

    ref: SymbolRef
    functions: tuple[Function, ...] = ()
    classlikes: tuple[Classlike, ...] = ()
    source_sets: frozenset[str] = frozenset()

    @property
    def name(self) -> str:
        return self.ref.package_name


@dataclass(frozen=True)
class Module:
    """Root of a declaration tree: one analysis unit."""

    name: str
    packages: tuple[Package, ...] = ()
    source_sets: frozenset[str] = field(default_factory=frozenset)

    def classlikes(self) -> Iterator[Classlike]:
        """All classlikes in the module, pre-order."""
        for package in self.packages:
            yield from _walk_classlikes(package.classlikes)

    def functions(self) -> Iterator[Function]:
        """All functions in the module, in declaration order."""
        for package in self.packages:
            yield from package.functions
            for classlike in _walk_classlikes(package.classlikes):
                yield from classlike.functions

    def find_classlike(self, ref: SymbolRef) -> Classlike | None:
        for classlike in self.classlikes():
            if classlike.ref == ref:
                return classlike
        return None


def _walk_classlikes(classlikes: tuple[Classlike, ...]) -> Iterator[Classlike]:
    for classlike in classlikes:
        yield classlike
        yield from _walk_classlikes(classlike.classlikes)
