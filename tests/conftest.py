"""Pytest fixtures for ctorlike tests."""

import json
from pathlib import Path
from typing import Any

import pytest

from ctorlike.analysis import ConstructorLikeFinder, FinderResult
from ctorlike.config import AnalyzerConfig
from ctorlike.models import Module, SymbolRef
from ctorlike.tree_loader import tree_from_dict

PKG = "io.github.spacedvoid.constructorlike"
ANNOTATION = f"{PKG}.ConstructorLike"


def ref(class_names: str | None = None, callable_name: str | None = None) -> SymbolRef:
    """SymbolRef in the test package."""
    return SymbolRef(PKG, class_names, callable_name)


def type_ref(class_names: str) -> str:
    """Tree-document class type, in the test package unless already qualified."""
    if "/" in class_names:
        return class_names
    return f"{PKG}/{class_names}"


def fn(
    name: str,
    returns: Any,
    receiver: Any = None,
    operator: bool = False,
    annotated: bool = True,
    **extra: Any,
) -> dict[str, Any]:
    """Tree-document function. String types are class names in the test package."""
    data: dict[str, Any] = {
        "name": name,
        "return_type": type_ref(returns) if isinstance(returns, str) else returns,
        "modifiers": ["operator"] if operator else [],
        "annotations": [ANNOTATION] if annotated else [],
    }
    if receiver is not None:
        data["receiver"] = type_ref(receiver) if isinstance(receiver, str) else receiver
    data.update(extra)
    return data


def cls(
    name: str,
    *classlikes: dict[str, Any],
    kind: str = "class",
    nesting: str | None = None,
    companion: str | None = None,
    functions: tuple = (),
    **extra: Any,
) -> dict[str, Any]:
    """Tree-document classlike."""
    data: dict[str, Any] = {
        "name": name,
        "kind": kind,
        "functions": list(functions),
        "classlikes": list(classlikes),
    }
    if nesting is not None:
        data["nesting"] = nesting
    if companion is not None:
        data["companion"] = companion
    data.update(extra)
    return data


def companion(*classlikes: dict[str, Any], functions: tuple = (), name: str = "Companion") -> dict[str, Any]:
    """Tree-document companion object."""
    return cls(name, *classlikes, kind="object", functions=functions)


def tree(*classlikes: dict[str, Any], functions: tuple = (), **extra: Any) -> dict[str, Any]:
    """Tree document with a single package."""
    data: dict[str, Any] = {
        "schema_version": 1,
        "name": "test-module",
        "packages": [
            {"name": PKG, "functions": list(functions), "classlikes": list(classlikes)}
        ],
    }
    data.update(extra)
    return data


def load(doc: dict[str, Any]) -> Module:
    return tree_from_dict(doc, AnalyzerConfig(annotation=ANNOTATION))


def analyze(doc: dict[str, Any]) -> FinderResult:
    """Load a tree document and run the finder over it."""
    config = AnalyzerConfig(annotation=ANNOTATION, log_rejections=False)
    return ConstructorLikeFinder(config).find(tree_from_dict(doc, config))


@pytest.fixture
def temp_dir(tmp_path):
    """Temporary directory for written files."""
    return tmp_path


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Run with no config files and no CTORLIKE_* variables."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for var in (
        "CTORLIKE_ANNOTATION",
        "CTORLIKE_INVOKE_NAME",
        "CTORLIKE_UNIT_TYPE",
        "CTORLIKE_NOTHING_TYPE",
        "CTORLIKE_LOG_REJECTIONS",
    ):
        monkeypatch.delenv(var, raising=False)
    return tmp_path


@pytest.fixture
def mixed_tree() -> dict[str, Any]:
    """A tree with accepted and rejected candidates of every shape."""
    return tree(
        cls(
            "Widget",
            companion(functions=(fn("invoke", "Widget", operator=True),)),
            cls("Part", nesting="nested"),
            cls("Handle", nesting="inner"),
            companion="Companion",
            functions=(fn("Handle", "Widget.Handle"),),
        ),
        cls("Gadget"),
        cls("Color", kind="enum"),
        functions=(
            fn("Gadget", "Gadget"),
            fn("Color", "Color"),
            fn("make", "Gadget"),
        ),
    )


@pytest.fixture
def tree_file(temp_dir, mixed_tree) -> Path:
    """The mixed tree written to disk."""
    path = temp_dir / "tree.json"
    path.write_text(json.dumps(mixed_tree))
    return path
