"""Lookup tables built from classified candidates."""

from __future__ import annotations

from collections import defaultdict

from ..models import Classlike, SymbolRef
from .result import PseudoConstructor, Rejection


class PseudoConstructorIndex:
    """Candidates grouped by the scope that must validate them.

    Lookups only return candidates whose source sets are contained in the
    scope's source sets.
    """

    def __init__(self) -> None:
        self._by_helper: dict[SymbolRef, list[PseudoConstructor]] = defaultdict(list)
        self._by_target: dict[SymbolRef, list[PseudoConstructor]] = defaultdict(list)
        self._top_level: dict[SymbolRef, list[PseudoConstructor]] = defaultdict(list)
        self._resolved: list[PseudoConstructor] = []
        self._invalids: list[Rejection] = []

    def add(self, constructor: PseudoConstructor) -> None:
        if constructor.helper is None:
            self._top_level[constructor.target].append(constructor)
        else:
            self._by_helper[constructor.helper].append(constructor)
        self._by_target[constructor.target].append(constructor)
        self._resolved.append(constructor)

    def add_invalid(self, rejection: Rejection) -> None:
        self._invalids.append(rejection)

    def get_by_helper(self, helper: Classlike) -> list[PseudoConstructor]:
        return _contained(self._by_helper.get(helper.ref, []), helper)

    def get_top_level(self, target: Classlike) -> list[PseudoConstructor]:
        return _contained(self._top_level.get(target.ref, []), target)

    def get_by_target(
        self, target: Classlike, contained: bool = True
    ) -> list[PseudoConstructor]:
        constructors = self._by_target.get(target.ref, [])
        return _contained(constructors, target) if contained else list(constructors)

    def resolved(self) -> list[PseudoConstructor]:
        return list(self._resolved)

    def invalids(self) -> list[Rejection]:
        return list(self._invalids)


def _contained(
    constructors: list[PseudoConstructor], scope: Classlike
) -> list[PseudoConstructor]:
    return [
        pc for pc in constructors if pc.function.source_sets <= scope.source_sets
    ]
