"""Outputs of a pseudo-constructor analysis run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from ..models import Function, Module, SymbolRef
from .validation import Validation


@dataclass(frozen=True)
class PseudoConstructor:
    """A candidate that resolved to a target.

    Attributes:
        seq: Position of the candidate in declaration order.
        function: The original, unmodified function.
        target: Classlike the function constructs.
        helper: Scope hosting the function, None for package-level functions.
        is_invoke: Whether the candidate uses the invoke pattern.
    """

    seq: int
    function: Function
    target: SymbolRef
    helper: SymbolRef | None
    is_invoke: bool = False

    @property
    def constructor(self) -> Function:
        """The function as the renderer should present it."""
        return self.function.as_constructor(strip_receiver=self.is_invoke)

    @property
    def pattern(self) -> str:
        return "invoke" if self.is_invoke else "named"


@dataclass(frozen=True)
class Rejection:
    seq: int
    function: Function
    reason: Validation


@dataclass
class FinderResult:
    """Accepted pseudo-constructors per classlike and rejections for the tree.

    `constructors` holds an entry, possibly empty, for every class and
    interface of the module. Both collections are in declaration order.
    """

    module: Module
    constructors: dict[SymbolRef, list[PseudoConstructor]] = field(default_factory=dict)
    rejected: list[Rejection] = field(default_factory=list)

    def pseudo_constructors_for(self, target: SymbolRef) -> list[PseudoConstructor]:
        return list(self.constructors.get(target, []))

    def constructors_for(self, target: SymbolRef) -> list[Function]:
        """Rewritten functions to render in `target`'s constructors section."""
        return [pc.constructor for pc in self.constructors.get(target, [])]

    def accepted(self) -> Iterator[PseudoConstructor]:
        """All accepted pseudo-constructors, in declaration order."""
        all_accepted = [pc for pcs in self.constructors.values() for pc in pcs]
        return iter(sorted(all_accepted, key=lambda pc: pc.seq))

    def reason_for(self, function: Function) -> Validation:
        """Final outcome for a candidate function.

        Raises:
            KeyError: If the function is not a candidate of this run.
        """
        for pc in self.accepted():
            if pc.function == function:
                return Validation.VALID
        for rejection in self.rejected:
            if rejection.function == function:
                return rejection.reason
        raise KeyError(str(function.ref))
