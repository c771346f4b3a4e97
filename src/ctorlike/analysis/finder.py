"""Pseudo-constructor discovery over a declaration tree.

The analysis runs in two phases:

1. Every candidate function in the module is classified by `resolve()` and
   indexed by helper and by target. Helpers can be declared anywhere in the
   module (an extension on a companion may live in another package), so all
   classification happens before any scope is validated.
2. The tree is walked depth-first. A scope's companion is walked before the
   scope's own validation, which sees the candidates hosted by the scope and
   by its companion. Each classlike then collects the validated candidates
   that target it.

Candidates that no rule decided end up rejected with TARGET_NOT_FOUND.
"""

from __future__ import annotations

import logging

from ..config import AnalyzerConfig
from ..errors import MalformedTreeError
from ..models import ClassKind, Classlike, Module, Nesting, Package, SymbolRef
from .index import PseudoConstructorIndex
from .resolution import Found, resolve
from .result import FinderResult, PseudoConstructor, Rejection
from .validation import Validation

logger = logging.getLogger(__name__)

# Kinds that can never be constructed through a pseudo-constructor.
INVALID_TARGET_KINDS = frozenset({ClassKind.ANNOTATION, ClassKind.ENUM, ClassKind.OBJECT})


class ConstructorLikeFinder:
    """Finds the pseudo-constructors of every class and interface in a module."""

    def __init__(self, config: AnalyzerConfig | None = None) -> None:
        self.config = config or AnalyzerConfig()

    def find(self, module: Module) -> FinderResult:
        """Run the analysis over `module`.

        Raises:
            MalformedTreeError: If the tree violates the front end's contract.
        """
        index = self._classify(module)
        run = _Run(index)
        for package in module.packages:
            run.visit_package(package)
        result = run.finish(module)

        if self.config.log_rejections:
            for rejection in result.rejected:
                logger.warning(
                    rejection.reason.message_for_logging(
                        rejection.function, self.config.annotation_simple_name
                    )
                )
        logger.debug(
            "Module %s: %d candidates, %d accepted, %d rejected",
            module.name,
            sum(1 for function in module.functions() if function.is_constructor_like),
            sum(len(pcs) for pcs in result.constructors.values()),
            len(result.rejected),
        )
        return result

    def _classify(self, module: Module) -> PseudoConstructorIndex:
        index = PseudoConstructorIndex()
        seen: set[SymbolRef] = set()
        seq = 0

        def classify_scope(scope: Package | Classlike) -> None:
            nonlocal seq
            if scope.ref in seen:
                raise MalformedTreeError(str(scope.ref), "declared more than once")
            seen.add(scope.ref)
            for function in scope.functions:
                if function.ref.parent != scope.ref:
                    raise MalformedTreeError(
                        str(function.ref), f"function is declared in {scope.ref}"
                    )
                if not function.is_constructor_like:
                    continue
                resolution = resolve(function, self.config.invoke_name)
                if isinstance(resolution, Found):
                    index.add(
                        PseudoConstructor(
                            seq=seq,
                            function=function,
                            target=resolution.target,
                            helper=resolution.helper,
                            is_invoke=resolution.is_invoke,
                        )
                    )
                else:
                    index.add_invalid(Rejection(seq, function, resolution.reason))
                seq += 1
            for classlike in scope.classlikes:
                if classlike.ref.parent != scope.ref:
                    raise MalformedTreeError(
                        str(classlike.ref), f"classlike is declared in {scope.ref}"
                    )
                classify_scope(classlike)

        for package in module.packages:
            classify_scope(package)
        return index


class _Run:
    """State of the traversal phase for one module."""

    def __init__(self, index: PseudoConstructorIndex) -> None:
        self.index = index
        # Validation decisions keyed by candidate seq; set once per candidate.
        self.decisions: dict[int, Validation] = {}
        self.final: dict[int, Validation] = {}
        self.constructors: dict[SymbolRef, list[PseudoConstructor]] = {}

    def visit_package(self, package: Package) -> None:
        for classlike in package.classlikes:
            self.visit(classlike, is_companion=False)

    def visit(self, classlike: Classlike, is_companion: bool) -> None:
        companion = _companion_of(classlike)
        if companion is not None:
            self.visit(companion, is_companion=True)
        # A companion is validated together with its parent.
        if not is_companion:
            self.validate_with(classlike, companion)
        for child in classlike.classlikes:
            if companion is None or child.ref != companion.ref:
                self.visit(child, is_companion=False)
        self.record(classlike)

    def validate_with(self, scope: Classlike, companion: Classlike | None) -> None:
        for pc in self.index.get_top_level(scope):
            self._decide(pc, Validation.VALID)

        for pc in self.index.get_by_helper(scope):
            if pc.is_invoke:
                self._decide(pc, Validation.INVOKE_ON_CLASSLIKE)
                continue
            target = scope.child(pc.target)
            if target is None:
                self._decide(pc, Validation.TARGET_NOT_NESTED)
            elif scope.kind is not ClassKind.OBJECT and target.nesting is not Nesting.INNER:
                self._decide(pc, Validation.TARGET_NOT_INNER)
            else:
                self._decide(pc, Validation.VALID)

        if companion is None:
            return
        for pc in self.index.get_by_helper(companion):
            if pc.is_invoke:
                if pc.target == scope.ref:
                    self._decide(pc, Validation.VALID)
                else:
                    self._decide(pc, Validation.TARGET_NOT_PARENT_OF_COMPANION)
                continue
            target = scope.child(pc.target)
            if target is None:
                self._decide(pc, Validation.TARGET_NOT_NESTED)
            elif target.nesting is Nesting.INNER:
                self._decide(pc, Validation.TARGET_IS_INNER)
            else:
                self._decide(pc, Validation.VALID)

    def record(self, classlike: Classlike) -> None:
        """Finalize every candidate targeting `classlike`."""
        if classlike.kind in INVALID_TARGET_KINDS:
            for pc in self.index.get_by_target(classlike, contained=False):
                self.final[pc.seq] = Validation.TARGET_IS_INVALID_CLASSLIKE
            return
        candidates = self.index.get_by_target(classlike)
        accepted = [pc for pc in candidates if self.decisions.get(pc.seq) is Validation.VALID]
        for pc in accepted:
            self.final[pc.seq] = Validation.VALID
        self.constructors[classlike.ref] = sorted(accepted, key=lambda pc: pc.seq)

    def finish(self, module: Module) -> FinderResult:
        rejected = self.index.invalids()
        for pc in self.index.resolved():
            reason = self.final.get(pc.seq)
            if reason is None:
                reason = self.decisions.get(pc.seq, Validation.TARGET_NOT_FOUND)
                if reason is Validation.VALID:
                    reason = Validation.TARGET_NOT_FOUND
            if reason is not Validation.VALID:
                rejected.append(Rejection(pc.seq, pc.function, reason))
        rejected.sort(key=lambda rejection: rejection.seq)
        return FinderResult(module=module, constructors=self.constructors, rejected=rejected)

    def _decide(self, pc: PseudoConstructor, validation: Validation) -> None:
        # Each candidate has a single helper, so only one scope decides it.
        self.decisions[pc.seq] = validation


def _companion_of(classlike: Classlike) -> Classlike | None:
    if classlike.companion is None:
        return None
    companion = classlike.child(classlike.companion)
    if companion is None:
        raise MalformedTreeError(
            str(classlike.ref), f"companion {classlike.companion} is not a child"
        )
    if companion.kind is not ClassKind.OBJECT:
        raise MalformedTreeError(
            str(companion.ref), f"companion must be an object, not {companion.kind.value}"
        )
    return companion


def find_pseudo_constructors(
    module: Module, config: AnalyzerConfig | None = None
) -> FinderResult:
    """Convenience wrapper around ConstructorLikeFinder."""
    return ConstructorLikeFinder(config).find(module)
