"""Context-free classification of pseudo-constructor candidates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..config import DEFAULT_INVOKE_NAME
from ..models import ClassType, Function, Sentinel, SymbolRef
from .validation import Validation


@dataclass(frozen=True)
class Found:
    """Provisional classification of a candidate.

    Attributes:
        helper: Scope hosting the function (receiver class or enclosing
            classlike), or None for a package-level function.
        target: Classlike the function constructs.
        is_invoke: Whether the candidate uses the invoke pattern.
    """

    helper: SymbolRef | None
    target: SymbolRef
    is_invoke: bool = False


@dataclass(frozen=True)
class Invalid:
    reason: Validation


Resolution = Union[Found, Invalid]


def resolve(function: Function, invoke_name: str = DEFAULT_INVOKE_NAME) -> Resolution:
    """Classify a candidate from its own declaration alone.

    The first failing rule decides the reason. Whether the helper may really
    host the function depends on sibling declarations and is left to scope
    validation.
    """
    target = function.return_type
    receiver = function.receiver

    if target is Sentinel.NO_VALUE:
        return Invalid(Validation.TARGET_IS_UNIT)
    if target is Sentinel.NO_RETURN:
        return Invalid(Validation.TARGET_IS_NOTHING)
    if not isinstance(target, ClassType):
        return Invalid(Validation.TARGET_NOT_CLASS)
    if function.is_extension and not isinstance(receiver, ClassType):
        return Invalid(Validation.RECEIVER_NOT_CLASSLIKE)

    enclosing = function.ref.parent if function.in_classlike else None
    helper = receiver.ref if receiver is not None else enclosing

    if function.name == invoke_name:
        if not function.is_operator:
            return Invalid(Validation.NOT_OPERATOR)
        if receiver is None and enclosing is None:
            return Invalid(Validation.INVOKE_NEITHER_EXTENSION_NOR_IN_CLASSLIKE)
        if receiver is not None and enclosing is not None:
            return Invalid(Validation.EXTENSION_IN_CLASSLIKE)
        return Found(helper, target.ref, is_invoke=True)

    if function.name != target.ref.simple_name:
        return Invalid(Validation.NAME_NOT_TARGET)
    if helper is None and target.ref.parent.is_classlike:
        return Invalid(Validation.TARGET_NOT_TOP_LEVEL)
    if receiver is not None and enclosing is not None:
        return Invalid(Validation.EXTENSION_IN_CLASSLIKE)
    return Found(helper, target.ref)
