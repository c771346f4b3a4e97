"""Closed set of outcomes for a pseudo-constructor candidate."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models import Function


class Validation(Enum):
    VALID = "valid"
    # Decided by resolve()
    TARGET_NOT_CLASS = "target_not_class"
    TARGET_IS_UNIT = "target_is_unit"
    TARGET_IS_NOTHING = "target_is_nothing"
    RECEIVER_NOT_CLASSLIKE = "receiver_not_classlike"
    EXTENSION_IN_CLASSLIKE = "extension_in_classlike"
    NOT_OPERATOR = "not_operator"
    INVOKE_NEITHER_EXTENSION_NOR_IN_CLASSLIKE = "invoke_neither_extension_nor_in_classlike"
    NAME_NOT_TARGET = "name_not_target"
    TARGET_NOT_TOP_LEVEL = "target_not_top_level"
    # Decided when recording a target's constructors
    TARGET_IS_INVALID_CLASSLIKE = "target_is_invalid_classlike"
    # Decided by scope validation
    INVOKE_ON_CLASSLIKE = "invoke_on_classlike"
    TARGET_IS_INNER = "target_is_inner"
    TARGET_NOT_INNER = "target_not_inner"
    TARGET_NOT_NESTED = "target_not_nested"
    TARGET_NOT_PARENT_OF_COMPANION = "target_not_parent_of_companion"
    # Default
    TARGET_NOT_FOUND = "target_not_found"

    @property
    def message(self) -> str:
        return _MESSAGES[self]

    def message_for_logging(
        self, function: Function, annotation: str = "ConstructorLike"
    ) -> str:
        """Human-readable explanation of why `function` was rejected."""
        if self is Validation.VALID:
            raise ValueError("Should not be invoked when function is valid")
        source_sets = ", ".join(sorted(function.source_sets))
        return (
            f"Annotation @{annotation} cannot be applied to function "
            f"{function.ref}[{source_sets}] because {self.message}"
        )


_MESSAGES: dict[Validation, str] = {
    Validation.VALID: "",
    Validation.TARGET_NOT_CLASS: "the function does not return a class type",
    Validation.TARGET_IS_UNIT: "the function returns the no-value type",
    Validation.TARGET_IS_NOTHING: "the function returns the no-return type",
    Validation.RECEIVER_NOT_CLASSLIKE: "the receiver is not a class type",
    Validation.EXTENSION_IN_CLASSLIKE: "the function is an extension in a class type",
    Validation.NOT_OPERATOR: "the function is not marked 'operator'",
    Validation.INVOKE_NEITHER_EXTENSION_NOR_IN_CLASSLIKE: (
        "the function is not an extension of a companion object or is not a member"
    ),
    Validation.NAME_NOT_TARGET: "the name of the function does not match the return type",
    Validation.TARGET_NOT_TOP_LEVEL: "the target type is not package-level",
    Validation.TARGET_IS_INVALID_CLASSLIKE: (
        "the target type is an annotation class, enum class, or object"
    ),
    Validation.INVOKE_ON_CLASSLIKE: "the function is a member or an extension",
    Validation.TARGET_IS_INNER: "the target type is an inner class",
    Validation.TARGET_NOT_INNER: "the target type is not an inner class",
    Validation.TARGET_NOT_NESTED: "the target type is not a nested class",
    Validation.TARGET_NOT_PARENT_OF_COMPANION: (
        "the target type is not the parent of the companion object"
    ),
    Validation.TARGET_NOT_FOUND: (
        "the target type cannot be found or is in a different module"
    ),
}
