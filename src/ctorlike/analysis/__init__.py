"""Pseudo-constructor analysis for ctorlike."""

from .finder import ConstructorLikeFinder, find_pseudo_constructors
from .index import PseudoConstructorIndex
from .resolution import Found, Invalid, resolve
from .result import FinderResult, PseudoConstructor, Rejection
from .validation import Validation

__all__ = [
    # Entry points
    "ConstructorLikeFinder",
    "find_pseudo_constructors",
    # Classification
    "resolve",
    "Found",
    "Invalid",
    "Validation",
    # Results
    "FinderResult",
    "PseudoConstructor",
    "PseudoConstructorIndex",
    "Rejection",
]
