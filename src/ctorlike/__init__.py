"""ctorlike - find functions that should be documented as constructors."""

__version__ = "0.1.0"
