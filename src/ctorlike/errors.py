"""Custom exceptions for ctorlike."""


class CtorlikeError(Exception):
    """Base exception for all ctorlike errors."""

    pass


class ConfigError(CtorlikeError):
    """Raised when an explicit configuration file cannot be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load config from {path}: {reason}")


class TreeFormatError(CtorlikeError):
    """Raised when a tree document cannot be turned into a declaration tree."""

    def __init__(self, location: str, reason: str):
        self.location = location
        self.reason = reason
        super().__init__(f"Invalid tree document at {location}: {reason}")


class InvalidSchemaVersionError(CtorlikeError):
    """Raised when a tree document has an unsupported schema version."""

    def __init__(self, found: int, supported: int):
        self.found = found
        self.supported = supported
        super().__init__(
            f"Unsupported schema version {found}. This tool supports version {supported}."
        )


class TreeNotFoundError(CtorlikeError):
    """Raised when a tree document doesn't exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Tree document not found: {path}")


class MalformedTreeError(CtorlikeError):
    """Raised when the declaration tree violates the front end's contract.

    These are not user mistakes in the analyzed code: they mean the tree
    handed over is inconsistent, so the whole analysis run is aborted.
    """

    def __init__(self, ref: str, reason: str):
        self.ref = ref
        self.reason = reason
        super().__init__(f"Malformed declaration tree at {ref}: {reason}")
