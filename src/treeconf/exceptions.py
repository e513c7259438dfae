"""Custom exceptions for TreeConf."""

from typing import Any, Optional


class TreeConfError(Exception):
    """Base exception for TreeConf errors."""

    pass


class BuildError(TreeConfError):
    """Raised when a value cannot be turned into a document node.

    Build errors are never fatal for a save: the builder drops the failing
    entry and keeps going with its siblings.
    """

    pass


class UnregisteredType(BuildError):
    """Raised when a serializable object's class has no registered alias."""

    def __init__(self, cls: type):
        self.cls = cls
        super().__init__(f"No alias registered for type {cls.__module__}.{cls.__qualname__}")


class UnsupportedValue(BuildError):
    """Raised when a value is neither a scalar, a collection nor serializable."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Cannot store value of type {type(value).__name__}: {value!r}")


class SerializationFailed(BuildError):
    """Raised when a serializable object's own ``serialize()`` fails."""

    def __init__(self, alias: str, cause: BaseException):
        self.alias = alias
        self.cause = cause
        super().__init__(f"Could not serialize object of type '{alias}': {cause}")


class ReconstructionError(TreeConfError):
    """Raised when a typed object in a document cannot be reconstructed."""

    def __init__(self, alias: Any, reason: str, fields: Optional[dict] = None):
        self.alias = alias
        self.reason = reason
        self.fields = fields
        super().__init__(f"Could not deserialize object of type '{alias}': {reason}")


class UnknownAlias(ReconstructionError):
    """Raised when a document names an alias nobody registered."""

    def __init__(self, alias: Any, fields: Optional[dict] = None):
        super().__init__(alias, "alias is not registered", fields)


class InvalidDocument(TreeConfError):
    """Raised when document text cannot be parsed into a tree."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message)
