"""
Exception classes for the XML store.

Every error also derives from the closest builtin so callers that only
know about ValueError / FileNotFoundError keep working.
"""

from typing import Any, Dict


class StoreError(Exception):
    """Base exception for all xml_store errors."""

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a JSON-serializable dictionary."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": {k: str(v) for k, v in self.context.items()},
        }


class InvalidArgumentError(StoreError, ValueError):
    """Null item collections, empty workspace paths, half-specified filters."""


class TypeMismatchError(StoreError, TypeError):
    """A registered type is neither a Container nor a Record."""


class ResolutionError(StoreError, LookupError):
    """No container or collection field could be derived for a record type."""


class NotFoundError(StoreError, FileNotFoundError):
    """A container document or archive file does not exist."""


class FormatError(StoreError, ValueError):
    """A document or archive cannot be parsed into the expected shape."""


class UidExhaustedError(StoreError, RuntimeError):
    """No unique identifier could be generated within the attempt budget."""
