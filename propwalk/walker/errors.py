from typing import Optional


class WalkerError(Exception):
    """Base class for every error raised by the property walker."""


class SchemaError(WalkerError):
    """
    A property descriptor cannot be walked.

    Raised for an unknown or missing format, a Choice without options, duplicate
    sibling names or an invalid cardinality. Always fatal to the current walk.

    Args:
        message (str): What is wrong with the descriptor.
        property_name (str, optional): Name of the offending property.
    """

    def __init__(self, message: str, property_name: Optional[str] = None):
        self.property_name = property_name
        if property_name:
            message = f"[{property_name}] {message}"
        super().__init__(message)


class AdapterValidationError(WalkerError):
    """An answer did not fit the question. Never escapes a prompt adapter."""


class AbortedSession(WalkerError):
    """The user cancelled the session; the partially built tree must be discarded."""
