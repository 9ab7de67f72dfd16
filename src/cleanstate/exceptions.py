#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the cleanstate library.

This module defines specialized exception classes for the error conditions
that can occur while canonicalizing, persisting and reloading a document, and
while delivering annotation overlays.

Exception Hierarchy
-------------------
- CleanStateError (base exception)

  - ValidationError (parameter/configuration validation)

  - DeserializationError (malformed or schema-mismatched persisted JSON)

  - StorageError (key-value store unavailable, quota exceeded)

  - SubscriberError (an overlay callback raised)

  - TransformError (tree rewriting contract violations)

Only TransformError is meant to escape to callers at runtime. The other
errors are recovered where they occur and reported through logging.

"""

from typing import Any


class CleanStateError(Exception):
    """Base exception class for all cleanstate-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(CleanStateError):
    """Exception raised for invalid input parameters or configuration values.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class DeserializationError(CleanStateError):
    """Exception raised when persisted document JSON cannot be turned into a tree.

    Covers both syntactically invalid JSON and JSON whose structure does not
    match the node schema (missing ``type``, unknown node types, wrong field
    types).

    Parameters
    ----------
    message : str
        Description of the failure
    payload_excerpt : str, optional
        Leading part of the offending payload, for diagnostics
    original_error : Exception, optional
        The underlying exception

    """

    def __init__(
        self,
        message: str,
        payload_excerpt: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the deserialization error."""
        super().__init__(message, original_error)
        self.payload_excerpt = payload_excerpt


class StorageError(CleanStateError):
    """Exception raised when the key-value store fails.

    Parameters
    ----------
    message : str
        Description of the failure
    key : str, optional
        Storage key involved in the failed operation
    operation : str, optional
        One of ``"get"``, ``"set"`` or ``"delete"``
    original_error : Exception, optional
        The underlying exception (typically an OSError)

    """

    def __init__(
        self,
        message: str,
        key: str | None = None,
        operation: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the storage error."""
        super().__init__(message, original_error)
        self.key = key
        self.operation = operation


class SubscriberError(CleanStateError):
    """Exception describing a failed overlay callback.

    The channel builds this error for logging purposes only; it is never
    raised to the publisher.

    Parameters
    ----------
    message : str
        Description of the failure
    subscriber_key : str, optional
        Key the failing callback was registered under
    original_error : Exception, optional
        The exception raised by the callback

    """

    def __init__(
        self,
        message: str,
        subscriber_key: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the subscriber error."""
        super().__init__(message, original_error)
        self.subscriber_key = subscriber_key


class TransformError(CleanStateError):
    """Exception raised when a tree rewriting pass meets an ill-formed tree.

    Parameters
    ----------
    message : str
        Description of the transform failure
    transform_name : str, optional
        Name of the transform that failed
    original_error : Exception, optional
        The underlying exception that caused the transform failure

    """

    def __init__(self, message: str, transform_name: str | None = None, original_error: Exception | None = None):
        """Initialize the transform error."""
        super().__init__(message, original_error)
        self.transform_name = transform_name


__all__ = [
    "CleanStateError",
    "ValidationError",
    "DeserializationError",
    "StorageError",
    "SubscriberError",
    "TransformError",
]
