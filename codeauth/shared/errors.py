"""
Shared error handling for the CodeAuth SDK.

Only local precondition violations are raised as exceptions. Everything the
remote service (or the network) reports comes back as a result value.
"""

from typing import Dict, Any, Optional


class CodeAuthException(Exception):
    """Base exception for the CodeAuth SDK."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotInitializedError(CodeAuthException):
    """Raised when an operation runs before the client was initialized."""

    def __init__(self, message: str = "CodeAuth has not been initialized", details: Optional[Dict[str, Any]] = None):
        super().__init__("NOT_INITIALIZED", message, details)


class AlreadyInitializedError(CodeAuthException):
    """Raised on a second initialization attempt."""

    def __init__(self, message: str = "CodeAuth has already been initialized", details: Optional[Dict[str, Any]] = None):
        super().__init__("ALREADY_INITIALIZED", message, details)


class ConfigurationError(CodeAuthException):
    """Configuration-related errors."""

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)
