"""Custom exceptions for json-secure-logger.

This module defines the exception hierarchy used throughout the
json_secure_logger package. Nothing raised from here ever escapes
``RequestLogger.log``; these cover precondition failures around it.
"""


class JsonSecureLoggerError(Exception):
    """Base exception for all json-secure-logger errors.

    All custom exceptions in the json_secure_logger package inherit from
    this class, allowing for broad exception catching when needed.

    Attributes:
        message: A human-readable description of the error.
    """

    def __init__(self, message: str = "An error occurred in json-secure-logger") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: A description of the error that occurred.
        """
        self.message = message
        super().__init__(self.message)


class ConfigurationError(JsonSecureLoggerError):
    """Raised when the logger configuration is invalid.

    This exception is raised when settings cannot be loaded or
    contain values the emitter cannot work with.
    """

    def __init__(self, message: str = "Configuration error") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: A description of the configuration error.
        """
        super().__init__(message)


class InvocationNotStartedError(JsonSecureLoggerError):
    """Raised when a tracking point is recorded without an active invocation."""

    def __init__(
        self, message: str = "start_invocation() must be called before track_point()"
    ) -> None:
        super().__init__(message)


class InvalidMetadataError(JsonSecureLoggerError):
    """Raised when invocation metadata has an unusable shape.

    Attributes:
        field: The offending metadata field, if one can be named.
    """

    def __init__(
        self,
        message: str = "Invalid invocation metadata",
        field: str | None = None,
    ) -> None:
        """Initialize the exception with an optional message and field name.

        Args:
            message: A description of the metadata error.
            field: Name of the metadata field that was rejected.
        """
        self.field = field
        super().__init__(message)
