"""
Custom exceptions for the application.
"""


class BaseAppError(Exception):
    """Base exception class for application errors."""

    pass


class SessionUnavailableError(BaseAppError):
    """Exception raised when the privileged session cannot run commands."""

    pass


class SessionTimeoutError(BaseAppError):
    """Exception raised when a command did not complete within the configured timeout."""

    pass


class FileSystemError(BaseAppError):
    """Exception raised for filesystem provider errors."""

    pass


class ConfigurationError(BaseAppError):
    """Exception raised for configuration errors."""

    pass
