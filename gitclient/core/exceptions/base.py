# gitclient/core/exceptions/base.py

"""
Base exception hierarchy for the git client.

Every failure raised by a command, a backend or the process layer is a
``GitException``. Callers that only want to know "did the git operation
fail" catch the root class; callers that need to react to a specific
failure (a timeout, a protocol the embedded backend cannot speak, an old
git binary) catch the subclass.
"""

from typing import Any


class GitException(Exception):
    """
    Base exception class for all git client errors.

    Attributes:
        message: The error message describing what went wrong
        error_code: Error code for programmatic error handling
        details: Dictionary containing additional error details
        original_error: Optional reference to the exception that caused this error
    """

    default_error_code = "GIT_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error message
            error_code: Optional error code for programmatic handling
            details: Optional additional error details
            original_error: Optional original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        self.original_error = original_error

    def __str__(self) -> str:
        """Return the plain error message."""
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for serialization.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
            "original_error": str(self.original_error) if self.original_error else None,
        }


class ConfigurationError(GitException):
    """
    Exception raised for invalid or missing command options.

    Raised before any I/O happens, either while a command validates its
    options or while a client or setting is being configured.
    """

    default_error_code = "CONFIGURATION"


class CommandAlreadyExecutedError(ConfigurationError):
    """Raised when ``execute()`` is called twice on the same command."""

    default_error_code = "ALREADY_EXECUTED"


class ProcessFailedError(GitException):
    """
    Exception raised when the git executable exits with a non-zero status.

    The message embeds the full argument list and the captured error
    stream so the failure can be diagnosed from the log alone.
    """

    default_error_code = "PROCESS_FAILED"

    def __init__(
        self,
        message: str,
        args: list[str] | None = None,
        exit_code: int | None = None,
        stdout: str = "",
        stderr: str = "",
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            details={"args": list(args or []), "exit_code": exit_code},
            original_error=original_error,
        )
        self.command_args = list(args or [])
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr


class GitTimeoutError(ProcessFailedError):
    """
    Exception raised when a git process did not finish within its timeout.

    The child process has already been killed when this is raised.
    """

    default_error_code = "TIMEOUT"

    def __init__(
        self,
        message: str,
        args: list[str] | None = None,
        timeout: int | None = None,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        super().__init__(message, args=args, stdout=stdout, stderr=stderr)
        self.timeout = timeout
        self.details["timeout"] = timeout


class UnsupportedProtocolError(GitException):
    """Exception raised when the embedded backend cannot handle a URL scheme."""

    default_error_code = "UNSUPPORTED_PROTOCOL"

    def __init__(self, url: str, original_error: Exception | None = None) -> None:
        super().__init__(
            f"unsupported protocol in URL {url}",
            details={"url": url},
            original_error=original_error,
        )
        self.url = url


class VersionTooOldError(GitException):
    """Exception raised when the git executable lacks a required capability."""

    default_error_code = "VERSION_TOO_OLD"

    def __init__(self, message: str, required: str, actual: str) -> None:
        super().__init__(message, details={"required": required, "actual": actual})
        self.required = required
        self.actual = actual


class CredentialMaterializationError(GitException):
    """
    Exception raised when a temporary credential artifact cannot be managed.

    Covers creating, writing, permissioning and deleting helper scripts,
    key files and known-hosts files.
    """

    default_error_code = "CREDENTIALS"


class GitLockFailedError(GitException):
    """Exception raised when git could not lock the repository index."""

    default_error_code = "LOCK_FAILED"


class UnsupportedCommandError(GitException):
    """Exception raised when a backend cannot honour a requested option."""

    default_error_code = "UNSUPPORTED_COMMAND"
