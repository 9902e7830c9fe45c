"""Errors raised by the build tools.

Every fatal condition is an EToolsError subclass so the command line
can log it and exit with a non-zero status.
"""


class EToolsError(RuntimeError):
    """Base class for fatal build tools errors."""


class InputValidationError(EToolsError):
    """The user provided malformed input."""


class PreconditionError(EToolsError):
    """The environment is not in a state where we can proceed."""


class CommandFailedError(EToolsError):
    """An external command exited with a failure status."""

    def __init__(self, message: str, *, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class IntegrityError(EToolsError):
    """A downloaded artifact does not match its expected checksum."""


class DownloadError(EToolsError):
    """We could not download an artifact."""


class AuthError(EToolsError):
    """We could not obtain usable credentials."""


class GitHubError(EToolsError):
    """The GitHub API returned an error."""
