"""Helpers to log fatal errors and convert them to exit codes."""

from __future__ import annotations

import logging

from .errors import EToolsError

log = logging.getLogger("etools")


class Interceptor:
    """
    Context manager to intercept fatal errors.

    Use as a context manager:

        interceptor = Interceptor()
        with interceptor:
            func()
        sys.exit(interceptor.exitcode())

    EToolsError exceptions are logged and suppressed and the failed
    field tells you whether one occurred. Any other exception
    propagates, so programming errors keep their traceback.
    """

    def __init__(self):
        self.failed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if exc_type is None:
            return False
        if not issubclass(exc_type, EToolsError):
            return False
        log.error("%s", exc_value)
        _ = traceback
        self.failed = True
        return True  # suppress the exception

    def exitcode(self) -> int:
        """
        Return the exitcode to pass to sys.exit.

        Zero on success, 1 on failure.
        """
        return int(self.failed)
