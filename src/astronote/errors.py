"""Exceptions raised by astronote.

Every exception derives from :class:`Error`, so callers such as the CLI can report any failure with one handler.
"""


class Error(Exception):
    """Base class for astronote errors.

    .. attribute:: message
    .. attribute:: path

       The note identity or filesystem path the error concerns, if any.

    .. attribute:: cause

       The underlying exception, if any.
    """
    def __init__(self, message: str, path: str = None, cause: BaseException = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.cause = cause

    def __str__(self):
        if self.path is None:
            return self.message
        return f'{self.message}: {self.path}'


class NotFoundError(Error):
    """Raised when a note or file does not exist."""


class InvalidIdentityError(Error):
    """Raised when a path cannot be used as a note identity."""


class OutsideRootError(InvalidIdentityError):
    """Raised when a path does not lie under the configured root directory."""


class SerializationError(Error):
    """Raised when stored note data is malformed, oversized, or cannot be encoded."""


class UnknownSchedulerError(SerializationError):
    """Raised when stored scheduler state names an algorithm that is not registered."""


class ArithmeticOverflowError(Error):
    """Raised when a due date would fall outside the range :class:`datetime.datetime` can represent."""


class StorageError(Error):
    """Raised when the underlying database or filesystem fails."""


class ConfigError(Error):
    """Raised when the configuration file is missing or invalid."""


class EditorError(Error):
    """Raised when the editor used for reviewing a note cannot be run or exits unsuccessfully."""
