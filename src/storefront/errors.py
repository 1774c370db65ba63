"""Exceptions raised by the storefront file service and its storage providers."""


class FileServiceError(Exception):
    """Base class for file service failures."""


class StorageFailure(FileServiceError):
    """A directory could not be created or deleted, or a provider write failed."""


class InvalidOperation(FileServiceError):
    """The caller asked for something the work area does not allow.

    Raised when a file is outside the work area or does not exist.
    """
