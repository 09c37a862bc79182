"""Custom exceptions for readpub."""


class ReadpubError(Exception):
    """Base exception for all readpub errors."""

    pass


class InvalidUrlError(ReadpubError):
    """Exception raised when no document identity can be derived from a URL."""

    pass


class StorageError(ReadpubError):
    """Exception raised when a workspace directory or artifact cannot be written."""

    pass


class FetchError(ReadpubError):
    """Exception raised when raw page content cannot be retrieved."""

    pass


class ConversionError(ReadpubError):
    """Exception raised when the document converter fails."""

    pass
