# -*- coding: utf-8 -*-
"""Exceptions raised by shardstore.

Failures of the blob store and of plain metadata file I/O are not wrapped:
the underlying ``OSError`` reaches the caller unchanged. Only the cases a
caller has to tell apart get their own type.
"""


class StorageError(Exception):
    """Base class for shardstore errors."""


class NotFoundError(StorageError, FileNotFoundError):
    """No metadata record exists for the requested key."""

    @classmethod
    def from_oserror(cls, error):
        return cls(error.errno, error.strerror, error.filename)


class MalformedRecordError(NotFoundError):
    """A metadata record exists but could not be parsed."""


class ConfigurationError(StorageError, ValueError):
    """The storage root is unusable, e.g. it is not a directory."""
