# -*- coding: utf-8 -*-
"""Abstract storage contract implemented by the adapters."""

import abc
from collections.abc import Mapping

from .item import StorageItem


def as_item(item):
    if isinstance(item, StorageItem):
        return item
    if isinstance(item, Mapping):
        return StorageItem.from_record(item)
    raise TypeError('Invalid storage item supplied: {0!r}'.format(item))


class StorageAdapter(abc.ABC):
    """Get/put/delete/size/keys interface over some storage backend.

    Subclasses implement the underscored hooks. The public methods only
    normalize arguments and results, every error from a hook reaches the
    caller unchanged.
    """

    def get(self, key):
        """Return the :class:`StorageItem` for `key` with its shard stream
        attached.

        Raises:
            NotFoundError: If no record is stored for `key`.
        """
        return as_item(self._get(key))

    def peek(self, key):
        """Return the :class:`StorageItem` for `key` without a shard stream."""
        return as_item(self._peek(key))

    def put(self, key, item):
        """Store `item` under `key`, replacing any previous record."""
        self._put(key, as_item(item))

    def delete(self, key):
        """Remove the blob and the record for `key`."""
        self._del(key)

    def flush(self):
        return self._flush()

    def size(self, key=None):
        """Return used space in bytes, for one key or the whole store."""
        return self._size(key)

    def keys(self):
        """Return a lazy, single pass iterator over the stored keys."""
        return self._keys()

    def open(self):
        self._open()

    def close(self):
        self._close()

    @abc.abstractmethod
    def _get(self, key):
        pass

    @abc.abstractmethod
    def _peek(self, key):
        pass

    @abc.abstractmethod
    def _put(self, key, item):
        pass

    @abc.abstractmethod
    def _del(self, key):
        pass

    @abc.abstractmethod
    def _flush(self):
        pass

    @abc.abstractmethod
    def _size(self, key=None):
        pass

    @abc.abstractmethod
    def _keys(self):
        pass

    @abc.abstractmethod
    def _open(self):
        pass

    @abc.abstractmethod
    def _close(self):
        pass
