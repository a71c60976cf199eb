# -*- coding: utf-8 -*-
"""shardstore is a file backed storage adapter for sharded items.

Each item is split in two:

- a small JSON metadata record per content key (contracts, audit trees,
  challenges) kept as a flat file, and
- the raw shard bytes, kept in a bucketed blob store under a fingerprint
  derived from the key.

Deletes remove the blob before the record, so a failure part way through
leaves a stale record that can be deleted again rather than unreachable
blob data.
"""

from .__meta__ import (
    __title__,
    __summary__,
    __version__,
    __author__,
    __license__
)

from .adapter import FileStorageAdapter
from .blobfs import BlobFS, BlobWriter, BucketStats
from .errors import StorageError, NotFoundError, MalformedRecordError, ConfigurationError
from .fingerprint import fingerprint
from .item import StorageItem
from .storage import StorageAdapter


__all__ = ('FileStorageAdapter', 'StorageAdapter', 'StorageItem', 'BlobFS',
           'BlobWriter', 'BucketStats', 'fingerprint', 'StorageError',
           'NotFoundError', 'MalformedRecordError', 'ConfigurationError')
