# -*- coding: utf-8 -*-
"""Module for BlobFS class.
"""

import io
import logging
import os
import pathlib
import shutil
import weakref
from tempfile import NamedTemporaryFile

import attr

from .fingerprint import coerce_key
from .fingerprint import HEXCHARS
from .fingerprint import HEXDIGESTLEN

logger = logging.getLogger(__name__)


def fsync_dir(path):
    fd = os.open(path, os.O_RDONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


@attr.s(auto_attribs=True)
class BucketStats():
    """Usage of one bucket directory.

    Attributes:
        bucket (str): Bucket name, the leading hex chars of its fingerprints.
        size (int): Total bytes of the blobs in the bucket.
        count (int): Number of blobs in the bucket.
    """
    bucket: str
    size: int = 0
    count: int = 0


def discard_tempfile(tmp):
    tmp.close()
    try:
        os.unlink(tmp.name)
    except FileNotFoundError:
        pass


class BlobWriter():
    """Writable stream for one blob.

    Bytes go to a temporary file inside the blob store, created on the first
    write; :meth:`close` moves it into place so a reader never sees a partial
    blob. Closing a writer that was never written to stores nothing. Leaving
    a ``with`` block through an exception, or dropping the writer without
    closing it, discards the data instead.
    """

    def __init__(self, fs, fingerprint):
        self.fs = fs
        self.fingerprint = fingerprint
        self.filepath = fs.blobpath(fingerprint)
        self._tmp = None
        self._finalizer = None
        self.closed = False

    @property
    def name(self):
        if self._tmp is None:
            return None
        return self._tmp.name

    def readable(self):
        return False

    def writable(self):
        return True

    def write(self, data):
        if self.closed:
            raise ValueError('write to closed blob writer')
        if self._tmp is None:
            self._tmp = self.fs._mktemp()
            self._finalizer = weakref.finalize(self, discard_tempfile, self._tmp)
        return self._tmp.write(data)

    def flush(self):
        if not self.closed and self._tmp is not None:
            self._tmp.flush()

    def fsync(self):
        if self._tmp is None:
            return
        self._tmp.flush()
        os.fsync(self._tmp.fileno())

    def _finish(self):
        self.closed = True
        self.fs._release(self)
        if self._tmp is None:
            return False
        self._finalizer.detach()
        return True

    def discard(self):
        """Close without storing anything."""
        if self.closed:
            return
        if self._finish():
            discard_tempfile(self._tmp)

    def close(self):
        if self.closed:
            return
        if not self._finish():
            return
        try:
            self.fsync()
            self._tmp.close()
            self.fs._mvtemp(self._tmp, self.filepath)
        except Exception:
            discard_tempfile(self._tmp)
            raise

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if exc_type is not None:
            self.discard()
        else:
            self.close()


@attr.s(auto_attribs=True)
class BlobFS():
    """Bucketed blob store addressed by fingerprint.

    Blobs live at ``root/<bucket>/<fingerprint>`` where the bucket is the
    first `width` hex digits of the fingerprint. Any key that is not a
    fingerprint is fingerprinted first.

    Attributes:
        root (str): Directory path used as root of storage space.
        width (int, optional): Hex digits per bucket name. Defaults to ``2``
            which gives 256 buckets.
        fmode (int, optional): File mode permission to set on stored blobs.
            Defaults to ``0o664``.
        dmode (int, optional): Directory mode permission to set for bucket
            directories. Defaults to ``0o755``.
    """
    root: str = attr.ib(converter=pathlib.Path)
    width: int = 2
    fmode: int = 0o664
    dmode: int = 0o755

    def __attrs_post_init__(self):
        self.root = self.root.resolve()
        self.tmproot = self.root / '_tmp'
        self._writers = weakref.WeakSet()
        if not 0 < self.width < HEXDIGESTLEN:
            raise ValueError('Invalid bucket width: {0}'.format(self.width))

    def _mktemp(self):
        """Create a named temporary file inside the store so moving it into
        place is a rename rather than a copy."""
        try:
            tmp = NamedTemporaryFile(delete=False, dir=self.tmproot, prefix='_tmp')
        except FileNotFoundError:
            os.makedirs(self.tmproot, self.dmode, exist_ok=True)
            tmp = NamedTemporaryFile(delete=False, dir=self.tmproot, prefix='_tmp')

        if self.fmode is not None:
            os.chmod(tmp.name, self.fmode)

        return tmp

    def _mvtemp(self, tmp, filepath):
        try:
            shutil.move(tmp.name, filepath)
        except FileNotFoundError:
            os.makedirs(filepath.parent, self.dmode, exist_ok=True)
            shutil.move(tmp.name, filepath)
        logger.debug('stored blob %s', filepath.name)

    def _release(self, writer):
        self._writers.discard(writer)

    def bucket(self, key):
        return coerce_key(key)[:self.width]

    def blobpath(self, key):
        """Build the file path for a given key.

        Args:
            key (str): Fingerprint, or any key to be fingerprinted.

        Returns:
            Path: An absolute file path.
        """
        fingerprint = coerce_key(key)
        return self.root / fingerprint[:self.width] / fingerprint

    def exists(self, key):
        """Check whether a blob exists on disk."""
        return self.blobpath(key).is_file()

    def open_read(self, key):
        """Return a readable binary stream for a stored blob.

        Raises:
            FileNotFoundError: If the blob doesn't exist.
        """
        return io.open(self.blobpath(key), 'rb')

    def open_write(self, key):
        """Return a :class:`BlobWriter` that stores the blob when closed."""
        writer = BlobWriter(self, coerce_key(key))
        self._writers.add(writer)
        return writer

    def unlink(self, key):
        """Delete a blob. Deleting a missing blob is not an error.

        Returns:
            bool: Whether a blob was removed.
        """
        realpath = self.blobpath(key)
        try:
            os.remove(realpath)
        except FileNotFoundError:
            logger.debug('blob %s already absent', realpath.name)
            return False
        return True

    def buckets(self):
        """Return generator over existing bucket directories."""
        if not self.root.is_dir():
            return
        for entry in sorted(os.listdir(self.root)):
            path = self.root / entry
            if len(entry) == self.width and set(entry) <= HEXCHARS and path.is_dir():
                yield path

    def _bucket_stats(self, path):
        stats = BucketStats(bucket=path.name)
        try:
            entries = os.listdir(path)
        except FileNotFoundError:
            return stats
        for entry in entries:
            stats.size += os.stat(path / entry).st_size
            stats.count += 1
        return stats

    def stat(self, key=None):
        """Return :class:`BucketStats` for every bucket, or only for the
        bucket holding `key`."""
        if key is not None:
            return [self._bucket_stats(self.root / self.bucket(key))]
        return [self._bucket_stats(path) for path in self.buckets()]

    def flush(self):
        """Force buffered blob data of open writers and bucket directory
        entries to disk."""
        for writer in list(self._writers):
            writer.fsync()
        for path in self.buckets():
            fsync_dir(path)
        logger.debug('flushed %s open writers', len(self._writers))

    def files(self):
        """Return generator that yields all blob paths."""
        for path in self.buckets():
            for entry in os.listdir(path):
                yield path / entry

    def __contains__(self, key):
        return self.exists(key)

    def __iter__(self):
        return self.files()
