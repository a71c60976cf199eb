# -*- coding: utf-8 -*-
"""Module for FileStorageAdapter class.
"""

import json
import logging
import os
import pathlib

import attr

from .blobfs import BlobFS
from .errors import ConfigurationError
from .errors import MalformedRecordError
from .errors import NotFoundError
from .fingerprint import fingerprint
from .storage import StorageAdapter

logger = logging.getLogger(__name__)

BLOB_DIRNAME = 'sharddata.kfs'
RECORD_DIRNAME = 'db'


def validate_path(path):
    """Create `path` if missing and make sure it is a directory.

    Raises:
        ConfigurationError: If `path` exists but is not a directory.
    """
    path = pathlib.Path(path)
    if not path.exists():
        os.makedirs(path, exist_ok=True)
    if not path.is_dir():
        raise ConfigurationError('Invalid directory path supplied: {0}'.format(path))
    return path


def validate_key(key):
    if not isinstance(key, str) or not key:
        raise ValueError('Invalid key: {0!r}'.format(key))
    if key in ('.', '..') or os.path.sep in key or '\0' in key or \
            (os.path.altsep and os.path.altsep in key):
        raise ValueError('Invalid key: "{0}" is not a plain file name'.format(key))
    return key


@attr.s(auto_attribs=True, eq=False)
class FileStorageAdapter(StorageAdapter):
    """Storage adapter keeping metadata in flat files and shard data in a
    :class:`BlobFS`.

    Layout under `root`::

        db/<key>         one JSON record per key
        sharddata.kfs/   blob store, addressed by each record's ``fskey``

    Attributes:
        root (str): Directory path used as root of storage space. Created
            if missing.
        width (int, optional): Bucket width handed to the blob store.
    """
    root: str = attr.ib(converter=pathlib.Path)
    width: int = 2

    def __attrs_post_init__(self):
        self.root = validate_path(self.root).resolve()
        self._fs = BlobFS(self.root / BLOB_DIRNAME, width=self.width)
        self._path = validate_path(self.root / RECORD_DIRNAME)
        self.is_open = True

    def _record_path(self, key):
        return self._path / validate_key(key)

    def _read_record(self, key):
        filepath = self._record_path(key)
        try:
            with open(filepath, 'rb') as handle:
                data = handle.read()
        except FileNotFoundError as e:
            raise NotFoundError.from_oserror(e) from e
        try:
            record = json.loads(data)
        except ValueError as e:
            raise MalformedRecordError(None, 'Malformed record: {0}'.format(e), str(filepath)) from e
        if not isinstance(record, dict):
            raise MalformedRecordError(None, 'Malformed record: not an object', str(filepath))
        if record.get('fskey') is not None and not isinstance(record['fskey'], str):
            raise MalformedRecordError(None, 'Malformed record: fskey is not a string', str(filepath))
        return record

    def _get(self, key):
        record = self._read_record(key)
        fskey = record.get('fskey') or key

        if self._fs.exists(fskey):
            record['shard'] = self._fs.open_read(fskey)
        else:
            # only this call sees the new fskey, the next put persists it
            fskey = fingerprint(key)
            record['fskey'] = fskey
            record['shard'] = self._fs.open_write(fskey)
        logger.debug('get %s: fskey %s', key, fskey)
        return record

    def _peek(self, key):
        return self._read_record(key)

    def _put(self, key, item):
        record = item.to_record()
        record['shard'] = None
        record['fskey'] = fingerprint(key)

        data = json.dumps(record, separators=(',', ':'))
        with open(self._record_path(key), 'w', encoding='utf-8') as handle:
            handle.write(data)
        logger.debug('put %s: fskey %s', key, record['fskey'])

    def _del(self, key):
        fskey = validate_key(key)
        try:
            record = self._peek(key)
        except OSError as e:
            logger.warning('delete %s: no usable record (%s), unlinking blob by key', key, e)
        else:
            if record.get('fskey'):
                fskey = record['fskey']

        # blob first: a failure here leaves the record so delete can be retried
        self._fs.unlink(fskey)

        filepath = self._record_path(key)
        try:
            os.unlink(filepath)
        except FileNotFoundError as e:
            raise NotFoundError.from_oserror(e) from e
        logger.debug('deleted %s: fskey %s', key, fskey)

    def _flush(self):
        return self._fs.flush()

    def _size(self, key=None):
        if key:
            stats = self._fs.stat(fingerprint(key))
        else:
            stats = self._fs.stat()
        return sum(stat.size for stat in stats)

    def _keys(self):
        for name in os.listdir(self._path):
            yield name

    def _open(self):
        self.is_open = True

    def _close(self):
        self.is_open = False

    def __contains__(self, key):
        try:
            self._peek(key)
        except (NotFoundError, ValueError):
            return False
        return True

    def __iter__(self):
        return self.keys()
