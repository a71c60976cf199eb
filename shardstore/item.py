# -*- coding: utf-8 -*-
"""Module for the StorageItem record."""

import attr

FIELDS = ('hash', 'shard', 'contracts', 'trees', 'challenges', 'meta', 'fskey')


@attr.s(auto_attribs=True)
class StorageItem():
    """Everything known about one stored item.

    On disk only the metadata survives: ``shard`` is always written as
    ``None``. After a :meth:`StorageAdapter.get` it holds an open byte
    stream into the blob store.

    Attributes:
        hash (str): Content key the item is stored under.
        shard (obj, optional): Readable or writable stream to the blob data.
        contracts (dict): Contract data, keyed by node.
        trees (dict): Public audit records, keyed by node.
        challenges (dict): Private audit records, keyed by node.
        meta (dict): Free form caller data.
        fskey (str, optional): Fingerprint of the blob in the blob store.
        extra (dict): Unknown fields found in a loaded record, written back
            unchanged.
    """
    hash: str = None
    shard: object = None
    contracts: dict = attr.ib(factory=dict)
    trees: dict = attr.ib(factory=dict)
    challenges: dict = attr.ib(factory=dict)
    meta: dict = attr.ib(factory=dict)
    fskey: str = None
    extra: dict = attr.ib(factory=dict)

    @classmethod
    def from_record(cls, record):
        """Build an item from a parsed metadata mapping."""
        known = {name: record[name] for name in FIELDS if name in record}
        extra = {name: value for name, value in record.items() if name not in FIELDS}
        return cls(extra=extra, **known)

    def to_record(self):
        """Return the mapping stored on disk, without shard data."""
        record = dict(self.extra)
        for name in FIELDS:
            record[name] = getattr(self, name)
        record['shard'] = None
        return record
