# -*- coding: utf-8 -*-
"""Fingerprints address blob data independently of the content key."""

import hashlib

ALGORITHM = 'ripemd160'
HEXDIGESTLEN = hashlib.new(ALGORITHM).digest_size * 2
HEXCHARS = set('0123456789abcdefABCDEF')


def fingerprint(key):
    """Return the hex RIPEMD-160 digest of `key`.

    Args:
        key (str or bytes): Content key.

    Returns:
        str: 40 lowercase hex digits.
    """
    if isinstance(key, str):
        key = bytes(key, 'UTF8')
    hasher = hashlib.new(ALGORITHM)
    hasher.update(key)
    return hasher.hexdigest()


def is_fingerprint(value):
    """Return whether `value` already looks like a fingerprint."""
    if not isinstance(value, str) or len(value) != HEXDIGESTLEN:
        return False
    return set(value) <= HEXCHARS


def coerce_key(key):
    """Map any key onto a valid blob address.

    Fingerprints pass through (lowercased), everything else is fingerprinted.
    """
    if is_fingerprint(key):
        return key.lower()
    return fingerprint(key)
