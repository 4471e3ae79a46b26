#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
chained_hash_table.py
---------------------

The unordered map engine: a fixed-size array of buckets, each bucket a
chain (Python list) of entries.  The bucket count is chosen at construction
time and never changes – there is no resizing or rehashing.

Features
~~~~~~~~
* O(1) bucket selection, O(chain length) scan inside the bucket
* everything from ``AbstractMap`` (``m[k] = v``, ``m[k]``, ``del m[k]``,
  ``k in m``, ``len(m)``, ``==``, iterators, copy / move)
* iteration visits buckets in index order, then each chain front to back;
  since the bucket is a pure function of the key, two tables with the same
  keys and configuration enumerate them in the same order

Typical usage
~~~~~~~~~~~~~
>>> from chained_hash_table import ChainedHashTable
>>> table = ChainedHashTable(bucket_count=8)
>>> table[1] = "one"
>>> table[9] = "nine"          # same bucket as 1
>>> table.bucket_sizes()[1]
2
>>> table.pop(1)
'one'
>>> len(table)
1
"""

from __future__ import annotations

import logging
from typing import (
    Any,
    Callable,
    Generator,
    Iterable,
    List,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from map_base import AbstractMap, MapIterator, Position
from map_errors import IteratorOutOfRange, NotFound

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")

DEFAULT_BUCKET_COUNT = 8192


class _Entry:
    __slots__ = ("key", "value")

    def __init__(self, key: Any, value: Any) -> None:
        self.key = key
        self.value = value

    def __repr__(self) -> str:
        return f"<{self.key!r}:{self.value!r}>"


class BucketIterator(MapIterator[K, V]):
    """
    Cursor identified by ``(bucket, slot)``.  The end position is anchored
    one past the last bucket.
    """

    __slots__ = ("_bucket", "_slot")

    def __init__(self, table: "ChainedHashTable[K, V]", bucket: int, slot: int = 0) -> None:
        at_end = bucket >= table._bucket_count
        super().__init__(table, Position.END if at_end else Position.ENTRY)
        self._bucket = table._bucket_count if at_end else bucket
        self._slot = 0 if at_end else slot

    def _entry(self) -> _Entry:
        return self._map._buckets[self._bucket][self._slot]

    def _same_position(self, other: MapIterator[K, V]) -> bool:
        return (
            self._bucket == other._bucket  # type: ignore[attr-defined]
            and self._slot == other._slot  # type: ignore[attr-defined]
        )

    def copy(self) -> "BucketIterator[K, V]":
        return BucketIterator(self._map, self._bucket, self._slot)

    def _step_forward(self) -> None:
        buckets = self._map._buckets
        if self._slot + 1 < len(buckets[self._bucket]):
            self._slot += 1
            return

        for index in range(self._bucket + 1, len(buckets)):
            if buckets[index]:
                self._bucket = index
                self._slot = 0
                return

        self._bucket = len(buckets)
        self._slot = 0
        self._state = Position.END

    def _step_backward(self) -> None:
        buckets = self._map._buckets
        if self._state is Position.ENTRY and self._slot > 0:
            self._slot -= 1
            return

        for index in range(self._bucket - 1, -1, -1):
            if buckets[index]:
                self._bucket = index
                self._slot = len(buckets[index]) - 1
                self._state = Position.ENTRY
                return

        raise IteratorOutOfRange("cannot retreat before the first entry")


class ChainedHashTable(AbstractMap[K, V]):
    """
    A map implemented as a chained hash table with a fixed bucket count.

    Parameters
    ----------
    items : iterable of (key, value) or another map, optional
        Initial contents; the last value wins for repeated keys.
    bucket_count : int, default ``DEFAULT_BUCKET_COUNT``
        Number of chains.  Fixed for the lifetime of the table.
    hash_fn : Callable[[K], int], default ``hash``
        Maps a key to an integer; reduced modulo ``bucket_count``.
    default_factory : callable, optional
        See ``AbstractMap``.
    """

    __slots__ = ("_buckets", "_bucket_count", "_hash_fn")

    def __init__(
        self,
        items: Optional[Union[AbstractMap[K, V], Iterable[Tuple[K, V]]]] = None,
        *,
        bucket_count: int = DEFAULT_BUCKET_COUNT,
        hash_fn: Callable[[K], int] = hash,
        default_factory: Optional[Callable[[], V]] = None,
    ) -> None:
        if isinstance(bucket_count, bool) or not isinstance(bucket_count, int):
            raise TypeError("bucket_count must be an int")
        if bucket_count < 1:
            raise ValueError("bucket_count must be at least 1")
        if not callable(hash_fn):
            raise TypeError("hash_fn must be callable")
        self._bucket_count = bucket_count
        self._hash_fn = hash_fn
        super().__init__(items, default_factory=default_factory)

    # ------------------------------------------------------------------
    #   State management
    # ------------------------------------------------------------------
    def _reset(self) -> None:
        self._buckets: List[List[_Entry]] = [[] for _ in range(self._bucket_count)]
        self._size = 0

    def _adopt(self, other: AbstractMap[K, V]) -> None:
        self._buckets = other._buckets  # type: ignore[attr-defined]
        self._bucket_count = other._bucket_count  # type: ignore[attr-defined]
        self._hash_fn = other._hash_fn  # type: ignore[attr-defined]

    def _empty_like(self) -> "ChainedHashTable[K, V]":
        return ChainedHashTable(
            bucket_count=self._bucket_count,
            hash_fn=self._hash_fn,
            default_factory=self._default_factory,
        )

    def clear(self) -> None:
        """Empty every chain; the bucket array itself is kept."""
        logger.debug("clearing ChainedHashTable with %d entries", self._size)
        for chain in self._buckets:
            chain.clear()
        self._size = 0

    # ------------------------------------------------------------------
    #   Bucket helpers
    # ------------------------------------------------------------------
    @property
    def bucket_count(self) -> int:
        return self._bucket_count

    def bucket_index(self, key: K) -> int:
        """Return the home bucket of *key*."""
        return self._hash_fn(key) % self._bucket_count

    def bucket_sizes(self) -> List[int]:
        """Return the chain length of every bucket."""
        return [len(chain) for chain in self._buckets]

    def _locate(self, key: K) -> Tuple[int, int]:
        """Return ``(bucket, slot)``; slot is -1 when *key* is absent."""
        index = self.bucket_index(key)
        for slot, entry in enumerate(self._buckets[index]):
            if entry.key == key:
                return index, slot
        return index, -1

    # ------------------------------------------------------------------
    #   Public engine primitives
    # ------------------------------------------------------------------
    def find(self, key: K) -> BucketIterator[K, V]:
        index, slot = self._locate(key)
        if slot < 0:
            return self.end()
        return BucketIterator(self, index, slot)

    def _insert(self, key: K, value: V) -> BucketIterator[K, V]:
        index = self.bucket_index(key)
        chain = self._buckets[index]
        chain.append(_Entry(key, value))
        self._size += 1
        return BucketIterator(self, index, len(chain) - 1)

    def _remove_key(self, key: K) -> None:
        index, slot = self._locate(key)
        if slot < 0:
            raise NotFound(key)
        del self._buckets[index][slot]
        self._size -= 1

    def begin(self) -> BucketIterator[K, V]:
        if self._size:
            for index, chain in enumerate(self._buckets):
                if chain:
                    return BucketIterator(self, index, 0)
        return self.end()

    def end(self) -> BucketIterator[K, V]:
        return BucketIterator(self, self._bucket_count)

    def _entries(self) -> Generator[Tuple[K, V], None, None]:
        for chain in self._buckets:
            for entry in chain:
                yield entry.key, entry.value
