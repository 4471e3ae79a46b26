#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
map_base.py
-----------

The public contract shared by the map engines (``RedBlackTree`` and
``ChainedHashTable``) together with the glue that is identical for both.

An engine only has to provide a handful of primitives – ``find``,
``begin``, ``end``, ``_insert`` (for a key known to be absent),
``_remove_key`` and the state helpers ``_reset`` / ``_adopt`` /
``_empty_like`` – and inherits everything else:

* ``m[key] = value``        – insert or update
* ``m[key]`` / ``m.value_of(key)`` – lookup (``NotFound`` if missing)
* ``m.reference(key)``      – iterator on the entry, inserting a default
* ``m.setdefault(key, v)``  – insert only if absent, never replaces
* ``del m[key]`` / ``m.remove(key_or_iterator)``
* ``key in m``, ``len(m)``, ``m == other``
* ``m.begin()`` / ``m.end()`` bidirectional iterators
* ``m.copy()``, ``m.assign(other)``, ``m.move_from(other)``

Iterators are cursors, not Python iterators: they are moved with
``advance()`` / ``retreat()`` and compared with ``==``.  Plain Python
iteration (``for key in m``) is available on the map itself.
"""

from __future__ import annotations

import copy as _copy
import enum
import logging
from abc import ABC, abstractmethod
from typing import (
    Any,
    Callable,
    Generator,
    Generic,
    Iterable,
    List,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from map_errors import IteratorOutOfRange, NotFound

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")

M = TypeVar("M", bound="AbstractMap")


class Position(enum.Enum):
    """Logical state of an iterator."""

    ENTRY = "entry"
    END = "end"


class MapIterator(ABC, Generic[K, V]):
    """
    Bidirectional cursor over the entries of one map.

    Engines subclass it and supply the position bookkeeping; dereferencing,
    boundary checks and comparison live here.  Mutating the owning map
    invalidates every iterator obtained before the mutation.
    """

    __slots__ = ("_map", "_state")

    def __init__(self, owner: "AbstractMap[K, V]", state: Position) -> None:
        self._map = owner
        self._state = state

    # ------------------------------------------------------------------
    #   Engine hooks
    # ------------------------------------------------------------------
    @abstractmethod
    def _entry(self) -> Any:
        """Return the engine object holding ``key`` / ``value``."""

    @abstractmethod
    def _step_forward(self) -> None:
        """Move to the next position; only called when not at the end."""

    @abstractmethod
    def _step_backward(self) -> None:
        """Move to the previous position or raise ``IteratorOutOfRange``."""

    @abstractmethod
    def _same_position(self, other: "MapIterator[K, V]") -> bool:
        ...

    @abstractmethod
    def copy(self) -> "MapIterator[K, V]":
        """Return an independent cursor at the same position."""

    # ------------------------------------------------------------------
    #   Dereference
    # ------------------------------------------------------------------
    def at_end(self) -> bool:
        return self._state is Position.END

    def _checked_entry(self) -> Any:
        if self._state is Position.END:
            raise IteratorOutOfRange("iterator is at the end position")
        return self._entry()

    @property
    def key(self) -> K:
        return self._checked_entry().key

    @property
    def value(self) -> V:
        return self._checked_entry().value

    @value.setter
    def value(self, value: V) -> None:
        self._checked_entry().value = value

    def item(self) -> Tuple[K, V]:
        """Return the ``(key, value)`` pair under the cursor."""
        entry = self._checked_entry()
        return entry.key, entry.value

    # ------------------------------------------------------------------
    #   Movement
    # ------------------------------------------------------------------
    def advance(self) -> "MapIterator[K, V]":
        """Step to the next entry (or to the end position) in place."""
        if self._state is Position.END:
            raise IteratorOutOfRange("cannot advance past the end")
        self._step_forward()
        return self

    def retreat(self) -> "MapIterator[K, V]":
        """Step to the previous entry in place."""
        self._step_backward()
        return self

    def next(self) -> "MapIterator[K, V]":
        return self.copy().advance()

    def prev(self) -> "MapIterator[K, V]":
        return self.copy().retreat()

    # ------------------------------------------------------------------
    #   Comparison
    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MapIterator):
            return NotImplemented
        if self._map is not other._map or self._state is not other._state:
            return False
        return self._state is Position.END or self._same_position(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._state is Position.END:
            return f"<{type(self).__name__} end>"
        entry = self._entry()
        return f"<{type(self).__name__} {entry.key!r}:{entry.value!r}>"


class AbstractMap(ABC, Generic[K, V]):
    """
    Key/value map contract implemented by every engine.

    Parameters
    ----------
    items : iterable of (key, value) or another map, optional
        Initial contents.  Keys need not be unique – the last value wins.
    default_factory : callable, optional
        Produces the value stored by ``reference(key)`` for a missing key.
        ``None`` (the default) stores ``None``.
    """

    __slots__ = ("_default_factory", "_size")

    def __init__(
        self,
        items: Optional[Union["AbstractMap[K, V]", Iterable[Tuple[K, V]]]] = None,
        default_factory: Optional[Callable[[], V]] = None,
    ) -> None:
        if default_factory is not None and not callable(default_factory):
            raise TypeError("default_factory must be callable or None")
        self._default_factory = default_factory
        self._size: int = 0
        self._reset()

        if items is not None:
            self._load(items)
        logger.debug("created %s with %d entries", type(self).__name__, self._size)

    # ------------------------------------------------------------------
    #   Engine primitives
    # ------------------------------------------------------------------
    @abstractmethod
    def _reset(self) -> None:
        """Put the map into its canonical empty state."""

    @abstractmethod
    def _adopt(self, other: "AbstractMap[K, V]") -> None:
        """Take over the storage of *other* without copying it."""

    @abstractmethod
    def _empty_like(self: M) -> M:
        """Return a new empty map with the same configuration."""

    @abstractmethod
    def _insert(self, key: K, value: V) -> MapIterator[K, V]:
        """Insert *key*, which must not be present yet."""

    @abstractmethod
    def _remove_key(self, key: K) -> None:
        """Remove *key* or raise ``NotFound`` leaving the map untouched."""

    @abstractmethod
    def find(self, key: K) -> MapIterator[K, V]:
        """Return an iterator at *key*, or ``end()`` if it is absent."""

    @abstractmethod
    def begin(self) -> MapIterator[K, V]:
        ...

    @abstractmethod
    def end(self) -> MapIterator[K, V]:
        ...

    def cbegin(self) -> MapIterator[K, V]:
        return self.begin()

    def cend(self) -> MapIterator[K, V]:
        return self.end()

    # ------------------------------------------------------------------
    #   Size
    # ------------------------------------------------------------------
    def get_size(self) -> int:
        return self._size

    def is_empty(self) -> bool:
        return self._size == 0

    def __len__(self) -> int:
        return self._size

    # ------------------------------------------------------------------
    #   Lookup / insertion
    # ------------------------------------------------------------------
    def _default(self) -> Optional[V]:
        if self._default_factory is None:
            return None
        return self._default_factory()

    def reference(self, key: K) -> MapIterator[K, V]:
        """
        Return an iterator on *key*'s entry, inserting the default value
        first if the key is absent.  Writing ``it.value = x`` updates the
        stored value in place.
        """
        it = self.find(key)
        if it.at_end():
            it = self._insert(key, self._default())  # type: ignore[arg-type]
        return it

    def setdefault(self, key: K, default: Optional[V] = None) -> V:
        """Insert *key* with *default* unless present; return the stored value."""
        it = self.find(key)
        if it.at_end():
            it = self._insert(key, default)  # type: ignore[arg-type]
        return it.value

    def value_of(self, key: K) -> V:
        it = self.find(key)
        if it.at_end():
            raise NotFound(key)
        return it.value

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        it = self.find(key)
        if it.at_end():
            return default
        return it.value

    def __getitem__(self, key: K) -> V:
        return self.value_of(key)

    def __setitem__(self, key: K, value: V) -> None:
        """Insert *key* with *value* or replace the existing value."""
        self.reference(key).value = value

    def __contains__(self, key: object) -> bool:
        return not self.find(key).at_end()  # type: ignore[arg-type]

    # ------------------------------------------------------------------
    #   Removal
    # ------------------------------------------------------------------
    def remove(self, target: Union[K, MapIterator[K, V]]) -> None:
        """
        Remove the entry for a key, or for the key under an iterator.

        Raises ``NotFound`` if the key is absent and ``IteratorOutOfRange``
        for an iterator at the end position.
        """
        if isinstance(target, MapIterator):
            key = target.key
        else:
            key = target
        self._remove_key(key)

    def __delitem__(self, key: K) -> None:
        self._remove_key(key)

    def pop(self, key: K) -> V:
        """Remove *key* and return the value it held."""
        value = self.value_of(key)
        self._remove_key(key)
        return value

    def clear(self) -> None:
        logger.debug("clearing %s with %d entries", type(self).__name__, self._size)
        self._reset()

    # ------------------------------------------------------------------
    #   Iteration
    # ------------------------------------------------------------------
    def _entries(self) -> Generator[Tuple[K, V], None, None]:
        it = self.begin()
        while not it.at_end():
            yield it.item()
            it.advance()

    def __iter__(self) -> Generator[K, None, None]:
        for key, _ in self._entries():
            yield key

    def __reversed__(self) -> Generator[K, None, None]:
        it = self.end()
        for _ in range(self._size):
            it.retreat()
            yield it.key

    def keys(self) -> List[K]:
        return list(self)

    def values(self) -> List[V]:
        return [value for _, value in self._entries()]

    def items(self) -> List[Tuple[K, V]]:
        return list(self._entries())

    # ------------------------------------------------------------------
    #   Copy / move
    # ------------------------------------------------------------------
    def _load(self, items: Union["AbstractMap[K, V]", Iterable[Tuple[K, V]]]) -> None:
        if isinstance(items, AbstractMap):
            pairs: Iterable[Tuple[K, V]] = items.items()
        elif hasattr(items, "items"):
            pairs = items.items()  # type: ignore[union-attr]
        else:
            pairs = items
        for key, value in pairs:
            self[key] = value

    def copy(self: M) -> M:
        """Return an independent map holding the same entries."""
        clone = self._empty_like()
        for key, value in self._entries():
            clone._insert(key, value)
        logger.debug("copied %s with %d entries", type(self).__name__, self._size)
        return clone

    def __copy__(self: M) -> M:
        return self.copy()

    def __deepcopy__(self: M, memo: dict) -> M:
        clone = self._empty_like()
        memo[id(self)] = clone
        for key, value in self._entries():
            clone._insert(_copy.deepcopy(key, memo), _copy.deepcopy(value, memo))
        return clone

    def assign(self: M, other: "AbstractMap[K, V]") -> M:
        """Replace the contents of this map with a copy of *other*'s."""
        if other is self:
            return self
        self.clear()
        self._load(other)
        return self

    def move_from(self: M, other: M) -> M:
        """Take over *other*'s entries and leave *other* empty."""
        if other is self:
            return self
        if type(other) is not type(self):
            raise TypeError(
                f"cannot move a {type(other).__name__} into a {type(self).__name__}"
            )
        self._adopt(other)
        self._default_factory = other._default_factory
        self._size = other._size
        other._reset()
        logger.debug("moved %d entries into %s", self._size, type(self).__name__)
        return self

    @classmethod
    def moved_from(cls, other):
        """Build a new map owning *other*'s entries; *other* is left empty."""
        if not isinstance(other, cls):
            raise TypeError(f"expected a {cls.__name__}, got {type(other).__name__}")
        return other._empty_like().move_from(other)

    # ------------------------------------------------------------------
    #   Equality
    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        """Equal sizes and equal entries pairwise in iteration order."""
        if type(other) is not type(self):
            return NotImplemented
        if self._size != other._size:  # type: ignore[attr-defined]
            return False
        for mine, theirs in zip(self._entries(), other._entries()):  # type: ignore[attr-defined]
            if mine[0] != theirs[0] or mine[1] != theirs[1]:
                return False
        return True

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {v!r}" for k, v in self._entries())
        return f"{type(self).__name__}({{{items}}})"
