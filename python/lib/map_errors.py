#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
map_errors.py
-------------

The two failure kinds shared by every map engine.

* ``NotFound``           – the key (or the key behind an iterator) is absent.
* ``IteratorOutOfRange`` – an iterator was dereferenced at the end position
  or moved past either boundary.

``NotFound`` derives from ``KeyError`` and ``IteratorOutOfRange`` from
``IndexError`` so callers used to ``dict`` / ``list`` semantics can keep
catching the built-in exception types.
"""

from __future__ import annotations


class MapError(Exception):
    """Base class for errors raised by the map engines."""


class NotFound(MapError, KeyError):
    """Raised by lookup or removal when the key does not exist."""

    def __init__(self, key: object) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"key {self.key!r} does not exist"


class IteratorOutOfRange(MapError, IndexError):
    """Raised when an iterator is used outside ``[begin, end)``."""
