#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
map_benchmark.py
----------------

Times a few operations on both map engines filled with ``size`` integer
keys: a single insertion, a single lookup and a full begin-to-end walk.

Usage::

    map-benchmark [size] [--bucket-count N] [-v]
"""

from __future__ import annotations

import argparse
import logging
import time
from typing import Callable, List, Optional, Sequence, Tuple

from chained_hash_table import DEFAULT_BUCKET_COUNT, ChainedHashTable
from map_base import AbstractMap
from red_black_tree import RedBlackTree

logger = logging.getLogger(__name__)

PROBE_KEY = 666


def _elapsed_us(action: Callable[[], object]) -> float:
    start = time.perf_counter()
    action()
    return (time.perf_counter() - start) * 1_000_000


def _walk(m: AbstractMap) -> None:
    it = m.cbegin()
    end = m.cend()
    while it != end:
        it.advance()


def fill(m: AbstractMap, size: int, prefix: str) -> AbstractMap:
    for i in range(size):
        m[i] = f"{prefix}{i}"
    return m


def run(size: int, bucket_count: int = DEFAULT_BUCKET_COUNT) -> List[Tuple[str, float]]:
    """Return ``(label, microseconds)`` for every timed step."""
    logger.debug("filling maps with %d entries", size)
    tree = fill(RedBlackTree(), size, "tree")
    table = fill(ChainedHashTable(bucket_count=bucket_count), size, "hash")

    def insert_tree() -> None:
        tree[PROBE_KEY] = "Is this the real life?"

    def insert_table() -> None:
        table[PROBE_KEY] = "Is this just fantasy?"

    results = [
        ("Treemap add element time", _elapsed_us(insert_tree)),
        ("Hashmap add element time", _elapsed_us(insert_table)),
        ("Treemap get element value", _elapsed_us(lambda: tree.value_of(PROBE_KEY))),
        ("Hashmap get element value", _elapsed_us(lambda: table.value_of(PROBE_KEY))),
        ("Treemap iterate", _elapsed_us(lambda: _walk(tree))),
        ("Hashmap iterate", _elapsed_us(lambda: _walk(table))),
    ]
    logger.debug("benchmark finished")
    return results


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Time RedBlackTree and ChainedHashTable operations.")
    parser.add_argument("size", nargs="?", type=int, default=10000, help="number of keys to preload")
    parser.add_argument(
        "--bucket-count",
        type=int,
        default=DEFAULT_BUCKET_COUNT,
        help="bucket count of the hash table",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    if args.size < 0:
        logger.error("size must not be negative: %d", args.size)
        return 2

    try:
        results = run(args.size, args.bucket_count)
    except ValueError as exc:
        logger.error("%s", exc)
        return 2

    for label, micros in results:
        print(f"{label}: {micros:.0f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
