#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
test_chained_hash_table.py
--------------------------

Exercises the ChainedHashTable engine:

* colliding keys sharing one chain
* iteration order (bucket index ascending, then chain order) both ways
* iterator boundaries across empty buckets
* configuration validation and the fixed bucket array
"""

import random
import unittest

from chained_hash_table import DEFAULT_BUCKET_COUNT, ChainedHashTable
from map_errors import IteratorOutOfRange, NotFound


class TestChainedHashTable(unittest.TestCase):
    def test_defaults(self):
        table = ChainedHashTable()
        self.assertEqual(table.bucket_count, DEFAULT_BUCKET_COUNT)
        self.assertTrue(table.is_empty())
        self.assertEqual(sum(table.bucket_sizes()), 0)

    def test_colliding_keys(self):
        table = ChainedHashTable[int, str](bucket_count=8)
        for key in (3, 11, 19):
            table[key] = f"v{key}"

        self.assertEqual(len({table.bucket_index(k) for k in (3, 11, 19)}), 1)
        self.assertEqual(table.bucket_sizes()[3], 3)
        for key in (3, 11, 19):
            self.assertEqual(table.find(key).value, f"v{key}")
            self.assertEqual(table.value_of(key), f"v{key}")

        table.remove(11)
        self.assertEqual(len(table), 2)
        self.assertEqual(table.value_of(3), "v3")
        self.assertEqual(table.value_of(19), "v19")
        self.assertTrue(table.find(11).at_end())
        with self.assertRaises(NotFound):
            table.value_of(11)

    def test_failed_remove_leaves_table_untouched(self):
        table = ChainedHashTable[int, str]([(1, "a"), (9, "b")], bucket_count=8)
        with self.assertRaises(NotFound):
            table.remove(17)  # same bucket, absent key
        self.assertEqual(len(table), 2)
        self.assertEqual(table.items(), [(1, "a"), (9, "b")])

    def test_iteration_order(self):
        table = ChainedHashTable[int, str](bucket_count=8)
        for key in (9, 6, 1, 2):
            table[key] = str(key)

        # bucket 1 holds [9, 1] in insertion order, then bucket 2, then bucket 6
        self.assertEqual(list(table), [9, 1, 2, 6])
        self.assertEqual(list(reversed(table)), [6, 2, 1, 9])

        keys = []
        it = table.cbegin()
        while it != table.cend():
            keys.append(it.key)
            it.advance()
        self.assertEqual(keys, [9, 1, 2, 6])

    def test_backward_walk_crosses_buckets(self):
        table = ChainedHashTable[int, int](bucket_count=16)
        keys = [0, 16, 5, 21, 15]
        for key in keys:
            table[key] = key

        it = table.end()
        seen = []
        for _ in range(len(table)):
            seen.append(it.retreat().key)
        self.assertEqual(seen, [15, 21, 5, 16, 0])
        self.assertEqual(it, table.begin())
        with self.assertRaises(IteratorOutOfRange):
            it.retreat()
        self.assertEqual(it.key, 0)

    def test_iterator_boundaries(self):
        table = ChainedHashTable[int, str]([(4, "d")], bucket_count=8)
        it = table.begin()
        self.assertEqual(it.item(), (4, "d"))
        it.advance()
        self.assertEqual(it, table.end())
        with self.assertRaises(IteratorOutOfRange):
            it.advance()
        with self.assertRaises(IteratorOutOfRange):
            it.value

    def test_empty_table_iterators(self):
        table = ChainedHashTable(bucket_count=4)
        self.assertEqual(table.begin(), table.end())
        with self.assertRaises(IteratorOutOfRange):
            table.end().retreat()

    def test_custom_hash_function(self):
        table = ChainedHashTable[str, int](bucket_count=32, hash_fn=lambda key: 7)
        for i, word in enumerate(["alpha", "beta", "gamma"]):
            table[word] = i
        self.assertEqual(table.bucket_sizes()[7], 3)
        self.assertEqual(list(table), ["alpha", "beta", "gamma"])
        del table["beta"]
        self.assertEqual(table.items(), [("alpha", 0), ("gamma", 2)])

    def test_random_operations_against_dict(self):
        random.seed(777)
        table = ChainedHashTable[int, int](bucket_count=13)
        reference = {}
        for _ in range(3_000):
            k = random.randrange(200)
            if random.random() < 0.6:
                table[k] = reference[k] = random.randint(0, 99)
            elif k in reference:
                self.assertEqual(table.pop(k), reference.pop(k))
            self.assertEqual(len(table), len(reference))

        self.assertEqual(sorted(table.items()), sorted(reference.items()))
        self.assertEqual(sum(table.bucket_sizes()), len(reference))
        for key in table:
            self.assertEqual(table.bucket_index(key), key % 13)

    # ------------------------------------------------------------------
    #  Configuration
    # ------------------------------------------------------------------
    def test_bucket_count_validation(self):
        with self.assertRaises(ValueError):
            ChainedHashTable(bucket_count=0)
        with self.assertRaises(TypeError):
            ChainedHashTable(bucket_count=2.5)
        with self.assertRaises(TypeError):
            ChainedHashTable(bucket_count=True)
        with self.assertRaises(TypeError):
            ChainedHashTable(hash_fn="not callable")

    def test_clear_keeps_bucket_array(self):
        table = ChainedHashTable[int, int]([(1, 1), (2, 2)], bucket_count=4)
        buckets = table._buckets
        table.clear()
        self.assertIs(table._buckets, buckets)
        self.assertEqual(table.bucket_sizes(), [0, 0, 0, 0])
        self.assertEqual(len(table), 0)

    def test_copy_and_move_keep_configuration(self):
        table = ChainedHashTable[int, int]([(1, 1), (5, 5)], bucket_count=4)
        clone = table.copy()
        self.assertEqual(clone.bucket_count, 4)
        self.assertEqual(clone, table)

        moved = ChainedHashTable.moved_from(table)
        self.assertEqual(moved.bucket_count, 4)
        self.assertEqual(moved.bucket_sizes(), [0, 2, 0, 0])
        self.assertEqual(len(table), 0)
        self.assertEqual(table.bucket_sizes(), [0, 0, 0, 0])


if __name__ == "__main__":
    unittest.main(verbosity=2)
