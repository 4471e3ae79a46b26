#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
test_map_benchmark.py
---------------------

Smoke tests for the timing entry point.
"""

import io
import unittest
from contextlib import redirect_stdout

from map_benchmark import build_parser, fill, main, run
from red_black_tree import RedBlackTree


class TestMapBenchmark(unittest.TestCase):
    def test_fill(self):
        tree = fill(RedBlackTree(), 5, "tree")
        self.assertEqual(tree.items()[-1], (4, "tree4"))

    def test_run_reports_every_step(self):
        results = run(100, bucket_count=32)
        self.assertEqual(len(results), 6)
        self.assertEqual(results[0][0], "Treemap add element time")
        for _, micros in results:
            self.assertGreaterEqual(micros, 0)

    def test_parser_defaults(self):
        args = build_parser().parse_args([])
        self.assertEqual(args.size, 10000)
        self.assertFalse(args.verbose)

    def test_main_prints_timings(self):
        out = io.StringIO()
        with redirect_stdout(out):
            status = main(["50", "--bucket-count", "16"])
        self.assertEqual(status, 0)
        lines = out.getvalue().splitlines()
        self.assertEqual(len(lines), 6)
        self.assertTrue(lines[-1].startswith("Hashmap iterate: "))

    def test_main_rejects_bad_bucket_count(self):
        out = io.StringIO()
        with redirect_stdout(out):
            status = main(["10", "--bucket-count", "0"])
        self.assertEqual(status, 2)
        self.assertEqual(out.getvalue(), "")


if __name__ == "__main__":
    unittest.main(verbosity=2)
