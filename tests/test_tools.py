"""Smoke tests for the property and fuzz runners under tools/.

The runners are scripts, not package modules, so they are loaded from
their file paths.  Counts are kept small; the runners' own defaults are
for longer standalone runs.
"""

from __future__ import annotations

import contextlib
import importlib.util
import io
import os
import random
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

TOOLS_DIR = os.path.join(os.path.dirname(__file__), "..", "tools")


def _load_tool(name: str):
    spec = importlib.util.spec_from_file_location(
        "tnet_" + name, os.path.join(TOOLS_DIR, name + ".py"))
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod


invariants = _load_tool("invariants_runner")
fuzz = _load_tool("fuzz_runner")


class TestInvariantsRunner(unittest.TestCase):

    def test_short_run_passes(self):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            rc = invariants.run(trials=60, seed=1)
        self.assertEqual(rc, 0, out.getvalue())
        self.assertIn("OK: invariants passed for TRIALS=60 seed=1", out.getvalue())

    def test_generator_is_seeded(self):
        a = invariants.gen_value(random.Random(99))
        b = invariants.gen_value(random.Random(99))
        self.assertEqual(a, b)

    def test_text_trees_hold_no_bytes(self):
        def walk(v):
            self.assertNotIsInstance(v, (bytes, bytearray, memoryview))
            if isinstance(v, list):
                for x in v:
                    walk(x)
            elif isinstance(v, invariants.PairList):
                for k, x in v:
                    walk(k)
                    walk(x)

        rng = random.Random(5)
        for _ in range(20):
            walk(invariants.gen_value(rng, text=True))

    def test_check_prefix(self):
        self.assertTrue(invariants.check_prefix(b"5:hello,"))
        self.assertTrue(invariants.check_prefix(b"0:~"))
        self.assertFalse(invariants.check_prefix(b"4:hello,"))
        self.assertFalse(invariants.check_prefix(b"5:hello,0:~"))

    def test_detach_copies_views(self):
        buf = b"5:hello,"
        pairs = invariants.PairList([(memoryview(buf)[2:7], [memoryview(buf)[2:4]])])
        self.assertEqual(invariants.detach(pairs),
                         invariants.PairList([(b"hello", [b"he"])]))


class TestFuzzRunner(unittest.TestCase):

    def test_short_run_passes(self):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            rc = fuzz.run(rounds=400, seed=7)
        self.assertEqual(rc, 0, out.getvalue())
        self.assertIn("no crashes", out.getvalue())

    def test_check_accepts_decoder_errors(self):
        # Rejected inputs are not crashes.
        fuzz.check("t", b"", False)
        fuzz.check("t", b"4:foo,", False)
        fuzz.check("t", b"1:Xz", True)

    def test_mutate_envelope_keeps_body(self):
        rng = random.Random(3)
        raw = b"5:hello,"
        for _ in range(20):
            out = fuzz.mutate_envelope(rng, raw)
            self.assertIn(b":hello", out)

    def test_crash_exits_nonzero(self):
        with contextlib.redirect_stdout(io.StringIO()):
            with self.assertRaises(SystemExit) as cm:
                fuzz.crash("t", b"0:~", ValueError("boom"))
        self.assertEqual(cm.exception.code, 1)


if __name__ == "__main__":
    unittest.main()
