"""Tests for the tnetcodec command-line interface."""

from __future__ import annotations

import io
import json
import os
import sys
import tempfile
import unittest
from unittest import mock

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tnetcodec import __version__
from tnetcodec._cli import main


def _run(argv, stdin=b""):
    """Run main(argv) with fake std streams.

    Returns (exit_code, stdout_bytes, stderr_text).  exit_code is 0 when
    main returns normally.
    """
    fake_in = io.TextIOWrapper(io.BytesIO(stdin), encoding="utf-8")
    fake_out = io.TextIOWrapper(io.BytesIO(), encoding="utf-8")
    fake_err = io.StringIO()
    code = 0
    with mock.patch.object(sys, "stdin", fake_in), \
            mock.patch.object(sys, "stdout", fake_out), \
            mock.patch.object(sys, "stderr", fake_err):
        try:
            main(argv)
        except SystemExit as e:
            code = e.code
        fake_out.flush()
    return code, fake_out.buffer.getvalue(), fake_err.getvalue()


# ── decode ────────────────────────────────────────────────────

class TestDecodeCommand(unittest.TestCase):

    def test_scalar(self):
        code, out, _ = _run(["decode"], b"5:12345#")
        self.assertEqual(code, 0)
        self.assertEqual(out, b"12345\n")

    def test_map_becomes_object(self):
        code, out, _ = _run(["decode"], b"16:5:hello,5:12345#}")
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out), {"hello": 12345})

    def test_duplicate_keys_stay_pairs(self):
        code, out, _ = _run(["decode"], b"16:1:a,1:1#1:a,1:2#}")
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out), [["a", 1], ["a", 2]])

    def test_non_string_keys_stay_pairs(self):
        code, out, _ = _run(["decode"], b"7:1:1#0:~}")
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out), [[1, None]])

    def test_offset(self):
        code, out, _ = _run(["decode", "--offset", "8"], b"5:hello,5:12345#")
        self.assertEqual(code, 0)
        self.assertEqual(out, b"12345\n")

    def test_all(self):
        code, out, _ = _run(["decode", "--all"], b"5:hello,5:12345#0:~")
        self.assertEqual(code, 0)
        self.assertEqual(out.decode("utf-8").splitlines(), ['"hello"', "12345", "null"])

    def test_text_encoding(self):
        code, out, _ = _run(["decode", "--text", "latin-1"], b"1:\xe9,")
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out), "é")

    def test_lenient_booleans(self):
        code, _, err = _run(["decode"], b"5:truex!")
        self.assertEqual(code, 2)
        self.assertIn("[ERR_INVALID_BOOLEAN]", err)

        code, out, _ = _run(["decode", "--lenient-booleans"], b"5:truex!")
        self.assertEqual(code, 0)
        self.assertEqual(out, b"true\n")

    def test_error_exit_code(self):
        code, out, err = _run(["decode"], b"4:foo,")
        self.assertEqual(code, 2)
        self.assertEqual(out, b"")
        self.assertIn("tnetcodec: error [ERR_TRUNCATED_BUFFER]", err)

    def test_bad_text_is_error(self):
        code, _, err = _run(["decode"], b"1:\xff,")
        self.assertEqual(code, 2)
        self.assertIn("[ERR_TEXT_CODEC]", err)

    def test_input_file(self):
        with tempfile.TemporaryDirectory() as d:
            path = os.path.join(d, "msg.tnet")
            with open(path, "wb") as f:
                f.write(b"3:2.5^")
            code, out, _ = _run(["decode", "--input", path])
        self.assertEqual(code, 0)
        self.assertEqual(out, b"2.5\n")


# ── encode ────────────────────────────────────────────────────

class TestEncodeCommand(unittest.TestCase):

    def test_object(self):
        code, out, _ = _run(["encode"], b'{"a": [1, 2.5, true, null]}')
        self.assertEqual(code, 0)
        self.assertEqual(out, b"28:1:a,20:1:1#3:2.5^4:true!0:~]}")

    def test_duplicate_keys_kept(self):
        code, out, _ = _run(["encode"], b'{"a": 1, "a": 2}')
        self.assertEqual(code, 0)
        self.assertEqual(out, b"16:1:a,1:1#1:a,1:2#}")

    def test_encoding_option(self):
        code, out, _ = _run(["encode", "--encoding", "latin-1"], '"é"'.encode("utf-8"))
        self.assertEqual(code, 0)
        self.assertEqual(out, b"1:\xe9,")

    def test_bad_json(self):
        code, _, err = _run(["encode"], b'{"a":')
        self.assertEqual(code, 2)
        self.assertIn("JSON parse error", err)

    def test_out_of_range_integer(self):
        code, _, err = _run(["encode"], b"[100000000000000000000]")
        self.assertEqual(code, 2)
        self.assertIn("[ERR_UNSUPPORTED_TYPE]", err)

    def test_unencodable_text(self):
        code, _, err = _run(["encode", "--encoding", "ascii"], '"é"'.encode("utf-8"))
        self.assertEqual(code, 2)
        self.assertIn("[ERR_TEXT_CODEC]", err)


# ── misc ──────────────────────────────────────────────────────

class TestMisc(unittest.TestCase):

    def test_version(self):
        code, out, _ = _run(["version"])
        self.assertEqual(code, 0)
        self.assertEqual(out.decode("utf-8").strip(), "tnetcodec {}".format(__version__))

    def test_no_command(self):
        code, out, _ = _run([])
        self.assertEqual(code, 1)
        self.assertIn(b"usage:", out)

    def test_round_trip_through_cli(self):
        _, wire, _ = _run(["encode"], b'{"k": ["v", -0.0, false]}')
        code, out, _ = _run(["decode"], wire)
        self.assertEqual(code, 0)
        self.assertEqual(out, b'{"k": ["v", -0.0, false]}\n')


if __name__ == "__main__":
    unittest.main()
