"""tnetcodec command-line interface.

Usage:
    printf '5:12345#' | python3 -m tnetcodec decode
    python3 -m tnetcodec decode --input msg.tnet --offset 8 --text latin-1
    python3 -m tnetcodec decode --all --input stream.tnet
    echo '{"a": [1, 2.5, true, null]}' | python3 -m tnetcodec encode > out.tnet
    python3 -m tnetcodec version
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, List, Optional

from . import (
    PairList,
    TNetstringError,
    __version__,
    decode_as_text,
    encode,
    iter_decode,
)

logger = logging.getLogger("tnetcodec.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tnetcodec",
        description="tnetstring encoder/decoder",
    )
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log debug details to stderr")
    sub = parser.add_subparsers(dest="command")

    # ── decode ──
    dec_p = sub.add_parser("decode", help="Decode a tnetstring and print it as JSON")
    dec_p.add_argument("--input", "-i", metavar="FILE",
                       help="Read the tnetstring from FILE instead of stdin")
    dec_p.add_argument("--offset", type=int, default=0,
                       help="Byte offset of the envelope to decode")
    dec_p.add_argument("--text", default="utf-8", metavar="ENC",
                       help="Text encoding for byte strings (default: utf-8)")
    dec_p.add_argument("--all", action="store_true",
                       help="Decode every concatenated envelope, one JSON line each")
    dec_p.add_argument("--lenient-booleans", action="store_true",
                       help="Accept any '!' payload; true iff it starts with 'true'")

    # ── encode ──
    enc_p = sub.add_parser("encode", help="Encode JSON as a tnetstring")
    enc_p.add_argument("--input", "-i", metavar="FILE",
                       help="Read JSON from FILE instead of stdin")
    enc_p.add_argument("--encoding", default="utf-8", metavar="ENC",
                       help="Text encoding for JSON strings (default: utf-8)")

    # ── version ──
    sub.add_parser("version", help="Print version and exit")

    return parser


def _read_input(filepath: Optional[str]) -> bytes:
    """Read raw bytes from a file or stdin."""
    if filepath:
        with open(filepath, "rb") as f:
            return f.read()
    if sys.stdin.isatty():
        print("tnetcodec: reading from stdin (Ctrl-D to end)...", file=sys.stderr)
    return sys.stdin.buffer.read()


def _to_json(val: Any) -> Any:
    """Map a decoded tree onto JSON types.

    Maps become objects only when their keys are unique strings;
    anything else stays an array of [key, value] pairs so nothing is lost.
    """
    if isinstance(val, PairList):
        keys = val.keys()
        if all(isinstance(k, str) for k in keys) and len(set(keys)) == len(keys):
            return {k: _to_json(v) for k, v in val}
        return [[_to_json(k), _to_json(v)] for k, v in val]
    if isinstance(val, list):
        return [_to_json(v) for v in val]
    return val


def _cmd_decode(args: argparse.Namespace) -> None:
    raw = _read_input(args.input)
    logger.debug("read %d bytes, decoding from offset %d", len(raw), args.offset)

    if args.all:
        count = 0
        for val in iter_decode(raw, args.offset, encoding=args.text,
                               lenient_booleans=args.lenient_booleans):
            print(json.dumps(_to_json(val), ensure_ascii=False))
            count += 1
        logger.debug("decoded %d envelopes", count)
        return

    val = decode_as_text(raw, args.text, args.offset,
                         lenient_booleans=args.lenient_booleans)
    print(json.dumps(_to_json(val), ensure_ascii=False))


def _cmd_encode(args: argparse.Namespace) -> None:
    raw = _read_input(args.input)
    # PairList keeps object key order and any duplicate keys.
    obj = json.loads(raw, object_pairs_hook=PairList)
    out = encode(obj, args.encoding)
    logger.debug("encoded %d JSON bytes into %d tnetstring bytes", len(raw), len(out))
    sys.stdout.buffer.write(out)
    sys.stdout.buffer.flush()


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format="%(name)s: %(levelname)s: %(message)s")

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "version":
        print(f"tnetcodec {__version__}")
        return

    try:
        if args.command == "decode":
            _cmd_decode(args)
        elif args.command == "encode":
            _cmd_encode(args)
    except TNetstringError as e:
        print(f"tnetcodec: error [{e.code}]: {e}", file=sys.stderr)
        sys.exit(2)
    except json.JSONDecodeError as e:
        print(f"tnetcodec: JSON parse error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
