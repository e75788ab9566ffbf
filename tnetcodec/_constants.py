"""tnetstring constants — type tags, fixed envelopes, and size limits.

Wire grammar reminder:

    envelope := length ":" payload tag

The length counts payload bytes only (not the colon, not the tag).
"""

from __future__ import annotations

# ── Framing bytes ─────────────────────────────────────────────
# Tags are compared as ints because indexing a bytes-like object in
# Python 3 yields ints, never length-1 bytes.
COLON: int = ord(":")
MINUS: int = ord("-")

# ── Type tags (single trailing byte each) ─────────────────────
TAG_BYTES: int = ord(",")
TAG_INTEGER: int = ord("#")
TAG_FLOAT: int = ord("^")
TAG_BOOLEAN: int = ord("!")
TAG_NULL: int = ord("~")
TAG_LIST: int = ord("]")
TAG_MAP: int = ord("}")

# ── Fixed envelopes ───────────────────────────────────────────
NULL_ENVELOPE: bytes = b"0:~"
TRUE_ENVELOPE: bytes = b"4:true!"
FALSE_ENVELOPE: bytes = b"5:false!"

TRUE_LITERAL: bytes = b"true"
FALSE_LITERAL: bytes = b"false"

# ── Length prefix limits ──────────────────────────────────────
# "0:~" is the shortest legal envelope, so anything shorter can't parse.
MIN_ENVELOPE_LENGTH: int = 3
MAX_LENGTH_DIGITS: int = 9
MAX_LENGTH: int = 999_999_999

# ── Signed 64-bit integer range ──────────────────────────────
# Python ints are arbitrary-precision, so the range is checked by hand.
INT64_MIN: int = -(2**63)
INT64_MAX: int = 2**63 - 1

# Thresholds for the compare-before-multiply overflow check.  The
# accumulator runs negative, so both are expressed as negative bounds.
# Both divisions have positive operands, so floor and truncation agree.
INT64_NEG_MULTMIN: int = -(-INT64_MIN // 10)     # for negative inputs
INT64_NEG_MULTMAX: int = -(INT64_MAX // 10)      # for non-negative inputs

# ── Float formatting ─────────────────────────────────────────
# Enough fractional digits for the smallest subnormal double (~4.9e-324).
MAX_FLOAT_FRACTION_DIGITS: int = 340

# ── Nesting limit ────────────────────────────────────────────
# Container nesting, counted the same way by decode and encode.
MAX_DEPTH: int = 256
