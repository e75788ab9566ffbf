"""Numeric primitives — size prefixes, integers, and floats.

All parsers work directly on a byte range of the caller's buffer
(bytes, bytearray or a 'B'-format memoryview).  Indexing any of those
yields an int, so digits are read as ASCII codes and never materialized
into an intermediate str, except for floats, where we hand the payload
to the platform's text-to-float conversion.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Any, Optional

from ._constants import (
    INT64_MAX,
    INT64_MIN,
    INT64_NEG_MULTMAX,
    INT64_NEG_MULTMIN,
    MAX_FLOAT_FRACTION_DIGITS,
    MAX_LENGTH_DIGITS,
    MINUS,
)
from ._errors import (
    ERR_INVALID_LENGTH,
    ERR_NUMBER_FORMAT,
    ERR_UNSUPPORTED_TYPE,
    TNetstringError,
)

_ZERO = ord("0")
_NINE = ord("9")

# Decimal float literal: optional sign, digits with an optional point,
# optional exponent.  No whitespace, no '_' separators, no inf/nan
# spellings, all of which Python's float() would otherwise let through.
_FLOAT_LITERAL = re.compile(rb"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?\Z")


def _quote(buf: Any, start: int, end: int) -> str:
    return bytes(buf[start:end]).decode("ascii", errors="replace")


def _bad_number(buf: Any, start: int, end: int) -> TNetstringError:
    return TNetstringError(
        ERR_NUMBER_FORMAT,
        "for input: '{}'".format(_quote(buf, start, end)),
        start,
    )


# ── Size prefix ──────────────────────────────────────────────

def parse_length(buf: Any, start: int = 0, end: Optional[int] = None) -> int:
    """Parse the SIZE field of SIZE:PAYLOAD<TAG> over [start, end).

    Digits only, at most 9 of them.  Leading zeros are tolerated.
    """
    if end is None:
        end = len(buf)
    if end <= start:
        raise TNetstringError(ERR_INVALID_LENGTH,
                              "empty size field: {} >= {}".format(start, end), start)
    if end - start > MAX_LENGTH_DIGITS:
        raise TNetstringError(ERR_INVALID_LENGTH,
                              "size digits can't be > {}".format(MAX_LENGTH_DIGITS), start)

    result = 0
    for i in range(start, end):
        b = buf[i]
        if b < _ZERO or b > _NINE:
            raise TNetstringError(
                ERR_INVALID_LENGTH,
                "non-digit byte 0x{:02x} in size '{}'".format(b, _quote(buf, start, end)),
                i,
            )
        result = result * 10 + (b - _ZERO)
    return result


# ── Integers ─────────────────────────────────────────────────

def parse_integer(buf: Any, start: int = 0, end: Optional[int] = None) -> int:
    """Parse [-]digits over [start, end) into a signed 64-bit integer.

    The accumulator runs negative so that INT64_MIN, whose magnitude is
    one larger than INT64_MAX, is reachable.  Each step checks against
    the thresholds before multiplying and before subtracting the digit,
    so overflow is caught at the digit that would cause it.
    """
    if end is None:
        end = len(buf)

    i = start
    negative = i < end and buf[i] == MINUS
    if negative:
        limit = INT64_MIN
        multmin = INT64_NEG_MULTMIN
        i += 1
    else:
        limit = -INT64_MAX
        multmin = INT64_NEG_MULTMAX

    if i >= end:
        raise _bad_number(buf, start, end)

    result = 0
    while i < end:
        b = buf[i]
        if b < _ZERO or b > _NINE:
            raise _bad_number(buf, start, end)
        digit = b - _ZERO
        if result < multmin:
            raise _bad_number(buf, start, end)
        result *= 10
        if result < limit + digit:
            raise _bad_number(buf, start, end)
        result -= digit
        i += 1

    return result if negative else -result


def format_integer(value: int) -> bytes:
    return b"%d" % value


# ── Floats ───────────────────────────────────────────────────

def parse_float(buf: Any, start: int, end: int) -> float:
    """Parse a decimal float literal over [start, end).

    The payload must be ASCII; exponent forms like "1e-07" are accepted
    even though format_float never emits them.  Literals too large for a
    double are rejected rather than read as infinity.
    """
    raw = bytes(buf[start:end])
    if not _FLOAT_LITERAL.match(raw):
        raise _bad_number(buf, start, end)
    value = float(raw.decode("ascii"))
    if math.isinf(value):
        raise _bad_number(buf, start, end)
    return value


def format_float(value: float) -> str:
    """Render a float in fixed notation for the '^' payload.

    The digits come from repr(), which is the shortest string that
    parses back to the same double; Decimal then spells them out without
    an exponent.  The result always has a '.' with at least one digit on
    each side and never depends on locale:

        >>> format_float(1e16)
        '10000000000000000.0'
        >>> format_float(-0.0)
        '-0.0'
        >>> format_float(1.001e-07)
        '0.0000001001'
    """
    if math.isnan(value) or math.isinf(value):
        raise TNetstringError(ERR_UNSUPPORTED_TYPE,
                              "float {!r} has no tnetstring representation".format(value))

    text = format(Decimal(repr(value)), "f")
    if "." not in text:
        text += ".0"
    # Smallest subnormal: 324 fractional digits.
    assert len(text) - text.index(".") - 1 <= MAX_FLOAT_FRACTION_DIGITS
    return text
