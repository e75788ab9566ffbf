"""tnetcodec — tnetstring encoder/decoder.

tnetstrings are length-prefixed, self-describing and binary-safe:
every value is SIZE:PAYLOAD<TAG>, so there's never any escaping and
never any ambiguity about where a value ends.

Quick start:
    >>> from tnetcodec import decode, encode
    >>> encode([b"hello", 12345, True, None])
    b'26:5:hello,5:12345#4:true!0:~]'
    >>> decode(b"5:12345#")
    12345

Maps decode to PairList, which keeps wire order and duplicate keys:
    >>> decode(b"16:5:hello,5:12345#}")
    PairList([(b'hello', 12345)])

Text needs an explicit encoding in both directions:
    >>> encode({"k": "v"}, "utf-8")
    b'8:1:k,1:v,}'
    >>> decode_as_text(b"3:foo,", "utf-8")
    'foo'
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Optional, Tuple

from ._constants import INT64_MAX, INT64_MIN, MAX_DEPTH, MAX_LENGTH
from ._core import as_byte_view, decode_one as _decode_one, encode_value
from ._errors import (
    ERR_BUFFER_TOO_SHORT,
    ERR_ENCODING_REQUIRED,
    ERR_INVALID_BOOLEAN,
    ERR_INVALID_LENGTH,
    ERR_LIMIT_DEPTH,
    ERR_MALFORMED_ENVELOPE,
    ERR_NUMBER_FORMAT,
    ERR_TEXT_CODEC,
    ERR_TRUNCATED_BUFFER,
    ERR_UNKNOWN_TYPE,
    ERR_UNSUPPORTED_TYPE,
    TNetstringError,
)
from ._numeric import format_float, parse_integer, parse_length
from ._pairs import PairList

__version__ = "1.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Public API functions
    "decode",
    "decode_as_text",
    "decode_one",
    "iter_decode",
    "encode",
    "parse_length",
    "parse_integer",
    "format_float",
    # Types
    "PairList",
    "TNetstringError",
    # Error codes
    "ERR_BUFFER_TOO_SHORT",
    "ERR_MALFORMED_ENVELOPE",
    "ERR_INVALID_LENGTH",
    "ERR_TRUNCATED_BUFFER",
    "ERR_NUMBER_FORMAT",
    "ERR_UNKNOWN_TYPE",
    "ERR_INVALID_BOOLEAN",
    "ERR_ENCODING_REQUIRED",
    "ERR_UNSUPPORTED_TYPE",
    "ERR_TEXT_CODEC",
    "ERR_LIMIT_DEPTH",
    # Limits
    "INT64_MIN",
    "INT64_MAX",
    "MAX_DEPTH",
    "MAX_LENGTH",
]


# ── Decode API ────────────────────────────────────────────────

def decode(buffer: Any, offset: int = 0, *, zero_copy: bool = False,
           lenient_booleans: bool = False) -> Any:
    """Decode the tnetstring envelope that starts at `offset`.

    Returns None, bool, int, float, bytes, list or PairList; containers
    hold the same types.  Bytes after the envelope are ignored.

    zero_copy=True returns byte strings as memoryview slices of
    `buffer` instead of copies.  The views keep `buffer` alive, and a
    bytearray can't be resized while any of them exist; call bytes() on
    a view to detach it.

    lenient_booleans=True accepts any '!' payload, reading it as true
    iff it starts with b"true".  By default only exact b"true" and
    b"false" are accepted.
    """
    value, _end = _decode_one(buffer, offset, zero_copy=zero_copy,
                              lenient_booleans=lenient_booleans)
    return value


def decode_as_text(buffer: Any, encoding: str, offset: int = 0, *,
                   errors: str = "strict", lenient_booleans: bool = False) -> Any:
    """Like decode(), but every byte string becomes str in `encoding`.

    Applies recursively to list elements, map keys and map values.
    """
    value, _end = _decode_one(buffer, offset, encoding=encoding, errors=errors,
                              lenient_booleans=lenient_booleans)
    return value


def decode_one(buffer: Any, offset: int = 0, *, zero_copy: bool = False,
               encoding: Optional[str] = None, errors: str = "strict",
               lenient_booleans: bool = False) -> Tuple[Any, int]:
    """Decode one envelope and also return the offset just past it.

        >>> decode_one(b"5:hello,5:12345#")
        (b'hello', 8)
        >>> decode_one(b"5:hello,5:12345#", 8)
        (12345, 16)
    """
    return _decode_one(buffer, offset, zero_copy=zero_copy, encoding=encoding,
                       errors=errors, lenient_booleans=lenient_booleans)


def iter_decode(buffer: Any, offset: int = 0, *, zero_copy: bool = False,
                encoding: Optional[str] = None, errors: str = "strict",
                lenient_booleans: bool = False) -> Iterator[Any]:
    """Yield every value of back-to-back envelopes until the buffer ends.

    The buffer must be complete: a trailing partial envelope raises
    TNetstringError rather than being held back.
    """
    end = len(as_byte_view(buffer))
    while offset < end:
        value, offset = _decode_one(buffer, offset, zero_copy=zero_copy,
                                    encoding=encoding, errors=errors,
                                    lenient_booleans=lenient_booleans)
        yield value


# ── Encode API ────────────────────────────────────────────────

def encode(value: Any, encoding: Optional[str] = None, *, errors: str = "strict") -> bytes:
    """Encode `value` as one tnetstring envelope.

    Accepts None, bool, int (int64 range), finite float, bytes-likes,
    Mappings and PairList (as maps), and any other iterable (as lists).
    str values anywhere in the tree need `encoding`; without it
    TNetstringError(ERR_ENCODING_REQUIRED) is raised.
    """
    return encode_value(value, encoding, errors)
