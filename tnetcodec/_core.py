"""tnetstring core — envelope location, recursive decode, and encode.

Every value on the wire is one envelope, SIZE:PAYLOAD<TAG>, where the
tag byte is one of:

    ,   BYTES    — raw byte string, binary-safe
    #   INTEGER  — signed 64-bit, ASCII decimal
    ^   FLOAT    — 64-bit double, ASCII decimal with a '.'
    !   BOOLEAN  — "true" or "false"
    ~   NULL     — empty payload
    ]   LIST     — concatenated child envelopes
    }   MAP      — concatenated key envelope / value envelope pairs

Decoding works on a single memoryview of the caller's buffer.  Children
are located strictly inside their parent's payload, so a lying size
field can't make the decoder read past the enclosing envelope.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, List, Optional, Tuple

from ._constants import (
    COLON,
    FALSE_ENVELOPE,
    FALSE_LITERAL,
    INT64_MAX,
    INT64_MIN,
    MAX_DEPTH,
    MAX_LENGTH,
    MIN_ENVELOPE_LENGTH,
    NULL_ENVELOPE,
    TAG_BOOLEAN,
    TAG_BYTES,
    TAG_FLOAT,
    TAG_INTEGER,
    TAG_LIST,
    TAG_MAP,
    TAG_NULL,
    TRUE_ENVELOPE,
    TRUE_LITERAL,
)
from ._errors import (
    ERR_BUFFER_TOO_SHORT,
    ERR_ENCODING_REQUIRED,
    ERR_INVALID_BOOLEAN,
    ERR_INVALID_LENGTH,
    ERR_LIMIT_DEPTH,
    ERR_MALFORMED_ENVELOPE,
    ERR_TEXT_CODEC,
    ERR_TRUNCATED_BUFFER,
    ERR_UNKNOWN_TYPE,
    ERR_UNSUPPORTED_TYPE,
    TNetstringError,
)
from ._numeric import (
    format_float,
    format_integer,
    parse_float,
    parse_integer,
    parse_length,
)
from ._pairs import PairList


def as_byte_view(buffer: Any) -> memoryview:
    """Wrap a bytes-like object in a flat unsigned-byte memoryview."""
    if isinstance(buffer, str):
        raise TypeError("tnetstrings are bytes, not str; encode the text first")
    try:
        view = memoryview(buffer)
    except TypeError:
        raise TypeError(
            "a bytes-like object is required, not '{}'".format(type(buffer).__name__)
        ) from None
    if view.format != "B" or view.ndim != 1:
        view = view.cast("B")
    return view


# ── Decode ───────────────────────────────────────────────────

class _Decoder:
    """Per-call decode state.  Never shared between calls or threads."""

    __slots__ = ("buf", "zero_copy", "encoding", "errors", "lenient_booleans")

    def __init__(self, buffer: Any, zero_copy: bool = False,
                 encoding: Optional[str] = None, errors: str = "strict",
                 lenient_booleans: bool = False) -> None:
        self.buf = as_byte_view(buffer)
        self.zero_copy = zero_copy
        self.encoding = encoding
        self.errors = errors
        self.lenient_booleans = lenient_booleans

    def envelope(self, start: int, end: int) -> Tuple[int, int]:
        """Locate the envelope at `start` within [start, end).

        Returns (payload_start, tag_index).  The payload spans
        [payload_start, tag_index).
        """
        buf = self.buf
        colon = start
        while colon < end and buf[colon] != COLON:
            colon += 1
        if colon >= end:
            raise TNetstringError(
                ERR_MALFORMED_ENVELOPE,
                "no ':' between offset {} and {}".format(start, end),
                start,
            )

        size = parse_length(buf, start, colon)
        payload = colon + 1
        tag_index = payload + size
        if tag_index >= end:
            raise TNetstringError(
                ERR_TRUNCATED_BUFFER,
                "size {} exceeds message size ({} bytes available)".format(
                    size, max(end - payload - 1, 0)),
                start,
            )
        return payload, tag_index

    def value(self, start: int, end: int, depth: int) -> Tuple[Any, int]:
        """Decode one envelope at `start`; return (value, offset past its tag)."""
        payload, tag_index = self.envelope(start, end)
        buf = self.buf
        tag = buf[tag_index]
        nxt = tag_index + 1

        if tag == TAG_BYTES:
            return self._bytes(payload, tag_index), nxt

        if tag == TAG_INTEGER:
            return parse_integer(buf, payload, tag_index), nxt

        if tag == TAG_FLOAT:
            return parse_float(buf, payload, tag_index), nxt

        if tag == TAG_BOOLEAN:
            return self._boolean(payload, tag_index), nxt

        if tag == TAG_NULL:
            if tag_index != payload:
                raise TNetstringError(ERR_INVALID_LENGTH,
                                      "payload must be 0 length for null", start)
            return None, nxt

        if tag == TAG_LIST:
            if depth + 1 > MAX_DEPTH:
                raise TNetstringError(ERR_LIMIT_DEPTH, "depth exceeds MAX_DEPTH", start)
            items: List[Any] = []
            off = payload
            while off < tag_index:
                item, off = self.value(off, tag_index, depth + 1)
                items.append(item)
            return items, nxt

        if tag == TAG_MAP:
            if depth + 1 > MAX_DEPTH:
                raise TNetstringError(ERR_LIMIT_DEPTH, "depth exceeds MAX_DEPTH", start)
            pairs = PairList()
            off = payload
            while off < tag_index:
                key_at = off
                key, off = self.value(off, tag_index, depth + 1)
                if off >= tag_index:
                    raise TNetstringError(ERR_MALFORMED_ENVELOPE,
                                          "map key has no value", key_at)
                val, off = self.value(off, tag_index, depth + 1)
                pairs.append(key, val)
            return pairs, nxt

        raise TNetstringError(
            ERR_UNKNOWN_TYPE,
            "invalid payload type: 0x{:02x} ({!r})".format(tag, chr(tag)),
            tag_index,
        )

    def _bytes(self, start: int, end: int) -> Any:
        view = self.buf[start:end]
        if self.encoding is not None:
            # str() decodes straight out of the view: one copy, not two.
            try:
                return str(view, self.encoding, self.errors)
            except UnicodeError as e:
                raise TNetstringError(ERR_TEXT_CODEC, str(e), start) from e
        if self.zero_copy:
            return view
        return view.tobytes()

    def _boolean(self, start: int, end: int) -> bool:
        raw = self.buf[start:end]
        if self.lenient_booleans:
            # Historical behavior: only the first four bytes are looked at.
            return raw[:4] == TRUE_LITERAL
        if raw == TRUE_LITERAL:
            return True
        if raw == FALSE_LITERAL:
            return False
        raise TNetstringError(
            ERR_INVALID_BOOLEAN,
            "boolean payload must be 'true' or 'false', got {!r}".format(raw.tobytes()),
            start,
        )


def decode_one(buffer: Any, offset: int = 0, *, zero_copy: bool = False,
               encoding: Optional[str] = None, errors: str = "strict",
               lenient_booleans: bool = False) -> Tuple[Any, int]:
    """Decode the envelope at `offset`.  Returns (value, next_offset).

    next_offset is the index just past the envelope's tag byte, i.e.
    where the next envelope of a concatenated stream starts.
    """
    dec = _Decoder(buffer, zero_copy, encoding, errors, lenient_booleans)
    n = len(dec.buf)
    if n < MIN_ENVELOPE_LENGTH:
        raise TNetstringError(ERR_BUFFER_TOO_SHORT,
                              "tnetstring can't be < {} bytes, got {}".format(
                                  MIN_ENVELOPE_LENGTH, n))
    if offset < 0 or offset >= n:
        raise TNetstringError(ERR_MALFORMED_ENVELOPE,
                              "offset {} outside buffer of {} bytes".format(offset, n))
    return dec.value(offset, n, 0)


# ── Encode ───────────────────────────────────────────────────

def _envelope(payload: bytes, tag: int) -> bytes:
    if len(payload) > MAX_LENGTH:
        raise TNetstringError(ERR_INVALID_LENGTH,
                              "payload of {} bytes exceeds {}".format(len(payload), MAX_LENGTH))
    return b"%d:%s%c" % (len(payload), payload, tag)


def encode_value(val: Any, encoding: Optional[str] = None,
                 errors: str = "strict", depth: int = 0) -> bytes:
    """Encode a value into one tnetstring envelope.

    Containers encode every child first, since the total payload length
    has to be known before the prefix can be written.  The depth
    parameter counts container nesting the same way the decoder does.
    """
    if val is None:
        return NULL_ENVELOPE

    # bool is a subclass of int, so it has to be checked first.
    if isinstance(val, bool):
        return TRUE_ENVELOPE if val else FALSE_ENVELOPE

    if isinstance(val, int):
        if val < INT64_MIN or val > INT64_MAX:
            raise TNetstringError(ERR_UNSUPPORTED_TYPE,
                                  "integer {} outside int64 range".format(val))
        return _envelope(format_integer(val), TAG_INTEGER)

    if isinstance(val, float):
        return _envelope(format_float(val).encode("ascii"), TAG_FLOAT)

    if isinstance(val, bytes):
        return _envelope(val, TAG_BYTES)

    if isinstance(val, (bytearray, memoryview)):
        return _envelope(bytes(val), TAG_BYTES)

    if isinstance(val, str):
        if encoding is None:
            raise TNetstringError(ERR_ENCODING_REQUIRED,
                                  "can't serialize a str without a text encoding")
        try:
            raw = val.encode(encoding, errors)
        except UnicodeError as e:
            raise TNetstringError(ERR_TEXT_CODEC, str(e)) from e
        return _envelope(raw, TAG_BYTES)

    if isinstance(val, (PairList, Mapping)):
        if depth + 1 > MAX_DEPTH:
            raise TNetstringError(ERR_LIMIT_DEPTH, "depth exceeds MAX_DEPTH")
        entries = val if isinstance(val, PairList) else val.items()
        parts: List[bytes] = []
        for k, v in entries:
            parts.append(encode_value(k, encoding, errors, depth + 1))
            parts.append(encode_value(v, encoding, errors, depth + 1))
        return _envelope(b"".join(parts), TAG_MAP)

    # list, tuple, array.array, sets, generators...  str and the bytes
    # types are iterable too, but were handled above.
    if isinstance(val, Iterable):
        if depth + 1 > MAX_DEPTH:
            raise TNetstringError(ERR_LIMIT_DEPTH, "depth exceeds MAX_DEPTH")
        parts = []
        for item in val:
            parts.append(encode_value(item, encoding, errors, depth + 1))
        return _envelope(b"".join(parts), TAG_LIST)

    raise TNetstringError(ERR_UNSUPPORTED_TYPE,
                          "can't serialize a {}".format(type(val).__name__))
