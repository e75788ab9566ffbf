"""tnetstring error codes and the exception class.

Every failure surfaces as a TNetstringError carrying one of the ERR_*
codes below.  Errors are never recovered mid-parse: the first one aborts
the whole decode or encode call.
"""

from __future__ import annotations

from typing import Optional

# ── Decode errors ─────────────────────────────────────────────
ERR_BUFFER_TOO_SHORT: str = "ERR_BUFFER_TOO_SHORT"      # fewer than 3 bytes
ERR_MALFORMED_ENVELOPE: str = "ERR_MALFORMED_ENVELOPE"  # no ':' / dangling map key
ERR_INVALID_LENGTH: str = "ERR_INVALID_LENGTH"          # bad size digits, non-empty null
ERR_TRUNCATED_BUFFER: str = "ERR_TRUNCATED_BUFFER"      # size runs past the buffer
ERR_NUMBER_FORMAT: str = "ERR_NUMBER_FORMAT"            # bad '#' or '^' payload
ERR_UNKNOWN_TYPE: str = "ERR_UNKNOWN_TYPE"              # unrecognized tag byte
ERR_INVALID_BOOLEAN: str = "ERR_INVALID_BOOLEAN"        # '!' payload not true/false

# ── Encode errors ─────────────────────────────────────────────
ERR_ENCODING_REQUIRED: str = "ERR_ENCODING_REQUIRED"    # str with no text encoding
ERR_UNSUPPORTED_TYPE: str = "ERR_UNSUPPORTED_TYPE"      # no tnetstring form

# ── Either direction ──────────────────────────────────────────
ERR_TEXT_CODEC: str = "ERR_TEXT_CODEC"                  # text encode/decode failed
ERR_LIMIT_DEPTH: str = "ERR_LIMIT_DEPTH"                # exceeds MAX_DEPTH


class TNetstringError(Exception):
    """Exception for tnetstring processing errors.

    `.code` is one of the ERR_* strings above.  `.offset` is the byte
    index in the input buffer where the problem was found, or None when
    the error isn't tied to a position (all encode errors).
    """

    def __init__(self, code: str, msg: str = "", offset: Optional[int] = None) -> None:
        if offset is not None and msg:
            msg = "{} (at offset {})".format(msg, offset)
        super().__init__(msg or code)
        self.code = code
        self.offset = offset
