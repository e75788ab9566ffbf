#!/usr/bin/env python3
# tools/invariants_runner.py
#
# Property tests for the tnetstring codec.
#
# This runner:
# - generates random value trees (null/bool/int/float/bytes/list/map) within limits
# - checks encode determinism, round-trip, the SIZE prefix and concatenation
# - checks zero-copy and text decoding against the default decode
#
# Exit code:
#   0 -> all checks passed
#   1 -> invariant violation

import os, sys, random
from typing import Any

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)

import tnetcodec
from tnetcodec import PairList

SEED = int(os.environ.get("TNET_SEED", "1337"))
TRIALS = int(os.environ.get("TNET_TRIALS", "2000"))
MAX_GEN_DEPTH = int(os.environ.get("TNET_GEN_MAX_DEPTH", "6"))
MAX_ITEMS = int(os.environ.get("TNET_GEN_MAX_ITEMS", "6"))
MAX_BYTES = int(os.environ.get("TNET_GEN_MAX_BYTES", "32"))

INT_EDGES = [0, 1, -1, tnetcodec.INT64_MAX, tnetcodec.INT64_MIN, 2 ** 31, -(2 ** 31)]
FLOAT_EDGES = [0.0, -0.0, 5e-324, 1.7976931348623157e308, 1e16, 1.001e-07, 0.1]

def rand_bytes(rng: random.Random) -> bytes:
    return bytes(rng.getrandbits(8) for _ in range(rng.randint(0, MAX_BYTES)))

def rand_text(rng: random.Random) -> str:
    out = []
    for _ in range(rng.randint(0, MAX_BYTES)):
        r = rng.random()
        if r < 0.80:
            out.append(chr(rng.randint(0x20, 0x7E)))
        elif r < 0.95:
            out.append(chr(rng.randint(0xA0, 0xD7FF)))  # exclude surrogates
        else:
            out.append(chr(rng.randint(0x10000, 0x10FFFF)))
    return "".join(out)

def rand_int(rng: random.Random) -> int:
    if rng.random() < 0.2:
        return rng.choice(INT_EDGES)
    return rng.randint(tnetcodec.INT64_MIN, tnetcodec.INT64_MAX) >> rng.randint(0, 63)

def rand_float(rng: random.Random) -> float:
    r = rng.random()
    if r < 0.2:
        return rng.choice(FLOAT_EDGES)
    if r < 0.6:
        return rng.uniform(-1e6, 1e6)
    return rng.uniform(-1.0, 1.0) * 10.0 ** rng.randint(-300, 300)

def rand_scalar(rng: random.Random, text: bool) -> Any:
    r = rng.random()
    if r < 0.10:
        return None
    if r < 0.20:
        return rng.random() < 0.5
    if r < 0.40:
        return rand_int(rng)
    if r < 0.55:
        return rand_float(rng)
    return rand_text(rng) if text else rand_bytes(rng)

def gen_value(rng: random.Random, depth: int = 0, text: bool = False) -> Any:
    """Random tree.  text=True uses str where byte strings would go."""
    if depth >= MAX_GEN_DEPTH:
        return rand_scalar(rng, text)
    r = rng.random()
    if r < 0.25:
        pairs = PairList()
        for _ in range(rng.randint(0, MAX_ITEMS)):
            key = rand_text(rng) if text else rand_bytes(rng)
            pairs.append(key, gen_value(rng, depth + 1, text))
        # Occasionally repeat a key; wire order must still survive.
        if len(pairs) and rng.random() < 0.2:
            pairs.append(pairs.keys()[0], gen_value(rng, depth + 1, text))
        return pairs
    if r < 0.50:
        return [gen_value(rng, depth + 1, text) for _ in range(rng.randint(0, MAX_ITEMS))]
    return rand_scalar(rng, text)

def detach(v: Any) -> Any:
    """Copy zero-copy views out so trees can be compared."""
    if isinstance(v, memoryview):
        return v.tobytes()
    if isinstance(v, list):
        return [detach(x) for x in v]
    if isinstance(v, PairList):
        return PairList((detach(k), detach(x)) for k, x in v)
    return v

def check_prefix(wire: bytes) -> bool:
    """SIZE equals the payload length and the envelope has nothing extra."""
    colon = wire.index(b":")
    size = int(wire[:colon])
    return len(wire) == colon + 1 + size + 1

def fail(label: str, trial: int, value: Any) -> int:
    print("INVARIANT FAIL:", label)
    print("CTX: trial={} value={!r}".format(trial, value)[:2000])
    return 1

def run(trials: int = TRIALS, seed: int = SEED) -> int:
    rng = random.Random(seed)
    for t in range(trials):
        v = gen_value(rng)

        # (1) Encode determinism
        w1 = tnetcodec.encode(v)
        w2 = tnetcodec.encode(v)
        if w1 != w2:
            return fail("encode determinism", t, v)

        # (2) SIZE prefix matches the payload
        if not check_prefix(w1):
            return fail("size prefix", t, v)

        # (3) Round-trip
        if tnetcodec.decode(w1) != v:
            return fail("round-trip", t, v)

        # (4) Zero-copy agrees with copying decode
        if detach(tnetcodec.decode(bytearray(w1), zero_copy=True)) != v:
            return fail("zero-copy decode", t, v)

        # (5) Concatenation: each envelope decodes at its own offset
        u = gen_value(rng)
        w3 = tnetcodec.encode(u)
        stream = w1 + w3
        first, nxt = tnetcodec.decode_one(stream)
        second, end = tnetcodec.decode_one(stream, nxt)
        if (first, nxt, second, end) != (v, len(w1), u, len(stream)):
            return fail("concatenation", t, (v, u))
        if list(tnetcodec.iter_decode(stream)) != [v, u]:
            return fail("iter_decode", t, (v, u))

        # (6) Text round-trip
        tv = gen_value(rng, text=True)
        if tnetcodec.decode_as_text(tnetcodec.encode(tv, "utf-8"), "utf-8") != tv:
            return fail("text round-trip", t, tv)

    print(f"OK: invariants passed for TRIALS={trials} seed={seed}")
    return 0

def main() -> int:
    return run(TRIALS, SEED)

if __name__ == "__main__":
    raise SystemExit(main())
