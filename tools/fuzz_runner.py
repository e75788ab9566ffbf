#!/usr/bin/env python3
# tools/fuzz_runner.py
#
# Mutation fuzzing of the tnetstring decoder.
#
# Generates three fuzz categories:
#   A) valid encodings with random byte edits (flip, insert, delete, truncate)
#   B) valid encodings with a rewritten SIZE prefix or tag
#   C) random byte soup
#
# Every input must either decode or raise TNetstringError; any other
# exception is a crash.  Whatever decodes must re-encode and decode back
# to the same value.  Any failure prints a minimal repro and exits non-zero.

import os, sys, base64, random
from typing import Any

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import tnetcodec
from tnetcodec import TNetstringError
from invariants_runner import gen_value

SEED = int(os.environ.get("TNET_SEED", "4242"))
ROUNDS = int(os.environ.get("TNET_FUZZ_ROUNDS", "5000"))

TAGS = b",#^!~]}"
INTERESTING = b"0123456789:-.e" + TAGS

def b64(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")

def crash(label: str, raw: bytes, exc: BaseException) -> None:
    print("CRASH:", label)
    print("EXC:", repr(exc))
    print("CTX: input_b64={}".format(b64(raw))[:4000])
    raise SystemExit(1)

# --- mutators ---

def mutate_bytes(rng: random.Random, raw: bytes) -> bytes:
    buf = bytearray(raw)
    for _ in range(rng.randint(1, 4)):
        op = rng.random()
        pos = rng.randint(0, len(buf))
        if op < 0.35 and pos < len(buf):
            buf[pos] = rng.choice(INTERESTING) if rng.random() < 0.5 else rng.getrandbits(8)
        elif op < 0.60:
            buf.insert(pos, rng.choice(INTERESTING))
        elif op < 0.85 and pos < len(buf):
            del buf[pos]
        else:
            del buf[pos:]
    return bytes(buf)

def mutate_envelope(rng: random.Random, raw: bytes) -> bytes:
    colon = raw.index(b":")
    size = int(raw[:colon])
    if rng.random() < 0.5:
        size = max(0, size + rng.randint(-3, 3))
        prefix = b"0" * rng.randint(0, 2) + b"%d" % size
        return prefix + raw[colon:]
    return raw[:-1] + bytes([rng.choice(TAGS + b"x")])

def rand_soup(rng: random.Random) -> bytes:
    n = rng.randint(0, 24)
    return bytes(rng.choice(INTERESTING) if rng.random() < 0.7 else rng.getrandbits(8)
                 for _ in range(n))

def check(label: str, raw: bytes, lenient: bool) -> None:
    try:
        value = tnetcodec.decode(raw, lenient_booleans=lenient)
    except TNetstringError:
        return
    except Exception as e:
        crash(label + " decode", raw, e)
    try:
        again = tnetcodec.decode(tnetcodec.encode(value))
    except Exception as e:
        crash(label + " re-encode", raw, e)
    if again != value:
        crash(label + " re-encode mismatch", raw, AssertionError(repr(value)))

def run(rounds: int = ROUNDS, seed: int = SEED) -> int:
    rng = random.Random(seed)
    for i in range(rounds):
        r = rng.random()
        lenient = rng.random() < 0.2

        # A) byte edits
        if r < 0.50:
            raw = mutate_bytes(rng, tnetcodec.encode(gen_value(rng)))
            check("A round={}".format(i), raw, lenient)
            continue

        # B) envelope rewrites
        if r < 0.85:
            raw = mutate_envelope(rng, tnetcodec.encode(gen_value(rng)))
            check("B round={}".format(i), raw, lenient)
            continue

        # C) byte soup
        check("C round={}".format(i), rand_soup(rng), lenient)

    print(f"OK: fuzz rounds={rounds} seed={seed} (no crashes)")
    return 0

def main() -> int:
    return run(ROUNDS, SEED)

if __name__ == "__main__":
    raise SystemExit(main())
