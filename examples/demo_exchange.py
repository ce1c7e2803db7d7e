"""
rlwe_kex — Live Demo: one Ring-LWE exchange, traced
====================================================
Run:  python examples/demo_exchange.py [seed] [production|debug]

Prints A, both parties' s/e/p, the signal w, both derived secrets and
their XOR, then a short mismatch-rate sample and, when the two sides
agree, the HKDF session key and confirmation check.
"""

import sys, os, time, logging
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rlwe_kex.params  import RingParams
from rlwe_kex.session import (KeyExchangeSession, measure_mismatch_rate,
                              derive_session_key, key_confirmation_tag,
                              confirm_key, format_trace)

LINE = "═" * 70

def header(name):
    print(f"\n{LINE}")
    print(f"  {name}")
    print(LINE)

def ok(label, value=""):
    print(f"  ✓  {label}{f': {value}' if value else ''}")


logging.basicConfig(level=logging.INFO, format=' %(message)s')

seed   = int(sys.argv[1]) if len(sys.argv) > 1 else None
preset = sys.argv[2] if len(sys.argv) > 2 else "production"
params = RingParams.preset(preset)

# ─────────────────────────────────────────────────────────────────────────────
header(f"Ring-LWE exchange  |  q={params.q}  n={params.n}  seed={seed}")
t0      = time.perf_counter()
session = KeyExchangeSession(params, seed=seed)
result  = session.run()
elapsed = time.perf_counter() - t0
for line in format_trace(result):
    print(line)
ok("Exchange", f"{elapsed*1000:.1f} ms")
ok("Public share", f"{len(result.alice.public_bytes())} bytes")
ok("Signal w", f"{len(result.w.to_bytes())} bytes")

# ─────────────────────────────────────────────────────────────────────────────
header("Mismatch rate sample (50 seeded exchanges)")
stats = measure_mismatch_rate(trials=50, params=params, seed=seed or 0)
ok("Exchanges with any differing bit", f"{stats.mismatched_trials}/{stats.trials}")
ok("Differing bits", f"{stats.bit_rate:.2%}")

# ─────────────────────────────────────────────────────────────────────────────
header("Session key")
if result.matched:
    key = derive_session_key(result.alice_bits)
    tag = key_confirmation_tag(key)
    ok("HKDF-SHA256 key", key.hex())
    ok("Bob confirms Alice's tag", str(confirm_key(derive_session_key(result.bob_bits), tag)))
else:
    print(f"  ✗  secrets differ in {result.mismatch_count} bits -- no key derived")
print(LINE + "\n")
