"""
rlwe_kex — Ring-LWE key exchange with reconciliation
=====================================================
Two parties share a random ring element A, each publishes
A*s + 2e, one of them publishes a 128-bit signal w, and both extract
the same 128-bit secret from their own s and the other side's public
share (with high probability, not always).

Modules:
    params         modulus Q and the thresholds derived from it
    ring           RingElement over Z_Q[x]/(x^128 + 1)
    signal_vector  SignalVector, 128 booleans
    sampling       uniform / noise / seed-derived ring elements
    reconcile      PartyShare, compute_signal, derive_secret_bits
    session        two-party driver, mismatch statistics, key derivation

Not hardened: no constant-time code, no side-channel resistance, no
parameter validation beyond range checks.
"""

__version__ = "0.1.0"

from .params    import RingParams, DEFAULT_PARAMS
from .ring      import RingElement, InvariantViolation
from .signal_vector import SignalVector
from .sampling  import generate_parameter, sample_noise, derive_parameter
from .reconcile import (PartyShare, generate_party_share, compute_signal,
                        derive_secret_bits)
from .session   import (KeyExchangeSession, ExchangeResult, MismatchStats,
                        ReconciliationError, measure_mismatch_rate,
                        derive_session_key, key_confirmation_tag, confirm_key,
                        format_trace)

__all__ = [
    "RingParams",
    "DEFAULT_PARAMS",
    "RingElement",
    "InvariantViolation",
    "SignalVector",
    "generate_parameter",
    "sample_noise",
    "derive_parameter",
    "PartyShare",
    "generate_party_share",
    "compute_signal",
    "derive_secret_bits",
    "KeyExchangeSession",
    "ExchangeResult",
    "MismatchStats",
    "ReconciliationError",
    "measure_mismatch_rate",
    "derive_session_key",
    "key_confirmation_tag",
    "confirm_key",
    "format_trace",
]
