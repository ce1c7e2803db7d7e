"""
rlwe_kex — ring arithmetic and parameter table
===============================================
Run with:  python -m pytest tests/ -v
       or:  python tests/test_ring.py
"""

import sys
import os
import random
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np
import pytest
from rlwe_kex.params import RingParams, DEFAULT_PARAMS
from rlwe_kex.ring   import RingElement, InvariantViolation

Q     = 251
SEEDS = [0, 1, 7, 2024]


def _monomial(degree, params=DEFAULT_PARAMS):
    coeffs = [0] * params.n
    coeffs[degree] = 1
    return RingElement(coeffs, params)


def _reference_mul(a, b):
    """Float64 convolution folded mod x^128 + 1; exact for Q < 256."""
    q, n = a.params.q, a.params.n
    full = np.convolve(np.array(a.coefficients, dtype=np.float64),
                       np.array(b.coefficients, dtype=np.float64))
    folded = full[:n].copy()
    folded[:n - 1] -= full[n:]
    return [int(x) for x in np.mod(folded, q)]


# ── Parameter table ──────────────────────────────────────────────────────────
def test_production_thresholds():
    p = RingParams.preset("production")
    assert p.q == 251 and p.n == 128
    assert (p.q4, p.q34) == (62, 188)
    assert (p.q18, p.q38, p.q58, p.q78) == (31, 94, 156, 219)
    assert p.noise_bound == 15

def test_debug_preset():
    p = RingParams.preset("debug")
    assert p.q == 17
    assert p.noise_bound == 1
    assert p.thresholds()["q3/4"] == 12

@pytest.mark.parametrize("modulus", [5, 15, 257, 1000])
def test_modulus_out_of_range_rejected(modulus):
    with pytest.raises(ValueError):
        RingParams(modulus)

def test_unknown_preset_rejected():
    with pytest.raises(ValueError):
        RingParams.preset("paranoid")

def test_params_equality():
    assert RingParams(251) == DEFAULT_PARAMS
    assert RingParams(251) != RingParams(17)
    assert hash(RingParams(251)) == hash(DEFAULT_PARAMS)


# ── Construction and invariants ──────────────────────────────────────────────
def test_wrong_length_rejected():
    with pytest.raises(ValueError):
        RingElement([0] * 127)

@pytest.mark.parametrize("bad", [-1, Q, 300])
def test_out_of_range_coefficient_rejected(bad):
    coeffs = [0] * 128
    coeffs[5] = bad
    with pytest.raises(ValueError):
        RingElement(coeffs)

@pytest.mark.parametrize("flag", [True, False])
def test_bool_coefficient_rejected(flag):
    coeffs = [0] * 128
    coeffs[3] = flag
    with pytest.raises(ValueError):
        RingElement(coeffs)

def test_filled_sets_every_coefficient():
    a = RingElement.filled(9)
    assert a.coefficients == (9,) * 128
    assert a != RingElement.one().scale(9)
    with pytest.raises(ValueError):
        RingElement.filled(Q)

def test_internal_result_out_of_range_is_invariant_violation():
    with pytest.raises(InvariantViolation):
        RingElement._from_result([Q] + [0] * 127, DEFAULT_PARAMS)

def test_mixed_params_rejected():
    a = RingElement.zero(RingParams(251))
    b = RingElement.zero(RingParams(17))
    with pytest.raises(ValueError):
        a + b
    with pytest.raises(ValueError):
        a * b

def test_random_is_reproducible_from_seed():
    a = RingElement.random(random.Random(42))
    b = RingElement.random(random.Random(42))
    assert a == b
    assert all(0 <= c < Q for c in a)


# ── Closure and additive structure ───────────────────────────────────────────
@pytest.mark.parametrize("seed", SEEDS)
def test_closure(seed):
    rng  = random.Random(seed)
    a, b = RingElement.random(rng), RingElement.random(rng)
    for r in (a + b, a - b, a.scale(2), a.scale(250), 3 * a, a * b):
        assert len(r) == 128
        assert all(0 <= c < Q for c in r)

@pytest.mark.parametrize("seed", SEEDS)
def test_additive_inverse(seed):
    rng  = random.Random(seed)
    a, b = RingElement.random(rng), RingElement.random(rng)
    assert (a + b) - b == a

def test_subtract_wraps_without_negatives():
    a = RingElement.filled(3)
    b = RingElement.filled(10)
    assert (a - b) == RingElement.filled(Q - 7)

def test_scale_matches_repeated_addition():
    a = RingElement.random(random.Random(3))
    assert a.scale(2) == a + a
    assert a * 2 == 2 * a == a.scale(2)

@pytest.mark.parametrize("k", [-1, -2, -251])
def test_negative_scalar_rejected(k):
    with pytest.raises(ValueError):
        RingElement.one().scale(k)
    with pytest.raises(ValueError):
        RingElement.one() * k

@pytest.mark.parametrize("k", [True, 2.0])
def test_non_int_scalar_rejected(k):
    with pytest.raises(ValueError):
        RingElement.one().scale(k)


# ── Ring multiplication ──────────────────────────────────────────────────────
@pytest.mark.parametrize("seed", SEEDS)
def test_mul_matches_reference_convolution(seed):
    rng  = random.Random(seed)
    a, b = RingElement.random(rng), RingElement.random(rng)
    assert list((a * b).coefficients) == _reference_mul(a, b)

@pytest.mark.parametrize("seed", SEEDS)
def test_mul_commutative(seed):
    rng  = random.Random(seed)
    a, b = RingElement.random(rng), RingElement.random(rng)
    assert a * b == b * a

def test_mul_associative():
    rng = random.Random(99)
    a, b, c = (RingElement.random(rng) for _ in range(3))
    assert (a * b) * c == a * (b * c)

def test_one_is_identity():
    a = RingElement.random(random.Random(5))
    assert a * RingElement.one() == a
    assert RingElement.one() * a == a

def test_zero_annihilates():
    a = RingElement.random(random.Random(6))
    assert a * RingElement.zero() == RingElement.zero()

def test_negacyclic_wrap_at_degree_128():
    # x * x^127 = x^128 = -1
    r = _monomial(1) * _monomial(127)
    assert r[0] == Q - 1
    assert all(c == 0 for c in r.coefficients[1:])

def test_negacyclic_fold_of_top_degree():
    # x^127 * x^127 = x^254 = -x^126
    r = _monomial(127) * _monomial(127)
    assert r[126] == Q - 1
    assert sum(r.coefficients) == Q - 1

def test_no_fold_below_degree_128():
    r = _monomial(60) * _monomial(67)
    assert r == _monomial(127)

def test_mul_on_debug_modulus():
    p    = RingParams.preset("debug")
    rng  = random.Random(11)
    a, b = RingElement.random(rng, p), RingElement.random(rng, p)
    assert list((a * b).coefficients) == _reference_mul(a, b)


# ── Encoding ─────────────────────────────────────────────────────────────────
def test_bytes_roundtrip_and_order():
    a = RingElement.random(random.Random(8))
    data = a.to_bytes()
    assert len(data) == 128
    assert data[0] == a[0] and data[127] == a[127]
    assert RingElement.from_bytes(data) == a

def test_from_bytes_rejects_bad_input():
    with pytest.raises(ValueError):
        RingElement.from_bytes(bytes(64))
    with pytest.raises(ValueError):
        RingElement.from_bytes(bytes([0xFF]) + bytes(127))

def test_hex_rendering():
    a = RingElement.one()
    assert a.hex() == "01" + "00" * 127
    assert str(RingElement.filled(250)) == "fa" * 128


# ── run directly ─────────────────────────────────────────────────────────────
if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
