"""
Sampling — public parameter and noise
======================================
Every sampler takes its randomness source as an argument; nothing here
touches module-level RNG state, so a seeded random.Random reproduces a
whole exchange. Any object with randrange(stop) works: random.Random,
secrets.SystemRandom, or a test double. Its exceptions propagate.

Noise is uniform over [0, Q/16). That is a coarse stand-in for a small
centred error distribution (not a discrete Gaussian) and the bound the
reconciliation thresholds are sized against.
"""

import hashlib
import logging

from .params import RingParams, DEFAULT_PARAMS
from .ring import RingElement

logger = logging.getLogger(__name__)

SEED_BYTES = 32


def generate_parameter(rng, params: RingParams = DEFAULT_PARAMS) -> RingElement:
    """Fresh shared parameter A, uniform over the ring."""
    return RingElement.random(rng, params)


def sample_noise(rng, params: RingParams = DEFAULT_PARAMS) -> RingElement:
    """Noise element: each coefficient uniform in [0, Q/16)."""
    bound = params.noise_bound
    return RingElement._from_result(
        [rng.randrange(bound) for _ in range(params.n)], params)


def derive_parameter(seed: bytes,
                     params: RingParams = DEFAULT_PARAMS) -> RingElement:
    """
    Expand a 32-byte seed into A with SHAKE-128 and rejection sampling.

    Each output byte below Q becomes the next coefficient; bytes >= Q are
    skipped. Both endpoints holding the seed derive the same A, so the
    seed can travel instead of the 128-byte element.
    """
    if len(seed) != SEED_BYTES:
        raise ValueError(f"seed must be {SEED_BYTES} bytes, got {len(seed)}")
    q, n = params.q, params.n
    xof    = hashlib.shake_128(seed)
    length = 2 * n
    while True:
        stream = xof.digest(length)
        coeffs = [b for b in stream if b < q][:n]
        if len(coeffs) == n:
            break
        length *= 2
    logger.debug(f"derive_parameter: {length} XOF bytes for q={q}")
    return RingElement._from_result(coeffs, params)
