"""
KEY EXCHANGE + RECONCILIATION
==============================
Public share:
    public = A * secret + 2 * noise

Signal (from the designated party's public share p):
    w[i] = not (Q/4 <= p[i] < 3Q/4)

Secret bits (each party: own secret, peer's public share, shared w):
    cross    = secret * peer_public
    w[i] off -> bit = not (3Q/8 <= cross[i] < 5Q/8)     narrow band
    w[i] on  -> bit = not ( Q/8 <= cross[i] < 7Q/8)     wide band

The two parties' cross values differ by the noise terms only, so the
band choice keyed on w usually lands both on the same bit. Usually, not
always: a mismatch is reported to the caller, never repaired here.
"""

import logging
from typing import Tuple

from .params import RingParams
from .ring import RingElement, InvariantViolation
from .signal_vector import SignalVector
from .sampling import sample_noise

logger = logging.getLogger(__name__)


class PartyShare:
    """
    One participant's (secret, noise, public) triple.

    Only `public` is meant to leave the owning party; repr() and
    public_bytes() expose nothing else.
    """

    def __init__(self, secret: RingElement, noise: RingElement,
                 public: RingElement):
        if not secret.params == noise.params == public.params:
            raise ValueError("PartyShare elements must share one parameter set")
        self._secret = secret
        self._noise  = noise
        self._public = public

    @classmethod
    def build(cls, a: RingElement, secret: RingElement,
              noise: RingElement) -> "PartyShare":
        """public = a * secret + 2 * noise, from caller-chosen values."""
        doubled = noise.scale(2)
        public  = a * secret + doubled
        return cls(secret, noise, public)

    @property
    def secret(self) -> RingElement:
        return self._secret

    @property
    def noise(self) -> RingElement:
        return self._noise

    @property
    def public(self) -> RingElement:
        return self._public

    @property
    def params(self) -> RingParams:
        return self._public.params

    def public_bytes(self) -> bytes:
        return self._public.to_bytes()

    def as_tuple(self) -> Tuple[RingElement, RingElement, RingElement]:
        return self._secret, self._noise, self._public

    def __eq__(self, other):
        if not isinstance(other, PartyShare):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __hash__(self):
        return hash(self.as_tuple())

    def __repr__(self):
        return f"PartyShare(q={self.params.q}, public={self._public.hex()[:16]}...)"


def generate_party_share(a: RingElement, rng) -> PartyShare:
    """
    Sample a uniform secret and a noise element, then compute the public
    share against the shared parameter `a`. Randomness-source errors
    propagate to the caller.
    """
    params = a.params
    secret = RingElement.random(rng, params)
    noise  = sample_noise(rng, params)
    share  = PartyShare.build(a, secret, noise)
    logger.debug(f"party share generated (q={params.q})")
    return share


def _checked(value: int, q: int, i: int) -> int:
    if not 0 <= value < q:
        raise InvariantViolation(f"coefficient {i} = {value} outside [0, {q})")
    return value


def compute_signal(p: RingElement) -> SignalVector:
    """w[i] is set when p[i] lies in [0, Q/4) or [3Q/4, Q)."""
    params = p.params
    q, q4, q34 = params.q, params.q4, params.q34
    return SignalVector(
        not (q4 <= _checked(c, q, i) < q34) for i, c in enumerate(p))


def derive_secret_bits(w: SignalVector, secret: RingElement,
                       peer_public: RingElement) -> SignalVector:
    """
    Extract the shared bit string from `secret * peer_public`, choosing
    the narrow (3Q/8..5Q/8) or wide (Q/8..7Q/8) central band per
    coefficient according to the signal w.
    """
    if not isinstance(w, SignalVector):
        raise ValueError(f"w must be a SignalVector, got {type(w).__name__}")
    params = secret.params
    cross  = secret * peer_public
    q = params.q
    q18, q38, q58, q78 = params.q18, params.q38, params.q58, params.q78

    bits = []
    for i, (wide, c) in enumerate(zip(w, cross)):
        c = _checked(c, q, i)
        if wide:
            # p was in [0, Q/4) or [3Q/4, Q)
            bits.append(not (q18 <= c < q78))
        else:
            # p was in [Q/4, 3Q/4)
            bits.append(not (q38 <= c < q58))
    return SignalVector(bits)
