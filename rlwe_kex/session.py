"""
TWO-PARTY SESSION  |  driver around the core
=============================================
Runs Alice and Bob through one exchange in-process:

    1. A            <- uniform ring element (or derived from a seed)
    2. Alice, Bob   <- generate_party_share(A, rng)
    3. w            <- compute_signal(Bob.public)          Bob is designated
    4. sks_Alice    <- derive_secret_bits(w, Alice.secret, Bob.public)
       sks_Bob      <- derive_secret_bits(w, Bob.secret,   Alice.public)
    5. compare, report

The core never retries a mismatch; run_until_agreement() does, with fresh
randomness, and raises ReconciliationError when it gives up.

Agreed bits become key material through HKDF-SHA256, and an HMAC-SHA256
confirmation tag lets two endpoints compare keys without exchanging them.

Dependencies: cryptography >= 41.0
"""

import logging
import random
import secrets
from typing import Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from .params import RingParams, DEFAULT_PARAMS
from .ring import RingElement
from .signal_vector import SignalVector
from .sampling import generate_parameter, derive_parameter
from .reconcile import (PartyShare, generate_party_share, compute_signal,
                        derive_secret_bits)

logger = logging.getLogger(__name__)

SESSION_INFO  = b"rlwe-kex-session-v1"
CONFIRM_LABEL = b"rlwe-kex-confirm-v1"


class ReconciliationError(RuntimeError):
    """Every attempt ended with the two parties holding different bits."""


class ExchangeResult:
    """Everything one simulated exchange produced, plus its diagnostics."""

    def __init__(self, a: RingElement, alice: PartyShare, bob: PartyShare,
                 w: SignalVector, alice_bits: SignalVector,
                 bob_bits: SignalVector):
        self.a          = a
        self.alice      = alice
        self.bob        = bob
        self.w          = w
        self.alice_bits = alice_bits
        self.bob_bits   = bob_bits

    @property
    def matched(self) -> bool:
        return self.alice_bits == self.bob_bits

    @property
    def mismatch(self) -> SignalVector:
        return self.alice_bits ^ self.bob_bits

    @property
    def mismatch_count(self) -> int:
        return self.mismatch.count()

    @property
    def alice_signal(self) -> SignalVector:
        """The signal Alice would have produced (w' in the trace)."""
        return compute_signal(self.alice.public)

    @property
    def noise_delta(self) -> RingElement:
        """2 * (e_A + e_B)."""
        return (self.alice.noise + self.bob.noise).scale(2)

    def __repr__(self):
        return (f"ExchangeResult(q={self.a.params.q}, matched={self.matched}, "
                f"mismatched_bits={self.mismatch_count})")


class MismatchStats:
    """Mismatch counts over a batch of seeded exchanges."""

    def __init__(self, trials: int, mismatched_trials: int,
                 mismatched_bits: int, bits_per_trial: int = SignalVector.SIZE):
        self.trials            = trials
        self.mismatched_trials = mismatched_trials
        self.mismatched_bits   = mismatched_bits
        self.bits_per_trial    = bits_per_trial

    @property
    def trial_rate(self) -> float:
        return self.mismatched_trials / self.trials if self.trials else 0.0

    @property
    def bit_rate(self) -> float:
        total = self.trials * self.bits_per_trial
        return self.mismatched_bits / total if total else 0.0

    @property
    def agreement_rate(self) -> float:
        return 1.0 - self.trial_rate

    def __repr__(self):
        return (f"MismatchStats(trials={self.trials}, "
                f"trial_rate={self.trial_rate:.4f}, bit_rate={self.bit_rate:.4f})")


class KeyExchangeSession:
    """
    Drives both parties through the exchange.

    Usage:
        session = KeyExchangeSession(seed=1234)
        result  = session.run()
        if result.matched:
            key = derive_session_key(result.alice_bits)

    Pass `rng` (anything with randrange) or `seed` (builds a
    random.Random), not both. With neither, secrets.SystemRandom is used.
    """

    def __init__(self, params: RingParams = DEFAULT_PARAMS, rng=None,
                 seed: Optional[int] = None):
        if rng is not None and seed is not None:
            raise ValueError("pass either rng or seed, not both")
        if rng is None:
            rng = random.Random(seed) if seed is not None else secrets.SystemRandom()
        self.params = params
        self._rng   = rng
        logger.info(f"KeyExchangeSession q={params.q} n={params.n} "
                    f"seeded={seed is not None}")

    def new_parameter(self, seed: Optional[bytes] = None) -> RingElement:
        if seed is not None:
            return derive_parameter(seed, self.params)
        return generate_parameter(self._rng, self.params)

    def run(self, a: Optional[RingElement] = None) -> ExchangeResult:
        if a is None:
            a = self.new_parameter()
        elif a.params != self.params:
            raise ValueError(f"parameter A is over {a.params}, session uses {self.params}")

        alice = generate_party_share(a, self._rng)
        bob   = generate_party_share(a, self._rng)

        w = compute_signal(bob.public)
        alice_bits = derive_secret_bits(w, alice.secret, bob.public)
        bob_bits   = derive_secret_bits(w, bob.secret, alice.public)

        result = ExchangeResult(a, alice, bob, w, alice_bits, bob_bits)
        if result.matched:
            logger.info("exchange complete: secrets agree")
        else:
            logger.info(f"exchange complete: {result.mismatch_count} of "
                        f"{SignalVector.SIZE} bits disagree")
        return result

    def run_until_agreement(self, max_attempts: int = 5) -> ExchangeResult:
        """Repeat run() with fresh A and shares until both sides agree."""
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        for attempt in range(1, max_attempts + 1):
            result = self.run()
            if result.matched:
                logger.debug(f"agreement on attempt {attempt}")
                return result
            logger.info(f"attempt {attempt}/{max_attempts}: secret mismatch, retrying")
        raise ReconciliationError(
            f"no agreement after {max_attempts} attempts "
            f"(last attempt: {result.mismatch_count} bits differ)")


def measure_mismatch_rate(trials: int = 1000,
                          params: RingParams = DEFAULT_PARAMS,
                          seed: int = 0) -> MismatchStats:
    """One exchange per seed in seed .. seed + trials - 1."""
    if trials < 1:
        raise ValueError("trials must be at least 1")
    bad_trials = bad_bits = 0
    for t in range(trials):
        result = KeyExchangeSession(params, seed=seed + t).run()
        if not result.matched:
            bad_trials += 1
            bad_bits   += result.mismatch_count
    stats = MismatchStats(trials, bad_trials, bad_bits)
    logger.info(f"mismatch rate over {trials} trials: {stats.trial_rate:.4f} "
                f"(bit rate {stats.bit_rate:.4f})")
    return stats


# -- Key material ------------------------------------------------------------

def derive_session_key(bits: SignalVector, info: bytes = SESSION_INFO,
                       length: int = 32) -> bytes:
    """HKDF-SHA256 over the 16-byte encoding of the agreed bits."""
    return HKDF(
        algorithm=hashes.SHA256(),
        length=length,
        salt=None,
        info=info,
    ).derive(bits.to_bytes())


def key_confirmation_tag(key: bytes, label: bytes = CONFIRM_LABEL) -> bytes:
    h = hmac.HMAC(key, hashes.SHA256())
    h.update(label)
    return h.finalize()


def confirm_key(key: bytes, tag: bytes, label: bytes = CONFIRM_LABEL) -> bool:
    """True when `tag` was made with the same key (constant-time compare)."""
    h = hmac.HMAC(key, hashes.SHA256())
    h.update(label)
    try:
        h.verify(tag)
        return True
    except InvalidSignature:
        return False


# -- Debug trace -------------------------------------------------------------

def _share_lines(share: PartyShare) -> list:
    return [
        f"         s: {share.secret}",
        f"         e: {share.noise}",
        f"         p: {share.public}",
    ]


def format_trace(result: ExchangeResult) -> list:
    """
    Hex/bit trace of one exchange, one string per line. Includes secrets
    and noise: for local debugging only.
    """
    lines = [f"A         = {result.a}", "Alice:"]
    lines += _share_lines(result.alice)
    lines += ["Bob:"]
    lines += _share_lines(result.bob)
    w_alice = result.alice_signal
    lines += [
        f"w         = {result.w}",
        f"w'        = {w_alice}",
        f"w delta   = {result.w ^ w_alice}",
        f"sks Alice = {result.alice_bits}",
        f"sks Bob   = {result.bob_bits}",
        f"delta     = {result.mismatch}",
        f"A-B E   d = {result.noise_delta}",
    ]
    if not result.matched:
        p = result.a.params
        lines.append("sks mismatch")
        lines.append(f"q1/8 = {p.q18}; q3/8 = {p.q38}; "
                     f"q5/8 = {p.q58}; q7/8 = {p.q78}")
    return lines


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format=' %(message)s')
    result = KeyExchangeSession().run()
    print("\n".join(format_trace(result)))
