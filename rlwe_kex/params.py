"""
Parameter table — modulus and reconciliation thresholds
========================================================
Everything the ring and the reconciliation step need to know about Q is
computed once here, so the same code runs against the production prime
(251) and against a small debug modulus.

    Q/4, 3Q/4          signal regions
    Q/8 .. 7Q/8        secret-extraction bands
    Q/16               exclusive upper bound of the noise coefficients

All fractions are integer divisions of the full product (3*Q // 4, not
3 * (Q // 4)).
"""

N = 128   # ring degree -- Z_Q[x] / (x^128 + 1)

# Named parameter sets: name -> modulus
_PARAMS = {
    "production": 251,   # largest prime below 256, one byte per coefficient
    "debug"     : 17,    # smallest prime with Q // 16 >= 1
}

MIN_MODULUS = 16
MAX_MODULUS = 256


class RingParams:
    """Modulus Q plus the thresholds derived from it."""

    def __init__(self, modulus: int = 251):
        if not isinstance(modulus, int) or isinstance(modulus, bool):
            raise ValueError("modulus must be an int")
        if not MIN_MODULUS <= modulus <= MAX_MODULUS:
            raise ValueError(
                f"modulus must be in [{MIN_MODULUS}, {MAX_MODULUS}], got {modulus}")
        self.n = N
        self.q = modulus

        # signal regions
        self.q4  = modulus // 4
        self.q34 = 3 * modulus // 4

        # extraction bands
        self.q18 = modulus // 8
        self.q38 = 3 * modulus // 8
        self.q58 = 5 * modulus // 8
        self.q78 = 7 * modulus // 8

        self.noise_bound = modulus // 16

    @classmethod
    def preset(cls, name: str) -> "RingParams":
        if name not in _PARAMS:
            raise ValueError(f"unknown parameter set {name!r}, "
                             f"expected one of {sorted(_PARAMS)}")
        return cls(_PARAMS[name])

    def thresholds(self) -> dict:
        return {
            "q1/4": self.q4, "q3/4": self.q34,
            "q1/8": self.q18, "q3/8": self.q38,
            "q5/8": self.q58, "q7/8": self.q78,
            "q1/16": self.noise_bound,
        }

    def __eq__(self, other):
        if not isinstance(other, RingParams):
            return NotImplemented
        return self.q == other.q and self.n == other.n

    def __hash__(self):
        return hash((self.n, self.q))

    def __repr__(self):
        return f"RingParams(n={self.n}, q={self.q})"


DEFAULT_PARAMS = RingParams.preset("production")
