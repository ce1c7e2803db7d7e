"""
RING ARITHMETIC  |  Z_Q[x] / (x^128 + 1)
=========================================
RingElement is an immutable vector of 128 coefficients, each in [0, Q).

Operations:
    a + b        coefficientwise (a[i] + b[i]) mod Q
    a - b        coefficientwise (Q + a[i] - b[i]) mod Q
    a * k        scalar multiply, (a[i] * k) mod Q   (also k * a, a.scale(k))
    a * b        ring multiply: schoolbook convolution, then negacyclic fold

Negacyclic fold: x^128 == -1 in the quotient ring, so the degree d >= 128
term of the convolution is subtracted from degree d - 128. The convolution
of two degree-127 polynomials stops at degree 254, so coefficient 127 of
the result has nothing folded into it.

Wire form: 128 bytes, coefficient 0 first. Debug form: two hex digits per
coefficient, concatenated.
"""

from typing import Iterable

from .params import RingParams, DEFAULT_PARAMS


class InvariantViolation(AssertionError):
    """An internally produced coefficient fell outside [0, Q)."""


# -- Coefficient-list arithmetic ---------------------------------------------

def _add(a: list, b: list, q: int) -> list:
    return [(x + y) % q for x, y in zip(a, b)]

def _sub(a: list, b: list, q: int) -> list:
    return [(q + x - y) % q for x, y in zip(a, b)]

def _scale(a: list, k: int, q: int) -> list:
    return [(x * k) % q for x in a]

def _convolve(a: list, b: list, q: int) -> list:
    """Full product, degrees 0 .. 2n-2, reduced mod q after every term."""
    out = [0] * (len(a) + len(b) - 1)
    for i, x in enumerate(a):
        for j, y in enumerate(b):
            out[i + j] = (out[i + j] + x * y) % q
    return out

def _negacyclic_mul(a: list, b: list, q: int) -> list:
    n    = len(a)
    prod = _convolve(a, b, q)
    low  = prod[:n]
    high = prod[n:] + [0]   # no degree 2n-1 term
    return [(q + lo - hi) % q for lo, hi in zip(low, high)]


class RingElement:
    """
    Element of Z_Q[x]/(x^n + 1) with n = 128.

    Value type: immutable, hashable, equal when params and coefficients
    match. Build from caller data with RingElement(coeffs, params) or
    from_bytes(); both reject bad input with ValueError. Results of
    arithmetic are re-checked against [0, Q) and raise InvariantViolation
    if the range is ever broken.
    """

    def __init__(self, coefficients: Iterable[int],
                 params: RingParams = DEFAULT_PARAMS):
        coeffs = tuple(coefficients)
        if len(coeffs) != params.n:
            raise ValueError(
                f"RingElement needs {params.n} coefficients, got {len(coeffs)}")
        for i, c in enumerate(coeffs):
            if (not isinstance(c, int) or isinstance(c, bool)
                    or not 0 <= c < params.q):
                raise ValueError(
                    f"coefficient {i} = {c!r} outside [0, {params.q})")
        self._coeffs = coeffs
        self._params = params

    @classmethod
    def _from_result(cls, coeffs: list, params: RingParams) -> "RingElement":
        if len(coeffs) != params.n:
            raise InvariantViolation(
                f"result has {len(coeffs)} coefficients, expected {params.n}")
        for i, c in enumerate(coeffs):
            if not 0 <= c < params.q:
                raise InvariantViolation(
                    f"coefficient {i} = {c} escaped [0, {params.q})")
        obj = cls.__new__(cls)
        obj._coeffs = tuple(coeffs)
        obj._params = params
        return obj

    # -- constructors --------------------------------------------------------

    @classmethod
    def zero(cls, params: RingParams = DEFAULT_PARAMS) -> "RingElement":
        return cls._from_result([0] * params.n, params)

    @classmethod
    def one(cls, params: RingParams = DEFAULT_PARAMS) -> "RingElement":
        """The multiplicative identity 1 + 0x + ... + 0x^127."""
        return cls._from_result([1] + [0] * (params.n - 1), params)

    @classmethod
    def filled(cls, value: int,
               params: RingParams = DEFAULT_PARAMS) -> "RingElement":
        return cls([value] * params.n, params)

    @classmethod
    def random(cls, rng, params: RingParams = DEFAULT_PARAMS) -> "RingElement":
        """
        Uniform element: each coefficient drawn independently from [0, Q).
        `rng` is any source with randrange(stop); its errors propagate.
        """
        return cls._from_result(
            [rng.randrange(params.q) for _ in range(params.n)], params)

    @classmethod
    def from_bytes(cls, data: bytes,
                   params: RingParams = DEFAULT_PARAMS) -> "RingElement":
        if len(data) != params.n:
            raise ValueError(
                f"encoded RingElement must be {params.n} bytes, got {len(data)}")
        return cls(list(data), params)

    # -- accessors -----------------------------------------------------------

    @property
    def params(self) -> RingParams:
        return self._params

    @property
    def coefficients(self) -> tuple:
        return self._coeffs

    def __len__(self):
        return len(self._coeffs)

    def __iter__(self):
        return iter(self._coeffs)

    def __getitem__(self, i):
        return self._coeffs[i]

    # -- arithmetic ----------------------------------------------------------

    def _check_peer(self, other: "RingElement"):
        if self._params != other._params:
            raise ValueError(
                f"cannot combine elements over {self._params} and {other._params}")

    def __add__(self, other):
        if not isinstance(other, RingElement):
            return NotImplemented
        self._check_peer(other)
        q = self._params.q
        return RingElement._from_result(
            _add(self._coeffs, other._coeffs, q), self._params)

    def __sub__(self, other):
        if not isinstance(other, RingElement):
            return NotImplemented
        self._check_peer(other)
        q = self._params.q
        return RingElement._from_result(
            _sub(self._coeffs, other._coeffs, q), self._params)

    def scale(self, k: int) -> "RingElement":
        """Coefficientwise (a[i] * k) mod Q."""
        if not isinstance(k, int) or isinstance(k, bool):
            raise ValueError(f"scalar must be an int, got {type(k).__name__}")
        if k < 0:
            raise ValueError(f"scalar must be non-negative, got {k}")
        return RingElement._from_result(
            _scale(self._coeffs, k, self._params.q), self._params)

    def __mul__(self, other):
        if isinstance(other, RingElement):
            self._check_peer(other)
            return RingElement._from_result(
                _negacyclic_mul(list(self._coeffs), list(other._coeffs),
                                self._params.q),
                self._params)
        if isinstance(other, int) and not isinstance(other, bool):
            return self.scale(other)
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, int) and not isinstance(other, bool):
            return self.scale(other)
        return NotImplemented

    # -- encoding ------------------------------------------------------------

    def to_bytes(self) -> bytes:
        """128 bytes, coefficient 0 first."""
        return bytes(self._coeffs)

    def hex(self) -> str:
        return "".join(f"{c:02x}" for c in self._coeffs)

    def __str__(self):
        return self.hex()

    def __repr__(self):
        return f"RingElement(q={self._params.q}, {self.hex()[:16]}...)"

    def __eq__(self, other):
        if not isinstance(other, RingElement):
            return NotImplemented
        return self._params == other._params and self._coeffs == other._coeffs

    def __hash__(self):
        return hash((self._params, self._coeffs))
