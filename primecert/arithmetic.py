"""
Modular arithmetic primitives.

Responsibility: exact add/sub/mul/pow modulo n, gcd, Jacobi symbol and
perfect-square detection. Nothing above this module knows how wide the
integers are; it only calls the Arithmetic interface.

Two backends:
- NativeArithmetic: all operands below 2^64, plain Python integer ops.
- GmpArithmetic: arbitrary magnitude, backed by gmpy2.

Both return plain int, so results from either can be mixed freely.
"""

from abc import ABC, abstractmethod
from math import gcd as _gcd, isqrt
from typing import Tuple

import gmpy2

NATIVE_LIMIT = 1 << 64


class Arithmetic(ABC):
    """Numeric capability the primality algorithms are written against."""

    name = 'abstract'

    def addmod(self, a: int, b: int, n: int) -> int:
        return (a + b) % n

    def submod(self, a: int, b: int, n: int) -> int:
        return (a - b) % n

    @abstractmethod
    def mulmod(self, a: int, b: int, n: int) -> int:
        ...

    @abstractmethod
    def powmod(self, a: int, e: int, n: int) -> int:
        ...

    @abstractmethod
    def gcd(self, a: int, b: int) -> int:
        ...

    @abstractmethod
    def jacobi(self, a: int, n: int) -> int:
        ...

    @abstractmethod
    def is_square(self, n: int) -> bool:
        ...

    def bit_length(self, n: int) -> int:
        return int(n).bit_length()

    def is_odd(self, n: int) -> bool:
        return bool(n & 1)

    def __repr__(self):
        return f"{type(self).__name__}()"


class NativeArithmetic(Arithmetic):
    """Backend for moduli below 2^64.

    Products are at most 128 bits wide, which Python ints hold exactly.
    """

    name = 'native'

    def mulmod(self, a: int, b: int, n: int) -> int:
        return (a * b) % n

    def powmod(self, a: int, e: int, n: int) -> int:
        return pow(a, e, n)

    def gcd(self, a: int, b: int) -> int:
        return _gcd(a, b)

    def jacobi(self, a: int, n: int) -> int:
        if n <= 0 or not n & 1:
            raise ValueError(f"Jacobi symbol needs odd positive n, got {n}")
        a %= n
        result = 1
        while a != 0:
            while not a & 1:
                a >>= 1
                if n & 7 in (3, 5):
                    result = -result
            a, n = n, a
            if a & 3 == 3 and n & 3 == 3:
                result = -result
            a %= n
        return result if n == 1 else 0

    def is_square(self, n: int) -> bool:
        if n < 0:
            return False
        # Squares mod 16 are 0, 1, 4, 9
        if n & 15 not in (0, 1, 4, 9):
            return False
        r = isqrt(n)
        return r * r == n


class GmpArithmetic(Arithmetic):
    """Backend for arbitrary-magnitude moduli."""

    name = 'gmp'

    def mulmod(self, a: int, b: int, n: int) -> int:
        return int(gmpy2.mpz(a) * b % n)

    def powmod(self, a: int, e: int, n: int) -> int:
        return int(gmpy2.powmod(a, e, n))

    def gcd(self, a: int, b: int) -> int:
        return int(gmpy2.gcd(a, b))

    def jacobi(self, a: int, n: int) -> int:
        if n <= 0 or not n & 1:
            raise ValueError(f"Jacobi symbol needs odd positive n, got {n}")
        return int(gmpy2.jacobi(a, n))

    def is_square(self, n: int) -> bool:
        if n < 0:
            return False
        return bool(gmpy2.is_square(n))

    def bit_length(self, n: int) -> int:
        return int(gmpy2.bit_length(gmpy2.mpz(n)))


NATIVE = NativeArithmetic()
GMP = GmpArithmetic()


def arithmetic_for(n: int) -> Arithmetic:
    """Pick the backend able to work modulo n."""
    return NATIVE if n < NATIVE_LIMIT else GMP


def addmod(a: int, b: int, n: int) -> int:
    return arithmetic_for(n).addmod(a, b, n)


def submod(a: int, b: int, n: int) -> int:
    return arithmetic_for(n).submod(a, b, n)


def mulmod(a: int, b: int, n: int) -> int:
    """Return a*b mod n, exact for any n."""
    return arithmetic_for(n).mulmod(a, b, n)


def powmod(a: int, e: int, n: int) -> int:
    """Return a^e mod n, exact for any n."""
    return arithmetic_for(n).powmod(a, e, n)


def gcd(a: int, b: int) -> int:
    return arithmetic_for(max(a, b)).gcd(a, b)


def jacobi(a: int, n: int) -> int:
    """Jacobi symbol (a/n) for odd positive n."""
    return arithmetic_for(n).jacobi(a, n)


def is_square(n: int) -> bool:
    return arithmetic_for(n).is_square(n)


def split_power_of_two(m: int) -> Tuple[int, int]:
    """
    Write m = d * 2^s with d odd.

    Parameters
    ----------
    m : int
        Positive integer.

    Returns
    -------
    tuple
        (d, s).
    """
    if m <= 0:
        raise ValueError(f"Expected a positive integer, got {m}")
    s = (m & -m).bit_length() - 1
    return m >> s, s
