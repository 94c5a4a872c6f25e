"""
Tests for the modular arithmetic backends.

The native and gmpy2 backends must agree with each other and with plain
Python big-integer arithmetic on every operation.
"""

import numpy as np
import pytest

from primecert.arithmetic import (
    GMP,
    NATIVE,
    NATIVE_LIMIT,
    arithmetic_for,
    gcd,
    is_square,
    jacobi,
    mulmod,
    powmod,
    split_power_of_two,
)

BACKENDS = [NATIVE, GMP]


def random_triples(count, bound, seed=0):
    """(a, b, n) with 0 <= a, b < n < bound, built from numpy draws."""
    rng = np.random.default_rng(seed)
    triples = []
    for _ in range(count):
        n = 2 + int(rng.integers(0, 1 << 62)) * int(rng.integers(1, 1 << 62)) % (bound - 2)
        a = int(rng.integers(0, 1 << 62)) % n
        b = int(rng.integers(0, 1 << 62)) % n
        triples.append((a, b, n))
    return triples


class TestBackendSelection:
    """arithmetic_for picks native below 2^64 and gmpy2 above."""

    def test_native_below_limit(self):
        assert arithmetic_for(NATIVE_LIMIT - 1) is NATIVE

    def test_gmp_at_limit(self):
        assert arithmetic_for(NATIVE_LIMIT) is GMP
        assert arithmetic_for(2 ** 127 - 1) is GMP


class TestModularOps:
    """mulmod and powmod are exact at every width."""

    @pytest.mark.parametrize("ar", BACKENDS, ids=lambda ar: ar.name)
    def test_mulmod_near_64_bits(self, ar):
        n = NATIVE_LIMIT - 59   # largest 64-bit prime
        a, b = n - 1, n - 2
        assert ar.mulmod(a, b, n) == (a * b) % n

    @pytest.mark.parametrize("ar", BACKENDS, ids=lambda ar: ar.name)
    def test_mulmod_matches_python(self, ar):
        for a, b, n in random_triples(200, NATIVE_LIMIT):
            assert ar.mulmod(a, b, n) == (a * b) % n

    def test_big_modulus(self):
        n = 2 ** 521 - 1
        a, b = 3 ** 300, 7 ** 180
        assert mulmod(a, b, n) == (a * b) % n
        assert powmod(a, b, n) == pow(a, b, n)

    @pytest.mark.parametrize("ar", BACKENDS, ids=lambda ar: ar.name)
    def test_powmod_matches_python(self, ar):
        for a, e, n in random_triples(200, NATIVE_LIMIT, seed=1):
            assert ar.powmod(a, e, n) == pow(a, e, n)

    @pytest.mark.parametrize("ar", BACKENDS, ids=lambda ar: ar.name)
    def test_add_sub(self, ar):
        n = 1_000_003
        assert ar.addmod(n - 1, n - 1, n) == n - 2
        assert ar.submod(0, 1, n) == n - 1

    def test_results_are_plain_int(self):
        assert type(GMP.powmod(3, 100, 2 ** 89 - 1)) is int
        assert type(GMP.mulmod(3, 5, 7)) is int
        assert type(GMP.gcd(12, 18)) is int

    def test_gcd(self):
        assert gcd(12, 18) == 6
        assert gcd(2 ** 100, 6 ** 50) == 2 ** 50
        assert GMP.gcd(0, 35) == 35


class TestJacobi:
    """Jacobi symbol on both backends."""

    def test_known_values(self):
        assert jacobi(2, 7) == 1
        assert jacobi(3, 7) == -1
        assert jacobi(2, 15) == 1
        assert jacobi(-7, 5) == -1
        assert jacobi(6, 9) == 0
        assert jacobi(5, 1) == 1

    def test_backends_agree(self):
        """Native loop and gmpy2 give the same symbol, negative a included."""
        for n in range(1, 200, 2):
            for a in range(-50, 60):
                assert NATIVE.jacobi(a, n) == GMP.jacobi(a, n), f"({a}/{n})"

    def test_euler_criterion_for_primes(self):
        """For prime p, (a/p) = a^((p-1)/2) mod p."""
        for p in (101, 1009, 65537):
            for a in range(1, 60):
                euler = pow(a, (p - 1) // 2, p)
                assert jacobi(a, p) == (-1 if euler == p - 1 else euler)

    @pytest.mark.parametrize("ar", BACKENDS, ids=lambda ar: ar.name)
    def test_rejects_even_modulus(self, ar):
        with pytest.raises(ValueError):
            ar.jacobi(3, 10)
        with pytest.raises(ValueError):
            ar.jacobi(3, -7)


class TestSquares:
    """Perfect-square detection."""

    @pytest.mark.parametrize("ar", BACKENDS, ids=lambda ar: ar.name)
    def test_small(self, ar):
        squares = {i * i for i in range(40)}
        for n in range(1600):
            assert ar.is_square(n) == (n in squares), f"is_square({n})"

    def test_large(self):
        r = 2 ** 200 + 1
        assert is_square(r * r)
        assert not is_square(r * r + 1)
        assert not is_square(r * r - 1)

    def test_negative(self):
        assert not NATIVE.is_square(-4)
        assert not GMP.is_square(-4)


class TestSplitPowerOfTwo:
    """m = d * 2^s with d odd."""

    def test_values(self):
        assert split_power_of_two(48) == (3, 4)
        assert split_power_of_two(7) == (7, 0)
        assert split_power_of_two(1 << 70) == (1, 70)

    def test_rejects_nonpositive(self):
        with pytest.raises(ValueError):
            split_power_of_two(0)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
