"""
Tests for the primality classifier.

Every verdict below 2^64 must be exact; the deterministic Miller-Rabin
tables are checked at and around each of their thresholds against trial
division.
"""

import math

import numpy as np
import pytest

from primecert.classifier import (
    DETERMINISTIC_BASES,
    Verdict,
    classify,
    deterministic_bases,
    is_bpsw_probable_prime,
    is_prime,
)
from primecert.config import DEFAULT_CONFIG
from primecert.errors import InvalidArgument
from primecert.miller_rabin import is_strong_pseudoprime
from primecert.primes import prime_flags_upto, primes_upto

# Classifier forced onto the Miller-Rabin tables for every n < 2^64
TABLES_ONLY = DEFAULT_CONFIG.updated(bpsw_threshold=1 << 64)
# Classifier forced onto BPSW above the trial-division stage
BPSW_ONLY = DEFAULT_CONFIG.updated(bpsw_threshold=0)

MERSENNE_EXPONENTS = [2, 3, 5, 7, 13, 17, 19, 31, 61, 89, 107, 127, 521, 607, 1279]


def trial_division_is_prime(n: int, primes: np.ndarray) -> bool:
    """Reference primality by trial division with a numpy prime table."""
    if n < 2:
        return False
    r = math.isqrt(n)
    candidates = primes[primes <= r]
    return not np.any(n % candidates == 0)


class TestAgainstSieve:
    """classify agrees with the sieve exactly."""

    def test_below_bound(self):
        N = 200_000
        flags = prime_flags_upto(N)
        for n in range(N + 1):
            expected = Verdict.DEFINITELY_PRIME if flags[n] else Verdict.COMPOSITE
            assert classify(n) is expected, f"classify({n})"

    def test_bpsw_path_below_bound(self):
        """BPSW alone is exact below the bound too."""
        N = 50_000
        flags = prime_flags_upto(N)
        for n in range(N + 1):
            assert bool(is_prime(n, BPSW_ONLY)) == bool(flags[n]), f"n={n}"

    def test_is_bpsw_probable_prime(self):
        N = 50_000
        flags = prime_flags_upto(N)
        for n in range(N + 1):
            assert is_bpsw_probable_prime(n) == bool(flags[n]), f"n={n}"


class TestThresholds:
    """Each table row is exact right up to its bound."""

    def test_first_bound_is_pseudoprime(self):
        # 9080191 = 2131 * 4261 fools bases 31 and 73
        assert 2131 * 4261 == 9080191
        assert is_strong_pseudoprime(9080191, 31, 73)
        assert classify(9080191) is Verdict.COMPOSITE
        assert classify(9080190) is Verdict.COMPOSITE

    def test_second_bound_is_pseudoprime(self):
        # 4759123141 = 48781 * 97561 fools bases 2, 7, 61
        assert 48781 * 97561 == 4759123141
        assert is_strong_pseudoprime(4759123141, 2, 7, 61)
        assert classify(4759123141) is Verdict.COMPOSITE

    def test_basis_lookup(self):
        assert deterministic_bases(100) == (31, 73)
        assert deterministic_bases(9_080_190) == (31, 73)
        assert deterministic_bases(9_080_191) == (2, 7, 61)
        assert deterministic_bases((1 << 64) - 1) == DETERMINISTIC_BASES[-1][1]
        with pytest.raises(ValueError):
            deterministic_bases(1 << 64)

    def test_windows_against_trial_division(self):
        """classify is exact in a window around each bound up to 3.2e13."""
        bounds = [bound for bound, _ in DETERMINISTIC_BASES[:4]]
        primes = primes_upto(math.isqrt(bounds[-1] + 200) + 1)
        for bound in bounds:
            for n in range(bound - 100, bound + 100):
                expected = trial_division_is_prime(n, primes)
                assert bool(is_prime(n)) == expected, f"classify({n})"
                assert bool(is_prime(n, TABLES_ONLY)) == expected, f"tables({n})"

    def test_tables_and_bpsw_agree(self):
        """Both exact methods give the same verdict on random odd n < 2^64."""
        rng = np.random.default_rng(7)
        bounds = [bound for bound, _ in DETERMINISTIC_BASES]
        for bound in bounds:
            for _ in range(200):
                n = int(rng.integers(bound // 2, bound - 1, dtype=np.uint64)) | 1
                assert classify(n, TABLES_ONLY) == classify(n, BPSW_ONLY), f"n={n}"


class TestLargeInputs:
    """Verdict levels above and below 2^64."""

    def test_mersenne(self):
        for p in MERSENNE_EXPONENTS:
            m = 2 ** p - 1
            expected = Verdict.DEFINITELY_PRIME if m < 1 << 64 else Verdict.PROBABLY_PRIME
            assert classify(m) is expected, f"M{p}"

    def test_mersenne_composites(self):
        for p in (11, 23, 29, 37, 67, 101, 257):
            assert classify(2 ** p - 1) is Verdict.COMPOSITE, f"M{p}"

    def test_largest_64_bit_prime(self):
        assert classify((1 << 64) - 59) is Verdict.DEFINITELY_PRIME
        assert classify((1 << 64) - 1) is Verdict.COMPOSITE

    def test_strong_pseudoprime_to_many_bases(self):
        # 3825123056546413051 = 149491 * 747451 * 34233211 fools bases 2..23
        n = 3825123056546413051
        assert 149491 * 747451 * 34233211 == n
        assert is_strong_pseudoprime(n, 2, 3, 5, 7, 11, 13, 17, 19, 23)
        assert classify(n) is Verdict.COMPOSITE
        assert classify(n, TABLES_ONLY) is Verdict.COMPOSITE

    def test_products_of_large_primes(self):
        p, q = 2 ** 61 - 1, 2 ** 89 - 1
        assert classify(p * q) is Verdict.COMPOSITE
        assert classify(q * q) is Verdict.COMPOSITE

    def test_never_definite_above_64_bits(self):
        n = 2 ** 127 - 1
        assert classify(n) is Verdict.PROBABLY_PRIME
        assert is_prime(n)
        assert is_prime(n) is Verdict.PROBABLY_PRIME

    def test_is_prime_reports_level(self):
        """is_prime keeps probable and definite apart."""
        assert is_prime(97) is Verdict.DEFINITELY_PRIME
        assert is_prime(97) == 2
        assert is_prime(2 ** 89 - 1) == 1
        assert is_prime(91) == 0
        assert not is_prime(91)


class TestContract:
    """Ordering, idempotence, input validation."""

    def test_verdict_order(self):
        assert Verdict.COMPOSITE < Verdict.PROBABLY_PRIME < Verdict.DEFINITELY_PRIME

    def test_tiny(self):
        assert classify(0) is Verdict.COMPOSITE
        assert classify(1) is Verdict.COMPOSITE
        for p in (2, 3, 5, 7, 11, 13):
            assert classify(p) is Verdict.DEFINITELY_PRIME

    def test_idempotent(self):
        for n in (9080191, 2 ** 89 - 1, 3825123056546413051, 1_000_003):
            assert classify(n) is classify(n)

    @pytest.mark.parametrize("bad", [-1, 2.5, "7", None, True])
    def test_invalid(self, bad):
        with pytest.raises(InvalidArgument):
            classify(bad)

    def test_numpy_integer(self):
        assert classify(np.int64(1_000_003)) is Verdict.DEFINITELY_PRIME


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
