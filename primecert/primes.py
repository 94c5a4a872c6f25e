"""
Sieve-backed prime search.

Responsibility: the next/previous prime, prime counting and nth prime
collaborators used by the random generators. Sieve state lives in a
caller-owned PrimeCache; the classifier never touches it.
"""

import math
import threading
from typing import Optional

import numpy as np

from .classifier import is_prime
from .errors import Unrepresentable, validate_integer


def prime_flags_upto(N: int) -> np.ndarray:
    """
    Return boolean array where flags[i] is True iff i is prime.

    Uses Sieve of Eratosthenes.

    Parameters
    ----------
    N : int
        Upper bound (inclusive).

    Returns
    -------
    np.ndarray
        Boolean array of length N+1.
    """
    flags = np.ones(N + 1, dtype=bool)
    flags[:2] = False
    for p in range(2, math.isqrt(N) + 1):
        if flags[p]:
            flags[p*p::p] = False
    return flags


def primes_upto(N: int) -> np.ndarray:
    """
    Return array of all primes <= N.

    Parameters
    ----------
    N : int
        Upper bound (inclusive).

    Returns
    -------
    np.ndarray
        Array of primes.
    """
    flags = prime_flags_upto(N)
    return np.nonzero(flags)[0]


# Largest sieve bound whose counts and primes fit int32 arrays
SIEVE_CEILING = (1 << 31) - 2


class PrimeCache:
    """
    Sieve of all integers up to a limit, grown on demand.

    Only prime_count and nth_prime grow the sieve. next_prime, prev_prime
    and is_prime read it when it already covers n and otherwise step
    through odd candidates with the classifier, so a single large query
    never pins a large sieve in memory.

    Parameters
    ----------
    limit : int
        Initial sieve bound. The sieve is built lazily on first use.
    max_limit : int
        Largest bound the cache will grow to. Counting and nth prime
        queries above it raise Unrepresentable.
    """

    def __init__(self, limit: int = 65536, max_limit: int = 1 << 24):
        self.max_limit = min(max(int(max_limit), 16), SIEVE_CEILING)
        self.limit = min(max(int(limit), 16), self.max_limit)
        self._flags = None
        self._counts = None
        self._primes = None
        self._lock = threading.Lock()

    @property
    def size(self) -> int:
        """Current sieve bound, 0 before the first query."""
        return 0 if self._flags is None else len(self._flags) - 1

    @property
    def nbytes(self) -> int:
        """Memory held by the sieve arrays."""
        with self._lock:
            if self._flags is None:
                return 0
            return self._flags.nbytes + self._counts.nbytes + self._primes.nbytes

    def _ensure(self, n: int) -> bool:
        """Make the sieve cover n; False if n is beyond max_limit."""
        if n > self.max_limit:
            return False
        with self._lock:
            if self._flags is not None and n < len(self._flags):
                return True
            target = max(self.limit, n)
            if self._flags is not None:
                target = max(target, min(2 * self.size, self.max_limit))
            flags = prime_flags_upto(target)
            self._flags = flags
            # pi(n) < 2^31 for every n below SIEVE_CEILING
            self._counts = np.cumsum(flags, dtype=np.int32)
            self._primes = np.nonzero(flags)[0].astype(np.int32)
            self.limit = target
        return True

    def _covers(self, n: int) -> bool:
        """True if n is inside the sieve, building it up to limit if needed."""
        return n <= self.limit and self._ensure(n)

    def release(self):
        """Drop the sieve arrays; the next query rebuilds them."""
        with self._lock:
            self._flags = self._counts = self._primes = None

    def is_prime(self, n) -> bool:
        n = validate_integer(n)
        if self._covers(n):
            return bool(self._flags[n])
        return bool(is_prime(n))

    def next_prime(self, n) -> int:
        """Smallest prime strictly greater than n."""
        n = validate_integer(n)
        if n < 2:
            return 2
        if self._covers(n + 1):
            idx = int(np.searchsorted(self._primes, n, side='right'))
            if idx < len(self._primes):
                return int(self._primes[idx])
        candidate = n + 1 if n % 2 == 0 else n + 2
        while not is_prime(candidate):
            candidate += 2
        return candidate

    def prev_prime(self, n) -> Optional[int]:
        """Largest prime strictly less than n, or None when n <= 2."""
        n = validate_integer(n)
        if n <= 2:
            return None
        if n == 3:
            return 2
        if self._covers(n):
            idx = int(np.searchsorted(self._primes, n, side='left'))
            return int(self._primes[idx - 1])
        candidate = n - 1 if n % 2 == 0 else n - 2
        while not is_prime(candidate):
            candidate -= 2
        return candidate

    def prime_count(self, n) -> int:
        """Number of primes <= n."""
        n = validate_integer(n)
        if n < 2:
            return 0
        if not self._ensure(n):
            raise Unrepresentable(f"prime_count({n}) is beyond the cache limit {self.max_limit}")
        return int(self._counts[n])

    def nth_prime(self, k) -> int:
        """The kth prime, nth_prime(1) == 2."""
        k = validate_integer(k, 'k', minimum=1)
        if k < 6:
            bound = 13
        else:
            # Rosser's bound: p_k < k (ln k + ln ln k) for k >= 6
            bound = int(k * (math.log(k) + math.log(math.log(k)))) + 1
        if not self._ensure(bound):
            raise Unrepresentable(f"nth_prime({k}) is beyond the cache limit {self.max_limit}")
        return int(self._primes[k - 1])


_default_cache = None
_default_lock = threading.Lock()


def default_cache() -> PrimeCache:
    """Cache used when a caller does not pass its own."""
    global _default_cache
    with _default_lock:
        if _default_cache is None:
            _default_cache = PrimeCache()
        return _default_cache


def next_prime(n, cache: Optional[PrimeCache] = None) -> int:
    return (cache or default_cache()).next_prime(n)


def prev_prime(n, cache: Optional[PrimeCache] = None) -> Optional[int]:
    return (cache or default_cache()).prev_prime(n)


def prime_count(n, cache: Optional[PrimeCache] = None) -> int:
    return (cache or default_cache()).prime_count(n)


def nth_prime(k, cache: Optional[PrimeCache] = None) -> int:
    return (cache or default_cache()).nth_prime(k)
