"""
Random prime generation.

Responsibility: uniform selection of a prime from a range, and the
n-digit / n-bit wrappers.

Strategy, once the range is tightened to primes low < high:

- high below small_range_limit: draw a uniform rank between the prime
  counts of low and high and map it back with nth_prime. Exactly uniform.
- otherwise: look at odd numbers only. If the odd span fits one random
  word, draw candidates directly until one is prime. If not, pick a
  high-order block once (draw_range) and redraw only the low-order word
  per retry, in the manner of Fouque-Tibouchi algorithm A1.

Candidates divisible by a small odd prime are skipped before the
classifier runs. Every loop is capped by retry_limit.
"""

from typing import Optional, Tuple

from .classifier import Verdict, classify
from .config import DEFAULT_CONFIG, PrimeConfig
from .errors import RandomSourceExhausted, validate_integer
from .primes import PrimeCache, default_cache
from .randomness import RandomBitSource, default_source

NATIVE_BITS = 64


def _exhausted(config: PrimeConfig) -> RandomSourceExhausted:
    return RandomSourceExhausted(
        f"No prime found in {config.retry_limit} candidates; is the random source broken?")


def _random_prime_between(low: int, high: int, source: RandomBitSource,
                          cache: PrimeCache, config: PrimeConfig) -> int:
    """
    Uniform prime from [low, high].

    low and high must both be odd (or low == 2) and low < high. They are
    normally primes, but the large n-bit ranges pass odd bounds.
    """
    if high < config.small_range_limit:
        first = cache.prime_count(low)
        last = cache.prime_count(high)
        return cache.nth_prime(first + source.draw_below(last - first + 1))

    if low == 2:
        low = 1   # candidate 1 stands for the prime 2
    if low % 2 == 0 or high % 2 == 0:
        raise ValueError(f"Invalid bounds [{low}, {high}]: both must be odd")

    odd_range = (high - low) // 2 + 1

    if odd_range <= source.max_value:
        for _ in range(config.retry_limit):
            candidate = low + 2 * source.draw_below(odd_range)
            if candidate > 11 and (candidate % 3 == 0 or candidate % 5 == 0
                                   or candidate % 7 == 0 or candidate % 11 == 0):
                continue
            if candidate == 1:
                return 2
            if classify(candidate, config) is not Verdict.COMPOSITE:
                return candidate
        raise _exhausted(config)

    # More range than one word can address: fix the upper part once,
    # vary the lower word.
    offset = source.draw_range(odd_range - source.max_value)
    block_low = low + 2 * offset

    for _ in range(config.retry_limit):
        candidate = block_low + 2 * source.draw_below(source.max_value)
        if candidate > 13 and (candidate % 3 == 0 or candidate % 5 == 0 or candidate % 7 == 0
                               or candidate % 11 == 0 or candidate % 13 == 0):
            continue
        if candidate == 1:
            return 2
        if classify(candidate, config) is not Verdict.COMPOSITE:
            return candidate
    raise _exhausted(config)


def random_prime(low, high=None, source: Optional[RandomBitSource] = None,
                 cache: Optional[PrimeCache] = None,
                 config: Optional[PrimeConfig] = None) -> Optional[int]:
    """
    Uniformly chosen prime p with low <= p <= high.

    random_prime(high) is the same as random_prime(2, high).

    Parameters
    ----------
    low, high : int
        Inclusive bounds.
    source : RandomBitSource, optional
        Random source; the shared default source when omitted.
    cache : PrimeCache, optional
        Sieve cache for the range tightening and small-range branch.
    config : PrimeConfig, optional

    Returns
    -------
    int or None
        None when the range holds no prime.
    """
    if high is None:
        low, high = 2, low
    low = validate_integer(low, 'low')
    high = validate_integer(high, 'high')
    source = source or default_source()
    cache = cache or default_cache()
    config = config or DEFAULT_CONFIG

    # Tighten the range to the nearest primes.
    low = cache.next_prime(max(low, 2) - 1)
    high = cache.prev_prime(high + 1)
    if high is None or low > high:
        return None
    if low == high:
        return low if classify(low, config) is not Verdict.COMPOSITE else None

    return _random_prime_between(low, high, source, cache, config)


def _ndigit_range(digits: int, cache: PrimeCache) -> Tuple[int, int]:
    low, high = 10 ** (digits - 1), 10 ** digits
    if high.bit_length() > NATIVE_BITS:
        return low + 1, high - 1
    return cache.next_prime(low), cache.prev_prime(high)


def _nbit_range(bits: int, cache: PrimeCache) -> Tuple[int, int]:
    if bits == 2:
        return 2, 3
    if bits == 3:
        return 5, 7
    if bits > NATIVE_BITS:
        # Don't pull the range in to primes, just odds
        return (1 << (bits - 1)) + 1, (1 << bits) - 1
    return cache.next_prime(1 << (bits - 1)), cache.prev_prime(1 << bits)


def random_ndigit_prime(digits, source: Optional[RandomBitSource] = None,
                        cache: Optional[PrimeCache] = None,
                        config: Optional[PrimeConfig] = None) -> int:
    """
    Uniformly chosen prime with exactly the given number of decimal digits.

    Parameters
    ----------
    digits : int
        Between 1 and config.max_digits.

    Returns
    -------
    int
    """
    config = config or DEFAULT_CONFIG
    digits = validate_integer(digits, 'digits', minimum=1, maximum=config.max_digits)
    cache = cache or default_cache()
    low, high = _ndigit_range(digits, cache)
    return _random_prime_between(low, high, source or default_source(), cache, config)


def random_nbit_prime(bits, source: Optional[RandomBitSource] = None,
                      cache: Optional[PrimeCache] = None,
                      config: Optional[PrimeConfig] = None) -> int:
    """
    Uniformly chosen prime p with 2^(bits-1) <= p < 2^bits.

    Parameters
    ----------
    bits : int
        Between 2 and config.max_bits.

    Returns
    -------
    int
    """
    config = config or DEFAULT_CONFIG
    bits = validate_integer(bits, 'bits', minimum=2, maximum=config.max_bits)
    cache = cache or default_cache()
    low, high = _nbit_range(bits, cache)
    return _random_prime_between(low, high, source or default_source(), cache, config)
