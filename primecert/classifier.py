"""
Primality classifier.

Responsibility: the cascade that turns n into a Verdict, cheapest check
first:

1. tiny n and divisibility by 2, 3, 5, 7
2. trial division by 11 .. 71
3. deterministic Miller-Rabin below the BPSW threshold
4. BPSW (Miller-Rabin base 2 + standard strong Lucas) above it

Below 2^64 every verdict is either COMPOSITE or DEFINITELY_PRIME. Above
2^64 a BPSW pass is PROBABLY_PRIME and is never reported as more.
"""

from bisect import bisect_right
from enum import IntEnum
from typing import Optional, Tuple

from .arithmetic import NATIVE_LIMIT, arithmetic_for
from .config import DEFAULT_CONFIG, PrimeConfig
from .errors import validate_integer
from .lucas import LucasVariant, strong_lucas_probable_prime
from .miller_rabin import strong_probable_prime


class Verdict(IntEnum):
    """Classification result, ordered by confidence."""
    COMPOSITE = 0
    PROBABLY_PRIME = 1
    DEFINITELY_PRIME = 2


TRIAL_PRIMES = (11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47, 53, 59, 61, 67, 71)

# (exclusive upper bound, bases) pairs; the last row covers all n < 2^64.
DETERMINISTIC_BASES = (
    (9_080_191, (31, 73)),
    (4_759_123_141, (2, 7, 61)),
    (105_936_894_253, (2, 1005905886, 1340600841)),
    (31_858_317_218_647, (2, 642735, 553174392, 3046413974)),
    (3_071_837_692_357_849, (2, 75088, 642735, 203659041, 3613982119)),
    (NATIVE_LIMIT, (2, 325, 9375, 28178, 450775, 9780504, 1795265022)),
)
_THRESHOLDS = [bound for bound, _ in DETERMINISTIC_BASES]


def deterministic_bases(n: int) -> Tuple[int, ...]:
    """
    Miller-Rabin bases that decide primality exactly for n.

    Parameters
    ----------
    n : int
        Integer below 2^64.

    Returns
    -------
    tuple of int
        Bases of the smallest tabulated threshold above n.
    """
    idx = bisect_right(_THRESHOLDS, n)
    if idx == len(_THRESHOLDS):
        raise ValueError(f"No deterministic basis is known for n={n} >= 2^64")
    return DETERMINISTIC_BASES[idx][1]


def _trial_verdict(n: int) -> Optional[Verdict]:
    """Steps 1 and 2 of the cascade; None when n survives them."""
    if n < 2:
        return Verdict.COMPOSITE
    if n in (2, 3, 5, 7):
        return Verdict.DEFINITELY_PRIME
    if n < 11 or n % 2 == 0 or n % 3 == 0 or n % 5 == 0 or n % 7 == 0:
        return Verdict.COMPOSITE
    for p in TRIAL_PRIMES:
        if p * p > n:
            return Verdict.DEFINITELY_PRIME
        if n % p == 0:
            return Verdict.COMPOSITE
    return None


def is_bpsw_probable_prime(n) -> bool:
    """
    Baillie-PSW: strong pseudoprime to base 2 and standard strong Lucas.

    Parameters
    ----------
    n : int
        Nonnegative integer.

    Returns
    -------
    bool
    """
    n = validate_integer(n)
    if n < 4:
        return n >= 2
    if not n & 1:
        return False
    ar = arithmetic_for(n)
    return (strong_probable_prime(n, (2,), ar)
            and strong_lucas_probable_prime(n, LucasVariant.STANDARD, ar=ar))


def classify(n, config: Optional[PrimeConfig] = None) -> Verdict:
    """
    Classify n as COMPOSITE, PROBABLY_PRIME or DEFINITELY_PRIME.

    Deterministic: the same n always yields the same verdict.

    Parameters
    ----------
    n : int
        Nonnegative integer of any size.
    config : PrimeConfig, optional
        Supplies bpsw_threshold.

    Returns
    -------
    Verdict
    """
    n = validate_integer(n)
    if config is None:
        config = DEFAULT_CONFIG

    verdict = _trial_verdict(n)
    if verdict is not None:
        return verdict

    ar = arithmetic_for(n)

    if n < config.bpsw_threshold:
        if strong_probable_prime(n, deterministic_bases(n), ar):
            return Verdict.DEFINITELY_PRIME
        return Verdict.COMPOSITE

    if not strong_probable_prime(n, (2,), ar):
        return Verdict.COMPOSITE
    if not strong_lucas_probable_prime(n, LucasVariant.STANDARD, ar=ar):
        return Verdict.COMPOSITE
    # BPSW has been checked exhaustively below 2^64.
    if n < NATIVE_LIMIT:
        return Verdict.DEFINITELY_PRIME
    return Verdict.PROBABLY_PRIME


def is_prime(n, config: Optional[PrimeConfig] = None) -> Verdict:
    """
    Primality level of n: 0 composite, 1 probably prime, 2 definitely prime.

    The result is the Verdict itself, so it is falsy only for composites.
    A truth test therefore reads "not composite"; compare against
    Verdict.DEFINITELY_PRIME when a proven prime is required.
    """
    return classify(n, config)
