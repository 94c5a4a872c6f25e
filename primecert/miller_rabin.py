"""
Strong pseudoprime (Miller-Rabin) test.

Responsibility: witness-based composite detection only. Choosing bases
for a deterministic answer is the classifier's job.
"""

from typing import Iterable, Optional

from .arithmetic import Arithmetic, arithmetic_for, split_power_of_two
from .errors import InvalidArgument, validate_integer
from .randomness import default_source


def strong_probable_prime(n: int, bases: Iterable[int],
                          ar: Optional[Arithmetic] = None) -> bool:
    """
    Miller-Rabin core for odd n > 3, without argument checks.

    Bases are reduced mod n; a base that is 0 mod n is skipped, which lets
    the classifier use fixed basis tables that may exceed small n.

    Parameters
    ----------
    n : int
        Odd integer > 3.
    bases : iterable of int
        Bases to test.
    ar : Arithmetic, optional
        Backend; chosen from n when omitted.

    Returns
    -------
    bool
        False if some base proves n composite.
    """
    if ar is None:
        ar = arithmetic_for(n)
    n_minus_1 = n - 1
    d, s = split_power_of_two(n_minus_1)

    for a in bases:
        a %= n
        if a == 0:
            continue
        x = ar.powmod(a, d, n)
        if x == 1 or x == n_minus_1:
            continue
        for _ in range(s - 1):
            x = ar.mulmod(x, x, n)
            if x == n_minus_1:
                break
            if x == 1:
                return False
        else:
            return False
    return True


def is_strong_pseudoprime(n, *bases) -> bool:
    """
    Return True if n is prime or a strong pseudoprime to every base.

    Even n other than 2 always returns False, n < 2 returns False and
    n in {2, 3} returns True. For any other n each base must lie in
    [2, n-2].

    Parameters
    ----------
    n : int
        Nonnegative integer.
    *bases : int
        One or more bases.

    Returns
    -------
    bool
    """
    n = validate_integer(n)
    if not bases:
        raise InvalidArgument("At least one base is required")
    bases = [validate_integer(a, 'base') for a in bases]

    if n < 2:
        return False
    if n < 4:
        return True
    if not n & 1:
        return False

    for a in bases:
        if not 2 <= a <= n - 2:
            raise InvalidArgument(f"Base {a} outside [2, {n - 2}]")

    return strong_probable_prime(n, bases)


def miller_rabin_random(n, ntests: int, source=None) -> bool:
    """
    Run ntests Miller-Rabin rounds with bases drawn uniformly from [2, n-2].

    Parameters
    ----------
    n : int
        Nonnegative integer.
    ntests : int
        Number of random bases.
    source : RandomBitSource, optional
        Random source; the shared default source when omitted.

    Returns
    -------
    bool
        False if n is proven composite, True otherwise.
    """
    n = validate_integer(n)
    ntests = validate_integer(ntests, 'ntests')
    if source is None:
        source = default_source()

    if n < 2:
        return False
    if n < 4:
        return True
    if not n & 1:
        return False

    ar = arithmetic_for(n)
    for _ in range(ntests):
        a = 2 + source.draw_range(n - 4)
        if not strong_probable_prime(n, (a,), ar):
            return False
    return True
