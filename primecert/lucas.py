"""
Strong Lucas pseudoprime tests.

Responsibility: Lucas sequences modulo n and the three strong Lucas
acceptance rules. Each variant has its own parameter search and its own
acceptance window; they are not strictness levels of one test.

Variants
--------
STANDARD
    Selfridge parameters: D is the first of 5, -7, 9, -11, ... with
    (D/n) = -1, P = 1, Q = (1 - D)/4. With n + 1 = d * 2^s, n passes if
    U_d = 0 or V_{d*2^r} = 0 for some 0 <= r < s.
EXTRA_STRONG
    Q = 1, P = 3, 4, 5, ... until (P^2 - 4 / n) = -1. n passes if
    U_d = 0 and V_d = +-2, or V_{d*2^r} = 0 for some 0 <= r < s - 1.
ALMOST_EXTRA_STRONG
    Q = 1, P = 3, 3 + inc, 3 + 2 inc, ... Only V is computed: n passes if
    V_d = +-2 or V_{d*2^r} = 0 for some 0 <= r < s - 1.
"""

from enum import Enum
from typing import NamedTuple, Optional, Tuple

from .arithmetic import Arithmetic, arithmetic_for, split_power_of_two
from .errors import InvalidArgument, validate_integer


class LucasVariant(Enum):
    STANDARD = 'standard'
    EXTRA_STRONG = 'extra_strong'
    ALMOST_EXTRA_STRONG = 'almost_extra_strong'


class LucasParameters(NamedTuple):
    D: int
    P: int
    Q: int
    candidates: int  # how many D (or P) values were examined


def selfridge_parameters(n: int, ar: Optional[Arithmetic] = None) -> Optional[LucasParameters]:
    """
    Find Selfridge's (D, P, Q) for odd, non-square n.

    Parameters
    ----------
    n : int
        Odd integer > 1 that is not a perfect square.
    ar : Arithmetic, optional
        Backend; chosen from n when omitted.

    Returns
    -------
    LucasParameters or None
        None when some candidate D shares a proper factor with n,
        which proves n composite.
    """
    if ar is None:
        ar = arithmetic_for(n)
    D, candidates, found = selfridge_search(n, ar)
    if not found:
        return None
    return LucasParameters(D, 1, (1 - D) // 4, candidates)


def selfridge_search(n: int, ar: Optional[Arithmetic] = None) -> Tuple[int, int, bool]:
    """
    Walk 5, -7, 9, -11, ... until (D/n) = -1 or D shares a proper factor with n.

    Returns
    -------
    tuple
        (D, candidates examined, found). found is False when the search
        stopped on a factor of n.
    """
    if ar is None:
        ar = arithmetic_for(n)
    D = 5
    candidates = 1
    while True:
        j = ar.jacobi(D, n)
        if j == -1:
            return D, candidates, True
        if j == 0 and ar.gcd(abs(D), n) != n:
            return D, candidates, False
        D = -D - 2 if D > 0 else -D + 2
        candidates += 1


def _extra_strong_parameter(n: int, increment: int, ar: Arithmetic) -> Optional[LucasParameters]:
    """First P = 3, 3 + increment, ... with ((P^2 - 4)/n) = -1; Q = 1."""
    P = 3
    candidates = 1
    while True:
        D = P * P - 4
        j = ar.jacobi(D, n)
        if j == -1:
            break
        if j == 0 and ar.gcd(D, n) != n:
            return None
        P += increment
        candidates += 1
    return LucasParameters(D, P, 1, candidates)


def _halve(x: int, n: int) -> int:
    """x / 2 mod n for odd n."""
    if x & 1:
        x += n
    return (x >> 1) % n


def _lucas_sequence(n: int, P: int, Q: int, k: int, ar: Arithmetic) -> Tuple[int, int, int]:
    if k == 0:
        return 0, 2 % n, 1 % n

    D = (P * P - 4 * Q) % n
    P %= n
    Q %= n
    U, V, Qk = 1 % n, P, Q

    for bit in bin(k)[3:]:
        U = ar.mulmod(U, V, n)
        V = ar.submod(ar.mulmod(V, V, n), 2 * Qk, n)
        Qk = ar.mulmod(Qk, Qk, n)
        if bit == '1':
            U, V = (_halve(ar.addmod(ar.mulmod(P, U, n), V, n), n),
                    _halve(ar.addmod(ar.mulmod(D, U, n), ar.mulmod(P, V, n), n), n))
            Qk = ar.mulmod(Qk, Q, n)

    return U, V, Qk


def _lucas_v(n: int, P: int, k: int, ar: Arithmetic) -> int:
    """V_k(P, 1) mod n by the V-only ladder."""
    if k == 0:
        return 2 % n
    P %= n
    V, W = P, ar.submod(ar.mulmod(P, P, n), 2, n)   # V_1, V_2
    for bit in bin(k)[3:]:
        if bit == '1':
            V = ar.submod(ar.mulmod(V, W, n), P, n)
            W = ar.submod(ar.mulmod(W, W, n), 2, n)
        else:
            W = ar.submod(ar.mulmod(V, W, n), P, n)
            V = ar.submod(ar.mulmod(V, V, n), 2, n)
    return V


def lucas_sequence(n, P: int, Q: int, k) -> Tuple[int, int, int]:
    """
    Return (U_k, V_k, Q^k) mod n for the Lucas sequences of (P, Q).

    Parameters
    ----------
    n : int
        Odd modulus >= 3.
    P, Q : int
        Sequence parameters (may be negative).
    k : int
        Nonnegative index.

    Returns
    -------
    tuple
        (U_k mod n, V_k mod n, Q^k mod n).
    """
    n = validate_integer(n, 'n', minimum=3)
    k = validate_integer(k, 'k')
    if not n & 1:
        raise InvalidArgument(f"Lucas sequence modulus must be odd, got {n}")
    return _lucas_sequence(n, int(P), int(Q), k, arithmetic_for(n))


def _strong_lucas_standard(n: int, ar: Arithmetic) -> bool:
    params = selfridge_parameters(n, ar)
    if params is None:
        return False

    d, s = split_power_of_two(n + 1)
    U, V, Qk = _lucas_sequence(n, params.P, params.Q, d, ar)

    if U == 0 or V == 0:
        return True
    for _ in range(s - 1):
        V = ar.submod(ar.mulmod(V, V, n), 2 * Qk, n)
        if V == 0:
            return True
        Qk = ar.mulmod(Qk, Qk, n)
    return False


def _strong_lucas_extra(n: int, ar: Arithmetic) -> bool:
    params = _extra_strong_parameter(n, 1, ar)
    if params is None:
        return False

    d, s = split_power_of_two(n + 1)
    U, V, _ = _lucas_sequence(n, params.P, 1, d, ar)

    if U == 0 and (V == 2 or V == n - 2):
        return True
    for _ in range(s - 1):
        if V == 0:
            return True
        V = ar.submod(ar.mulmod(V, V, n), 2, n)
    return False


def _strong_lucas_almost_extra(n: int, increment: int, ar: Arithmetic) -> bool:
    params = _extra_strong_parameter(n, increment, ar)
    if params is None:
        return False

    d, s = split_power_of_two(n + 1)
    V = _lucas_v(n, params.P, d, ar)

    if V == 2 or V == n - 2:
        return True
    for _ in range(s - 1):
        if V == 0:
            return True
        V = ar.submod(ar.mulmod(V, V, n), 2, n)
    return False


def strong_lucas_probable_prime(n: int, variant: LucasVariant = LucasVariant.STANDARD,
                                increment: int = 1, ar: Optional[Arithmetic] = None) -> bool:
    """Lucas core for odd n > 2, without argument checks."""
    if ar is None:
        ar = arithmetic_for(n)
    # A square never gives Jacobi symbol -1, so the parameter search
    # would not terminate.
    if ar.is_square(n):
        return False
    if variant is LucasVariant.STANDARD:
        return _strong_lucas_standard(n, ar)
    if variant is LucasVariant.EXTRA_STRONG:
        return _strong_lucas_extra(n, ar)
    return _strong_lucas_almost_extra(n, increment, ar)


def is_strong_lucas_pseudoprime(n, variant=LucasVariant.STANDARD, increment: int = 1) -> bool:
    """
    Return True if n is prime or a strong Lucas pseudoprime of the given variant.

    Parameters
    ----------
    n : int
        Nonnegative integer.
    variant : LucasVariant or str
        STANDARD (Selfridge), EXTRA_STRONG or ALMOST_EXTRA_STRONG.
    increment : int
        Step between P candidates; used by ALMOST_EXTRA_STRONG only,
        must be in [1, 256].

    Returns
    -------
    bool
    """
    n = validate_integer(n)
    try:
        variant = LucasVariant(variant)
    except ValueError:
        raise InvalidArgument(f"Unknown Lucas variant {variant!r}") from None
    increment = validate_integer(increment, 'increment', minimum=1)
    if increment > 256:
        raise InvalidArgument(f"increment={increment} must be <= 256")

    if n == 2:
        return True
    if n < 2 or not n & 1:
        return False
    return strong_lucas_probable_prime(n, variant, increment)
