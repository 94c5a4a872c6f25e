"""
Error taxonomy and argument validation.

Responsibility: every public entry point validates here, eagerly, before
any arithmetic is done.
"""

from numbers import Integral
from typing import Optional


class PrimeError(Exception):
    """Base class for all primecert errors."""


class InvalidArgument(PrimeError, ValueError):
    """Non-integer, negative or out-of-domain input."""


class Unrepresentable(PrimeError, OverflowError):
    """Requested size exceeds the configured precision ceiling."""


class RandomSourceExhausted(PrimeError, RuntimeError):
    """A randomized search hit its retry ceiling.

    This signals a degenerate or biased random source, not a
    mathematical impossibility.
    """


class InternalError(PrimeError, RuntimeError):
    """A constructed prime failed its final check."""


def validate_integer(n, name: str = 'n', minimum: int = 0,
                     maximum: Optional[int] = None) -> int:
    """
    Check that n is an integer within [minimum, maximum] and return it as int.

    Parameters
    ----------
    n : Integral
        Value to validate. bool is rejected.
    name : str
        Parameter name used in error messages.
    minimum : int
        Smallest accepted value (default 0).
    maximum : int, optional
        Largest accepted value. Exceeding it raises Unrepresentable.

    Returns
    -------
    int
    """
    if isinstance(n, bool) or not isinstance(n, Integral):
        raise InvalidArgument(f"Parameter {name}={n!r} must be an integer")
    n = int(n)
    if n < 0:
        raise InvalidArgument(f"Parameter {name}={n} must be nonnegative")
    if n < minimum:
        raise InvalidArgument(f"Parameter {name}={n} must be >= {minimum}")
    if maximum is not None and n > maximum:
        raise Unrepresentable(f"Parameter {name}={n} must be <= {maximum}")
    return n
