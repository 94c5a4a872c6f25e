"""
Maurer provable primes.

Responsibility: build a k-bit prime together with a certificate that
proves it prime, and check such certificates independently.

Each level takes a proven prime q and searches n = 2Rq + 1 with R drawn
from [I+1, 2I], I = floor(2^(k-1) / 2q). A witness a with

    a^(n-1) = 1 (mod n)   and   gcd(a^(2R) - 1, n) = 1

proves every prime factor of n is 1 mod q. Since (q+1)^2 > n, n is prime
(Pocklington). Below maurer_base_bits the prime comes from
random_nbit_prime and is proven by the deterministic classifier.

Reference: U. Maurer, "Fast Generation of Prime Numbers and Secure
Public-Key Cryptographic Parameters", 1995.
"""

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional, Tuple

import gmpy2

from .arithmetic import NATIVE_LIMIT, arithmetic_for
from .classifier import Verdict, classify
from .config import DEFAULT_CONFIG, PrimeConfig
from .errors import InternalError, RandomSourceExhausted, validate_integer
from .primes import PrimeCache, default_cache, primes_upto
from .random_primes import random_nbit_prime
from .randomness import RandomBitSource, default_source


@dataclass(frozen=True)
class MaurerCertificate:
    """
    Primality certificate for n.

    A leaf (q is None) holds a prime below 2^64, proven by classify().
    Otherwise n = 2Rq + 1, a is the Pocklington witness and
    q_certificate proves q.
    """
    n: int
    q: Optional[int] = None
    R: Optional[int] = None
    a: Optional[int] = None
    q_certificate: Optional['MaurerCertificate'] = None

    @property
    def is_leaf(self) -> bool:
        return self.q is None

    def as_tuple(self) -> Tuple[int, Optional[int], Optional[int], Optional[int]]:
        return self.n, self.q, self.R, self.a

    def chain(self) -> List['MaurerCertificate']:
        """Levels from this one down to the leaf."""
        levels = []
        node = self
        while node is not None:
            levels.append(node)
            node = node.q_certificate
        return levels

    @property
    def depth(self) -> int:
        return len(self.chain()) - 1


def _product(values) -> int:
    """Product of a sequence by balanced splitting."""
    if len(values) == 0:
        return 1
    if len(values) == 1:
        return int(values[0])
    mid = len(values) // 2
    return int(gmpy2.mpz(_product(values[:mid])) * _product(values[mid:]))


@lru_cache(maxsize=64)
def _small_prime_product(bound: int) -> int:
    """Product of all primes below bound."""
    if bound <= 2:
        return 1
    return _product(primes_upto(bound - 1))


def _size_chain(k: int, source: RandomBitSource, config: PrimeConfig) -> List[int]:
    """
    Bit sizes from k down to the base case.

    Each next size is ceil(r*k) + 1. r is config.maurer_fraction, or for
    k > 2m (m = maurer_min_gap) r = 2^(s-1) with s uniform in [0, 1),
    redrawn until k - r*k > m.
    """
    m = config.maurer_min_gap
    sizes = []
    while k > config.maurer_base_bits:
        sizes.append(k)
        r = config.maurer_fraction
        if k > 2 * m:
            for _ in range(config.retry_limit):
                r = 2 ** (source.draw_fraction() - 1)
                if k - r * k > m:
                    break
            else:
                raise RandomSourceExhausted(f"No Maurer size fraction found for k={k}")
        k = math.ceil(r * k) + 1
    sizes.append(k)
    return sizes


def _pocklington_level(k: int, q_cert: MaurerCertificate, source: RandomBitSource,
                       config: PrimeConfig) -> MaurerCertificate:
    """Find a k-bit n = 2Rq + 1 with a Pocklington witness."""
    q = q_cert.n
    B = min(int(config.maurer_trial_coefficient * k * k), config.maurer_trial_limit)
    small_product = _small_prime_product(B)
    I = (1 << (k - 1)) // (2 * q)

    for _ in range(config.retry_limit):
        R = I + 1 + source.draw_range(I - 1)
        n = 2 * R * q + 1
        ar = arithmetic_for(n)

        if ar.gcd(n, small_product) != 1:
            continue

        a = 2 + source.draw_range(n - 4)
        if ar.powmod(a, n - 1, n) != 1:
            continue
        if ar.gcd((ar.powmod(a, 2 * R, n) - 1) % n, n) != 1:
            continue
        if (q + 1) * (q + 1) <= n:
            continue

        if classify(n, config) is Verdict.COMPOSITE:
            raise InternalError(f"Maurer prime {n} failed the classifier")
        return MaurerCertificate(n, q, R, a, q_cert)

    raise RandomSourceExhausted(f"No {k}-bit Maurer prime in {config.retry_limit} candidates")


def random_maurer_prime_with_cert(bits, source: Optional[RandomBitSource] = None,
                                  cache: Optional[PrimeCache] = None,
                                  config: Optional[PrimeConfig] = None
                                  ) -> Tuple[int, MaurerCertificate]:
    """
    Random provable prime of the given bit length, with its certificate.

    Parameters
    ----------
    bits : int
        Between 2 and config.max_bits.
    source : RandomBitSource, optional
    cache : PrimeCache, optional
    config : PrimeConfig, optional

    Returns
    -------
    tuple
        (n, certificate) with 2^(bits-1) <= n < 2^bits.
    """
    config = config or DEFAULT_CONFIG
    bits = validate_integer(bits, 'bits', minimum=2, maximum=config.max_bits)
    source = source or default_source()
    cache = cache or default_cache()

    sizes = _size_chain(bits, source, config)
    cert = MaurerCertificate(random_nbit_prime(sizes[-1], source, cache, config))
    for k in reversed(sizes[:-1]):
        cert = _pocklington_level(k, cert, source, config)
    return cert.n, cert


def random_maurer_prime(bits, source: Optional[RandomBitSource] = None,
                        cache: Optional[PrimeCache] = None,
                        config: Optional[PrimeConfig] = None) -> int:
    """Random provable prime of the given bit length."""
    n, _ = random_maurer_prime_with_cert(bits, source, cache, config)
    return n


def _leaf_is_proven(n: int) -> bool:
    return n < NATIVE_LIMIT and classify(n) is Verdict.DEFINITELY_PRIME


def verify_level(n: int, q: int, R: int, a: int) -> bool:
    """
    Check one Pocklington level, assuming q is prime.

    Parameters
    ----------
    n, q, R, a : int
        Candidate n = 2Rq + 1, prime q, multiplier R and witness a.

    Returns
    -------
    bool
    """
    if R < 1 or q < 2 or n != 2 * R * q + 1:
        return False
    if (q + 1) * (q + 1) <= n:
        return False
    if not 2 <= a <= n - 2:
        return False
    ar = arithmetic_for(n)
    if ar.powmod(a, n - 1, n) != 1:
        return False
    return ar.gcd((ar.powmod(a, 2 * R, n) - 1) % n, n) == 1


def verify_certificate(cert: MaurerCertificate) -> bool:
    """
    Independently re-check a Maurer certificate.

    Every level is verified with verify_level, each q must be proven by
    the next level down (or, with no attached certificate, be a prime
    below 2^64), and the leaf must be a prime below 2^64.

    Parameters
    ----------
    cert : MaurerCertificate

    Returns
    -------
    bool
    """
    node = cert
    while not node.is_leaf:
        if node.R is None or node.a is None:
            return False
        if not verify_level(node.n, node.q, node.R, node.a):
            return False
        child = node.q_certificate
        if child is None:
            return _leaf_is_proven(node.q)
        if child.n != node.q:
            return False
        node = child
    return _leaf_is_proven(node.n)
