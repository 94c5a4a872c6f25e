#!/usr/bin/env python3
"""
Benchmark classification and prime generation.

Times, per bit length:
1. classify() on random odd inputs
2. random_nbit_prime()
3. random_maurer_prime() with certificate verification

Usage:
    python benchmark.py
    python benchmark.py --bits 32 64 128 256 --reps 20
"""

import argparse
import time

from primecert.classifier import classify
from primecert.maurer import random_maurer_prime_with_cert, verify_certificate
from primecert.primes import PrimeCache
from primecert.random_primes import random_nbit_prime
from primecert.randomness import RandomBitSource


def benchmark(bit_grid, reps: int, seed: int):
    """Run the timing grid and print one row per bit length."""
    print("=" * 60)
    print(f"primecert benchmark: reps = {reps}")
    print("=" * 60)

    source = RandomBitSource(seed=seed)
    cache = PrimeCache()

    print(f"{'bits':>6} {'classify':>12} {'nbit_prime':>12} {'maurer':>12} {'verify':>12}")
    for bits in bit_grid:
        samples = [(1 << (bits - 1)) | (2 * source.draw_range((1 << (bits - 2)) - 1) + 1)
                   for _ in range(reps)]

        t0 = time.time()
        for n in samples:
            classify(n)
        t_classify = (time.time() - t0) / reps

        t0 = time.time()
        for _ in range(reps):
            random_nbit_prime(bits, source=source, cache=cache)
        t_nbit = (time.time() - t0) / reps

        t_maurer = t_verify = 0.0
        for _ in range(reps):
            t0 = time.time()
            _, cert = random_maurer_prime_with_cert(bits, source=source, cache=cache)
            t1 = time.time()
            assert verify_certificate(cert)
            t_maurer += t1 - t0
            t_verify += time.time() - t1

        print(f"{bits:>6} {t_classify * 1e6:>10.1f}us {t_nbit * 1e3:>10.2f}ms "
              f"{t_maurer / reps * 1e3:>10.2f}ms {t_verify / reps * 1e3:>10.2f}ms")


def main():
    parser = argparse.ArgumentParser(description='Benchmark classification and prime generation')
    parser.add_argument('--bits', type=int, nargs='+', default=[32, 64, 128, 256, 512])
    parser.add_argument('--reps', type=int, default=10)
    parser.add_argument('--seed', type=int, default=123)
    args = parser.parse_args()

    benchmark(args.bits, args.reps, args.seed)


if __name__ == '__main__':
    main()
