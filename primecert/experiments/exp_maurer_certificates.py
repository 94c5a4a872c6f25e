"""
Experiment: Maurer certificates

Generates provable primes for a grid of bit lengths, re-verifies every
certificate independently and records size, depth and timing.

Usage:
    python -m primecert.experiments.exp_maurer_certificates --bits 64 128 256 --count 5 --save
"""

import argparse
import time
from pathlib import Path
from typing import List, Optional

import pandas as pd

from ..classifier import classify
from ..config import PrimeConfig
from ..maurer import random_maurer_prime_with_cert, verify_certificate
from ..primes import PrimeCache
from ..randomness import RandomBitSource


def run_maurer_experiment(bit_grid: List[int], count: int,
                          output_dir: Optional[Path] = None,
                          seed: int = 123, verbose: bool = True,
                          config: Optional[PrimeConfig] = None) -> pd.DataFrame:
    """
    Generate and verify Maurer primes.

    Parameters
    ----------
    bit_grid : list of int
        Bit lengths to generate.
    count : int
        Primes per bit length.
    output_dir : Path, optional
        If provided, writes maurer_certificates.csv.
    seed : int
        Seed of the random source.
    verbose : bool
        Print progress.
    config : PrimeConfig, optional
        Library limits passed to the generator.

    Returns
    -------
    pd.DataFrame
        One row per prime: bits, n, depth, verified, verdict,
        generate_s, verify_s.
    """
    source = RandomBitSource(seed=seed)
    cache = PrimeCache()
    rows = []

    for bits in bit_grid:
        if verbose:
            print(f"  {bits}-bit Maurer primes...", end=" ", flush=True)
        for _ in range(count):
            t0 = time.time()
            n, cert = random_maurer_prime_with_cert(bits, source=source, cache=cache,
                                                     config=config)
            t1 = time.time()
            ok = verify_certificate(cert)
            t2 = time.time()
            rows.append({
                'bits': bits,
                'n': str(n),
                'depth': cert.depth,
                'verified': ok,
                'verdict': classify(n, config).name,
                'generate_s': t1 - t0,
                'verify_s': t2 - t1,
            })
        if verbose:
            print(f"{sum(r['generate_s'] for r in rows if r['bits'] == bits):.2f}s")

    df = pd.DataFrame(rows)

    if verbose:
        summary = df.groupby('bits').agg(
            verified=('verified', 'all'),
            mean_depth=('depth', 'mean'),
            mean_generate_s=('generate_s', 'mean'),
            mean_verify_s=('verify_s', 'mean'),
        )
        print(summary.to_string())

    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)
        df.to_csv(output_dir / 'maurer_certificates.csv', index=False)
        if verbose:
            print(f"  Results saved to {output_dir}")

    return df


def main():
    parser = argparse.ArgumentParser(description="Generate and verify Maurer certificates")
    parser.add_argument('--bits', type=int, nargs='+', default=[64, 128, 256])
    parser.add_argument('--count', type=int, default=5)
    parser.add_argument('--seed', type=int, default=123)
    parser.add_argument('--save', action='store_true', help='Save results to data/results/')
    args = parser.parse_args()

    output_dir = Path('data/results') if args.save else None
    run_maurer_experiment(args.bits, args.count, output_dir, args.seed)


if __name__ == '__main__':
    main()
