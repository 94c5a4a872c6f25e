"""
Experiment: Uniformity of random_prime

Draws random_prime(low, high) many times and compares the observed
frequencies of each prime in the range with the uniform distribution
(chi-square goodness of fit).

Usage:
    python -m primecert.experiments.exp_uniformity --low 2 --high 100 --draws 1e5
"""

import argparse
from collections import Counter
from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd
from scipy import stats

from ..config import PrimeConfig
from ..primes import PrimeCache, primes_upto
from ..random_primes import random_prime
from ..randomness import RandomBitSource


def run_uniformity_experiment(low: int, high: int, draws: int,
                              output_dir: Optional[Path] = None,
                              seed: int = 123, verbose: bool = True,
                              config: Optional[PrimeConfig] = None) -> dict:
    """
    Sample random_prime(low, high) and test the counts for uniformity.

    Parameters
    ----------
    low, high : int
        Inclusive range.
    draws : int
        Number of samples.
    output_dir : Path, optional
        If provided, per-prime counts are written to
        uniformity_{low}_{high}.csv.
    seed : int
        Seed of the random source.
    verbose : bool
        Print progress.
    config : PrimeConfig, optional
        Library limits passed to random_prime.

    Returns
    -------
    dict
        'table' (DataFrame of prime, count, expected), 'chi2', 'p_value',
        'out_of_range' (draws outside the prime set, always 0).
    """
    source = RandomBitSource(seed=seed)
    cache = PrimeCache(limit=max(high, 1000))

    support = [int(p) for p in primes_upto(high) if p >= low]
    if not support:
        raise ValueError(f"No primes in [{low}, {high}]")

    if verbose:
        print(f"Uniformity of random_prime({low}, {high}): {draws:,} draws over {len(support)} primes")

    counts = Counter(random_prime(low, high, source=source, cache=cache, config=config)
                     for _ in range(draws))
    support_set = set(support)
    out_of_range = sum(c for p, c in counts.items() if p not in support_set)

    observed = np.array([counts.get(p, 0) for p in support], dtype=float)
    expected = np.full(len(support), draws / len(support))
    chi2, p_value = stats.chisquare(observed, expected)

    table = pd.DataFrame({'prime': support, 'count': observed.astype(int), 'expected': expected})

    if verbose:
        print(f"  chi2 = {chi2:.2f} (dof {len(support) - 1}), p = {p_value:.4f}")
        print(f"  draws outside the prime set: {out_of_range}")

    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)
        table.to_csv(output_dir / f'uniformity_{low}_{high}.csv', index=False)
        if verbose:
            print(f"  Results saved to {output_dir}")

    return {'table': table, 'chi2': float(chi2), 'p_value': float(p_value),
            'out_of_range': out_of_range}


def main():
    parser = argparse.ArgumentParser(description="random_prime uniformity check")
    parser.add_argument('--low', type=int, default=2)
    parser.add_argument('--high', type=int, default=100)
    parser.add_argument('--draws', type=float, default=1e5)
    parser.add_argument('--seed', type=int, default=123)
    parser.add_argument('--save', action='store_true', help='Save results to data/results/')
    args = parser.parse_args()

    output_dir = Path('data/results') if args.save else None
    run_uniformity_experiment(args.low, args.high, int(args.draws), output_dir, args.seed)


if __name__ == '__main__':
    main()
