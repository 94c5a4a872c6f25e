"""
Experiment: Classifier vs Sieve, and BPSW agreement

For every n <= N compares classify(n) with a sieve of Eratosthenes, and
checks that no odd composite passes both halves of BPSW (strong
pseudoprime to base 2 and standard strong Lucas pseudoprime). Along the
way it records the base-2 strong pseudoprimes and the strong Lucas
pseudoprimes it meets; the two lists must be disjoint.

Usage:
    python -m primecert.experiments.exp_classifier_agreement --N 1e6 --save
"""

import argparse
from pathlib import Path
from typing import Optional

import pandas as pd

from ..classifier import Verdict, classify, is_bpsw_probable_prime
from ..lucas import LucasVariant, is_strong_lucas_pseudoprime
from ..miller_rabin import is_strong_pseudoprime
from ..primes import prime_flags_upto


def run_classifier_agreement(N: int, output_dir: Optional[Path] = None,
                             verbose: bool = True) -> dict:
    """
    Cross-check the classifier and BPSW against a sieve up to N.

    Parameters
    ----------
    N : int
        Upper bound (inclusive).
    output_dir : Path, optional
        If provided, the pseudoprime lists are written to
        pseudoprimes_N{N}.csv.
    verbose : bool
        Print progress.

    Returns
    -------
    dict
        Counts of mismatches and the pseudoprime lists.
    """
    if verbose:
        print(f"Classifier agreement for n <= {N:,}")
        print(f"  Building prime flags up to {N:,}...")
    flags = prime_flags_upto(N)

    mismatches = []
    spsp2 = []
    slpsp = []
    bpsw_failures = []

    if verbose:
        print("  Classifying...")
    for n in range(N + 1):
        verdict = classify(n)
        if (verdict is Verdict.DEFINITELY_PRIME) != bool(flags[n]):
            mismatches.append(n)

        if n < 5 or n % 2 == 0:
            continue
        # BPSW must accept every odd prime and reject every odd composite
        if is_bpsw_probable_prime(n) != bool(flags[n]):
            bpsw_failures.append(n)
        if flags[n]:
            continue
        if is_strong_pseudoprime(n, 2):
            spsp2.append(n)
        if is_strong_lucas_pseudoprime(n, LucasVariant.STANDARD):
            slpsp.append(n)

    both = sorted(set(spsp2) & set(slpsp))
    results = {
        'N': N,
        'primes': int(flags.sum()),
        'mismatches': mismatches,
        'spsp2': spsp2,
        'slpsp': slpsp,
        'bpsw_pseudoprimes': both,
        'bpsw_failures': bpsw_failures,
    }

    if verbose:
        print(f"\nResults for n <= {N:,}:")
        print(f"  Primes:                         {results['primes']:,}")
        print(f"  Classifier/sieve mismatches:    {len(mismatches)}")
        print(f"  Strong pseudoprimes to base 2:  {len(spsp2)}")
        print(f"  Strong Lucas pseudoprimes:      {len(slpsp)}")
        print(f"  Composites passing both (BPSW): {len(both)}")
        print(f"  BPSW disagreements with sieve:  {len(bpsw_failures)}")

    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)
        rows = ([{'n': n, 'test': 'spsp2'} for n in spsp2]
                + [{'n': n, 'test': 'strong_lucas'} for n in slpsp])
        pd.DataFrame(rows, columns=['n', 'test']).to_csv(
            output_dir / f'pseudoprimes_N{N}.csv', index=False)
        if verbose:
            print(f"  Results saved to {output_dir}")

    return results


def main():
    parser = argparse.ArgumentParser(description="Classifier and BPSW agreement check")
    parser.add_argument('--N', type=float, default=1e6, help='Maximum n value (default: 1e6)')
    parser.add_argument('--save', action='store_true', help='Save results to data/results/')
    args = parser.parse_args()

    output_dir = Path('data/results') if args.save else None
    run_classifier_agreement(int(args.N), output_dir)


if __name__ == '__main__':
    main()
