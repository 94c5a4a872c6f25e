"""
Experiment: Selfridge parameter search depth

For odd, non-square n <= N counts how many candidates of 5, -7, 9, -11, ...
the Selfridge search examines before it stops (Jacobi symbol -1 found,
or a shared factor proves n composite). The counts for primes and for
composites are tabulated separately; the search for primes is the one
that can run long, since it never stops early on a factor.

Usage:
    python -m primecert.experiments.exp_selfridge_depth --N 1e6 --save
"""

import argparse
from collections import Counter
from pathlib import Path
from typing import Optional

import pandas as pd

from ..arithmetic import NATIVE, is_square
from ..lucas import selfridge_search
from ..primes import prime_flags_upto


def run_selfridge_depth(N: int, output_dir: Optional[Path] = None,
                        verbose: bool = True) -> pd.DataFrame:
    """
    Tabulate Selfridge search depth for odd non-square n in [3, N].

    Parameters
    ----------
    N : int
        Upper bound (inclusive).
    output_dir : Path, optional
        If provided, writes selfridge_depth_N{N}.csv.
    verbose : bool
        Print progress.

    Returns
    -------
    pd.DataFrame
        Columns: candidates, primes, composites.
    """
    if verbose:
        print(f"Selfridge search depth for odd non-square n <= {N:,}")
    flags = prime_flags_upto(N)

    prime_depths = Counter()
    composite_depths = Counter()
    worst = (0, 0)

    for n in range(3, N + 1, 2):
        if is_square(n):
            continue
        _, c, _ = selfridge_search(n, NATIVE)
        if flags[n]:
            prime_depths[c] += 1
        else:
            composite_depths[c] += 1
        if c > worst[1]:
            worst = (n, c)

    depths = sorted(set(prime_depths) | set(composite_depths))
    df = pd.DataFrame({
        'candidates': depths,
        'primes': [prime_depths.get(c, 0) for c in depths],
        'composites': [composite_depths.get(c, 0) for c in depths],
    })

    if verbose:
        print(df.to_string(index=False))
        print(f"  Deepest search: n = {worst[0]:,} needed {worst[1]} candidates")

    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)
        df.to_csv(output_dir / f'selfridge_depth_N{N}.csv', index=False)
        if verbose:
            print(f"  Results saved to {output_dir}")

    return df


def main():
    parser = argparse.ArgumentParser(description="Selfridge parameter search depth")
    parser.add_argument('--N', type=float, default=1e6, help='Maximum n value (default: 1e6)')
    parser.add_argument('--save', action='store_true', help='Save results to data/results/')
    args = parser.parse_args()

    output_dir = Path('data/results') if args.save else None
    run_selfridge_depth(int(args.N), output_dir)


if __name__ == '__main__':
    main()
