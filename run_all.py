#!/usr/bin/env python3
"""
Full verification script.

Running this file regenerates every table and figure of the primality and
prime-generation checks.

Usage:
    python run_all.py
    python run_all.py --config config/custom.yaml
"""

import argparse
import yaml
from pathlib import Path
import time

from primecert.config import load_config
from primecert.experiments.exp_uniformity import run_uniformity_experiment
from primecert.experiments.exp_classifier_agreement import run_classifier_agreement
from primecert.experiments.exp_selfridge_depth import run_selfridge_depth
from primecert.experiments.exp_maurer_certificates import run_maurer_experiment
from primecert.plotting import (
    plot_uniformity,
    plot_selfridge_depth,
    plot_maurer_timing
)


def main():
    parser = argparse.ArgumentParser(description='Run all primality and generation checks')
    parser.add_argument('--config', type=str, default='config/default.yaml',
                        help='Path to config file')
    args = parser.parse_args()

    # Load config
    with open(args.config) as f:
        config = yaml.safe_load(f)
    prime_config = load_config(args.config)

    print("=" * 60)
    print("primecert - Full Verification Suite")
    print("=" * 60)
    print(f"\nConfiguration:")
    print(f"  uniformity = {config['uniformity']}")
    print(f"  agreement_N = {config['agreement_N']:,}")
    print(f"  selfridge_N = {config['selfridge_N']:,}")
    print(f"  maurer = {config['maurer']}")
    print(f"  seed = {config['seed']}")
    print(f"  bpsw_threshold = {prime_config.bpsw_threshold:,}")
    print()

    output_dir = Path('data/results')
    output_dir.mkdir(parents=True, exist_ok=True)

    total_start = time.time()

    # 1. Uniformity of random_prime
    print("-" * 60)
    print("1. Uniformity of random_prime")
    print("-" * 60)
    start = time.time()
    uni = config['uniformity']
    uniformity = run_uniformity_experiment(
        uni['low'], uni['high'], uni['draws'],
        output_dir,
        config['seed'],
        config=prime_config
    )
    print(f"   Completed in {time.time() - start:.1f}s")
    print()

    # 2. Classifier vs sieve, BPSW agreement
    print("-" * 60)
    print("2. Classifier and BPSW agreement")
    print("-" * 60)
    start = time.time()
    agreement = run_classifier_agreement(config['agreement_N'], output_dir)
    print(f"   Completed in {time.time() - start:.1f}s")
    print()

    # 3. Selfridge search depth
    print("-" * 60)
    print("3. Selfridge search depth")
    print("-" * 60)
    start = time.time()
    df_depth = run_selfridge_depth(config['selfridge_N'], output_dir)
    print(f"   Completed in {time.time() - start:.1f}s")
    print()

    # 4. Maurer certificates
    print("-" * 60)
    print("4. Maurer certificates")
    print("-" * 60)
    start = time.time()
    df_maurer = run_maurer_experiment(
        config['maurer']['bits'],
        config['maurer']['count'],
        output_dir,
        config['seed'],
        config=prime_config
    )
    print(f"   Completed in {time.time() - start:.1f}s")
    print()

    # 5. Generate Figures
    print("-" * 60)
    print("5. Generating Figures")
    print("-" * 60)

    figures_dir = output_dir / 'figures'
    figures_dir.mkdir(exist_ok=True)

    print("  - Uniformity...")
    plot_uniformity(uniformity['table'], figures_dir / 'uniformity.png')

    print("  - Selfridge depth...")
    plot_selfridge_depth(df_depth, figures_dir / 'selfridge_depth.png')

    print("  - Maurer timing...")
    plot_maurer_timing(df_maurer, figures_dir / 'maurer_timing.png')

    print()

    # Summary
    total_time = time.time() - total_start
    print("=" * 60)
    print("COMPLETE")
    print("=" * 60)
    print(f"\nTotal runtime: {total_time:.1f}s")
    print(f"\nOutputs saved to: {output_dir.absolute()}")
    print(f"\nGenerated files:")

    for f in sorted(output_dir.glob('*.csv')):
        print(f"  - {f.name}")

    print(f"\nFigures:")
    for f in sorted(figures_dir.glob('*.png')):
        print(f"  - figures/{f.name}")

    # Print key results
    print("\n" + "=" * 60)
    print("KEY RESULTS")
    print("=" * 60)

    print(f"\nUniformity chi-square p-value: {uniformity['p_value']:.4f}")
    print(f"Classifier/sieve mismatches: {len(agreement['mismatches'])}")
    print(f"BPSW pseudoprimes found: {agreement['bpsw_pseudoprimes']}")
    print(f"Maurer certificates verified: {df_maurer['verified'].all()}")


if __name__ == '__main__':
    main()
