"""
Visualization utilities.

Responsibility: plots only. No logic, no computation.
"""

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from pathlib import Path
from typing import Optional


def plot_uniformity(table: pd.DataFrame, output_path: Optional[Path] = None) -> plt.Figure:
    """
    Plot observed draw counts per prime against the uniform expectation.

    Parameters
    ----------
    table : pd.DataFrame
        DataFrame from exp_uniformity with columns: prime, count, expected.
    output_path : Path, optional
        If provided, save figure to this path.

    Returns
    -------
    matplotlib.Figure
    """
    fig, ax = plt.subplots(figsize=(12, 5))

    x = np.arange(len(table))
    ax.bar(x, table['count'], alpha=0.8, label='Observed')
    ax.axhline(table['expected'].iloc[0], color='red', linestyle='--', label='Uniform')

    ax.set_xticks(x)
    ax.set_xticklabels(table['prime'], rotation=90, fontsize=7)
    ax.set_xlabel('Prime')
    ax.set_ylabel('Draws')
    ax.set_title('random_prime draw counts')
    ax.legend()
    ax.grid(True, alpha=0.3, axis='y')

    plt.tight_layout()

    if output_path:
        fig.savefig(output_path, dpi=150, bbox_inches='tight')

    return fig


def plot_selfridge_depth(df: pd.DataFrame, output_path: Optional[Path] = None) -> plt.Figure:
    """
    Plot the distribution of Selfridge candidates examined (log scale).

    Parameters
    ----------
    df : pd.DataFrame
        DataFrame from exp_selfridge_depth with columns:
        candidates, primes, composites.
    output_path : Path, optional
        If provided, save figure.

    Returns
    -------
    matplotlib.Figure
    """
    fig, ax = plt.subplots(figsize=(10, 6))

    x = np.arange(len(df))
    width = 0.4

    ax.bar(x - width/2, df['primes'], width, label='Primes', alpha=0.8)
    ax.bar(x + width/2, df['composites'], width, label='Composites', alpha=0.8)

    ax.set_yscale('log')
    ax.set_xticks(x)
    ax.set_xticklabels(df['candidates'])
    ax.set_xlabel('D candidates examined')
    ax.set_ylabel('Count')
    ax.set_title('Selfridge parameter search depth')
    ax.legend()
    ax.grid(True, alpha=0.3, axis='y')

    plt.tight_layout()

    if output_path:
        fig.savefig(output_path, dpi=150, bbox_inches='tight')

    return fig


def plot_maurer_timing(df: pd.DataFrame, output_path: Optional[Path] = None) -> plt.Figure:
    """
    Plot mean generation and verification time per bit length.

    Parameters
    ----------
    df : pd.DataFrame
        DataFrame from exp_maurer_certificates with columns:
        bits, generate_s, verify_s.
    output_path : Path, optional
        If provided, save figure.

    Returns
    -------
    matplotlib.Figure
    """
    fig, ax = plt.subplots(figsize=(8, 6))

    means = df.groupby('bits')[['generate_s', 'verify_s']].mean()

    ax.plot(means.index, means['generate_s'], 'o-', label='Generate')
    ax.plot(means.index, means['verify_s'], 's--', label='Verify')

    ax.set_xscale('log', base=2)
    ax.set_yscale('log')
    ax.set_xlabel('Bits')
    ax.set_ylabel('Seconds (mean)')
    ax.set_title('Maurer prime generation vs certificate verification')
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if output_path:
        fig.savefig(output_path, dpi=150, bbox_inches='tight')

    return fig
