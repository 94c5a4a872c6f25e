"""
Smoke tests for the experiment drivers and plots at small sizes.
"""

import matplotlib
matplotlib.use('Agg')

import pytest

from primecert.experiments.exp_classifier_agreement import run_classifier_agreement
from primecert.experiments.exp_maurer_certificates import run_maurer_experiment
from primecert.experiments.exp_selfridge_depth import run_selfridge_depth
from primecert.experiments.exp_uniformity import run_uniformity_experiment
from primecert.plotting import plot_maurer_timing, plot_selfridge_depth, plot_uniformity


class TestClassifierAgreement:
    """Classifier, sieve and BPSW agree."""

    def test_no_mismatches(self, tmp_path):
        results = run_classifier_agreement(20_000, output_dir=tmp_path, verbose=False)
        assert results['mismatches'] == []
        assert results['bpsw_failures'] == []
        assert results['bpsw_pseudoprimes'] == []
        assert results['primes'] == 2262
        assert results['spsp2'] == [2047, 3277, 4033, 4681, 8321, 15841]
        assert results['slpsp'] == [5459, 5777, 10877, 16109, 18971]
        assert (tmp_path / 'pseudoprimes_N20000.csv').exists()


class TestSelfridgeDepth:
    """Depth table covers every odd non-square n."""

    def test_counts(self, tmp_path):
        N = 5001
        df = run_selfridge_depth(N, output_dir=tmp_path, verbose=False)
        odd = len(range(3, N + 1, 2))
        odd_squares = len([k for k in range(3, 71, 2) if k * k <= N])
        assert df['primes'].sum() + df['composites'].sum() == odd - odd_squares
        assert df['primes'].sum() == 668
        assert list(df['candidates']) == sorted(df['candidates'])
        assert (tmp_path / f'selfridge_depth_N{N}.csv').exists()


class TestUniformity:
    """Chi-square driver over a small range."""

    def test_small_run(self, tmp_path):
        results = run_uniformity_experiment(2, 50, 5000, output_dir=tmp_path, verbose=False)
        assert results['out_of_range'] == 0
        assert results['table']['count'].sum() == 5000
        assert len(results['table']) == 15
        assert results['p_value'] > 1e-4
        assert (tmp_path / 'uniformity_2_50.csv').exists()


class TestMaurerExperiment:
    """Every generated certificate verifies."""

    def test_small_grid(self, tmp_path):
        df = run_maurer_experiment([40, 70], 2, output_dir=tmp_path, verbose=False)
        assert len(df) == 4
        assert df['verified'].all()
        assert set(df['verdict']) <= {'DEFINITELY_PRIME', 'PROBABLY_PRIME'}
        assert (tmp_path / 'maurer_certificates.csv').exists()


class TestPlots:
    """Figures are written from experiment output."""

    def test_figures(self, tmp_path):
        uniformity = run_uniformity_experiment(2, 30, 1000, verbose=False)
        depth = run_selfridge_depth(1001, verbose=False)
        maurer = run_maurer_experiment([40, 48], 1, verbose=False)

        plot_uniformity(uniformity['table'], tmp_path / 'u.png')
        plot_selfridge_depth(depth, tmp_path / 'd.png')
        plot_maurer_timing(maurer, tmp_path / 'm.png')

        for name in ('u.png', 'd.png', 'm.png'):
            assert (tmp_path / name).stat().st_size > 0


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
