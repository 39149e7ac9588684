import csv

import matplotlib
matplotlib.use('Agg')

import numpy as np
import pandas as pd
import pytest

from refrng.experiments import plot_heatmap, run_experiments


def test_bucket_counts_cover_all_draws():
    counts = run_experiments.run_single('mt', 1, 2000, 8)
    assert len(counts) == 8
    assert counts.sum() == 2000
    # loose uniformity: every bucket within 30% of expectation
    assert np.all(np.abs(counts - 250) < 75)


def test_xoshiro_generator_from_scalar_seed():
    rng = run_experiments.make_generator('xoshiro', 0)
    assert any(rng.s)
    values = run_experiments.draw_floats(rng, 1000)
    assert values.min() >= 0.0
    assert values.max() < 1.0


def test_unknown_generator():
    with pytest.raises(ValueError):
        run_experiments.make_generator('lcg', 1)


def _write_csv(path):
    with open(path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(['generator', 'seed', 'bucket', 'count', 'expected'])
        for name in ('mt', 'xoshiro'):
            for seed in (3, 1, 2):
                counts = run_experiments.run_single(name, seed, 400, 4)
                run_experiments.write_rows(writer, name, seed, counts, 400)


def test_prepare_pivot(tmp_path):
    path = tmp_path / 'exp.csv'
    _write_csv(path)
    df = pd.read_csv(path)
    pivot = plot_heatmap.prepare_pivot(df, 'mt')
    assert pivot.index.tolist() == [1, 2, 3]
    assert pivot.columns.tolist() == [0, 1, 2, 3]
    # ratios of a full row average to 1
    assert np.allclose(pivot.mean(axis=1).values, 1.0)


def test_plot_heatmap_writes_png(tmp_path):
    path = tmp_path / 'exp.csv'
    _write_csv(path)
    out = tmp_path / 'plots' / 'heat.png'
    plot_heatmap.main(['--csv', str(path), '--generator', 'xoshiro', '--out', str(out)])
    assert out.exists()


def test_plot_heatmap_rejects_missing_columns(tmp_path):
    path = tmp_path / 'bad.csv'
    path.write_text('seed,count\n1,2\n')
    with pytest.raises(SystemExit):
        plot_heatmap.main(['--csv', str(path), '--out', str(tmp_path / 'x.png')])
