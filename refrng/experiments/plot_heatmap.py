# experiments/plot_heatmap.py
"""
Plot a uniformity heatmap: x axis = bucket over [0,1), y axis = seed,
cell value = count / expected for one generator.

CSV expected columns (as written by run_experiments.py):
 - generator: 'mt' or 'xoshiro'
 - seed: int
 - bucket: int
 - count: int
 - expected: float

Usage:
    python -m refrng.experiments.plot_heatmap --csv results/experiments_XXXX.csv --generator mt --out heatmap.png
"""

import argparse
import pandas as pd
import numpy as np
import matplotlib.pyplot as plt
import os

REQUIRED = {'generator', 'seed', 'bucket', 'count', 'expected'}


def prepare_pivot(df, generator):
    df = df[df['generator'] == generator].copy()
    df['ratio'] = df['count'] / df['expected']
    pivot = df.pivot(index='seed', columns='bucket', values='ratio')
    return pivot.sort_index()


def plot_heatmap(pivot, title='Bucket Uniformity Heatmap', out_file=None, annotate=True, show=True):
    # pivot is DataFrame with rows=seed, cols=bucket
    rows = pivot.index.tolist()
    cols = pivot.columns.tolist()
    data = pivot.values

    fig, ax = plt.subplots(figsize=(0.6*len(cols)+3, 0.5*len(rows)+2))
    # centre the colour scale on 1.0 (a perfectly uniform bucket)
    spread = max(np.nanmax(np.abs(data - 1.0)), 1e-9) if data.size else 1.0
    im = ax.imshow(data, aspect='auto', interpolation='nearest', cmap='coolwarm',
                   vmin=1.0 - spread, vmax=1.0 + spread)

    ax.set_xticks(np.arange(len(cols)))
    ax.set_yticks(np.arange(len(rows)))
    ax.set_xticklabels(cols)
    ax.set_yticklabels(rows)
    ax.set_xlabel('Bucket over [0, 1)')
    ax.set_ylabel('Seed')
    ax.set_title(title)

    if annotate:
        for i in range(len(rows)):
            for j in range(len(cols)):
                val = data[i, j]
                if np.isnan(val):
                    ax.text(j, i, 'N/A', ha='center', va='center', color='gray', fontsize=8)
                else:
                    ax.text(j, i, f"{val:.2f}", ha='center', va='center', color='black', fontsize=8)

    cbar = fig.colorbar(im, ax=ax, fraction=0.046, pad=0.04)
    cbar.set_label('count / expected')

    plt.tight_layout()
    if out_file:
        os.makedirs(os.path.dirname(out_file) or '.', exist_ok=True)
        plt.savefig(out_file, dpi=300)
        print(f"Heatmap saved to {out_file}")
    if show:
        plt.show()
    return fig


def main(argv=None):
    parser = argparse.ArgumentParser()
    parser.add_argument('--csv', required=True, help='Path to experiments CSV')
    parser.add_argument('--generator', default='mt', help="'mt' or 'xoshiro'")
    parser.add_argument('--out', default='results/heatmap_uniformity.png', help='Output PNG path')
    parser.add_argument('--title', default=None, help='Plot title')
    args = parser.parse_args(argv)

    df = pd.read_csv(args.csv)
    if not REQUIRED.issubset(set(df.columns)):
        raise SystemExit(f"CSV must contain columns: {REQUIRED}. Found: {df.columns.tolist()}")

    df['seed'] = df['seed'].astype(int)
    df['bucket'] = df['bucket'].astype(int)
    df['count'] = df['count'].astype(float)
    df['expected'] = df['expected'].astype(float)

    pivot = prepare_pivot(df, args.generator)
    if pivot.empty:
        raise SystemExit(f"No rows for generator '{args.generator}' in {args.csv}")
    title = args.title or f'{args.generator} Bucket Uniformity'
    plot_heatmap(pivot, title=title, out_file=args.out, annotate=True)


if __name__ == '__main__':
    main()
