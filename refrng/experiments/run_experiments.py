# experiments/run_experiments.py
# Uniformity experiments: for every generator x seed, draw floats in [0,1),
# bucket them and write the counts to CSV for plot_heatmap.py.

import argparse
import csv
import os
import time

import numpy as np

from refrng.oracle.RNG_mt64 import MT19937_64
from refrng.oracle.RNG_xoshiro import Xoshiro256StarStar

OUT_DIR = 'results'


def make_generator(name, seed):
    if name == 'mt':
        return MT19937_64(seed)
    if name == 'xoshiro':
        # spread a scalar seed over the four state words; seed 0 still gives a non-zero state
        return Xoshiro256StarStar((seed, seed ^ 0x9E3779B97F4A7C15, ~seed, seed + 1))
    raise ValueError(f"unknown generator '{name}'")


def draw_floats(rng, n):
    # xoshiro has no float draws of its own; use the same 53-bit [0,1) mapping as MT
    if isinstance(rng, MT19937_64):
        return np.array([rng.next_real_half_open01() for _ in range(n)])
    return np.array([(rng.next_u64() >> 11) * (1.0 / 9007199254740992.0) for _ in range(n)])


def bucket_counts(values, buckets):
    counts, _ = np.histogram(values, bins=buckets, range=(0.0, 1.0))
    return counts


def run_single(name, seed, draws, buckets):
    rng = make_generator(name, seed)
    return bucket_counts(draw_floats(rng, draws), buckets)


def write_rows(writer, name, seed, counts, draws):
    expected = draws / len(counts)
    for bucket, count in enumerate(counts):
        writer.writerow([name, seed, bucket, int(count), f"{expected:.3f}"])


def ensure_results_dir(path=OUT_DIR):
    os.makedirs(path, exist_ok=True)


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--seeds_list', type=str, default='1,2,3,4,5,6,7,8', help='comma list')
    parser.add_argument('--generators', type=str, default='mt,xoshiro', help='comma list')
    parser.add_argument('--draws', type=int, default=10000, help='draws per (generator, seed)')
    parser.add_argument('--buckets', type=int, default=16, help='equal-width bins over [0,1)')
    args = parser.parse_args()

    seeds_list = [int(x, 0) for x in args.seeds_list.split(',')]
    generators = [x.strip() for x in args.generators.split(',')]
    ensure_results_dir()
    csv_path = os.path.join(OUT_DIR, f'experiments_{int(time.time())}.csv')
    with open(csv_path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(['generator', 'seed', 'bucket', 'count', 'expected'])
        for name in generators:
            for seed in seeds_list:
                print(f"Running generator={name}, seed={seed}, draws={args.draws}")
                t0 = time.time()
                counts = run_single(name, seed, args.draws, args.buckets)
                write_rows(writer, name, seed, counts, args.draws)
                f.flush()
                print(f"  max deviation {np.max(np.abs(counts - args.draws / args.buckets)):.1f} in {time.time()-t0:.2f}s")
    print("Experiments complete. CSV saved at:", csv_path)
