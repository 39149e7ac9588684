# client/compare.py
# Client that reseeds the oracle, pulls a stream of draws from /get_output and
# checks it against a locally constructed generator with the same seed.
# Exit status 0 when the streams agree, 1 on the first mismatch.

import argparse
import sys
import time

import requests

from refrng.oracle.RNG_mt64 import MT19937_64
from refrng.oracle.RNG_xoshiro import Xoshiro256StarStar

ORACLE = 'http://127.0.0.1:5000'


def parse_ints(text):
    # comma list, each entry decimal or 0x-prefixed hex
    return [int(x, 0) for x in text.split(',') if x.strip()]


def build_candidate(generator, seed=None, keys=None, state=None):
    if generator == 'mt':
        if keys:
            return MT19937_64.from_key_array(keys)
        return MT19937_64(seed if seed is not None else 5489)
    if generator == 'xoshiro':
        return Xoshiro256StarStar(state)
    raise ValueError(f"unknown generator '{generator}'")


def reseed_payload(generator, seed=None, keys=None, state=None):
    payload = {'generator': generator}
    if generator == 'mt':
        if keys:
            payload['keys'] = keys
        else:
            payload['seed'] = seed if seed is not None else 5489
    else:
        payload['state'] = state
    return payload


def reseed_oracle(payload, oracle=ORACLE):
    r = requests.post(oracle + '/reseed', json=payload, timeout=5)
    r.raise_for_status()
    return r.json()


def query_oracle(n, generator, oracle=ORACLE):
    r = requests.get(oracle + '/get_output',
                     params={'generator': generator, 'kind': 'u64', 'count': n},
                     timeout=5)
    r.raise_for_status()
    return [int(h, 16) for h in r.json()['outputs']]


def first_mismatch(expected, observed):
    """Index of the first differing draw, or None when the streams agree."""
    for i, (a, b) in enumerate(zip(expected, observed)):
        if a != b:
            return i
    if len(expected) != len(observed):
        return min(len(expected), len(observed))
    return None


def main(argv=None):
    parser = argparse.ArgumentParser()
    parser.add_argument('--generator', choices=['mt', 'xoshiro'], default='mt')
    parser.add_argument('--samples', type=int, default=1000, help='number of draws to compare')
    parser.add_argument('--seed', type=lambda x: int(x, 0), default=None, help='MT scalar seed')
    parser.add_argument('--keys', type=parse_ints, default=None, help='MT key array, comma list')
    parser.add_argument('--state', type=parse_ints, default=None, help='xoshiro state, 4 comma-separated words')
    parser.add_argument('--oracle', default=ORACLE)
    args = parser.parse_args(argv)

    if args.generator == 'xoshiro' and args.state is None:
        parser.error('--state is required for xoshiro')

    t0 = time.time()
    payload = reseed_payload(args.generator, args.seed, args.keys, args.state)
    print(f"[client] Reseeding oracle: {payload}")
    reseed_oracle(payload, args.oracle)
    print(f"[client] Querying oracle for {args.samples} draws...")
    observed = query_oracle(args.samples, args.generator, args.oracle)

    candidate = build_candidate(args.generator, args.seed, args.keys, args.state)
    expected = [candidate.next_u64() for _ in range(args.samples)]

    idx = first_mismatch(expected, observed)
    if idx is None:
        print(f"[client] {args.samples} draws match.")
    else:
        print(f"[client] Mismatch at draw {idx}:")
        if idx < len(expected):
            print(f"  local:  {expected[idx]:016x}")
        if idx < len(observed):
            print(f"  oracle: {observed[idx]:016x}")
    print(f"[client] Done in {time.time()-t0:.2f}s")
    return 0 if idx is None else 1


if __name__ == '__main__':
    sys.exit(main())
