# oracle/RNG_xoshiro.py
# xoshiro256** (Blackman & Vigna) used as a bit-exact reference oracle.
# State: four 64-bit words, never all zero.

import os

from .errors import InvalidSeed

MASK64 = (1 << 64) - 1


def rotl(x, k):
    # 0 < k < 64
    return ((x << k) & MASK64) | (x >> (64 - k))


class Xoshiro256StarStar:
    def __init__(self, seed=None):
        # seed: sequence of four 64-bit ints, or None for os.urandom
        if seed is None:
            words = [0, 0, 0, 0]
            while not any(words):
                b = os.urandom(32)
                words = [int.from_bytes(b[i:i + 8], 'little') for i in range(0, 32, 8)]
            seed = words
        words = [int(w) & MASK64 for w in seed]
        if len(words) != 4:
            raise InvalidSeed(f'xoshiro256** needs 4 state words, got {len(words)}')
        if not any(words):
            raise InvalidSeed('xoshiro256** state must not be all zero')
        self.s = words

    def next_u64(self):
        s = self.s
        result = (rotl((s[1] * 5) & MASK64, 7) * 9) & MASK64
        t = (s[1] << 17) & MASK64
        s[2] ^= s[0]
        s[3] ^= s[1]
        s[1] ^= s[2]
        s[0] ^= s[3]
        s[2] ^= t
        s[3] = rotl(s[3], 45)
        return result

    def random_bytes(self, n):
        """Fill n bytes from successive draws, each word little-endian."""
        out = bytearray()
        while len(out) < n:
            out += self.next_u64().to_bytes(8, 'little')
        return bytes(out[:n])


def xoshiro_seed(s0, s1, s2, s3):
    return Xoshiro256StarStar((s0, s1, s2, s3))


def xoshiro_next(state):
    return state.next_u64()
