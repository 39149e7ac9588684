# oracle/RNG_mt64.py
# 64-bit Mersenne Twister (MT19937-64) used as a bit-exact reference oracle.
# State: 312 words of 64 bits plus the index of the next word to temper.
# Output stream matches Nishimura & Matsumoto's mt19937-64.c (2004/9/29).

import os

from .errors import InvalidSeed

MASK64 = (1 << 64) - 1

NN = 312
MM = NN // 2
MATRIX_A = 0xB5026F5AA96619E9
UPPER_MASK = 0xFFFFFFFF80000000  # most significant 33 bits
LOWER_MASK = 0x7FFFFFFF          # least significant 31 bits


class MT19937_64:
    def __init__(self, seed=None):
        self.words = [0] * NN
        self.generation = 0
        if seed is None:
            self.seed_entropy()
        else:
            self.seed(seed)

    def seed_entropy(self):
        # fill the whole register from os.urandom; an all-zero draw is redrawn
        while True:
            b = os.urandom(8 * NN)
            words = [int.from_bytes(b[i:i + 8], 'little') for i in range(0, 8 * NN, 8)]
            if any(words):
                break
        self.words[:] = words
        self.index = NN
        self.generation = 0

    @classmethod
    def from_key_array(cls, keys):
        rng = cls(0)
        rng.seed_array(keys)
        return rng

    def seed(self, seed):
        mt = self.words
        mt[0] = seed & MASK64
        for i in range(1, NN):
            prev = mt[i - 1]
            mt[i] = (6364136223846793005 * (prev ^ (prev >> 62)) + i) & MASK64
        self.index = NN
        self.generation = 0

    def seed_array(self, keys):
        keys = [k & MASK64 for k in keys]
        if not keys:
            raise InvalidSeed('MT19937-64 key array must not be empty')
        self.seed(19650218)
        mt = self.words
        i, j = 1, 0
        for _ in range(max(NN, len(keys))):
            prev = mt[i - 1]
            mt[i] = ((mt[i] ^ ((prev ^ (prev >> 62)) * 3935559000370003845))
                     + keys[j] + j) & MASK64
            i += 1
            j += 1
            if i >= NN:
                mt[0] = mt[NN - 1]
                i = 1
            if j >= len(keys):
                j = 0
        for _ in range(NN - 1):
            prev = mt[i - 1]
            mt[i] = ((mt[i] ^ ((prev ^ (prev >> 62)) * 2862933555777941757)) - i) & MASK64
            i += 1
            if i >= NN:
                mt[0] = mt[NN - 1]
                i = 1
        # msb is 1: assures a non-zero initial array
        mt[0] = 1 << 63
        self.index = NN

    def _untwist(self):
        # Two passes advance together from 0 and from MM so neither needs a
        # modulo. words[MM] is overwritten on the first step, so the lower
        # pass's last element reads the saved copy.
        mt = self.words
        state_mid = mt[MM]
        for i in range(MM - 1):
            j = i + MM
            x = (mt[i] & UPPER_MASK) | (mt[i + 1] & LOWER_MASK)
            mt[i] = mt[i + MM] ^ (x >> 1) ^ (MATRIX_A if mt[i + 1] & 1 else 0)
            y = (mt[j] & UPPER_MASK) | (mt[j + 1] & LOWER_MASK)
            mt[j] = mt[i] ^ (y >> 1) ^ (MATRIX_A if mt[j + 1] & 1 else 0)
        x = (mt[MM - 1] & UPPER_MASK) | (state_mid & LOWER_MASK)
        mt[MM - 1] = mt[NN - 1] ^ (x >> 1) ^ (MATRIX_A if state_mid & 1 else 0)
        y = (mt[NN - 1] & UPPER_MASK) | (mt[0] & LOWER_MASK)
        mt[NN - 1] = mt[MM - 1] ^ (y >> 1) ^ (MATRIX_A if mt[0] & 1 else 0)
        self.index = 0
        self.generation += 1

    def next_u64(self):
        if self.index >= NN:
            self._untwist()
        y = self.words[self.index]
        self.index += 1
        # tempering
        y ^= (y >> 29) & 0x5555555555555555
        y ^= (y << 17) & 0x71D67FFFEDA60000
        y ^= (y << 37) & 0xFFF7EEE000000000
        y ^= y >> 43
        return y

    def next_i63(self):
        return self.next_u64() >> 1

    def next_real_closed01(self):
        # [0,1]
        return (self.next_u64() >> 11) * (1.0 / 9007199254740991.0)

    def next_real_half_open01(self):
        # [0,1)
        return (self.next_u64() >> 11) * (1.0 / 9007199254740992.0)

    def next_real_open01(self):
        # (0,1)
        return ((self.next_u64() >> 12) + 0.5) * (1.0 / 4503599627370496.0)

    def random_bytes(self, n):
        """Fill n bytes from successive draws, each word little-endian."""
        out = bytearray()
        while len(out) < n:
            out += self.next_u64().to_bytes(8, 'little')
        return bytes(out[:n])


def mt_seed(seed):
    return MT19937_64(seed)


def mt_seed_array(keys):
    return MT19937_64.from_key_array(keys)


def mt_next_u64(state):
    return state.next_u64()


def mt_next_i63(state):
    return state.next_i63()


def mt_next_real_closed01(state):
    return state.next_real_closed01()


def mt_next_real_half_open01(state):
    return state.next_real_half_open01()


def mt_next_real_open01(state):
    return state.next_real_open01()
