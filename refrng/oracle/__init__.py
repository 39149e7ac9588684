from .errors import InvalidSeed
from .RNG_mt64 import (
    MT19937_64,
    mt_seed,
    mt_seed_array,
    mt_next_u64,
    mt_next_i63,
    mt_next_real_closed01,
    mt_next_real_half_open01,
    mt_next_real_open01,
)
from .RNG_xoshiro import Xoshiro256StarStar, rotl, xoshiro_seed, xoshiro_next
