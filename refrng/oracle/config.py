# oracle/config.py
# Configuration for the oracle (reference RNG service)

# Network config
HOST = '127.0.0.1'
PORT = 5000

# Seed configuration:
# - SEED_MODE:
#     'fixed'  : use MT_SEED_KEY / MT_SEED and XOSHIRO_SEED below
#     'random' : use os.urandom at startup (non-deterministic each run)
#     'time'   : use current unix time as the MT seed, and expand it into the
#                xoshiro state through MT draws
SEED_MODE = 'fixed'   # 'fixed' | 'random' | 'time'

# MT19937-64 seeding. If MT_SEED_KEY is a non-empty list it is used with the
# array initialiser, otherwise MT_SEED is used with the scalar one.
MT_SEED = 5489
MT_SEED_KEY = [0x12345, 0x23456, 0x34567, 0x45678]  # or None

# xoshiro256** state (four 64-bit words, not all zero)
XOSHIRO_SEED = (12345678, 87654321, 10293847, 29384756)

# If SEED_MODE == 'time', this controls whether we use seconds or milliseconds.
# 's' -> int(time.time()), 'ms' -> int(time.time() * 1000)
TIME_GRANULARITY = 's'  # 's' or 'ms'

# Upper bound on draws returned by a single /get_output call
MAX_COUNT = 10000

# Logging level
LOG_LEVEL = 'INFO'
