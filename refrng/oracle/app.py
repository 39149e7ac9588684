# oracle/app.py
# Flask oracle exposing /get_output, /validate and /reseed
# Holds one MT19937-64 and one xoshiro256** instance seeded per config.SEED_MODE

from flask import Flask, jsonify, request

from . import config
from .RNG_mt64 import MT19937_64, MASK64
from .RNG_xoshiro import Xoshiro256StarStar
from .errors import InvalidSeed

import os, time, logging

app = Flask(__name__)

# Setup logging
logging.basicConfig(level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger('oracle')

# draw kind -> method name, per generator
DRAW_KINDS = {
    'mt': {
        'u64': 'next_u64',
        'i63': 'next_i63',
        'real1': 'next_real_closed01',
        'real2': 'next_real_half_open01',
        'real3': 'next_real_open01',
    },
    'xoshiro': {
        'u64': 'next_u64',
    },
}

GENERATORS = {}


def _time_seed():
    if config.TIME_GRANULARITY == 'ms':
        return int(time.time() * 1000)
    return int(time.time())


def derive_mt():
    """
    Build the MT19937-64 instance according to config.SEED_MODE.
      - 'fixed'  -> MT_SEED_KEY via the array initialiser if set, else MT_SEED
      - 'random' -> os.urandom(8)
      - 'time'   -> current time (seconds or ms)
    """
    mode = (config.SEED_MODE or 'fixed').lower()
    if mode == 'random':
        seed = int.from_bytes(os.urandom(8), 'little')
        logger.info(f"MT19937-64 using random seed (os.urandom): {seed:016x}")
        return MT19937_64(seed)
    if mode == 'time':
        seed = _time_seed() & MASK64
        logger.info(f"MT19937-64 using time-derived seed (granu={config.TIME_GRANULARITY}): {seed:016x}")
        return MT19937_64(seed)
    if mode != 'fixed':
        logger.warning(f"Unknown SEED_MODE '{config.SEED_MODE}', falling back to fixed seeds")
    if config.MT_SEED_KEY:
        logger.info(f"MT19937-64 using fixed key array from config: {[hex(k) for k in config.MT_SEED_KEY]}")
        return MT19937_64.from_key_array(config.MT_SEED_KEY)
    logger.info(f"MT19937-64 using fixed seed from config: {config.MT_SEED:016x}")
    return MT19937_64(config.MT_SEED)


def derive_xoshiro():
    mode = (config.SEED_MODE or 'fixed').lower()
    if mode == 'random':
        logger.info("xoshiro256** using random state (os.urandom)")
        return Xoshiro256StarStar()
    if mode == 'time':
        # expand the time seed into four words; an MT stream is never all zero here
        expander = MT19937_64(_time_seed())
        state = [expander.next_u64() for _ in range(4)]
        logger.info(f"xoshiro256** using time-derived state: {[format(w, '016x') for w in state]}")
        return Xoshiro256StarStar(state)
    logger.info(f"xoshiro256** using fixed state from config: {list(config.XOSHIRO_SEED)}")
    return Xoshiro256StarStar(config.XOSHIRO_SEED)


def reset_generators():
    GENERATORS['mt'] = derive_mt()
    GENERATORS['xoshiro'] = derive_xoshiro()


reset_generators()


def _bad_request(reason):
    logger.warning(f"Rejected request: {reason}")
    return jsonify({'ok': False, 'reason': reason}), 400


def _is_int(val):
    # JSON true/false decode to bool, which is an int subclass
    return isinstance(val, int) and not isinstance(val, bool)


def _int_list(val):
    if not isinstance(val, list) or not all(_is_int(v) for v in val):
        raise TypeError('seed material must be a list of integers')
    return val


def _format_draw(val):
    if isinstance(val, float):
        return val
    return format(val, '016x')


@app.route('/get_output', methods=['GET'])
def get_output():
    name = request.args.get('generator', 'mt')
    kind = request.args.get('kind', 'u64')
    if name not in GENERATORS:
        return _bad_request(f"unknown generator '{name}'")
    method = DRAW_KINDS[name].get(kind)
    if method is None:
        return _bad_request(f"generator '{name}' has no draw kind '{kind}'")
    try:
        count = int(request.args.get('count', 1))
    except ValueError:
        return _bad_request('bad count')
    if count < 1 or count > config.MAX_COUNT:
        return _bad_request(f"count must be in 1..{config.MAX_COUNT}")

    draw = getattr(GENERATORS[name], method)
    outputs = [_format_draw(draw()) for _ in range(count)]
    return jsonify({'generator': name, 'kind': kind, 'outputs': outputs})


@app.route('/validate', methods=['POST'])
def validate():
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or 'candidate' not in data:
        return _bad_request('need candidate')
    name = data.get('generator', 'mt')
    if name not in GENERATORS:
        return _bad_request(f"unknown generator '{name}'")
    try:
        candidate = int(data['candidate'], 16)
    except (TypeError, ValueError):
        return _bad_request('bad hex')
    expected = GENERATORS[name].next_u64()
    ok = (candidate & MASK64) == expected
    return jsonify({'ok': ok, 'expected': format(expected, '016x')})


@app.route('/reseed', methods=['POST'])
def reseed():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return _bad_request('need json object')
    name = data.get('generator', 'mt')
    try:
        if name == 'mt':
            if 'keys' in data:
                rng = MT19937_64.from_key_array(_int_list(data['keys']))
            elif 'seed' in data:
                if not _is_int(data['seed']):
                    return _bad_request('seed must be an integer')
                rng = MT19937_64(data['seed'])
            else:
                return _bad_request('need seed or keys')
        elif name == 'xoshiro':
            if 'state' not in data:
                return _bad_request('need state')
            rng = Xoshiro256StarStar(_int_list(data['state']))
        else:
            return _bad_request(f"unknown generator '{name}'")
    except InvalidSeed as e:
        return _bad_request(str(e))
    except (TypeError, ValueError):
        return _bad_request('bad seed material')
    GENERATORS[name] = rng
    logger.info(f"Reseeded {name}")
    return jsonify({'ok': True, 'generator': name})


if __name__ == '__main__':
    logger.info(f"Starting oracle at http://{config.HOST}:{config.PORT} with SEED_MODE={config.SEED_MODE}")
    app.run(host=config.HOST, port=config.PORT, debug=False)
