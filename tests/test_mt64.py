import pytest

from refrng.oracle import (
    InvalidSeed,
    MT19937_64,
    mt_seed,
    mt_seed_array,
    mt_next_u64,
    mt_next_i63,
    mt_next_real_closed01,
    mt_next_real_half_open01,
    mt_next_real_open01,
)
from refrng.oracle.RNG_mt64 import NN, MM, MATRIX_A, UPPER_MASK, LOWER_MASK
from refrng.oracle import RNG_mt64

# first outputs of genrand64_int64() in mt19937-64.out.txt
REFERENCE_KEY = [0x12345, 0x23456, 0x34567, 0x45678]
REFERENCE_OUTPUTS = [
    7266447313870364031,
    4946485549665804864,
    16945909448695747420,
    16394063075524226720,
    4873882236456199058,
]


def textbook_twist(words):
    mt = list(words)
    for k in range(NN):
        x = (mt[k] & UPPER_MASK) | (mt[(k + 1) % NN] & LOWER_MASK)
        mt[k] = mt[(k + MM) % NN] ^ (x >> 1) ^ (MATRIX_A if x & 1 else 0)
    return mt


def test_reference_vector_from_key_array():
    rng = mt_seed_array(REFERENCE_KEY)
    assert [mt_next_u64(rng) for _ in range(len(REFERENCE_OUTPUTS))] == REFERENCE_OUTPUTS


def test_scalar_seed_10000th_draw():
    # value required of the 10000th draw of a default-seeded mt19937_64
    rng = mt_seed(5489)
    for _ in range(9999):
        rng.next_u64()
    assert rng.next_u64() == 9981545732273789042


def test_scalar_seed_fills_state():
    rng = mt_seed(1)
    assert rng.index == NN
    assert rng.words[0] == 1
    assert rng.words[1] == (6364136223846793005 * (1 ^ (1 >> 62)) + 1) % (1 << 64)


def test_seed_is_reduced_mod_2_64():
    a = MT19937_64(-1)
    b = MT19937_64((1 << 64) - 1)
    assert a.words == b.words
    assert [a.next_u64() for _ in range(5)] == [b.next_u64() for _ in range(5)]


def test_key_array_sets_msb_of_first_word():
    for keys in ([1], [0], [0, 0, 0], list(range(400))):
        rng = mt_seed_array(keys)
        assert rng.words[0] == 1 << 63
        assert rng.index == NN


def test_long_key_array_differs_from_prefix():
    keys = list(range(1, 401))
    a = mt_seed_array(keys)
    b = mt_seed_array(keys[:312])
    assert a.next_u64() != b.next_u64()


def test_empty_key_array_rejected():
    with pytest.raises(InvalidSeed):
        mt_seed_array([])


def test_determinism():
    for seed in (0, 1, 42, 0xDEADBEEF, (1 << 64) - 1):
        a, b = mt_seed(seed), mt_seed(seed)
        assert [a.next_u64() for _ in range(700)] == [b.next_u64() for _ in range(700)]


def test_untwist_matches_textbook_recurrence():
    for seed in range(1, 121):
        rng = mt_seed(seed * 0x9E3779B97F4A7C15)
        before = list(rng.words)
        rng._untwist()
        assert rng.words == textbook_twist(before)
        # second batch starts from regenerated state
        before = list(rng.words)
        rng._untwist()
        assert rng.words == textbook_twist(before)


def test_untwist_matches_textbook_after_key_array():
    rng = mt_seed_array(REFERENCE_KEY)
    before = list(rng.words)
    rng._untwist()
    assert rng.words == textbook_twist(before)


def test_state_never_all_zero():
    for seed in (1, 2, 3, 12345, (1 << 63)):
        rng = mt_seed(seed)
        assert any(rng.words)
        for _ in range(5 * NN):
            rng.next_u64()
            if rng.index == 1:
                assert any(rng.words)
        assert rng.generation == 5


def test_two_batches_in_624_draws():
    rng = mt_seed(5489)
    assert rng.generation == 0
    draws = [rng.next_u64() for _ in range(2 * NN)]
    assert rng.generation == 2
    assert draws[NN] != draws[0]
    rng.next_u64()
    assert rng.generation == 3


def test_reseed_resets_generation():
    rng = mt_seed(7)
    rng.next_u64()
    rng.seed(7)
    assert rng.generation == 0
    assert rng.index == NN


def test_i63_drops_top_bit():
    a, b = mt_seed(99), mt_seed(99)
    for _ in range(1000):
        v = mt_next_i63(a)
        assert 0 <= v < (1 << 63)
        assert v == b.next_u64() >> 1


def test_float_draws_match_conversions():
    a, b = mt_seed(2024), mt_seed(2024)
    assert mt_next_real_closed01(a) == (b.next_u64() >> 11) * (1.0 / 9007199254740991.0)
    assert mt_next_real_half_open01(a) == (b.next_u64() >> 11) * (1.0 / 9007199254740992.0)
    assert mt_next_real_open01(a) == ((b.next_u64() >> 12) + 0.5) * (1.0 / 4503599627370496.0)


def test_float_ranges():
    rng = mt_seed_array(REFERENCE_KEY)
    for _ in range(10000):
        assert 0.0 <= rng.next_real_closed01() <= 1.0
        assert 0.0 <= rng.next_real_half_open01() < 1.0
        assert 0.0 < rng.next_real_open01() < 1.0


def test_random_bytes_uses_little_endian_words():
    a, b = mt_seed(5), mt_seed(5)
    data = a.random_bytes(12)
    assert len(data) == 12
    w0, w1 = b.next_u64(), b.next_u64()
    assert data[:8] == w0.to_bytes(8, 'little')
    assert data[8:] == w1.to_bytes(8, 'little')[:4]
    assert a.random_bytes(0) == b''


def test_entropy_seeding_fills_whole_register(monkeypatch):
    raw = bytes(range(256)) * 10
    calls = []

    def fake_urandom(n):
        calls.append(n)
        # first draw is all zero and must be redrawn
        return bytes(n) if len(calls) == 1 else raw[:n]

    monkeypatch.setattr(RNG_mt64.os, 'urandom', fake_urandom)
    rng = MT19937_64()
    assert calls == [8 * NN, 8 * NN]
    assert rng.index == NN
    assert rng.generation == 0
    assert rng.words[0] == int.from_bytes(raw[:8], 'little')
    assert rng.words[NN - 1] == int.from_bytes(raw[8 * (NN - 1):8 * NN], 'little')


def test_entropy_seeding_gives_working_generator():
    rng = MT19937_64()
    assert rng.index == NN
    assert any(rng.words)
    draws = [rng.next_u64() for _ in range(4)]
    assert len(set(draws)) == 4


def test_zero_scalar_seed_leaves_rest_of_register_non_zero():
    rng = mt_seed(0)
    assert rng.words[0] == 0
    assert all(rng.words[1:])
    rng.next_u64()
    assert any(rng.words)
