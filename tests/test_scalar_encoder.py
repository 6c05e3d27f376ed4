import numpy as np
import pytest

from chat_sdr.encoder import ScalarEncoder, ScalarEncoderParams
from chat_sdr.encoder.utils import active_indices, population, sdr_to_string
from chat_sdr.errors import InvalidConfiguration


CONFIGS = [
    ScalarEncoderParams(),
    ScalarEncoderParams(n=100, w=9, min_val=0, max_val=127),
    ScalarEncoderParams(n=20, w=5, min_val=0, max_val=15),
    ScalarEncoderParams(n=64, w=64, min_val=-10, max_val=10),
    ScalarEncoderParams(n=50, w=3, min_val=-20, max_val=300),
]


@pytest.mark.parametrize("params", CONFIGS)
def test_length_and_population_are_fixed(params):
    enc = ScalarEncoder(params)
    for v in range(params.min_val, params.max_val + 1):
        sdr = enc.encode(v)
        assert sdr.shape == (params.n,)
        assert sdr.dtype == np.int8
        assert population(sdr) == params.w


@pytest.mark.parametrize("params", CONFIGS)
def test_range_ends_map_to_buffer_ends(params):
    enc = ScalarEncoder(params)
    np.testing.assert_array_equal(active_indices(enc.encode(params.min_val)), np.arange(params.w))
    np.testing.assert_array_equal(
        active_indices(enc.encode(params.max_val)), np.arange(params.n - params.w, params.n)
    )


@pytest.mark.parametrize("params", CONFIGS)
def test_window_start_never_moves_left(params):
    enc = ScalarEncoder(params)
    starts = [enc.bucket(v) for v in range(params.min_val, params.max_val + 1)]
    assert all(b >= a for a, b in zip(starts, starts[1:]))
    assert starts[0] == 0
    assert starts[-1] == enc.num_buckets


def test_out_of_range_values_are_clamped():
    enc = ScalarEncoder(ScalarEncoderParams(n=100, w=9, min_val=10, max_val=50))
    for v in (-1000, 0, 9):
        np.testing.assert_array_equal(enc.encode(v), enc.encode(10))
    for v in (51, 200, 10**9):
        np.testing.assert_array_equal(enc.encode(v), enc.encode(50))


def test_self_overlap_equals_w():
    enc = ScalarEncoder()
    for v in (-5, 0, 1, 64, 127, 500):
        assert enc.overlap(v, v) == enc.active_bits


def test_adjacent_values_share_most_bits():
    enc = ScalarEncoder(ScalarEncoderParams(n=400, w=21, min_val=0, max_val=127))
    near = enc.overlap(65, 66)
    far = enc.overlap(0, 127)
    assert near > 21 / 2
    assert near > far
    assert far == 0


def test_round_half_up_bucket():
    enc = ScalarEncoder(ScalarEncoderParams(n=20, w=5, min_val=0, max_val=15))
    assert sdr_to_string(enc.encode(0), "1", "0") == "11111000000000000000"
    assert sdr_to_string(enc.encode(1), "1", "0") == "01111100000000000000"
    assert sdr_to_string(enc.encode(15), "1", "0") == "00000000000000011111"
    # 0.5 of the way lands on the upper bucket
    half = ScalarEncoder(ScalarEncoderParams(n=6, w=5, min_val=0, max_val=2))
    assert half.bucket(1) == 1


def test_degenerate_range_keeps_population():
    enc = ScalarEncoder(ScalarEncoderParams(n=30, w=7, min_val=5, max_val=5))
    for v in (-3, 5, 99):
        sdr = enc.encode(v)
        assert population(sdr) == 7
        np.testing.assert_array_equal(active_indices(sdr), np.arange(7))


def test_full_width_window():
    enc = ScalarEncoder(ScalarEncoderParams(n=8, w=8, min_val=0, max_val=3))
    for v in range(4):
        np.testing.assert_array_equal(enc.encode(v), np.ones(8, dtype=np.int8))


@pytest.mark.parametrize(
    "params",
    [
        ScalarEncoderParams(n=0, w=1),
        ScalarEncoderParams(n=-4, w=1),
        ScalarEncoderParams(n=10, w=0),
        ScalarEncoderParams(n=10, w=11),
        ScalarEncoderParams(n=10, w=3, min_val=5, max_val=4),
    ],
)
def test_invalid_configuration_fails_fast(params):
    with pytest.raises(InvalidConfiguration):
        ScalarEncoder(params)
    with pytest.raises(ValueError):
        ScalarEncoder(params)


def test_encode_returns_fresh_arrays():
    enc = ScalarEncoder()
    a = enc.encode(3)
    a[:] = 0
    assert population(enc.encode(3)) == enc.active_bits
