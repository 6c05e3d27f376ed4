import numpy as np
import pytest

from chat_sdr.encoder import WordRowEncoder, WordRowEncoderParams
from chat_sdr.encoder.utils import population
from chat_sdr.errors import InvalidConfiguration


def _grid(enc, word):
    p = enc.params
    return enc.encode(word).reshape(p.rows, p.cols)


def test_default_shape():
    enc = WordRowEncoder()
    assert enc.total_bits == 5 * 108
    assert enc.encode("cat").shape == (540,)


def test_each_row_holds_one_letter_block():
    enc = WordRowEncoder(WordRowEncoderParams(rows=4, cols=12, letter_bits=3, alphabet="abc"))
    grid = _grid(enc, "cab")
    expected = np.zeros((4, 12), dtype=np.int8)
    expected[0, 6:9] = 1  # c -> bucket 2
    expected[1, 0:3] = 1  # a -> bucket 0
    expected[2, 3:6] = 1  # b -> bucket 1
    np.testing.assert_array_equal(grid, expected)


def test_short_word_leaves_trailing_rows_zero():
    enc = WordRowEncoder()
    grid = _grid(enc, "hi")
    assert grid[0].sum() == enc.params.letter_bits
    assert grid[1].sum() == enc.params.letter_bits
    assert not grid[2:].any()


def test_unknown_character_uses_reserved_bucket():
    enc = WordRowEncoder(WordRowEncoderParams(rows=2, cols=12, letter_bits=3, alphabet="abc"))
    grid = _grid(enc, "z?")
    for row in grid:
        np.testing.assert_array_equal(np.flatnonzero(row), np.arange(9, 12))


def test_lookup_is_case_insensitive():
    enc = WordRowEncoder()
    np.testing.assert_array_equal(enc.encode("Hello"), enc.encode("hello"))


def test_long_word_is_truncated_to_rows():
    enc = WordRowEncoder()
    assert population(enc.encode("extraordinary")) == enc.params.rows * enc.params.letter_bits
    np.testing.assert_array_equal(enc.encode("extraordinary"), enc.encode("extra"))


def test_empty_word_is_all_zero():
    enc = WordRowEncoder()
    assert population(enc.encode("")) == 0


def test_blocks_never_overlap_within_a_row():
    enc = WordRowEncoder()
    seen = np.zeros(enc.params.cols, dtype=np.int32)
    for ch in enc.params.alphabet + "#":
        seen += _grid(enc, ch)[0]
    assert seen.max() == 1
    assert seen.sum() == enc.params.cols


@pytest.mark.parametrize(
    "params",
    [
        WordRowEncoderParams(rows=0),
        WordRowEncoderParams(cols=0),
        WordRowEncoderParams(letter_bits=0, cols=0),
        WordRowEncoderParams(alphabet="", cols=4),
        WordRowEncoderParams(cols=104),
        WordRowEncoderParams(rows=3, cols=12, letter_bits=3, alphabet="abcd"),
    ],
)
def test_invalid_configuration_fails_fast(params):
    with pytest.raises(InvalidConfiguration):
        WordRowEncoder(params)
