import pytest
from gmpy2 import mpz

from dagvdf.vdf import RswPuzzle, WesolowskiVdf


def test_iterations_is_two_to_the_time_bits():
    assert RswPuzzle(4, b"\x02", b"\x01\x01").iterations == 16
    assert RswPuzzle(0, b"\x02", b"\x01\x01").iterations == 1
    # beyond 64 bits stays exact
    assert RswPuzzle(80, b"\x02", b"\x01\x01").iterations == mpz(1) << 80


def test_empty_input_gives_zero_base():
    assert RswPuzzle(4, b"", b"\x01\x01").base == 0


def test_input_equal_to_modulus_gives_zero_base():
    assert RswPuzzle(4, b"\x01\x01", b"\x01\x01").base == 0


@pytest.mark.parametrize(
    "data",
    [b"\x02", b"\x01\x00", b"\x01\x02", b"\xff\xff\xff", bytes(range(1, 40))],
)
def test_base_is_reduced_below_modulus(data):
    p = RswPuzzle(3, data, b"\x01\x01")
    assert 0 <= p.base < p.modulus == 257
    assert p.base == int.from_bytes(data, "big") % 257


def test_bytes_like_inputs_accepted():
    p = RswPuzzle(2, bytearray(b"\x05"), memoryview(b"\x01\x01"))
    assert p.base == 5 and p.modulus == 257


@pytest.mark.parametrize("modulus", [b"", b"\x00", b"\x00\x00"])
def test_zero_modulus_rejected(modulus):
    with pytest.raises(ValueError):
        RswPuzzle(4, b"\x02", modulus)


@pytest.mark.parametrize("bad", [-1, 1.5, "4", None, False])
def test_bad_time_bits_rejected(bad):
    with pytest.raises(ValueError):
        RswPuzzle(bad, b"\x02", b"\x01\x01")


def test_vdf_exposes_puzzle_fields(small_vdf):
    assert small_vdf.lambda_ == 128
    assert small_vdf.time_bits == 4
    assert small_vdf.iterations == 16
    assert small_vdf.base == 2
    assert small_vdf.modulus == 257
    assert small_vdf.puzzle.modulus == 257
    assert "lambda=128" in repr(small_vdf)


def test_challenge_concatenates_input_and_output(small_vdf):
    # bitlen(257) == 9, so x || y == 2 * 2^9 + y
    assert small_vdf.challenge(1) == small_vdf.hash_to_prime((2 << 9) + 1)


def test_vdf_forwards_hash_options():
    with pytest.raises(ValueError):
        WesolowskiVdf(128, 4, b"\x02", b"\x01\x01", max_iter=0)
