import pytest

from dagvdf.utils.bytes import as_bytes, be_to_int, from_hex, int_to_be, is_hex, to_hex


def test_be_to_int():
    assert be_to_int(b"") == 0
    assert be_to_int(b"\x00\x00") == 0
    assert be_to_int(b"\x01\x01") == 257
    assert be_to_int(bytearray(b"\xff")) == 255


def test_int_to_be_is_minimal():
    assert int_to_be(0) == b""
    assert int_to_be(1) == b"\x01"
    assert int_to_be(256) == b"\x01\x00"
    assert int_to_be(2**64) == b"\x01" + b"\x00" * 8
    with pytest.raises(ValueError):
        int_to_be(-1)


def test_leading_zeros_are_dropped_on_reencode():
    assert int_to_be(be_to_int(b"\x00\x00\x2a")) == b"\x2a"


def test_hex_helpers():
    assert to_hex(b"\x01\xab") == "0x01ab"
    assert to_hex(b"\x01\xab", prefix="") == "01ab"
    assert from_hex("0x01AB") == b"\x01\xab"
    assert from_hex("01ab") == b"\x01\xab"
    assert from_hex("") == b"" and from_hex("0x") == b""
    assert is_hex("0x0101") and not is_hex("0x101") and not is_hex("zz")


@pytest.mark.parametrize("bad", ["0x1", "xyz", "0x 01", "01 02"])
def test_from_hex_rejects_malformed(bad):
    with pytest.raises(ValueError):
        from_hex(bad)


def test_as_bytes():
    assert as_bytes(memoryview(b"ab")) == b"ab"
    with pytest.raises(TypeError):
        as_bytes("ab")  # type: ignore[arg-type]
