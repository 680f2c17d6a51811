import pytest

from kwire.errors import StringDecodeError, UnexpectedEOFError
from kwire.zreader import ZReader

DATA = bytes(range(10))


def test_read_in_chunks():
    r = ZReader(DATA)
    assert r.read(2) == bytes([0, 1])
    assert r.read(1) == bytes([2])
    assert r.read(5) == bytes([3, 4, 5, 6, 7])
    assert r.read(2) == bytes([8, 9])
    with pytest.raises(UnexpectedEOFError):
        r.read(1)


def test_read_whole_input():
    r = ZReader(DATA)
    assert r.read(len(DATA)) == DATA
    assert r.is_empty()


def test_failed_read_does_not_advance():
    r = ZReader(DATA)
    with pytest.raises(UnexpectedEOFError):
        r.read(11)
    assert r.read(10) == DATA


def test_rest_does_not_advance():
    r = ZReader(DATA)
    r.read(3)
    assert r.rest() == DATA[3:]
    assert r.rest() == DATA[3:]
    assert not r.is_empty()


def test_read_i8():
    r = ZReader(DATA)
    assert [r.read_i8() for _ in DATA] == list(DATA)
    with pytest.raises(UnexpectedEOFError):
        r.read_i8()

    r = ZReader(bytes([0xFF, 0xFE]))
    assert r.read_i8() == -1
    assert r.read_i8() == -2
    with pytest.raises(UnexpectedEOFError):
        r.read_i8()


def test_read_i16():
    r = ZReader(bytes([1, 2, 16, 1]))
    assert r.read_i16() == 258
    assert r.read_i16() == 4097
    with pytest.raises(UnexpectedEOFError):
        r.read_i16()

    r = ZReader(bytes([0xFF, 0xFF, 0xFF, 0xFE]))
    assert r.read_i16() == -1
    assert r.read_i16() == -2
    with pytest.raises(UnexpectedEOFError):
        r.read_i16()


def test_read_i32():
    r = ZReader(bytes([1, 2, 3, 4]))
    assert r.read_i32() == 16909060
    with pytest.raises(UnexpectedEOFError):
        r.read_i32()

    r = ZReader(bytes([0xFF, 0xFF, 0xFF, 0xFD]))
    assert r.read_i32() == -3
    with pytest.raises(UnexpectedEOFError):
        r.read_i32()


def test_read_i64():
    r = ZReader(bytes([1, 2, 3, 4, 5, 6, 7, 8]))
    assert r.read_i64() == 72623859790382856
    with pytest.raises(UnexpectedEOFError):
        r.read_i64()

    r = ZReader(bytes([0, 0, 0, 0, 0, 0, 0, 1]))
    assert r.read_i64() == 1
    with pytest.raises(UnexpectedEOFError):
        r.read_i64()

    r = ZReader(bytes([0xFF] * 7 + [0xFD]))
    assert r.read_i64() == -3
    with pytest.raises(UnexpectedEOFError):
        r.read_i64()


def test_read_str():
    data = b"\x00\x05hello" + b"\x00\x07, world" + bytes([255, 28])
    r = ZReader(data)
    assert r.read_str() == "hello"
    assert r.read_str() == ", world"
    assert r.read_str() == ""
    with pytest.raises(UnexpectedEOFError):
        r.read_str()


def test_read_str_needs_more_data():
    r = ZReader(bytes([0, 5, ord("h")]))
    with pytest.raises(UnexpectedEOFError):
        r.read_str()


def test_read_str_invalid_utf8():
    r = ZReader(bytes([0, 2, 0xFF, 0xFE]))
    with pytest.raises(StringDecodeError):
        r.read_str()


def test_values_survive_further_reads():
    r = ZReader(b"\x00\x02hi\x00\x02ho")
    x = r.read_str()
    y = r.read_str()
    assert x == "hi"
    assert y == "ho"


def test_read_bytes():
    r = ZReader(b"\x00\x00\x00\x03abc" + b"\xff\xff\xff\xff" + b"\x00\x00\x00\x00")
    assert r.read_bytes() == b"abc"
    assert r.read_bytes() == b""
    assert r.read_bytes() == b""
    assert r.is_empty()


def test_read_array_len_null_is_zero():
    r = ZReader(b"\xff\xff\xff\xff\x00\x00\x00\x02")
    assert r.read_array_len() == 0
    assert r.read_array_len() == 2


def test_read_array():
    r = ZReader(b"\x00\x00\x00\x03\x00\x01\x00\x02\x00\x03")
    assert r.read_array(ZReader.read_i16) == [1, 2, 3]
    assert r.is_empty()


def test_read_array_truncated():
    r = ZReader(b"\x00\x00\x00\x02\x00\x01")
    with pytest.raises(UnexpectedEOFError):
        r.read_array(ZReader.read_i16)