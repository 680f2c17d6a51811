from datetime import timedelta

import pytest

from kwire.errors import InvalidDurationError
from kwire.wire import (
    API_KEY_METADATA,
    Compression,
    HeaderRequest,
    HeaderResponse,
    PartitionOffset,
    encode_array,
    encode_bytes,
    encode_i8,
    encode_i16,
    encode_i32,
    encode_i64,
    encode_str,
    to_crc,
    to_millis_i32,
)
from kwire.zreader import ZReader

I32_MAX = 2**31 - 1


def test_to_millis_valid():
    assert to_millis_i32(timedelta(milliseconds=1_234)) == 1_234
    assert to_millis_i32(timedelta(seconds=540, microseconds=123_456)) == 540_123
    assert to_millis_i32(timedelta(milliseconds=I32_MAX - 1)) == I32_MAX - 1
    assert to_millis_i32(timedelta(milliseconds=I32_MAX)) == I32_MAX


@pytest.mark.parametrize(
    "duration",
    [
        timedelta.max,
        timedelta(milliseconds=2**32 - 1),
        timedelta(milliseconds=I32_MAX + 1),
        timedelta(milliseconds=-1),
    ],
)
def test_to_millis_invalid(duration):
    with pytest.raises(InvalidDurationError):
        to_millis_i32(duration)


def test_integer_encoding():
    assert encode_i8(-1) == b"\xff"
    assert encode_i16(258) == b"\x01\x02"
    assert encode_i32(16909060) == b"\x01\x02\x03\x04"
    assert encode_i64(-3) == b"\xff" * 7 + b"\xfd"


def test_integer_out_of_range():
    with pytest.raises(ValueError):
        encode_i16(40000)
    with pytest.raises(ValueError):
        encode_i8(128)


def test_integer_round_trip():
    r = ZReader(encode_i8(-5) + encode_i16(-300) + encode_i32(-70000) + encode_i64(2**40))
    assert r.read_i8() == -5
    assert r.read_i16() == -300
    assert r.read_i32() == -70000
    assert r.read_i64() == 2**40


def test_string_encoding():
    assert encode_str("hi") == b"\x00\x02hi"
    assert encode_str("") == b"\x00\x00"
    assert encode_str(None) == b"\xff\xff"
    r = ZReader(encode_str("grüße"))
    assert r.read_str() == "grüße"


def test_bytes_encoding():
    assert encode_bytes(b"abc") == b"\x00\x00\x00\x03abc"
    assert encode_bytes(None) == b"\xff\xff\xff\xff"
    assert ZReader(encode_bytes(b"xyz")).read_bytes() == b"xyz"


def test_array_round_trip():
    data = encode_array(["a", "bc"], encode_str)
    assert data == b"\x00\x00\x00\x02\x00\x01a\x00\x02bc"
    assert ZReader(data).read_array(ZReader.read_str) == ["a", "bc"]
    assert encode_array([], encode_i32) == b"\x00\x00\x00\x00"


def test_header_request_encode():
    header = HeaderRequest(API_KEY_METADATA, 0, 7, "ab")
    assert header.encode() == b"\x00\x03\x00\x00\x00\x00\x00\x07\x00\x02ab"


def test_header_response_decode():
    r = ZReader(b"\x00\x00\x01\x00rest")
    assert HeaderResponse.decode(r) == HeaderResponse(correlation=256)
    assert r.rest() == b"rest"


def test_crc_check_value():
    assert to_crc(b"123456789") == 0xCBF43926
    assert to_crc(b"") == 0


def test_partition_offset_equality_and_hash():
    a = PartitionOffset(offset=100, partition=0)
    b = PartitionOffset(partition=0, offset=100)
    assert a == b
    assert {a, b} == {a}
    assert PartitionOffset(offset=100, partition=1) not in {a}


def test_compression_attribute_values():
    assert Compression(1) is Compression.GZIP
    assert Compression(2) is Compression.SNAPPY
    assert int(Compression.NONE) == 0